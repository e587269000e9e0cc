import pytest

from models import BoardState


def test_fresh_board_is_all_uncovered():
    board = BoardState.fresh(9)
    assert board.size == 9
    assert board.all_uncovered()
    assert not board.all_covered()
    assert board.uncovered_sum() == 45
    assert board.covered_sum() == 0


def test_cover_and_uncover_flip_one_square():
    board = BoardState.fresh(10)
    assert board.cover(4) is True
    assert board.is_covered(4)
    assert board.uncover(4) is True
    assert not board.is_covered(4)


def test_cover_already_covered_is_a_noop():
    board = BoardState.fresh(9)
    board.cover(3)
    before = board.squares[:]
    assert board.cover(3) is False
    assert board.squares == before


def test_uncover_already_uncovered_is_a_noop():
    board = BoardState.fresh(9)
    before = board.squares[:]
    assert board.uncover(3) is False
    assert board.squares == before


@pytest.mark.parametrize("square", [0, -1, 10, 100])
def test_out_of_range_squares_are_rejected(square):
    board = BoardState.fresh(9)
    assert board.cover(square) is False
    assert board.uncover(square) is False
    assert board.is_covered(square) is False
    assert board.all_uncovered()


def test_sums_and_counts(make_board):
    board = make_board(9, covered=(1, 2, 3))
    assert board.covered_sum() == 6
    assert board.uncovered_sum() == 39
    assert board.covered_count() == 3
    assert board.uncovered_count() == 6
    assert board.highest_uncovered() == 9


def test_all_covered(make_board):
    board = make_board(9, covered=range(1, 10))
    assert board.all_covered()
    assert board.highest_uncovered() == 0
    assert board.uncovered_sum() == 0


def test_one_die_rule_sequence():
    board = BoardState.fresh(9)
    assert not board.one_die_eligible()

    for square in range(1, 7):
        board.cover(square)
    assert not board.one_die_eligible(), "7..9 still open"

    for square in range(7, 10):
        board.cover(square)
    assert board.one_die_eligible()

    board.uncover(8)
    assert not board.one_die_eligible()


def test_one_die_rule_only_needs_high_squares(make_board):
    assert make_board(11, covered=range(7, 12)).one_die_eligible()
    assert not make_board(11, covered=range(7, 11)).one_die_eligible()


def test_one_die_rule_is_vacuous_on_small_boards():
    assert BoardState.fresh(6).one_die_eligible()


def test_record_round_trip(make_board):
    board = make_board(10, covered=(2, 5, 10))
    record = board.to_record()
    assert record == [1, 0, 3, 4, 0, 6, 7, 8, 9, 0]
    assert BoardState.from_record(record) == board


def test_record_rejects_foreign_values():
    with pytest.raises(ValueError):
        BoardState.from_record([1, 2, 4, 4, 5, 6, 7, 8, 9])


def test_clone_is_independent(make_board):
    board = make_board(9, covered=(1,))
    copy = board.clone()
    copy.cover(2)
    assert not board.is_covered(2)
