import pytest

from models import BoardState, Side
from persistence import (
    MalformedRecordError,
    SavedGame,
    format_game,
    parse_game,
    read_game,
    write_game,
)

SAVE_TEXT = """Computer:
   Squares: 1 2 0 4 5 6 7 8 9
   Score: 12
Human:
   Squares: 0 2 3 4 5 6 7 8 0
   Score: 5
First Turn: Human
Next Turn: Computer
"""


def make_game(make_board):
    return SavedGame(
        human_board=make_board(9, covered=(1, 9)),
        computer_board=make_board(9, covered=(3,)),
        score_human=5,
        score_computer=12,
        first_player=Side.HUMAN,
        next_player=Side.COMPUTER,
    )


def test_format_game(make_board):
    assert format_game(make_game(make_board)) == SAVE_TEXT


def test_parse_game(make_board):
    game = parse_game(SAVE_TEXT)
    assert game == make_game(make_board)
    assert game.board_size == 9


def test_file_round_trip(tmp_path, make_board):
    path = tmp_path / "save.txt"
    game = make_game(make_board)
    write_game(path, game)
    assert path.read_text() == SAVE_TEXT
    assert read_game(path) == game


def test_sections_may_come_in_any_order():
    text = "\n".join(
        [
            "Next Turn: Human",
            "Human:",
            "   Squares: 1 2 3 4 5 6 7 8 9 10",
            "   Score: 0",
            "",
            "Computer:",
            "   Squares: 0 0 0 4 5 6 7 8 9 10",
            "   Score: 3",
            "First Turn: Computer",
        ]
    )
    game = parse_game(text)
    assert game.board_size == 10
    assert game.computer_board == BoardState.from_record([0, 0, 0, 4, 5, 6, 7, 8, 9, 10])
    assert game.next_player is Side.HUMAN
    assert game.first_player is Side.COMPUTER


@pytest.mark.parametrize(
    "old, new",
    [
        ("1 2 0 4 5 6 7 8 9", "1 2 0 4 5 6 7 8"),         # too short
        ("1 2 0 4 5 6 7 8 9", "1 2 0 4 5 6 7 8 9 10"),    # lengths differ
        ("1 2 0 4 5 6 7 8 9", "1 2 0 5 5 6 7 8 9"),       # 5 in square 4
        ("1 2 0 4 5 6 7 8 9", "1 2 x 4 5 6 7 8 9"),       # not a number
        ("Score: 12", "Score: twelve"),
        ("Score: 12", "Score: -1"),
        ("Next Turn: Computer", "Next Turn: Nobody"),
        ("Next Turn: Computer\n", ""),
        ("First Turn: Human", "Whose Turn: Human"),
    ],
)
def test_malformed_records_are_rejected(old, new):
    with pytest.raises(MalformedRecordError):
        parse_game(SAVE_TEXT.replace(old, new, 1))


def test_missing_section_is_rejected():
    text = SAVE_TEXT.split("Human:")[0] + "First Turn: Human\nNext Turn: Human\n"
    with pytest.raises(MalformedRecordError):
        parse_game(text)


def test_truncated_section_is_rejected():
    with pytest.raises(MalformedRecordError):
        parse_game("Computer:\n   Squares: 1 2 3 4 5 6 7 8 9\n")


def test_unsupported_board_size_is_rejected():
    squares = " ".join(str(i) for i in range(1, 13))
    text = SAVE_TEXT.replace("1 2 0 4 5 6 7 8 9", squares).replace(
        "0 2 3 4 5 6 7 8 0", squares
    )
    with pytest.raises(MalformedRecordError):
        parse_game(text)


@pytest.mark.parametrize(
    "extra",
    [
        "Human:\n   Squares: 1 2 3 4 5 6 7 8 9\n   Score: 0\n",
        "Computer:\n   Squares: 1 2 3 4 5 6 7 8 9\n   Score: 0\n",
        "Next Turn: Human\n",
        "First Turn: Computer\n",
    ],
)
def test_repeated_entries_are_rejected(extra):
    with pytest.raises(MalformedRecordError):
        parse_game(SAVE_TEXT + extra)
