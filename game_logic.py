"""
Core game logic: combination search, dice, and move application.
"""

import logging
import random
from typing import Callable, Iterable, List, Set, Tuple

from config import DIE_FACES, MAX_BOARD_SIZE, MAX_DICE_SUM
from models import BoardState, Combination, Move, MoveType, Side

logger = logging.getLogger(__name__)

Eligible = Callable[[int], bool]


def find_combinations(target_sum: int, eligible: Eligible, board_size: int) -> List[Combination]:
    """
    All distinct sets of squares in 1..board_size that satisfy `eligible`
    and add up to `target_sum`.

    Each square i that is eligible either matches the remaining target on its
    own, or (when smaller) is joined to every sub-combination of the remainder
    that does not already use it. Results are deduplicated as sets and
    returned as sorted tuples in lexicographic order.
    """
    assert board_size <= MAX_BOARD_SIZE, f"board size {board_size} exceeds {MAX_BOARD_SIZE}"
    assert target_sum <= MAX_DICE_SUM, f"target {target_sum} exceeds {MAX_DICE_SUM}"
    return sorted(_search(target_sum, eligible, board_size))


def _search(remaining: int, eligible: Eligible, board_size: int) -> Set[Combination]:
    found: Set[Combination] = set()
    for i in range(1, board_size + 1):
        if not eligible(i):
            continue
        if i == remaining:
            found.add((i,))
        elif i < remaining:
            for sub in _search(remaining - i, eligible, board_size):
                if i not in sub:
                    found.add(tuple(sorted(sub + (i,))))
    return found


def is_valid_combination(combination: Iterable[int], eligible: Eligible) -> bool:
    """True when every square in `combination` is currently eligible."""
    return all(eligible(square) for square in combination)


def cover_combinations(board: BoardState, dice_sum: int) -> List[Combination]:
    """Combinations of uncovered squares on `board` adding up to `dice_sum`."""
    return find_combinations(dice_sum, board.is_uncovered, board.size)


def uncover_combinations(board: BoardState, dice_sum: int) -> List[Combination]:
    """Combinations of covered squares on `board` adding up to `dice_sum`."""
    return find_combinations(dice_sum, board.is_covered, board.size)


def without_square(combos: List[Combination], square: int) -> List[Combination]:
    return [c for c in combos if square not in c]


def apply_move(move: Move, own_board: BoardState, opp_board: BoardState) -> bool:
    """
    Cover on `own_board` or uncover on `opp_board`.
    Either every square of the move is applied or none is.
    """
    if move.is_none or not move.squares:
        return False
    if len(set(move.squares)) != len(move.squares):
        return False

    if move.kind is MoveType.COVER:
        board, eligible, flip = own_board, own_board.is_uncovered, own_board.cover
    else:
        board, eligible, flip = opp_board, opp_board.is_covered, opp_board.uncover

    if not is_valid_combination(move.squares, eligible):
        logger.debug("Rejected %s: squares not eligible on %s", move, board.to_record())
        return False

    for square in move.squares:
        flip(square)
    return True


def roll_dice(count: int = 2, rng=random) -> Tuple[int, ...]:
    """Roll `count` six-sided dice."""
    return tuple(rng.choice(DIE_FACES) for _ in range(count))


def determine_first_player(rng=random) -> Tuple[Side, List[Tuple[int, int]]]:
    """
    Both sides roll two dice; the higher total goes first, ties re-roll.
    Returns the first side and every (human, computer) pair that was rolled.
    """
    rolls = []
    while True:
        human_roll = sum(roll_dice(2, rng))
        computer_roll = sum(roll_dice(2, rng))
        rolls.append((human_roll, computer_roll))
        if human_roll != computer_roll:
            break
        logger.info("First-player toss tied at %d, rolling again", human_roll)

    first = Side.HUMAN if human_roll > computer_roll else Side.COMPUTER
    return first, rolls
