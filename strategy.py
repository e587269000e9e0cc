"""
Computer strategy: move selection, explanations, and help recommendations.
"""

import logging
from typing import List, Sequence

from config import ONE_DIE_HIGHEST_SQUARE, ONE_DIE_REMAINING_SQUARES, ONE_DIE_RULE_START
from models import AdvantageContext, BoardState, Combination, Move, MoveType, Side
from game_logic import apply_move, cover_combinations, uncover_combinations, without_square

logger = logging.getLogger(__name__)


def choose_best_combination(combos: Sequence[Combination]) -> Combination:
    """
    Pick from `combos` (in canonical order):
      1) more squares,
      2) higher highest square,
      3) earliest in canonical order.
    """
    return max(combos, key=lambda c: (len(c), max(c)))


def compute_best_move(
    dice_sum: int,
    own_board: BoardState,
    opp_board: BoardState,
    opp_advantage_protected: bool = False,
    advantage_square: int = 0,
) -> Move:
    """
    Decide what to do with `dice_sum`. Rules are applied in this order:
      1) No cover and no uncover combination: pass.
      2) A cover that covers every remaining own square wins: take it.
      3) An uncover that uncovers every covered opponent square wins: take it.
      4) Otherwise cover if possible, else uncover, choosing with
         choose_best_combination.
    Uncover combinations touching the opponent's protected advantage square
    are never considered.
    """
    cover_combos = cover_combinations(own_board, dice_sum)
    uncover_combos = uncover_combinations(opp_board, dice_sum)
    if opp_advantage_protected:
        uncover_combos = without_square(uncover_combos, advantage_square)

    if not cover_combos and not uncover_combos:
        return Move.none()

    remaining = own_board.uncovered_count()
    for combo in cover_combos:
        if len(combo) == remaining:
            return Move.cover(combo)

    opp_covered = opp_board.covered_count()
    for combo in uncover_combos:
        if len(combo) == opp_covered:
            return Move.uncover(combo)

    if cover_combos:
        return Move.cover(choose_best_combination(cover_combos))
    return Move.uncover(choose_best_combination(uncover_combos))


def is_winning_move(move: Move, own_board: BoardState, opp_board: BoardState) -> bool:
    """True if applying `move` would end the round in the mover's favor."""
    if move.is_none:
        return False
    own, opp = own_board.clone(), opp_board.clone()
    if not apply_move(move, own, opp):
        return False
    if move.kind is MoveType.COVER:
        return own.all_covered()
    return opp.all_uncovered()


def explain_move(
    move: Move,
    own_board: BoardState,
    opp_board: BoardState,
    opp_protected: bool = False,
) -> List[str]:
    """Plain-language reasons for a move chosen by compute_best_move."""
    if move.is_none:
        return ["No legal move available for this roll, so the turn passes."]

    count = len(move.squares)
    total = sum(move.squares)
    plural = "" if count == 1 else "s"
    lines = [f"Action: {move.kind.value.upper()} {', '.join(str(s) for s in move.squares)}"]

    if is_winning_move(move, own_board, opp_board):
        lines.append("Why: this move immediately wins the round.")
    elif move.kind is MoveType.COVER:
        lines.append(
            f"Why: advances its own board by covering {count} square{plural} "
            f"(total value {total})."
        )
        lines.append("Heuristic: prefers more squares, then a higher highest square.")
    else:
        lines.append(
            f"Why: hinders the opponent by uncovering {count} square{plural} "
            f"(total value {total})."
        )
        if opp_protected:
            lines.append("Note: the opponent's advantage square is protected, so it was left alone.")
        lines.append("Heuristic: covering is preferred; uncover only when nothing can be covered.")
    return lines


def choose_dice_count(board: BoardState) -> int:
    """
    Roll one die only when the one-die rule allows it and the remaining
    squares are small or few.
    """
    if board.one_die_eligible() and (
        board.highest_uncovered() <= ONE_DIE_HIGHEST_SQUARE
        or board.uncovered_count() <= ONE_DIE_REMAINING_SQUARES
    ):
        return 1
    return 2


def explain_dice_count(board: BoardState) -> str:
    """Why choose_dice_count picks one or two dice for `board`."""
    if not board.one_die_eligible():
        return (
            f"Dice: must roll two (one die is not allowed until "
            f"{ONE_DIE_RULE_START}..{board.size} are covered)."
        )
    if choose_dice_count(board) == 2:
        return "Dice: rolls two to reach sums above 6."
    if board.highest_uncovered() <= ONE_DIE_HIGHEST_SQUARE:
        return f"Dice: rolls one because the highest open square is {board.highest_uncovered()}."
    return f"Dice: rolls one because only {board.uncovered_count()} squares remain."


def recommend_move(dice_sum: int, human_board: BoardState, computer_board: BoardState, advantage) -> Move:
    """Help for the human player: what the computer would do in their place."""
    context = advantage.context_for(Side.HUMAN)
    return compute_best_move(
        dice_sum,
        human_board,
        computer_board,
        context.opponent_protected,
        context.square,
    )


class ComputerMoveSource:
    """Move source backed by compute_best_move."""

    def __init__(self):
        self.last_explanation: List[str] = []
        self.transcript: List[str] = []

    def choose_dice_count(self, own_board: BoardState) -> int:
        return choose_dice_count(own_board)

    def select_move(
        self,
        dice_sum: int,
        own_board: BoardState,
        opp_board: BoardState,
        context: AdvantageContext,
    ) -> Move:
        move = compute_best_move(
            dice_sum,
            own_board,
            opp_board,
            context.opponent_protected,
            context.square,
        )
        self.last_explanation = [explain_dice_count(own_board)]
        self.last_explanation += explain_move(move, own_board, opp_board, context.opponent_protected)
        self.transcript.append(f"Rolled {dice_sum}. " + " ".join(self.last_explanation))
        logger.debug("Computer chose %s for %d", move, dice_sum)
        return move
