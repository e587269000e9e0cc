"""
Handicap (advantage) lifecycle across rounds.

At the end of a round the winner's score decides a square (the sum of its
digits). If the winner moved first, the loser receives that square;
otherwise the winner does. At the start of the next round the square is
pre-covered on the receiver's board and protected from being uncovered
until the receiver's opponent completes one full turn.
"""

import logging
from typing import Optional

from models import AdvantageContext, AdvantageState, BoardState, Side

logger = logging.getLogger(__name__)


def calculate_advantage_square(score: int) -> int:
    """Sum of the decimal digits of `score`."""
    total = 0
    while score > 0:
        total += score % 10
        score //= 10
    return total


class AdvantageManager:
    def __init__(self, state: Optional[AdvantageState] = None):
        self.state = state if state is not None else AdvantageState()

    # Queries

    def is_applied(self) -> bool:
        return self.state.owner is not None

    def owner(self) -> Optional[Side]:
        return self.state.owner

    def square(self) -> int:
        return self.state.square

    def is_protected(self, side: Side) -> bool:
        if side is Side.HUMAN:
            return self.state.protect_human
        return self.state.protect_computer

    @property
    def pending_for(self) -> Optional[Side]:
        return self.state.pending_for

    @property
    def pending_square(self) -> int:
        return self.state.pending_square

    def context_for(self, side: Side) -> AdvantageContext:
        """Protection facts as seen by `side` when it considers uncovering."""
        opponent = side.opponent
        return AdvantageContext(
            opponent_protected=self.is_applied() and self.is_protected(opponent),
            square=self.state.square,
        )

    # Transitions

    def apply_handicap(self, winner_was_first_player: bool, winner_is_human: bool, winning_score: int) -> None:
        """Queue the advantage for the next round, replacing any earlier one."""
        winner = Side.from_is_human(winner_is_human)
        receiver = winner.opponent if winner_was_first_player else winner
        square = calculate_advantage_square(winning_score)

        self.state.pending_for = receiver
        self.state.pending_square = square
        logger.info("Advantage queued for next round: square %d -> %s", square, receiver.value)

    def apply_advantage_to_new_round(self, human_board: BoardState, computer_board: BoardState) -> bool:
        """
        Clear the previous round's advantage, then consume the pending one:
        cover its square on the receiver's fresh board and protect it.
        Returns True when an advantage was applied.
        """
        self.state.owner = None
        self.state.square = 0
        self.state.protect_human = False
        self.state.protect_computer = False

        receiver = self.state.pending_for
        square = self.state.pending_square
        self.state.pending_for = None
        self.state.pending_square = 0

        if receiver is None or square <= 0:
            return False

        board = human_board if receiver is Side.HUMAN else computer_board
        if not board.cover(square):
            logger.warning(
                "Advantage square %d cannot be covered on a %d-square board; skipped",
                square, board.size,
            )
            return False

        if receiver is Side.HUMAN:
            self.state.protect_human = True
        else:
            self.state.protect_computer = True
        self.state.owner = receiver
        self.state.square = square
        logger.info("Advantage applied: %s starts with square %d covered", receiver.value, square)
        return True

    def clear_protection_for(self, side: Side) -> None:
        if side is Side.HUMAN:
            self.state.protect_human = False
            other_protected = self.state.protect_computer
        else:
            self.state.protect_computer = False
            other_protected = self.state.protect_human

        if not other_protected and self.state.owner is not None:
            logger.info("Advantage protection for %s expired", side.value)
            self.state.owner = None

    def reset(self) -> None:
        self.state = AdvantageState()
