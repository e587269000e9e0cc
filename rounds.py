"""
Round controller: turn order, move application, and win detection.
"""

import logging
import random
from enum import Enum
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from config import DIE_FACES, WIN_CHECK_INTERVAL
from models import (
    AdvantageContext,
    BoardState,
    Combination,
    Move,
    MoveType,
    RoundResult,
    Side,
    TournamentState,
    WinType,
)
from game_logic import (
    apply_move,
    cover_combinations,
    determine_first_player,
    roll_dice,
    uncover_combinations,
    without_square,
)
from advantage import AdvantageManager

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    OVER = "over"


class MoveSource(Protocol):
    """Anything that can play one side: the computer strategy or a human front end."""

    def choose_dice_count(self, own_board: BoardState) -> int:
        ...

    def select_move(
        self,
        dice_sum: int,
        own_board: BoardState,
        opp_board: BoardState,
        context: AdvantageContext,
    ) -> Move:
        ...


class RoundController:
    """
    Plays one round between the human and the computer.

    A fresh round starts in SETUP and needs `setup()` to pick the first
    player. A loaded round (`first_player` and `next_player` given) starts
    IN_PROGRESS. Turns can be driven step by step (`roll`, `apply_move`,
    `end_turn`) or all at once with `play_turn` / `play`.
    """

    def __init__(
        self,
        human_board: BoardState,
        computer_board: BoardState,
        advantage: Optional[AdvantageManager] = None,
        scores: Optional[TournamentState] = None,
        rng=random,
        first_player: Optional[Side] = None,
        next_player: Optional[Side] = None,
        win_check_interval: int = WIN_CHECK_INTERVAL,
    ):
        self.boards: Dict[Side, BoardState] = {
            Side.HUMAN: human_board,
            Side.COMPUTER: computer_board,
        }
        self.advantage = advantage if advantage is not None else AdvantageManager()
        self.scores = scores
        self.rng = rng
        self.win_check_interval = win_check_interval

        self.first_player: Optional[Side] = first_player
        self.current: Optional[Side] = None
        self.first_rolls: List[Tuple[int, int]] = []
        self.dice: Tuple[int, ...] = ()
        self.dice_sum: Optional[int] = None
        self.turns_completed = 0
        self.result: Optional[RoundResult] = None
        self.phase = Phase.SETUP

        # A round rebuilt from a save checks for a winner after every turn.
        self.is_loaded = first_player is not None and next_player is not None
        if self.is_loaded:
            self.current = next_player
            self.phase = Phase.IN_PROGRESS

    # Setup

    def setup(self, first_player: Optional[Side] = None) -> Side:
        """Choose the first player: `first_player` if given, else by dice toss."""
        if first_player is None:
            first_player, self.first_rolls = determine_first_player(self.rng)
        self.first_player = first_player
        self.current = first_player
        self.phase = Phase.IN_PROGRESS
        logger.info("%s plays first", first_player.value)
        return first_player

    # State queries

    @property
    def human_board(self) -> BoardState:
        return self.boards[Side.HUMAN]

    @property
    def computer_board(self) -> BoardState:
        return self.boards[Side.COMPUTER]

    @property
    def is_over(self) -> bool:
        return self.phase is Phase.OVER

    @property
    def human_turn(self) -> bool:
        return self.current is Side.HUMAN

    @property
    def first_player_is_human(self) -> bool:
        return self.first_player is Side.HUMAN

    def own_board(self) -> BoardState:
        return self.boards[self.current]

    def opponent_board(self) -> BoardState:
        return self.boards[self.current.opponent]

    def context(self) -> AdvantageContext:
        return self.advantage.context_for(self.current)

    def can_roll_one_die(self) -> bool:
        return self.own_board().one_die_eligible()

    def is_round_over(self) -> bool:
        return any(b.all_covered() or b.all_uncovered() for b in self.boards.values())

    def board_decided(self) -> bool:
        """The current player has covered their board or uncovered the opponent's."""
        return self.own_board().all_covered() or self.opponent_board().all_uncovered()

    # Turn steps

    def roll(self, dice_count: int = 2, dice: Optional[Tuple[int, ...]] = None) -> Optional[int]:
        """
        Roll for the current player. `dice` lets a caller supply the values
        (entered by hand); they must be one or two faces of a six-sided die.
        One die is only allowed under the one-die rule; otherwise two are used.
        Returns None, changing nothing, when no round is in progress or the
        supplied dice are not valid.
        """
        if self.phase is not Phase.IN_PROGRESS:
            logger.warning("Cannot roll: round is %s", self.phase.value)
            return None
        if dice is not None:
            if len(dice) not in (1, 2) or any(d not in DIE_FACES for d in dice):
                logger.warning("Rejected dice %s", tuple(dice))
                return None
            dice_count = len(dice)
        if dice_count == 1 and not self.can_roll_one_die():
            logger.warning("%s may not roll one die yet; rolling two", self.current.value)
            dice_count, dice = 2, None
        if dice is None:
            dice = roll_dice(dice_count, self.rng)

        self.dice = tuple(dice)
        self.dice_sum = sum(self.dice)
        logger.debug("%s rolled %s = %d", self.current.value, self.dice, self.dice_sum)
        return self.dice_sum

    def legal_moves(self) -> Tuple[List[Combination], List[Combination]]:
        """(cover, uncover) combinations for the current roll."""
        if self.dice_sum is None:
            return [], []
        cover = cover_combinations(self.own_board(), self.dice_sum)
        uncover = uncover_combinations(self.opponent_board(), self.dice_sum)
        context = self.context()
        if context.opponent_protected:
            uncover = without_square(uncover, context.square)
        return cover, uncover

    def has_legal_move(self) -> bool:
        cover, uncover = self.legal_moves()
        return bool(cover or uncover)

    def apply_move(self, move: Move) -> bool:
        """
        Apply `move` for the current player against the current roll.
        Rejected moves (wrong total, ineligible or protected squares) change nothing.
        """
        if self.phase is not Phase.IN_PROGRESS or self.dice_sum is None or move.is_none:
            return False
        if sum(move.squares) != self.dice_sum:
            return False
        context = self.context()
        if (
            move.kind is MoveType.UNCOVER
            and context.opponent_protected
            and context.square in move.squares
        ):
            logger.warning("Square %d is protected this turn", context.square)
            return False
        if not apply_move(move, self.own_board(), self.opponent_board()):
            return False

        logger.info("%s: %s", self.current.value, move)
        self.dice = ()
        self.dice_sum = None
        return True

    def take_move(self, source: MoveSource) -> bool:
        """Ask `source` for a move on the current roll and apply it."""
        if self.dice_sum is None:
            return False
        move = source.select_move(self.dice_sum, self.own_board(), self.opponent_board(), self.context())
        return self.apply_move(move)

    def end_turn(self) -> Optional[RoundResult]:
        """
        Finish the current player's turn: expire the opponent's advantage
        protection, check for a winner, and hand over.
        """
        if self.phase is not Phase.IN_PROGRESS:
            return self.result

        owner = self.advantage.owner()
        if self.advantage.is_applied() and owner is not self.current:
            self.advantage.clear_protection_for(owner)

        self.turns_completed += 1
        self.dice = ()
        self.dice_sum = None

        check_now = self.is_loaded or self.turns_completed % self.win_check_interval == 0
        if check_now and self.is_round_over():
            return self.finish()

        self.current = self.current.opponent
        return None

    def play_roll(self, source: MoveSource, dice: Optional[Tuple[int, ...]] = None) -> bool:
        """
        One roll of the current turn: roll (or take `dice`), ask `source` for a
        move and apply it. Returns True while the same player should roll again.
        """
        own, opp = self.own_board(), self.opponent_board()
        dice_count = source.choose_dice_count(own) if own.one_die_eligible() else 2
        if self.roll(dice_count, dice) is None:
            return False

        if not self.has_legal_move():
            logger.info("%s has no legal move for %d", self.current.value, self.dice_sum)
            return False

        move = source.select_move(self.dice_sum, own, opp, self.context())
        if move.is_none:
            return False
        if not self.apply_move(move):
            logger.warning("%s offered an illegal move %s; turn ends", self.current.value, move)
            return False
        return not self.board_decided()

    def play_turn(
        self,
        source: MoveSource,
        rolls: Optional[Iterable[Tuple[int, ...]]] = None,
    ) -> Optional[RoundResult]:
        """
        One full turn: keep rolling and moving until no legal move remains
        or the board is decided. `rolls` supplies dice values in order; once
        it runs out the dice are rolled as usual.
        """
        supplied = iter(rolls) if rolls is not None else iter(())
        while self.play_roll(source, next(supplied, None)):
            pass
        return self.end_turn()

    def play(self, sources: Dict[Side, MoveSource], max_turns: Optional[int] = None) -> Optional[RoundResult]:
        """Play turns until the round ends, or `max_turns` more turns have been played."""
        if self.phase is Phase.SETUP:
            self.setup()
        played = 0
        while not self.is_over:
            if max_turns is not None and played >= max_turns:
                logger.warning("Round stopped after %d turns without a winner", played)
                return None
            self.play_turn(sources[self.current])
            played += 1
        return self.result

    # Ending

    def resolve_result(self) -> Optional[RoundResult]:
        """
        Winner and score for a finished board, checked in this order:
        human covered all, computer covered all, human uncovered the
        computer, computer uncovered the human.
        """
        human, computer = self.human_board, self.computer_board
        if human.all_covered():
            winner, win_type, score = Side.HUMAN, WinType.COVER, computer.uncovered_sum()
        elif computer.all_covered():
            winner, win_type, score = Side.COMPUTER, WinType.COVER, human.uncovered_sum()
        elif computer.all_uncovered():
            winner, win_type, score = Side.HUMAN, WinType.UNCOVER, human.covered_sum()
        elif human.all_uncovered():
            winner, win_type, score = Side.COMPUTER, WinType.UNCOVER, computer.covered_sum()
        else:
            return None
        return RoundResult(
            winner=winner,
            win_type=win_type,
            score=score,
            winner_was_first=winner is self.first_player,
        )

    def finish(self) -> Optional[RoundResult]:
        result = self.resolve_result()
        if result is None:
            return None

        self.result = result
        self.phase = Phase.OVER
        logger.info(result.describe())

        self.advantage.apply_handicap(
            result.winner_was_first,
            result.winner is Side.HUMAN,
            result.score,
        )
        if self.scores is not None:
            self.scores.award(result)
        return result
