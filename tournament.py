"""
Tournament: cumulative scores and round sequencing.
"""

import logging
import random
from typing import Dict, Optional

from config import DEFAULT_BOARD_SIZE, validate_board_size
from models import BoardState, RoundResult, Side, TournamentState
from advantage import AdvantageManager
from rounds import MoveSource, RoundController
from persistence import MalformedRecordError, SavedGame, read_game, write_game

logger = logging.getLogger(__name__)


class TournamentController:
    def __init__(self, board_size: int = DEFAULT_BOARD_SIZE, rng=random):
        self.board_size = validate_board_size(board_size)
        self.rng = rng
        self.state = TournamentState()
        self.advantage = AdvantageManager()
        self.round: Optional[RoundController] = None

    @property
    def score_human(self) -> int:
        return self.state.score_human

    @property
    def score_computer(self) -> int:
        return self.state.score_computer

    def new_round(self, board_size: Optional[int] = None, first_player: Optional[Side] = None) -> RoundController:
        """
        Fresh boards, any queued advantage applied, first player chosen
        (by `first_player` or a dice toss). Raises InvalidConfiguration
        for an unsupported size before any board is built.
        """
        if board_size is not None:
            self.board_size = validate_board_size(board_size)

        human_board = BoardState.fresh(self.board_size)
        computer_board = BoardState.fresh(self.board_size)
        self.advantage.apply_advantage_to_new_round(human_board, computer_board)

        self.round = RoundController(
            human_board,
            computer_board,
            advantage=self.advantage,
            scores=self.state,
            rng=self.rng,
        )
        self.round.setup(first_player)
        logger.info("New round on a %d-square board", self.board_size)
        return self.round

    def play_round(
        self,
        sources: Dict[Side, MoveSource],
        board_size: Optional[int] = None,
        first_player: Optional[Side] = None,
        max_turns: Optional[int] = None,
    ) -> Optional[RoundResult]:
        round_ = self.new_round(board_size, first_player)
        return round_.play(sources, max_turns=max_turns)

    def winner(self) -> Optional[Side]:
        """Tournament leader, or None on a tie."""
        if self.state.score_human > self.state.score_computer:
            return Side.HUMAN
        if self.state.score_computer > self.state.score_human:
            return Side.COMPUTER
        return None

    def summary(self) -> str:
        human, computer = self.state.score_human, self.state.score_computer
        winner = self.winner()
        if winner is Side.HUMAN:
            return f"You win the tournament with a score of {human}! (Computer's score: {computer})"
        if winner is Side.COMPUTER:
            return f"Computer wins the tournament with a score of {computer}! (Your score: {human})"
        return f"The tournament is a draw! (Both scored {human})"

    # Save / load

    def snapshot(self) -> SavedGame:
        """Current round as save data. Requires a round in progress."""
        if self.round is None or self.round.current is None:
            raise RuntimeError("No round in progress to save")
        return SavedGame(
            human_board=self.round.human_board.clone(),
            computer_board=self.round.computer_board.clone(),
            score_human=self.state.score_human,
            score_computer=self.state.score_computer,
            first_player=self.round.first_player,
            next_player=self.round.current,
        )

    def save_game(self, path) -> None:
        write_game(path, self.snapshot())

    def restore(self, game: SavedGame) -> RoundController:
        """Replace boards, scores, and turn order with `game` as a whole."""
        self.board_size = game.board_size
        self.state = TournamentState(
            score_human=game.score_human,
            score_computer=game.score_computer,
        )
        self.advantage.reset()
        self.round = RoundController(
            game.human_board,
            game.computer_board,
            advantage=self.advantage,
            scores=self.state,
            rng=self.rng,
            first_player=game.first_player,
            next_player=game.next_player,
        )
        return self.round

    def load_game(self, path) -> bool:
        """
        Load a save file. On any failure the tournament is left exactly as it
        was and False is returned.
        """
        try:
            game = read_game(path)
        except (OSError, MalformedRecordError) as e:
            logger.error("Unable to load game from %s: %s", path, e)
            return False
        self.restore(game)
        logger.info(
            "First player: %s, next player: %s",
            game.first_player.value, game.next_player.value,
        )
        return True
