"""
Computer-vs-computer self-play for strategy statistics.
"""

import random
from collections import Counter
from typing import Dict, Optional

from config import DEFAULT_BOARD_SIZE
from models import RoundResult, Side
from strategy import ComputerMoveSource
from tournament import TournamentController

MAX_TURNS_PER_ROUND = 500


def simulate_round(
    tournament: TournamentController,
    first_player: Optional[Side] = None,
) -> Optional[RoundResult]:
    """Play one round of the tournament with the strategy engine on both sides."""
    sources = {Side.HUMAN: ComputerMoveSource(), Side.COMPUTER: ComputerMoveSource()}
    return tournament.play_round(sources, first_player=first_player, max_turns=MAX_TURNS_PER_ROUND)


def simulate_tournament(
    n_rounds: int = 100,
    board_size: int = DEFAULT_BOARD_SIZE,
    seed: Optional[int] = None,
) -> Dict:
    """
    Monte Carlo: play `n_rounds` consecutive rounds (advantage carried over)
    and collect outcome statistics.

    Returns a dict with:
      - wins: Counter of winning side value
      - win_types: Counter of (side value, win type value)
      - first_player_wins: rounds won by whoever moved first
      - avg_score: mean points awarded per finished round
      - unfinished: rounds stopped by the turn cap
      - scores: final tournament scores by side value
    """
    rng = random.Random(seed)
    tournament = TournamentController(board_size=board_size, rng=rng)

    wins = Counter()
    win_types = Counter()
    first_player_wins = 0
    points = 0
    unfinished = 0

    for _ in range(n_rounds):
        result = simulate_round(tournament)
        if result is None:
            unfinished += 1
            continue
        wins[result.winner.value] += 1
        win_types[(result.winner.value, result.win_type.value)] += 1
        if result.winner_was_first:
            first_player_wins += 1
        points += result.score

    finished = n_rounds - unfinished
    return {
        "wins": wins,
        "win_types": win_types,
        "first_player_wins": first_player_wins,
        "avg_score": points / finished if finished > 0 else 0.0,
        "unfinished": unfinished,
        "scores": {
            Side.HUMAN.value: tournament.score_human,
            Side.COMPUTER.value: tournament.score_computer,
        },
    }
