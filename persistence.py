"""
Save-file format for a game in progress.

    Computer:
       Squares: 1 2 0 4 5 6 7 8 9
       Score: 12
    Human:
       Squares: 0 2 3 4 5 6 7 8 9
       Score: 5
    First Turn: Human
    Next Turn: Computer

A square is written as 0 when covered and as its own number when uncovered.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from config import BOARD_SIZES
from models import BoardState, Side

logger = logging.getLogger(__name__)

SECTION_ORDER = [Side.COMPUTER, Side.HUMAN]


class MalformedRecordError(ValueError):
    """The save data cannot be turned into a game."""


@dataclass
class SavedGame:
    human_board: BoardState
    computer_board: BoardState
    score_human: int
    score_computer: int
    first_player: Side
    next_player: Side

    @property
    def board_size(self) -> int:
        return self.human_board.size


def format_game(game: SavedGame) -> str:
    boards = {Side.HUMAN: game.human_board, Side.COMPUTER: game.computer_board}
    scores = {Side.HUMAN: game.score_human, Side.COMPUTER: game.score_computer}
    lines = []
    for side in SECTION_ORDER:
        squares = " ".join(str(v) for v in boards[side].to_record())
        lines.append(f"{side.value}:")
        lines.append(f"   Squares: {squares}")
        lines.append(f"   Score: {scores[side]}")
    lines.append(f"First Turn: {game.first_player.value}")
    lines.append(f"Next Turn: {game.next_player.value}")
    return "\n".join(lines) + "\n"


def _parse_side(label: str) -> Side:
    try:
        return Side(label.strip())
    except ValueError:
        raise MalformedRecordError(f"Unknown player {label.strip()!r}")


def _parse_int(text: str, what: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise MalformedRecordError(f"{what} is not a number: {text.strip()!r}")


def _value_after(line: str, key: str) -> str:
    head, sep, tail = line.partition(":")
    if not sep or head.strip() != key:
        raise MalformedRecordError(f"Expected '{key}:', got {line.strip()!r}")
    return tail


def _check_once(turns: Dict[str, Side], key: str) -> None:
    if key in turns:
        raise MalformedRecordError(f"{key.title()} Turn appears twice")


def _parse_board(text: str) -> BoardState:
    values = [_parse_int(tok, "Square") for tok in text.split()]
    if len(values) not in BOARD_SIZES:
        raise MalformedRecordError(
            f"Board has {len(values)} squares; expected one of {BOARD_SIZES}"
        )
    try:
        return BoardState.from_record(values)
    except ValueError as e:
        raise MalformedRecordError(str(e))


def parse_game(text: str) -> SavedGame:
    """Parse save text; raises MalformedRecordError on any problem."""
    lines = [line for line in text.splitlines() if line.strip()]
    boards: Dict[Side, BoardState] = {}
    scores: Dict[Side, int] = {}
    turns: Dict[str, Side] = {}

    i = 0
    while i < len(lines):
        line = lines[i].strip()
        if line in ("Computer:", "Human:"):
            side = Side(line[:-1])
            if side in boards:
                raise MalformedRecordError(f"Section {side.value} appears twice")
            if i + 2 >= len(lines):
                raise MalformedRecordError(f"Section {side.value} is incomplete")
            boards[side] = _parse_board(_value_after(lines[i + 1], "Squares"))
            score = _parse_int(_value_after(lines[i + 2], "Score"), "Score")
            if score < 0:
                raise MalformedRecordError(f"Negative score for {side.value}")
            scores[side] = score
            i += 3
        elif line.startswith("First Turn:"):
            _check_once(turns, "first")
            turns["first"] = _parse_side(_value_after(line, "First Turn"))
            i += 1
        elif line.startswith("Next Turn:"):
            _check_once(turns, "next")
            turns["next"] = _parse_side(_value_after(line, "Next Turn"))
            i += 1
        else:
            raise MalformedRecordError(f"Unexpected line {line!r}")

    missing: List[str] = [s.value for s in SECTION_ORDER if s not in boards]
    missing += [f"{k.title()} Turn" for k in ("first", "next") if k not in turns]
    if missing:
        raise MalformedRecordError(f"Missing {', '.join(missing)}")
    if boards[Side.HUMAN].size != boards[Side.COMPUTER].size:
        raise MalformedRecordError("Boards have different sizes")

    return SavedGame(
        human_board=boards[Side.HUMAN],
        computer_board=boards[Side.COMPUTER],
        score_human=scores[Side.HUMAN],
        score_computer=scores[Side.COMPUTER],
        first_player=turns["first"],
        next_player=turns["next"],
    )


def write_game(path, game: SavedGame) -> None:
    Path(path).write_text(format_game(game))
    logger.info("Game saved to %s", path)


def read_game(path) -> SavedGame:
    """Read and parse a save file. OSError and MalformedRecordError propagate."""
    game = parse_game(Path(path).read_text())
    logger.info("Game loaded from %s", path)
    return game
