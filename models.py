"""
Data models and state representations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from config import ONE_DIE_RULE_START

Combination = Tuple[int, ...]


class Side(str, Enum):
    HUMAN = "Human"
    COMPUTER = "Computer"

    @property
    def opponent(self) -> "Side":
        return Side.COMPUTER if self is Side.HUMAN else Side.HUMAN

    @classmethod
    def from_is_human(cls, is_human: bool) -> "Side":
        return cls.HUMAN if is_human else cls.COMPUTER


class MoveType(str, Enum):
    NONE = "none"
    COVER = "cover"
    UNCOVER = "uncover"


class WinType(str, Enum):
    COVER = "cover"
    UNCOVER = "uncover"


@dataclass
class BoardState:
    """A row of numbered squares 1..N; True means covered."""
    squares: List[bool]

    @classmethod
    def fresh(cls, size: int) -> "BoardState":
        return cls(squares=[False] * size)

    @property
    def size(self) -> int:
        return len(self.squares)

    def _in_range(self, square: int) -> bool:
        return 1 <= square <= len(self.squares)

    def cover(self, square: int) -> bool:
        if not self._in_range(square) or self.squares[square - 1]:
            return False
        self.squares[square - 1] = True
        return True

    def uncover(self, square: int) -> bool:
        if not self._in_range(square) or not self.squares[square - 1]:
            return False
        self.squares[square - 1] = False
        return True

    def is_covered(self, square: int) -> bool:
        return self._in_range(square) and self.squares[square - 1]

    def is_uncovered(self, square: int) -> bool:
        return self._in_range(square) and not self.squares[square - 1]

    def all_covered(self) -> bool:
        return all(self.squares)

    def all_uncovered(self) -> bool:
        return not any(self.squares)

    def covered_sum(self) -> int:
        return sum(i for i, covered in enumerate(self.squares, start=1) if covered)

    def uncovered_sum(self) -> int:
        return sum(i for i, covered in enumerate(self.squares, start=1) if not covered)

    def covered_count(self) -> int:
        return sum(1 for covered in self.squares if covered)

    def uncovered_count(self) -> int:
        return len(self.squares) - self.covered_count()

    def highest_uncovered(self) -> int:
        """Highest uncovered square, or 0 when everything is covered."""
        for i in range(len(self.squares), 0, -1):
            if not self.squares[i - 1]:
                return i
        return 0

    def one_die_eligible(self) -> bool:
        """True when every square from ONE_DIE_RULE_START up is covered."""
        return all(self.squares[ONE_DIE_RULE_START - 1:])

    def clone(self) -> "BoardState":
        return BoardState(squares=self.squares[:])

    def to_record(self) -> List[int]:
        """0 for a covered square, the square's own number when uncovered."""
        return [0 if covered else i for i, covered in enumerate(self.squares, start=1)]

    @classmethod
    def from_record(cls, values: Iterable[int]) -> "BoardState":
        """
        Rebuild a board from a square-state record.
        Raises ValueError when a value is neither 0 nor its own index.
        """
        squares = []
        for i, v in enumerate(values, start=1):
            if v == 0:
                squares.append(True)
            elif v == i:
                squares.append(False)
            else:
                raise ValueError(f"Square {i} has invalid value {v}")
        return cls(squares=squares)


@dataclass(frozen=True)
class Move:
    kind: MoveType = MoveType.NONE
    squares: Combination = ()

    @classmethod
    def none(cls) -> "Move":
        return cls()

    @classmethod
    def cover(cls, combination: Iterable[int]) -> "Move":
        return cls(MoveType.COVER, tuple(sorted(combination)))

    @classmethod
    def uncover(cls, combination: Iterable[int]) -> "Move":
        return cls(MoveType.UNCOVER, tuple(sorted(combination)))

    @property
    def is_none(self) -> bool:
        return self.kind is MoveType.NONE

    def __str__(self) -> str:
        if self.is_none:
            return "pass"
        return f"{self.kind.value} {', '.join(str(s) for s in self.squares)}"


@dataclass
class AdvantageState:
    """Handicap bookkeeping carried from one round to the next."""
    owner: Optional[Side] = None
    square: int = 0
    protect_human: bool = False
    protect_computer: bool = False
    pending_for: Optional[Side] = None
    pending_square: int = 0


@dataclass(frozen=True)
class AdvantageContext:
    """What a move source needs to know about the opponent's protected square."""
    opponent_protected: bool = False
    square: int = 0


@dataclass(frozen=True)
class RoundResult:
    winner: Side
    win_type: WinType
    score: int
    winner_was_first: bool

    def describe(self) -> str:
        if self.win_type is WinType.COVER:
            how = "covering all their squares"
        else:
            how = f"uncovering all of {self.winner.opponent.value}'s squares"
        return f"{self.winner.value} wins by {how}! (+{self.score} points)"


@dataclass
class TournamentState:
    score_human: int = 0
    score_computer: int = 0
    history: List[RoundResult] = field(default_factory=list)

    def award(self, result: RoundResult) -> None:
        if result.winner is Side.HUMAN:
            self.score_human += result.score
        else:
            self.score_computer += result.score
        self.history.append(result)

    def score_for(self, side: Side) -> int:
        return self.score_human if side is Side.HUMAN else self.score_computer
