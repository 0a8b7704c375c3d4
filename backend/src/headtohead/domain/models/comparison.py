"""
Comparison domain models: metric descriptors and the structured result of a
head-to-head comparison.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .base import League, SerializableMixin

# Metric key -> numeric value, rebuilt for every comparison.
StatMap = Dict[str, float]


class Winner(str, Enum):
    """Which side a row (or the whole comparison) went to."""
    PLAYER1 = "player1"
    PLAYER2 = "player2"
    TIE = "tie"

    def swapped(self) -> 'Winner':
        if self is Winner.PLAYER1:
            return Winner.PLAYER2
        if self is Winner.PLAYER2:
            return Winner.PLAYER1
        return Winner.TIE


@dataclass(frozen=True)
class Metric(SerializableMixin):
    """A single named, directional point of comparison."""
    key: str
    name: str
    higher_is_better: bool = True


@dataclass(frozen=True)
class ComparisonRow(SerializableMixin):
    """Outcome of comparing one metric."""
    category: str
    player1_value: float
    player2_value: float
    winner: Winner
    difference: float


@dataclass(frozen=True)
class PlayerStatLine(SerializableMixin):
    """A compared player: identity plus the extracted stat map."""
    id: str
    name: str
    stats: StatMap


@dataclass(frozen=True)
class ComparisonResult(SerializableMixin):
    """
    Structured, immutable result of comparing two players.

    ``rows`` follow the metric declaration order of the league strategy, so
    the same inputs always produce the same result.
    """
    league: League
    player1: PlayerStatLine
    player2: PlayerStatLine
    rows: Tuple[ComparisonRow, ...]
    overall_winner: Winner
    player1_wins: int
    player2_wins: int
    summary: str
    stat_group: Optional[str] = None

    @property
    def ties(self) -> int:
        return len(self.rows) - self.player1_wins - self.player2_wins

    @property
    def winner_name(self) -> Optional[str]:
        """Name of the overall winner, or None for a tie."""
        if self.overall_winner is Winner.PLAYER1:
            return self.player1.name
        if self.overall_winner is Winner.PLAYER2:
            return self.player2.name
        return None
