"""
Domain models for the HeadToHead multi-sport platform.
"""

from .base import League
from .player import PlayerSummary
from .team import TeamSummary
from .game import GameSummary
from .comparison import (
    StatMap,
    Winner,
    Metric,
    ComparisonRow,
    PlayerStatLine,
    ComparisonResult,
)

__all__ = [
    "League",
    "PlayerSummary",
    "TeamSummary",
    "GameSummary",
    "StatMap",
    "Winner",
    "Metric",
    "ComparisonRow",
    "PlayerStatLine",
    "ComparisonResult",
]
