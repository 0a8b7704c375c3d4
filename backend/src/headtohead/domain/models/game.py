"""
Game domain models for the multi-sport platform.
"""

from dataclasses import dataclass
from typing import Optional

from .base import SerializableMixin
from .team import TeamSummary


@dataclass(frozen=True)
class GameSummary(SerializableMixin):
    """A scheduled, live or final game with its score line."""
    id: str
    game_date: str
    home_team: TeamSummary
    away_team: TeamSummary
    status: str
    home_score: Optional[int] = None
    away_score: Optional[int] = None

    @property
    def score_line(self) -> str:
        """Get a one-line ``Away 3 @ Home 5`` representation."""
        away = self.away_team.name or self.away_team.id
        home = self.home_team.name or self.home_team.id
        if self.home_score is None or self.away_score is None:
            return f"{away} @ {home} ({self.status})"
        return f"{away} {self.away_score} @ {home} {self.home_score} ({self.status})"
