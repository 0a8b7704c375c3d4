"""
Base domain models and common patterns for the multi-sport platform.
"""

from enum import Enum
from typing import Any, Dict, List, Union

from ...core.exceptions import UnsupportedLeagueError


class League(str, Enum):
    """
    Supported leagues. Each one is served by its own provider client and
    comparison strategy.
    """
    MLB = "mlb"
    NBA = "nba"
    NFL = "nfl"

    @property
    def display_name(self) -> str:
        """Get the full display name for the league."""
        names = {
            League.MLB: "Major League Baseball",
            League.NBA: "National Basketball Association",
            League.NFL: "National Football League",
        }
        return names.get(self, self.value.upper())

    @classmethod
    def values(cls) -> List[str]:
        return [league.value for league in cls]

    @classmethod
    def from_value(cls, league: Union[str, 'League']) -> 'League':
        """Normalize a league identifier (case-insensitive)."""
        if isinstance(league, cls):
            return league
        try:
            return cls(str(league).strip().lower())
        except ValueError:
            raise UnsupportedLeagueError(str(league), supported_leagues=cls.values()) from None


class SerializableMixin:
    """Dictionary conversion shared by the domain dataclasses."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary representation."""
        result = {}
        for key, value in self.__dict__.items():
            result[key] = _serialize(value)
        return result


def _serialize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, 'to_dict'):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    if isinstance(value, dict):
        return {key: _serialize(item) for key, item in value.items()}
    return value
