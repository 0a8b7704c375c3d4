"""
Player domain models for the multi-sport platform.
"""

from dataclasses import dataclass
from typing import Optional

from .base import League, SerializableMixin


@dataclass(frozen=True)
class PlayerSummary(SerializableMixin):
    """
    A search hit: the provider-assigned id plus enough naming to pick
    the right person.
    """
    id: str
    full_name: str
    league: League
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: Optional[bool] = None
    position: Optional[str] = None
    team_name: Optional[str] = None

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on full, first or last name."""
        needle = query.strip().lower()
        if not needle:
            return False
        names = (self.full_name, self.first_name or "", self.last_name or "")
        return any(needle in name.lower() for name in names)
