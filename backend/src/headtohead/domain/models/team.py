"""
Team domain models for the multi-sport platform.
"""

from dataclasses import dataclass
from typing import Optional

from .base import SerializableMixin


@dataclass(frozen=True)
class TeamSummary(SerializableMixin):
    """Team identity as reported by a league provider."""
    id: str
    name: str
    abbreviation: Optional[str] = None
    city: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.abbreviation and self.abbreviation != self.name:
            return f"{self.name} ({self.abbreviation})"
        return self.name
