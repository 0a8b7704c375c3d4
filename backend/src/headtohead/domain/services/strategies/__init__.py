"""
Per-league comparison strategies, selected by ``League``.
"""

from typing import Dict, Union

from ....core.exceptions import UnsupportedLeagueError
from ...models.base import League
from .base import LeagueStrategy
from .baseball import BASEBALL
from .basketball import BASKETBALL
from .football import FOOTBALL

STRATEGIES: Dict[League, LeagueStrategy] = {
    League.MLB: BASEBALL,
    League.NBA: BASKETBALL,
    League.NFL: FOOTBALL,
}


def get_strategy(league: Union[str, League]) -> LeagueStrategy:
    """Strategy for ``league``; unknown leagues raise ``UnsupportedLeagueError``."""
    resolved = League.from_value(league)
    if resolved not in STRATEGIES:
        raise UnsupportedLeagueError(resolved.value, supported_leagues=[l.value for l in STRATEGIES])
    return STRATEGIES[resolved]


__all__ = [
    "LeagueStrategy",
    "STRATEGIES",
    "get_strategy",
    "BASEBALL",
    "BASKETBALL",
    "FOOTBALL",
]
