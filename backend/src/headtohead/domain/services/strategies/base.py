"""
League strategy record.
A strategy bundles the league-specific pieces of a comparison so a single
engine can serve every league.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from ...models.base import League
from ...models.comparison import Metric, StatMap

ExtractStats = Callable[[Dict[str, Any], Optional[str]], StatMap]
GetMetrics = Callable[[Optional[str]], Tuple[Metric, ...]]
GetPlayerName = Callable[[Dict[str, Any], Any], str]
StatsRequest = Callable[[Optional[Any]], Dict[str, Any]]


def default_stats_request(season: Optional[Any] = None) -> Dict[str, Any]:
    """Keyword arguments for ``get_player_stats``: just the season."""
    return {'season': season}


@dataclass(frozen=True)
class LeagueStrategy:
    """
    League-specific comparison behaviour.

    Attributes:
        league: League served by this strategy.
        extract_stats: ``(raw_document, stat_group) -> StatMap``; missing keys are 0.
        get_metrics: ``(stat_group) -> ordered metrics``; pure.
        get_player_name: ``(raw_document, player_id) -> display name``.
        stats_request: ``(season) -> kwargs`` for the client's ``get_player_stats``.
    """
    league: League
    extract_stats: ExtractStats
    get_metrics: GetMetrics
    get_player_name: GetPlayerName
    stats_request: StatsRequest = default_stats_request


def fallback_name(player_id: Any) -> str:
    return f"Player {player_id}"
