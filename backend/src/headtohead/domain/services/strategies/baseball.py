"""
Baseball (MLB) comparison strategy.

Hitting, pitching and fielding are separate stat groups: each selects both
the section of the MLB document that is read and the metrics compared. The
groups are never merged.
"""

from typing import Any, Dict, Optional, Tuple

from ....core.utils import DataValidator
from ...models.base import League
from ...models.comparison import Metric, StatMap
from .base import LeagueStrategy, fallback_name

DEFAULT_STAT_GROUP = "hitting"

HITTING_METRICS = (
    Metric('avg', 'Batting Average'),
    Metric('ops', 'OPS'),
    Metric('homeRuns', 'Home Runs'),
    Metric('rbi', 'RBIs'),
    Metric('hits', 'Hits'),
)

PITCHING_METRICS = (
    Metric('era', 'ERA', higher_is_better=False),
    Metric('whip', 'WHIP', higher_is_better=False),
    Metric('wins', 'Wins'),
    Metric('strikeOuts', 'Strikeouts'),
    Metric('inningsPitched', 'Innings Pitched'),
)

FIELDING_METRICS = (
    Metric('fielding', 'Fielding %'),
    Metric('assists', 'Assists'),
    Metric('putOuts', 'Putouts'),
    Metric('errors', 'Errors', higher_is_better=False),
    Metric('doublePlays', 'Double Plays'),
)

METRICS_BY_GROUP = {
    'hitting': HITTING_METRICS,
    'pitching': PITCHING_METRICS,
    'fielding': FIELDING_METRICS,
}


def _group(stat_group: Optional[str]) -> str:
    return (stat_group or DEFAULT_STAT_GROUP).strip().lower()


def get_metrics(stat_group: Optional[str] = None) -> Tuple[Metric, ...]:
    """Metrics for a stat group; an unknown group has none."""
    return METRICS_BY_GROUP.get(_group(stat_group), ())


def extract_stats(raw: Dict[str, Any], stat_group: Optional[str] = None) -> StatMap:
    """
    Read the section whose group display name contains ``stat_group``.

    MLB reports rates as strings (``".300"``, ``"123.1"``); every value is
    coerced to a float. A missing section gives an all-zero map.
    """
    group = _group(stat_group)
    section = next(
        (
            entry for entry in raw.get('stats') or []
            if group in str((entry.get('group') or {}).get('displayName', '')).lower()
        ),
        None,
    )

    stats = {key: DataValidator.to_number(value) for key, value in ((section or {}).get('stats') or {}).items()}
    for metric in get_metrics(group):
        stats.setdefault(metric.key, 0.0)
    return stats


def get_player_name(raw: Dict[str, Any], player_id: Any) -> str:
    return (raw.get('player') or {}).get('fullName') or fallback_name(player_id)


def stats_request(season: Optional[Any] = None) -> Dict[str, Any]:
    """Regular-season stats; ``"career"`` asks for career totals instead."""
    if isinstance(season, str) and season.strip().lower() == 'career':
        return {'season': None, 'game_type': 'R', 'stats_type': 'career'}
    return {'season': season, 'game_type': 'R', 'stats_type': 'season'}


BASEBALL = LeagueStrategy(
    league=League.MLB,
    extract_stats=extract_stats,
    get_metrics=get_metrics,
    get_player_name=get_player_name,
    stats_request=stats_request,
)
