"""
Basketball (NBA) comparison strategy.
There are no stat groups: one metric list spans counting totals, shooting
percentages and per-game averages derived from the totals.
"""

from typing import Any, Dict, Optional, Tuple

from ....core.utils import DataValidator
from ...models.base import League
from ...models.comparison import Metric, StatMap
from .base import LeagueStrategy, fallback_name

COUNTING_FIELDS = (
    'pts', 'fgm', 'fga', 'fg3m', 'fg3a', 'ftm', 'fta',
    'ast', 'tov', 'stl', 'blk', 'pf', 'reb', 'oreb', 'dreb',
)
PERCENTAGE_FIELDS = ('fg_pct', 'fg3_pct', 'ft_pct')

# Per-game stat -> the total it averages
PER_GAME_FIELDS = {
    'ppg': 'pts',
    'apg': 'ast',
    'spg': 'stl',
    'bpg': 'blk',
    'rpg': 'reb',
    'orpg': 'oreb',
    'drpg': 'dreb',
}

METRICS = (
    # Scoring
    Metric('gp', 'Games Played'),
    Metric('pts', 'Total Points'),
    Metric('ppg', 'Points Per Game'),
    # Shooting
    Metric('fg_pct', 'Field Goal %'),
    Metric('fg3_pct', '3-Point %'),
    Metric('ft_pct', 'Free Throw %'),
    Metric('fgm', 'Field Goals Made'),
    Metric('fg3m', '3-Pointers Made'),
    # Playmaking
    Metric('ast', 'Total Assists'),
    Metric('apg', 'Assists Per Game'),
    Metric('tov', 'Turnovers', higher_is_better=False),
    Metric('ast_to_ratio', 'Assist/TO Ratio'),
    # Defense
    Metric('stl', 'Total Steals'),
    Metric('blk', 'Total Blocks'),
    Metric('spg', 'Steals Per Game'),
    Metric('bpg', 'Blocks Per Game'),
    # Rebounding
    Metric('reb', 'Total Rebounds'),
    Metric('rpg', 'Rebounds Per Game'),
    Metric('oreb', 'Offensive Rebounds'),
    Metric('dreb', 'Defensive Rebounds'),
)


def get_metrics(stat_group: Optional[str] = None) -> Tuple[Metric, ...]:
    return METRICS


def extract_stats(raw: Dict[str, Any], stat_group: Optional[str] = None) -> StatMap:
    """
    Build totals, percentages and per-game averages from a totals document.
    Per-game values are 0 when no games were played.
    """
    stats: StatMap = {'gp': DataValidator.to_number(raw.get('gp'))}
    for field in COUNTING_FIELDS + PERCENTAGE_FIELDS:
        stats[field] = DataValidator.to_number(raw.get(field))

    games = stats['gp']
    for per_game, total in PER_GAME_FIELDS.items():
        stats[per_game] = stats[total] / games if games > 0 else 0.0

    stats['ast_to_ratio'] = stats['ast'] / stats['tov'] if stats['tov'] > 0 else stats['ast']
    return stats


def get_player_name(raw: Dict[str, Any], player_id: Any) -> str:
    return raw.get('fullName') or fallback_name(player_id)


BASKETBALL = LeagueStrategy(
    league=League.NBA,
    extract_stats=extract_stats,
    get_metrics=get_metrics,
    get_player_name=get_player_name,
)
