"""
Football (NFL) comparison strategy.

The stat group is either a position (QB, RB, WR/TE, a defensive position) or
one of ESPN's stat categories (passing, rushing, receiving, defensive,
general, scoring). Categories are checked first.
"""

from typing import Any, Dict, Optional, Tuple

from ....core.utils import DataValidator
from ...models.base import League
from ...models.comparison import Metric, StatMap
from .base import LeagueStrategy, fallback_name

DEFAULT_STAT_GROUP = "QB"

GROUP_ALIASES = {
    'QUARTERBACK': 'QB',
    'RUNNING-BACK': 'RB',
    'RECEIVER-TIGHTEND': 'WR',
    'DEFENSE': 'DEFENSE',
}

DEFENSIVE_POSITIONS = ('DE', 'DT', 'LB', 'CB', 'S', 'DB')

# Keys are ESPN ``stat.name`` values
POSITION_METRICS = {
    'QB': (
        Metric('gamesPlayed', 'Games Played'),
        Metric('passingYards', 'Passing Yards'),
        Metric('passingTouchdowns', 'Passing TDs'),
        Metric('interceptions', 'Interceptions', higher_is_better=False),
        Metric('completions', 'Completions'),
        Metric('passingAttempts', 'Attempts'),
        Metric('completionPct', 'Completion %'),
        Metric('yardsPerPassAttempt', 'Yards/Attempt'),
        Metric('QBRating', 'QB Rating'),
        Metric('rushingYards', 'Rushing Yards'),
    ),
    'RB': (
        Metric('gamesPlayed', 'Games Played'),
        Metric('rushingYards', 'Rushing Yards'),
        Metric('rushingTouchdowns', 'Rushing TDs'),
        Metric('rushingAttempts', 'Rushing Attempts'),
        Metric('yardsPerRushAttempt', 'Yards/Carry'),
        Metric('receptions', 'Receptions'),
        Metric('receivingYards', 'Receiving Yards'),
        Metric('receivingTouchdowns', 'Receiving TDs'),
        Metric('fumbles', 'Fumbles', higher_is_better=False),
    ),
    'WR': (
        Metric('gamesPlayed', 'Games Played'),
        Metric('receptions', 'Receptions'),
        Metric('receivingYards', 'Receiving Yards'),
        Metric('receivingTouchdowns', 'Receiving TDs'),
        Metric('receivingTargets', 'Targets'),
        Metric('yardsPerReception', 'Yards/Reception'),
        Metric('longReception', 'Long Reception'),
        Metric('fumbles', 'Fumbles', higher_is_better=False),
    ),
}
POSITION_METRICS['TE'] = POSITION_METRICS['WR']

DEFENSIVE_POSITION_METRICS = (
    Metric('gamesPlayed', 'Games Played'),
    Metric('totalTackles', 'Total Tackles'),
    Metric('soloTackles', 'Solo Tackles'),
    Metric('sacks', 'Sacks'),
    Metric('interceptions', 'Interceptions'),
    Metric('passesDefended', 'Passes Defended'),
    Metric('fumblesForced', 'Forced Fumbles'),
    Metric('fumblesRecovered', 'Fumble Recoveries'),
)

GENERIC_METRICS = (
    Metric('gamesPlayed', 'Games Played'),
    Metric('touchdowns', 'Total TDs'),
    Metric('yardsGained', 'Total Yards'),
)

# Keys are ESPN ``stat.name`` values
CATEGORY_METRICS = {
    'PASSING': (
        Metric('teamGamesPlayed', 'Games Played'),
        Metric('completions', 'Completions'),
        Metric('passingAttempts', 'Attempts'),
        Metric('completionPct', 'Completion %'),
        Metric('netPassingYards', 'Passing Yards'),
        Metric('yardsPerPassAttempt', 'Yards/Attempt'),
        Metric('passingTouchdowns', 'Passing TDs'),
        Metric('interceptions', 'Interceptions', higher_is_better=False),
        Metric('QBRating', 'QB Rating'),
        Metric('sacks', 'Sacks Taken', higher_is_better=False),
    ),
    'RUSHING': (
        Metric('teamGamesPlayed', 'Games Played'),
        Metric('rushingAttempts', 'Rushing Attempts'),
        Metric('rushingYards', 'Rushing Yards'),
        Metric('yardsPerRushAttempt', 'Yards/Carry'),
        Metric('longRushing', 'Long Rush'),
        Metric('rushingTouchdowns', 'Rushing TDs'),
        Metric('rushingBigPlays', '20+ Yard Rushes'),
        Metric('rushingFumbles', 'Fumbles', higher_is_better=False),
    ),
    'RECEIVING': (
        Metric('teamGamesPlayed', 'Games Played'),
        Metric('receptions', 'Receptions'),
        Metric('receivingTargets', 'Targets'),
        Metric('receivingYards', 'Receiving Yards'),
        Metric('yardsPerReception', 'Yards/Reception'),
        Metric('longReception', 'Long Reception'),
        Metric('receivingTouchdowns', 'Receiving TDs'),
        Metric('receivingBigPlays', '20+ Yard Receptions'),
        Metric('receivingFumbles', 'Fumbles', higher_is_better=False),
    ),
    'DEFENSIVE': (
        Metric('teamGamesPlayed', 'Games Played'),
        Metric('totalTackles', 'Total Tackles'),
        Metric('soloTackles', 'Solo Tackles'),
        Metric('assistTackles', 'Assist Tackles'),
        Metric('sacks', 'Sacks'),
        Metric('sackYards', 'Sack Yards'),
        Metric('tacklesForLoss', 'Tackles For Loss'),
        Metric('passesDefended', 'Passes Defended'),
        Metric('fumblesForced', 'Forced Fumbles'),
        Metric('fumblesRecovered', 'Fumble Recoveries'),
    ),
    'GENERAL': (
        Metric('gamesPlayed', 'Games Played'),
        Metric('fumbles', 'Fumbles', higher_is_better=False),
        Metric('fumblesLost', 'Fumbles Lost', higher_is_better=False),
        Metric('fumblesForced', 'Forced Fumbles'),
        Metric('fumblesRecovered', 'Fumbles Recovered'),
    ),
    'SCORING': (
        Metric('totalPoints', 'Total Points'),
        Metric('totalTouchdowns', 'Touchdowns'),
        Metric('rushingTouchdowns', 'Rushing TDs'),
        Metric('receivingTouchdowns', 'Receiving TDs'),
        Metric('passingTouchdowns', 'Passing TDs'),
        Metric('twoPointPassConvs', '2-Pt Pass Conversions'),
        Metric('twoPointRushConvs', '2-Pt Rush Conversions'),
        Metric('twoPointRecConvs', '2-Pt Rec Conversions'),
    ),
}
CATEGORY_METRICS['DEFENSE'] = CATEGORY_METRICS['DEFENSIVE']


# ESPN reuses stat names across categories (``sacks`` and ``interceptions``
# appear under both passing and defense), so each group reads only its own
# categories, in this order.
GROUP_CATEGORIES = {
    'QB': ('general', 'passing', 'rushing'),
    'RB': ('general', 'rushing', 'receiving'),
    'WR': ('general', 'receiving'),
    'TE': ('general', 'receiving'),
    'PASSING': ('passing', 'general'),
    'RUSHING': ('rushing', 'general'),
    'RECEIVING': ('receiving', 'general'),
    'DEFENSIVE': ('defensive', 'defensiveInterceptions', 'general'),
    'DEFENSE': ('defensive', 'defensiveInterceptions', 'general'),
    'GENERAL': ('general',),
    'SCORING': ('scoring', 'general'),
}
DEFENSIVE_POSITION_CATEGORIES = ('general', 'defensive', 'defensiveInterceptions')


def normalize_group(stat_group: Optional[str]) -> str:
    group = (stat_group or DEFAULT_STAT_GROUP).strip().upper()
    return GROUP_ALIASES.get(group, group)


def get_metrics(stat_group: Optional[str] = None) -> Tuple[Metric, ...]:
    """Category metrics if the group names a category, else position metrics."""
    group = normalize_group(stat_group)
    if group in CATEGORY_METRICS:
        return CATEGORY_METRICS[group]
    if group in POSITION_METRICS:
        return POSITION_METRICS[group]
    if group in DEFENSIVE_POSITIONS:
        return DEFENSIVE_POSITION_METRICS
    return GENERIC_METRICS


def categories_for(stat_group: Optional[str]) -> Optional[Tuple[str, ...]]:
    """ESPN categories a group reads, in priority order; ``None`` means all of them."""
    group = normalize_group(stat_group)
    if group in GROUP_CATEGORIES:
        return GROUP_CATEGORIES[group]
    if group in DEFENSIVE_POSITIONS:
        return DEFENSIVE_POSITION_CATEGORIES
    return None


def extract_stats(raw: Dict[str, Any], stat_group: Optional[str] = None) -> StatMap:
    """
    Flatten ``splits.categories[].stats[]`` by stat name and read each metric.

    Only the group's own categories are consulted, first match in priority
    order; unrecognized groups search every category in document order.
    Absent stats are 0.
    """
    by_category: Dict[str, Dict[str, Any]] = {}
    for category in ((raw.get('splits') or {}).get('categories') or []):
        by_category[category.get('name', '')] = {
            stat.get('name'): stat.get('value') for stat in category.get('stats') or []
        }

    order = categories_for(stat_group)
    sources = [by_category[name] for name in order if name in by_category] if order else list(by_category.values())

    stats: StatMap = {}
    for metric in get_metrics(stat_group):
        value = next((values[metric.key] for values in sources if metric.key in values), None)
        stats[metric.key] = DataValidator.to_number(value)
    return stats


def get_player_name(raw: Dict[str, Any], player_id: Any) -> str:
    return raw.get('playerName') or fallback_name(raw.get('playerId') or player_id)


FOOTBALL = LeagueStrategy(
    league=League.NFL,
    extract_stats=extract_stats,
    get_metrics=get_metrics,
    get_player_name=get_player_name,
)
