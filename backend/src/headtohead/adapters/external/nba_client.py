"""
NBA.com Stats API client.
Every endpoint answers with ``resultSets`` tables that are parsed into
lower-cased dict rows before use.
"""
import logging
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from ...config.settings import settings
from ...core.exceptions import (
    ErrorContext, ProviderNotFoundError, ProviderResponseError,
    PlayerNotFoundError, TeamNotFoundError, GameNotFoundError, InvalidSeasonError
)
from ...core.utils import APIResponseProcessor
from ...domain.models.base import League
from ...domain.models.player import PlayerSummary
from ...domain.models.team import TeamSummary
from ...domain.models.game import GameSummary
from .base_client import SportAPIClient, PlayerIndex

logger = logging.getLogger(__name__)

NBA_LEAGUE_ID = "00"

# Counting and percentage totals carried over from playercareerstats rows
TOTALS_FIELDS = (
    'gp', 'pts', 'reb', 'ast', 'stl', 'blk',
    'fgm', 'fga', 'fg_pct', 'fg3m', 'fg3a', 'fg3_pct',
    'ftm', 'fta', 'ft_pct', 'oreb', 'dreb', 'tov', 'pf',
)


def current_nba_season(today: Optional[datetime] = None) -> str:
    """Season label such as ``2024-25``; a new season starts in October."""
    today = today or datetime.now()
    start = today.year if today.month >= 10 else today.year - 1
    return f"{start}-{str(start + 1)[2:]}"


SEASON_PATTERN = re.compile(r'^(\d{4})(?:-(\d{2}))?$')


def normalize_season(season: Any) -> str:
    """
    Accept ``2023``, ``"2023"`` or ``"2023-24"`` and return ``"2023-24"``.

    Raises:
        InvalidSeasonError: for anything else, including ``"2023-25"``.
    """
    text = str(season).strip()
    match = SEASON_PATTERN.match(text)
    if not match:
        raise InvalidSeasonError(season, league=League.NBA.value, expected="a year such as 2023 or 2023-24")

    start = int(match.group(1))
    label = f"{start}-{str(start + 1)[2:]}"
    if match.group(2) and text != label:
        raise InvalidSeasonError(season, league=League.NBA.value, expected=label)
    return label


class NBAAPIClient(SportAPIClient):
    """Client for stats.nba.com."""

    league = League.NBA
    extra_headers = {
        'User-Agent': (
            'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
            '(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36'
        ),
        'Referer': 'https://www.nba.com/',
        'Origin': 'https://www.nba.com',
    }

    def __init__(self, base_url: Optional[str] = None, **kwargs):
        super().__init__(base_url=base_url, **kwargs)
        self.player_index = PlayerIndex(ttl=settings.player_index_ttl)

    def _rows(self, data: Any, endpoint: str, name: str, index: int = 0) -> List[Dict[str, Any]]:
        """Rows of the result set called ``name`` (or at ``index`` if unnamed)."""
        result_sets = data.get('resultSets') if isinstance(data, dict) else None
        if not isinstance(result_sets, list):
            raise ProviderResponseError(endpoint=endpoint, expected_format="resultSets table")

        for result_set in result_sets:
            if result_set.get('name') == name:
                return APIResponseProcessor.parse_result_set(result_set)
        if index < len(result_sets):
            return APIResponseProcessor.parse_result_set(result_sets[index])
        return []

    async def _load_player_index(self) -> None:
        async with self.player_index.lock:
            if self.player_index.is_fresh():
                logger.debug("NBA player index HIT")
                return
            await self._build_player_index()

    async def _build_player_index(self) -> None:
        data = await self._make_request('commonallplayers', {
            'LeagueID': NBA_LEAGUE_ID,
            'Season': current_nba_season(),
            'IsOnlyCurrentSeason': 0,
        })

        players = []
        for row in self._rows(data, 'commonallplayers', 'CommonAllPlayers'):
            last_first = row.get('display_last_comma_first') or ''
            last_name, _, first_name = last_first.partition(', ')
            players.append(PlayerSummary(
                id=str(row.get('person_id')),
                full_name=row.get('display_first_last') or '',
                league=self.league,
                first_name=first_name or None,
                last_name=last_name or None,
                is_active=row.get('rosterstatus') == 1,
                team_name=row.get('team_name') or None,
            ))

        self.player_index.replace(players)
        logger.info(f"Loaded {len(players)} NBA players into the search index")

    async def search_players(self, name: str, **options: Any) -> List[PlayerSummary]:
        """Substring search over the league-wide player list, active players first."""
        await self._load_player_index()
        matches = self.player_index.search(name)
        return sorted(matches, key=lambda player: (not player.is_active, player.full_name))

    async def get_player_stats(
        self,
        player_id: Any,
        season: Optional[Any] = None,
        game_type: Optional[str] = None,
        stats_type: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Fetch regular-season totals for one player.

        Without a season (or with ``"career"``) the career totals row is used;
        otherwise the row of the requested season. A season the player has no
        row for yields zero totals.
        """
        career = season is None or str(season).strip().lower() == 'career'
        label = 'Career' if career else normalize_season(season)

        endpoint = 'playercareerstats'
        params = {'PlayerID': player_id, 'PerMode': 'Totals', 'LeagueID': NBA_LEAGUE_ID}
        try:
            data = await self._make_request(endpoint, params)
        except ProviderNotFoundError as e:
            raise PlayerNotFoundError(
                player_id=player_id, league=self.league.value, context=e.context, original_error=e
            ) from e

        season_rows = self._rows(data, endpoint, 'SeasonTotalsRegularSeason', 0)
        career_rows = self._rows(data, endpoint, 'CareerTotalsRegularSeason', 1)
        if not season_rows and not career_rows:
            raise PlayerNotFoundError(
                player_id=player_id,
                league=self.league.value,
                context=ErrorContext(operation="get_player_stats", league=self.league.value,
                                     endpoint=endpoint, parameters=params)
            )

        if career:
            totals = career_rows[0] if career_rows else season_rows[-1]
        else:
            totals = next((row for row in season_rows if row.get('season_id') == label), None)
            if totals is None:
                logger.warning(f"No {label} row for NBA player {player_id}; using zero totals")
                totals = {}

        document = {'playerId': str(player_id), 'season': label}
        document.update({field: totals.get(field) or 0 for field in TOTALS_FIELDS})

        full_name = self.player_index.name_for(player_id)
        if full_name:
            document['fullName'] = full_name
        return document

    async def get_teams(self) -> List[TeamSummary]:
        """Get current NBA franchises."""
        data = await self._make_request('commonteamyears', {'LeagueID': NBA_LEAGUE_ID})
        recent = datetime.now().year - 1

        teams = []
        for row in self._rows(data, 'commonteamyears', 'TeamYears'):
            abbreviation = row.get('abbreviation')
            try:
                max_year = int(row.get('max_year') or 0)
            except (TypeError, ValueError):
                max_year = 0
            if abbreviation and max_year >= recent:
                teams.append(TeamSummary(id=str(row.get('team_id')), name=abbreviation, abbreviation=abbreviation))
        return teams

    async def get_team_info(self, team_id: Any) -> TeamSummary:
        """Get a single NBA team."""
        endpoint = 'teaminfocommon'
        try:
            data = await self._make_request(endpoint, {
                'TeamID': team_id,
                'Season': current_nba_season(),
                'LeagueID': NBA_LEAGUE_ID,
            })
        except ProviderNotFoundError as e:
            raise TeamNotFoundError(team_id=team_id, league=self.league.value, context=e.context) from e

        rows = self._rows(data, endpoint, 'TeamInfoCommon')
        if not rows:
            raise TeamNotFoundError(team_id=team_id, league=self.league.value)

        team = rows[0]
        return TeamSummary(
            id=str(team.get('team_id', team_id)),
            name=team.get('team_name', ''),
            abbreviation=team.get('team_abbreviation'),
            city=team.get('team_city'),
        )

    async def get_schedule(
        self,
        start_date: str,
        end_date: Optional[str] = None,
        team_id: Optional[Any] = None,
        **options: Any
    ) -> List[GameSummary]:
        """Get the scoreboard for ``start_date``; the scoreboard covers a single day."""
        endpoint = 'scoreboardv2'
        data = await self._make_request(endpoint, {
            'GameDate': start_date,
            'LeagueID': NBA_LEAGUE_ID,
            'DayOffset': 0,
        })

        line_scores = self._line_scores(self._rows(data, endpoint, 'LineScore', 1))
        games = [
            self._game_from_row(row, line_scores)
            for row in self._rows(data, endpoint, 'GameHeader', 0)
        ]
        if team_id is not None:
            wanted = str(team_id)
            games = [game for game in games if wanted in (game.home_team.id, game.away_team.id)]
        return games

    async def get_game(self, game_id: Any) -> GameSummary:
        """Get a single game from its box score summary."""
        endpoint = 'boxscoresummaryv2'
        try:
            data = await self._make_request(endpoint, {'GameID': game_id})
        except ProviderNotFoundError as e:
            raise GameNotFoundError(game_id=game_id, league=self.league.value, context=e.context) from e

        rows = self._rows(data, endpoint, 'GameSummary', 0)
        if not rows:
            raise GameNotFoundError(game_id=game_id, league=self.league.value)

        line_scores = self._line_scores(self._rows(data, endpoint, 'LineScore', 5))
        return self._game_from_row(rows[0], line_scores)

    @staticmethod
    def _line_scores(rows: List[Dict[str, Any]]) -> Dict[tuple, Dict[str, Any]]:
        return {(str(row.get('game_id')), str(row.get('team_id'))): row for row in rows}

    @staticmethod
    def _game_from_row(row: Dict[str, Any], line_scores: Dict[tuple, Dict[str, Any]]) -> GameSummary:
        game_id = str(row.get('game_id'))
        home_id = str(row.get('home_team_id'))
        away_id = str(row.get('visitor_team_id'))
        home_line = line_scores.get((game_id, home_id), {})
        away_line = line_scores.get((game_id, away_id), {})

        return GameSummary(
            id=game_id,
            game_date=row.get('game_date_est', ''),
            home_team=TeamSummary(
                id=home_id,
                name=home_line.get('team_name') or home_line.get('team_abbreviation') or '',
                abbreviation=home_line.get('team_abbreviation'),
                city=home_line.get('team_city_name'),
            ),
            away_team=TeamSummary(
                id=away_id,
                name=away_line.get('team_name') or away_line.get('team_abbreviation') or '',
                abbreviation=away_line.get('team_abbreviation'),
                city=away_line.get('team_city_name'),
            ),
            status=(row.get('game_status_text') or '').strip() or 'Scheduled',
            home_score=home_line.get('pts'),
            away_score=away_line.get('pts'),
        )
