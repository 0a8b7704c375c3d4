"""
MLB Stats API client.
Fetches people, season/career stats, teams, schedules and live game feeds
from statsapi.mlb.com.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ...config.settings import settings
from ...core.exceptions import (
    ErrorContext, ProviderNotFoundError, PlayerNotFoundError,
    TeamNotFoundError, GameNotFoundError
)
from ...core.utils import APIResponseProcessor
from ...domain.models.base import League
from ...domain.models.player import PlayerSummary
from ...domain.models.team import TeamSummary
from ...domain.models.game import GameSummary
from .base_client import SportAPIClient

logger = logging.getLogger(__name__)

# Requested together so hitting, pitching and fielding arrive as separate sections
STAT_GROUPS = "hitting,pitching,fielding"
MLB_SPORT_ID = 1


class MLBAPIClient(SportAPIClient):
    """Client for the public MLB Stats API."""

    league = League.MLB

    def __init__(self, base_url: Optional[str] = None, live_base_url: Optional[str] = None, **kwargs):
        super().__init__(base_url=base_url, **kwargs)
        self.live_base_url = (live_base_url or settings.mlb_live_base_url).rstrip('/')

    async def search_players(self, name: str, **options: Any) -> List[PlayerSummary]:
        """Search people by name via ``/people/search``."""
        data = await self._make_request('/people/search', {'q': name})
        people = APIResponseProcessor.safe_extract(data, 'people', default=[])

        return [
            PlayerSummary(
                id=str(person['id']),
                full_name=person.get('fullName', ''),
                league=self.league,
                first_name=person.get('firstName'),
                last_name=person.get('lastName'),
                is_active=person.get('active'),
                position=APIResponseProcessor.safe_extract(person, 'primaryPosition', 'abbreviation'),
            )
            for person in people
            if 'id' in person
        ]

    async def get_player_stats(
        self,
        player_id: Any,
        season: Optional[Any] = None,
        game_type: Optional[str] = None,
        stats_type: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Fetch a player's stat sections.

        ``season="career"`` (or ``stats_type="career"``) requests career totals;
        otherwise season totals for ``season`` (default: current year).

        Returns:
            ``{"player": {...}, "stats": [{"type", "group", "stats"}, ...]}``
            with one entry per stat group the provider returned.
        """
        if isinstance(season, str) and season.lower() == 'career':
            stats_type, season = 'career', None
        stats_type = stats_type or 'season'

        params = {
            'stats': stats_type,
            'group': STAT_GROUPS,
            'gameType': game_type or 'R',
        }
        if stats_type == 'season':
            params['season'] = season or datetime.now().year

        endpoint = f'/people/{player_id}/stats'
        try:
            data = await self._make_request(endpoint, params)
        except ProviderNotFoundError as e:
            raise PlayerNotFoundError(
                player_id=player_id,
                league=self.league.value,
                context=e.context,
                original_error=e
            ) from e

        sections = APIResponseProcessor.safe_extract(data, 'stats', default=[])
        if not sections:
            raise PlayerNotFoundError(
                player_id=player_id,
                league=self.league.value,
                context=ErrorContext(operation="get_player_stats", league=self.league.value,
                                     endpoint=endpoint, parameters=params)
            )

        player = None
        for section in sections:
            for split in section.get('splits') or []:
                if split.get('player'):
                    player = split['player']
                    break
            if player:
                break
        player = player or {'id': player_id}

        return {
            'player': {
                'id': player.get('id', player_id),
                'fullName': player.get('fullName'),
                'primaryPosition': {
                    'code': APIResponseProcessor.safe_extract(player, 'primaryPosition', 'code', default=''),
                    'name': APIResponseProcessor.safe_extract(player, 'primaryPosition', 'name', default=''),
                    'type': APIResponseProcessor.safe_extract(player, 'primaryPosition', 'type', default=''),
                },
            },
            'stats': [
                {
                    'type': {'displayName': APIResponseProcessor.safe_extract(section, 'type', 'displayName', default='Unknown')},
                    'group': {'displayName': APIResponseProcessor.safe_extract(section, 'group', 'displayName', default='Unknown')},
                    'stats': APIResponseProcessor.safe_extract(section, 'splits', 0, 'stat', default={}),
                }
                for section in sections
            ],
        }

    async def get_teams(self) -> List[TeamSummary]:
        """Get all MLB teams."""
        data = await self._make_request('/teams', {'sportId': MLB_SPORT_ID})
        return [self._team_from_api(team) for team in APIResponseProcessor.safe_extract(data, 'teams', default=[])]

    async def get_team_info(self, team_id: Any) -> TeamSummary:
        """Get a single MLB team."""
        try:
            data = await self._make_request(f'/teams/{team_id}')
        except ProviderNotFoundError as e:
            raise TeamNotFoundError(team_id=team_id, league=self.league.value, context=e.context) from e

        teams = APIResponseProcessor.safe_extract(data, 'teams', default=[])
        if not teams:
            raise TeamNotFoundError(team_id=team_id, league=self.league.value)
        return self._team_from_api(teams[0])

    async def get_schedule(
        self,
        start_date: str,
        end_date: Optional[str] = None,
        team_id: Optional[Any] = None,
        **options: Any
    ) -> List[GameSummary]:
        """Get games between two dates, flattened across schedule dates."""
        params = {
            'sportId': MLB_SPORT_ID,
            'startDate': start_date,
            'endDate': end_date or start_date,
            'teamId': team_id,
            'gameType': options.get('game_type'),
            'hydrate': 'team,linescore',
        }
        data = await self._make_request('/schedule', params)

        games = []
        for schedule_date in APIResponseProcessor.safe_extract(data, 'dates', default=[]):
            for game in schedule_date.get('games') or []:
                games.append(GameSummary(
                    id=str(game.get('gamePk')),
                    game_date=game.get('gameDate', ''),
                    home_team=self._team_from_api(APIResponseProcessor.safe_extract(game, 'teams', 'home', 'team', default={})),
                    away_team=self._team_from_api(APIResponseProcessor.safe_extract(game, 'teams', 'away', 'team', default={})),
                    status=APIResponseProcessor.safe_extract(game, 'status', 'detailedState', default='Scheduled'),
                    home_score=APIResponseProcessor.safe_extract(game, 'teams', 'home', 'score'),
                    away_score=APIResponseProcessor.safe_extract(game, 'teams', 'away', 'score'),
                ))
        return games

    async def get_game(self, game_id: Any) -> GameSummary:
        """Get a game from the live feed."""
        try:
            data = await self._make_request(f'/game/{game_id}/feed/live', base_url=self.live_base_url)
        except ProviderNotFoundError as e:
            raise GameNotFoundError(game_id=game_id, league=self.league.value, context=e.context) from e

        game_data = APIResponseProcessor.safe_extract(data, 'gameData', default={})
        linescore = APIResponseProcessor.safe_extract(data, 'liveData', 'linescore', 'teams', default={})

        return GameSummary(
            id=str(data.get('gamePk', game_id)),
            game_date=APIResponseProcessor.safe_extract(game_data, 'datetime', 'dateTime', default=''),
            home_team=self._team_from_api(APIResponseProcessor.safe_extract(game_data, 'teams', 'home', default={})),
            away_team=self._team_from_api(APIResponseProcessor.safe_extract(game_data, 'teams', 'away', default={})),
            status=APIResponseProcessor.safe_extract(game_data, 'status', 'detailedState', default='Unknown'),
            home_score=APIResponseProcessor.safe_extract(linescore, 'home', 'runs', default=0),
            away_score=APIResponseProcessor.safe_extract(linescore, 'away', 'runs', default=0),
        )

    @staticmethod
    def _team_from_api(team: Dict[str, Any]) -> TeamSummary:
        return TeamSummary(
            id=str(team.get('id', '')),
            name=team.get('name', ''),
            abbreviation=team.get('abbreviation'),
            city=team.get('locationName'),
        )
