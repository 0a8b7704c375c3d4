"""
NFL client backed by ESPN's public site and core APIs.
ESPN has no player search endpoint, so names are resolved against an index
built from every team roster.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ...config.settings import settings
from ...core.exceptions import (
    ProviderNotFoundError, ProviderTransportError,
    PlayerNotFoundError, TeamNotFoundError, GameNotFoundError, InvalidSeasonError
)
from ...core.utils import APIResponseProcessor
from ...domain.models.base import League
from ...domain.models.player import PlayerSummary
from ...domain.models.team import TeamSummary
from ...domain.models.game import GameSummary
from .base_client import SportAPIClient, PlayerIndex

logger = logging.getLogger(__name__)

NFL_TEAM_IDS = tuple(range(1, 31)) + (33, 34)
REGULAR_SEASON_TYPE = 2
MAX_SEARCH_RESULTS = 20


def current_nfl_season(today: Optional[datetime] = None) -> int:
    """Year the current (or most recently completed) season started in."""
    today = today or datetime.now()
    return today.year if today.month >= 8 else today.year - 1


def season_year(season: Optional[Any]) -> int:
    """
    Start year of an NFL season; ``None`` means the current season.

    ESPN splits statistics by season, so ``"career"`` and other labels are
    rejected rather than guessed.
    """
    if season is None:
        return current_nfl_season()
    text = str(season).strip()
    if len(text) != 4 or not text.isdigit():
        raise InvalidSeasonError(season, league=League.NFL.value, expected="a season start year such as 2024")
    return int(text)


def espn_date(value: str) -> str:
    """``2024-09-08`` -> ``20240908``; already compact dates pass through."""
    if len(value) == 8 and value.isdigit():
        return value
    return datetime.strptime(value, '%Y-%m-%d').strftime('%Y%m%d')


class NFLAPIClient(SportAPIClient):
    """Client for ESPN's NFL endpoints."""

    league = League.NFL

    def __init__(self, base_url: Optional[str] = None, core_base_url: Optional[str] = None, **kwargs):
        super().__init__(base_url=base_url, **kwargs)
        self.core_base_url = (core_base_url or settings.nfl_core_base_url).rstrip('/')
        self.player_index = PlayerIndex(ttl=settings.player_index_ttl)

    async def get_team_roster(self, team_id: Any) -> Dict[str, Any]:
        """Raw roster document for one team."""
        return await self._make_request(f'/teams/{team_id}/roster')

    async def _load_player_index(self) -> None:
        async with self.player_index.lock:
            if self.player_index.is_fresh():
                logger.debug("NFL player index HIT")
                return
            await self._build_player_index()

    async def _build_player_index(self) -> None:
        """
        Rebuild the index from every team roster.

        Individual roster failures are skipped. If no roster loads at all the
        last transport error is raised and the index stays stale, so the next
        search tries again.
        """
        logger.info(f"Loading NFL player index from {len(NFL_TEAM_IDS)} team rosters")
        players = []
        loaded = 0
        last_error: Optional[ProviderTransportError] = None
        for team_id in NFL_TEAM_IDS:
            try:
                roster = await self.get_team_roster(team_id)
            except ProviderTransportError as e:
                logger.warning(f"Skipping roster for NFL team {team_id}: {e}")
                last_error = e
                continue
            loaded += 1

            team_name = APIResponseProcessor.safe_extract(roster, 'team', 'displayName')
            for group in APIResponseProcessor.safe_extract(roster, 'athletes', default=[]):
                for athlete in group.get('items') or []:
                    if 'id' not in athlete:
                        continue
                    players.append(PlayerSummary(
                        id=str(athlete['id']),
                        full_name=athlete.get('fullName') or athlete.get('displayName') or '',
                        league=self.league,
                        first_name=athlete.get('firstName'),
                        last_name=athlete.get('lastName'),
                        is_active=True,
                        position=APIResponseProcessor.safe_extract(athlete, 'position', 'abbreviation'),
                        team_name=team_name,
                    ))

        if not loaded and last_error is not None:
            logger.error("No NFL roster could be loaded; player index left stale")
            raise last_error

        self.player_index.replace(players)
        logger.info(f"Loaded {len(players)} NFL players from {loaded} rosters into the search index")

    async def search_players(self, name: str, **options: Any) -> List[PlayerSummary]:
        """Substring search over rostered players, capped at 20 hits."""
        await self._load_player_index()
        return self.player_index.search(name)[:MAX_SEARCH_RESULTS]

    async def get_player_stats(
        self,
        player_id: Any,
        season: Optional[Any] = None,
        game_type: Optional[str] = None,
        stats_type: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Fetch a player's regular-season statistics from the core API.

        Returns:
            ``{"playerId", "playerName", "splits", "season"}`` where ``splits``
            holds ESPN's ``categories[].stats[]`` document.
        """
        year = season_year(season)
        endpoint = f'/seasons/{year}/types/{REGULAR_SEASON_TYPE}/athletes/{player_id}/statistics/0'

        try:
            data = await self._make_request(
                endpoint, {'lang': 'en', 'region': 'us'}, base_url=self.core_base_url
            )
        except ProviderNotFoundError as e:
            raise PlayerNotFoundError(
                player_id=player_id,
                league=self.league.value,
                context=e.context,
                original_error=e
            ) from e

        return {
            'playerId': str(player_id),
            'playerName': self.player_index.name_for(player_id) or f"Player {player_id}",
            'splits': APIResponseProcessor.safe_extract(data, 'splits', default={}),
            'season': APIResponseProcessor.safe_extract(data, 'season', default={'year': year}),
        }

    async def get_teams(self) -> List[TeamSummary]:
        """Get all NFL teams."""
        data = await self._make_request('/teams')
        wrappers = APIResponseProcessor.safe_extract(data, 'sports', 0, 'leagues', 0, 'teams', default=[])
        return [self._team_from_api(wrapper.get('team') or {}) for wrapper in wrappers]

    async def get_team_info(self, team_id: Any) -> TeamSummary:
        """Get a single NFL team."""
        try:
            data = await self._make_request(f'/teams/{team_id}')
        except ProviderNotFoundError as e:
            raise TeamNotFoundError(team_id=team_id, league=self.league.value, context=e.context) from e

        team = APIResponseProcessor.safe_extract(data, 'team')
        if not team:
            raise TeamNotFoundError(team_id=team_id, league=self.league.value)
        return self._team_from_api(team)

    async def get_schedule(
        self,
        start_date: str,
        end_date: Optional[str] = None,
        team_id: Optional[Any] = None,
        **options: Any
    ) -> List[GameSummary]:
        """
        Get scoreboard events for a date (or date range).

        Options:
            week: NFL week number (1-18 in the regular season).
            season_type: 1=preseason, 2=regular, 3=postseason. Defaults to 2
                when a week is given.
        """
        dates = espn_date(start_date)
        if end_date and end_date != start_date:
            dates = f"{dates}-{espn_date(end_date)}"

        params = {'dates': dates}
        if options.get('week'):
            params['seasontype'] = options.get('season_type') or REGULAR_SEASON_TYPE
            params['week'] = options['week']

        data = await self._make_request('/scoreboard', params)

        games = []
        for event in APIResponseProcessor.safe_extract(data, 'events', default=[]):
            competition = APIResponseProcessor.safe_extract(event, 'competitions', 0)
            if not competition:
                continue
            games.append(self._game_from_competition(event.get('id'), event.get('date', ''), competition, 'Scheduled'))

        if team_id is not None:
            wanted = str(team_id)
            games = [game for game in games if wanted in (game.home_team.id, game.away_team.id)]
        return games

    async def get_game(self, game_id: Any) -> GameSummary:
        """Get a game from the event summary."""
        try:
            data = await self._make_request('/summary', {'event': game_id})
        except ProviderNotFoundError as e:
            raise GameNotFoundError(game_id=game_id, league=self.league.value, context=e.context) from e

        header = APIResponseProcessor.safe_extract(data, 'header')
        competition = APIResponseProcessor.safe_extract(header, 'competitions', 0)
        if not competition:
            raise GameNotFoundError(game_id=game_id, league=self.league.value)

        return self._game_from_competition(
            header.get('id', game_id), competition.get('date', ''), competition, 'Unknown'
        )

    @classmethod
    def _game_from_competition(
        cls,
        event_id: Any,
        game_date: str,
        competition: Dict[str, Any],
        default_status: str
    ) -> GameSummary:
        competitors = competition.get('competitors') or []
        home = next((c for c in competitors if c.get('homeAway') == 'home'), {})
        away = next((c for c in competitors if c.get('homeAway') == 'away'), {})

        return GameSummary(
            id=str(event_id),
            game_date=game_date,
            home_team=cls._team_from_api(home.get('team') or {}),
            away_team=cls._team_from_api(away.get('team') or {}),
            status=APIResponseProcessor.safe_extract(competition, 'status', 'type', 'description', default=default_status),
            home_score=home.get('score'),
            away_score=away.get('score'),
        )

    @staticmethod
    def _team_from_api(team: Dict[str, Any]) -> TeamSummary:
        return TeamSummary(
            id=str(team.get('id', '')),
            name=team.get('displayName') or 'TBD',
            abbreviation=team.get('abbreviation'),
            city=team.get('location'),
        )
