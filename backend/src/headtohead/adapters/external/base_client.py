"""
Base sport API client.
Defines the contract every league client implements and the shared aiohttp
request machinery: URL building, client-local rate limiting and mapping of
transport failures onto the provider exception taxonomy.
"""
import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import aiohttp

from ...config.settings import settings
from ...core.exceptions import (
    ErrorContext, ProviderConnectionError, ProviderTimeoutError,
    ProviderNotFoundError, ProviderHTTPError, ProviderResponseError
)
from ...domain.models.base import League
from ...domain.models.player import PlayerSummary
from ...domain.models.team import TeamSummary
from ...domain.models.game import GameSummary

logger = logging.getLogger(__name__)


class PlayerIndex:
    """
    Client-local list of known players used for name search by providers
    that have no search endpoint. Expires after ``ttl`` seconds.

    Loaders hold ``lock`` while rebuilding so that concurrent searches on a
    stale index trigger a single download.
    """

    def __init__(self, ttl: float):
        self.ttl = ttl
        self._players: List[PlayerSummary] = []
        self._names: Dict[str, str] = {}
        self._expires_at: Optional[float] = None
        self._lock: Optional[asyncio.Lock] = None

    @property
    def lock(self) -> asyncio.Lock:
        # Created on first use so it binds to the running loop
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    def is_fresh(self) -> bool:
        return self._expires_at is not None and time.monotonic() < self._expires_at

    def replace(self, players: List[PlayerSummary]) -> None:
        self._players = list(players)
        self._names = {player.id: player.full_name for player in players}
        self._expires_at = time.monotonic() + self.ttl

    def search(self, query: str) -> List[PlayerSummary]:
        return [player for player in self._players if player.matches(query)]

    def name_for(self, player_id: Any) -> Optional[str]:
        return self._names.get(str(player_id))

    def __len__(self) -> int:
        return len(self._players)


class SportAPIClient(ABC):
    """
    Abstract league client.

    One network call per operation, no response-body caching and no retries:
    a non-2xx status or malformed body surfaces as a provider error carrying
    the endpoint and status code.
    """

    league: League
    extra_headers: Dict[str, str] = {}

    def __init__(
        self,
        base_url: Optional[str] = None,
        request_delay: Optional[float] = None,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None
    ):
        """Initialize the client; the HTTP session is opened lazily."""
        self.base_url = (base_url or settings.league_base_urls[self.league.value]).rstrip('/')
        self.session: Optional[aiohttp.ClientSession] = None

        # Rate-limit bookkeeping lives for as long as the client does
        self.last_request_time = 0.0
        self.min_request_interval = settings.api_request_delay if request_delay is None else request_delay
        self.timeout = settings.request_timeout if timeout is None else timeout
        self.user_agent = user_agent or settings.user_agent

    async def __aenter__(self):
        """Async context manager entry."""
        await self._get_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    def _build_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        headers.update(self.extra_headers)
        return headers

    async def _get_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                headers=self._build_headers(),
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self.session

    async def close(self) -> None:
        """Release the HTTP session, if one is open."""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    async def _throttle(self) -> None:
        if self.min_request_interval > 0:
            time_since_last = time.monotonic() - self.last_request_time
            if time_since_last < self.min_request_interval:
                await asyncio.sleep(self.min_request_interval - time_since_last)
        self.last_request_time = time.monotonic()

    def _build_url(self, endpoint: str, base_url: Optional[str] = None) -> str:
        base = (base_url or self.base_url).rstrip('/')
        return f"{base}/{endpoint.lstrip('/')}"

    async def _make_request(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        base_url: Optional[str] = None
    ) -> Any:
        """Make a single rate-limited GET request and return the parsed JSON body."""
        query = {key: str(value) for key, value in (params or {}).items() if value is not None}
        url = self._build_url(endpoint, base_url)

        context = ErrorContext(
            operation="provider_request",
            league=self.league.value,
            endpoint=endpoint,
            parameters=query or None
        )

        await self._throttle()
        session = await self._get_session()

        logger.info(f"Making request to {url} with params: {query}")

        try:
            async with session.get(url, params=query) as response:
                if response.status == 404:
                    logger.warning(f"Resource not found for {self.league.value}: {endpoint}")
                    raise ProviderNotFoundError(endpoint=endpoint, context=context)

                if not 200 <= response.status < 300:
                    response_data = None
                    try:
                        response_data = await response.json(content_type=None)
                    except ValueError:
                        logger.debug(f"Error body from {url} is not JSON")
                    logger.error(f"Provider error {response.status} for {self.league.value}: {endpoint}")
                    raise ProviderHTTPError(
                        status_code=response.status,
                        endpoint=endpoint,
                        response_data=response_data,
                        context=context
                    )

                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    logger.error(f"Malformed response body from {url}: {e}")
                    raise ProviderResponseError(
                        endpoint=endpoint,
                        status_code=response.status,
                        context=context,
                        original_error=e
                    ) from e

        except asyncio.TimeoutError as e:
            logger.error(f"Request timeout for {self.league.value}: {url}")
            raise ProviderTimeoutError(timeout=self.timeout, endpoint=endpoint, context=context) from e

        except aiohttp.ClientError as e:
            logger.error(f"Connection error for {self.league.value}: {e}")
            raise ProviderConnectionError(url=url, context=context, original_error=e) from e

    def get_client_info(self) -> Dict[str, Any]:
        """Get information about this client."""
        return {
            'client_name': self.__class__.__name__,
            'league': self.league.value,
            'base_url': self.base_url,
            'min_request_interval': self.min_request_interval,
            'timeout': self.timeout,
        }

    # League contract

    @abstractmethod
    async def search_players(self, name: str, **options: Any) -> List[PlayerSummary]:
        """Search players by name; an empty list means no match."""

    @abstractmethod
    async def get_player_stats(
        self,
        player_id: Any,
        season: Optional[Any] = None,
        game_type: Optional[str] = None,
        stats_type: Optional[str] = None
    ) -> Dict[str, Any]:
        """Fetch the raw, league-specific stat document for one player."""

    @abstractmethod
    async def get_teams(self) -> List[TeamSummary]:
        """Get all teams in the league."""

    @abstractmethod
    async def get_team_info(self, team_id: Any) -> TeamSummary:
        """Get a single team."""

    @abstractmethod
    async def get_schedule(
        self,
        start_date: str,
        end_date: Optional[str] = None,
        team_id: Optional[Any] = None,
        **options: Any
    ) -> List[GameSummary]:
        """Get games between two dates (YYYY-MM-DD)."""

    @abstractmethod
    async def get_game(self, game_id: Any) -> GameSummary:
        """Get a single game."""
