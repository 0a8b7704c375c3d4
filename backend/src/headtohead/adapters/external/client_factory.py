"""
League -> client registry.
Holds at most one live client per league for the lifetime of the registry.
"""
import logging
from typing import Callable, Dict, List, Union

from ...core.exceptions import UnsupportedLeagueError
from ...domain.models.base import League
from .base_client import SportAPIClient
from .mlb_client import MLBAPIClient
from .nba_client import NBAAPIClient
from .nfl_client import NFLAPIClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], SportAPIClient]

DEFAULT_CLIENT_FACTORIES: Dict[League, ClientFactory] = {
    League.MLB: MLBAPIClient,
    League.NBA: NBAAPIClient,
    League.NFL: NFLAPIClient,
}


class ClientRegistry:
    """
    Lazily constructs and caches one client per league.

    Build one registry at startup and pass it to whatever needs clients;
    ``get_client`` returns the same instance until ``reset`` is called.
    """

    def __init__(self, factories: Dict[League, ClientFactory] = None):
        self._factories: Dict[League, ClientFactory] = dict(factories or DEFAULT_CLIENT_FACTORIES)
        self._clients: Dict[League, SportAPIClient] = {}

    def _resolve(self, league: Union[str, League]) -> League:
        try:
            resolved = League.from_value(league)
        except UnsupportedLeagueError:
            raise UnsupportedLeagueError(str(league), supported_leagues=self.list_supported_leagues()) from None
        if resolved not in self._factories:
            raise UnsupportedLeagueError(resolved.value, supported_leagues=self.list_supported_leagues())
        return resolved

    def get_client(self, league: Union[str, League]) -> SportAPIClient:
        """Return the cached client for ``league``, constructing it on first use."""
        resolved = self._resolve(league)
        client = self._clients.get(resolved)
        if client is None:
            logger.debug(f"Creating {resolved.value} client")
            client = self._factories[resolved]()
            self._clients[resolved] = client
        return client

    def is_supported(self, league: Union[str, League]) -> bool:
        try:
            return League.from_value(league) in self._factories
        except UnsupportedLeagueError:
            return False

    def list_supported_leagues(self) -> List[str]:
        return [league.value for league in League if league in self._factories]

    def register(self, league: Union[str, League], factory: ClientFactory) -> None:
        """Install a client constructor for ``league``, dropping any cached instance."""
        resolved = League.from_value(league)
        self._factories[resolved] = factory
        self._clients.pop(resolved, None)

    def reset(self) -> None:
        """Forget every cached client. Sessions are not closed; use ``aclose`` for that."""
        self._clients.clear()

    async def aclose(self) -> None:
        """Close the HTTP sessions of every live client and forget them."""
        for client in list(self._clients.values()):
            await client.close()
        self._clients.clear()
