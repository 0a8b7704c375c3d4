"""
Sports data service: the entry point used by the CLI and other callers.
Owns the client and engine registries for one process.
"""

from typing import Any, List, Optional, Union

from ...adapters.external.client_factory import ClientRegistry
from ...core.utils import LoggerFactory
from ..models.base import League
from ..models.comparison import ComparisonResult
from ..models.game import GameSummary
from ..models.player import PlayerSummary
from ..models.team import TeamSummary
from .comparison_service import ComparisonRegistry

logger = LoggerFactory.get_logger(__name__)

LeagueLike = Union[str, League]


class SportsDataService:
    """
    Facade over the per-league clients and comparison engines.

    Build one per process (or per test) and close it with ``aclose`` or by
    using it as an async context manager.
    """

    def __init__(
        self,
        clients: Optional[ClientRegistry] = None,
        comparisons: Optional[ComparisonRegistry] = None
    ):
        self.clients = clients or ClientRegistry()
        self.comparisons = comparisons or ComparisonRegistry(self.clients)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.clients.aclose()

    def list_supported_leagues(self) -> List[str]:
        return self.comparisons.list_supported_leagues()

    async def compare(
        self,
        league: LeagueLike,
        player1_id: Any,
        player2_id: Any,
        season: Optional[Any] = None,
        stat_group: Optional[str] = None
    ) -> ComparisonResult:
        """Compare two players by provider id."""
        engine = self.comparisons.get_engine(league)
        return await engine.compare_players(player1_id, player2_id, season=season, stat_group=stat_group)

    async def search_player(self, league: LeagueLike, name: str) -> str:
        """Best-match player id for ``name``; raises ``PlayerNotFoundError`` when nothing matches."""
        return await self.comparisons.get_engine(league).search_player(name)

    async def search_players(self, league: LeagueLike, name: str) -> List[PlayerSummary]:
        """All candidates for ``name`` so callers can disambiguate."""
        return await self.comparisons.get_engine(league).search_candidates(name)

    def format_comparison(self, result: ComparisonResult) -> str:
        return self.comparisons.get_engine(result.league).format_comparison_result(result)

    async def get_teams(self, league: LeagueLike) -> List[TeamSummary]:
        return await self.clients.get_client(league).get_teams()

    async def get_team_info(self, league: LeagueLike, team_id: Any) -> TeamSummary:
        return await self.clients.get_client(league).get_team_info(team_id)

    async def get_schedule(
        self,
        league: LeagueLike,
        start_date: str,
        end_date: Optional[str] = None,
        team_id: Optional[Any] = None,
        **options: Any
    ) -> List[GameSummary]:
        return await self.clients.get_client(league).get_schedule(
            start_date, end_date=end_date, team_id=team_id, **options
        )

    async def get_game(self, league: LeagueLike, game_id: Any) -> GameSummary:
        return await self.clients.get_client(league).get_game(game_id)
