"""
Head-to-head comparison service.
One engine class serves every league; the league-specific parts come from
the ``LeagueStrategy`` it is built with.
"""

import asyncio
from typing import Any, Awaitable, Dict, List, Optional, Sequence, Tuple, Union

from ...adapters.external.base_client import SportAPIClient
from ...adapters.external.client_factory import ClientRegistry
from ...core.error_handler import error_handler
from ...core.exceptions import ErrorContext, PlayerNotFoundError, UnsupportedLeagueError
from ...core.utils import LoggerFactory
from ..models.base import League
from ..models.comparison import (
    ComparisonResult, ComparisonRow, Metric, PlayerStatLine, StatMap, Winner
)
from ..models.player import PlayerSummary
from .strategies import LeagueStrategy, STRATEGIES, get_strategy

logger = LoggerFactory.get_logger(__name__)

RULE = "=" * 80


def compare_stats(stats1: StatMap, stats2: StatMap, metrics: Sequence[Metric]) -> Tuple[ComparisonRow, ...]:
    """One row per metric, in metric order. Missing values count as 0."""
    rows = []
    for metric in metrics:
        value1 = stats1.get(metric.key, 0.0)
        value2 = stats2.get(metric.key, 0.0)

        if value1 > value2:
            winner = Winner.PLAYER1 if metric.higher_is_better else Winner.PLAYER2
        elif value2 > value1:
            winner = Winner.PLAYER2 if metric.higher_is_better else Winner.PLAYER1
        else:
            winner = Winner.TIE

        rows.append(ComparisonRow(
            category=metric.name,
            player1_value=value1,
            player2_value=value2,
            winner=winner,
            difference=abs(value1 - value2),
        ))
    return tuple(rows)


def determine_winner(rows: Sequence[ComparisonRow]) -> Tuple[Winner, int, int]:
    """
    Overall winner by strict majority of row wins.
    Tied rows count for neither side; equal counts (including 0-0) are a tie.
    """
    player1_wins = sum(1 for row in rows if row.winner is Winner.PLAYER1)
    player2_wins = sum(1 for row in rows if row.winner is Winner.PLAYER2)

    if player1_wins > player2_wins:
        overall = Winner.PLAYER1
    elif player2_wins > player1_wins:
        overall = Winner.PLAYER2
    else:
        overall = Winner.TIE
    return overall, player1_wins, player2_wins


def generate_summary(
    player1_name: str,
    player2_name: str,
    player1_wins: int,
    player2_wins: int,
    stat_group: Optional[str] = None
) -> str:
    group_text = f" {stat_group}" if stat_group else ""
    decided = player1_wins + player2_wins

    if player1_wins > player2_wins:
        return f"{player1_name} leads in {player1_wins} of {decided} key{group_text} categories."
    if player2_wins > player1_wins:
        return f"{player2_name} leads in {player2_wins} of {decided} key{group_text} categories."
    return f"{player1_name} and {player2_name} are tied in key{group_text} categories."


async def _gather_or_cancel(*awaitables: Awaitable[Any]) -> List[Any]:
    """
    ``asyncio.gather`` that does not leave siblings running on failure.
    The first error is raised once the remaining fetches are cancelled and
    their outcomes collected.
    """
    tasks = [asyncio.ensure_future(awaitable) for awaitable in awaitables]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def _format_value(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip('0').rstrip('.')


class ComparisonEngine:
    """
    Compares two players of one league.

    The engine keeps no per-request state, so one instance can serve
    concurrent comparisons.
    """

    def __init__(self, client: SportAPIClient, strategy: LeagueStrategy):
        if client.league is not strategy.league:
            raise ValueError(
                f"Client league {client.league.value} does not match strategy league {strategy.league.value}"
            )
        self.client = client
        self.strategy = strategy

    @property
    def league(self) -> League:
        return self.strategy.league

    def get_metrics(self, stat_group: Optional[str] = None) -> Tuple[Metric, ...]:
        return tuple(self.strategy.get_metrics(stat_group))

    @error_handler.with_error_context("compare_players")
    async def compare_players(
        self,
        player1_id: Any,
        player2_id: Any,
        season: Optional[Any] = None,
        stat_group: Optional[str] = None
    ) -> ComparisonResult:
        """
        Compare two players.

        Both stat documents are fetched concurrently and the comparison only
        proceeds once both have arrived; a failure for either player (such as
        ``PlayerNotFoundError``) propagates and no result is produced.

        Args:
            player1_id: Provider id of the first player
            player2_id: Provider id of the second player
            season: Season to compare (league default when omitted)
            stat_group: League-specific stat group (hitting, QB, ...)

        Returns:
            ComparisonResult with one row per metric of the stat group
        """
        request = self.strategy.stats_request(season)
        logger.info(
            f"Comparing {self.league.value} players {player1_id} and {player2_id} "
            f"(season={season}, stat_group={stat_group})"
        )

        raw1, raw2 = await _gather_or_cancel(
            self.client.get_player_stats(player1_id, **request),
            self.client.get_player_stats(player2_id, **request),
        )

        stats1 = self.strategy.extract_stats(raw1, stat_group)
        stats2 = self.strategy.extract_stats(raw2, stat_group)
        rows = compare_stats(stats1, stats2, self.get_metrics(stat_group))
        overall, player1_wins, player2_wins = determine_winner(rows)

        name1 = self.strategy.get_player_name(raw1, player1_id)
        name2 = self.strategy.get_player_name(raw2, player2_id)

        return ComparisonResult(
            league=self.league,
            player1=PlayerStatLine(id=str(player1_id), name=name1, stats=stats1),
            player2=PlayerStatLine(id=str(player2_id), name=name2, stats=stats2),
            rows=rows,
            overall_winner=overall,
            player1_wins=player1_wins,
            player2_wins=player2_wins,
            summary=generate_summary(name1, name2, player1_wins, player2_wins, stat_group),
            stat_group=stat_group,
        )

    async def search_candidates(self, name: str) -> List[PlayerSummary]:
        """Every player matching ``name``, in provider order."""
        return await self.client.search_players(name)

    async def search_player(self, name: str) -> str:
        """
        Resolve a name to a single player id.

        The first candidate wins. When several players match, a warning names
        the one picked; use ``search_candidates`` to choose explicitly.
        """
        candidates = await self.search_candidates(name)
        if not candidates:
            raise PlayerNotFoundError(
                player_name=name,
                league=self.league.value,
                context=ErrorContext(operation="search_player", league=self.league.value,
                                     parameters={'name': name})
            )

        if len(candidates) > 1:
            logger.warning(
                f"Found {len(candidates)} {self.league.value} players matching '{name}', "
                f"using first match: {candidates[0].full_name} ({candidates[0].id})"
            )
        return candidates[0].id

    @staticmethod
    def format_comparison_result(result: ComparisonResult) -> str:
        """Plain-text report of a comparison."""
        name1, name2 = result.player1.name, result.player2.name
        winners = {Winner.PLAYER1: name1, Winner.PLAYER2: name2, Winner.TIE: "TIE"}

        lines = ["", RULE, f"PLAYER COMPARISON: {name1} vs {name2}", RULE, ""]
        for row in result.rows:
            lines.extend([
                f"{row.category}:",
                f"  {name1}: {_format_value(row.player1_value)}",
                f"  {name2}: {_format_value(row.player2_value)}",
                f"  Winner: {winners[row.winner]}",
                "",
            ])
        lines.extend([RULE, f"SUMMARY: {result.summary}", RULE, ""])
        return "\n".join(lines)


class ComparisonRegistry:
    """
    League -> engine registry.
    Each engine is wired to the client the ``ClientRegistry`` hands out for
    its league and is reused until ``reset``.
    """

    def __init__(self, clients: ClientRegistry, strategies: Optional[Dict[League, LeagueStrategy]] = None):
        self.clients = clients
        self._strategies = dict(strategies or STRATEGIES)
        self._engines: Dict[League, ComparisonEngine] = {}

    def get_engine(self, league: Union[str, League]) -> ComparisonEngine:
        """Return the cached engine for ``league``, building it on first use."""
        resolved = League.from_value(league)
        if not self.is_supported(resolved):
            raise UnsupportedLeagueError(resolved.value, supported_leagues=self.list_supported_leagues())

        engine = self._engines.get(resolved)
        if engine is None:
            strategy = self._strategies.get(resolved) or get_strategy(resolved)
            engine = ComparisonEngine(self.clients.get_client(resolved), strategy)
            self._engines[resolved] = engine
        return engine

    def is_supported(self, league: Union[str, League]) -> bool:
        try:
            resolved = League.from_value(league)
        except UnsupportedLeagueError:
            return False
        return resolved in self._strategies and self.clients.is_supported(resolved)

    def list_supported_leagues(self) -> List[str]:
        return [league.value for league in League if self.is_supported(league)]

    def reset(self) -> None:
        """Forget every cached engine."""
        self._engines.clear()
