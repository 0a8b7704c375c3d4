"""
Command-line entry point.

    headtohead compare mlb 592450 660271 --season 2023 --group hitting
    headtohead compare nba "LeBron James" "Kevin Durant" --by-name
    headtohead search nfl Mahomes
    headtohead teams nba
"""
import argparse
import asyncio
import json
import sys
from typing import List, Optional

from .config.settings import settings
from .core.error_handler import error_handler
from .core.exceptions import HeadToHeadException
from .core.utils import LoggerFactory
from .domain.models.base import League
from .domain.services.sports_service import SportsDataService

logger = LoggerFactory.get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="headtohead", description="Head-to-head player comparisons")
    parser.add_argument("--version", action="version", version=f"%(prog)s {settings.app_version}")
    parser.add_argument("--log-level", dest="log_level", help="Override the configured log level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare_parser = subparsers.add_parser("compare", help="Compare two players")
    compare_parser.add_argument("league", choices=League.values())
    compare_parser.add_argument("player1", help="Player id (or name with --by-name)")
    compare_parser.add_argument("player2", help="Player id (or name with --by-name)")
    compare_parser.add_argument("--season", help="Season year, NBA season label, or 'career' (MLB)")
    compare_parser.add_argument("--group", dest="stat_group", help="Stat group: hitting, pitching, QB, rushing, ...")
    compare_parser.add_argument(
        "--by-name",
        dest="by_name",
        action="store_true",
        help="Treat PLAYER1/PLAYER2 as names and use the first search match",
    )
    compare_parser.add_argument("--json", dest="as_json", action="store_true", help="Print the result as JSON")
    compare_parser.add_argument(
        "--retries",
        type=int,
        default=0,
        help="Retry transient provider failures this many times",
    )

    search_parser = subparsers.add_parser("search", help="Search players by name")
    search_parser.add_argument("league", choices=League.values())
    search_parser.add_argument("name")
    search_parser.add_argument("--json", dest="as_json", action="store_true")

    teams_parser = subparsers.add_parser("teams", help="List a league's teams")
    teams_parser.add_argument("league", choices=League.values())
    teams_parser.add_argument("--json", dest="as_json", action="store_true")

    return parser


async def _run_compare(args: argparse.Namespace, service: SportsDataService) -> None:
    player1, player2 = args.player1, args.player2
    if args.by_name:
        # The second lookup is served from the index the first one loads
        player1 = await service.search_player(args.league, player1)
        player2 = await service.search_player(args.league, player2)

    compare = error_handler.with_retry(max_retries=args.retries)(service.compare)
    result = await compare(args.league, player1, player2, season=args.season, stat_group=args.stat_group)

    if args.as_json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(service.format_comparison(result))


async def _run_search(args: argparse.Namespace, service: SportsDataService) -> None:
    players = await service.search_players(args.league, args.name)
    if args.as_json:
        print(json.dumps([player.to_dict() for player in players], indent=2))
        return

    if not players:
        print(f"No {args.league.upper()} players found matching '{args.name}'")
    for player in players:
        details = ", ".join(part for part in (player.position, player.team_name) if part)
        print(f"{player.id}\t{player.full_name}" + (f" ({details})" if details else ""))


async def _run_teams(args: argparse.Namespace, service: SportsDataService) -> None:
    teams = await service.get_teams(args.league)
    if args.as_json:
        print(json.dumps([team.to_dict() for team in teams], indent=2))
        return

    for team in teams:
        print(f"{team.id}\t{team.display_name}")


COMMANDS = {
    "compare": _run_compare,
    "search": _run_search,
    "teams": _run_teams,
}


async def _dispatch(args: argparse.Namespace) -> None:
    async with SportsDataService() as service:
        await COMMANDS[args.command](args, service)


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        LoggerFactory.setup_logging(level=args.log_level, force=True)

    try:
        asyncio.run(_dispatch(args))
    except HeadToHeadException as exc:
        logger.debug(f"Command {args.command} failed: {exc.to_dict()}")
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
