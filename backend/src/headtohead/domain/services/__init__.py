"""
Domain services for the HeadToHead multi-sport platform.
Contains the comparison engine, its registry and the top-level data service.
"""

from .comparison_service import (
    ComparisonEngine,
    ComparisonRegistry,
    compare_stats,
    determine_winner,
    generate_summary,
)
from .sports_service import SportsDataService
from .strategies import LeagueStrategy, STRATEGIES, get_strategy

__all__ = [
    "ComparisonEngine",
    "ComparisonRegistry",
    "compare_stats",
    "determine_winner",
    "generate_summary",
    "SportsDataService",
    "LeagueStrategy",
    "STRATEGIES",
    "get_strategy",
]
