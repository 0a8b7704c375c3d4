"""
External provider clients, one per league, plus the registry that hands them out.
"""

from .base_client import SportAPIClient, PlayerIndex
from .mlb_client import MLBAPIClient
from .nba_client import NBAAPIClient
from .nfl_client import NFLAPIClient
from .client_factory import ClientRegistry, DEFAULT_CLIENT_FACTORIES

__all__ = [
    "SportAPIClient",
    "PlayerIndex",
    "MLBAPIClient",
    "NBAAPIClient",
    "NFLAPIClient",
    "ClientRegistry",
    "DEFAULT_CLIENT_FACTORIES",
]
