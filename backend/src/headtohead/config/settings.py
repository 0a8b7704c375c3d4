"""
Application settings and configuration management.
All values can be overridden through environment variables or a .env file.
"""
from typing import Dict, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings - all values from environment variables."""

    # Application settings
    app_name: str = "HeadToHead"
    app_version: str = "0.1.0"

    # Provider endpoints (one public API per league)
    mlb_base_url: str = "https://statsapi.mlb.com/api/v1"
    mlb_live_base_url: str = "https://statsapi.mlb.com/api/v1.1"
    nba_base_url: str = "https://stats.nba.com/stats"
    nfl_site_base_url: str = "https://site.api.espn.com/apis/site/v2/sports/football/nfl"
    nfl_core_base_url: str = "https://sports.core.api.espn.com/v2/sports/football/leagues/nfl"

    # Request behaviour
    api_request_delay: float = 0.0  # Minimum seconds between requests per client
    request_timeout: float = 30.0
    api_user_agent: Optional[str] = None  # Defaults to "<app_name>/<app_version>"

    # Client-local player index lifetime (NBA / NFL name search)
    player_index_ttl: int = 86400

    # Logging settings
    log_level: str = "INFO"

    @property
    def user_agent(self) -> str:
        return self.api_user_agent or f"{self.app_name}/{self.app_version}"

    @property
    def league_base_urls(self) -> Dict[str, str]:
        """Get the primary base URL for every league."""
        return {
            "mlb": self.mlb_base_url,
            "nba": self.nba_base_url,
            "nfl": self.nfl_site_base_url,
        }

    class Config:
        env_file = ".env"
        env_prefix = "HEADTOHEAD_"
        case_sensitive = False


# Global settings instance
settings = Settings()
