"""
Exception hierarchy for the HeadToHead multi-sport comparison platform.
Provides specific exceptions for different error scenarios with context.
"""

from typing import Any, Dict, Optional, List
from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class ErrorContext:
    """Context information for errors."""
    operation: str
    league: Optional[str] = None
    endpoint: Optional[str] = None
    parameters: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert error context to dictionary."""
        return {
            'operation': self.operation,
            'league': self.league,
            'endpoint': self.endpoint,
            'parameters': self.parameters,
            'timestamp': self.timestamp.isoformat(),
        }


class HeadToHeadException(Exception):
    """
    Base exception class for all HeadToHead-specific errors.
    Provides rich context and error categorization.
    """

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None,
        error_code: Optional[str] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        self.original_error = original_error
        self.error_code = error_code
        self.recoverable = recoverable
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code,
            'recoverable': self.recoverable,
            'timestamp': self.timestamp.isoformat(),
            'context': self.context.to_dict() if self.context else None,
            'original_error': str(self.original_error) if self.original_error else None
        }

    def __str__(self) -> str:
        """Enhanced string representation with context."""
        base_msg = self.message
        if self.context and self.context.league:
            base_msg += f" (League: {self.context.league})"
        if self.error_code:
            base_msg += f" [Code: {self.error_code}]"
        return base_msg


class UnsupportedLeagueError(HeadToHeadException):
    """Raised when a league outside the registered set is requested."""

    def __init__(
        self,
        league: str,
        supported_leagues: Optional[List[str]] = None,
        context: Optional[ErrorContext] = None
    ):
        message = f"Unknown league: '{league}'"
        if supported_leagues:
            message += f". Supported leagues: {', '.join(supported_leagues)}"

        super().__init__(
            message=message,
            context=context,
            error_code="UNSUPPORTED_LEAGUE",
            recoverable=False
        )
        self.league = league
        self.supported_leagues = supported_leagues


# =============================================================================
# Provider (transport) exceptions
# =============================================================================

class ProviderTransportError(HeadToHeadException):
    """Base class for failures talking to a statistics provider."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        response_data: Optional[Any] = None,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None,
        recoverable: bool = False
    ):
        super().__init__(
            message=message,
            context=context,
            original_error=original_error,
            error_code="PROVIDER_ERROR",
            recoverable=recoverable
        )
        self.status_code = status_code
        self.endpoint = endpoint
        self.response_data = response_data

    def to_dict(self) -> Dict[str, Any]:
        """Enhanced dictionary representation with transport details."""
        base_dict = super().to_dict()
        base_dict.update({
            'status_code': self.status_code,
            'endpoint': self.endpoint,
            'response_data': self.response_data
        })
        return base_dict


class ProviderConnectionError(ProviderTransportError):
    """Raised when unable to connect to the provider."""

    def __init__(self, url: str, context: Optional[ErrorContext] = None, original_error: Optional[Exception] = None):
        message = f"Failed to connect to provider endpoint: {url}"
        super().__init__(
            message=message,
            endpoint=url,
            context=context,
            original_error=original_error,
            recoverable=True
        )
        self.url = url
        self.error_code = "PROVIDER_CONNECTION_ERROR"


class ProviderTimeoutError(ProviderTransportError):
    """Raised when a provider request times out."""

    def __init__(self, timeout: float, endpoint: Optional[str] = None, context: Optional[ErrorContext] = None):
        message = f"Provider request timed out after {timeout} seconds"
        super().__init__(
            message=message,
            endpoint=endpoint,
            context=context,
            recoverable=True
        )
        self.timeout = timeout
        self.error_code = "PROVIDER_TIMEOUT_ERROR"


class ProviderNotFoundError(ProviderTransportError):
    """Raised when the provider answers 404 for a resource."""

    def __init__(self, endpoint: str, context: Optional[ErrorContext] = None):
        message = f"Provider resource not found: {endpoint}"
        super().__init__(
            message=message,
            status_code=404,
            endpoint=endpoint,
            context=context,
            recoverable=False
        )
        self.error_code = "PROVIDER_NOT_FOUND_ERROR"


class ProviderHTTPError(ProviderTransportError):
    """Raised when the provider returns any other non-2xx status."""

    def __init__(
        self,
        status_code: int,
        endpoint: str,
        response_data: Optional[Any] = None,
        context: Optional[ErrorContext] = None
    ):
        message = f"Provider request failed: HTTP {status_code} for {endpoint}"
        super().__init__(
            message=message,
            status_code=status_code,
            endpoint=endpoint,
            response_data=response_data,
            context=context,
            recoverable=status_code >= 500
        )
        self.error_code = "PROVIDER_HTTP_ERROR"


class ProviderResponseError(ProviderTransportError):
    """Raised when a provider response body cannot be parsed."""

    def __init__(
        self,
        endpoint: str,
        expected_format: str = "JSON",
        status_code: Optional[int] = None,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None
    ):
        message = f"Invalid provider response from {endpoint}. Expected: {expected_format}"
        super().__init__(
            message=message,
            status_code=status_code,
            endpoint=endpoint,
            context=context,
            original_error=original_error,
            recoverable=False
        )
        self.expected_format = expected_format
        self.error_code = "PROVIDER_RESPONSE_ERROR"


# =============================================================================
# Domain-Level Exceptions
# =============================================================================

class DomainException(HeadToHeadException):
    """Base class for domain logic errors."""

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None,
        error_code: str = "DOMAIN_ERROR",
        recoverable: bool = True
    ):
        super().__init__(
            message=message,
            context=context,
            original_error=original_error,
            error_code=error_code,
            recoverable=recoverable
        )


class PlayerNotFoundError(DomainException):
    """Raised when a player cannot be found."""

    def __init__(
        self,
        player_id: Optional[Any] = None,
        player_name: Optional[str] = None,
        league: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None
    ):
        if player_id is not None:
            message = f"Player with ID {player_id} not found"
        elif player_name:
            message = f"Player '{player_name}' not found"
        else:
            message = "Player not found"

        if league:
            message += f" in {league.upper()}"

        super().__init__(
            message=message,
            context=context,
            original_error=original_error,
            error_code="PLAYER_NOT_FOUND",
            recoverable=False
        )
        self.player_id = player_id
        self.player_name = player_name
        self.league = league


class TeamNotFoundError(DomainException):
    """Raised when a team cannot be found."""

    def __init__(
        self,
        team_id: Optional[Any] = None,
        league: Optional[str] = None,
        context: Optional[ErrorContext] = None
    ):
        message = f"Team with ID {team_id} not found" if team_id is not None else "Team not found"
        if league:
            message += f" in {league.upper()}"

        super().__init__(
            message=message,
            context=context,
            error_code="TEAM_NOT_FOUND",
            recoverable=False
        )
        self.team_id = team_id
        self.league = league


class GameNotFoundError(DomainException):
    """Raised when a game cannot be found."""

    def __init__(
        self,
        game_id: Optional[Any] = None,
        league: Optional[str] = None,
        context: Optional[ErrorContext] = None
    ):
        message = f"Game with ID {game_id} not found" if game_id is not None else "Game not found"
        if league:
            message += f" in {league.upper()}"

        super().__init__(
            message=message,
            context=context,
            error_code="GAME_NOT_FOUND",
            recoverable=False
        )
        self.game_id = game_id
        self.league = league


class InvalidSeasonError(DomainException):
    """Raised when a season value cannot be understood by a league's provider."""

    def __init__(
        self,
        season: Any,
        league: Optional[str] = None,
        expected: Optional[str] = None,
        context: Optional[ErrorContext] = None
    ):
        message = f"Invalid season {season!r}"
        if league:
            message += f" for {league.upper()}"
        if expected:
            message += f"; expected {expected}"

        super().__init__(
            message=message,
            context=context,
            error_code="INVALID_SEASON",
            recoverable=False
        )
        self.season = season
        self.league = league
