"""
Core package for the HeadToHead multi-sport platform.
Contains exceptions, error handling, and common utilities.
"""

from .exceptions import (
    ErrorContext,
    HeadToHeadException,
    UnsupportedLeagueError,
    ProviderTransportError,
    ProviderConnectionError,
    ProviderTimeoutError,
    ProviderNotFoundError,
    ProviderHTTPError,
    ProviderResponseError,
    DomainException,
    PlayerNotFoundError,
    TeamNotFoundError,
    GameNotFoundError,
    InvalidSeasonError,
)
from .error_handler import ErrorHandler, error_handler
from .utils import LoggerFactory, APIResponseProcessor, DataValidator

__all__ = [
    # Base exceptions
    "ErrorContext",
    "HeadToHeadException",
    "UnsupportedLeagueError",

    # Provider exceptions
    "ProviderTransportError",
    "ProviderConnectionError",
    "ProviderTimeoutError",
    "ProviderNotFoundError",
    "ProviderHTTPError",
    "ProviderResponseError",

    # Domain exceptions
    "DomainException",
    "PlayerNotFoundError",
    "TeamNotFoundError",
    "GameNotFoundError",
    "InvalidSeasonError",

    # Error handler
    "ErrorHandler",
    "error_handler",

    # Utilities
    "LoggerFactory",
    "APIResponseProcessor",
    "DataValidator",
]
