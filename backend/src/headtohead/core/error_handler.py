"""
Centralized error handling for the HeadToHead platform.
Provides decorators for attaching error context and for caller-side retries.

The comparison core never retries on its own; ``with_retry`` is offered to
callers (the CLI uses it for ``--retries``) that decide retrying is worth it.
"""

import asyncio
import logging
import functools
from dataclasses import asdict, dataclass
from typing import Any, Callable, Optional, Dict, Iterator, TypeVar, Awaitable
from datetime import datetime, timezone

import aiohttp

from .exceptions import (
    HeadToHeadException, ErrorContext,
    ProviderConnectionError, ProviderTimeoutError, ProviderHTTPError
)

logger = logging.getLogger(__name__)

AF = TypeVar('AF', bound=Callable[..., Awaitable[Any]])

TRANSIENT_ERRORS = (ProviderConnectionError, ProviderTimeoutError, ProviderHTTPError)


def _league_of(args: tuple) -> Optional[str]:
    """Find the league of the bound instance, if the wrapped callable is a method."""
    if not args:
        return None
    league = getattr(args[0], 'league', None)
    return getattr(league, 'value', league)


def _backoff(initial: float, exponential: bool) -> Iterator[float]:
    wait = initial
    while True:
        yield wait
        if exponential:
            wait *= 2


@dataclass
class FailureRecord:
    """Per-operation failure bookkeeping."""
    failures: int = 0
    total_attempts: int = 0
    last_error: Optional[str] = None
    last_failure: Optional[datetime] = None


class ErrorHandler:
    """
    Context enrichment for provider and domain errors, opt-in retries, and
    a per-operation failure tally.
    """

    def __init__(self, default_retries: int = 0, default_delay: float = 1.0):
        self.default_retries = default_retries
        self.default_delay = default_delay
        self._failures: Dict[str, FailureRecord] = {}

    def with_retry(
        self,
        max_retries: Optional[int] = None,
        delay: Optional[float] = None,
        exponential_backoff: bool = True,
        retryable_exceptions: Optional[tuple] = None
    ):
        """
        Retry a coroutine function on transient provider failures.

        Errors flagged ``recoverable=False`` (4xx responses, unknown players)
        are raised on the first attempt.

        Args:
            max_retries: Extra attempts after the first (defaults to ``default_retries``)
            delay: Seconds before the first retry
            exponential_backoff: Double the wait after every retry
            retryable_exceptions: Exception types worth retrying
        """
        retry_on = retryable_exceptions or TRANSIENT_ERRORS

        def decorator(func: AF) -> AF:
            operation_id = f"{func.__module__}.{func.__name__}"

            @functools.wraps(func)
            async def wrapper(*args, **kwargs):
                attempts_allowed = 1 + (self.default_retries if max_retries is None else max_retries)
                waits = _backoff(self.default_delay if delay is None else delay, exponential_backoff)
                attempt = 0

                while True:
                    attempt += 1
                    try:
                        outcome = await func(*args, **kwargs)
                    except retry_on as e:
                        if attempt >= attempts_allowed or not getattr(e, 'recoverable', True):
                            self._record_failure(operation_id, e, attempt)
                            logger.error(f"{operation_id} gave up after {attempt} attempt(s): {e}")
                            raise
                        wait = next(waits)
                        logger.warning(
                            f"{operation_id} attempt {attempt}/{attempts_allowed} failed: {e}; "
                            f"retrying in {wait}s"
                        )
                        await asyncio.sleep(wait)
                    except Exception as e:
                        self._record_failure(operation_id, e, attempt)
                        logger.error(f"{operation_id} raised a non-retryable {type(e).__name__}: {e}")
                        raise
                    else:
                        if attempt > 1:
                            logger.info(f"{operation_id} recovered on attempt {attempt}")
                        return outcome

            return wrapper
        return decorator

    def with_error_context(self, operation: str, endpoint: Optional[str] = None):
        """
        Attach an ``ErrorContext`` to errors escaping ``operation``.

        HeadToHead exceptions without context get one attached and are
        re-raised unchanged otherwise. Stray aiohttp/timeout errors are mapped
        onto provider errors so callers see a single taxonomy.
        """
        def decorator(func: AF) -> AF:
            @functools.wraps(func)
            async def wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except HeadToHeadException as e:
                    if e.context is None:
                        e.context = self._context(operation, endpoint, args, kwargs)
                    raise
                except asyncio.TimeoutError as e:
                    raise ProviderTimeoutError(
                        timeout=kwargs.get('timeout', 30.0),
                        endpoint=endpoint,
                        context=self._context(operation, endpoint, args, kwargs)
                    ) from e
                except aiohttp.ClientError as e:
                    raise ProviderConnectionError(
                        url=endpoint or "unknown",
                        context=self._context(operation, endpoint, args, kwargs),
                        original_error=e
                    ) from e

            return wrapper
        return decorator

    @staticmethod
    def _context(operation: str, endpoint: Optional[str], args: tuple, kwargs: dict) -> ErrorContext:
        return ErrorContext(
            operation=operation,
            league=_league_of(args),
            endpoint=endpoint,
            parameters=kwargs or None
        )

    def _record_failure(self, operation_id: str, error: Exception, attempts: int):
        record = self._failures.setdefault(operation_id, FailureRecord())
        record.failures += 1
        record.total_attempts += attempts
        record.last_error = type(error).__name__
        record.last_failure = datetime.now(timezone.utc)

    def get_failure_stats(self) -> Dict[str, Dict[str, Any]]:
        """Failure tally per ``module.function``."""
        return {operation_id: asdict(record) for operation_id, record in self._failures.items()}

    def reset_stats(self):
        self._failures.clear()


error_handler = ErrorHandler()
