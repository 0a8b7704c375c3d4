"""
Core utilities for the HeadToHead platform.
Common functionality used across the entire application.
"""

import logging
from typing import Any, Dict, List, Optional


class LoggerFactory:
    """Centralized logger configuration."""

    _configured = False

    @classmethod
    def setup_logging(cls, level: Optional[str] = None, format_string: Optional[str] = None, force: bool = False):
        """Setup application-wide logging configuration; ``force`` reconfigures."""
        if cls._configured and not force:
            return

        if level is None:
            from ..config.settings import settings
            level = settings.log_level

        if format_string is None:
            format_string = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format=format_string,
            handlers=[logging.StreamHandler()],
            force=force
        )
        cls._configured = True

    @staticmethod
    def get_logger(name: str) -> logging.Logger:
        """Get a configured logger instance."""
        LoggerFactory.setup_logging()
        return logging.getLogger(name)


class APIResponseProcessor:
    """Common provider response processing utilities."""

    @staticmethod
    def safe_extract(response_data: Any, *path: Any, default: Any = None) -> Any:
        """
        Walk a nested document along ``path`` (dict keys or list indexes),
        returning ``default`` as soon as a step is missing.
        """
        current = response_data
        for step in path:
            if isinstance(current, dict):
                if step not in current:
                    return default
                current = current[step]
            elif isinstance(current, list) and isinstance(step, int):
                if not -len(current) <= step < len(current):
                    return default
                current = current[step]
            else:
                return default
        return default if current is None else current

    @staticmethod
    def parse_result_set(result_set: Dict[str, Any]) -> List[Dict[str, Any]]:
        """
        Turn a ``{"headers": [...], "rowSet": [[...], ...]}`` table into a list
        of dicts keyed by lower-cased header.
        """
        headers = [str(header).lower() for header in result_set.get('headers', [])]
        return [dict(zip(headers, row)) for row in result_set.get('rowSet', [])]


class DataValidator:
    """Common data validation utilities."""

    @staticmethod
    def to_number(value: Any) -> float:
        """
        Coerce a provider stat value into a float.
        Numeric strings such as ".300" or "123.1" are parsed; anything
        missing or unparseable becomes 0.
        """
        if value is None or isinstance(value, bool):
            return 0.0
        if isinstance(value, (int, float)):
            return float(value)
        try:
            return float(str(value).strip())
        except ValueError:
            return 0.0


# Export commonly used utilities
__all__ = [
    'LoggerFactory',
    'APIResponseProcessor',
    'DataValidator',
]
