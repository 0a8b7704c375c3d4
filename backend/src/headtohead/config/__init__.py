"""Configuration for the HeadToHead platform."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
