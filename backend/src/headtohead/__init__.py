"""
HeadToHead - multi-sport player comparison.

Fetches player statistics from public MLB, NBA and NFL providers and compares
two players metric by metric.
"""

__version__ = "0.1.0"
