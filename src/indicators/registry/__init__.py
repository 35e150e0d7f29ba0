"""Indicator registry package.

This package provides in-memory storage for indicator definitions and the
default indicators the service starts with.
"""

from .defaults import default_indicators, seed_default_indicators
from .store import IndicatorRegistry


__all__ = [
    "IndicatorRegistry",
    "default_indicators",
    "seed_default_indicators",
]
