"""
Locator module for click analytics.
Implements Strategy Pattern for pluggable address -> location lookup.
"""

from .strategies import LocatorStrategy, MockLocator, StaticLocator
from .factory import LocatorFactory, LocatorBackend

__all__ = [
    "LocatorStrategy",
    "MockLocator",
    "StaticLocator",
    "LocatorFactory",
    "LocatorBackend",
]
