"""
Locator strategies using Strategy Pattern.
Resolve a client address to a coarse location label for click analytics.
"""

import random
from abc import ABC, abstractmethod
from typing import Optional, Sequence


class LocatorStrategy(ABC):
    """
    Abstract base class for locators.

    A real geo-IP provider can be plugged in here without touching the
    shortener service. Locators must be fast; they run on the redirect path.
    """

    @abstractmethod
    def locate(self, address: str) -> str:
        """
        Resolve an address to a coarse location.

        Args:
            address: Client network address

        Returns:
            Location label such as "London, UK"
        """
        pass


class MockLocator(LocatorStrategy):
    """
    Picks a random city for every lookup.

    Used for demos and development; the address is ignored.
    """

    DEFAULT_LOCATIONS = (
        "New York, US",
        "London, UK",
        "Tokyo, JP",
        "Mumbai, IN",
        "Sydney, AU",
    )

    def __init__(
        self,
        locations: Sequence[str] = DEFAULT_LOCATIONS,
        rng: Optional[random.Random] = None
    ):
        self.locations = tuple(locations)
        self._rng = rng or random.Random()

    def locate(self, address: str) -> str:
        return self._rng.choice(self.locations)


class StaticLocator(LocatorStrategy):
    """
    Null Object Pattern - always returns the same label.

    Used for tests and when location lookup is disabled.
    """

    def __init__(self, label: str = "Unknown"):
        self.label = label

    def locate(self, address: str) -> str:
        return self.label
