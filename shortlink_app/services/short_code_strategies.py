"""
Short code generation strategies for URL shortener.
Uses Strategy Pattern to allow different generation algorithms.
"""

import logging
import random
import string
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

from shortlink_app.core.exceptions import CodeSpaceExhausted

logger = logging.getLogger(__name__)

# Read-only existence check against the registry
ExistsCheck = Callable[[str], bool]


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""

    @abstractmethod
    def generate(self, exists: ExistsCheck) -> str:
        """
        Generate a short code that is not yet taken.

        Args:
            exists: Callback returning True if a code is already registered

        Returns:
            A unique short code string

        Raises:
            CodeSpaceExhausted: If no free code was found within the retry budget
        """
        pass


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Random generation strategy.
    Draws fixed-length codes uniformly from [A-Za-z0-9] and retries on collision.

    Pros: Simple, unpredictable
    Cons: Collision risk grows with registry size
    """

    def __init__(
        self,
        length: int = 6,
        max_retries: int = 100,
        rng: Optional[random.Random] = None
    ):
        self.length = length
        self.max_retries = max_retries
        self.characters = string.ascii_letters + string.digits
        self._rng = rng or random.Random()

    def generate(self, exists: ExistsCheck) -> str:
        """Generate random short code with collision checking"""
        for attempt in range(self.max_retries):
            short_code = self._generate_random_string()

            if not exists(short_code):
                return short_code

            logger.debug("Short code collision on attempt %d: %s", attempt + 1, short_code)

        logger.warning("Gave up generating a short code after %d attempts", self.max_retries)
        raise CodeSpaceExhausted(self.max_retries)

    def _generate_random_string(self) -> str:
        """Generate a random string of specified length"""
        return ''.join(self._rng.choice(self.characters) for _ in range(self.length))


class Base62ShortCodeStrategy(ShortCodeStrategy):
    """
    Base62 encoding of an in-process counter.
    Adds a salt to the counter and left-pads the encoding to the code length.

    Pros: No random collisions, deterministic
    Cons: Predictable, counter restarts with the process
    """

    BASE62_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

    def __init__(self, salt: int = 1000, length: int = 6, max_retries: int = 100):
        self.salt = salt
        self.length = length
        self.max_retries = max_retries
        self._counter = 0
        self._lock = threading.Lock()

    def generate(self, exists: ExistsCheck) -> str:
        """
        Generate short code using Base62 encoding.

        Codes already taken (for example by custom codes) are skipped.
        """
        for _ in range(self.max_retries):
            with self._lock:
                self._counter += 1
                number = self._counter + self.salt

            encoded = self._base62_encode(number)

            # Truncating would produce duplicates
            if len(encoded) > self.length:
                logger.warning(
                    "Base62 counter %d no longer fits in %d characters", number, self.length
                )
                raise CodeSpaceExhausted(self._counter)

            if not exists(encoded):
                return encoded

        raise CodeSpaceExhausted(self.max_retries)

    def _base62_encode(self, number: int) -> str:
        """
        Convert integer to Base62 string, padded to the code length.

        Base62 uses: 0-9 (10) + a-z (26) + A-Z (26) = 62 characters
        """
        if number == 0:
            return self.BASE62_CHARS[0] * self.length

        result = ""
        while number > 0:
            result = self.BASE62_CHARS[number % 62] + result
            number //= 62

        return result.rjust(self.length, self.BASE62_CHARS[0])
