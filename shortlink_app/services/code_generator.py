"""
Short code allocation.

Validates caller-supplied custom codes and falls back to a generation
strategy otherwise. Allocation never touches the registry; the caller
inserts the returned code.
"""

import re
from typing import Optional

from shortlink_app.core.exceptions import (
    InvalidShortcodeFormat,
    InvalidShortcodeLength,
    ShortcodeCollision,
)
from shortlink_app.services.short_code_strategies import ExistsCheck, ShortCodeStrategy

CUSTOM_CODE_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


class CodeGenerator:

    def __init__(
        self,
        strategy: ShortCodeStrategy,
        min_length: int = 3,
        max_length: int = 20
    ):
        self.strategy = strategy
        self.min_length = min_length
        self.max_length = max_length

    def allocate(self, custom_code: Optional[str], exists: ExistsCheck) -> str:
        """
        Return a short code that is free at the time of the call.

        Args:
            custom_code: Code requested by the caller, or None/"" to generate one
            exists: Read-only registry lookup

        Raises:
            InvalidShortcodeFormat, InvalidShortcodeLength, ShortcodeCollision:
                for a rejected custom code
            CodeSpaceExhausted: if the strategy ran out of retries
        """
        if not custom_code:
            return self.strategy.generate(exists)

        self.validate_custom_code(custom_code)
        if exists(custom_code):
            raise ShortcodeCollision(custom_code)
        return custom_code

    def validate_custom_code(self, custom_code: str) -> None:
        if not CUSTOM_CODE_PATTERN.fullmatch(custom_code):
            raise InvalidShortcodeFormat(custom_code)
        if not self.min_length <= len(custom_code) <= self.max_length:
            raise InvalidShortcodeLength(custom_code, self.min_length, self.max_length)
