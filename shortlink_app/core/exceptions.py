"""
Domain exceptions for the shortener core.

Every failure the core can report is a subclass of ShortenerError, so the
HTTP layer can translate them with a single exception handler.
"""

from datetime import datetime


class ShortenerError(Exception):
    """Base exception for the shortener core."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationFailure(ShortenerError):
    """Base for bad caller input."""
    pass


class MissingUrl(ValidationFailure):
    """Raised when no original URL was supplied."""

    def __init__(self):
        super().__init__("Original URL is required")


class InvalidUrl(ValidationFailure):
    """Raised when the original URL is not an absolute http(s) URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__("Invalid URL format")


class InvalidValidityPeriod(ValidationFailure):
    """Raised when the validity period is negative."""

    def __init__(self, minutes: int):
        self.minutes = minutes
        super().__init__("Validity period must be a positive number of minutes")


class InvalidShortcodeFormat(ValidationFailure):
    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(
            "Custom shortcode must contain only alphanumeric characters, "
            "hyphens, and underscores"
        )


class InvalidShortcodeLength(ValidationFailure):
    def __init__(self, short_code: str, min_length: int, max_length: int):
        self.short_code = short_code
        super().__init__(
            f"Custom shortcode must be between {min_length} and {max_length} characters"
        )


class ShortcodeCollision(ShortenerError):
    """Raised when a custom short code is already taken."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__("Custom shortcode already exists")


class CodeSpaceExhausted(ShortenerError):
    """Raised when no free short code could be found within the retry budget."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not generate unique short code after {attempts} attempts"
        )


class QuotaExceeded(ShortenerError):
    """Raised when a creator already holds the maximum number of active URLs."""

    def __init__(self, creator_id: str, limit: int):
        self.creator_id = creator_id
        self.limit = limit
        super().__init__(f"Maximum {limit} concurrent shortened URLs allowed")


class ShortCodeNotFound(ShortenerError):
    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__("Short URL not found")


class ShortCodeExpired(ShortenerError):
    """Raised when a short code exists but its expiry date has passed."""

    def __init__(self, short_code: str, expired_at: datetime):
        self.short_code = short_code
        self.expired_at = expired_at
        super().__init__("Short URL has expired")


class UnknownShortCode(ShortenerError):
    """
    Raised by the analytics store for a code it has no entry for.

    Registry and analytics entries are created together, so this indicates
    a consistency defect rather than bad input.
    """

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"No analytics entry for short code '{short_code}'")


class DuplicateShortCode(ShortenerError):
    """Raised when inserting a short code that is already stored."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"Short code '{short_code}' is already registered")
