"""
Branca Token - Exceptions
Every failure raised by the codec derives from BrancaError.
"""

from datetime import datetime, timezone
from typing import Optional
import time


class BrancaError(Exception):
    """Base exception for all token failures."""
    pass


class InvalidToken(BrancaError):
    """Raised when a token is not valid base62 or is too short."""
    pass


class InvalidTokenVersion(InvalidToken):
    """Raised when the header version byte is not the expected magic."""

    def __init__(self, version: int, expected: int):
        self.version = version
        self.expected = expected
        super().__init__(
            f"invalid token version: got {version:#04X} but expected {expected:#04X}"
        )


class BadKeyLength(BrancaError, ValueError):
    """Raised when the configured key is not exactly 32 bytes."""

    def __init__(self, length: int, expected: int = 32):
        self.length = length
        self.expected = expected
        super().__init__(f"bad key length: got {length} bytes, expected {expected}")


class AuthenticationFailure(BrancaError):
    """
    Raised when the authentication tag does not verify.

    Wrong key, corrupted data and tampering all look the same from here.
    """

    def __init__(self):
        super().__init__("token authentication failed")


class ExpiredToken(BrancaError):
    """Raised after successful authentication when the TTL has elapsed."""

    def __init__(self, expiry: int, now: Optional[int] = None):
        self.expiry = expiry
        self.now = int(time.time()) if now is None else now
        delta = max(self.now - expiry, 0)
        super().__init__(f"token is expired by {delta}s")

    @property
    def expired_at(self) -> datetime:
        return datetime.fromtimestamp(self.expiry, tz=timezone.utc)


class RandomSourceFailure(BrancaError, OSError):
    """Raised when the system random source could not supply a nonce."""
    pass
