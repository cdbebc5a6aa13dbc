"""
Branca Token - Expiration Policy

Expiry is timestamp + ttl computed on Python integers. It does not wrap at
2**32, so a token issued close to the end of the uint32 range with a long
TTL expires later than its timestamp, never earlier.
"""

import time
from typing import Optional

from .exceptions import ExpiredToken


def expires_at(timestamp: int, ttl: int) -> Optional[int]:
    """Return the expiry in epoch seconds, or None when ttl is disabled."""
    if not ttl:
        return None
    return timestamp + ttl


def check_expiry(timestamp: int, ttl: int, now: Optional[int] = None) -> None:
    """
    Raise ExpiredToken if the token's lifetime has elapsed.

    A token is still valid in the second equal to its expiry.
    """
    expiry = expires_at(timestamp, ttl)
    if expiry is None:
        return
    if now is None:
        now = int(time.time())
    if expiry < now:
        raise ExpiredToken(expiry, now=now)
