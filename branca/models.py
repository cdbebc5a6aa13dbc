"""
Branca Token - Pydantic Models
Immutable configuration shared by every encode/decode call.
"""

import binascii
import os
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .envelope import MAX_TIMESTAMP


class BrancaConfig(BaseModel):
    """
    Key, TTL and test-only overrides for a token codec.

    The model is frozen: the with_* helpers return a new configuration
    instead of mutating this one, so a config can be shared across threads.
    nonce and timestamp exist to produce deterministic fixtures only.
    """
    model_config = ConfigDict(frozen=True)

    key: bytes = Field(..., repr=False, description="32-byte secret key")
    ttl: int = Field(default=0, ge=0, le=MAX_TIMESTAMP, description="Seconds, 0 disables expiry")
    nonce: Optional[str] = Field(None, description="Fixed nonce as hex (tests only)")
    timestamp: Optional[int] = Field(
        None, ge=0, le=MAX_TIMESTAMP, description="Fixed issuance time (tests only)"
    )

    @field_validator('key', mode='before')
    @classmethod
    def encode_key(cls, v: Union[str, bytes, bytearray]) -> bytes:
        """Accept text keys; the length itself is checked at first use."""
        if isinstance(v, str):
            return v.encode('utf-8')
        if isinstance(v, bytearray):
            return bytes(v)
        return v

    def with_ttl(self, ttl: int) -> "BrancaConfig":
        return self._replace(ttl=ttl)

    def with_nonce(self, nonce: Optional[str]) -> "BrancaConfig":
        return self._replace(nonce=nonce)

    def with_timestamp(self, timestamp: Optional[int]) -> "BrancaConfig":
        return self._replace(timestamp=timestamp)

    def _replace(self, **changes) -> "BrancaConfig":
        # model_copy(update=...) skips validation
        return type(self).model_validate({**self.model_dump(), **changes})

    @classmethod
    def from_env(cls, prefix: str = "BRANCA_") -> "BrancaConfig":
        """
        Build a configuration from the process environment.

        Variables:
            {prefix}KEY: raw key text, or "hex:" followed by 64 hex digits
            {prefix}TTL: optional TTL in seconds (default 0)
        """
        raw_key = os.environ.get(f"{prefix}KEY")
        if raw_key is None:
            raise KeyError(f"{prefix}KEY is not set")

        key: Union[str, bytes] = raw_key
        if raw_key.startswith("hex:"):
            try:
                key = binascii.unhexlify(raw_key[4:])
            except binascii.Error as e:
                raise ValueError(f"{prefix}KEY is not valid hex: {e}") from e

        ttl = int(os.environ.get(f"{prefix}TTL", "0"))
        return cls(key=key, ttl=ttl)
