"""
Branca Token - Token Facade
Encodes and decodes authenticated, encrypted base62 tokens.

Encode (Seal-then-Encode):
1. Resolve timestamp and nonce (test overrides or clock + random source)
2. Build the 29-byte header
3. Seal the payload with the header as associated data
4. Base62 encode header || ciphertext || tag

Decode:
1. Length floor and base62 decoding
2. Version check
3. Authenticated decryption
4. TTL check (only after authentication)
"""

import binascii
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

import nacl.utils

from .aead import KEY_SIZE, NONCE_SIZE, CipherFactory, XChaCha20Poly1305
from .base62 import Base62
from .envelope import (
    HEADER_SIZE,
    MAX_TIMESTAMP,
    MIN_TOKEN_LENGTH,
    VERSION,
    Envelope,
    build_header,
)
from .exceptions import (
    BadKeyLength,
    BrancaError,
    InvalidToken,
    RandomSourceFailure,
)
from .expiration import check_expiry
from .models import BrancaConfig

logger = logging.getLogger(__name__)


@dataclass
class DecodeResult:
    """Outcome of Branca.verify()."""
    valid: bool
    payload: Optional[bytes] = None
    error: Optional[BrancaError] = None
    timestamp: Optional[int] = None


class Branca:
    """
    Token codec bound to one immutable BrancaConfig.

    An instance holds no mutable state and may be shared between threads.
    """

    def __init__(
        self,
        key: Union[str, bytes, None] = None,
        ttl: int = 0,
        *,
        config: Optional[BrancaConfig] = None,
        cipher_factory: CipherFactory = XChaCha20Poly1305,
        encoding: Optional[Base62] = None,
        random_source: Callable[[int], bytes] = nacl.utils.random,
        clock: Callable[[], float] = time.time,
    ):
        if config is None:
            if key is None:
                raise ValueError("either key or config is required")
            config = BrancaConfig(key=key, ttl=ttl)
        self.config = config
        self.cipher_factory = cipher_factory
        self.encoding = encoding or Base62()
        self.random_source = random_source
        self.clock = clock

        if config.nonce is not None:
            logger.warning("Branca configured with a fixed nonce; use for test fixtures only")

    def __repr__(self) -> str:
        return f"Branca(ttl={self.config.ttl})"

    # =========================================================================
    # Test overrides (return new instances)
    # =========================================================================

    def _derive(self, config: BrancaConfig) -> "Branca":
        return type(self)(
            config=config,
            cipher_factory=self.cipher_factory,
            encoding=self.encoding,
            random_source=self.random_source,
            clock=self.clock,
        )

    def with_ttl(self, ttl: int) -> "Branca":
        return self._derive(self.config.with_ttl(ttl))

    def with_nonce(self, nonce: Optional[str]) -> "Branca":
        return self._derive(self.config.with_nonce(nonce))

    def with_timestamp(self, timestamp: Optional[int]) -> "Branca":
        return self._derive(self.config.with_timestamp(timestamp))

    # =========================================================================
    # Encoding
    # =========================================================================

    def _now(self) -> int:
        return int(self.clock())

    def _resolve_timestamp(self) -> int:
        if self.config.timestamp is not None:
            return self.config.timestamp
        return self._now() & MAX_TIMESTAMP

    def _resolve_nonce(self) -> bytes:
        if self.config.nonce is not None:
            try:
                nonce = binascii.unhexlify(self.config.nonce)
            except (binascii.Error, ValueError) as e:
                raise InvalidToken(f"nonce override is not valid hex: {e}") from e
            if len(nonce) != NONCE_SIZE:
                raise InvalidToken(f"nonce override must be {NONCE_SIZE} bytes, got {len(nonce)}")
            return nonce

        try:
            nonce = self.random_source(NONCE_SIZE)
        except OSError as e:
            raise RandomSourceFailure(f"random source failed: {e}") from e
        if len(nonce) != NONCE_SIZE:
            raise RandomSourceFailure(f"random source returned {len(nonce)} bytes")
        return nonce

    def _cipher(self):
        key = self.config.key
        if len(key) != KEY_SIZE:
            raise BadKeyLength(len(key), KEY_SIZE)
        return self.cipher_factory(key)

    def encode(self, data: bytes) -> str:
        """
        Seal data into a new token.

        Raises:
            TypeError: data is not bytes-like
            InvalidToken: malformed nonce override
            RandomSourceFailure: no entropy available for the nonce
            BadKeyLength: key is not 32 bytes
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"payload must be bytes-like, not {type(data).__name__}")

        timestamp = self._resolve_timestamp()
        nonce = self._resolve_nonce()
        cipher = self._cipher()

        header = build_header(timestamp, nonce)
        ciphertext = cipher.seal(nonce, bytes(data), header)
        token = self.encoding.encode(header + ciphertext)

        logger.debug(f"Issued token: timestamp={timestamp}, payload={len(data)} bytes")
        return token

    def encode_to_string(self, data: str) -> str:
        """Encode a text payload (UTF-8)."""
        return self.encode(data.encode('utf-8'))

    # =========================================================================
    # Decoding
    # =========================================================================

    def inspect(self, token: str) -> Envelope:
        """
        Parse a token and check its version without authenticating it.

        Nothing in the returned envelope can be trusted until decode()
        succeeds on the same token.

        Raises:
            InvalidToken: too short or not valid base62
            InvalidTokenVersion: unknown version byte
        """
        if len(token) < MIN_TOKEN_LENGTH:
            raise InvalidToken(f"invalid base62 token: length is less than {MIN_TOKEN_LENGTH}")

        raw = self.encoding.decode(token)
        if len(raw) < HEADER_SIZE:
            raise InvalidToken(f"invalid base62 token: {len(raw)} bytes decoded")

        envelope = Envelope.from_bytes(raw)
        envelope.check_version(VERSION)
        return envelope

    def _open(self, token: str) -> Tuple[Envelope, bytes]:
        envelope = self.inspect(token)
        cipher = self._cipher()
        payload = cipher.open(envelope.nonce, envelope.ciphertext, envelope.header)
        check_expiry(envelope.timestamp, self.config.ttl, now=self._now())
        return envelope, payload

    def decode(self, token: str) -> bytes:
        """
        Authenticate and decrypt a token.

        Raises:
            InvalidToken: too short or not valid base62
            InvalidTokenVersion: unknown version byte
            BadKeyLength: key is not 32 bytes
            AuthenticationFailure: wrong key or tampered token
            ExpiredToken: TTL elapsed (only after authentication)
        """
        envelope, payload = self._open(token)
        logger.debug(f"Decoded token: timestamp={envelope.timestamp}, payload={len(payload)} bytes")
        return payload

    def decode_to_string(self, token: str) -> str:
        """Decode a token and return the payload as text, without strict UTF-8 validation."""
        return self.decode(token).decode('utf-8', errors='surrogateescape')

    def timestamp(self, token: str) -> int:
        """Return the issuance time of an authenticated token."""
        envelope, _ = self._open(token)
        return envelope.timestamp

    def verify(self, token: str) -> DecodeResult:
        """Decode without raising; failures are returned in DecodeResult.error."""
        try:
            envelope, payload = self._open(token)
        except BrancaError as e:
            return DecodeResult(valid=False, error=e)
        return DecodeResult(valid=True, payload=payload, timestamp=envelope.timestamp)
