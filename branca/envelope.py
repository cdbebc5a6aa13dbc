"""
Branca Token - Envelope Codec
Builds and parses the fixed binary layout of a token.

Layout (after base62 decoding):
    offset 0       version (0xBA)
    offset 1..4    timestamp, big-endian uint32
    offset 5..28   nonce, 24 bytes
    offset 29..    ciphertext
    last 16 bytes  Poly1305 tag
"""

import struct
from dataclasses import dataclass
from typing import Tuple

from .aead import NONCE_SIZE, TAG_SIZE
from .exceptions import InvalidToken, InvalidTokenVersion

VERSION = 0xBA
HEADER_SIZE = 1 + 4 + NONCE_SIZE
MIN_TOKEN_LENGTH = 62
MAX_TIMESTAMP = 0xFFFFFFFF

_HEADER = struct.Struct(f">BI{NONCE_SIZE}s")


def build_header(timestamp: int, nonce: bytes, version: int = VERSION) -> bytes:
    """Concatenate version || timestamp || nonce into the 29-byte header."""
    if len(nonce) != NONCE_SIZE:
        raise InvalidToken(f"nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")
    return _HEADER.pack(version, timestamp & MAX_TIMESTAMP, nonce)


def parse_header(header: bytes) -> Tuple[int, int, bytes]:
    """Split a 29-byte header into (version, timestamp, nonce)."""
    if len(header) < HEADER_SIZE:
        raise InvalidToken(f"token header is {len(header)} bytes, need {HEADER_SIZE}")
    return _HEADER.unpack_from(header)


@dataclass(frozen=True)
class Envelope:
    """One decoded token. ciphertext includes the trailing tag."""
    version: int
    timestamp: int
    nonce: bytes
    ciphertext: bytes

    @property
    def header(self) -> bytes:
        return build_header(self.timestamp, self.nonce, self.version)

    @property
    def tag(self) -> bytes:
        return self.ciphertext[-TAG_SIZE:]

    def to_bytes(self) -> bytes:
        return self.header + self.ciphertext

    def check_version(self, expected: int = VERSION) -> None:
        if self.version != expected:
            raise InvalidTokenVersion(self.version, expected)

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Envelope":
        version, timestamp, nonce = parse_header(raw)
        return cls(
            version=version,
            timestamp=timestamp,
            nonce=nonce,
            ciphertext=raw[HEADER_SIZE:],
        )
