"""
Branca Token
Authenticated and encrypted base62 tokens with optional expiration.

Format: Version || Timestamp || Nonce || Ciphertext || Tag
Library: PyNaCl (libsodium XChaCha20-Poly1305)
"""

from .base62 import BASE62_ALPHABET, Base62, b62decode, b62encode
from .envelope import VERSION, Envelope
from .exceptions import (
    AuthenticationFailure,
    BadKeyLength,
    BrancaError,
    ExpiredToken,
    InvalidToken,
    InvalidTokenVersion,
    RandomSourceFailure,
)
from .models import BrancaConfig
from .token import Branca, DecodeResult

__all__ = [
    'Branca',
    'BrancaConfig',
    'DecodeResult',
    'Envelope',
    'VERSION',
    'Base62',
    'BASE62_ALPHABET',
    'b62encode',
    'b62decode',
    'BrancaError',
    'InvalidToken',
    'InvalidTokenVersion',
    'BadKeyLength',
    'AuthenticationFailure',
    'ExpiredToken',
    'RandomSourceFailure',
]
