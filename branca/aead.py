"""
Branca Token - AEAD Engine

Security Architecture:
- Cipher: XChaCha20-Poly1305-IETF (via nacl.bindings, libsodium)
- Key: 256-bit, Nonce: 192-bit, Tag: 128-bit
- Header bytes are authenticated as associated data, never encrypted
"""

from typing import Callable, Protocol

from nacl import bindings
from nacl.exceptions import CryptoError

from .exceptions import AuthenticationFailure, BadKeyLength

KEY_SIZE = bindings.crypto_aead_xchacha20poly1305_ietf_KEYBYTES
NONCE_SIZE = bindings.crypto_aead_xchacha20poly1305_ietf_NPUBBYTES
TAG_SIZE = bindings.crypto_aead_xchacha20poly1305_ietf_ABYTES


class Cipher(Protocol):
    """Narrow AEAD capability used by the token codec."""

    def seal(self, nonce: bytes, plaintext: bytes, aad: bytes) -> bytes:
        ...

    def open(self, nonce: bytes, ciphertext: bytes, aad: bytes) -> bytes:
        ...


CipherFactory = Callable[[bytes], Cipher]


class XChaCha20Poly1305:
    """
    libsodium XChaCha20-Poly1305 bound to one 32-byte key.

    seal() returns ciphertext||tag; open() verifies the tag before
    returning any plaintext.
    """

    def __init__(self, key: bytes):
        if len(key) != KEY_SIZE:
            raise BadKeyLength(len(key), KEY_SIZE)
        self._key = bytes(key)

    def seal(self, nonce: bytes, plaintext: bytes, aad: bytes) -> bytes:
        return bindings.crypto_aead_xchacha20poly1305_ietf_encrypt(
            plaintext, aad, nonce, self._key
        )

    def open(self, nonce: bytes, ciphertext: bytes, aad: bytes) -> bytes:
        """
        Verify and decrypt ciphertext||tag.

        Raises:
            AuthenticationFailure: tag mismatch, wrong key or truncated input
        """
        if len(ciphertext) < TAG_SIZE or len(nonce) != NONCE_SIZE:
            raise AuthenticationFailure()
        try:
            return bindings.crypto_aead_xchacha20poly1305_ietf_decrypt(
                ciphertext, aad, nonce, self._key
            )
        except CryptoError as e:
            raise AuthenticationFailure() from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key=<{len(self._key)} bytes>)"
