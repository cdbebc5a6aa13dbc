"""
Branca Token - Base62 Codec

Byte strings are read as one big-endian unsigned integer and written in
base 62. Each leading zero byte becomes one leading alphabet[0] character
so the original length survives the round trip.
"""

from typing import Dict

from .exceptions import InvalidToken

BASE62_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


class Base62:
    """Bijective byte <-> text transcoder over a 62-symbol alphabet."""

    def __init__(self, alphabet: str = BASE62_ALPHABET):
        if len(alphabet) != 62 or len(set(alphabet)) != 62:
            raise ValueError("base62 alphabet must contain 62 unique characters")
        self.alphabet = alphabet
        self.base = len(alphabet)
        self._index: Dict[str, int] = {char: i for i, char in enumerate(alphabet)}

    def encode(self, data: bytes) -> str:
        """Encode bytes to a base62 string."""
        zeros = len(data) - len(data.lstrip(b"\x00"))
        value = int.from_bytes(data, "big")

        digits = []
        while value:
            value, remainder = divmod(value, self.base)
            digits.append(self.alphabet[remainder])
        digits.extend(self.alphabet[0] * zeros)
        digits.reverse()
        return "".join(digits)

    def decode(self, text: str) -> bytes:
        """
        Decode a base62 string back to bytes.

        Raises:
            InvalidToken: text contains a character outside the alphabet
        """
        zero_char = self.alphabet[0]
        zeros = len(text) - len(text.lstrip(zero_char))

        value = 0
        for char in text:
            try:
                digit = self._index[char]
            except KeyError:
                raise InvalidToken(f"invalid base62 character: {char!r}") from None
            value = value * self.base + digit

        body = value.to_bytes((value.bit_length() + 7) // 8, "big")
        return b"\x00" * zeros + body


_default = Base62()


def b62encode(data: bytes) -> str:
    return _default.encode(data)


def b62decode(text: str) -> bytes:
    return _default.decode(text)
