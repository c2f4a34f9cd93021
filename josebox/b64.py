"""Base64 encodings, secret byte strings and base64-embedded JSON."""

from __future__ import annotations

import base64
import binascii
import enum
import hmac
import json
import string
from dataclasses import dataclass
from typing import Any


class Base64Error(ValueError):
    """Raised when base64 text cannot be decoded."""


class LengthError(Base64Error):
    """The length of the input or of the decoded data is invalid."""


class InvalidValueError(Base64Error):
    """The input holds a character or bit pattern that is not valid base64."""


_COMMON = frozenset(string.ascii_letters + string.digits)
_URL_ALPHABET = _COMMON | frozenset("-_")
_STANDARD_ALPHABET = _COMMON | frozenset("+/")


class Encoding(enum.Enum):
    """A strict base64 variant."""

    URL_UNPADDED = "base64url"
    STANDARD = "base64"

    def encode(self, data) -> str:
        """Encode bytes to base64 text."""
        raw = bytes(data)
        if self is Encoding.STANDARD:
            return base64.b64encode(raw).decode("ascii")
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    def decode(self, text) -> bytes:
        """Decode base64 text, rejecting anything but the canonical form."""
        if isinstance(text, (bytes, bytearray, memoryview)):
            try:
                text = bytes(text).decode("ascii")
            except UnicodeDecodeError as exc:
                raise InvalidValueError("invalid base64 character") from exc

        if self is Encoding.STANDARD:
            if len(text) % 4:
                raise LengthError("invalid base64 length")
            body = text.rstrip("=")
            padded = text
            alphabet = _STANDARD_ALPHABET
            altchars = None
        else:
            if len(text) % 4 == 1:
                raise LengthError("invalid base64 length")
            body = text
            padded = text + "=" * (-len(text) % 4)
            alphabet = _URL_ALPHABET
            altchars = b"-_"

        if not set(body) <= alphabet:
            raise InvalidValueError("invalid base64 character")

        try:
            decoded = base64.b64decode(padded, altchars=altchars, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidValueError("invalid base64") from exc

        if self.encode(decoded) != text:
            raise InvalidValueError("non-canonical base64")
        return decoded


def encode_bytes(data, encoding: Encoding = Encoding.URL_UNPADDED) -> str:
    """Encode bytes as a base64 string."""
    return encoding.encode(data)


def decode_bytes(
    value, encoding: Encoding = Encoding.URL_UNPADDED, length: int | None = None
) -> bytes:
    """Decode a base64 string, optionally requiring an exact decoded length."""
    if not isinstance(value, str):
        raise TypeError("expected a base64 string")
    decoded = encoding.decode(value)
    if length is not None and len(decoded) != length:
        raise LengthError("invalid base64 length")
    return decoded


class Secret:
    """Secret bytes: constant-time equality and a repr that hides the content."""

    __slots__ = ("_data",)

    def __init__(self, data=b"") -> None:
        self._data = bytes(data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Secret):
            return NotImplemented
        return hmac.compare_digest(self._data, other._data)

    __hash__ = None  # type: ignore[assignment]

    def __bytes__(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return "Secret(***)"

    def encode(self) -> str:
        """Return the unpadded base64url form."""
        return Encoding.URL_UNPADDED.encode(self._data)

    @classmethod
    def decode(cls, text) -> "Secret":
        """Build a secret from unpadded base64url text."""
        return cls(decode_bytes(text))


@dataclass(frozen=True)
class Json:
    """A JSON document kept together with the exact bytes it was read from.

    The raw bytes are what get encoded again, so the original serialization
    is never lost.
    """

    raw: bytes
    value: Any

    @classmethod
    def encode(cls, value) -> "Json":
        """Serialize ``value`` (or its ``to_json()`` form) to compact JSON."""
        to_json = getattr(value, "to_json", None)
        document = to_json() if callable(to_json) else value
        raw = json.dumps(document, separators=(",", ":"), ensure_ascii=False)
        return cls(raw.encode("utf-8"), value)

    @classmethod
    def from_bytes(cls, raw) -> "Json":
        """Parse raw JSON bytes."""
        raw = bytes(raw)
        return cls(raw, json.loads(raw))

    @classmethod
    def from_str(cls, text) -> "Json":
        """Decode base64url text and parse the JSON inside it."""
        return cls.from_bytes(decode_bytes(text))

    def to_str(self) -> str:
        """Return the raw bytes as unpadded base64url."""
        return encode_bytes(self.raw)

    def __bytes__(self) -> bytes:
        return self.raw