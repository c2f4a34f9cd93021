"""JWS protected and unprotected headers."""

from __future__ import annotations

from dataclasses import dataclass, field

from josebox.b64 import Encoding, decode_bytes, encode_bytes
from josebox.jwa import Signing, parse_algorithm
from josebox.jwk import Jwk, Thumbprint


def _check_object(data, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a JSON object")
    return data


def _optional_str(data: dict, name: str):
    value = data.get(name)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    return value


def _b64(value, name: str, encoding: Encoding = Encoding.URL_UNPADDED) -> bytes:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a base64 string")
    return decode_bytes(value, encoding)


@dataclass
class Unprotected:
    """The JWS unprotected header."""

    alg: Signing | None = None
    jwk: Jwk | None = None
    kid: str | None = None
    x5c: list | None = None
    x5t: Thumbprint = field(default_factory=Thumbprint)
    typ: str | None = None
    cty: str | None = None

    def __post_init__(self) -> None:
        if self.alg is not None:
            self.alg = parse_algorithm(self.alg)
        if self.x5c is not None:
            self.x5c = [bytes(cert) for cert in self.x5c]

    def to_json(self) -> dict:
        """Return the header members that are set."""
        out = {}
        if self.alg is not None:
            out["alg"] = str(self.alg)
        if self.jwk is not None:
            out["jwk"] = self.jwk.to_json()
        if self.kid is not None:
            out["kid"] = self.kid
        if self.x5c is not None:
            out["x5c"] = [encode_bytes(cert, Encoding.STANDARD) for cert in self.x5c]
        out.update(self.x5t.to_json())
        if self.typ is not None:
            out["typ"] = self.typ
        if self.cty is not None:
            out["cty"] = self.cty
        return out

    @classmethod
    def from_json(cls, data) -> "Unprotected":
        """Read the header from a JSON object, ignoring unknown members."""
        data = _check_object(data, "header")
        alg = data.get("alg")
        jwk = data.get("jwk")
        x5c = data.get("x5c")
        if x5c is not None:
            if not isinstance(x5c, list):
                raise ValueError("x5c must be a list")
            x5c = [_b64(cert, "x5c", Encoding.STANDARD) for cert in x5c]
        return cls(
            alg=None if alg is None else parse_algorithm(alg),
            jwk=None if jwk is None else Jwk.from_json(jwk),
            kid=_optional_str(data, "kid"),
            x5c=x5c,
            x5t=Thumbprint.from_json(data),
            typ=_optional_str(data, "typ"),
            cty=_optional_str(data, "cty"),
        )


@dataclass
class Protected:
    """The JWS protected header."""

    crit: list | None = None
    nonce: bytes | None = None
    b64: bool = True
    oth: Unprotected = field(default_factory=Unprotected)

    def __post_init__(self) -> None:
        if self.crit is not None:
            self.crit = list(self.crit)
        if self.nonce is not None:
            self.nonce = bytes(self.nonce)

    def to_json(self) -> dict:
        """Return the header members that are set; ``b64`` only when false."""
        out = {}
        if self.crit is not None:
            out["crit"] = list(self.crit)
        if self.nonce is not None:
            out["nonce"] = encode_bytes(self.nonce)
        if not self.b64:
            out["b64"] = False
        out.update(self.oth.to_json())
        return out

    @classmethod
    def from_json(cls, data) -> "Protected":
        """Read the header from a JSON object, ignoring unknown members."""
        data = _check_object(data, "protected header")
        crit = data.get("crit")
        if crit is not None:
            if not isinstance(crit, list) or not all(isinstance(c, str) for c in crit):
                raise ValueError("crit must be a list of strings")
        nonce = data.get("nonce")
        b64 = data.get("b64", True)
        if not isinstance(b64, bool):
            raise ValueError("b64 must be a boolean")
        return cls(
            crit=crit,
            nonce=None if nonce is None else _b64(nonce, "nonce"),
            b64=b64,
            oth=Unprotected.from_json(data),
        )