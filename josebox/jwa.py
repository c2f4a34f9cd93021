"""JSON Web Algorithms: the names that may appear in an ``alg`` parameter."""

from __future__ import annotations

import enum


class Signing(enum.Enum):
    """Digital signature and MAC algorithms."""

    EDDSA = "EdDSA"
    ES256 = "ES256"
    ES256K = "ES256K"
    ES384 = "ES384"
    ES512 = "ES512"
    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    PS256 = "PS256"
    PS384 = "PS384"
    PS512 = "PS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    NULL = "none"

    def __str__(self) -> str:
        return self.value


# Only signing algorithms exist so far, so an algorithm is a signing algorithm.
Algorithm = Signing


def parse_algorithm(value) -> Signing:
    """Return the algorithm named by ``value``, which is matched case-sensitively."""
    if isinstance(value, Signing):
        return value
    if not isinstance(value, str):
        raise ValueError("algorithm must be a string")
    try:
        return Signing(value)
    except ValueError:
        raise ValueError(f"unknown algorithm {value!r}") from None