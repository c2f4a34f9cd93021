"""Conversion between EC JSON Web Keys and NIST-curve keys."""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import ec as crypto_ec

from josebox.b64 import Secret
from josebox.jwk import Ec, EcCurves
from josebox.keyinfo import (
    AlgMismatchError,
    InvalidKeyError,
    NotPrivateError,
    UnsupportedError,
)

_CURVES = {
    EcCurves.P256: (crypto_ec.SECP256R1, 32),
    EcCurves.P384: (crypto_ec.SECP384R1, 48),
    EcCurves.P521: (crypto_ec.SECP521R1, 66),
}

_BY_NAME = {
    "secp256r1": EcCurves.P256,
    "secp384r1": EcCurves.P384,
    "secp521r1": EcCurves.P521,
}

# Shortest scalar encoding accepted before left-padding to the field size.
_MIN_SCALAR_LEN = 24


def _curve_info(curve: EcCurves):
    try:
        return _CURVES[curve]
    except KeyError:
        raise UnsupportedError(f"unsupported curve {curve.value}") from None


def _target_curve(ec: Ec, curve) -> EcCurves:
    target = ec.crv if curve is None else EcCurves(curve)
    _curve_info(target)
    if ec.crv != target:
        raise AlgMismatchError(f"key is on {ec.crv.value}, not {target.value}")
    return target


def public_key_from_jwk(ec: Ec, curve=None) -> crypto_ec.EllipticCurvePublicKey:
    """Build a public key from EC key material on ``curve`` (default: the key's own)."""
    target = _target_curve(ec, curve)
    native, size = _curve_info(target)
    if len(ec.x) != size or len(ec.y) != size:
        raise InvalidKeyError("coordinate has the wrong length")
    numbers = crypto_ec.EllipticCurvePublicNumbers(
        int.from_bytes(ec.x, "big"), int.from_bytes(ec.y, "big"), native()
    )
    try:
        return numbers.public_key()
    except ValueError as exc:
        raise InvalidKeyError("point is not on the curve") from exc


def secret_key_from_jwk(ec: Ec, curve=None) -> crypto_ec.EllipticCurvePrivateKey:
    """Build a private key from the ``d`` value of EC key material."""
    target = _target_curve(ec, curve)
    native, size = _curve_info(target)
    if ec.d is None:
        raise NotPrivateError("key has no private part")
    raw = bytes(ec.d)
    if not min(_MIN_SCALAR_LEN, size) <= len(raw) <= size:
        raise InvalidKeyError("private scalar has the wrong length")
    try:
        return crypto_ec.derive_private_key(int.from_bytes(raw, "big"), native())
    except (ValueError, TypeError) as exc:
        raise InvalidKeyError("invalid private scalar") from exc


def _curve_of(key) -> EcCurves:
    curve = _BY_NAME.get(key.curve.name)
    if curve is None:
        raise UnsupportedError(f"unsupported curve {key.curve.name}")
    return curve


def jwk_from_public_key(key) -> Ec:
    """Return EC key material for a public key."""
    if not isinstance(key, crypto_ec.EllipticCurvePublicKey):
        raise TypeError("expected an elliptic-curve public key")
    curve = _curve_of(key)
    _, size = _CURVES[curve]
    numbers = key.public_numbers()
    return Ec(
        crv=curve,
        x=numbers.x.to_bytes(size, "big"),
        y=numbers.y.to_bytes(size, "big"),
    )


def jwk_from_secret_key(key) -> Ec:
    """Return EC key material, ``d`` included, for a private key."""
    if not isinstance(key, crypto_ec.EllipticCurvePrivateKey):
        raise TypeError("expected an elliptic-curve private key")
    material = jwk_from_public_key(key.public_key())
    _, size = _CURVES[material.crv]
    material.d = Secret(key.private_numbers().private_value.to_bytes(size, "big"))
    return material