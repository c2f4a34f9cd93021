"""Key strength and algorithm support, plus the errors raised for bad key material."""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import ec as crypto_ec

from josebox.b64 import Secret
from josebox.jwa import Signing, parse_algorithm
from josebox.jwk import Ec, EcCurves, Jwk, Oct, Okp, OkpCurves, Rsa


class CryptoError(ValueError):
    """Base class for errors about key material."""


class InvalidKeyError(CryptoError):
    """The key material is invalid."""


class NotPrivateError(CryptoError):
    """A private key was needed but only public material is present."""


class AlgMismatchError(CryptoError):
    """The key belongs to a different algorithm or curve than the one asked for."""


class UnsupportedError(CryptoError):
    """The requested kind of key is not supported."""


_HMAC_MIN = {Signing.HS256: 16, Signing.HS384: 24, Signing.HS512: 32}

_RSA_MIN = {
    Signing.RS256: 16,
    Signing.RS384: 24,
    Signing.RS512: 32,
    Signing.PS256: 16,
    Signing.PS384: 24,
    Signing.PS512: 32,
}

_EC_STRENGTH = {
    EcCurves.P256: 16,
    EcCurves.P256K: 16,
    EcCurves.P384: 24,
    EcCurves.P521: 32,
}

_EC_ALG = {
    EcCurves.P256: Signing.ES256,
    EcCurves.P256K: Signing.ES256K,
    EcCurves.P384: Signing.ES384,
    EcCurves.P521: Signing.ES512,
}

_OKP_STRENGTH = {
    OkpCurves.ED25519: 16,
    OkpCurves.ED448: 24,
    OkpCurves.X25519: 16,
    OkpCurves.X448: 24,
}

_NATIVE_CURVES = {
    "secp256r1": EcCurves.P256,
    "secp384r1": EcCurves.P384,
    "secp521r1": EcCurves.P521,
}

_NATIVE_EC = (crypto_ec.EllipticCurvePublicKey, crypto_ec.EllipticCurvePrivateKey)
_RAW = (bytes, bytearray, memoryview, Secret)


def _native_curve(key) -> EcCurves:
    curve = _NATIVE_CURVES.get(key.curve.name)
    if curve is None:
        raise UnsupportedError(f"unsupported curve {key.curve.name}")
    return curve


def _hmac_supported(size: int, algo: Signing) -> bool:
    minimum = _HMAC_MIN.get(algo)
    return minimum is not None and size >= minimum


def strength(key) -> int:
    """Return the key's strength as the size in bytes of a comparable symmetric key."""
    if isinstance(key, Jwk):
        return strength(key.key)
    if isinstance(key, Ec):
        return _EC_STRENGTH[key.crv]
    if isinstance(key, Rsa):
        return len(key.n) // 16
    if isinstance(key, Oct):
        return len(key.k)
    if isinstance(key, Okp):
        return _OKP_STRENGTH[key.crv]
    if isinstance(key, _RAW):
        return len(bytes(key))
    if isinstance(key, _NATIVE_EC):
        return _EC_STRENGTH[_native_curve(key)]
    raise TypeError(f"not a key: {type(key).__name__}")


def is_supported(key, algo) -> bool:
    """Tell whether ``key`` can be used with the algorithm ``algo``."""
    algo = parse_algorithm(algo)
    if isinstance(key, Jwk):
        allowed = key.prm.alg is None or key.prm.alg == algo
        return is_supported(key.key, algo) and allowed
    if isinstance(key, Ec):
        return _EC_ALG[key.crv] == algo
    if isinstance(key, Rsa):
        minimum = _RSA_MIN.get(algo)
        return minimum is not None and strength(key) >= minimum
    if isinstance(key, (Oct,) + _RAW):
        return _hmac_supported(strength(key), algo)
    if isinstance(key, Okp):
        return algo == Signing.EDDSA
    if isinstance(key, _NATIVE_EC):
        return _EC_ALG[_native_curve(key)] == algo
    raise TypeError(f"not a key: {type(key).__name__}")