"""Fully parsed keys, ready for cryptographic use, mirroring what a JWK can hold."""

from __future__ import annotations

import enum

from cryptography.hazmat.primitives.asymmetric import ec as crypto_ec
from cryptography.hazmat.primitives.asymmetric import rsa as crypto_rsa

from josebox import keyinfo
from josebox.b64 import Secret
from josebox.ec import (
    jwk_from_public_key,
    jwk_from_secret_key,
    public_key_from_jwk,
    secret_key_from_jwk,
)
from josebox.jwk import Ec, EcCurves, Oct, Okp, Rsa
from josebox.keyinfo import UnsupportedError
from josebox.rsakeys import (
    jwk_from_rsa_private,
    jwk_from_rsa_public,
    rsa_is_supported,
    rsa_private_from_jwk,
    rsa_public_from_jwk,
    rsa_strength,
)


class KeyType(enum.Enum):
    """The kinds of key a :class:`CryptoKey` can hold."""

    OCT = "oct"
    RSA = "RSA"
    P256 = "P-256"
    P384 = "P-384"
    P521 = "P-521"


_EC_TYPES = {
    EcCurves.P256: KeyType.P256,
    EcCurves.P384: KeyType.P384,
    EcCurves.P521: KeyType.P521,
}

_NATIVE_EC_TYPES = {
    "secp256r1": KeyType.P256,
    "secp384r1": KeyType.P384,
    "secp521r1": KeyType.P521,
}

_RAW = (bytes, bytearray, memoryview, Secret)
_RSA = (crypto_rsa.RSAPublicKey, crypto_rsa.RSAPrivateKey)
_EC = (crypto_ec.EllipticCurvePublicKey, crypto_ec.EllipticCurvePrivateKey)
_PUBLIC = (crypto_rsa.RSAPublicKey, crypto_ec.EllipticCurvePublicKey)


def _classify(material) -> KeyType:
    if isinstance(material, _RAW):
        return KeyType.OCT
    if isinstance(material, _RSA):
        return KeyType.RSA
    if isinstance(material, _EC):
        key_type = _NATIVE_EC_TYPES.get(material.curve.name)
        if key_type is None:
            raise UnsupportedError(f"unsupported curve {material.curve.name}")
        return key_type
    raise TypeError(f"not a key: {type(material).__name__}")


class CryptoKey:
    """A symmetric key, or a public or private RSA or NIST-curve key."""

    __slots__ = ("key_type", "material")

    def __init__(self, material) -> None:
        self.key_type = _classify(material)
        if self.key_type is KeyType.OCT:
            material = Secret(bytes(material))
        self.material = material

    def __repr__(self) -> str:
        kind = "secret" if self.is_secret() else "public"
        return f"CryptoKey({self.key_type.name}, {kind})"

    @classmethod
    def from_jwk_key(cls, key) -> "CryptoKey":
        """Parse JWK key material; private material yields a private key."""
        if isinstance(key, Oct):
            return cls(Secret(bytes(key.k)))
        if isinstance(key, Rsa):
            if key.prv is None:
                return cls(rsa_public_from_jwk(key))
            return cls(rsa_private_from_jwk(key))
        if isinstance(key, Ec):
            if key.crv not in _EC_TYPES:
                raise UnsupportedError(f"unsupported curve {key.crv.value}")
            if key.d is None:
                return cls(public_key_from_jwk(key))
            return cls(secret_key_from_jwk(key))
        if isinstance(key, Okp):
            raise UnsupportedError(f"unsupported curve {key.crv.value}")
        raise TypeError(f"not a key: {type(key).__name__}")

    def to_jwk_key(self):
        """Return the JWK key material for this key."""
        material = self.material
        if self.key_type is KeyType.OCT:
            return Oct(k=Secret(bytes(material)))
        if self.key_type is KeyType.RSA:
            if isinstance(material, crypto_rsa.RSAPrivateKey):
                return jwk_from_rsa_private(material)
            return jwk_from_rsa_public(material)
        if isinstance(material, crypto_ec.EllipticCurvePrivateKey):
            return jwk_from_secret_key(material)
        return jwk_from_public_key(material)

    def strength(self) -> int:
        """Return the strength as the size in bytes of a comparable symmetric key."""
        if self.key_type is KeyType.RSA:
            return rsa_strength(self.material)
        return keyinfo.strength(self.material)

    def is_supported(self, algo) -> bool:
        """Tell whether this key can be used with ``algo``."""
        if self.key_type is KeyType.RSA:
            return rsa_is_supported(self.material, algo)
        return keyinfo.is_supported(self.material, algo)

    def is_secret(self) -> bool:
        """Tell whether the key holds private material; symmetric keys always do."""
        return not isinstance(self.material, _PUBLIC)