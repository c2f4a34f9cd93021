"""Conversion between RSA JSON Web Keys and RSA keys, with their strength rules."""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import rsa as crypto_rsa

from josebox.b64 import Secret
from josebox.jwa import Signing, parse_algorithm
from josebox.jwk import Rsa, RsaOptional, RsaPrivate
from josebox.keyinfo import InvalidKeyError, NotPrivateError, UnsupportedError

# Minimum strength (in symmetric-key bytes) that a private key needs per algorithm.
_RSA_MIN = {
    Signing.RS256: 16,
    Signing.RS384: 24,
    Signing.RS512: 32,
    Signing.PS256: 16,
    Signing.PS384: 24,
    Signing.PS512: 32,
}

# Public keys only need this strength, whatever the algorithm: some
# published examples would be rejected by anything stricter.
_PUBLIC_MIN = 16


def _to_int(data) -> int:
    return int.from_bytes(bytes(data), "big")


def _to_bytes(value: int) -> bytes:
    return value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")


def rsa_public_from_jwk(rsa: Rsa) -> crypto_rsa.RSAPublicKey:
    """Build an RSA public key from the modulus and exponent of RSA key material."""
    numbers = crypto_rsa.RSAPublicNumbers(_to_int(rsa.e), _to_int(rsa.n))
    try:
        return numbers.public_key()
    except ValueError as exc:
        raise InvalidKeyError("invalid RSA public key") from exc


def rsa_private_from_jwk(rsa: Rsa) -> crypto_rsa.RSAPrivateKey:
    """Build an RSA private key from RSA key material holding its prime factors.

    The CRT values are derived from ``d``, ``p`` and ``q``; keys with more
    than two primes are not supported.
    """
    if rsa.prv is None:
        raise NotPrivateError("key has no private part")
    opt = rsa.prv.opt
    if opt is None:
        raise UnsupportedError("private key without prime factors")
    if opt.oth:
        raise UnsupportedError("multi-prime RSA keys are not supported")

    n = _to_int(rsa.n)
    e = _to_int(rsa.e)
    d = _to_int(rsa.prv.d)
    p = _to_int(opt.p)
    q = _to_int(opt.q)
    try:
        numbers = crypto_rsa.RSAPrivateNumbers(
            p=p,
            q=q,
            d=d,
            dmp1=crypto_rsa.rsa_crt_dmp1(d, p),
            dmq1=crypto_rsa.rsa_crt_dmq1(d, q),
            iqmp=crypto_rsa.rsa_crt_iqmp(p, q),
            public_numbers=crypto_rsa.RSAPublicNumbers(e, n),
        )
        return numbers.private_key()
    except (ValueError, ZeroDivisionError) as exc:
        raise InvalidKeyError("invalid RSA private key") from exc


def jwk_from_rsa_public(key) -> Rsa:
    """Return RSA key material for a public key."""
    if not isinstance(key, crypto_rsa.RSAPublicKey):
        raise TypeError("expected an RSA public key")
    numbers = key.public_numbers()
    return Rsa(n=_to_bytes(numbers.n), e=_to_bytes(numbers.e))


def jwk_from_rsa_private(key) -> Rsa:
    """Return RSA key material, private parts included, for a private key."""
    if not isinstance(key, crypto_rsa.RSAPrivateKey):
        raise TypeError("expected an RSA private key")
    numbers = key.private_numbers()
    public = numbers.public_numbers
    opt = RsaOptional(
        p=Secret(_to_bytes(numbers.p)),
        q=Secret(_to_bytes(numbers.q)),
        dp=Secret(_to_bytes(numbers.dmp1)),
        dq=Secret(_to_bytes(numbers.dmq1)),
        qi=Secret(_to_bytes(numbers.iqmp)),
    )
    return Rsa(
        n=_to_bytes(public.n),
        e=_to_bytes(public.e),
        prv=RsaPrivate(d=Secret(_to_bytes(numbers.d)), opt=opt),
    )


def _check_key(key) -> None:
    if not isinstance(key, (crypto_rsa.RSAPublicKey, crypto_rsa.RSAPrivateKey)):
        raise TypeError("expected an RSA key")


def rsa_strength(key) -> int:
    """Return the strength of an RSA key: its modulus size in bytes divided by 16."""
    _check_key(key)
    return (key.key_size + 7) // 8 // 16


def rsa_is_supported(key, algo) -> bool:
    """Tell whether an RSA key can be used with ``algo``."""
    _check_key(key)
    algo = parse_algorithm(algo)
    minimum = _RSA_MIN.get(algo)
    if minimum is None:
        return False
    if isinstance(key, crypto_rsa.RSAPublicKey):
        return rsa_strength(key) >= _PUBLIC_MIN
    return rsa_strength(key) >= minimum