"""JOSE building blocks: base64 helpers, JWA algorithms, JWK keys and JWS serializations."""

__version__ = "0.1.0"

__all__ = [
    "b64",
    "stream",
    "jwa",
    "jwk",
    "keyinfo",
    "ec",
    "rsakeys",
    "cryptokey",
    "jws_head",
    "jws",
    "jws_crypto",
]