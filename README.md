# josebox

Building blocks for JSON Object Signing and Encryption (JOSE) in Python:

- **Base64 helpers** (`josebox.b64`): strict unpadded base64url and
  standard base64 through the `Encoding` enumeration, `encode_bytes` and
  `decode_bytes` (which can require an exact decoded length), a `Secret`
  byte wrapper that compares in constant time and shows as `Secret(***)`,
  and a `Json` wrapper for base64-embedded JSON that keeps the original
  bytes next to the parsed value.
- **Streaming base64** (`josebox.stream`): `Encoder`, `Decoder` and
  `OptionalEncoder` feed chunks into sinks such as `BytesSink`, `TextSink`
  or a `Fanout` of several sinks. They report bad input block by block, so
  do not use them for secrets.
- **Algorithms** (`josebox.jwa`): the JWS signing algorithms as the
  `Signing` enumeration, with their wire names (`"ES256"`, `"EdDSA"`,
  `"none"`, ...), and `parse_algorithm`.
- **Keys** (`josebox.jwk`): `Jwk` and `JwkSet` with EC (`Ec`), RSA (`Rsa`),
  OKP (`Okp`) and symmetric (`Oct`) key material, and the key parameters
  in `Parameters` (`alg`, `kid`, `use`, `key_ops`, `x5c`, `x5t`, `x5t#S256`).
- **Key inspection** (`josebox.keyinfo`): `strength` and `is_supported`
  tell how strong a key is and whether it may be used with an algorithm.
- **Conversion to real keys** (`josebox.ec`, `josebox.rsakeys`,
  `josebox.cryptokey`): turn JWK material into `cryptography` key objects
  for P-256, P-384, P-521 and RSA, and back again. `CryptoKey` wraps a
  symmetric, RSA or NIST-curve key behind one type.
- **JWS** (`josebox.jws`, `josebox.jws_head`, `josebox.jws_crypto`): the
  general, flattened and compact serializations, protected and unprotected
  headers, and abstract signing and verification interfaces.

## Installation

```
pip install josebox
```

The package needs Python 3.10 or later and depends on `cryptography`.

## Reading a key set

```python
from josebox.jwk import JwkSet

data = {
    "keys": [
        {
            "kty": "EC",
            "crv": "P-256",
            "x": "MKBCTNIcKUSDii11ySs3526iDZ8AiTo7Tu6KPAqv7D4",
            "y": "4Etl6SRW2YiLUrN5vfvVHuhp7x8PxltmWWlbbM4IFyM",
            "use": "enc",
            "kid": "1",
        }
    ]
}

key_set = JwkSet.from_json(data)
assert key_set.to_json() == data
```

Serializing a key writes exactly the members that are set; a key read from
JSON and written back gives the same document.

## Checking what a key can do

```python
from josebox.jwa import Signing
from josebox.keyinfo import is_supported, strength

jwk = key_set.keys[0]
strength(jwk)                     # 16: a P-256 key is about as strong as a 16-byte secret
is_supported(jwk, Signing.ES256)  # True
is_supported(jwk, Signing.RS256)  # False
```

When a key names its own `alg`, only that algorithm is accepted for it.

## Compact JWS

```python
from josebox.jws import Flattened

jws = Flattened.parse_compact(compact_text)
header = jws.signature.protected.value   # the parsed Protected header
assert jws.to_compact() == compact_text
```

The protected header keeps the exact bytes it was read from, so writing
the compact form again reproduces the input. A compact JWS has exactly
three dot-separated parts; anything else raises `LengthError`, and invalid
base64 raises `LengthError` or `InvalidValueError` (both subclasses of
`josebox.b64.Base64Error`, itself a `ValueError`).

JSON serializations are read with `josebox.jws.parse_jws`, which tries the
general form first and then the flattened one.

## Errors

Converting JWK material to `cryptography` keys raises a subclass of
`josebox.keyinfo.CryptoError`:

- `InvalidKeyError`: the material does not describe a valid key;
- `NotPrivateError`: a private key was asked for but only public material is present;
- `AlgMismatchError`: the key is for a different curve than the one asked for;
- `UnsupportedError`: the key type or its form is not supported (OKP keys,
  secp256k1, RSA keys without prime factors or with more than two primes).

## What the package does not do

`josebox.jws_crypto` defines the `Signer`, `SigningKey`, `Verifier` and
`VerifyingKey` interfaces and `start_verification`, but no concrete
signature algorithm: creating or checking actual signatures needs your own
implementations of those interfaces. There is no support for JWE
(encryption) or for JWT claims, and no command-line tool.

## Running the tests

```
pip install josebox[test]
pytest
```