"""JSON Web Keys: key material, key parameters and key sets."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Union

from josebox.b64 import Encoding, Secret, decode_bytes, encode_bytes
from josebox.jwa import Signing, parse_algorithm


def _require(data: dict, name: str):
    try:
        return data[name]
    except KeyError:
        raise ValueError(f"missing field {name!r}") from None


def _check_object(data, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a JSON object")
    return data


def _b64(value, name: str, encoding: Encoding = Encoding.URL_UNPADDED, length=None) -> bytes:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a base64 string")
    return decode_bytes(value, encoding, length)


def _secret_field(data: dict, name: str) -> Secret:
    return Secret(_b64(_require(data, name), name))


def _optional_str(data: dict, name: str):
    value = data.get(name)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"{name} must be a string")
    return value


def _as_secret(value) -> Secret:
    return value if isinstance(value, Secret) else Secret(value)


def _as_optional_secret(value):
    return None if value is None else _as_secret(value)


class Class(enum.Enum):
    """The intended use of a key (``use``)."""

    ENCRYPTION = "enc"
    SIGNING = "sig"


class Operations(enum.Enum):
    """Permitted key operations (``key_ops``), declared in lexicographic order."""

    DECRYPT = "decrypt"
    DERIVE_BITS = "deriveBits"
    DERIVE_KEY = "deriveKey"
    ENCRYPT = "encrypt"
    SIGN = "sign"
    UNWRAP_KEY = "unwrapKey"
    VERIFY = "verify"
    WRAP_KEY = "wrapKey"


_OP_ORDER = {op: index for index, op in enumerate(Operations)}


@dataclass
class Thumbprint:
    """X.509 certificate thumbprints (SHA-1 and SHA-256)."""

    s1: bytes | None = None
    s256: bytes | None = None

    def __post_init__(self) -> None:
        if self.s1 is not None:
            self.s1 = bytes(self.s1)
        if self.s256 is not None:
            self.s256 = bytes(self.s256)

    def to_json(self) -> dict:
        """Return the JSON members for the thumbprints that are set."""
        out = {}
        if self.s1 is not None:
            out["x5t"] = encode_bytes(self.s1)
        if self.s256 is not None:
            out["x5t#S256"] = encode_bytes(self.s256)
        return out

    @classmethod
    def from_json(cls, data) -> "Thumbprint":
        """Read the thumbprints from a JSON object; their lengths are checked."""
        data = _check_object(data, "thumbprint")
        s1 = data.get("x5t")
        s256 = data.get("x5t#S256")
        return cls(
            s1=None if s1 is None else _b64(s1, "x5t", length=20),
            s256=None if s256 is None else _b64(s256, "x5t#S256", length=32),
        )


@dataclass
class Parameters:
    """JWK parameters that do not depend on the kind of key."""

    alg: Signing | None = None
    kid: str | None = None
    cls: Class | None = None
    ops: frozenset | None = None
    x5c: list | None = None
    x5t: Thumbprint = field(default_factory=Thumbprint)

    def __post_init__(self) -> None:
        if self.alg is not None:
            self.alg = parse_algorithm(self.alg)
        if self.cls is not None:
            self.cls = Class(self.cls)
        if self.ops is not None:
            self.ops = frozenset(Operations(op) for op in self.ops)
        if self.x5c is not None:
            self.x5c = [bytes(cert) for cert in self.x5c]

    @classmethod
    def from_algorithm(cls, alg) -> "Parameters":
        """Parameters naming ``alg``, with the key class that algorithm implies."""
        alg = parse_algorithm(alg)
        return cls(alg=alg, cls=Class.SIGNING)

    def to_json(self) -> dict:
        """Return the JSON members for the parameters that are set."""
        out = {}
        if self.alg is not None:
            out["alg"] = str(self.alg)
        if self.kid is not None:
            out["kid"] = self.kid
        if self.cls is not None:
            out["use"] = self.cls.value
        if self.ops is not None:
            out["key_ops"] = [op.value for op in sorted(self.ops, key=_OP_ORDER.__getitem__)]
        if self.x5c is not None:
            out["x5c"] = [encode_bytes(cert, Encoding.STANDARD) for cert in self.x5c]
        out.update(self.x5t.to_json())
        return out

    @classmethod
    def from_json(cls, data) -> "Parameters":
        """Read the parameters from a JSON object, ignoring unknown members."""
        data = _check_object(data, "parameters")

        alg = data.get("alg")
        use = data.get("use")
        if use is not None:
            try:
                use = Class(use)
            except ValueError:
                raise ValueError(f"unknown key use {use!r}") from None

        ops = data.get("key_ops")
        if ops is not None:
            if not isinstance(ops, list):
                raise ValueError("key_ops must be a list")
            try:
                ops = frozenset(Operations(op) for op in ops)
            except ValueError:
                raise ValueError("unknown key operation") from None

        x5c = data.get("x5c")
        if x5c is not None:
            if not isinstance(x5c, list):
                raise ValueError("x5c must be a list")
            x5c = [_b64(cert, "x5c", Encoding.STANDARD) for cert in x5c]

        return cls(
            alg=None if alg is None else parse_algorithm(alg),
            kid=_optional_str(data, "kid"),
            cls=use,
            ops=ops,
            x5c=x5c,
            x5t=Thumbprint.from_json(data),
        )


class EcCurves(enum.Enum):
    """Elliptic curves."""

    P256 = "P-256"
    P384 = "P-384"
    P521 = "P-521"
    P256K = "secp256k1"


@dataclass
class Ec:
    """An elliptic-curve key."""

    crv: EcCurves
    x: bytes
    y: bytes
    d: Secret | None = None

    def __post_init__(self) -> None:
        self.crv = EcCurves(self.crv)
        self.x = bytes(self.x)
        self.y = bytes(self.y)
        self.d = _as_optional_secret(self.d)


class OkpCurves(enum.Enum):
    """CFRG curves."""

    ED25519 = "Ed25519"
    ED448 = "Ed448"
    X25519 = "X25519"
    X448 = "X448"


@dataclass
class Okp:
    """An octet key pair on a CFRG curve."""

    crv: OkpCurves
    x: bytes
    d: Secret | None = None

    def __post_init__(self) -> None:
        self.crv = OkpCurves(self.crv)
        self.x = bytes(self.x)
        self.d = _as_optional_secret(self.d)


@dataclass
class Oct:
    """A symmetric octet key."""

    k: Secret

    def __post_init__(self) -> None:
        self.k = _as_secret(self.k)


@dataclass
class RsaOtherPrimes:
    """An additional RSA prime with its CRT values."""

    r: Secret
    d: Secret
    t: Secret

    def __post_init__(self) -> None:
        self.r = _as_secret(self.r)
        self.d = _as_secret(self.d)
        self.t = _as_secret(self.t)


@dataclass
class RsaOptional:
    """Optional RSA private key material."""

    p: Secret
    q: Secret
    dp: Secret
    dq: Secret
    qi: Secret
    oth: list = field(default_factory=list)

    def __post_init__(self) -> None:
        self.p = _as_secret(self.p)
        self.q = _as_secret(self.q)
        self.dp = _as_secret(self.dp)
        self.dq = _as_secret(self.dq)
        self.qi = _as_secret(self.qi)
        self.oth = list(self.oth)


@dataclass
class RsaPrivate:
    """RSA private key material."""

    d: Secret
    opt: RsaOptional | None = None

    def __post_init__(self) -> None:
        self.d = _as_secret(self.d)


@dataclass
class Rsa:
    """An RSA key."""

    n: bytes
    e: bytes
    prv: RsaPrivate | None = None

    def __post_init__(self) -> None:
        self.n = bytes(self.n)
        self.e = bytes(self.e)


Key = Union[Ec, Rsa, Oct, Okp]

_OPTIONAL_RSA = ("p", "q", "dp", "dq", "qi")


def _rsa_to_json(key: Rsa) -> dict:
    out = {"kty": "RSA", "n": encode_bytes(key.n), "e": encode_bytes(key.e)}
    if key.prv is not None:
        out["d"] = key.prv.d.encode()
        opt = key.prv.opt
        if opt is not None:
            for name in _OPTIONAL_RSA:
                out[name] = getattr(opt, name).encode()
            if opt.oth:
                out["oth"] = [
                    {"r": prime.r.encode(), "d": prime.d.encode(), "t": prime.t.encode()}
                    for prime in opt.oth
                ]
    return out


def _rsa_from_json(data: dict) -> Rsa:
    prv = None
    if data.get("d") is not None:
        opt = None
        if all(data.get(name) is not None for name in _OPTIONAL_RSA):
            oth = data.get("oth") or []
            if not isinstance(oth, list):
                raise ValueError("oth must be a list")
            opt = RsaOptional(
                *(_secret_field(data, name) for name in _OPTIONAL_RSA),
                oth=[
                    RsaOtherPrimes(
                        r=_secret_field(_check_object(prime, "oth"), "r"),
                        d=_secret_field(prime, "d"),
                        t=_secret_field(prime, "t"),
                    )
                    for prime in oth
                ],
            )
        prv = RsaPrivate(d=_secret_field(data, "d"), opt=opt)
    return Rsa(
        n=_b64(_require(data, "n"), "n"),
        e=_b64(_require(data, "e"), "e"),
        prv=prv,
    )


def key_to_json(key) -> dict:
    """Return the JSON members, ``kty`` included, for some key material."""
    if isinstance(key, Ec):
        out = {
            "kty": "EC",
            "crv": key.crv.value,
            "x": encode_bytes(key.x),
            "y": encode_bytes(key.y),
        }
        if key.d is not None:
            out["d"] = key.d.encode()
        return out
    if isinstance(key, Rsa):
        return _rsa_to_json(key)
    if isinstance(key, Oct):
        return {"kty": "oct", "k": key.k.encode()}
    if isinstance(key, Okp):
        out = {"kty": "OKP", "crv": key.crv.value, "x": encode_bytes(key.x)}
        if key.d is not None:
            out["d"] = key.d.encode()
        return out
    raise TypeError(f"not a key: {type(key).__name__}")


def _curve(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        raise ValueError(f"unknown curve {value!r}") from None


def key_from_json(data) -> Key:
    """Read key material from a JSON object, choosing the type by ``kty``."""
    data = _check_object(data, "key")
    kty = _require(data, "kty")
    if kty == "EC":
        d = data.get("d")
        return Ec(
            crv=_curve(EcCurves, _require(data, "crv")),
            x=_b64(_require(data, "x"), "x"),
            y=_b64(_require(data, "y"), "y"),
            d=None if d is None else Secret(_b64(d, "d")),
        )
    if kty == "RSA":
        return _rsa_from_json(data)
    if kty == "oct":
        return Oct(k=_secret_field(data, "k"))
    if kty == "OKP":
        d = data.get("d")
        return Okp(
            crv=_curve(OkpCurves, _require(data, "crv")),
            x=_b64(_require(data, "x"), "x"),
            d=None if d is None else Secret(_b64(d, "d")),
        )
    raise ValueError(f"unknown key type {kty!r}")


@dataclass
class Jwk:
    """A JSON Web Key: key material plus parameters."""

    key: Key
    prm: Parameters = field(default_factory=Parameters)

    def to_json(self) -> dict:
        """Return the key as a JSON object."""
        return {**key_to_json(self.key), **self.prm.to_json()}

    @classmethod
    def from_json(cls, data) -> "Jwk":
        """Read a key from a JSON object."""
        data = _check_object(data, "JWK")
        return cls(key=key_from_json(data), prm=Parameters.from_json(data))


@dataclass
class JwkSet:
    """A set of JSON Web Keys."""

    keys: list = field(default_factory=list)

    def to_json(self) -> dict:
        """Return the set as a JSON object."""
        return {"keys": [jwk.to_json() for jwk in self.keys]}

    @classmethod
    def from_json(cls, data) -> "JwkSet":
        """Read a key set from a JSON object."""
        data = _check_object(data, "JWK set")
        keys = _require(data, "keys")
        if not isinstance(keys, list):
            raise ValueError("keys must be a list")
        return cls(keys=[Jwk.from_json(item) for item in keys])