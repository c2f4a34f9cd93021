"""JSON Web Signature serializations: general, flattened and compact."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Union

from josebox.b64 import Json, LengthError, decode_bytes, encode_bytes
from josebox.jws_head import Protected, Unprotected


def _check_object(data, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a JSON object")
    return data


def _b64(value, name: str) -> bytes:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a base64 string")
    return decode_bytes(value)


def _protected_from_str(text) -> Json:
    if not isinstance(text, str):
        raise ValueError("protected must be a base64 string")
    parsed = Json.from_str(text)
    return Json(parsed.raw, Protected.from_json(parsed.value))


def _optional_payload(data: dict):
    payload = data.get("payload")
    return None if payload is None else _b64(payload, "payload")


def _payload_json(payload):
    return None if payload is None else encode_bytes(payload)


@dataclass
class Signature:
    """One signature with its headers."""

    header: Unprotected | None = None
    protected: Json | None = None
    signature: bytes = b""

    def __post_init__(self) -> None:
        if isinstance(self.protected, Protected):
            self.protected = Json.encode(self.protected)
        self.signature = bytes(self.signature)

    def to_json(self) -> dict:
        """Return the signature as a JSON object."""
        return {
            "header": None if self.header is None else self.header.to_json(),
            "protected": None if self.protected is None else self.protected.to_str(),
            "signature": encode_bytes(self.signature),
        }

    @classmethod
    def from_json(cls, data) -> "Signature":
        """Read a signature from a JSON object."""
        data = _check_object(data, "signature")
        if "signature" not in data:
            raise ValueError("missing field 'signature'")
        header = data.get("header")
        protected = data.get("protected")
        return cls(
            header=None if header is None else Unprotected.from_json(header),
            protected=None if protected is None else _protected_from_str(protected),
            signature=_b64(data["signature"], "signature"),
        )


@dataclass
class Flattened:
    """The flattened serialization: one payload and one signature."""

    payload: bytes | None = None
    signature: Signature = field(default_factory=Signature)

    def __post_init__(self) -> None:
        if self.payload is not None:
            self.payload = bytes(self.payload)

    def to_json(self) -> dict:
        """Return the JWS as a JSON object."""
        return {"payload": _payload_json(self.payload), **self.signature.to_json()}

    @classmethod
    def from_json(cls, data) -> "Flattened":
        """Read a flattened JWS from a JSON object."""
        data = _check_object(data, "JWS")
        return cls(payload=_optional_payload(data), signature=Signature.from_json(data))

    @classmethod
    def parse_compact(cls, text: str) -> "Flattened":
        """Parse the compact ``protected.payload.signature`` form."""
        parts = text.split(".")
        if len(parts) != 3:
            raise LengthError("compact JWS must have exactly three parts")
        prot, payl, sign = parts
        return cls(
            payload=None if payl == "" else decode_bytes(payl),
            signature=Signature(
                protected=_protected_from_str(prot),
                header=None,
                signature=decode_bytes(sign),
            ),
        )

    def to_compact(self) -> str:
        """Return the compact form; the unprotected header is not included."""
        protected = self.signature.protected
        prot = "" if protected is None else protected.to_str()
        payl = "" if self.payload is None else encode_bytes(self.payload)
        sign = encode_bytes(self.signature.signature)
        return f"{prot}.{payl}.{sign}"

    def __str__(self) -> str:
        return self.to_compact()


@dataclass
class General:
    """The general serialization: one payload with any number of signatures."""

    payload: bytes | None = None
    signatures: list = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.payload is not None:
            self.payload = bytes(self.payload)
        self.signatures = list(self.signatures)

    def to_json(self) -> dict:
        """Return the JWS as a JSON object."""
        return {
            "payload": _payload_json(self.payload),
            "signatures": [sig.to_json() for sig in self.signatures],
        }

    @classmethod
    def from_json(cls, data) -> "General":
        """Read a general JWS from a JSON object."""
        data = _check_object(data, "JWS")
        if "signatures" not in data:
            raise ValueError("missing field 'signatures'")
        signatures = data["signatures"]
        if not isinstance(signatures, list):
            raise ValueError("signatures must be a list")
        return cls(
            payload=_optional_payload(data),
            signatures=[Signature.from_json(sig) for sig in signatures],
        )

    @classmethod
    def from_flattened(cls, flattened: Flattened) -> "General":
        """Turn a flattened JWS into a general one with a single signature."""
        return cls(payload=flattened.payload, signatures=[flattened.signature])


Jws = Union[General, Flattened]


def parse_jws(data) -> Jws:
    """Read a JWS in either JSON serialization, trying the general form first."""
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)
    try:
        return General.from_json(data)
    except ValueError:
        pass
    try:
        return Flattened.from_json(data)
    except ValueError as exc:
        raise ValueError("data did not match any JWS serialization") from exc


def parse_compact(text: str) -> Flattened:
    """Parse a compact JWS."""
    return Flattened.parse_compact(text)