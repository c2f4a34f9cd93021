"""Interfaces for creating and verifying JWS signatures."""

from __future__ import annotations

from abc import ABC, abstractmethod

from josebox.jws import Flattened, General, Signature
from josebox.stream import Update


class Signer(Update):
    """The state of a signature being created over a payload."""

    @abstractmethod
    def update(self, chunk) -> None:
        """Feed a chunk of the signing input."""

    @abstractmethod
    def finish(self, rng=None) -> Signature:
        """Finish the payload and return the signature."""


class SigningKey(ABC):
    """A key that can start creating signatures."""

    @abstractmethod
    def sign(self, protected, header) -> Signer:
        """Begin creating a signature with the given headers."""


class Verifier(Update):
    """The state of a signature being checked over a payload."""

    @abstractmethod
    def update(self, chunk) -> None:
        """Feed a chunk of the signing input."""

    @abstractmethod
    def finish(self) -> None:
        """Finish the payload; raise if the signature does not verify."""


class VerifierGroup(Verifier):
    """Several verifiers fed the same data; one success is enough."""

    def __init__(self, verifiers=()) -> None:
        self.verifiers = list(verifiers)

    def update(self, chunk) -> None:
        for verifier in self.verifiers:
            verifier.update(chunk)

    def finish(self) -> None:
        """Return as soon as one verifier succeeds; otherwise raise the last error."""
        last = None
        for verifier in self.verifiers:
            try:
                verifier.finish()
            except Exception as exc:  # noqa: BLE001 - any verifier failure counts
                last = exc
            else:
                return
        if last is None:
            raise ValueError("no signature could be verified")
        raise last


class VerifyingKey(ABC):
    """A key that can start verifying signatures."""

    @abstractmethod
    def verify(self, signature: Signature) -> Verifier:
        """Begin verifying one signature."""


def _signatures(target) -> list:
    if isinstance(target, Signature):
        return [target]
    if isinstance(target, Flattened):
        return [target.signature]
    if isinstance(target, General):
        return list(target.signatures)
    raise TypeError(f"cannot verify {type(target).__name__}")


def start_verification(keys, target) -> VerifierGroup:
    """Start verifying every signature of ``target`` with every key, key by key."""
    if isinstance(keys, VerifyingKey):
        keys = [keys]
    signatures = _signatures(target)
    return VerifierGroup(key.verify(sig) for key in keys for sig in signatures)