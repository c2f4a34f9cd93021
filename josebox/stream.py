"""Streaming base64 encoders and decoders.

Do not use these for secrets: invalid input is reported block by block.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from josebox.b64 import Encoding, InvalidValueError


def _as_bytes(chunk) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    return bytes(chunk)


class Update(ABC):
    """Something that can be fed bytes."""

    @abstractmethod
    def update(self, chunk) -> None:
        """Feed a chunk of bytes."""

    def chain(self, chunk):
        """Feed a chunk and return self."""
        self.update(chunk)
        return self


class BytesSink(Update):
    """Collects every chunk into a byte buffer."""

    def __init__(self, data=b"") -> None:
        self.data = bytearray(data)

    def update(self, chunk) -> None:
        self.data.extend(_as_bytes(chunk))

    def __bytes__(self) -> bytes:
        return bytes(self.data)


class TextSink(Update):
    """Collects chunks as text; every byte chunk must be valid UTF-8 on its own."""

    def __init__(self, text: str = "") -> None:
        self.text = text

    def update(self, chunk) -> None:
        if isinstance(chunk, str):
            self.text += chunk
        else:
            self.text += bytes(chunk).decode("utf-8")


class Fanout(Update):
    """Feeds every chunk to each of several sinks."""

    def __init__(self, sinks=()) -> None:
        self.sinks = list(sinks)

    def update(self, chunk) -> None:
        data = _as_bytes(chunk)
        for sink in self.sinks:
            sink.update(data)


class Encoder(Update):
    """Base64-encodes what it is fed and passes the text on to a sink."""

    def __init__(self, sink=None, encoding: Encoding = Encoding.URL_UNPADDED) -> None:
        self.sink = BytesSink() if sink is None else sink
        self.encoding = encoding
        self._pending = bytearray()

    def update(self, chunk) -> None:
        self._pending.extend(_as_bytes(chunk))
        whole = len(self._pending) - len(self._pending) % 3
        if whole:
            block = bytes(self._pending[:whole])
            del self._pending[:whole]
            self.sink.update(self.encoding.encode(block).encode("ascii"))

    def finish(self):
        """Encode what is left and return the sink."""
        tail = bytes(self._pending)
        self._pending.clear()
        self.sink.update(self.encoding.encode(tail).encode("ascii"))
        return self.sink


class Decoder(Update):
    """Decodes base64 it is fed and passes the bytes on to a sink."""

    def __init__(self, sink=None, encoding: Encoding = Encoding.URL_UNPADDED) -> None:
        self.sink = BytesSink() if sink is None else sink
        self.encoding = encoding
        self._pending = bytearray()

    @staticmethod
    def _text(block: bytes) -> str:
        try:
            return block.decode("ascii")
        except UnicodeDecodeError as exc:
            raise InvalidValueError("invalid base64 character") from exc

    def update(self, chunk) -> None:
        self._pending.extend(_as_bytes(chunk))
        # The last block is held back: it may carry padding or be short.
        ready = (len(self._pending) - 1) // 4 * 4 if self._pending else 0
        if not ready:
            return
        block = bytes(self._pending[:ready])
        decoded = self.encoding.decode(self._text(block))
        if len(decoded) != ready // 4 * 3:
            raise InvalidValueError("padding inside base64 stream")
        del self._pending[:ready]
        self.sink.update(decoded)

    def finish(self):
        """Decode what is left and return the sink."""
        tail = bytes(self._pending)
        decoded = self.encoding.decode(self._text(tail))
        self._pending.clear()
        self.sink.update(decoded)
        return self.sink


class OptionalEncoder(Update):
    """Passes chunks through unchanged, or base64-encodes them, as chosen at creation."""

    def __init__(self, inner, b64: bool, encoding: Encoding = Encoding.URL_UNPADDED) -> None:
        self.inner = inner
        self._encoder = Encoder(inner, encoding) if b64 else None

    def update(self, chunk) -> None:
        if self._encoder is not None:
            self._encoder.update(chunk)
        else:
            self.inner.update(chunk)

    def finish(self):
        """Finish encoding, if any, and return the inner sink."""
        if self._encoder is not None:
            return self._encoder.finish()
        return self.inner