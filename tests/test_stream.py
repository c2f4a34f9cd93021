import pytest

from josebox.b64 import Encoding, InvalidValueError, LengthError
from josebox.stream import (
    BytesSink,
    Decoder,
    Encoder,
    Fanout,
    OptionalEncoder,
    TextSink,
    Update,
)

DATA = bytes(range(50)) + b"\xfb\xff\xbf"


def _chunks(data, size):
    return [data[i : i + size] for i in range(0, len(data), size)]


def test_encoder_documented_example():
    enc = Encoder(TextSink())
    enc.update("Hello world!")
    assert enc.finish().text == "SGVsbG8gd29ybGQh"


def test_decoder_documented_example():
    dec = Decoder(TextSink())
    dec.update("SGVsbG8gd29ybGQh")
    assert dec.finish().text == "Hello world!"


def test_encoder_default_sink():
    sink = Encoder().chain(b"Hello world!").finish()
    assert bytes(sink) == b"SGVsbG8gd29ybGQh"


@pytest.mark.parametrize("encoding", list(Encoding))
@pytest.mark.parametrize("size", [1, 2, 3, 4, 5, 7, 64])
def test_encoder_matches_one_shot(encoding, size):
    enc = Encoder(BytesSink(), encoding)
    for chunk in _chunks(DATA, size):
        enc.update(chunk)
    assert bytes(enc.finish().data).decode("ascii") == encoding.encode(DATA)


@pytest.mark.parametrize("encoding", list(Encoding))
@pytest.mark.parametrize("size", [1, 2, 3, 4, 5, 7, 100])
def test_decoder_round_trip(encoding, size):
    text = encoding.encode(DATA).encode("ascii")
    dec = Decoder(BytesSink(), encoding)
    for chunk in _chunks(text, size):
        dec.update(chunk)
    assert bytes(dec.finish().data) == DATA


def test_decoder_empty():
    assert bytes(Decoder().finish().data) == b""


def test_decoder_invalid_character():
    dec = Decoder()
    with pytest.raises(InvalidValueError):
        dec.update("SGV$bG8gd29y")
        dec.finish()


def test_decoder_bad_tail_length():
    dec = Decoder()
    dec.update("SGVsb")
    with pytest.raises(LengthError):
        dec.finish()


def test_decoder_padding_in_middle():
    dec = Decoder(BytesSink(), Encoding.STANDARD)
    with pytest.raises(InvalidValueError):
        dec.update("QQ==QUJD")


def test_decoder_non_ascii():
    dec = Decoder()
    with pytest.raises(InvalidValueError):
        dec.update(b"\xff\xff\xff\xff\xff")


def test_text_sink_rejects_invalid_utf8():
    with pytest.raises(UnicodeDecodeError):
        TextSink().update(b"\xff")


def test_chain_returns_self():
    sink = BytesSink()
    result = sink.chain(b"ab").chain("cd")
    assert result is sink
    assert bytes(sink.data) == b"abcd"


def test_fanout_feeds_all():
    first, second = BytesSink(), TextSink()
    Fanout([first, second]).chain(b"xyz").update(b"!")
    assert bytes(first.data) == b"xyz!"
    assert second.text == "xyz!"


def test_encoder_into_fanout():
    first, second = BytesSink(), BytesSink()
    Encoder(Fanout([first, second])).chain(DATA).finish()
    assert bytes(first.data) == bytes(second.data)
    assert bytes(first.data).decode("ascii") == Encoding.URL_UNPADDED.encode(DATA)


def test_optional_unencoded():
    opt = OptionalEncoder(BytesSink(), False)
    opt.update(b"payload")
    assert bytes(opt.finish().data) == b"payload"


def test_optional_encoded():
    opt = OptionalEncoder(BytesSink(), True)
    opt.update(b"payload")
    sink = opt.finish()
    assert bytes(sink.data).decode("ascii") == Encoding.URL_UNPADDED.encode(b"payload")


def test_update_is_abstract():
    with pytest.raises(TypeError):
        Update()