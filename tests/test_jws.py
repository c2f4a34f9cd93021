import pytest

from josebox.b64 import Base64Error, LengthError
from josebox.jwa import Signing
from josebox.jws import (
    Flattened,
    General,
    Signature,
    parse_compact,
    parse_jws,
)
from josebox.jws_head import Protected, Unprotected

# RFC 7515 Appendix A.1
RFC_COMPACT = (
    "eyJ0eXAiOiJKV1QiLA0KICJhbGciOiJIUzI1NiJ9"
    ".eyJpc3MiOiJqb2UiLA0KICJleHAiOjEzMDA4MTkzODAsDQogImh0dHA6Ly9leGFtcGxlLmNvbS9pc19yb290Ijp0cnVlfQ"
    ".dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
)


def test_compact_rfc_example_round_trip():
    jws = parse_compact(RFC_COMPACT)
    assert jws.to_compact() == RFC_COMPACT
    assert str(jws) == RFC_COMPACT


def test_compact_keeps_original_header_bytes():
    jws = Flattened.parse_compact(RFC_COMPACT)
    protected = jws.signature.protected
    assert b"\r\n" in bytes(protected)
    assert protected.value.oth.alg is Signing.HS256
    assert protected.value.oth.typ == "JWT"
    assert jws.signature.header is None


def test_compact_empty_payload():
    prot = Protected(oth=Unprotected(alg=Signing.HS256))
    jws = Flattened(payload=None, signature=Signature(protected=prot, signature=b"\x01\x02"))
    text = jws.to_compact()
    assert text.split(".")[1] == ""
    again = parse_compact(text)
    assert again.payload is None
    assert again.signature.signature == b"\x01\x02"


@pytest.mark.parametrize("text", ["a.b", "a", "a.b.c.d"])
def test_compact_wrong_part_count(text):
    with pytest.raises(LengthError):
        parse_compact(text)


def test_compact_bad_base64():
    parts = RFC_COMPACT.split(".")
    with pytest.raises(Base64Error):
        parse_compact(".".join([parts[0], parts[1], "!!!!"]))


def test_compact_header_not_json():
    with pytest.raises(ValueError):
        parse_compact("YWJj..AA")


def test_flattened_json_round_trip():
    jws = parse_compact(RFC_COMPACT)
    doc = jws.to_json()
    assert doc["header"] is None
    again = Flattened.from_json(doc)
    assert again.to_compact() == RFC_COMPACT
    assert again.payload == jws.payload


def test_signature_missing_fields_default_to_none():
    sig = Signature.from_json({"signature": "AQID"})
    assert sig.header is None
    assert sig.protected is None
    assert sig.signature == b"\x01\x02\x03"


def test_signature_required():
    with pytest.raises(ValueError):
        Signature.from_json({"protected": None})


def test_general_from_flattened_and_round_trip():
    flat = parse_compact(RFC_COMPACT)
    general = General.from_flattened(flat)
    assert general.payload == flat.payload
    assert general.signatures == [flat.signature]
    again = General.from_json(general.to_json())
    assert again.signatures[0].signature == flat.signature.signature
    assert bytes(again.signatures[0].protected) == bytes(flat.signature.protected)


def test_parse_jws_picks_general():
    flat = parse_compact(RFC_COMPACT)
    doc = General.from_flattened(flat).to_json()
    result = parse_jws(doc)
    assert isinstance(result, General)
    assert len(result.signatures) == 1


def test_parse_jws_picks_flattened_from_text():
    import json

    flat = parse_compact(RFC_COMPACT)
    result = parse_jws(json.dumps(flat.to_json()))
    assert isinstance(result, Flattened)
    assert result.to_compact() == RFC_COMPACT


def test_parse_jws_rejects_other_shapes():
    with pytest.raises(ValueError):
        parse_jws({"payload": "AQID"})


def test_signature_with_unprotected_header():
    sig = Signature(header=Unprotected(kid="k1"), signature=b"\xff")
    doc = sig.to_json()
    assert Signature.from_json(doc).header == Unprotected(kid="k1")