import json

import pytest

from josebox.jwa import Signing, parse_algorithm

ALL = [
    Signing.EDDSA,
    Signing.ES256,
    Signing.ES256K,
    Signing.ES384,
    Signing.ES512,
    Signing.HS256,
    Signing.HS384,
    Signing.HS512,
    Signing.PS256,
    Signing.PS384,
    Signing.PS512,
    Signing.RS256,
    Signing.RS384,
    Signing.RS512,
    Signing.NULL,
]


def test_simple_roundtrip():
    ser = json.dumps([str(alg) for alg in ALL], separators=(",", ":"))
    assert ser == (
        '["EdDSA","ES256","ES256K","ES384","ES512","HS256","HS384","HS512",'
        '"PS256","PS384","PS512","RS256","RS384","RS512","none"]'
    )
    assert [parse_algorithm(name) for name in json.loads(ser)] == ALL


def test_str_is_wire_name():
    assert Signing.__str__(parse_algorithm("none")) == "none"
    assert Signing.__str__(parse_algorithm("EdDSA")) == "EdDSA"
    assert parse_algorithm("none") is Signing.NULL


def test_parse_accepts_enum_member():
    assert parse_algorithm(Signing.HS512) is Signing.HS512


@pytest.mark.parametrize("value", ["es256", "None", "RS1024", ""])
def test_parse_unknown_name(value):
    with pytest.raises(ValueError):
        parse_algorithm(value)


def test_parse_non_string():
    with pytest.raises(ValueError):
        parse_algorithm(256)