# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import hashlib

import pytest

from rsaservice import digest
from rsaservice.digest import DigestAlgorithm


@pytest.mark.parametrize("data, expected", [
    ({"user": "alice", "amount": 42}, b'{"amount":42,"user":"alice"}'),
    ({"b": {"d": 1, "c": [3, 2]}, "a": None}, b'{"a":null,"b":{"c":[3,2],"d":1}}'),
    ([1, 2.5, True, "x"], b'[1,2.5,true,"x"]'),
    ("plain", b'"plain"'),
    ({"name": "Zoë ✓"}, '{"name":"Zoë ✓"}'.encode("utf-8")),
])
def test_canonical_encode(data, expected):
    assert digest.canonical_encode(data) == expected


def test_canonical_encode_ignores_insertion_order():
    assert digest.canonical_encode({"a": 1, "b": 2}) == digest.canonical_encode({"b": 2, "a": 1})


@pytest.mark.parametrize("data", [{"x": float("nan")}, [float("inf")]])
def test_canonical_encode_refuses_non_finite(data):
    with pytest.raises(ValueError):
        digest.canonical_encode(data)


def test_canonical_encode_refuses_unknown_types():
    with pytest.raises(TypeError):
        digest.canonical_encode({"when": object()})


def test_hex_digest():
    data = {"user": "alice", "amount": 42}
    expected = hashlib.sha256(b'{"amount":42,"user":"alice"}').hexdigest()
    assert digest.hex_digest(DigestAlgorithm.SHA256, data) == expected
    assert digest.hex_digest("sha256", data) == expected


def test_hex_digest_changes_with_data():
    assert digest.hex_digest("sha256", {"amount": 42}) != digest.hex_digest("sha256", {"amount": 43})


@pytest.mark.parametrize("name", ["sha256", "SHA256", "SHA-256", DigestAlgorithm.SHA256])
def test_parse(name):
    assert DigestAlgorithm.parse(name) is DigestAlgorithm.SHA256


@pytest.mark.parametrize("name", ["md5", "sha1", "", "sha512"])
def test_parse_unknown(name):
    with pytest.raises(ValueError, match="Unsupported digest algorithm"):
        DigestAlgorithm.parse(name)
    with pytest.raises(ValueError):
        digest.hex_digest(name, {})
