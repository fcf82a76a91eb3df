"""Canonical encoding and digests of structured data.

Signatures are computed over a hex digest of a canonical JSON rendering of the data, so sign and verify must produce
byte-identical encodings: keys are sorted, no insignificant whitespace is emitted, non-ASCII text is kept as UTF-8
and NaN/Infinity are refused.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import enum
import hashlib
import json
import typing


class DigestAlgorithm(str, enum.Enum):
    """Digest algorithms a SignaturePacket may name."""
    SHA256 = "sha256"

    @classmethod
    def parse(cls, value: "str | DigestAlgorithm") -> "DigestAlgorithm":
        """Resolve an algorithm identifier, accepting the enum member or its name in any case.

        Raises:
            ValueError: If the identifier names no supported algorithm.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower().replace("-", ""))
        except ValueError:
            raise ValueError(f"Unsupported digest algorithm: {value!r}") from None


HASHERS: dict[DigestAlgorithm, typing.Callable] = {
    DigestAlgorithm.SHA256: hashlib.sha256,
}


def canonical_encode(data: typing.Any) -> bytes:
    """Render `data` into its canonical UTF-8 JSON bytes.

    Raises:
        TypeError: If `data` holds values JSON cannot represent.
        ValueError: If `data` holds NaN or infinite floats, or a circular reference.
        RecursionError: If `data` nests deeper than the interpreter recursion limit.
    """
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")


def hex_digest(algorithm: "str | DigestAlgorithm", data: typing.Any) -> str:
    """Lowercase hex digest of the canonical encoding of `data`."""
    hasher = HASHERS[DigestAlgorithm.parse(algorithm)]
    return hasher(canonical_encode(data)).hexdigest()
