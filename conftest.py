"""Configures pytest further."""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from cryptography.hazmat.primitives.asymmetric import rsa
import pytest

REFERENCE_KEY_SIZE = 2048
PASSPHRASE = "correct horse battery staple"


def pytest_addoption(parser):
    parser.addoption("--skip-slow", action="store_true", default=False, help="skip slower tests")


def pytest_collection_modifyitems(config, items):
    if not config.getoption("--skip-slow"):
        return
    skip = pytest.mark.skip(reason="Slow test: needs no --skip-slow option")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def reference_keys() -> list[rsa.RSAPrivateKey]:
    """Two distinct keys from the `cryptography` package, to stand in for slow pure-Python generation."""
    return [rsa.generate_private_key(public_exponent=65537, key_size=REFERENCE_KEY_SIZE) for _ in range(2)]


def keygen_result(pk: rsa.RSAPrivateKey) -> tuple[tuple[int, int], tuple[int, int, int, int]]:
    """Shape a reference key like `rsaservice.keygen.generate_key_pair` output."""
    privs = pk.private_numbers()
    pubs = privs.public_numbers
    return (pubs.n, pubs.e), (pubs.n, privs.d, privs.p, privs.q)


@pytest.fixture
def passphrase() -> str:
    return PASSPHRASE


@pytest.fixture
def fake_keygen(mocker, reference_keys):
    """Patch key generation to hand out the reference keys in order."""
    return mocker.patch("rsaservice.keygen.generate_key_pair",
                        side_effect=[keygen_result(pk) for pk in reference_keys])
