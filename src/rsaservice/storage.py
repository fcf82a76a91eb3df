"""Key pair persistence as a pair of PEM files in one directory.

Layout:

    <directory>/public.pem    PUBLIC KEY
    <directory>/private.pem   ENCRYPTED PRIVATE KEY
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import os
import pathlib

from rsaservice.service import KeyPair

logger = logging.getLogger(__name__)

PUBLIC_KEY_FILE = "public.pem"
PRIVATE_KEY_FILE = "private.pem"


def key_paths(directory: pathlib.Path) -> tuple[pathlib.Path, pathlib.Path]:
    """(public, private) file locations inside `directory`."""
    directory = pathlib.Path(directory)
    return directory / PUBLIC_KEY_FILE, directory / PRIVATE_KEY_FILE


def save_key_pair(pair: KeyPair, directory: pathlib.Path, overwrite: bool = False) -> None:
    """Write both halves of `pair` into `directory`, creating it if needed.

    Args:
        pair: The key pair to store.
        directory: Destination directory.
        overwrite: Replace existing key files instead of refusing.

    Raises:
        FileExistsError: If a key file already exists and `overwrite` is False.
    """
    public, private = key_paths(directory)
    if not overwrite:
        for path in (public, private):
            if path.exists():
                raise FileExistsError(f"Destination key file {path} already exists!")
    public.parent.mkdir(parents=True, exist_ok=True)
    # The private half goes first and is owner-only from creation on.
    fd = os.open(private, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="ascii") as f:
        os.fchmod(f.fileno(), 0o600)
        f.write(pair.private_key)
    with open(public, "w", encoding="ascii") as f:
        f.write(pair.public_key)
    logger.info("Stored key pair in %s", public.parent)


def load_key_pair(directory: pathlib.Path) -> KeyPair:
    """Read a key pair written by `save_key_pair`.

    The PEM contents are not validated here; `KeyPairCryptoService.load_key_pair` does that.

    Raises:
        FileNotFoundError: If either key file is missing.
    """
    public, private = key_paths(directory)
    with open(public, "r", encoding="ascii") as f:
        public_pem = f.read()
    with open(private, "r", encoding="ascii") as f:
        private_pem = f.read()
    return KeyPair(public_key=public_pem, private_key=private_pem)
