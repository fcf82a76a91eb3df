"""Exceptions raised by the RSA key pair service.

A missing key pair is not an error and never raises; operations answer ``None`` (or ``False`` for verification)
instead. Everything below signals that a primitive rejected its input or could not complete.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class CryptoServiceError(RuntimeError):
    """Base class for all service failures."""


class KeyGenerationError(CryptoServiceError):
    """The key pair could not be produced. Fatal, never retried."""


class DecryptionError(CryptoServiceError):
    """The ciphertext is not valid for the held private key."""


class KeyImportError(CryptoServiceError, IOError):
    """A PEM or PKCS#8 structure could not be read, or the passphrase was rejected."""
