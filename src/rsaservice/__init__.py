"""RSA key pair service: encryption, decryption, signing and verification with one in-process key pair.

Provides a service object that generates and holds a single RSA key pair, exporting the public key as an X.509
SubjectPublicKeyInfo PEM and the private key as a passphrase-protected PKCS#8 PEM. Messages are encrypted with
RSAES-OAEP; structured data is signed over the SHA-256 hex digest of its canonical JSON encoding.

Typical usage example:

    service = KeyPairCryptoService(ServiceConfig(passphrase="correct horse"))
    service.generate_key_pair()
    c = service.encrypt_with_public_key("Hi there!")
    r = service.decrypt_with_private_key(c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsaservice.config import ServiceConfig
from rsaservice.digest import canonical_encode
from rsaservice.digest import DigestAlgorithm
from rsaservice.digest import hex_digest
from rsaservice.errors import CryptoServiceError
from rsaservice.errors import DecryptionError
from rsaservice.errors import KeyGenerationError
from rsaservice.errors import KeyImportError
from rsaservice.rsa import RSAPrivKey
from rsaservice.rsa import RSAPubKey
from rsaservice.service import KeyPair
from rsaservice.service import KeyPairCryptoService
from rsaservice.service import SignaturePacket
from rsaservice.storage import load_key_pair
from rsaservice.storage import save_key_pair

__version__ = "0.1.0"
__all__ = [
    "KeyPairCryptoService",
    "KeyPair",
    "SignaturePacket",
    "ServiceConfig",
    "DigestAlgorithm",
    "canonical_encode",
    "hex_digest",
    "RSAPrivKey",
    "RSAPubKey",
    "CryptoServiceError",
    "DecryptionError",
    "KeyGenerationError",
    "KeyImportError",
    "save_key_pair",
    "load_key_pair",
]
