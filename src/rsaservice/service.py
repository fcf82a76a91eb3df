"""The key pair service: one RSA key pair, four operations.

The service holds at most one key pair for its lifetime. Until `generate_key_pair` (or `load_key_pair`) runs, the
encrypt, decrypt and sign operations answer `None` and verification answers `False`; calling early is a sequencing
matter for the caller, not a fault. Generating again replaces the pair and silently invalidates every ciphertext and
signature issued under the old one.

Typical usage example:

    service = KeyPairCryptoService(ServiceConfig(passphrase="correct horse"))
    service.generate_key_pair()
    service.decrypt_with_private_key(service.encrypt_with_public_key("hello world"))
    packet = service.sign_with_private_key({"user": "alice", "amount": 42})
    service.verify_signature_with_public_key(packet.algorithm, {"user": "alice", "amount": 42}, packet.signed_hash)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import dataclasses
import hmac
import logging
import threading
import typing

from rsaservice import digest
from rsaservice.config import ServiceConfig
from rsaservice.errors import DecryptionError
from rsaservice.errors import KeyGenerationError
from rsaservice.errors import KeyImportError
from rsaservice.rsa import RSAPrivKey
from rsaservice.rsa import RSAPubKey

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class KeyPair:
    """Exported key material.

    Attributes:
        public_key: Unencrypted `PUBLIC KEY` PEM.
        private_key: `ENCRYPTED PRIVATE KEY` PEM, protected by the service passphrase.
    """
    public_key: str
    private_key: str = dataclasses.field(repr=False)


@dataclasses.dataclass(frozen=True)
class SignaturePacket:
    """Result of signing. Only meaningful next to the exact data it was computed over."""
    algorithm: digest.DigestAlgorithm
    signed_hash: bytes


class KeyPairCryptoService:
    """Holds one RSA key pair and performs encryption, decryption, signing and verification with it.

    Safe to share between threads: the key pair is an immutable value swapped under a lock, and every operation works
    on the snapshot it read.
    """

    def __init__(self, config: ServiceConfig) -> None:
        self._config = config
        self._lock = threading.Lock()
        self._key_pair: KeyPair | None = None

    @property
    def config(self) -> ServiceConfig:
        return self._config

    @property
    def key_pair(self) -> KeyPair | None:
        with self._lock:
            return self._key_pair

    @property
    def has_key_pair(self) -> bool:
        return self.key_pair is not None

    def _install(self, pair: KeyPair) -> None:
        with self._lock:
            replaced = self._key_pair is not None
            self._key_pair = pair
        if replaced:
            logger.warning("Key pair replaced; earlier ciphertexts and signatures no longer match")

    def _public(self) -> RSAPubKey | None:
        pair = self.key_pair
        return RSAPubKey.from_pem(pair.public_key) if pair is not None else None

    def _private(self) -> RSAPrivKey | None:
        pair = self.key_pair
        return RSAPrivKey.from_pem(pair.private_key, self._config.passphrase) if pair is not None else None

    def generate_key_pair(self) -> KeyPair:
        """Generate, export and hold a fresh key pair, replacing any earlier one.

        Returns:
            The new key pair.

        Raises:
            KeyGenerationError: If the key could not be produced.
        """
        try:
            key = RSAPrivKey.generate(self._config.key_size, self._config.public_exponent)
        except KeyGenerationError:
            logger.error("Key generation failed")
            raise
        pair = KeyPair(
            public_key=key.pub.export_pem(),
            private_key=key.export_pem(self._config.passphrase, self._config.kdf_iterations),
        )
        self._install(pair)
        return pair

    def load_key_pair(self, pair: KeyPair) -> None:
        """Hold a previously exported key pair, replacing any earlier one.

        Raises:
            KeyImportError: If either half does not parse, the passphrase is wrong, or the halves do not match.
        """
        public = RSAPubKey.from_pem(pair.public_key)
        private = RSAPrivKey.from_pem(pair.private_key, self._config.passphrase)
        if (public.mod, public.expo) != (private.pub.mod, private.pub.expo):
            raise KeyImportError("Public and private key do not belong to the same pair.")
        self._install(pair)

    def encrypt_with_public_key(self, message: str) -> bytes | None:
        """Encrypt a UTF-8 message with the public key.

        Returns:
            The ciphertext, or `None` if no key pair is held.

        Raises:
            ValueError: If the encoded message is longer than the key can carry.
        """
        public = self._public()
        if public is None:
            return None
        return public.enc_oaep(message.encode("utf-8"), hashf=self._config.oaep_hash)

    def decrypt_with_private_key(self, buffer: bytes) -> str | None:
        """Decrypt a ciphertext produced by `encrypt_with_public_key`.

        Returns:
            The plaintext, or `None` if no key pair is held.

        Raises:
            DecryptionError: If `buffer` is not a valid ciphertext for the held key.
        """
        private = self._private()
        if private is None:
            return None
        clear = private.dec_oaep(bytes(buffer), hashf=self._config.oaep_hash)
        try:
            return clear.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecryptionError("Decrypted payload is not valid UTF-8.") from exc

    def sign_with_private_key(self, data: typing.Any) -> SignaturePacket | None:
        """Sign the hex digest of the canonical encoding of `data`.

        Returns:
            The signature packet, or `None` if no key pair is held.

        Raises:
            TypeError: If `data` cannot be canonically encoded.
            ValueError: Likewise, for NaN and infinite floats.
        """
        private = self._private()
        if private is None:
            return None
        algorithm = self._config.digest
        hashed = digest.hex_digest(algorithm, data)
        return SignaturePacket(algorithm=algorithm, signed_hash=private.sign_raw(hashed.encode("ascii")))

    def verify_signature_with_public_key(self,
                                         algorithm: "str | digest.DigestAlgorithm",
                                         original_data: typing.Any,
                                         signed_hash: bytes) -> bool:
        """Check that `signed_hash` is this key pair's signature over `original_data`.

        Never raises. No key, an unknown algorithm, unencodable data, a malformed signature and a digest mismatch all
        answer `False`; the reason is logged at DEBUG level.
        """
        public = self._public()
        if public is None:
            logger.debug("Verification failed: no key pair held")
            return False
        try:
            expected = digest.hex_digest(algorithm, original_data)
        except (TypeError, ValueError, RecursionError) as exc:
            logger.debug("Verification failed: cannot digest data (%s)", exc)
            return False
        try:
            recovered = public.recover(bytes(signed_hash))
        except (TypeError, ValueError) as exc:
            logger.debug("Verification failed: signature does not unwrap (%s)", exc)
            return False
        if not hmac.compare_digest(recovered, expected.encode("ascii")):
            logger.debug("Verification failed: digest mismatch")
            return False
        return True
