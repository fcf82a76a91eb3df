"""Process configuration for the key pair service.

The passphrase guarding the private key is a secret and is only ever read from the environment (or handed in
explicitly); it has no default.

Environment variables:

    RSASERVICE_PASSPHRASE       passphrase for the exported private key (required)
    RSASERVICE_KEY_SIZE         modulus size in bits (default 4096)
    RSASERVICE_KDF_ITERATIONS   PBKDF2 iterations for the private key export (default 2048)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import dataclasses

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

from rsaservice.digest import DigestAlgorithm
from rsaservice.pkcs8 import DEFAULT_ITERATIONS
from rsaservice.rsa import HASH_TLL

ENV_PREFIX = "RSASERVICE_"
DEFAULT_KEY_SIZE = 4096

# Demo inputs, matching what the walkthrough in `python -m rsaservice demo` encrypts and signs.
SAMPLE_MESSAGE = "This is a top secret message!"
SAMPLE_DATA = {
    "id": 1,
    "name": "Alice",
    "email": "alice@example.com",
    "roles": ["admin", "editor"],
}


class EnvSettings(BaseSettings):
    """`RSASERVICE_*` environment variables. Values passed to the constructor win over the environment."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, case_sensitive=False, extra="ignore")

    passphrase: str = Field(..., min_length=1, description="Passphrase for the exported private key")
    key_size: int = Field(DEFAULT_KEY_SIZE, description="Modulus size in bits")
    public_exponent: int = Field(65537, description="RSA public exponent")
    digest: str = Field(DigestAlgorithm.SHA256.value, description="Digest named in signature packets")
    oaep_hash: str = Field("sha256", description="Hash function used by RSAES-OAEP")
    kdf_iterations: int = Field(DEFAULT_ITERATIONS, ge=1, description="PBKDF2 iterations for the private key export")


@dataclasses.dataclass(frozen=True)
class ServiceConfig:
    """Fixed parameters of a KeyPairCryptoService.

    Attributes:
        passphrase: Protects the exported private key.
        key_size: RSA modulus size in bits.
        public_exponent: RSA public exponent.
        digest: Digest algorithm named in every signature packet.
        oaep_hash: Hash function used by RSAES-OAEP.
        kdf_iterations: PBKDF2 iteration count for the private key export.
    """
    passphrase: str = dataclasses.field(repr=False)
    key_size: int = DEFAULT_KEY_SIZE
    public_exponent: int = 65537
    digest: DigestAlgorithm = DigestAlgorithm.SHA256
    oaep_hash: str = "sha256"
    kdf_iterations: int = DEFAULT_ITERATIONS

    def __post_init__(self) -> None:
        if not self.passphrase:
            raise ValueError("A non-empty passphrase is required.")
        if self.oaep_hash not in HASH_TLL:
            raise ValueError(f"Unsupported OAEP hash: {self.oaep_hash}")
        if self.kdf_iterations < 1:
            raise ValueError("kdf_iterations must be positive.")
        object.__setattr__(self, "digest", DigestAlgorithm.parse(self.digest))

    @classmethod
    def from_env(cls, **overrides) -> "ServiceConfig":
        """Build the configuration from `RSASERVICE_*` environment variables.

        Args:
            overrides: Explicit values that win over the environment. `None` values are ignored.

        Raises:
            pydantic.ValidationError: If the passphrase is missing or a variable does not validate. It is a
                `ValueError`.
        """
        settings = EnvSettings(**{k: v for k, v in overrides.items() if v is not None})
        return cls(**settings.model_dump())
