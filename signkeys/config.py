"""
Configuration for signkeys.

Defaults only affect newly encrypted keys. Decryption always uses the
parameters recorded next to the ciphertext.
"""

import os
from dataclasses import dataclass
from typing import Optional

from .passphrase import get_deriver


@dataclass
class Config:
    """Library configuration."""

    # KDF for new encryptions: "scrypt" (cosign compatible) or "argon2id"
    KDF: str = os.getenv("SIGNKEYS_KDF", "scrypt")

    # scrypt parameters, cosign's defaults
    SCRYPT_N: int = int(os.getenv("SIGNKEYS_SCRYPT_N", "32768"))
    SCRYPT_R: int = 8
    SCRYPT_P: int = 1

    # Argon2id parameters (OWASP recommended)
    ARGON2_TIME_COST: int = int(os.getenv("SIGNKEYS_ARGON2_TIME_COST", "3"))
    ARGON2_MEMORY_COST: int = int(os.getenv("SIGNKEYS_ARGON2_MEMORY_COST", "65536"))  # KiB
    ARGON2_PARALLELISM: int = int(os.getenv("SIGNKEYS_ARGON2_PARALLELISM", "4"))

    # Key file names inside a KeyStore: <prefix>.key / <prefix>.pub
    KEY_PREFIX: str = os.getenv("SIGNKEYS_KEY_PREFIX", "cosign")

    # Environment variable read by prompt.env_pass_func
    PASSWORD_ENV: str = "COSIGN_PASSWORD"

    def __post_init__(self):
        """Reject parameters the KDFs would refuse."""
        for name in ("scrypt", "argon2id"):
            get_deriver(name).check_params(self.kdf_params(name))
        get_deriver(self.KDF)
        if not self.KEY_PREFIX:
            raise ValueError("KEY_PREFIX must not be empty")

    def kdf_params(self, name: Optional[str] = None) -> dict[str, int]:
        """KDF parameters in the shape stored in encrypted envelopes."""
        name = name or self.KDF
        if name == "argon2id":
            return {
                "time_cost": self.ARGON2_TIME_COST,
                "memory_cost": self.ARGON2_MEMORY_COST,
                "parallelism": self.ARGON2_PARALLELISM,
            }
        return {"N": self.SCRYPT_N, "r": self.SCRYPT_R, "p": self.SCRYPT_P}


# Global config instance
config = Config()
