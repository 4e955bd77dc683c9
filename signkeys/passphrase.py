"""
Passphrase derivation.

The passphrase is used to derive a symmetric key for encrypting the private key.
Two KDFs are available: scrypt (the default, readable by cosign) and Argon2id.
Parameters are stored next to every ciphertext and checked against fixed
upper bounds before any work is done, so a crafted key file cannot make a
load run away.
"""

import os

from argon2.exceptions import HashingError
from argon2.low_level import hash_secret_raw, Type
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

# Upper bound on KDF memory, in bytes (1 GiB)
MAX_MEMORY = 1024 * 1024 * 1024


def _int_param(params: dict, name: str, low: int, high: int) -> int:
    value = params.get(name)
    # bool is an int subclass
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"invalid kdf parameter {name!r}: {value!r}")
    if not low <= value <= high:
        raise ValueError(f"kdf parameter {name!r} out of range [{low}, {high}]: {value}")
    return value


class PassphraseDeriver:
    """Derives encryption keys from passphrases."""

    NAME = ""
    KEY_LEN = 32  # 256 bits
    SALT_LEN = 32
    MIN_SALT_LEN = 8

    @classmethod
    def check_params(cls, params: dict) -> dict[str, int]:
        """
        Validate KDF parameters.

        Returns:
            The parameters as plain ints, in serialization order

        Raises:
            ValueError: If a parameter is missing, not an int, or out of range
        """
        raise NotImplementedError

    @classmethod
    def _derive(cls, passphrase: bytes, salt: bytes, params: dict[str, int]) -> bytes:
        raise NotImplementedError

    @classmethod
    def derive_key(
        cls,
        passphrase: bytes,
        params: dict,
        salt: bytes | None = None,
    ) -> tuple[bytes, bytes]:
        """
        Derive a 256-bit key from a passphrase.

        Args:
            passphrase: The user's passphrase bytes
            params: KDF parameters, validated with check_params
            salt: Optional salt bytes. If None, generates a random salt.

        Returns:
            Tuple of (derived_key, salt)

        Raises:
            ValueError: On invalid parameters or salt, or if the KDF fails
        """
        params = cls.check_params(params)
        if salt is None:
            salt = os.urandom(cls.SALT_LEN)
        if len(salt) < cls.MIN_SALT_LEN:
            raise ValueError("kdf salt too short")

        try:
            return cls._derive(passphrase, salt, params), salt
        except (HashingError, UnsupportedAlgorithm, OverflowError, MemoryError) as e:
            raise ValueError(f"{cls.NAME} key derivation failed: {e}") from e


class ScryptDeriver(PassphraseDeriver):
    """scrypt, with the parameter names cosign stores ("N", "r", "p")."""

    NAME = "scrypt"
    MAX_N = 1 << 20
    MAX_R = 32
    MAX_P = 16

    @classmethod
    def check_params(cls, params: dict) -> dict[str, int]:
        n = _int_param(params, "N", 2, cls.MAX_N)
        if n & (n - 1):
            raise ValueError(f"scrypt N must be a power of two: {n}")
        r = _int_param(params, "r", 1, cls.MAX_R)
        p = _int_param(params, "p", 1, cls.MAX_P)
        if 128 * n * r > MAX_MEMORY:
            raise ValueError("scrypt parameters exceed memory limit")
        return {"N": n, "r": r, "p": p}

    @classmethod
    def _derive(cls, passphrase: bytes, salt: bytes, params: dict[str, int]) -> bytes:
        kdf = Scrypt(salt=salt, length=cls.KEY_LEN, n=params["N"], r=params["r"], p=params["p"])
        return kdf.derive(passphrase)


class Argon2idDeriver(PassphraseDeriver):
    """Argon2id. Keys encrypted this way are not readable by cosign."""

    NAME = "argon2id"
    MAX_TIME_COST = 32
    MAX_PARALLELISM = 16

    @classmethod
    def check_params(cls, params: dict) -> dict[str, int]:
        time_cost = _int_param(params, "time_cost", 1, cls.MAX_TIME_COST)
        parallelism = _int_param(params, "parallelism", 1, cls.MAX_PARALLELISM)
        # memory_cost is in KiB, at least 8 KiB per lane
        memory_cost = _int_param(params, "memory_cost", 8 * parallelism, MAX_MEMORY // 1024)
        return {"time_cost": time_cost, "memory_cost": memory_cost, "parallelism": parallelism}

    @classmethod
    def _derive(cls, passphrase: bytes, salt: bytes, params: dict[str, int]) -> bytes:
        return hash_secret_raw(
            secret=passphrase,
            salt=salt,
            time_cost=params["time_cost"],
            memory_cost=params["memory_cost"],
            parallelism=params["parallelism"],
            hash_len=cls.KEY_LEN,
            type=Type.ID,  # Argon2id
        )


DERIVERS = {deriver.NAME: deriver for deriver in (ScryptDeriver, Argon2idDeriver)}


def get_deriver(name: str) -> type[PassphraseDeriver]:
    """Look up a KDF by the name stored in envelopes."""
    try:
        return DERIVERS[name]
    except (KeyError, TypeError):
        raise ValueError(f"unsupported kdf: {name!r}") from None
