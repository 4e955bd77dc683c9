"""
Shared fixtures for signkeys tests.
"""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from signkeys.config import config


@pytest.fixture(autouse=True)
def fast_kdf(monkeypatch):
    """Use cheap KDF parameters so tests stay fast."""
    monkeypatch.setattr(config, "KDF", "scrypt")
    monkeypatch.setattr(config, "SCRYPT_N", 1024)
    monkeypatch.setattr(config, "ARGON2_TIME_COST", 1)
    monkeypatch.setattr(config, "ARGON2_MEMORY_COST", 64)
    monkeypatch.setattr(config, "ARGON2_PARALLELISM", 1)


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def ec_private_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def rsa_pem(rsa_private_key):
    """Unencrypted PKCS#1 "RSA PRIVATE KEY" PEM."""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture
def ec_pem(ec_private_key):
    """Unencrypted SEC1 "EC PRIVATE KEY" PEM."""
    return ec_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )


class RecordingPassFunc:
    """Passphrase callback that remembers how it was called."""

    def __init__(self, passphrase: bytes):
        self.passphrase = passphrase
        self.calls = []

    def __call__(self, confirm: bool) -> bytes:
        self.calls.append(confirm)
        return self.passphrase


@pytest.fixture
def pass_func():
    return RecordingPassFunc(b"correct-horse")
