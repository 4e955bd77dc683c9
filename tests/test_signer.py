"""
Tests for signer/verifiers.
"""

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from signkeys.errors import VerificationError
from signkeys.signer import (
    SHA256,
    ECDSASignerVerifier,
    ECDSAVerifier,
    RSAPKCS1v15SignerVerifier,
    RSAPKCS1v15Verifier,
)


def test_default_digest_is_sha256(ec_private_key):
    signer = ECDSASignerVerifier(ec_private_key)
    assert signer.hash_algorithm is SHA256
    assert isinstance(SHA256, hashes.SHA256)


def test_ecdsa_sign_verify(ec_private_key):
    """Test ECDSA signatures verify with both the signer and a public-only verifier."""
    signer = ECDSASignerVerifier(ec_private_key, SHA256)
    signature = signer.sign(b"hello")

    signer.verify(b"hello", signature)
    ECDSAVerifier(ec_private_key.public_key()).verify(b"hello", signature)

    with pytest.raises(VerificationError):
        signer.verify(b"goodbye", signature)


def test_rsa_sign_verify(rsa_private_key):
    signer = RSAPKCS1v15SignerVerifier(rsa_private_key, SHA256)
    signature = signer.sign(b"hello")

    # PKCS#1 v1.5 is deterministic
    assert signer.sign(b"hello") == signature
    RSAPKCS1v15Verifier(rsa_private_key.public_key()).verify(b"hello", signature)

    with pytest.raises(VerificationError):
        signer.verify(b"hello", signature[:-1] + bytes([signature[-1] ^ 0x01]))


def test_verifier_rejects_other_key(ec_private_key):
    other = ECDSASignerVerifier(ec.generate_private_key(ec.SECP256R1()))
    signature = other.sign(b"hello")

    with pytest.raises(VerificationError):
        ECDSAVerifier(ec_private_key.public_key()).verify(b"hello", signature)


def test_public_key_pem(ec_private_key):
    pem = ECDSASignerVerifier(ec_private_key).public_key_pem()
    assert pem.startswith(b"-----BEGIN PUBLIC KEY-----")


def test_repr_does_not_leak_key(ec_private_key):
    assert repr(ECDSASignerVerifier(ec_private_key)) == "ECDSASignerVerifier(hash=sha256)"
