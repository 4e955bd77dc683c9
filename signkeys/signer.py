"""
Signers and verifiers bound to a fixed digest algorithm.

Callers get one of these from the key loader and use ``sign`` / ``verify``
without caring which algorithm is underneath.
"""

import abc

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa

from .errors import VerificationError

# Digest used by every signer/verifier this package builds
SHA256 = hashes.SHA256()


def public_key_to_pem(public_key) -> bytes:
    """Serialize a public key as a SubjectPublicKeyInfo PEM block."""
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


class Verifier(abc.ABC):
    """Checks signatures against a public key."""

    def __init__(self, public_key, hash_algorithm: hashes.HashAlgorithm = SHA256):
        self._public_key = public_key
        self.hash_algorithm = hash_algorithm

    def public_key(self):
        """The public key signatures are checked against."""
        return self._public_key

    def public_key_pem(self) -> bytes:
        return public_key_to_pem(self._public_key)

    def verify(self, message: bytes, signature: bytes) -> None:
        """
        Verify a signature over message.

        Raises:
            VerificationError: If the signature does not match
        """
        try:
            self._verify(message, signature)
        except InvalidSignature as e:
            raise VerificationError("invalid signature") from e

    @abc.abstractmethod
    def _verify(self, message: bytes, signature: bytes) -> None:
        ...


class SignerVerifier(Verifier):
    """Produces signatures and checks them against its own public key."""

    def __init__(self, private_key, hash_algorithm: hashes.HashAlgorithm = SHA256):
        super().__init__(private_key.public_key(), hash_algorithm)
        self._private_key = private_key

    @abc.abstractmethod
    def sign(self, message: bytes) -> bytes:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(hash={self.hash_algorithm.name})"


class ECDSAVerifier(Verifier):
    def _verify(self, message: bytes, signature: bytes) -> None:
        self._public_key.verify(signature, message, ec.ECDSA(self.hash_algorithm))


class ECDSASignerVerifier(SignerVerifier, ECDSAVerifier):
    """ECDSA signatures, DER encoded."""

    def __init__(self, private_key: ec.EllipticCurvePrivateKey,
                 hash_algorithm: hashes.HashAlgorithm = SHA256):
        super().__init__(private_key, hash_algorithm)

    def sign(self, message: bytes) -> bytes:
        return self._private_key.sign(message, ec.ECDSA(self.hash_algorithm))


class RSAPKCS1v15Verifier(Verifier):
    def _verify(self, message: bytes, signature: bytes) -> None:
        self._public_key.verify(signature, message, padding.PKCS1v15(), self.hash_algorithm)


class RSAPKCS1v15SignerVerifier(SignerVerifier, RSAPKCS1v15Verifier):
    """RSA signatures with PKCS#1 v1.5 padding."""

    def __init__(self, private_key: rsa.RSAPrivateKey,
                 hash_algorithm: hashes.HashAlgorithm = SHA256):
        super().__init__(private_key, hash_algorithm)

    def sign(self, message: bytes) -> bytes:
        return self._private_key.sign(message, padding.PKCS1v15(), self.hash_algorithm)
