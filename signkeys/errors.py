"""
Exceptions raised while generating, encoding and loading signing keys.

Every error carries a ``stage`` naming the step of the key pipeline that
failed, so callers can report how far a load or import got.
"""

from typing import Optional


class SigningKeyError(ValueError):
    """Base class for all key lifecycle errors."""

    stage = "unknown"


class FormatError(SigningKeyError):
    """No valid PEM block was found."""

    stage = "framing"


class UnsupportedFormatError(FormatError):
    """A PEM block was found but its type tag is not accepted here."""

    def __init__(self, pem_type: str, message: Optional[str] = None):
        self.pem_type = pem_type
        super().__init__(message or f"unsupported pem type: {pem_type}")


class ParseError(SigningKeyError):
    """Key material under a recognized tag could not be parsed."""

    stage = "parse"


class SerializationError(SigningKeyError):
    stage = "serialize"


class EncryptionError(SigningKeyError):
    stage = "encrypt"


class DecryptionError(SigningKeyError):
    """
    Decryption failed.

    Raised for a wrong passphrase and for corrupted or tampered data alike.
    """

    stage = "decrypt"


class UnsupportedAlgorithmError(SigningKeyError):
    """The decoded key is not of an algorithm the caller can use."""

    stage = "dispatch"


class GenerationError(SigningKeyError):
    stage = "generate"


class VerificationError(SigningKeyError):
    """A signature did not verify against the public key."""

    stage = "verify"
