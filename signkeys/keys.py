"""
Encrypted signing key pairs.

Handles:
- Key generation (ECDSA P-256)
- Importing unencrypted PKCS#1 RSA and SEC1 EC private keys
- Encrypting private keys into "ENCRYPTED COSIGN PRIVATE KEY" PEM blocks
- Loading encrypted private keys back into signer/verifiers

Plaintext private key bytes only exist inside a single marshal or load call.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from . import encrypted
from .errors import (
    GenerationError,
    ParseError,
    SerializationError,
    UnsupportedAlgorithmError,
    UnsupportedFormatError,
)
from .pem import decode_pem, encode_pem
from .signer import (
    SHA256,
    ECDSASignerVerifier,
    ECDSAVerifier,
    RSAPKCS1v15SignerVerifier,
    RSAPKCS1v15Verifier,
    SignerVerifier,
    Verifier,
    public_key_to_pem,
)

PRIVATE_KEY_PEM_TYPE = "ENCRYPTED COSIGN PRIVATE KEY"
RSA_PRIVATE_KEY_PEM_TYPE = "RSA PRIVATE KEY"
EC_PRIVATE_KEY_PEM_TYPE = "EC PRIVATE KEY"
PUBLIC_KEY_PEM_TYPE = "PUBLIC KEY"

# Called with True when a new passphrase is being chosen (prompt and confirm),
# False when an existing one is needed.
PassFunc = Callable[[bool], bytes]


@dataclass(frozen=True)
class KeyPair:
    """A private key and the public key derived from it."""
    private_key: Union[ec.EllipticCurvePrivateKey, rsa.RSAPrivateKey]
    public_key: Union[ec.EllipticCurvePublicKey, rsa.RSAPublicKey]

    @classmethod
    def from_private_key(cls, private_key) -> "KeyPair":
        return cls(private_key=private_key, public_key=private_key.public_key())


@dataclass
class EncryptedKeyBundle:
    """
    Serialized key pair ready to be written to storage.

    ``password`` is the passphrase the private key was encrypted with, handed
    back so callers can reuse it without prompting again. Never log or
    display it.
    """
    private_bytes: bytes
    public_bytes: bytes
    password: bytes = field(repr=False)


@dataclass(frozen=True)
class ECKey:
    private_key: ec.EllipticCurvePrivateKey

    def signer_verifier(self) -> ECDSASignerVerifier:
        return ECDSASignerVerifier(self.private_key, SHA256)


@dataclass(frozen=True)
class RSAKey:
    private_key: rsa.RSAPrivateKey

    def signer_verifier(self) -> RSAPKCS1v15SignerVerifier:
        return RSAPKCS1v15SignerVerifier(self.private_key, SHA256)


# Every key a decoded PKCS#8 document can turn into
DecodedKey = Union[ECKey, RSAKey]


def _der_header(der: bytes, pos: int) -> tuple[int, int, int]:
    """Return (tag, length, offset of contents) of the DER element at pos."""
    tag, length = der[pos], der[pos + 1]
    pos += 2
    if length & 0x80:
        size = length & 0x7f
        length = int.from_bytes(der[pos:pos + size], "big")
        pos += size
    return tag, length, pos


def _is_pkcs8(der: bytes) -> bool:
    """True for SEQUENCE { INTEGER, SEQUENCE, ... }, i.e. a PKCS#8 PrivateKeyInfo."""
    try:
        tag, _, pos = _der_header(der, 0)
        if tag != 0x30:
            return False
        tag, length, pos = _der_header(der, pos)
        if tag != 0x02:
            return False
        return der[pos + length] == 0x30
    except IndexError:
        return False


def generate_private_key() -> ec.EllipticCurvePrivateKey:
    """Generate a fresh ECDSA P-256 private key."""
    try:
        return ec.generate_private_key(ec.SECP256R1())
    except Exception as e:
        raise GenerationError(f"generating P-256 key: {e}") from e


def generate_key_pair(pass_func: PassFunc) -> EncryptedKeyBundle:
    """Generate a new key pair and encrypt it with a passphrase from pass_func."""
    return marshal_key_pair(KeyPair.from_private_key(generate_private_key()), pass_func)


def import_key_pair(key_bytes: bytes, pass_func: PassFunc) -> EncryptedKeyBundle:
    """
    Import an unencrypted PKCS#1 RSA or SEC1 EC private key.

    Args:
        key_bytes: PEM text holding a single "RSA PRIVATE KEY" or
            "EC PRIVATE KEY" block
        pass_func: Callback producing the passphrase for the new encryption

    Returns:
        EncryptedKeyBundle for the imported key

    Raises:
        FormatError: No PEM block found
        UnsupportedFormatError: The block has another type tag
        ParseError: The key body is malformed
    """
    block = decode_pem(key_bytes)
    if block.type == RSA_PRIVATE_KEY_PEM_TYPE:
        expected = rsa.RSAPrivateKey
    elif block.type == EC_PRIVATE_KEY_PEM_TYPE:
        expected = ec.EllipticCurvePrivateKey
    else:
        raise UnsupportedFormatError(block.type)

    if block.headers:
        raise ParseError(f"{block.type} block has headers, encrypted legacy keys are not supported")

    if _is_pkcs8(block.body):
        raise ParseError(f"{block.type} block holds a PKCS#8 key, expected the traditional format")

    try:
        private_key = serialization.load_der_private_key(block.body, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise ParseError(f"parsing {block.type}") from e
    if not isinstance(private_key, expected):
        raise ParseError(f"{block.type} block does not hold that kind of key")

    return marshal_key_pair(KeyPair.from_private_key(private_key), pass_func)


def marshal_key_pair(
    key_pair: KeyPair,
    pass_func: PassFunc,
    kdf: Optional[str] = None,
    kdf_params: Optional[dict[str, int]] = None,
) -> EncryptedKeyBundle:
    """
    Encrypt a key pair's private key and serialize both halves as PEM.

    The passphrase callback is called once, with True. Errors it raises
    propagate unchanged.

    Args:
        key_pair: The keys to serialize
        pass_func: Passphrase callback
        kdf: KDF name, defaults to config.KDF
        kdf_params: KDF parameters, defaults to the configured ones

    Returns:
        EncryptedKeyBundle with the passphrase that was used
    """
    try:
        pkcs8 = key_pair.private_key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    except (ValueError, TypeError) as e:
        raise SerializationError(f"pkcs8 encoding private key: {e}") from e

    password = pass_func(True)
    enc_bytes = encrypted.encrypt(pkcs8, password, kdf, kdf_params)

    try:
        pub_bytes = public_key_to_pem(key_pair.public_key)
    except (ValueError, TypeError) as e:
        raise SerializationError(f"encoding public key: {e}") from e

    return EncryptedKeyBundle(
        private_bytes=encode_pem(PRIVATE_KEY_PEM_TYPE, enc_bytes),
        public_bytes=pub_bytes,
        password=password,
    )


def decode_private_key(pkcs8: bytes) -> DecodedKey:
    """
    Parse a PKCS#8 private key into ECKey or RSAKey.

    Raises:
        ParseError: The DER is malformed
        UnsupportedAlgorithmError: The key is neither EC nor RSA
    """
    try:
        private_key = serialization.load_der_private_key(pkcs8, password=None)
    except UnsupportedAlgorithm as e:
        raise UnsupportedAlgorithmError(f"unsupported private key algorithm: {e}") from e
    except (ValueError, TypeError) as e:
        raise ParseError("parsing private key") from e

    if isinstance(private_key, ec.EllipticCurvePrivateKey):
        return ECKey(private_key)
    if isinstance(private_key, rsa.RSAPrivateKey):
        return RSAKey(private_key)
    raise UnsupportedAlgorithmError(
        f"unsupported private key type: {type(private_key).__name__}"
    )


def _decrypt_private_key(key: bytes, passphrase: bytes) -> DecodedKey:
    block = decode_pem(key)
    if block.type != PRIVATE_KEY_PEM_TYPE:
        raise UnsupportedFormatError(block.type)

    return decode_private_key(encrypted.decrypt(block.body, passphrase))


def load_private_key(key: bytes, passphrase: bytes) -> SignerVerifier:
    """
    Decrypt an encrypted private key and build a signer/verifier for it.

    Args:
        key: PEM bytes with an "ENCRYPTED COSIGN PRIVATE KEY" block
        passphrase: The passphrase it was encrypted with

    Returns:
        ECDSASignerVerifier or RSAPKCS1v15SignerVerifier using SHA-256

    Raises:
        FormatError, UnsupportedFormatError, DecryptionError, ParseError,
        UnsupportedAlgorithmError
    """
    return _decrypt_private_key(key, passphrase).signer_verifier()


def load_ecdsa_private_key(key: bytes, passphrase: bytes) -> ECDSASignerVerifier:
    """Like load_private_key, but fail unless the key is ECDSA."""
    decoded = _decrypt_private_key(key, passphrase)
    if not isinstance(decoded, ECKey):
        raise UnsupportedAlgorithmError("invalid private key: expected ECDSA, got RSA")
    return decoded.signer_verifier()


def load_rsa_private_key(key: bytes, passphrase: bytes) -> RSAPKCS1v15SignerVerifier:
    """Like load_private_key, but fail unless the key is RSA."""
    decoded = _decrypt_private_key(key, passphrase)
    if not isinstance(decoded, RSAKey):
        raise UnsupportedAlgorithmError("invalid private key: expected RSA, got ECDSA")
    return decoded.signer_verifier()


def _load_public_key(pem_bytes: bytes):
    block = decode_pem(pem_bytes)
    if block.type != PUBLIC_KEY_PEM_TYPE:
        raise UnsupportedFormatError(block.type)
    try:
        return serialization.load_der_public_key(block.body)
    except UnsupportedAlgorithm as e:
        raise UnsupportedAlgorithmError(f"unsupported public key algorithm: {e}") from e
    except (ValueError, TypeError) as e:
        raise ParseError("parsing public key") from e


def pem_to_ecdsa_key(pem_bytes: bytes) -> ec.EllipticCurvePublicKey:
    """Parse a "PUBLIC KEY" PEM block and require an ECDSA key."""
    public_key = _load_public_key(pem_bytes)
    if not isinstance(public_key, ec.EllipticCurvePublicKey):
        raise UnsupportedAlgorithmError(
            f"invalid public key: was {type(public_key).__name__}, require ECDSA"
        )
    return public_key


def load_public_key(pem_bytes: bytes) -> Verifier:
    """Build a verifier for a persisted "PUBLIC KEY" PEM block."""
    public_key = _load_public_key(pem_bytes)
    if isinstance(public_key, ec.EllipticCurvePublicKey):
        return ECDSAVerifier(public_key, SHA256)
    if isinstance(public_key, rsa.RSAPublicKey):
        return RSAPKCS1v15Verifier(public_key, SHA256)
    raise UnsupportedAlgorithmError(
        f"unsupported public key type: {type(public_key).__name__}"
    )

