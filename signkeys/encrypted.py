"""
Password-based authenticated encryption of private key material.

This is the envelope cosign writes inside "ENCRYPTED COSIGN PRIVATE KEY"
blocks: a key derived from the passphrase (scrypt by default) seals the data
with NaCl secretbox (XSalsa20-Poly1305). The result is compact JSON:

    {"kdf":{"name":"scrypt","params":{"N":32768,"r":8,"p":1},"salt":"<b64>"},
     "cipher":{"name":"nacl/secretbox","nonce":"<b64>"},
     "ciphertext":"<b64>"}

The salt is 32 bytes, the nonce 24 bytes, and the ciphertext is the Poly1305
tag followed by the encrypted data.
"""

import os
import json
import base64
import binascii
from typing import Any, Optional

from nacl.exceptions import CryptoError
from nacl.secret import SecretBox

from .config import config
from .errors import DecryptionError, EncryptionError
from .passphrase import get_deriver

CIPHER_NAME = "nacl/secretbox"


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(value: Any, field: str) -> bytes:
    if not isinstance(value, str):
        raise DecryptionError(f"missing or invalid {field}")
    try:
        return base64.b64decode(value, validate=True)
    except binascii.Error as e:
        raise DecryptionError(f"invalid base64 in {field}") from e


def encrypt(
    plaintext: bytes,
    passphrase: bytes,
    kdf: Optional[str] = None,
    params: Optional[dict[str, int]] = None,
) -> bytes:
    """
    Encrypt data under a passphrase.

    Args:
        plaintext: Bytes to protect
        passphrase: Passphrase bytes (may be empty)
        kdf: KDF name, defaults to config.KDF
        params: KDF parameters, defaults to the configured ones for that KDF

    Returns:
        The JSON envelope as UTF-8 bytes

    Raises:
        EncryptionError: If key derivation or encryption fails
    """
    kdf = kdf or config.KDF
    if params is None:
        params = config.kdf_params(kdf)

    try:
        deriver = get_deriver(kdf)
        params = deriver.check_params(params)
        derived_key, salt = deriver.derive_key(passphrase, params)
    except ValueError as e:
        raise EncryptionError(f"key derivation failed: {e}") from e

    nonce = os.urandom(SecretBox.NONCE_SIZE)
    try:
        ciphertext = SecretBox(derived_key).encrypt(plaintext, nonce).ciphertext
    except CryptoError as e:
        raise EncryptionError(f"encryption failed: {e}") from e

    envelope = {
        "kdf": {"name": deriver.NAME, "params": params, "salt": _b64encode(salt)},
        "cipher": {"name": CIPHER_NAME, "nonce": _b64encode(nonce)},
        "ciphertext": _b64encode(ciphertext),
    }
    return json.dumps(envelope, separators=(",", ":")).encode("utf-8")


def decrypt(envelope_bytes: bytes, passphrase: bytes) -> bytes:
    """
    Decrypt an envelope produced by :func:`encrypt` or by cosign.

    Args:
        envelope_bytes: The JSON envelope
        passphrase: Passphrase bytes

    Returns:
        The plaintext

    Raises:
        DecryptionError: On a wrong passphrase, tampered or malformed data
    """
    try:
        envelope = json.loads(envelope_bytes.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise DecryptionError("encrypted data is not a valid envelope") from e
    if not isinstance(envelope, dict):
        raise DecryptionError("encrypted data is not a valid envelope")

    kdf = envelope.get("kdf")
    cipher = envelope.get("cipher")
    if not isinstance(kdf, dict) or not isinstance(cipher, dict):
        raise DecryptionError("envelope is missing kdf or cipher section")

    if cipher.get("name") != CIPHER_NAME:
        raise DecryptionError(f"unsupported cipher: {cipher.get('name')!r}")

    params = kdf.get("params")
    if not isinstance(params, dict):
        raise DecryptionError("missing kdf params")

    salt = _b64decode(kdf.get("salt"), "kdf salt")
    nonce = _b64decode(cipher.get("nonce"), "cipher nonce")
    ciphertext = _b64decode(envelope.get("ciphertext"), "ciphertext")
    if len(nonce) != SecretBox.NONCE_SIZE:
        raise DecryptionError("invalid nonce length")

    try:
        derived_key, _ = get_deriver(kdf.get("name")).derive_key(passphrase, params, salt)
    except ValueError as e:
        raise DecryptionError(str(e)) from e

    try:
        return SecretBox(derived_key).decrypt(ciphertext, nonce)
    except CryptoError as e:
        raise DecryptionError("decryption failed: wrong passphrase or corrupted data") from e
