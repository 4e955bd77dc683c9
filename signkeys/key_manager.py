"""
Key file storage.

Writes and reads the encrypted private key and public key PEM files for one
key pair in a directory. All cryptography happens in signkeys.keys; this
layer only moves bytes to and from disk.
"""

import os
import logging
from pathlib import Path
from typing import Optional

from .config import config
from .keys import (
    EncryptedKeyBundle,
    PassFunc,
    generate_key_pair,
    import_key_pair,
    load_private_key,
    load_public_key,
)
from .signer import SignerVerifier, Verifier

logger = logging.getLogger(__name__)


class KeyStore:
    """Manages an encrypted key pair stored as <prefix>.key / <prefix>.pub."""

    PRIVATE_KEY_MODE = 0o600

    def __init__(self, storage_dir: Path, prefix: Optional[str] = None):
        """
        Initialize the key store.

        Args:
            storage_dir: Directory for storing key files
            prefix: File name prefix, defaults to config.KEY_PREFIX
        """
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

        prefix = prefix or config.KEY_PREFIX
        self.private_key_path = self.storage_dir / f"{prefix}.key"
        self.public_key_path = self.storage_dir / f"{prefix}.pub"

    @property
    def has_keys(self) -> bool:
        """Check if keys have been written."""
        return self.public_key_path.exists() and self.private_key_path.exists()

    def generate(self, pass_func: PassFunc) -> EncryptedKeyBundle:
        """
        Generate a new key pair and store it encrypted.

        Raises:
            FileExistsError: If either key file already exists
        """
        self._check_not_existing()
        bundle = generate_key_pair(pass_func)
        self.save(bundle)
        return bundle

    def import_key(self, key_path: Path, pass_func: PassFunc) -> EncryptedKeyBundle:
        """
        Import an unencrypted RSA or EC private key file and store it encrypted.

        Args:
            key_path: Path to an "RSA PRIVATE KEY" or "EC PRIVATE KEY" PEM file
            pass_func: Callback producing the new passphrase
        """
        self._check_not_existing()
        bundle = import_key_pair(Path(key_path).read_bytes(), pass_func)
        self.save(bundle)
        return bundle

    def save(self, bundle: EncryptedKeyBundle) -> None:
        """Write both halves of a bundle. The private key file is created 0600."""
        fd = os.open(
            self.private_key_path,
            os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
            self.PRIVATE_KEY_MODE,
        )
        with os.fdopen(fd, "wb") as f:
            f.write(bundle.private_bytes)
        self.public_key_path.write_bytes(bundle.public_bytes)

        logger.info(f"Private key written to {self.private_key_path}")
        logger.info(f"Public key written to {self.public_key_path}")

    def load_signer(self, passphrase: bytes) -> SignerVerifier:
        """Decrypt the stored private key into a signer/verifier."""
        if not self.private_key_path.exists():
            raise FileNotFoundError(f"No private key at {self.private_key_path}")

        logger.debug(f"Loading private key from {self.private_key_path}")
        return load_private_key(self.private_key_path.read_bytes(), passphrase)

    def load_verifier(self) -> Verifier:
        """Build a verifier from the stored public key."""
        return load_public_key(self.get_public_key_pem())

    def get_public_key_pem(self) -> bytes:
        """Get the public key in PEM format."""
        if not self.public_key_path.exists():
            raise FileNotFoundError(f"No public key at {self.public_key_path}")
        return self.public_key_path.read_bytes()

    def _check_not_existing(self) -> None:
        # Don't overwrite existing keys
        for path in (self.private_key_path, self.public_key_path):
            if path.exists():
                raise FileExistsError(f"Key already exists: {path}")
