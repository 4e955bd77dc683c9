"""
Encrypted signing key pairs.

Handles:
- Key generation (ECDSA P-256)
- Passphrase derivation (scrypt, or Argon2id)
- Private key encryption (NaCl secretbox) in cosign's PEM format
- Loading keys into RSA / ECDSA signer/verifiers
"""

from .errors import (
    SigningKeyError,
    FormatError,
    UnsupportedFormatError,
    ParseError,
    SerializationError,
    EncryptionError,
    DecryptionError,
    UnsupportedAlgorithmError,
    GenerationError,
    VerificationError,
)
from .keys import (
    PRIVATE_KEY_PEM_TYPE,
    RSA_PRIVATE_KEY_PEM_TYPE,
    EC_PRIVATE_KEY_PEM_TYPE,
    PUBLIC_KEY_PEM_TYPE,
    PassFunc,
    KeyPair,
    EncryptedKeyBundle,
    ECKey,
    RSAKey,
    generate_private_key,
    generate_key_pair,
    import_key_pair,
    marshal_key_pair,
    decode_private_key,
    load_private_key,
    load_ecdsa_private_key,
    load_rsa_private_key,
    load_public_key,
    pem_to_ecdsa_key,
)
from .signer import (
    SHA256,
    Verifier,
    SignerVerifier,
    ECDSASignerVerifier,
    RSAPKCS1v15SignerVerifier,
)
from .key_manager import KeyStore

__version__ = "0.1.0"
__all__ = [
    "SigningKeyError",
    "FormatError",
    "UnsupportedFormatError",
    "ParseError",
    "SerializationError",
    "EncryptionError",
    "DecryptionError",
    "UnsupportedAlgorithmError",
    "GenerationError",
    "VerificationError",
    "PRIVATE_KEY_PEM_TYPE",
    "RSA_PRIVATE_KEY_PEM_TYPE",
    "EC_PRIVATE_KEY_PEM_TYPE",
    "PUBLIC_KEY_PEM_TYPE",
    "PassFunc",
    "KeyPair",
    "EncryptedKeyBundle",
    "ECKey",
    "RSAKey",
    "generate_private_key",
    "generate_key_pair",
    "import_key_pair",
    "marshal_key_pair",
    "decode_private_key",
    "load_private_key",
    "load_ecdsa_private_key",
    "load_rsa_private_key",
    "load_public_key",
    "pem_to_ecdsa_key",
    "SHA256",
    "Verifier",
    "SignerVerifier",
    "ECDSASignerVerifier",
    "RSAPKCS1v15SignerVerifier",
    "KeyStore",
]
