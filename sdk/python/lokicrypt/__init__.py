__version__ = "0.1.0"

from .crypto import Curve25519KeyPair, KEY_DERIVATION_TAG, compute_shared_secret, derive_symmetric_key
from .envelope import (
    IV_LENGTH,
    NONCE_LENGTH,
    TAG_LENGTH,
    EnvelopeCodecA,
    EnvelopeCodecB,
    decrypt_a,
    decrypt_a64,
    decrypt_b,
    encrypt_a,
    encrypt_a64,
    encrypt_b,
)
from .errors import (
    AuthenticationError,
    DecryptionError,
    FormatError,
    InvalidKeyError,
    LokiCryptError,
    SignatureError,
)
from .signing import build_signature_payload, get_sig_data, signing_public_key, verify_sig_data

__all__ = [
    "Curve25519KeyPair",
    "KEY_DERIVATION_TAG",
    "compute_shared_secret",
    "derive_symmetric_key",
    "IV_LENGTH",
    "NONCE_LENGTH",
    "TAG_LENGTH",
    "EnvelopeCodecA",
    "EnvelopeCodecB",
    "encrypt_a",
    "decrypt_a",
    "encrypt_a64",
    "decrypt_a64",
    "encrypt_b",
    "decrypt_b",
    "LokiCryptError",
    "InvalidKeyError",
    "FormatError",
    "DecryptionError",
    "AuthenticationError",
    "SignatureError",
    "build_signature_payload",
    "get_sig_data",
    "verify_sig_data",
    "signing_public_key",
]
