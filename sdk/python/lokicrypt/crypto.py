import hashlib
import hmac
import logging
from typing import Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey

from .errors import InvalidKeyError

logger = logging.getLogger(__name__)

# Protocol tag mixed into every derived key. Changing it breaks interop.
KEY_DERIVATION_TAG = b"LOKI"

SYMMETRIC_KEY_LENGTH = 32
CURVE_KEY_LENGTH = 32
# Type byte peers prepend to serialized Curve25519 public keys.
DJB_TYPE = 0x05

PrivateKeyLike = Union[bytes, X25519PrivateKey]
PublicKeyLike = Union[bytes, X25519PublicKey]


class Curve25519KeyPair:
    """
    Holds an X25519 keypair used for the Diffie-Hellman agreement between peers.
    Persisting the private half is the caller's responsibility.
    """

    def __init__(self, private_key: X25519PrivateKey = None):
        if private_key is None:
            self._private_key = X25519PrivateKey.generate()
        else:
            self._private_key = private_key

        self._public_key = self._private_key.public_key()

    @classmethod
    def generate(cls) -> "Curve25519KeyPair":
        """Generate a new random keypair."""
        return cls()

    @classmethod
    def from_private_bytes(cls, data: bytes) -> "Curve25519KeyPair":
        """Rebuild a keypair from a 32-byte raw private key."""
        return cls(load_private_key(data))

    @property
    def private_key(self) -> X25519PrivateKey:
        return self._private_key

    @property
    def public_key(self) -> X25519PublicKey:
        return self._public_key

    def private_bytes(self) -> bytes:
        """Get the private key in raw binary format."""
        return self._private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption()
        )

    def public_bytes(self, prefixed: bool = False) -> bytes:
        """
        Get the public key in raw binary format.

        Args:
            prefixed: Prepend the 0x05 type byte expected by peers that
                exchange 33-byte serialized keys.
        """
        raw = self._public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw
        )
        if prefixed:
            return bytes([DJB_TYPE]) + raw
        return raw

    def erase(self):
        """
        Drop the references to the underlying key objects. In pure Python this
        is the most that can be done to release the key material.
        """
        self._private_key = None
        self._public_key = None


def load_private_key(private_key: PrivateKeyLike) -> X25519PrivateKey:
    if isinstance(private_key, X25519PrivateKey):
        return private_key
    if isinstance(private_key, Curve25519KeyPair):
        return private_key.private_key
    if not isinstance(private_key, (bytes, bytearray)) or len(private_key) != CURVE_KEY_LENGTH:
        raise InvalidKeyError(f"Private key must be {CURVE_KEY_LENGTH} raw bytes.")
    return X25519PrivateKey.from_private_bytes(bytes(private_key))


def load_public_key(public_key: PublicKeyLike) -> X25519PublicKey:
    """
    Accept a 32-byte raw public key or the 33-byte form carrying the 0x05
    type prefix.
    """
    if isinstance(public_key, X25519PublicKey):
        return public_key
    if not isinstance(public_key, (bytes, bytearray)):
        raise InvalidKeyError("Public key must be bytes.")

    data = bytes(public_key)
    if len(data) == CURVE_KEY_LENGTH + 1:
        if data[0] != DJB_TYPE:
            raise InvalidKeyError(f"Unknown public key type byte 0x{data[0]:02x}.")
        data = data[1:]
    if len(data) != CURVE_KEY_LENGTH:
        raise InvalidKeyError(f"Public key must be {CURVE_KEY_LENGTH} raw bytes, got {len(data)}.")
    return X25519PublicKey.from_public_bytes(data)


def compute_shared_secret(private_key: PrivateKeyLike, public_key: PublicKeyLike) -> bytes:
    """
    Run the X25519 agreement between our private key and a peer's public key.

    Returns:
        bytes: The 32-byte raw shared secret.

    Raises:
        InvalidKeyError: If either key is malformed or the peer key is a
            low-order point.
    """
    private = load_private_key(private_key)
    public = load_public_key(public_key)
    try:
        return private.exchange(public)
    except ValueError as e:
        # cryptography refuses an all-zero agreement output
        raise InvalidKeyError(f"Key agreement failed: {e}") from e


def derive_symmetric_key(private_key: PrivateKeyLike, public_key: PublicKeyLike) -> bytes:
    """
    Derive the 32-byte symmetric key shared by two peers.

    The raw agreement is hashed as HMAC-SHA256 keyed with KEY_DERIVATION_TAG,
    so the same keypair yields unrelated keys under any other protocol.
    """
    shared_secret = compute_shared_secret(private_key, public_key)
    symmetric_key = hmac.new(KEY_DERIVATION_TAG, shared_secret, hashlib.sha256).digest()
    logger.debug("Derived %d-byte symmetric key", len(symmetric_key))
    return symmetric_key
