import base64
import binascii
import logging
import os
from typing import Callable, Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .crypto import SYMMETRIC_KEY_LENGTH
from .errors import AuthenticationError, DecryptionError, FormatError, InvalidKeyError

logger = logging.getLogger(__name__)

IV_LENGTH = 16
NONCE_LENGTH = 12
TAG_LENGTH = 16

# Any callable returning n cryptographically secure random bytes.
SecureRandomSource = Callable[[int], bytes]

Plaintext = Union[bytes, str]


def _to_bytes(plaintext: Plaintext) -> bytes:
    if isinstance(plaintext, str):
        return plaintext.encode('utf-8')
    return bytes(plaintext)


def _draw(random_source: SecureRandomSource, length: int) -> bytes:
    value = random_source(length)
    if len(value) != length:
        raise FormatError(f"Random source returned {len(value)} bytes, expected {length}.")
    return bytes(value)


def _cipher(key: bytes) -> AESGCM:
    if not isinstance(key, (bytes, bytearray)) or len(key) != SYMMETRIC_KEY_LENGTH:
        raise InvalidKeyError(f"Symmetric key must be exactly {SYMMETRIC_KEY_LENGTH} bytes.")
    return AESGCM(bytes(key))


class EnvelopeCodecA:
    """
    IV-prefixed envelope: IV(16) || ciphertext, where the ciphertext carries
    its own trailing 16-byte integrity tag. Also provides the base64 text
    framing used for tokens and proxied payloads.
    """

    def __init__(self, random_source: Optional[SecureRandomSource] = None):
        self._random = random_source or os.urandom

    def encrypt(self, key: bytes, plaintext: Plaintext) -> bytes:
        cipher = _cipher(key)
        iv = _draw(self._random, IV_LENGTH)
        ciphertext = cipher.encrypt(iv, _to_bytes(plaintext), None)
        return iv + ciphertext

    def decrypt(self, key: bytes, envelope: bytes) -> bytes:
        """
        Split the IV off the envelope and open the ciphertext.

        Raises:
            DecryptionError: If the envelope is shorter than the IV or fails
                its integrity check.
        """
        cipher = _cipher(key)
        if len(envelope) < IV_LENGTH:
            raise DecryptionError(f"Envelope is {len(envelope)} bytes, shorter than the {IV_LENGTH}-byte IV.")

        iv = bytes(envelope[:IV_LENGTH])
        ciphertext = bytes(envelope[IV_LENGTH:])
        try:
            return cipher.decrypt(iv, ciphertext, None)
        except InvalidTag:
            logger.debug("IV-prefixed envelope of %d bytes failed integrity check", len(envelope))
            raise DecryptionError("Envelope integrity check failed.") from None

    def encrypt64(self, key: bytes, plaintext: Plaintext) -> str:
        """Encrypt and render the envelope as base64 text."""
        return base64.b64encode(self.encrypt(key, plaintext)).decode('ascii')

    def decrypt64(self, key: bytes, text: Union[str, bytes]) -> bytes:
        """
        Base64-decode a text envelope and decrypt it. Line breaks and other
        whitespace inside the text are ignored.
        """
        try:
            if isinstance(text, str):
                text = "".join(text.split())
            else:
                text = b"".join(bytes(text).split())
            envelope = base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError) as e:
            raise FormatError(f"Invalid base64 envelope: {e}") from e
        return self.decrypt(key, envelope)


class EnvelopeCodecB:
    """
    AES-256-GCM envelope: Nonce(12) || ciphertext || Tag(16).
    Not compatible with EnvelopeCodecA even under the same key.
    """

    def __init__(self, random_source: Optional[SecureRandomSource] = None):
        self._random = random_source or os.urandom

    def encrypt(self, key: bytes, plaintext: Plaintext) -> bytes:
        cipher = _cipher(key)
        nonce = _draw(self._random, NONCE_LENGTH)
        # AESGCM returns ciphertext || tag, so the tag already sits last
        return nonce + cipher.encrypt(nonce, _to_bytes(plaintext), None)

    def decrypt(self, key: bytes, blob: bytes) -> bytes:
        """
        Verify the tag and return the plaintext bytes.

        Raises:
            FormatError: If the blob cannot hold a nonce and a tag.
            AuthenticationError: If tag verification fails.
        """
        cipher = _cipher(key)
        if len(blob) < NONCE_LENGTH + TAG_LENGTH:
            raise FormatError(f"GCM envelope must be at least {NONCE_LENGTH + TAG_LENGTH} bytes, got {len(blob)}.")

        nonce = bytes(blob[:NONCE_LENGTH])
        ciphertext = bytes(blob[NONCE_LENGTH:len(blob) - TAG_LENGTH])
        tag = bytes(blob[len(blob) - TAG_LENGTH:])
        try:
            return cipher.decrypt(nonce, ciphertext + tag, None)
        except InvalidTag:
            logger.debug("GCM envelope of %d bytes failed tag verification", len(blob))
            raise AuthenticationError("GCM tag verification failed.") from None

    def decrypt_text(self, key: bytes, blob: bytes) -> str:
        """Decrypt and decode the plaintext as UTF-8."""
        plaintext = self.decrypt(key, blob)
        try:
            return plaintext.decode('utf-8')
        except UnicodeDecodeError as e:
            raise FormatError(f"Plaintext is not valid UTF-8: {e}") from e


_codec_a = EnvelopeCodecA()
_codec_b = EnvelopeCodecB()


def encrypt_a(key: bytes, plaintext: Plaintext) -> bytes:
    return _codec_a.encrypt(key, plaintext)


def decrypt_a(key: bytes, envelope: bytes) -> bytes:
    return _codec_a.decrypt(key, envelope)


def encrypt_a64(key: bytes, plaintext: Plaintext) -> str:
    return _codec_a.encrypt64(key, plaintext)


def decrypt_a64(key: bytes, text: Union[str, bytes]) -> bytes:
    return _codec_a.decrypt64(key, text)


def encrypt_b(key: bytes, plaintext: Plaintext) -> bytes:
    return _codec_b.encrypt(key, plaintext)


def decrypt_b(key: bytes, blob: bytes) -> bytes:
    return _codec_b.decrypt(key, blob)
