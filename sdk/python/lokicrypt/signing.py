import binascii
import logging
from typing import Any, List, Mapping, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

from .errors import FormatError, SignatureError

logger = logging.getLogger(__name__)

SIGNING_KEY_LENGTH = 32

SigningKeyLike = Union[bytes, Ed25519PrivateKey]

# ECMAScript WhiteSpace and LineTerminator code points, the set String.prototype.trim removes.
JS_WHITESPACE = (
    "\u0009\u000b\u000c\u0020\u00a0\ufeff"
    "\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u202f\u205f\u3000"
    "\u000a\u000d\u2028\u2029"
)


def _field(value: Any) -> str:
    # Whole floats render without a fractional part, as JSON numbers do.
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def _trim(text: str) -> str:
    return text.strip(JS_WHITESPACE)


def canonical_fields(sig_version: Any, note: Mapping[str, Any], message: Mapping[str, Any]) -> List[str]:
    """
    List the signed fields in their fixed order:

    1. message text, trimmed
    2. note timestamp
    3. quote id, author and trimmed text, then message reply_to, only when
       the note carries a quote (reply_to only when truthy)
    4. signature version

    Attachment and preview annotations are not part of the payload.
    """
    fields = [
        _trim(message["text"]),
        _field(note["timestamp"]),
    ]

    quote = note.get("quote")
    if quote is not None:
        fields.append(_field(quote["id"]))
        fields.append(_field(quote["author"]))
        fields.append(_trim(quote["text"]))
        if message.get("reply_to"):
            fields.append(_field(message["reply_to"]))

    fields.append(_field(sig_version))
    return fields


def build_signature_payload(sig_version: Any, note: Mapping[str, Any], message: Mapping[str, Any]) -> bytes:
    """
    Construct the deterministic byte sequence that gets signed.

    Args:
        sig_version: Signature schema version, appended last.
        note: The note value carrying 'timestamp' and an optional 'quote'.
        message: The message object carrying 'text' and an optional 'reply_to'.

    Returns:
        bytes: UTF-8 encoding of the concatenated fields.
    """
    return "".join(canonical_fields(sig_version, note, message)).encode('utf-8')


def load_signing_key(private_key: SigningKeyLike) -> Ed25519PrivateKey:
    if isinstance(private_key, Ed25519PrivateKey):
        return private_key
    if not isinstance(private_key, (bytes, bytearray)) or len(private_key) != SIGNING_KEY_LENGTH:
        raise SignatureError(f"Signing key must be {SIGNING_KEY_LENGTH} raw bytes.")
    return Ed25519PrivateKey.from_private_bytes(bytes(private_key))


def signing_public_key(private_key: SigningKeyLike) -> bytes:
    """Get the raw 32-byte verification key for a signing key."""
    return load_signing_key(private_key).public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw
    )


def get_sig_data(sig_version: Any, private_key: SigningKeyLike, note: Mapping[str, Any], message: Mapping[str, Any]) -> str:
    """
    Sign the canonical payload of a message.

    Ed25519 signing is deterministic, so identical inputs always produce the
    same signature.

    Returns:
        str: The 64-byte signature as lowercase hex.
    """
    payload = build_signature_payload(sig_version, note, message)
    signature = load_signing_key(private_key).sign(payload)
    return signature.hex()


def verify_sig_data(sig_version: Any, public_key: bytes, note: Mapping[str, Any], message: Mapping[str, Any], signature_hex: str) -> None:
    """
    Rebuild the canonical payload and check a hex signature against it.

    Raises:
        FormatError: If the signature is not valid hex.
        SignatureError: If the public key is malformed or the signature
            does not match.
    """
    try:
        signature = binascii.unhexlify(signature_hex)
    except (binascii.Error, ValueError) as e:
        raise FormatError(f"Invalid hex signature: {e}") from e

    try:
        verifier = Ed25519PublicKey.from_public_bytes(public_key)
    except (ValueError, TypeError) as e:
        raise SignatureError(f"Invalid Ed25519 public key: {e}") from e

    payload = build_signature_payload(sig_version, note, message)
    try:
        verifier.verify(signature, payload)
    except InvalidSignature:
        logger.debug("Signature verification failed for version %s payload", sig_version)
        raise SignatureError("Signature verification failed.") from None
