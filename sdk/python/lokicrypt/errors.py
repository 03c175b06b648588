class LokiCryptError(Exception):
    """Base exception for envelope, key and signature failures."""

    status_code = 0

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class InvalidKeyError(LokiCryptError):
    """Malformed or wrong-length key material."""
    status_code = 1000


class FormatError(LokiCryptError):
    """Malformed base64/hex input or an undersized envelope."""
    status_code = 1001


class DecryptionError(LokiCryptError):
    """IV-prefixed envelope failed its integrity check or is malformed."""
    status_code = 1002


class AuthenticationError(LokiCryptError):
    """GCM tag verification failed."""
    status_code = 1003


class SignatureError(LokiCryptError):
    """Signing or verification failed."""
    status_code = 1004
