# file: safecookie/crypto_errors.py
"""
Exception hierarchy for safecookie.

All exceptions inherit from SafeCookieError for unified handling.
"""


class SafeCookieError(Exception):
    """Base exception for all safecookie errors."""
    pass


class ConfigurationError(SafeCookieError):
    """Raised when configuration is invalid."""
    pass


class InvalidKeyLengthError(SafeCookieError, ValueError):
    """Raised when a key does not match the cipher's accepted sizes."""

    def __init__(self, message: str, key_length: int = None, accepted: tuple = ()):
        super().__init__(message)
        self.key_length = key_length
        self.accepted = accepted


class RandomnessUnavailableError(SafeCookieError):
    """Raised when the secure random source cannot supply a nonce."""
    pass


class MalformedEncodingError(SafeCookieError):
    """Raised when a token is not valid URL-safe base64."""
    pass


class AuthenticationFailureError(SafeCookieError):
    """Raised when authentication tag verification fails."""
    pass


class InvalidCookieError(SafeCookieError):
    """
    Raised for every failure to open a token.

    Malformed encoding, truncation and tag mismatch all surface as this one
    error with the same message.
    """

    def __init__(self, message: str = "invalid cookie"):
        super().__init__(message)


class SerializationError(SafeCookieError):
    """Raised when a typed payload cannot be marshalled."""
    pass


class DeserializationError(SafeCookieError):
    """Raised when authenticated bytes cannot be unmarshalled."""
    pass
