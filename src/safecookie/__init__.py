# file: safecookie/__init__.py
"""
safecookie: confidential, tamper-evident, context-bound cookie values.

A cookie's value is encrypted with an AEAD, using a canonical form of the
cookie's other attributes (or just its name) as associated data. Changing
the value, the key, or any bound attribute makes opening fail.

Public API:
    - SafeCookie.new_gcm(key) -> SafeCookie
    - SafeCookie.seal(payload, context) -> str
    - SafeCookie.open(token, context) -> bytes
    - TypedSafeCookie(binding, adapter) for registered dataclass payloads
"""

from .aead import AEADCipher, new_aead, new_chacha20, new_gcm
from .adapter import (
    JsonPayloadAdapter,
    PayloadAdapter,
    TypedSafeCookie,
    TypeRegistry,
    YamlPayloadAdapter,
    build_typed,
)
from .binding import SafeCookie
from .canonical import BindingMode, canonicalize
from .config import load_config
from .cookie import Cookie
from .crypto_errors import (
    SafeCookieError,
    ConfigurationError,
    InvalidKeyLengthError,
    RandomnessUnavailableError,
    MalformedEncodingError,
    AuthenticationFailureError,
    InvalidCookieError,
    SerializationError,
    DeserializationError,
)

__version__ = "1.0.0"

__all__ = [
    "SafeCookie",
    "TypedSafeCookie",
    "Cookie",
    "BindingMode",
    "canonicalize",
    "AEADCipher",
    "new_aead",
    "new_gcm",
    "new_chacha20",
    "PayloadAdapter",
    "JsonPayloadAdapter",
    "YamlPayloadAdapter",
    "TypeRegistry",
    "build_typed",
    "load_config",
    "SafeCookieError",
    "ConfigurationError",
    "InvalidKeyLengthError",
    "RandomnessUnavailableError",
    "MalformedEncodingError",
    "AuthenticationFailureError",
    "InvalidCookieError",
    "SerializationError",
    "DeserializationError",
]
