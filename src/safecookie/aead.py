# file: safecookie/aead.py
"""
Authenticated encryption using AES-GCM or ChaCha20-Poly1305.
"""

import logging
from typing import Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM, ChaCha20Poly1305

from .crypto_errors import (
    AuthenticationFailureError,
    ConfigurationError,
    InvalidKeyLengthError,
)


logger = logging.getLogger(__name__)

NONCE_SIZE = 12
TAG_SIZE = 16

GCM_KEY_SIZES = (16, 24, 32)
CHACHA20_KEY_SIZES = (32,)


class AEADCipher:
    """
    Keyed AEAD primitive.

    Wraps a `cryptography` AEAD object. Holds no mutable state, so one
    instance can be shared by any number of threads.
    """

    def __init__(self, primitive, name: str, nonce_size: int = NONCE_SIZE):
        self._primitive = primitive
        self.name = name
        self._nonce_size = nonce_size

    @property
    def nonce_size(self) -> int:
        return self._nonce_size

    @property
    def overhead(self) -> int:
        """Bytes added to the plaintext by the authentication tag."""
        return TAG_SIZE

    def seal(self, nonce: bytes, plaintext: bytes, associated_data: bytes) -> bytes:
        """
        Encrypt and authenticate plaintext.

        Args:
            nonce: nonce_size bytes, never reused under the same key
            plaintext: Data to encrypt
            associated_data: Data authenticated but not encrypted

        Returns:
            ciphertext || tag
        """
        if len(nonce) != self._nonce_size:
            raise ValueError(
                f"Nonce must be {self._nonce_size} bytes, got {len(nonce)}"
            )
        return self._primitive.encrypt(nonce, plaintext, associated_data)

    def open(self, nonce: bytes, ciphertext: bytes, associated_data: bytes) -> bytes:
        """
        Decrypt and verify ciphertext || tag.

        Raises:
            AuthenticationFailureError: If the tag does not verify
        """
        if len(nonce) != self._nonce_size:
            raise AuthenticationFailureError(
                f"Nonce must be {self._nonce_size} bytes, got {len(nonce)}"
            )
        try:
            return self._primitive.decrypt(nonce, ciphertext, associated_data)
        except InvalidTag:
            raise AuthenticationFailureError(
                "Authentication tag verification failed"
            ) from None

    def __repr__(self) -> str:
        return f"AEADCipher(name={self.name!r}, nonce_size={self._nonce_size})"


def _check_key(key: bytes, accepted: Tuple[int, ...], cipher: str) -> None:
    if not isinstance(key, (bytes, bytearray, memoryview)):
        raise InvalidKeyLengthError(
            f"{cipher} key must be bytes, got {type(key).__name__}",
            accepted=accepted,
        )
    if len(key) not in accepted:
        raise InvalidKeyLengthError(
            f"{cipher} key must be one of {accepted} bytes, got {len(key)}",
            key_length=len(key),
            accepted=accepted,
        )


def new_gcm(key: bytes) -> AEADCipher:
    """
    Construct AES-GCM from a 128-, 192- or 256-bit key.

    Raises:
        InvalidKeyLengthError: If the key is not 16, 24 or 32 bytes
    """
    _check_key(key, GCM_KEY_SIZES, "AES-GCM")
    logger.debug("Constructed AES-%d-GCM", len(key) * 8)
    return AEADCipher(AESGCM(bytes(key)), name="aes_gcm")


def new_chacha20(key: bytes) -> AEADCipher:
    """
    Construct ChaCha20-Poly1305 from a 256-bit key.

    Raises:
        InvalidKeyLengthError: If the key is not 32 bytes
    """
    _check_key(key, CHACHA20_KEY_SIZES, "ChaCha20-Poly1305")
    logger.debug("Constructed ChaCha20-Poly1305")
    return AEADCipher(ChaCha20Poly1305(bytes(key)), name="chacha20_poly1305")


_CONSTRUCTORS = {
    "aes_gcm": new_gcm,
    "chacha20_poly1305": new_chacha20,
}

SUPPORTED_CIPHERS = tuple(_CONSTRUCTORS)


def new_aead(key: bytes, cipher: str = "aes_gcm") -> AEADCipher:
    """Construct the AEAD named by `cipher`."""
    try:
        constructor = _CONSTRUCTORS[cipher]
    except KeyError:
        raise ConfigurationError(
            f"Unknown cipher: {cipher} (supported: {', '.join(SUPPORTED_CIPHERS)})"
        ) from None
    return constructor(key)
