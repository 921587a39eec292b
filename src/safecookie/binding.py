# file: safecookie/binding.py
"""
Binding protocol: seal payloads into cookie values and open them again.

The cookie's context (every attribute except the value, or just its name)
is used as AEAD associated data. Opening re-derives it from the cookie as
it is now, so a token moved to a different cookie fails to open.
"""

import logging
import os
from typing import Callable, Dict, Any, Optional, Union

from . import envelope
from .aead import AEADCipher, new_aead, new_gcm
from .canonical import BindingMode, canonicalize
from .config import resolve_config
from .cookie import Cookie
from .crypto_errors import (
    AuthenticationFailureError,
    DeserializationError,
    InvalidCookieError,
    MalformedEncodingError,
    RandomnessUnavailableError,
)


logger = logging.getLogger(__name__)

Context = Union[Cookie, str]
Payload = Union[bytes, bytearray, memoryview, str]
RandomSource = Callable[[int], bytes]


def _to_bytes(payload: Payload) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return bytes(payload)
    raise TypeError(f"Payload must be bytes or str, got {type(payload).__name__}")


class SafeCookie:
    """
    Seals payloads into tokens bound to a cookie context, and opens them.

    Immutable after construction; safe to share across threads.
    """

    def __init__(
        self,
        aead: AEADCipher,
        binding: Union[BindingMode, str] = BindingMode.FULL,
        random_source: RandomSource = os.urandom,
    ):
        """
        Args:
            aead: Keyed AEAD primitive
            binding: BindingMode.FULL or BindingMode.NAME
            random_source: Callable returning n secure random bytes.
                           Tests may inject a deterministic source.
        """
        self._aead = aead
        self._binding = BindingMode(binding)
        self._random_source = random_source

    @classmethod
    def new_gcm(cls, key: bytes, **kwargs) -> "SafeCookie":
        """Build an AES-GCM SafeCookie from a 128-, 192- or 256-bit key."""
        return cls(new_gcm(key), **kwargs)

    @classmethod
    def from_config(
        cls,
        key: bytes,
        config: Optional[Dict[str, Any]] = None,
        random_source: RandomSource = os.urandom,
    ) -> "SafeCookie":
        """
        Build a SafeCookie from a configuration dictionary.

        Args:
            key: Raw symmetric key
            config: Dictionary with a 'safecookie' section (see load_config)
            random_source: Nonce source
        """
        section = resolve_config(config)["safecookie"]
        return cls(
            new_aead(key, section["cipher"]),
            binding=section["binding"],
            random_source=random_source,
        )

    @property
    def aead(self) -> AEADCipher:
        return self._aead

    @property
    def binding(self) -> BindingMode:
        return self._binding

    def _nonce(self) -> bytes:
        size = self._aead.nonce_size
        try:
            nonce = self._random_source(size)
        except (OSError, NotImplementedError) as e:
            raise RandomnessUnavailableError(f"Random source failed: {e}") from e
        if not isinstance(nonce, (bytes, bytearray)):
            raise RandomnessUnavailableError(
                f"Random source returned {type(nonce).__name__}, expected bytes"
            )
        if len(nonce) != size:
            raise RandomnessUnavailableError(
                f"Random source returned {len(nonce)} bytes, expected {size}"
            )
        return bytes(nonce)

    def seal(self, payload: Payload, context: Context) -> str:
        """
        Encrypt `payload` bound to `context`.

        Args:
            payload: bytes, or str (encoded as UTF-8)
            context: Cookie, or a cookie name when binding by name

        Returns:
            Token for the cookie's value

        Raises:
            RandomnessUnavailableError: If no nonce could be drawn
        """
        data = _to_bytes(payload)
        nonce = self._nonce()
        associated_data = canonicalize(context, self._binding)
        ciphertext = self._aead.seal(nonce, data, associated_data)
        token = envelope.encode(nonce, ciphertext)
        logger.debug(
            "Sealed %d-byte payload (%s binding, %s)",
            len(data), self._binding.value, self._aead.name,
        )
        return token

    def open(self, token: str, context: Context) -> bytes:
        """
        Decrypt `token` and authenticate it against the current `context`.

        Returns:
            The original payload bytes

        Raises:
            InvalidCookieError: For any malformed, truncated or forged token,
                                or a context that differs from sealing time
        """
        # Context type errors are caller bugs, not adversarial input
        associated_data = canonicalize(context, self._binding)

        try:
            raw = envelope.decode(token)
        except MalformedEncodingError as e:
            logger.debug("Rejected cookie: %s", e)
            raise InvalidCookieError() from None

        nonce_size = self._aead.nonce_size
        if len(raw) <= nonce_size:
            logger.debug("Rejected cookie: %d bytes is too short", len(raw))
            raise InvalidCookieError()

        nonce, ciphertext = raw[:nonce_size], raw[nonce_size:]
        try:
            payload = self._aead.open(nonce, ciphertext, associated_data)
        except AuthenticationFailureError as e:
            logger.debug("Rejected cookie: %s", e)
            raise InvalidCookieError() from None

        return payload

    def open_text(self, token: str, context: Context) -> str:
        """
        Open `token` and decode the payload as UTF-8.

        Raises:
            InvalidCookieError: As for open()
            DeserializationError: If the authenticated payload is not UTF-8
        """
        payload = self.open(token, context)
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DeserializationError(f"Payload is not valid UTF-8: {e}") from e

    def seal_cookie(self, cookie: Cookie, payload: Payload) -> Cookie:
        """Return a copy of `cookie` whose value is the sealed `payload`."""
        return cookie.with_value(self.seal(payload, cookie))

    def open_cookie(self, cookie: Cookie) -> bytes:
        """Open `cookie.value` against the cookie's own attributes."""
        return self.open(cookie.value, cookie)

    def __repr__(self) -> str:
        return f"SafeCookie(aead={self._aead!r}, binding={self._binding.value!r})"
