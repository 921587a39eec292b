# file: safecookie/envelope.py
"""
Envelope encoding for sealed cookie values.

Token structure:
    base64url(nonce || ciphertext || tag), padding stripped

The alphabet is A-Z a-z 0-9 - _ which contains nothing forbidden in a
cookie value.
"""

import base64
import binascii
import re

from .crypto_errors import MalformedEncodingError


_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_-]*")


def encode(nonce: bytes, ciphertext: bytes) -> str:
    """
    Concatenate nonce and ciphertext and encode them as a token.

    Args:
        nonce: AEAD nonce
        ciphertext: AEAD output including the tag

    Returns:
        URL-safe base64 string without padding
    """
    raw = bytes(nonce) + bytes(ciphertext)
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode(token: str) -> bytes:
    """
    Decode a token back into raw bytes.

    Only the exact unpadded form produced by encode() is accepted: padding
    and non-zero unused trailing bits are rejected, so every token has a
    single spelling. Splitting into nonce and ciphertext is left to the
    caller, which knows the nonce size.

    Raises:
        MalformedEncodingError: If the token is not canonical URL-safe base64
    """
    if isinstance(token, (bytes, bytearray)):
        try:
            token = bytes(token).decode("ascii")
        except UnicodeDecodeError:
            raise MalformedEncodingError("Token contains non-ASCII bytes") from None
    if not isinstance(token, str):
        raise MalformedEncodingError(f"Token must be str, got {type(token).__name__}")

    if _TOKEN_PATTERN.fullmatch(token) is None:
        raise MalformedEncodingError("Token contains characters outside the alphabet")

    if len(token) % 4 == 1:
        raise MalformedEncodingError(f"Impossible token length: {len(token)}")

    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded)
    except (binascii.Error, ValueError) as e:
        raise MalformedEncodingError(f"Invalid base64: {e}") from e

    if encode(raw, b"") != token:
        raise MalformedEncodingError("Token is not in canonical form")
    return raw
