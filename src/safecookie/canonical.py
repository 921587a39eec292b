# file: safecookie/canonical.py
"""
Canonicalization of cookie context into associated data.

Full-attribute structure:
    [version:1]
    [len:4][name]
    [present:1][len:4][domain]
    [present:1][len:4][path]
    [present:1][len:4][expires, UTC epoch seconds, ASCII]
    [present:1][len:4][max_age, ASCII]
    [secure:1][http_only:1]
    [present:1][len:4][same_site]

Every variable-length field is length-prefixed, so field contents can
never be confused with structure.

Name-only structure:
    UTF-8 bytes of the cookie name
"""

import struct
from enum import Enum
from typing import Optional, Union

from .cookie import Cookie


VERSION = 0x01

_ABSENT = b"\x00"
_PRESENT = b"\x01"


class BindingMode(str, Enum):
    """Which part of the cookie is bound into the associated data."""

    FULL = "full"
    NAME = "name"


def _field(data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + data


def _optional(value: Optional[str]) -> bytes:
    if value is None:
        return _ABSENT + _field(b"")
    return _PRESENT + _field(value.encode("utf-8"))


def _flag(value: bool) -> bytes:
    return _PRESENT if value else _ABSENT


def canonicalize_full(cookie: Cookie) -> bytes:
    """
    Serialize every attribute of `cookie` except its value.

    Args:
        cookie: Cookie snapshot

    Returns:
        Canonical associated data
    """
    expires = None
    if cookie.expires is not None:
        expires = str(int(cookie.expires.timestamp()))
    max_age = None if cookie.max_age is None else str(cookie.max_age)

    return b"".join([
        bytes([VERSION]),
        _field(cookie.name.encode("utf-8")),
        _optional(cookie.domain),
        _optional(cookie.path),
        _optional(expires),
        _optional(max_age),
        _flag(cookie.secure),
        _flag(cookie.http_only),
        _optional(cookie.same_site),
    ])


def canonicalize_name(context: Union[Cookie, str]) -> bytes:
    """Return the cookie name as UTF-8 bytes."""
    name = context.name if isinstance(context, Cookie) else context
    if not isinstance(name, str):
        raise TypeError(f"Cookie name must be str, got {type(name).__name__}")
    return name.encode("utf-8")


def canonicalize(context: Union[Cookie, str], mode: BindingMode = BindingMode.FULL) -> bytes:
    """
    Compute associated data for `context` under `mode`.

    Raises:
        TypeError: If full-attribute binding is asked for a bare name
    """
    mode = BindingMode(mode)
    if mode is BindingMode.NAME:
        return canonicalize_name(context)
    if not isinstance(context, Cookie):
        raise TypeError(
            f"Full-attribute binding needs a Cookie, got {type(context).__name__}"
        )
    return canonicalize_full(context)
