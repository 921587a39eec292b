# file: safecookie/testing_utils.py
"""
Testing utilities for safecookie.

Deterministic nonce sources and token corruption helpers.
Used only in test contexts.
"""

import itertools
from typing import Callable

from .envelope import decode, encode


def fixed_nonce_source(nonce: bytes) -> Callable[[int], bytes]:
    """
    Random source that always returns `nonce`.

    WARNING: Reusing a nonce under one key breaks AES-GCM completely.
    This exists ONLY for fixed test vectors.
    """
    def _source(n: int) -> bytes:
        if n != len(nonce):
            raise ValueError(f"Fixed nonce is {len(nonce)} bytes, asked for {n}")
        return nonce

    return _source


def counter_nonce_source(start: int = 0) -> Callable[[int], bytes]:
    """Random source yielding big-endian counters: distinct but predictable."""
    counter = itertools.count(start)

    def _source(n: int) -> bytes:
        return next(counter).to_bytes(n, "big")

    return _source


def failing_random_source(exc: Exception = None) -> Callable[[int], bytes]:
    """Random source that always raises, simulating missing entropy."""
    error = exc if exc is not None else OSError("entropy source unavailable")

    def _source(n: int) -> bytes:
        raise error

    return _source


def flip_token_byte(token: str, index: int, mask: int = 0x01) -> str:
    """
    Flip bits of one decoded byte of `token` and re-encode it.

    Example:
        >>> tampered = flip_token_byte(token, index=-1)
    """
    raw = bytearray(decode(token))
    raw[index] ^= mask
    return encode(bytes(raw), b"")
