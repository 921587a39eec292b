# file: tests/test_canonical.py

"""
Unit tests for context canonicalization.

Test coverage:
    - Every attribute except value changes the associated data
    - Length prefixing keeps adjacent fields unambiguous
    - Absent and empty optional fields are distinct
    - Name-only binding
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from safecookie.canonical import (
    VERSION,
    BindingMode,
    canonicalize,
    canonicalize_full,
    canonicalize_name,
)
from safecookie.cookie import Cookie


BASE = Cookie(
    name="wingle",
    value="ignored",
    domain="example.com",
    path="/",
    expires=datetime(2030, 1, 1, tzinfo=timezone.utc),
    max_age=3600,
    secure=True,
    http_only=True,
    same_site="Strict",
)


class TestFullCanonicalization:
    """Test full-attribute associated data."""

    def test_deterministic(self):
        assert canonicalize_full(BASE) == canonicalize_full(replace(BASE))

    def test_starts_with_version(self):
        assert canonicalize_full(BASE)[0] == VERSION

    def test_value_is_excluded(self):
        assert canonicalize_full(BASE) == canonicalize_full(BASE.with_value("other"))

    @pytest.mark.parametrize("changes", [
        {"name": "wongle"},
        {"domain": "evil.example.com"},
        {"domain": None},
        {"path": "/admin"},
        {"path": None},
        {"expires": datetime(2030, 1, 2, tzinfo=timezone.utc)},
        {"expires": None},
        {"max_age": 60},
        {"max_age": None},
        {"secure": False},
        {"http_only": False},
        {"same_site": "Lax"},
        {"same_site": None},
    ])
    def test_every_attribute_is_bound(self, changes):
        assert canonicalize_full(BASE) != canonicalize_full(replace(BASE, **changes))

    def test_field_boundaries_are_unambiguous(self):
        a = Cookie(name="a", domain="bc")
        b = Cookie(name="ab", domain="c")
        assert canonicalize_full(a) != canonicalize_full(b)

    def test_separator_characters_cannot_shift_fields(self):
        a = Cookie(name="x", domain="; Path=/", path=None)
        b = Cookie(name="x", domain="", path="/")
        assert canonicalize_full(a) != canonicalize_full(b)

    def test_absent_differs_from_empty(self):
        assert canonicalize_full(Cookie(name="x", path=None)) != \
            canonicalize_full(Cookie(name="x", path=""))

    def test_same_instant_in_other_timezone(self):
        other = BASE.expires.astimezone(timezone(timedelta(hours=5)))
        assert canonicalize_full(BASE) == canonicalize_full(replace(BASE, expires=other))


class TestNameCanonicalization:
    """Test name-only associated data."""

    def test_name_bytes(self):
        assert canonicalize_name(BASE) == b"wingle"

    def test_accepts_bare_name(self):
        assert canonicalize_name("wingle") == b"wingle"

    def test_ignores_other_attributes(self):
        assert canonicalize_name(BASE) == canonicalize_name(replace(BASE, path="/x"))

    def test_rejects_non_string(self):
        with pytest.raises(TypeError):
            canonicalize_name(42)


class TestDispatch:
    """Test canonicalize() mode selection."""

    def test_full_is_default(self):
        assert canonicalize(BASE) == canonicalize_full(BASE)

    def test_mode_from_string(self):
        assert canonicalize(BASE, "name") == b"wingle"
        assert canonicalize(BASE, BindingMode.NAME) == b"wingle"

    def test_full_rejects_bare_name(self):
        with pytest.raises(TypeError, match="needs a Cookie"):
            canonicalize("wingle", BindingMode.FULL)

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            canonicalize(BASE, "everything")
