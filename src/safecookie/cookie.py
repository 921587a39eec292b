# file: safecookie/cookie.py
"""
Cookie record consumed and produced by the binding protocol.

Conversions to and from http.cookies.Morsel let a host framework hand its
own cookie objects in and out.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from http.cookies import Morsel
from typing import Optional


SAME_SITE_VALUES = ("Strict", "Lax", "None")


def normalize_same_site(value: Optional[str]) -> Optional[str]:
    """
    Map a SameSite attribute to its canonical capitalisation.

    Raises:
        ValueError: If `value` is not Strict, Lax or None in any case
    """
    if value is None or value == "":
        return None
    for canonical in SAME_SITE_VALUES:
        if isinstance(value, str) and value.lower() == canonical.lower():
            return canonical
    raise ValueError(f"same_site must be one of {SAME_SITE_VALUES}, got {value!r}")


@dataclass(frozen=True)
class Cookie:
    """
    A cookie and its attributes.

    Every field except `value` is bound into the associated data when
    sealing in full-attribute mode.
    """

    name: str
    value: str = ""
    domain: Optional[str] = None
    path: Optional[str] = None
    expires: Optional[datetime] = None
    max_age: Optional[int] = None
    secure: bool = False
    http_only: bool = False
    same_site: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise TypeError(f"Cookie name must be str, got {type(self.name).__name__}")
        if self.same_site is not None and self.same_site not in SAME_SITE_VALUES:
            raise ValueError(
                f"same_site must be one of {SAME_SITE_VALUES}, got {self.same_site!r}"
            )
        if self.max_age is not None and (
            isinstance(self.max_age, bool) or not isinstance(self.max_age, int)
        ):
            raise TypeError(f"max_age must be int, got {type(self.max_age).__name__}")
        if self.expires is not None:
            # Naive datetimes are taken as UTC
            if self.expires.tzinfo is None:
                expires = self.expires.replace(tzinfo=timezone.utc)
            else:
                expires = self.expires.astimezone(timezone.utc)
            object.__setattr__(self, "expires", expires.replace(microsecond=0))

    def with_value(self, value: str) -> "Cookie":
        """Return a copy with `value` replaced."""
        return replace(self, value=value)

    @classmethod
    def from_morsel(cls, morsel: Morsel) -> "Cookie":
        """
        Build a Cookie from an http.cookies.Morsel.

        Raises:
            ValueError: If `expires` is relative (int) or unparseable, or
                        SameSite is unknown
        """
        expires = morsel["expires"]
        if isinstance(expires, int):
            raise ValueError("Relative expires is not supported, use max-age")
        if isinstance(expires, str) and expires:
            try:
                expires = parsedate_to_datetime(expires)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Unparseable expires: {expires!r}") from e
        elif not isinstance(expires, datetime):
            expires = None

        max_age = morsel["max-age"]
        if max_age == "":
            max_age = None
        elif max_age is not None:
            max_age = int(max_age)

        return cls(
            name=morsel.key,
            value=morsel.value,
            domain=morsel["domain"] or None,
            path=morsel["path"] or None,
            expires=expires,
            max_age=max_age,
            secure=bool(morsel["secure"]),
            http_only=bool(morsel["httponly"]),
            same_site=normalize_same_site(morsel["samesite"]),
        )

    def to_morsel(self) -> Morsel:
        """Convert to an http.cookies.Morsel."""
        morsel = Morsel()
        morsel.set(self.name, self.value, self.value)
        if self.domain is not None:
            morsel["domain"] = self.domain
        if self.path is not None:
            morsel["path"] = self.path
        if self.expires is not None:
            morsel["expires"] = format_datetime(self.expires, usegmt=True)
        if self.max_age is not None:
            morsel["max-age"] = self.max_age
        if self.secure:
            morsel["secure"] = True
        if self.http_only:
            morsel["httponly"] = True
        if self.same_site is not None:
            morsel["samesite"] = self.same_site
        return morsel

    def to_header(self) -> str:
        """Render the Set-Cookie header value."""
        return self.to_morsel().OutputString()
