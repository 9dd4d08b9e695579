"""Helpers for attribute lookup and URL resolution."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin, urlsplit

from bs4 import Tag
from requests.utils import requote_uri

FETCHABLE_SCHEMES = {"http", "https"}


def safe_get_attribute(element: Tag, name: str) -> Optional[str]:
    """Return an attribute value, or ``None`` when the element lacks it."""
    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return value


def resolve_url(base: str, candidate: Optional[str]) -> Optional[str]:
    """Resolve ``candidate`` against ``base`` into an absolute fetchable URL.

    Absolute candidates come back unchanged apart from percent-encoding of
    characters that are illegal in a URL. Anything that does not parse into
    an http(s) URL with a host yields ``None`` instead of raising, so callers
    can skip malformed hrefs silently.
    """
    if candidate is None:
        return None
    candidate = candidate.strip()
    if not candidate:
        return None
    try:
        absolute = urljoin(base, candidate)
        parts = urlsplit(absolute)
        # Accessing .port validates it and raises ValueError when out of range.
        _ = parts.port
    except ValueError:
        return None
    if parts.scheme.lower() not in FETCHABLE_SCHEMES or not parts.hostname:
        return None
    return requote_uri(absolute)
