"""Exceptions raised by the scraping pipeline."""

from __future__ import annotations

from typing import Optional


class ScrapingError(Exception):
    """Base class for failures while fetching, parsing or decoding."""

    def __init__(self, message: str, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class FetchError(ScrapingError):
    """The page or an asset could not be retrieved."""


class ParseError(ScrapingError):
    """The page body could not be turned into a document tree."""


class DecodeError(ScrapingError):
    """Asset bytes could not be decoded by the selected decoder."""
