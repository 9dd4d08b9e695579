"""Data models used throughout the scraping pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import Tag
from PIL import Image


@dataclass(frozen=True)
class ExtractedLink:
    """An image link found on the page, resolved against the page URL."""

    url: str
    href: str
    anchor: Optional[Tag] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class AssetResult:
    """Decoded first frame of an image, frozen so any thread may read it."""

    url: str
    format: str
    width: int
    height: int
    mode: str
    pixels: bytes = field(repr=False)

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def to_image(self) -> Image.Image:
        """Build a fresh Pillow image from the stored pixels."""
        return Image.frombytes(self.mode, self.size, self.pixels)


@dataclass(frozen=True)
class AssetFailure:
    """A URL whose fetch or decode failed without stopping its siblings."""

    url: str
    error: Exception


@dataclass
class FetchReport:
    """Outcome of fetching every asset of one cycle."""

    results: List[AssetResult] = field(default_factory=list)
    failures: List[AssetFailure] = field(default_factory=list)

    @property
    def failed_urls(self) -> List[str]:
        return [failure.url for failure in self.failures]


@dataclass
class CycleReport:
    """Timing and counts for one scrape cycle."""

    page_url: str
    link_count: int
    fetch: FetchReport
    total_seconds: float
