"""Scrape a wallpaper page, fetch its images concurrently and reveal them."""

from .config import DEFAULT_PAGE_URL, ViewerConfig
from .errors import DecodeError, FetchError, ParseError, ScrapingError
from .models import AssetFailure, AssetResult, CycleReport, ExtractedLink, FetchReport
from .viewer import ScrapingViewer

__all__ = [
    "AssetFailure",
    "AssetResult",
    "CycleReport",
    "DEFAULT_PAGE_URL",
    "DecodeError",
    "ExtractedLink",
    "FetchError",
    "FetchReport",
    "ParseError",
    "ScrapingError",
    "ScrapingViewer",
    "ViewerConfig",
]
