"""Configuration objects and constants for the viewer."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PAGE_URL = "http://pronama.azurewebsites.net/pronama/wallpaper/"
DEFAULT_ITEM_INTERVAL = 0.2
DEFAULT_ANIMATION_DURATION = 1.0


@dataclass
class ViewerConfig:
    """Settings that control fetching and the reveal animation."""

    page_url: str = DEFAULT_PAGE_URL
    request_timeout: float = 15.0
    item_interval: float = DEFAULT_ITEM_INTERVAL
    animation_duration: float = DEFAULT_ANIMATION_DURATION
    frame_rate: int = 30
    isolate_failures: bool = True
