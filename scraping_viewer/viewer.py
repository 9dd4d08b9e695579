"""View model tying the scraper to an observable image collection."""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from .collection import ObservableCollection, Signal
from .config import ViewerConfig
from .crawler import PageFetcher, fetch_page, run_scraper
from .images import AssetFetcher, fetch_and_decode
from .models import AssetResult, CycleReport

logger = logging.getLogger("scraping_viewer")


class ScrapingViewer:
    """Load wallpapers into ``images`` behind a guarded ``start`` trigger.

    ``is_ready`` is false while a cycle runs and ``ready_changed`` fires on
    every transition so a UI can disable its trigger.
    """

    def __init__(
        self,
        config: Optional[ViewerConfig] = None,
        *,
        page_fetcher: PageFetcher = fetch_page,
        fetch_asset: AssetFetcher = fetch_and_decode,
    ) -> None:
        self.config = config or ViewerConfig()
        self.images: ObservableCollection[AssetResult] = ObservableCollection()
        self.ready_changed: Signal[bool] = Signal()
        self._page_fetcher = page_fetcher
        self._fetch_asset = fetch_asset
        self._is_ready = True
        self._task: Optional[asyncio.Task] = None

    @property
    def is_ready(self) -> bool:
        return self._is_ready

    @is_ready.setter
    def is_ready(self, value: bool) -> None:
        if value != self._is_ready:
            self._is_ready = value
            self.ready_changed.emit(value)

    @property
    def busy(self) -> bool:
        return not self._is_ready or (self._task is not None and not self._task.done())

    @contextmanager
    def _busy(self) -> Iterator[None]:
        if not self._is_ready:
            raise RuntimeError("A load cycle is already running")
        self.is_ready = False
        try:
            yield
        finally:
            self.is_ready = True

    def start(self) -> Optional[asyncio.Task]:
        """Schedule a load cycle, or return ``None`` if one is in progress."""
        if self.busy:
            logger.info("Load already in progress; ignoring start request")
            return None
        self._task = asyncio.get_running_loop().create_task(self.load())
        self._task.add_done_callback(self._on_cycle_done)
        return self._task

    async def load(self) -> CycleReport:
        """Run one full cycle, appending each decoded image as it arrives."""
        with self._busy():
            self.images.reset()
            return await run_scraper(
                self.config,
                on_result=self.images.append,
                page_fetcher=self._page_fetcher,
                fetch_asset=self._fetch_asset,
            )

    def cancel(self) -> bool:
        """Cancel the cycle started by ``start``; in-flight downloads are dropped."""
        if self._task is None or self._task.done():
            return False
        return self._task.cancel()

    @staticmethod
    def _on_cycle_done(task: asyncio.Task) -> None:
        if task.cancelled():
            logger.info("Load cycle cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error("Load cycle failed: %s", error, exc_info=error)
