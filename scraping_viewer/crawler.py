"""High-level orchestration for one fetch, extract and download cycle."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional

import requests
from bs4 import BeautifulSoup

from .config import ViewerConfig
from .content import extract_links
from .errors import FetchError
from .images import AssetFetcher, fetch_and_decode, fetch_assets
from .markup import parse_document
from .models import AssetResult, CycleReport

logger = logging.getLogger("scraping_viewer")

PageFetcher = Callable[[str, float], bytes]


def _image_urls(document: BeautifulSoup, base_url: str) -> List[str]:
    urls = []
    for link in extract_links(document, base_url):
        logger.debug("Image link %s -> %s", link.href, link.url)
        urls.append(link.url)
    return urls


def fetch_page(url: str, timeout: float) -> bytes:
    """Download the page body with a streaming GET."""
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            return b"".join(response.iter_content(chunk_size=64 * 1024))
    except requests.RequestException as exc:
        raise FetchError(f"Failed to fetch page {url}: {exc}", url=url) from exc


async def fetch_document(
    url: str,
    timeout: float,
    page_fetcher: PageFetcher = fetch_page,
) -> BeautifulSoup:
    """Fetch a page off the event loop and parse it into a document tree."""
    logger.info("Loading %s", url)
    body = await asyncio.to_thread(page_fetcher, url, timeout)
    return parse_document(body, url=url)


async def run_scraper(
    config: ViewerConfig,
    on_result: Optional[Callable[[AssetResult], None]] = None,
    page_fetcher: PageFetcher = fetch_page,
    fetch_asset: AssetFetcher = fetch_and_decode,
) -> CycleReport:
    """Fetch the page, extract its image links and download every image.

    Page-level fetch and parse errors propagate and abort the cycle before any
    image is requested.
    """
    start = time.perf_counter()
    document = await fetch_document(config.page_url, config.request_timeout, page_fetcher)
    urls = _image_urls(document, config.page_url)
    logger.info("Found %d image links on %s", len(urls), config.page_url)

    report = await fetch_assets(
        urls,
        timeout=config.request_timeout,
        on_result=on_result,
        isolate_failures=config.isolate_failures,
        fetch_asset=fetch_asset,
    )
    elapsed = time.perf_counter() - start
    logger.info(
        "Finished in %.2fs (%d/%d images loaded, %d failed)",
        elapsed,
        len(report.results),
        len(urls),
        len(report.failures),
    )
    return CycleReport(
        page_url=config.page_url,
        link_count=len(urls),
        fetch=report,
        total_seconds=elapsed,
    )
