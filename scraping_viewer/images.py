"""Image downloading and decoding on isolated worker threads."""

from __future__ import annotations

import asyncio
import io
import itertools
import logging
import threading
from typing import Any, BinaryIO, Callable, Dict, Optional, Sequence
from urllib.parse import urlsplit

import requests
from PIL import Image

from .errors import DecodeError, FetchError, ScrapingError
from .models import AssetFailure, AssetResult, FetchReport

logger = logging.getLogger("scraping_viewer")

CHUNK_SIZE = 64 * 1024
DISPLAY_MODES = {"RGB", "RGBA", "L"}

AssetFetcher = Callable[[str, float], AssetResult]

_worker_ids = itertools.count(1)


def select_decoder(url: str) -> str:
    """Pick the Pillow format for a URL: ``.jpg`` paths are JPEG, all else PNG."""
    path = urlsplit(url).path
    return "JPEG" if path.lower().endswith(".jpg") else "PNG"


def decode_image(stream: BinaryIO, url: str, decoder: str) -> AssetResult:
    """Decode the first frame of ``stream`` into an immutable pixel buffer."""
    try:
        with Image.open(stream, formats=[decoder]) as image:
            image.seek(0)
            image.load()
            frame = image if image.mode in DISPLAY_MODES else image.convert("RGBA")
            return AssetResult(
                url=url,
                format=decoder,
                width=frame.width,
                height=frame.height,
                mode=frame.mode,
                pixels=frame.tobytes(),
            )
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Could not decode {url} as {decoder}: {exc}", url=url) from exc


def fetch_and_decode(
    url: str,
    timeout: float,
    session_factory: Callable[[], requests.Session] = requests.Session,
) -> AssetResult:
    """Download one image with a streaming GET and decode it.

    The session is created and closed here so nothing outlives the calling
    worker thread.
    """
    decoder = select_decoder(url)
    buffer = io.BytesIO()
    with session_factory() as session:
        try:
            with session.get(url, stream=True, timeout=timeout) as response:
                response.raise_for_status()
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    buffer.write(chunk)
        except requests.RequestException as exc:
            raise FetchError(f"Failed to fetch image {url}: {exc}", url=url) from exc
    logger.debug("Downloaded %d bytes from %s", buffer.tell(), url)
    buffer.seek(0)
    return decode_image(buffer, url, decoder)


def run_isolated(
    func: Callable[..., Any],
    *args,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    name: Optional[str] = None,
) -> asyncio.Future:
    """Run ``func`` on its own short-lived thread and return a loop future.

    Each call gets a dedicated daemon thread that exits as soon as the result
    has been handed back to the loop. Results for futures cancelled in the
    meantime are discarded.
    """
    loop = loop or asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()

    def _deliver(value, error: Optional[BaseException]) -> None:
        if future.cancelled():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(value)

    def _worker() -> None:
        value, error = None, None
        try:
            value = func(*args)
        except Exception as exc:  # pylint: disable=broad-except
            error = exc
        try:
            loop.call_soon_threadsafe(_deliver, value, error)
        except RuntimeError:
            logger.debug("Event loop closed before %s finished", thread.name)

    thread = threading.Thread(
        target=_worker,
        name=name or f"asset-worker-{next(_worker_ids)}",
        daemon=True,
    )
    thread.start()
    return future


async def fetch_assets(
    urls: Sequence[str],
    *,
    timeout: float,
    on_result: Optional[Callable[[AssetResult], None]] = None,
    isolate_failures: bool = True,
    fetch_asset: AssetFetcher = fetch_and_decode,
) -> FetchReport:
    """Fetch and decode every URL concurrently, one worker thread each.

    Workers are launched in the order given and ``on_result`` runs on the event
    loop as each one completes. With ``isolate_failures`` a failing URL is
    recorded in the report while its siblings carry on, whatever it raised;
    without it the first failure propagates and the remaining work is
    cancelled.
    """
    report = FetchReport()
    if not urls:
        return report

    loop = asyncio.get_running_loop()
    pending: Dict[asyncio.Future, str] = {}
    for url in urls:
        future = run_isolated(fetch_asset, url, timeout, loop=loop)
        pending[future] = url
    logger.info("Fetching %d images", len(pending))

    try:
        while pending:
            done, _ = await asyncio.wait(set(pending), return_when=asyncio.FIRST_COMPLETED)
            for future in done:
                url = pending.pop(future)
                try:
                    result = future.result()
                except ScrapingError as exc:
                    if not isolate_failures:
                        raise
                    logger.warning("Failed to load image %s: %s", url, exc)
                    report.failures.append(AssetFailure(url=url, error=exc))
                    continue
                except Exception as exc:  # pylint: disable=broad-except
                    if not isolate_failures:
                        raise
                    logger.exception("Unexpected error loading image %s", url)
                    report.failures.append(AssetFailure(url=url, error=exc))
                    continue
                report.results.append(result)
                if on_result is not None:
                    on_result(result)
    finally:
        for future in pending:
            future.cancel()
    return report
