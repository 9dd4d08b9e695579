"""Command-line entry point for the scraping viewer."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, Sequence

from .config import DEFAULT_ANIMATION_DURATION, DEFAULT_ITEM_INTERVAL, DEFAULT_PAGE_URL, ViewerConfig
from .errors import ScrapingError
from .models import AssetResult, CycleReport
from .reveal import AnimationPlayer, RevealAnimator
from .viewer import ScrapingViewer

logger = logging.getLogger("scraping_viewer.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scrape the wallpaper page, download every image and reveal them one by one.",
    )
    parser.add_argument(
        "--url",
        default=DEFAULT_PAGE_URL,
        help="Wallpaper page to scrape; also the base for relative links",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=15.0,
        help="Per-request timeout in seconds",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_ITEM_INTERVAL,
        help="Seconds between the start of consecutive reveals in a batch",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=DEFAULT_ANIMATION_DURATION,
        help="Length of each reveal animation in seconds",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Abort the whole download phase when any single image fails",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(list(sys.argv[1:] if argv is None else argv))


def _render(item: AssetResult, values: Dict[str, Any]) -> None:
    logger.debug(
        "%s opacity=%.2f offset=%.1f",
        item.url,
        values.get("opacity", 0.0),
        values.get("offset_x", 0.0),
    )
    if values.get("opacity") == 1.0:
        logger.info("Revealed %s (%dx%d %s)", item.url, item.width, item.height, item.mode)


async def run_viewer(config: ViewerConfig) -> CycleReport:
    """Run one load cycle and wait for every reveal animation to finish."""
    viewer = ScrapingViewer(config)
    player = AnimationPlayer(_render, frame_rate=config.frame_rate)
    animator = RevealAnimator(
        viewer.images,
        player,
        interval=config.item_interval,
        duration=config.animation_duration,
    )
    viewer.ready_changed.connect(lambda ready: logger.debug("Ready: %s", ready))
    try:
        report = await viewer.load()
        # Let the final batch dispatch before waiting on the player.
        await asyncio.sleep(0)
        await player.wait()
    finally:
        animator.close()
    return report


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = ViewerConfig(
        page_url=args.url,
        request_timeout=args.timeout,
        item_interval=args.interval,
        animation_duration=args.duration,
        isolate_failures=not args.fail_fast,
    )
    try:
        report = asyncio.run(run_viewer(config))
    except ScrapingError as exc:
        logger.error("Scrape of %s failed: %s", config.page_url, exc)
        raise SystemExit(1) from exc

    for failure in report.fetch.failures:
        logger.warning("Not shown: %s (%s)", failure.url, failure.error)
    logger.info(
        "Showed %d of %d images in %.2fs",
        len(report.fetch.results),
        report.link_count,
        report.total_seconds,
    )


if __name__ == "__main__":
    main()
