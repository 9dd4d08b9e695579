"""MCP server exposing a scrape tool."""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from .config import DEFAULT_PAGE_URL, ViewerConfig
from .crawler import run_scraper
from .models import CycleReport

logger = logging.getLogger("scraping_viewer.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="scraping-viewer")


def format_report(report: CycleReport) -> str:
    """Render a cycle report as a Markdown list of images and failures."""
    lines = [
        f"# Images from {report.page_url}",
        "",
        f"{len(report.fetch.results)} of {report.link_count} images loaded "
        f"in {report.total_seconds:.2f}s.",
        "",
    ]
    for result in report.fetch.results:
        lines.append(f"- {result.url} ({result.width}x{result.height} {result.format})")
    if report.fetch.failures:
        lines.extend(["", "## Failed", ""])
        for failure in report.fetch.failures:
            lines.append(f"- {failure.url}: {failure.error}")
    return "\n".join(lines) + "\n"


@mcp.tool()
async def scrape(url: str = DEFAULT_PAGE_URL) -> str:
    """Scrape the wallpaper page and report every image that decoded."""
    report = await run_scraper(ViewerConfig(page_url=url))
    return format_report(report)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
