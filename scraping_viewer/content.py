"""Structural extraction of wallpaper links from a parsed page."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from bs4 import BeautifulSoup, Tag

from .models import ExtractedLink
from .utils import resolve_url, safe_get_attribute

logger = logging.getLogger("scraping_viewer")


def _children(
    elements: Iterable[Tag],
    name: str,
    **attrs: str,
) -> Iterator[Tag]:
    """Yield direct children named ``name`` whose attributes equal ``attrs``."""
    for element in elements:
        for child in element.find_all(name, recursive=False):
            if all(safe_get_attribute(child, key) == value for key, value in attrs.items()):
                yield child


def _has_child(element: Tag, name: str) -> bool:
    return element.find(name, recursive=False) is not None


def iter_image_anchors(document: BeautifulSoup) -> Iterator[Tag]:
    """Yield image anchors in the wallpaper link region that carry an href.

    The path is ``html > body > div.container > div.row > div#hl_links > div >
    a.liimagelink`` where the anchor wraps an ``img``. Branches missing a level
    or an attribute are skipped, so a page without the region yields nothing.
    """
    bodies = _children(_children([document], "html"), "body")
    containers = _children(bodies, "div", **{"class": "container"})
    rows = _children(containers, "div", **{"class": "row"})
    regions = _children(rows, "div", id="hl_links")
    anchors = _children(_children(regions, "div"), "a", **{"class": "liimagelink"})
    for anchor in anchors:
        if not _has_child(anchor, "img"):
            continue
        if safe_get_attribute(anchor, "href") is not None:
            yield anchor


def iter_image_hrefs(document: BeautifulSoup) -> Iterator[str]:
    """Yield the href of every anchor found by ``iter_image_anchors``."""
    for anchor in iter_image_anchors(document):
        yield anchor["href"]


def extract_links(document: BeautifulSoup, base_url: str) -> Iterator[ExtractedLink]:
    """Resolve each extracted href against ``base_url``, dropping bad ones."""
    for anchor in iter_image_anchors(document):
        href = anchor["href"]
        url: Optional[str] = resolve_url(base_url, href)
        if url is None:
            logger.debug("Skipping unresolvable href %r", href)
            continue
        yield ExtractedLink(url=url, href=href, anchor=anchor)
