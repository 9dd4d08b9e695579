"""Lenient HTML parsing into a BeautifulSoup document tree."""

from __future__ import annotations

import codecs
import logging
from typing import Union

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction

from .errors import ParseError

logger = logging.getLogger("scraping_viewer")

# UTF-32 marks must be tested before UTF-16 because they share a prefix.
_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)

_DROPPED_NODES = (Doctype, Declaration, Comment, ProcessingInstruction)


def decode_markup(data: Union[bytes, str], url: str | None = None) -> str:
    """Decode page bytes as UTF-8, honouring a byte-order mark when present."""
    if isinstance(data, str):
        return data
    encoding = "utf-8"
    for bom, name in _BOMS:
        if data.startswith(bom):
            encoding = name
            break
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as exc:
        raise ParseError(f"Page body is not valid {encoding}: {exc}", url=url) from exc


def _strip_insignificant_nodes(soup: BeautifulSoup) -> None:
    for node in list(soup.descendants):
        if not isinstance(node, NavigableString):
            continue
        if isinstance(node, _DROPPED_NODES) or not node.strip():
            node.extract()


def parse_document(data: Union[bytes, str], url: str | None = None) -> BeautifulSoup:
    """Parse possibly malformed HTML into a document tree.

    Tag and attribute names are lower-cased by the parser, doctype declarations,
    comments and whitespace-only text are removed. ``class`` stays a plain
    string so it can be compared literally.
    """
    text = decode_markup(data, url=url)
    if not text.strip():
        raise ParseError("Page body is empty", url=url)
    soup = BeautifulSoup(text, "html.parser", multi_valued_attributes=None)
    _strip_insignificant_nodes(soup)
    logger.debug("Parsed %d characters of markup from %s", len(text), url or "<input>")
    return soup
