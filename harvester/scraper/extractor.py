"""Link extraction: find document links in a listing page."""

from __future__ import annotations

import logging
from typing import Iterable, List

from bs4 import BeautifulSoup, ParserRejectedMarkup

from harvester.errors import ParseError

logger = logging.getLogger(__name__)

PDF_MARKER = ".pdf"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _parse(html: str) -> BeautifulSoup:
    """Parse *html* with the stdlib-backed ``html.parser`` tree builder.

    Raises:
        ParseError: If the parser rejects the markup outright.
    """
    try:
        return BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ParseError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_pdf_links(html: str) -> List[str]:
    """Return every ``<a href>`` in *html* that mentions ``.pdf``.

    The match is a case-insensitive substring test, so
    ``/docs/sheet.PDF?x=1`` qualifies.  Hrefs are whitespace-trimmed and kept
    in document order, duplicates included.  Markup the parser rejects yields
    an empty list and a warning instead of an exception.
    """
    try:
        soup = _parse(html)
    except ParseError as exc:
        logger.warning("Error parsing HTML, no links extracted: %s", exc)
        return []

    links: List[str] = []
    # find_all walks the tree depth-first in document order.
    for anchor in soup.find_all("a", href=True):
        href = str(anchor["href"]).strip()
        if PDF_MARKER in href.lower():
            links.append(href)

    logger.info("Extracted %d PDF links from HTML", len(links))
    return links


def remove_duplicates(links: Iterable[str]) -> List[str]:
    """Drop repeated hrefs (exact string match), keeping first-seen order."""
    return list(dict.fromkeys(links))
