"""Harvest pipeline — listing pages in, PDF files out.

``run_pipeline`` performs, strictly in sequence:

    fetch every source page → concatenate → append to the HTML log →
    extract PDF links → ensure output dir → dedupe →
    base URL + link → validate → download

Every step logs its own failures and the run always completes.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit

import httpx

from harvester.config import Settings, settings as default_settings
from harvester.errors import FilesystemError, URLSyntaxError
from harvester.scraper.downloader import download_pdf
from harvester.scraper.extractor import extract_pdf_links, remove_duplicates
from harvester.scraper.fetcher import build_client, fetch_text
from harvester.scraper.models import RunSummary

logger = logging.getLogger(__name__)

HTML_LOG_MODE = 0o644
OUTPUT_DIR_MODE = 0o755

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_WHITESPACE = re.compile(r"\s")
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


# ---------------------------------------------------------------------------
# Filesystem helpers
# ---------------------------------------------------------------------------

def append_html_log(path: str | Path, content: str) -> None:
    """Append *content* plus a newline to *path*, creating it if needed.

    Earlier runs are never truncated.  Failures are logged, not raised.
    """
    try:
        _append(Path(path), content + "\n")
    except FilesystemError as exc:
        logger.error("Error saving HTML content: %s", exc)


def _append(path: Path, text: str) -> None:
    """Append *text* to *path*, creating it with mode 0644.

    Raises:
        FilesystemError: If the file cannot be opened or written.
    """
    try:
        fd = os.open(path, os.O_APPEND | os.O_CREAT | os.O_WRONLY, HTML_LOG_MODE)
    except OSError as exc:
        raise FilesystemError(f"cannot open {path}: {exc}") from exc

    # Buffered errors (ENOSPC, EIO) surface on flush when the block closes.
    try:
        with os.fdopen(fd, "a", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as exc:
        raise FilesystemError(f"cannot write {path}: {exc}") from exc


def ensure_output_dir(path: str | Path) -> bool:
    """Create the output directory (mode 0755) if it does not exist.

    Returns ``True`` when the directory is usable.
    """
    out_dir = Path(path)
    if out_dir.is_dir():
        return True
    try:
        out_dir.mkdir(mode=OUTPUT_DIR_MODE, parents=True)
    except OSError as exc:
        logger.error("Error creating directory %s: %s", out_dir, exc)
        return False
    logger.info("Created output directory %s", out_dir)
    return True


# ---------------------------------------------------------------------------
# URL helpers
# ---------------------------------------------------------------------------

def build_url(base_url: str, link: str) -> str:
    """Join *base_url* and *link* verbatim; no relative-URL resolution."""
    return base_url + link


def _check_url(url: str) -> None:
    """Validate *url* as a request URI.

    Accepts an absolute URI with a scheme, or an absolute path.

    Raises:
        URLSyntaxError: With the reason the URL was refused.
    """
    if not url:
        raise URLSyntaxError("empty URL")
    if _CONTROL_CHARS.search(url):
        raise URLSyntaxError("control character")
    # Escapes are only checked in the path; the query is left as-is.
    if _BAD_PERCENT_ESCAPE.search(url.split("?", 1)[0]):
        raise URLSyntaxError("malformed percent escape in path")

    try:
        parts = urlsplit(url)
        parts.port  # noqa: B018  raises ValueError on a bad port
    except ValueError as exc:
        raise URLSyntaxError(str(exc)) from exc

    if _WHITESPACE.search(parts.netloc):
        raise URLSyntaxError("whitespace in host")

    if parts.scheme:
        return
    if url.startswith("/"):
        return
    raise URLSyntaxError("not an absolute URI or absolute path")


def is_valid_url(url: str) -> bool:
    """Return ``True`` if *url* is a syntactically well-formed request URI."""
    try:
        _check_url(url)
    except URLSyntaxError as exc:
        logger.debug("Skipping invalid URL %r: %s", url, exc)
        return False
    return True


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------

def _run(cfg: Settings, client: httpx.Client) -> RunSummary:
    summary = RunSummary()

    pages = []
    for source_url in cfg.source_urls:
        page = fetch_text(source_url, client)
        if page:
            summary.pages_fetched += 1
        pages.append(page)
    combined_html = "".join(pages)

    append_html_log(cfg.html_log_path, combined_html)

    links = extract_pdf_links(combined_html)
    summary.links_found = len(links)

    ensure_output_dir(cfg.output_dir)

    unique_links = remove_duplicates(links)
    summary.unique_links = len(unique_links)

    for link in unique_links:
        full_url = build_url(cfg.base_url, link)
        if not is_valid_url(full_url):
            summary.invalid_urls += 1
            continue
        if download_pdf(full_url, cfg.output_dir, client):
            summary.downloaded += 1
        else:
            summary.skipped += 1

    return summary


def run_pipeline(
    cfg: Optional[Settings] = None,
    client: Optional[httpx.Client] = None,
) -> RunSummary:
    """Run the whole harvest once and return its :class:`RunSummary`.

    Args:
        cfg: Configuration to use; defaults to the module-level settings.
        client: Shared HTTP client.  When omitted one is built from *cfg*
            and closed before returning; a caller-supplied client is left open.
    """
    cfg = cfg or default_settings

    if client is not None:
        summary = _run(cfg, client)
    else:
        with build_client(cfg.request_timeout, verify_tls=not cfg.insecure_tls) as owned:
            summary = _run(cfg, owned)

    logger.info("Harvest finished: %s", summary.as_line())
    return summary
