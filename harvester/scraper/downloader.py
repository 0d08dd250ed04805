"""Idempotent document download into a local directory.

``download_pdf`` is a chain of gates.  Each one logs and returns ``False`` on
failure; only a response that passes them all touches the disk.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from harvester.errors import ContentTypeError, EmptyBodyError, FilesystemError
from harvester.scraper.fetcher import fetch_binary
from harvester.scraper.models import Payload
from harvester.scraper.sanitizer import sanitize_filename

logger = logging.getLogger(__name__)

ACCEPTED_CONTENT_TYPES = ("application/pdf", "binary/octet-stream")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _check_payload(payload: Payload) -> None:
    """Validate the content type and body of a fetched document.

    Raises:
        ContentTypeError: If no accepted MIME type appears in the header.
        EmptyBodyError: If the body has zero bytes.
    """
    if not any(accepted in payload.content_type for accepted in ACCEPTED_CONTENT_TYPES):
        raise ContentTypeError(
            f"invalid content type {payload.content_type!r} (expected PDF/binary)"
        )
    if not payload.content:
        raise EmptyBodyError("downloaded 0 bytes")


def _write_file(path: Path, content: bytes) -> None:
    """Write *content* to a new file at *path*.

    A partially written file is removed before the error propagates.

    Raises:
        FilesystemError: If the file cannot be created or written.
    """
    try:
        fh = open(path, "wb")
    except OSError as exc:
        raise FilesystemError(f"cannot create {path}: {exc}") from exc

    try:
        with fh:
            fh.write(content)
    except OSError as exc:
        path.unlink(missing_ok=True)
        raise FilesystemError(f"cannot write {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def download_pdf(url: str, output_dir: str | Path, client: httpx.Client) -> bool:
    """Download *url* into *output_dir* under its sanitized filename.

    Returns ``True`` only when a new file was written.  When a regular file
    with the target name already exists no request is made at all.
    """
    file_path = Path(output_dir) / sanitize_filename(url)

    if file_path.is_file():
        logger.info("File already exists, skipping: %s", file_path)
        return False

    payload = fetch_binary(url, client)
    if payload is None:
        return False

    try:
        _check_payload(payload)
    except (ContentTypeError, EmptyBodyError) as exc:
        logger.warning("Rejected %s: %s", url, exc)
        return False

    try:
        _write_file(file_path, payload.content)
    except FilesystemError as exc:
        logger.error("Failed to save %s: %s", url, exc)
        return False

    logger.info("Successfully downloaded %d bytes: %s", len(payload.content), file_path)
    return True
