"""HTTP fetcher built on a single shared ``httpx`` client.

Both public functions swallow transport and status failures after logging
them, so one broken page or document never stops the pipeline.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from harvester.errors import HTTPStatusError, NetworkError, URLSyntaxError
from harvester.scraper.models import Payload

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def build_client(timeout: float = DEFAULT_TIMEOUT, verify_tls: bool = True) -> httpx.Client:
    """Return the client shared by every request of a run.

    ``verify_tls=False`` disables certificate validation for every request the
    client makes.  It exists for hosts with broken certificate chains and must
    be chosen explicitly.
    """
    if not verify_tls:
        logger.warning("TLS certificate verification is DISABLED for this run")
    return httpx.Client(
        timeout=timeout,
        verify=verify_tls,
        follow_redirects=True,
    )


def _get(url: str, client: httpx.Client) -> httpx.Response:
    """GET *url* and insist on a 200 response.

    Raises:
        NetworkError: On connection, DNS, timeout or body read failures.
        URLSyntaxError: If httpx refuses the URL itself (e.g. bad IDNA host).
        HTTPStatusError: If the final status code is not 200.
    """
    try:
        response = client.get(url)
    except httpx.InvalidURL as exc:
        raise URLSyntaxError(f"{url}: {exc}") from exc
    except httpx.HTTPError as exc:
        raise NetworkError(f"{url}: {exc!r}") from exc

    if response.status_code != httpx.codes.OK:
        raise HTTPStatusError(url, response.status_code, response.reason_phrase)
    return response


def fetch_text(url: str, client: httpx.Client) -> str:
    """Fetch *url* and return its body as text, or ``""`` on any failure."""
    logger.info("Fetching HTML from %s", url)
    try:
        response = _get(url, client)
    except (NetworkError, URLSyntaxError) as exc:
        logger.error("Error fetching URL %s: %s", url, exc)
        return ""
    except HTTPStatusError as exc:
        logger.error("Received non-200 status code for %s: %s", url, exc.status_code)
        return ""
    return response.text


def fetch_binary(url: str, client: httpx.Client) -> Optional[Payload]:
    """Fetch *url* and return its raw body with the ``Content-Type`` header.

    Returns ``None`` (after logging) on transport errors or non-200 status.
    """
    try:
        response = _get(url, client)
    except (NetworkError, URLSyntaxError) as exc:
        logger.error("Failed to download %s: %s", url, exc)
        return None
    except HTTPStatusError as exc:
        logger.error(
            "Download failed for %s: status %s %s", url, exc.status_code, exc.reason
        )
        return None

    return Payload(
        url=url,
        content=response.content,
        content_type=response.headers.get("Content-Type", ""),
        status_code=response.status_code,
    )
