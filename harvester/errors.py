"""Error taxonomy for the harvest pipeline.

Every error is handled at the component boundary where it occurs: it is
logged with its context and turned into "skip this item".  None of them is
allowed to abort a run.
"""

from __future__ import annotations


class HarvestError(Exception):
    """Base class for all harvester failures."""


class NetworkError(HarvestError):
    """Connection, DNS or timeout failure."""


class HTTPStatusError(HarvestError):
    """The server answered with a status other than 200."""

    def __init__(self, url: str, status_code: int, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"{url}: status {status_code} {reason}".rstrip())


class ContentTypeError(HarvestError):
    """The response MIME type is not an accepted document type."""


class EmptyBodyError(HarvestError):
    """The response body had zero bytes."""


class FilesystemError(HarvestError):
    """A directory or file could not be created or written."""


class ParseError(HarvestError):
    """HTML input could not be parsed."""


class URLSyntaxError(HarvestError):
    """A constructed URL is not a well-formed request URI."""
