"""Data models for the harvest pipeline."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Payload:
    """A successful (HTTP 200) binary response."""

    url: str
    content: bytes
    content_type: str
    status_code: int = 200


@dataclass
class RunSummary:
    """Counters for a single pipeline run."""

    pages_fetched: int = 0
    links_found: int = 0
    unique_links: int = 0
    invalid_urls: int = 0
    downloaded: int = 0
    skipped: int = 0

    def as_line(self) -> str:
        return (
            f"pages={self.pages_fetched} links={self.links_found} "
            f"unique={self.unique_links} invalid={self.invalid_urls} "
            f"downloaded={self.downloaded} skipped={self.skipped}"
        )
