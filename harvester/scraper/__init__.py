"""Scraper package — fetch, link extraction, sanitizing and download."""

from harvester.scraper.downloader import download_pdf
from harvester.scraper.extractor import extract_pdf_links, remove_duplicates
from harvester.scraper.fetcher import build_client, fetch_binary, fetch_text
from harvester.scraper.models import Payload, RunSummary
from harvester.scraper.sanitizer import sanitize_filename

__all__ = [
    "build_client",
    "fetch_text",
    "fetch_binary",
    "extract_pdf_links",
    "remove_duplicates",
    "sanitize_filename",
    "download_pdf",
    "Payload",
    "RunSummary",
]
