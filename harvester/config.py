"""Centralised settings for the PDF harvester.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_SOURCE_URL = (
    "https://msdspds.bp.com/msdspds/msdspds.nsf/BPResults?OpenForm&c=All&l=All"
    "&p=&n=&b=All&t=All&autosearch=No&autoload=No&sitelang=EN&output=Full"
    "&spu=Lubricants&unrestrictedmb=No&cols=0"
)

_TRUTHY = {"1", "true", "yes", "on"}


def _env_list(name: str, default: str) -> List[str]:
    """Split a comma separated environment variable into a list of URLs."""
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in _TRUTHY


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------
    source_urls: List[str] = field(
        default_factory=lambda: _env_list("HARVEST_SOURCE_URLS", DEFAULT_SOURCE_URL)
    )
    base_url: str = field(
        default_factory=lambda: os.environ.get("HARVEST_BASE_URL", "https://msdspds.bp.com")
    )

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    output_dir: Path = field(
        default_factory=lambda: Path(os.environ.get("HARVEST_OUTPUT_DIR", "PDFs"))
    )
    html_log_path: Path = field(
        default_factory=lambda: Path(os.environ.get("HARVEST_HTML_LOG", "bp.html"))
    )

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    # Skipping certificate checks is only for hosts with broken chains.
    insecure_tls: bool = field(
        default_factory=lambda: _env_flag("HARVEST_INSECURE")
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton, import this everywhere:
#   from harvester.config import settings
settings = Settings()
