"""PDF harvester CLI — entry-point for all harvest operations.

Usage:
    python cli/main.py --help

Commands:
    run       → fetch listing pages and download every linked PDF
    links     → list the PDF links found in a local HTML file
    sanitize  → show the local filename a URL would be saved under
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from harvester.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import dataclasses
import logging
from typing import List, Optional

import typer

from harvester.config import settings
from harvester.scraper import extract_pdf_links, remove_duplicates, sanitize_filename

app = typer.Typer(
    name="harvest",
    help="Download the PDF documents linked from HTML listing pages.",
    no_args_is_help=True,
)

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def _configure_logging(verbose: int) -> None:
    """Map the ``-v`` count to a log level; no flag falls back to LOG_LEVEL."""
    if verbose == 0:
        level = logging.getLevelName(settings.log_level)
        if not isinstance(level, int):
            level = logging.INFO
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(level=level, format=_LOG_FORMAT, datefmt="%H:%M:%S")
    logging.getLogger("harvester").setLevel(level)


@app.callback()
def main(
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="-v for INFO, -vv for DEBUG."
    ),
) -> None:
    """PDF harvester command line."""
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# Harvest
# ---------------------------------------------------------------------------
@app.command("run")
def run(
    source_url: Optional[List[str]] = typer.Option(
        None, "--source-url", help="Listing page to scan (repeatable)."
    ),
    base_url: Optional[str] = typer.Option(
        None, help="Prefix joined verbatim with every extracted link."
    ),
    output_dir: Optional[Path] = typer.Option(None, help="Directory for downloaded PDFs."),
    html_log: Optional[Path] = typer.Option(
        None, help="Append-only file receiving the raw HTML of every run."
    ),
    insecure: Optional[bool] = typer.Option(
        None,
        "--insecure/--verify",
        help="Skip TLS certificate verification (only for hosts with broken chains).",
    ),
    timeout: Optional[float] = typer.Option(None, help="Per-request timeout in seconds."),
) -> None:
    """Fetch the listing pages and download every linked PDF."""
    from harvester.pipeline import run_pipeline

    overrides = {
        "source_urls": list(source_url) if source_url else None,
        "base_url": base_url,
        "output_dir": output_dir,
        "html_log_path": html_log,
        "insecure_tls": insecure,
        "request_timeout": timeout,
    }
    cfg = dataclasses.replace(
        settings, **{key: value for key, value in overrides.items() if value is not None}
    )

    typer.echo(f"[run] Scanning {len(cfg.source_urls)} source page(s) …")
    summary = run_pipeline(cfg)

    typer.echo(f"[run] Pages fetched : {summary.pages_fetched}")
    typer.echo(f"[run] PDF links     : {summary.links_found} ({summary.unique_links} unique)")
    typer.echo(f"[run] Invalid URLs  : {summary.invalid_urls}")
    typer.echo(f"[run] Downloaded    : {summary.downloaded}")
    typer.echo(f"[run] Not downloaded: {summary.skipped}")


# ---------------------------------------------------------------------------
# Inspection helpers
# ---------------------------------------------------------------------------
@app.command("links")
def links(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local HTML file."),
) -> None:
    """Print the unique PDF links found in a saved HTML page."""
    html = path.read_text(encoding="utf-8", errors="replace")
    found = remove_duplicates(extract_pdf_links(html))
    if not found:
        typer.echo("[links] No PDF links found.")
        return
    for href in found:
        typer.echo(href)


@app.command("sanitize")
def sanitize(
    url: str = typer.Argument(..., help="Document URL."),
) -> None:
    """Print the filename a document URL would be saved under."""
    typer.echo(sanitize_filename(url))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
