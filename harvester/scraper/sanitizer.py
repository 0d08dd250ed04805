"""Map an arbitrary document URL to a filesystem-safe ``.pdf`` filename."""

from __future__ import annotations

import re

_UNSAFE_CHARS = re.compile(r"[^a-z0-9.]")
_UNDERSCORE_RUNS = re.compile(r"_+")

# Query strings such as "?OpenElement&pdf" leave "_pdf" behind once the
# punctuation is folded.  This also strips the token from names that contain
# it legitimately ("product_pdfsheet" -> "productsheet").
_UNWANTED_SUBSTRINGS = ("_pdf",)


def sanitize_filename(url: str) -> str:
    """Return a deterministic, safe filename for *url*.

    Only the last path segment survives.  The result contains nothing but
    ``[a-z0-9._]``, never starts or ends with ``_`` and always ends in
    ``.pdf``.  An empty last segment yields the bare name ``.pdf``.

    >>> sanitize_filename("https://msdspds.bp.com/path/MSDS-123_EN.PDF")
    'msds_123_en.pdf'
    """
    name = url.lower().rsplit("/", 1)[-1]

    name = _UNSAFE_CHARS.sub("_", name)
    name = _UNDERSCORE_RUNS.sub("_", name)
    name = name.strip("_")

    for sub in _UNWANTED_SUBSTRINGS:
        name = name.replace(sub, "")

    if not name.endswith(".pdf"):
        name += ".pdf"
    return name
