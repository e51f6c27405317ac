"""Page range parsing helpers for :mod:`pdfassembly`.

Ranges are typed by the user as ``""`` (all pages), ``"7"``, ``"3-9"``,
``"5+"`` (page 5 to the end) or a comma-joined list of those terms. The
normalized form is the page-selection syntax understood by qpdf and pdftk,
where ``z`` stands for the last page.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Callable, MutableMapping

LOGGER = logging.getLogger("pdfassembly.ranges")

END_MARKER = "z"
WHOLE_DOCUMENT = f"1-{END_MARKER}"

_TERM_PATTERN = re.compile(r"^\s*\d+\s*(?:-\s*\d+|\+)?\s*$", re.ASCII)
_WHITESPACE = re.compile(r"\s+")

PageCountQuery = Callable[[Path], int]


def validate(raw: str | None) -> bool:
    """Return ``True`` when *raw* is an acceptable page range.

    An empty (or blank) field is valid and selects the whole document. Empty
    terms inside a list, such as ``"1,,3"``, are rejected.
    """

    if raw is None:
        return False
    if not raw.strip():
        return True
    return all(_TERM_PATTERN.match(term) for term in raw.split(","))


def normalize(raw: str) -> str:
    """Return the canonical tool syntax for *raw*.

    Whitespace is removed, ``N+`` becomes ``N-z`` and an empty range becomes
    ``1-z``. The function is idempotent. *raw* is assumed to be valid.
    """

    text = _WHITESPACE.sub("", raw or "")
    if not text:
        return WHOLE_DOCUMENT
    return text.replace("+", f"-{END_MARKER}")


def is_whole_document(normalized: str) -> bool:
    return normalized == WHOLE_DOCUMENT


def page_count(
    normalized: str,
    file: Path,
    cache: MutableMapping[Path, int],
    query: PageCountQuery,
) -> int:
    """Return the number of pages selected by *normalized* in *file*.

    Open-ended terms (``N-z``) need the document length, which is obtained
    through *query* once per file and memoized in *cache*. The cache belongs
    to the caller and lives for one compilation.
    """

    total = 0
    for term in normalized.split(","):
        start, separator, end = term.partition("-")
        if not separator:
            total += 1
            continue
        if end == END_MARKER:
            if file not in cache:
                cache[file] = query(file)
                LOGGER.debug("Resolved page count of %s: %s", file, cache[file])
            last = cache[file]
        else:
            last = int(end)
        total += abs(last - int(start)) + 1
    return total


def mapped_range(start: int, count: int) -> str:
    """Render the block of *count* pages beginning at *start*."""

    if count < 1:
        raise ValueError("A mapped range must contain at least one page")
    if count == 1:
        return str(start)
    return f"{start}-{start + count - 1}"


__all__ = [
    "END_MARKER",
    "WHOLE_DOCUMENT",
    "PageCountQuery",
    "validate",
    "normalize",
    "is_whole_document",
    "page_count",
    "mapped_range",
]
