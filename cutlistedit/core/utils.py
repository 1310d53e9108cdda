"""Utility functions for CutlistEdit."""

from __future__ import annotations

import unicodedata
from datetime import datetime, timezone


def base_sort_key(text: str) -> tuple[str, str]:
    """Return a key ordering strings alphabetically, ignoring case and accents.

    Strings equal under that comparison (``"Door"``/``"door"``) are ordered
    by their raw text so the result never depends on input order.

    Example:
        >>> sorted(['side', 'Back', 'étagère'], key=base_sort_key)
        ['Back', 'étagère', 'side']
    """
    decomposed = unicodedata.normalize("NFKD", str(text))
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return stripped.casefold(), str(text)


def index_to_letter(index: int) -> str:
    """Return the legend letter for ``index``: A..Z, then AA..AZ, BA..BZ, ..."""
    if index < 26:
        return chr(65 + index)
    prefix = chr(65 + (index - 26) // 26)
    suffix = chr(65 + (index - 26) % 26)
    return prefix + suffix


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(tz=timezone.utc).isoformat()


__all__ = ["base_sort_key", "index_to_letter", "utc_now_iso"]
