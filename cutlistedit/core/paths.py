"""Resolve where CutlistEdit keeps its local data."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Union

Pathish = Union[str, "Path"]

HOME_ENV_VAR = "CUTLISTEDIT_HOME"
STORE_FILENAME = "saved_cutlists.json"


def data_root() -> Path:
    """Return the data directory, honoring ``CUTLISTEDIT_HOME`` when set."""
    override = os.environ.get(HOME_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".cutlistedit"


def data_path(*relative_parts: Pathish) -> Path:
    """
    Build a path inside the data directory.

    Parameters
    ----------
    relative_parts:
        Path components relative to :func:`data_root`.
    """
    root = data_root()
    parts: Iterable[Pathish] = relative_parts or ()
    for part in parts:
        root = root / part
    return root


def default_store_path() -> Path:
    return data_path(STORE_FILENAME)
