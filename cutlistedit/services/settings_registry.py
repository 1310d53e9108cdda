"""User preferences for CutlistEdit, persisted through QSettings."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from PySide6.QtCore import QSettings

from cutlistedit.app.models import SavedCutlistData
from cutlistedit.app.models.saved import (
    DEFAULT_KERF_MM,
    DEFAULT_OPTIMIZATION_PRIORITY,
    OPTIMIZATION_PRIORITIES,
)
from cutlistedit.core.paths import default_store_path

_STORE_PATH_KEY = "Store/path"
_KERF_KEY = "Cutlist/default_kerf_mm"
_PRIORITY_KEY = "Cutlist/optimization_priority"


def _settings(instance: QSettings | None = None) -> QSettings:
    return instance or QSettings("CutlistEdit", "CutlistEdit")


def _normalize_kerf(value: Any) -> float:
    try:
        kerf = float(value)
    except (TypeError, ValueError):
        return DEFAULT_KERF_MM
    if kerf != kerf or kerf < 0:
        return DEFAULT_KERF_MM
    return kerf


def _normalize_priority(value: Any) -> str:
    text = str(value or "").strip().lower()
    return text if text in OPTIMIZATION_PRIORITIES else DEFAULT_OPTIMIZATION_PRIORITY


def load_store_path(settings: QSettings | None = None) -> Path:
    """Return the configured project store file, or the default location."""
    raw = _settings(settings).value(_STORE_PATH_KEY, "")
    text = str(raw or "").strip()
    return Path(text).expanduser() if text else default_store_path()


def save_store_path(path: Path | str, settings: QSettings | None = None) -> Path:
    resolved = Path(path).expanduser()
    _settings(settings).setValue(_STORE_PATH_KEY, str(resolved))
    return resolved


def load_default_kerf(settings: QSettings | None = None) -> float:
    return _normalize_kerf(_settings(settings).value(_KERF_KEY, DEFAULT_KERF_MM))


def save_default_kerf(kerf: Any, settings: QSettings | None = None) -> float:
    """Persist the blade kerf in mm and return its normalized form."""
    normalized = _normalize_kerf(kerf)
    _settings(settings).setValue(_KERF_KEY, normalized)
    return normalized


def load_optimization_priority(settings: QSettings | None = None) -> str:
    return _normalize_priority(
        _settings(settings).value(_PRIORITY_KEY, DEFAULT_OPTIMIZATION_PRIORITY)
    )


def save_optimization_priority(priority: Any, settings: QSettings | None = None) -> str:
    normalized = _normalize_priority(priority)
    _settings(settings).setValue(_PRIORITY_KEY, normalized)
    return normalized


def new_cutlist_data(settings: QSettings | None = None) -> SavedCutlistData:
    """Build empty cutlist state seeded with the user's defaults."""
    store = _settings(settings)
    return SavedCutlistData(
        kerf=load_default_kerf(store),
        optimization_priority=load_optimization_priority(store),
    )


__all__ = [
    "load_default_kerf",
    "load_optimization_priority",
    "load_store_path",
    "new_cutlist_data",
    "save_default_kerf",
    "save_optimization_priority",
    "save_store_path",
]
