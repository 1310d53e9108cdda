"""Core helpers for CutlistEdit."""

from .logging_config import default_log_path, setup_logging
from .paths import (
    data_path,
    data_root,
    default_store_path,
)
from .utils import base_sort_key, index_to_letter, utc_now_iso

__all__ = [
    "base_sort_key",
    "data_path",
    "data_root",
    "default_log_path",
    "default_store_path",
    "index_to_letter",
    "setup_logging",
    "utc_now_iso",
]
