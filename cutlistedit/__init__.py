"""CutlistEdit package root."""

from .core.paths import data_path, data_root, default_store_path

APP_NAME = "CutlistEdit"
__version__ = "0.1.0"

__all__ = [
	"data_path",
	"data_root",
	"default_store_path",
	"APP_NAME",
	"__version__",
]
