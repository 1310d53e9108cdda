"""Public exports for CutlistEdit data models."""

from .group import ApiCutlistGroup, DatabaseCutlistGroup
from .part import BandEdges, CompactPart, CustomLaminationConfig, CutlistPart, LaminationLayer
from .placement import Placement, SheetLayout
from .saved import (
    BoardMaterial,
    CutlistFolder,
    EdgingMaterial,
    SavedCutlistData,
    SavedCutlistProject,
)

__all__ = [
    "ApiCutlistGroup",
    "BandEdges",
    "BoardMaterial",
    "CompactPart",
    "CustomLaminationConfig",
    "CutlistFolder",
    "CutlistPart",
    "DatabaseCutlistGroup",
    "EdgingMaterial",
    "LaminationLayer",
    "Placement",
    "SavedCutlistData",
    "SavedCutlistProject",
    "SheetLayout",
]
