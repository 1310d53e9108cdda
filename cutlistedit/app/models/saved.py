"""Saved cutlist projects and the folders organizing them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .part import CompactPart

OPTIMIZATION_PRIORITIES = ("fast", "offcut", "deep")
DEFAULT_OPTIMIZATION_PRIORITY = "fast"
DEFAULT_KERF_MM = 3.0


def _float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _optional_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


@dataclass
class BoardMaterial:
    id: str
    name: str
    length_mm: float = 2750.0
    width_mm: float = 1830.0
    cost: float = 0.0
    is_default: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "BoardMaterial":
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            length_mm=_float(data.get("length_mm"), 2750.0),
            width_mm=_float(data.get("width_mm"), 1830.0),
            cost=_float(data.get("cost")),
            is_default=bool(_pick(data, "is_default", "isDefault", default=False)),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "length_mm": self.length_mm,
            "width_mm": self.width_mm,
            "cost": self.cost,
            "is_default": self.is_default,
        }


@dataclass
class EdgingMaterial:
    id: str
    name: str
    thickness_mm: float = 16.0
    width_mm: float = 1.0
    cost_per_meter: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "EdgingMaterial":
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            thickness_mm=_float(data.get("thickness_mm"), 16.0),
            width_mm=_float(data.get("width_mm"), 1.0),
            cost_per_meter=_float(data.get("cost_per_meter")),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "thickness_mm": self.thickness_mm,
            "width_mm": self.width_mm,
            "cost_per_meter": self.cost_per_meter,
        }


@dataclass
class SavedCutlistData:
    """Editable cutlist state captured when a project is saved."""

    parts: list[CompactPart] = field(default_factory=list)
    primary_boards: list[BoardMaterial] = field(default_factory=list)
    backer_boards: list[BoardMaterial] = field(default_factory=list)
    edging: list[EdgingMaterial] = field(default_factory=list)
    kerf: float = DEFAULT_KERF_MM
    optimization_priority: str = DEFAULT_OPTIMIZATION_PRIORITY

    @classmethod
    def from_dict(cls, data: Any) -> "SavedCutlistData":
        if not isinstance(data, dict):
            return cls()

        def records(*keys: str) -> list[dict]:
            raw = _pick(data, *keys, default=[])
            if not isinstance(raw, list):
                return []
            return [item for item in raw if isinstance(item, dict)]

        priority = str(
            _pick(data, "optimization_priority", "optimizationPriority", default="")
        )
        if priority not in OPTIMIZATION_PRIORITIES:
            priority = DEFAULT_OPTIMIZATION_PRIORITY
        return cls(
            parts=[CompactPart.from_dict(item) for item in records("parts")],
            primary_boards=[
                BoardMaterial.from_dict(item)
                for item in records("primary_boards", "primaryBoards")
            ],
            backer_boards=[
                BoardMaterial.from_dict(item)
                for item in records("backer_boards", "backerBoards")
            ],
            edging=[EdgingMaterial.from_dict(item) for item in records("edging")],
            kerf=_float(data.get("kerf"), DEFAULT_KERF_MM),
            optimization_priority=priority,
        )

    def to_dict(self) -> dict:
        return {
            "parts": [part.to_dict() for part in self.parts],
            "primary_boards": [board.to_dict() for board in self.primary_boards],
            "backer_boards": [board.to_dict() for board in self.backer_boards],
            "edging": [item.to_dict() for item in self.edging],
            "kerf": self.kerf,
            "optimization_priority": self.optimization_priority,
        }


@dataclass
class CutlistFolder:
    """Node in the saved-project folder tree; ``parent_id`` ``None`` is root."""

    id: str
    name: str
    parent_id: Optional[str] = None
    sort_order: int = 0
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "CutlistFolder":
        try:
            sort_order = int(data.get("sort_order") or 0)
        except (TypeError, ValueError):
            sort_order = 0
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            parent_id=_optional_id(data.get("parent_id")),
            sort_order=sort_order,
            created_at=str(data.get("created_at") or ""),
            updated_at=str(data.get("updated_at") or ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "parent_id": self.parent_id,
            "sort_order": self.sort_order,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class SavedCutlistProject:
    """Named snapshot of cutlist state stored under an optional folder."""

    id: str
    name: str
    folder_id: Optional[str] = None
    data: SavedCutlistData = field(default_factory=SavedCutlistData)
    updated_at: str = ""
    created_at: str = ""
    sort_order: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "SavedCutlistProject":
        try:
            sort_order = int(data.get("sort_order") or 0)
        except (TypeError, ValueError):
            sort_order = 0
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            folder_id=_optional_id(data.get("folder_id")),
            data=SavedCutlistData.from_dict(data.get("data")),
            updated_at=str(data.get("updated_at") or ""),
            created_at=str(data.get("created_at") or ""),
            sort_order=sort_order,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "folder_id": self.folder_id,
            "data": self.data.to_dict(),
            "updated_at": self.updated_at,
            "created_at": self.created_at,
            "sort_order": self.sort_order,
        }
