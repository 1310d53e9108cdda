"""Cutlist group models for the stored and save-endpoint shapes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .part import CutlistPart

BOARD_TYPES = ("16mm", "32mm-both", "32mm-backer")
DEFAULT_BOARD_TYPE = "16mm"


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _board_type(value: Any) -> Optional[str]:
    text = str(value or "").strip()
    return text if text in BOARD_TYPES else None


def _parts(raw: Any) -> list[CutlistPart]:
    if not isinstance(raw, list):
        return []
    return [CutlistPart.from_dict(item) for item in raw if isinstance(item, dict)]


@dataclass
class DatabaseCutlistGroup:
    """Group of parts as read from product storage."""

    id: int
    product_id: int
    name: str
    board_type: Optional[str] = DEFAULT_BOARD_TYPE
    primary_material_id: Optional[int] = None
    primary_material_name: Optional[str] = None
    backer_material_id: Optional[int] = None
    backer_material_name: Optional[str] = None
    parts: list[CutlistPart] = field(default_factory=list)
    sort_order: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> Optional["DatabaseCutlistGroup"]:
        """Return a group for ``data`` or ``None`` when it is not a record."""
        if not isinstance(data, dict):
            return None
        return cls(
            id=_optional_int(data.get("id")) or 0,
            product_id=_optional_int(data.get("product_id")) or 0,
            name=str(data.get("name") or ""),
            board_type=_board_type(data.get("board_type")),
            primary_material_id=_optional_int(data.get("primary_material_id")),
            primary_material_name=_optional_text(data.get("primary_material_name")),
            backer_material_id=_optional_int(data.get("backer_material_id")),
            backer_material_name=_optional_text(data.get("backer_material_name")),
            parts=_parts(data.get("parts")),
            sort_order=_optional_int(data.get("sort_order")) or 0,
        )


@dataclass
class ApiCutlistGroup:
    """Group of parts in the shape accepted by the save endpoint."""

    name: str
    board_type: str
    primary_material_id: Optional[str] = None
    primary_material_name: Optional[str] = None
    backer_material_id: Optional[str] = None
    backer_material_name: Optional[str] = None
    parts: list[CutlistPart] = field(default_factory=list)
    sort_order: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> Optional["ApiCutlistGroup"]:
        if not isinstance(data, dict):
            return None
        return cls(
            name=str(data.get("name") or ""),
            board_type=_board_type(data.get("board_type")) or DEFAULT_BOARD_TYPE,
            primary_material_id=_optional_text(data.get("primary_material_id")),
            primary_material_name=_optional_text(data.get("primary_material_name")),
            backer_material_id=_optional_text(data.get("backer_material_id")),
            backer_material_name=_optional_text(data.get("backer_material_name")),
            parts=_parts(data.get("parts")),
            sort_order=_optional_int(data.get("sort_order")) or 0,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "board_type": self.board_type,
            "primary_material_id": self.primary_material_id,
            "primary_material_name": self.primary_material_name,
            "backer_material_id": self.backer_material_id,
            "backer_material_name": self.backer_material_name,
            "parts": [part.to_dict() for part in self.parts],
            "sort_order": self.sort_order,
        }
