"""Layout result models produced by the sheet packer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Placement:
    """Part instance positioned on a stock sheet."""

    part_id: str
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0
    rot: int = 0
    label: Optional[str] = None
    original_length_mm: Optional[float] = None
    original_width_mm: Optional[float] = None


@dataclass
class SheetLayout:
    sheet_id: str
    placements: list[Placement] = field(default_factory=list)
    used_area_mm2: Optional[float] = None
    stock_length_mm: Optional[float] = None
    stock_width_mm: Optional[float] = None
    material_label: Optional[str] = None
