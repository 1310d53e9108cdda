"""Excel IO helpers for cutlist groups."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from ..models import ApiCutlistGroup, CutlistPart
from ..models.group import BOARD_TYPES, DEFAULT_BOARD_TYPE

logger = logging.getLogger(__name__)

GROUPS_SHEET = "Groups"
PARTS_SHEET = "Parts"
_EDGES = ("top", "right", "bottom", "left")
_TRUE_VALUES = {"yes", "y", "true", "1"}


def save_groups_xlsx(groups: Iterable[ApiCutlistGroup], path: Path | str) -> Path:
    """Write cutlist groups to a workbook with ``Groups`` and ``Parts`` sheets."""
    target_path = Path(path)
    if target_path.suffix.lower() != ".xlsx":
        target_path = target_path.with_suffix(".xlsx")
    target_path.parent.mkdir(parents=True, exist_ok=True)

    group_rows: list[dict] = []
    part_rows: list[dict] = []
    for position, group in enumerate(groups):
        group_rows.append(
            {
                "Group": position,
                "Name": group.name,
                "Board Type": group.board_type,
                "Primary Material ID": group.primary_material_id or "",
                "Primary Material Name": group.primary_material_name or "",
                "Backer Material ID": group.backer_material_id or "",
                "Backer Material Name": group.backer_material_name or "",
                "Sort Order": group.sort_order,
            }
        )
        for part in group.parts:
            row = {
                "Group": position,
                "ID": part.id,
                "Name": part.name,
                "Length (mm)": part.length_mm,
                "Width (mm)": part.width_mm,
                "Quantity": part.quantity,
                "Grain": part.grain,
            }
            for edge in _EDGES:
                row[f"Band {edge.title()}"] = "Yes" if getattr(part.band_edges, edge) else "No"
            row.update(
                {
                    "Lamination Type": part.lamination_type or "",
                    "Material ID": part.material_id or "",
                    "Material Label": part.material_label or "",
                    "Edging Material ID": part.edging_material_id or "",
                    "Lamination Group": part.lamination_group or "",
                }
            )
            part_rows.append(row)

    groups_df = pd.DataFrame(group_rows, columns=_GROUP_COLUMNS)
    parts_df = pd.DataFrame(part_rows, columns=_PART_COLUMNS)
    with pd.ExcelWriter(target_path, engine="openpyxl") as writer:
        groups_df.to_excel(writer, sheet_name=GROUPS_SHEET, index=False)
        parts_df.to_excel(writer, sheet_name=PARTS_SHEET, index=False)
    logger.info("Exported %d cutlist group(s) to %s", len(group_rows), target_path)
    return target_path


def load_groups_xlsx(path: Path | str) -> list[ApiCutlistGroup]:
    """Read groups written by :func:`save_groups_xlsx`, ordered by sort order."""
    file_path = Path(path)
    if not file_path.exists():
        logger.warning("Workbook '%s' not found; no groups loaded.", file_path)
        return []

    workbook = pd.ExcelFile(file_path, engine="openpyxl")
    if GROUPS_SHEET not in workbook.sheet_names:
        logger.warning("Sheet '%s' missing in '%s'.", GROUPS_SHEET, file_path)
        return []
    groups_df = workbook.parse(GROUPS_SHEET)
    if PARTS_SHEET in workbook.sheet_names:
        parts_df = workbook.parse(PARTS_SHEET)
    else:
        logger.warning("Sheet '%s' missing; groups loaded without parts.", PARTS_SHEET)
        parts_df = pd.DataFrame(columns=_PART_COLUMNS)

    parts_by_group: dict[str, list[CutlistPart]] = {}
    for _, row in parts_df.iterrows():
        if row.isna().all():
            continue
        key = _cell_text(row.get("Group")) or ""
        parts_by_group.setdefault(key, []).append(_part_from_row(row))

    groups: list[ApiCutlistGroup] = []
    for _, row in groups_df.iterrows():
        if row.isna().all():
            continue
        key = _cell_text(row.get("Group")) or ""
        board_type = _cell_text(row.get("Board Type")) or DEFAULT_BOARD_TYPE
        if board_type not in BOARD_TYPES:
            logger.warning("Unknown board type '%s'; using %s.", board_type, DEFAULT_BOARD_TYPE)
            board_type = DEFAULT_BOARD_TYPE
        groups.append(
            ApiCutlistGroup(
                name=_cell_text(row.get("Name")) or "",
                board_type=board_type,
                primary_material_id=_cell_text(row.get("Primary Material ID")),
                primary_material_name=_cell_text(row.get("Primary Material Name")),
                backer_material_id=_cell_text(row.get("Backer Material ID")),
                backer_material_name=_cell_text(row.get("Backer Material Name")),
                parts=parts_by_group.get(key, []),
                sort_order=int(_cell_number(row.get("Sort Order"), len(groups))),
            )
        )
    groups.sort(key=lambda group: group.sort_order)
    return groups


_GROUP_COLUMNS = [
    "Group",
    "Name",
    "Board Type",
    "Primary Material ID",
    "Primary Material Name",
    "Backer Material ID",
    "Backer Material Name",
    "Sort Order",
]

_PART_COLUMNS = [
    "Group",
    "ID",
    "Name",
    "Length (mm)",
    "Width (mm)",
    "Quantity",
    "Grain",
    *[f"Band {edge.title()}" for edge in _EDGES],
    "Lamination Type",
    "Material ID",
    "Material Label",
    "Edging Material ID",
    "Lamination Group",
]


def _cell_text(value: object) -> Optional[str]:
    """Return stripped text for a cell, ``None`` for blanks."""
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return str(int(value))
    text = str(value).strip()
    return text or None


def _cell_number(value: object, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return default if math.isnan(number) else number


def _part_from_row(row: pd.Series) -> CutlistPart:
    record = {
        "id": _cell_text(row.get("ID")),
        "name": _cell_text(row.get("Name")),
        "length_mm": _cell_number(row.get("Length (mm)"), 0.0),
        "width_mm": _cell_number(row.get("Width (mm)"), 0.0),
        "quantity": _cell_number(row.get("Quantity"), 1),
        "grain": _cell_text(row.get("Grain")),
        "band_edges": {
            edge: (_cell_text(row.get(f"Band {edge.title()}")) or "").lower() in _TRUE_VALUES
            for edge in _EDGES
        },
        "lamination_type": _cell_text(row.get("Lamination Type")),
        "material_id": _cell_text(row.get("Material ID")),
        "material_label": _cell_text(row.get("Material Label")),
        "edging_material_id": _cell_text(row.get("Edging Material ID")),
        "lamination_group": _cell_text(row.get("Lamination Group")),
    }
    return CutlistPart.from_dict(record)


__all__ = ["load_groups_xlsx", "save_groups_xlsx"]
