"""Conversion between stored cutlist groups and the flat editable part list."""

from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Iterable
from dataclasses import fields
from typing import Any, Optional

from cutlistedit.app.models import (
    ApiCutlistGroup,
    CompactPart,
    CutlistPart,
    DatabaseCutlistGroup,
)
from cutlistedit.app.models.group import DEFAULT_BOARD_TYPE
from cutlistedit.app.models.part import DEFAULT_LAMINATION_TYPE

logger = logging.getLogger(__name__)

BOARD_TYPE_TO_LAMINATION = {
    "16mm": "none",
    "32mm-both": "same-board",
    "32mm-backer": "with-backer",
}

# Custom lamination has no board type of its own.
LAMINATION_TO_BOARD_TYPE = {
    "none": "16mm",
    "same-board": "32mm-both",
    "with-backer": "32mm-backer",
    "custom": "16mm",
}

BOARD_TYPE_LABELS = {
    "16mm": "Panels (16mm)",
    "32mm-both": "Laminated (32mm)",
    "32mm-backer": "Laminated w/ Backer (32mm)",
}

UNNAMED_GROUP = "Unnamed Group"


def _coerce_groups(groups: Any) -> list[DatabaseCutlistGroup]:
    if not isinstance(groups, Iterable) or isinstance(groups, (str, bytes, dict)):
        return []
    coerced: list[DatabaseCutlistGroup] = []
    for group in groups:
        if isinstance(group, dict):
            group = DatabaseCutlistGroup.from_dict(group)
        if not isinstance(group, DatabaseCutlistGroup):
            logger.debug("Ignoring malformed cutlist group: %r", group)
            continue
        coerced.append(group)
    return coerced


def _compact_from_part(
    part: CutlistPart,
    lamination_type: str,
    material_id: Optional[str],
) -> CompactPart:
    values = {item.name: getattr(part, item.name) for item in fields(CutlistPart)}
    values["lamination_type"] = lamination_type
    values["material_id"] = material_id
    return CompactPart(**values)


def flatten_groups_to_compact_parts(groups: Any) -> list[CompactPart]:
    """
    Flatten stored cutlist groups into editable parts.

    Each part keeps its own ``lamination_type`` and ``material_id`` when set.
    Otherwise the lamination type comes from the group's board type (falling
    back to ``none``) and the material id from the group's primary material.
    Output follows group order, then part order; malformed groups are skipped.
    """
    compact: list[CompactPart] = []
    for group in _coerce_groups(groups):
        group_lamination = BOARD_TYPE_TO_LAMINATION.get(group.board_type or "")
        group_material = (
            str(group.primary_material_id)
            if group.primary_material_id is not None
            else None
        )
        for part in group.parts or []:
            if isinstance(part, dict):
                part = CutlistPart.from_dict(part)
            if not isinstance(part, CutlistPart):
                logger.debug("Ignoring malformed part in group '%s'.", group.name)
                continue
            lamination_type = (
                part.lamination_type or group_lamination or DEFAULT_LAMINATION_TYPE
            )
            material_id = part.material_id or group_material
            compact.append(_compact_from_part(part, lamination_type, material_id))
    return compact


def group_key(part: CutlistPart) -> tuple[str, str]:
    """Return the ``(lamination_type, material_id)`` bucket key of a part."""
    return (
        part.lamination_type or DEFAULT_LAMINATION_TYPE,
        part.material_id or "",
    )


def regroup_parts_to_api_groups(parts: Iterable[CutlistPart]) -> list[ApiCutlistGroup]:
    """
    Regroup editable parts into save-endpoint groups.

    Parts are bucketed by ``(lamination_type, material_id)`` in first-seen
    order. Backer materials and custom group names are not reconstructed.
    """
    buckets: "OrderedDict[tuple[str, str], list[CutlistPart]]" = OrderedDict()
    for part in parts or []:
        if isinstance(part, dict):
            part = CompactPart.from_dict(part)
        if not isinstance(part, CutlistPart):
            continue
        stored = part.to_part() if isinstance(part, CompactPart) else part
        buckets.setdefault(group_key(part), []).append(stored)

    groups: list[ApiCutlistGroup] = []
    for sort_order, ((lamination_type, material_id), bucket) in enumerate(buckets.items()):
        board_type = LAMINATION_TO_BOARD_TYPE.get(lamination_type, DEFAULT_BOARD_TYPE)
        groups.append(
            ApiCutlistGroup(
                name=BOARD_TYPE_LABELS[board_type],
                board_type=board_type,
                primary_material_id=material_id or None,
                parts=bucket,
                sort_order=sort_order,
            )
        )
    return groups


def normalize_save_groups(groups: Any) -> list[ApiCutlistGroup]:
    """Apply save-endpoint defaults and reassign ``sort_order`` by position."""
    if not isinstance(groups, Iterable) or isinstance(groups, (str, bytes, dict)):
        return []
    normalized: list[ApiCutlistGroup] = []
    for group in groups:
        if isinstance(group, dict):
            group = ApiCutlistGroup.from_dict(group)
        if not isinstance(group, ApiCutlistGroup):
            continue
        normalized.append(
            ApiCutlistGroup(
                name=group.name or UNNAMED_GROUP,
                board_type=group.board_type or DEFAULT_BOARD_TYPE,
                primary_material_id=group.primary_material_id or None,
                primary_material_name=group.primary_material_name or None,
                backer_material_id=group.backer_material_id or None,
                backer_material_name=group.backer_material_name or None,
                parts=list(group.parts or []),
                sort_order=len(normalized),
            )
        )
    return normalized


__all__ = [
    "BOARD_TYPE_LABELS",
    "BOARD_TYPE_TO_LAMINATION",
    "LAMINATION_TO_BOARD_TYPE",
    "flatten_groups_to_compact_parts",
    "group_key",
    "normalize_save_groups",
    "regroup_parts_to_api_groups",
]
