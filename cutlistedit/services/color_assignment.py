"""Stable per-part colors and legend rows for cutting diagrams."""

from __future__ import annotations

import re
from collections import OrderedDict
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Mapping, Optional

from cutlistedit.app.models import Placement, SheetLayout
from cutlistedit.core.utils import base_sort_key, index_to_letter

_INSTANCE_SUFFIX = re.compile(r"(?P<base>.*)#(?P<index>[0-9]+)", re.DOTALL)


@dataclass(frozen=True)
class ColorEntry:
    fill: str
    stroke: str
    text: str


PALETTE: tuple[ColorEntry, ...] = (
    ColorEntry(fill="#dbeafe", stroke="#2563eb", text="#1e3a5f"),
    ColorEntry(fill="#dcfce7", stroke="#16a34a", text="#14532d"),
    ColorEntry(fill="#fef3c7", stroke="#d97706", text="#78350f"),
    ColorEntry(fill="#fce7f3", stroke="#db2777", text="#831843"),
    ColorEntry(fill="#e0e7ff", stroke="#4f46e5", text="#312e81"),
    ColorEntry(fill="#fed7aa", stroke="#ea580c", text="#7c2d12"),
    ColorEntry(fill="#ccfbf1", stroke="#0d9488", text="#134e4a"),
    ColorEntry(fill="#fde68a", stroke="#ca8a04", text="#713f12"),
    ColorEntry(fill="#e9d5ff", stroke="#9333ea", text="#581c87"),
    ColorEntry(fill="#fecaca", stroke="#dc2626", text="#7f1d1d"),
    ColorEntry(fill="#cffafe", stroke="#0891b2", text="#155e75"),
    ColorEntry(fill="#d1fae5", stroke="#059669", text="#064e3b"),
)

# Off-cut regions; never handed out by build_color_map.
WASTE_COLOR = ColorEntry(fill="#f3f4f6", stroke="#9ca3af", text="#6b7280")


def base_part_name(part_id: str) -> str:
    """
    Strip a trailing ``#<digits>`` instance suffix from ``part_id``.

    ``"shelf#3"`` becomes ``"shelf"``; ids without a suffix, or whose text
    after the last ``#`` is not purely numeric, are returned unchanged.
    """
    text = str(part_id)
    match = _INSTANCE_SUFFIX.fullmatch(text)
    if match is None:
        return text
    return match.group("base")


def iter_sheet_placements(sheets: Iterable[SheetLayout]) -> list[Placement]:
    """Return every placement of a layout result, sheet by sheet."""
    placements: list[Placement] = []
    for sheet in sheets or []:
        placements.extend(getattr(sheet, "placements", None) or [])
    return placements


def _sorted_base_names(placements: Iterable[Placement]) -> list[str]:
    names = {base_part_name(placement.part_id) for placement in placements or []}
    return sorted(names, key=base_sort_key)


def build_color_map(placements: Iterable[Placement]) -> dict[str, ColorEntry]:
    """
    Assign palette colors round-robin over the sorted distinct base names.

    The result depends only on the set of base names, so reordering
    placements or adding instances of an existing part leaves it unchanged.
    """
    return {
        name: PALETTE[index % len(PALETTE)]
        for index, name in enumerate(_sorted_base_names(placements))
    }


def color_for(color_map: Mapping[str, ColorEntry], part_id: str) -> ColorEntry:
    """Return the color of ``part_id``, or the first palette entry when unknown."""
    return color_map.get(base_part_name(part_id), PALETTE[0])


def build_letter_map(placements: Iterable[Placement]) -> dict[str, str]:
    return {
        name: index_to_letter(index)
        for index, name in enumerate(_sorted_base_names(placements))
    }


@dataclass
class LegendRow:
    letter: str
    name: str
    qty: int
    length_mm: int
    width_mm: int
    color: ColorEntry


def build_legend(
    placements: Iterable[Placement],
    letter_map: Mapping[str, str],
    color_map: Mapping[str, ColorEntry],
) -> list[LegendRow]:
    """Summarize placements into one legend row per base part name."""
    grouped: "OrderedDict[str, dict]" = OrderedDict()
    for placement in placements or []:
        base = base_part_name(placement.part_id)
        entry = grouped.get(base)
        if entry is not None:
            entry["count"] += 1
            continue
        # Labels are user-facing ("Door #2") and keep their text.
        raw_label: Optional[str] = placement.label or placement.part_id
        display_name = base if raw_label == placement.part_id else raw_label
        grouped[base] = {
            "count": 1,
            "length_mm": (
                placement.original_length_mm
                if placement.original_length_mm is not None
                else placement.h
            ),
            "width_mm": (
                placement.original_width_mm
                if placement.original_width_mm is not None
                else placement.w
            ),
            "name": display_name,
        }

    rows = [
        LegendRow(
            letter=letter_map.get(base, "?"),
            name=info["name"],
            qty=info["count"],
            length_mm=int(round(info["length_mm"])),
            width_mm=int(round(info["width_mm"])),
            color=color_map.get(base, PALETTE[0]),
        )
        for base, info in grouped.items()
    ]
    rows.sort(key=lambda row: (len(row.letter), row.letter))
    return rows


__all__ = [
    "ColorEntry",
    "LegendRow",
    "PALETTE",
    "WASTE_COLOR",
    "base_part_name",
    "build_color_map",
    "build_legend",
    "build_letter_map",
    "color_for",
    "iter_sheet_placements",
]
