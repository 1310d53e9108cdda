"""Cutlist part models."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Optional

GRAIN_ORIENTATIONS = ("any", "length", "width")
LAMINATION_TYPES = ("none", "same-board", "with-backer", "custom")
DEFAULT_LAMINATION_TYPE = "none"


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _positive_number(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number or number <= 0:
        return default
    return number


@dataclass
class BandEdges:
    """Edges of a part receiving edge banding."""

    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> "BandEdges":
        if not isinstance(data, dict):
            return cls()
        return cls(**{item.name: bool(data.get(item.name, False)) for item in fields(cls)})

    def to_dict(self) -> dict:
        return {item.name: getattr(self, item.name) for item in fields(self)}


@dataclass
class LaminationLayer:
    material_id: str
    material_name: str
    is_primary: bool = True


@dataclass
class CustomLaminationConfig:
    """Layer stack for parts laminated from three or more boards."""

    layers: list[LaminationLayer] = field(default_factory=list)
    final_thickness: float = 0.0
    edge_thickness: float = 0.0

    @classmethod
    def from_dict(cls, data: Any) -> Optional["CustomLaminationConfig"]:
        if not isinstance(data, dict):
            return None
        layers: list[LaminationLayer] = []
        raw_layers = data.get("layers")
        for raw in raw_layers if isinstance(raw_layers, list) else []:
            if not isinstance(raw, dict):
                continue
            layers.append(
                LaminationLayer(
                    material_id=str(raw.get("materialId", raw.get("material_id", "")) or ""),
                    material_name=str(
                        raw.get("materialName", raw.get("material_name", "")) or ""
                    ),
                    is_primary=bool(raw.get("isPrimary", raw.get("is_primary", True))),
                )
            )
        try:
            final_thickness = float(
                data.get("finalThickness", data.get("final_thickness", 0)) or 0
            )
            edge_thickness = float(
                data.get("edgeThickness", data.get("edge_thickness", final_thickness)) or 0
            )
        except (TypeError, ValueError):
            final_thickness = edge_thickness = 0.0
        return cls(
            layers=layers,
            final_thickness=final_thickness,
            edge_thickness=edge_thickness,
        )

    def to_dict(self) -> dict:
        return {
            "layers": [
                {
                    "materialId": layer.material_id,
                    "materialName": layer.material_name,
                    "isPrimary": layer.is_primary,
                }
                for layer in self.layers
            ],
            "finalThickness": self.final_thickness,
            "edgeThickness": self.edge_thickness,
        }


@dataclass
class CutlistPart:
    """Single cuttable piece as stored inside a cutlist group."""

    id: str
    name: str
    length_mm: float
    width_mm: float
    quantity: int = 1
    grain: str = "any"
    band_edges: BandEdges = field(default_factory=BandEdges)
    lamination_type: Optional[str] = None
    lamination_config: Optional[CustomLaminationConfig] = None
    material_id: Optional[str] = None
    material_label: Optional[str] = None
    edging_material_id: Optional[str] = None
    lamination_group: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "CutlistPart":
        """Build a part from a stored record, defaulting anything missing."""
        if not isinstance(data, dict):
            data = {}
        return cls(**_part_kwargs(data))

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "length_mm": self.length_mm,
            "width_mm": self.width_mm,
            "quantity": self.quantity,
            "grain": self.grain,
            "band_edges": self.band_edges.to_dict(),
        }
        optional = {
            "lamination_type": self.lamination_type,
            "lamination_config": (
                self.lamination_config.to_dict() if self.lamination_config else None
            ),
            "material_id": self.material_id,
            "material_label": self.material_label,
            "edging_material_id": self.edging_material_id,
            "lamination_group": self.lamination_group,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload


@dataclass
class CompactPart(CutlistPart):
    """Editable part with lamination type and material resolved."""

    lamination_type: str = DEFAULT_LAMINATION_TYPE

    @classmethod
    def from_dict(cls, data: Any) -> "CompactPart":
        if not isinstance(data, dict):
            data = {}
        kwargs = _part_kwargs(data)
        kwargs["lamination_type"] = kwargs["lamination_type"] or DEFAULT_LAMINATION_TYPE
        return cls(**kwargs)

    def to_part(self) -> CutlistPart:
        """Return the stored part shape, dropping editing-only state."""
        return CutlistPart(
            id=self.id,
            name=self.name,
            length_mm=self.length_mm,
            width_mm=self.width_mm,
            quantity=self.quantity,
            grain=self.grain,
            band_edges=BandEdges(**self.band_edges.to_dict()),
            lamination_type=self.lamination_type,
            lamination_config=self.lamination_config,
            material_id=self.material_id,
            material_label=self.material_label,
            edging_material_id=self.edging_material_id,
            lamination_group=self.lamination_group,
        )


def _part_kwargs(data: dict) -> dict[str, Any]:
    grain = str(data.get("grain") or "any").strip().lower()
    if grain not in GRAIN_ORIENTATIONS:
        grain = "any"
    lamination_type = _text(data.get("lamination_type"))
    if lamination_type not in LAMINATION_TYPES:
        lamination_type = None
    try:
        quantity = int(_positive_number(data.get("quantity"), 1))
    except OverflowError:
        quantity = 1
    return {
        "id": str(data.get("id") or ""),
        "name": str(data.get("name") or ""),
        "length_mm": _positive_number(data.get("length_mm"), 1.0),
        "width_mm": _positive_number(data.get("width_mm"), 1.0),
        "quantity": max(quantity, 1),
        "grain": grain,
        "band_edges": BandEdges.from_dict(data.get("band_edges")),
        "lamination_type": lamination_type,
        "lamination_config": CustomLaminationConfig.from_dict(data.get("lamination_config")),
        "material_id": _text(data.get("material_id")),
        "material_label": _text(data.get("material_label")),
        "edging_material_id": _text(data.get("edging_material_id")),
        "lamination_group": _text(data.get("lamination_group")),
    }
