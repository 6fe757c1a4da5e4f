"""
Plain record -> CalculationInput.

Callers hand ``calculate`` nested dicts straight from storage or a request
body. Structural problems (unknown piece kind, unknown field, wrong value
type, bad enum value) raise RecordError. Value problems inside a well-formed
record (a zero gauge, a negative measurement) are left to the record
dataclasses, which raise their own ValueError subclasses.

Record shape::

    {
        "piece": "triangular_shawl" | "neckline" | "armhole" | "rectangular_panel" | "taper",
        "gauge": {"stitches_per_10": 20, "rows_per_10": 28, "unit": "cm"},
        "construction": {...},           # fields of the piece's params class
        "measurements": {...},           # optional, MeasurementSet fields
        "ease": {...},                   # optional, EasePreference fields
        "garment_type": "sweater",
        "stitch_pattern": {"id": ..., "name": ..., "repeat_width": ...,
                           "rows": ["k1, p1", {"instruction": ..., "note": ...}],
                           "full_repeats": ..., "stockinette_each_side": ...},  # layout optional
        "edge_stitches": 0,
        "craft": "knitting",
        "language": "en",
        "abbreviate": False,
    }
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import fields
from enum import Enum
from typing import Any

from knitwright.errors import RecordError
from knitwright.schemas.calculation import (
    ArmholeConstruction,
    ArmholeParams,
    CalculationInput,
    ConstructionParams,
    NecklineParams,
    NecklineStyle,
    RectangularPanelParams,
    TaperParams,
    TriangleMethod,
    TriangularShawlParams,
)
from knitwright.schemas.instructions import Craft
from knitwright.schemas.measurements import EasePreference, EaseType, MeasurementSet
from knitwright.schemas.stitch_pattern import PatternRow, StitchPatternDefinition
from knitwright.utilities.types import Gauge, LengthUnit

# piece kind -> (params class, enum-typed construction fields)
PIECE_KINDS: dict[str, tuple[type, dict[str, type[Enum]]]] = {
    "triangular_shawl": (TriangularShawlParams, {"method": TriangleMethod}),
    "neckline": (NecklineParams, {"style": NecklineStyle}),
    "armhole": (ArmholeParams, {"construction": ArmholeConstruction}),
    "rectangular_panel": (RectangularPanelParams, {}),
    "taper": (TaperParams, {}),
}

# construction fields that count stitches or rows
_INTEGER_FIELDS = frozenset(
    {"panel_stitches", "panel_rows", "start_stitches", "target_stitches", "rows", "stitches_per_event"}
)

_TOP_LEVEL_KEYS = frozenset(
    {
        "piece",
        "gauge",
        "construction",
        "measurements",
        "ease",
        "garment_type",
        "stitch_pattern",
        "edge_stitches",
        "craft",
        "language",
        "abbreviate",
    }
)


def piece_kind(params: ConstructionParams) -> str:
    """Return the record name of a params instance (e.g. "neckline")."""
    for name, (cls, _) in PIECE_KINDS.items():
        if isinstance(params, cls):
            return name
    raise RecordError(f"Unknown construction params type: {type(params).__name__}")


def parse_calculation_input(record: Mapping[str, Any]) -> CalculationInput:
    """
    Build a CalculationInput from a plain record.

    Raises:
        RecordError: The record is structurally unusable.
        ValueError: A value violates a record invariant (e.g. InvalidGaugeError).
    """
    if not isinstance(record, Mapping):
        raise RecordError(f"Calculation record must be a mapping, got {type(record).__name__}")
    _reject_unknown(record, _TOP_LEVEL_KEYS, "calculation record")

    piece = record.get("piece")
    if piece not in PIECE_KINDS:
        raise RecordError(
            f"Unknown piece kind {piece!r}; expected one of: {', '.join(sorted(PIECE_KINDS))}"
        )

    measurements = record.get("measurements")
    ease = record.get("ease")
    pattern = record.get("stitch_pattern")
    edge_stitches = _integer(record.get("edge_stitches", 0), "edge_stitches")

    return CalculationInput(
        params=parse_construction(piece, _section(record, "construction")),
        gauge=parse_gauge(_section(record, "gauge")),
        measurements=parse_measurements(measurements) if measurements is not None else None,
        ease=parse_ease(ease) if ease is not None else None,
        garment_type=_string(record.get("garment_type", "sweater"), "garment_type"),
        stitch_pattern=parse_stitch_pattern(pattern) if pattern is not None else None,
        edge_stitches=edge_stitches,
        craft=_enum(Craft, record.get("craft", Craft.KNITTING.value), "craft"),
        language=_string(record.get("language", "en"), "language"),
        abbreviate=bool(record.get("abbreviate", False)),
    )


# ── Sections ───────────────────────────────────────────────────────────────────


def parse_gauge(data: Mapping[str, Any]) -> Gauge:
    _reject_unknown(data, {"stitches_per_10", "rows_per_10", "unit"}, "gauge")
    for key in ("stitches_per_10", "rows_per_10"):
        if key not in data:
            raise RecordError(f"gauge is missing {key!r}")
    return Gauge(
        stitches_per_10=_number(data["stitches_per_10"], "gauge.stitches_per_10"),
        rows_per_10=_number(data["rows_per_10"], "gauge.rows_per_10"),
        unit=_enum(LengthUnit, data.get("unit", LengthUnit.CM.value), "gauge.unit"),
    )


def parse_construction(piece: str, data: Mapping[str, Any]) -> ConstructionParams:
    cls, enum_fields = PIECE_KINDS[piece]
    values = _typed_fields(cls, data, enum_fields, f"{piece} construction")
    try:
        return cls(**values)
    except TypeError as exc:
        raise RecordError(f"{piece} construction is incomplete: {exc}") from None


def parse_measurements(data: Mapping[str, Any]) -> MeasurementSet:
    return MeasurementSet(**_typed_fields(MeasurementSet, data, {"unit": LengthUnit}, "measurements"))


def parse_ease(data: Mapping[str, Any]) -> EasePreference:
    enum_fields: dict[str, type[Enum]] = {"ease_type": EaseType, "unit": LengthUnit}
    return EasePreference(**_typed_fields(EasePreference, data, enum_fields, "ease"))


def parse_stitch_pattern(data: Mapping[str, Any]) -> StitchPatternDefinition:
    """Rows may be plain strings or {"instruction", "note"} mappings."""
    if not isinstance(data, Mapping):
        raise RecordError(f"stitch_pattern must be a mapping, got {type(data).__name__}")
    _reject_unknown(
        data,
        {"id", "name", "rows", "repeat_width", "repeat_height", "full_repeats", "stockinette_each_side"},
        "stitch_pattern",
    )
    raw_rows = data.get("rows")
    if not isinstance(raw_rows, (list, tuple)):
        raise RecordError("stitch_pattern.rows must be a list")
    rows: list[PatternRow] = []
    for index, raw in enumerate(raw_rows, start=1):
        if isinstance(raw, str):
            rows.append(PatternRow(instruction=raw))
        elif isinstance(raw, Mapping) and isinstance(raw.get("instruction"), str):
            _reject_unknown(raw, {"instruction", "note"}, f"stitch_pattern row {index}")
            rows.append(PatternRow(instruction=raw["instruction"], note=raw.get("note")))
        else:
            raise RecordError(f"stitch_pattern row {index} must be a string or an instruction mapping")

    pattern_id = _string(data.get("id", ""), "stitch_pattern.id")
    repeat_width = _integer(data.get("repeat_width"), "stitch_pattern.repeat_width")
    repeat_height = _integer(data.get("repeat_height", len(rows)), "stitch_pattern.repeat_height")
    declared = {
        key: _integer(data[key], f"stitch_pattern.{key}")
        for key in ("full_repeats", "stockinette_each_side")
        if data.get(key) is not None
    }
    return StitchPatternDefinition(
        id=pattern_id,
        name=_string(data.get("name", pattern_id), "stitch_pattern.name"),
        rows=tuple(rows),
        repeat_width=repeat_width,
        repeat_height=repeat_height,
        **declared,
    )


# ── Helpers ────────────────────────────────────────────────────────────────────


def _section(record: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = record.get(key)
    if value is None:
        raise RecordError(f"Calculation record is missing {key!r}")
    if not isinstance(value, Mapping):
        raise RecordError(f"{key} must be a mapping, got {type(value).__name__}")
    return value


def _reject_unknown(data: Mapping[str, Any], allowed: set[str] | frozenset[str], label: str) -> None:
    unknown = sorted(str(key) for key in data if key not in allowed)
    if unknown:
        raise RecordError(f"Unknown {label} field(s): {', '.join(unknown)}")


def _typed_fields(
    cls: type, data: Mapping[str, Any], enum_fields: Mapping[str, type[Enum]], label: str
) -> dict[str, Any]:
    """Check a mapping against a dataclass: known keys, enums parsed, counts integral, numbers finite."""
    if not isinstance(data, Mapping):
        raise RecordError(f"{label} must be a mapping, got {type(data).__name__}")
    _reject_unknown(data, {f.name for f in fields(cls)}, label)
    values: dict[str, Any] = {}
    for key, value in data.items():
        if key in enum_fields:
            values[key] = _enum(enum_fields[key], value, f"{label}.{key}")
        elif value is None:
            values[key] = None
        elif key in _INTEGER_FIELDS:
            values[key] = _integer(value, f"{label}.{key}")
        else:
            values[key] = _number(value, f"{label}.{key}")
    return values


def _enum(cls: type[Enum], value: Any, label: str) -> Any:
    try:
        return cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in cls)
        raise RecordError(f"Invalid {label} {value!r}; expected one of: {allowed}") from None


def _number(value: Any, label: str) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RecordError(f"{label} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise RecordError(f"{label} must be a finite number, got {value!r}")
    return value


def _integer(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise RecordError(f"{label} must be an integer, got {value!r}")
    return value


def _string(value: Any, label: str) -> str:
    if not isinstance(value, str):
        raise RecordError(f"{label} must be a string, got {value!r}")
    return value
