"""
Calculation input and result records.

Construction parameters are a tagged union: one frozen dataclass per piece
kind, each carrying only the fields that piece needs. Lengths are expressed
in the gauge's unit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

from knitwright.errors import InvalidShapingInputError
from knitwright.schemas.instructions import Craft, InstructionStep
from knitwright.schemas.measurements import EasePreference, FinishedMeasurements, MeasurementSet
from knitwright.schemas.shaping import ShapingSchedule
from knitwright.schemas.stitch_pattern import StitchPatternDefinition
from knitwright.utilities.types import Gauge

# ── Enums ──────────────────────────────────────────────────────────────────────


class TriangleMethod(str, Enum):
    TOP_DOWN_CENTER_OUT = "top_down_center_out"
    SIDE_TO_SIDE = "side_to_side"
    BOTTOM_UP = "bottom_up"


class NecklineStyle(str, Enum):
    ROUND = "round"
    SCOOP = "scoop"
    V_NECK = "v_neck"


class ArmholeConstruction(str, Enum):
    ROUNDED_SET_IN = "rounded_set_in"
    RAGLAN = "raglan"


# ── Construction parameters ────────────────────────────────────────────────────


def _require_count(value: Any, label: str) -> None:
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise InvalidShapingInputError(f"{label} must be a whole number, got {value!r}")


@dataclass(frozen=True)
class TriangularShawlParams:
    method: TriangleMethod
    wingspan: float
    depth: float


@dataclass(frozen=True)
class NecklineParams:
    """
    Neck opening at the top of a front or back panel.

    The panel width comes from ``panel_stitches``, else ``panel_width``, else
    half the finished chest.
    """

    style: NecklineStyle
    depth: float
    shoulder_width: float  # finished width of each shoulder
    panel_stitches: int | None = None
    panel_width: float | None = None

    def __post_init__(self) -> None:
        _require_count(self.panel_stitches, "Panel width in stitches")


@dataclass(frozen=True)
class ArmholeParams:
    """
    Armhole shaping at the top of a body panel.

    ``width`` is the width removed by each armhole. ``panel_rows`` is the
    panel height in rows, used only for the proportion warning.
    """

    construction: ArmholeConstruction
    depth: float
    width: float
    panel_stitches: int | None = None
    panel_width: float | None = None
    panel_rows: int | None = None
    raglan_length: float | None = None

    def __post_init__(self) -> None:
        _require_count(self.panel_stitches, "Panel width in stitches")
        _require_count(self.panel_rows, "Panel height in rows")


@dataclass(frozen=True)
class RectangularPanelParams:
    """Unshaped piece; missing dimensions fall back to finished measurements."""

    width: float | None = None
    length: float | None = None


@dataclass(frozen=True)
class TaperParams:
    """
    A straight run of increases or decreases between two widths, such as a
    sleeve or a body side seam.

    Stitch counts come from ``start_stitches``/``target_stitches``, else from
    ``start_width``/``target_width`` at the gauge. The section is ``rows``
    long, else ``length`` at the gauge.
    """

    start_stitches: int | None = None
    target_stitches: int | None = None
    start_width: float | None = None
    target_width: float | None = None
    rows: int | None = None
    length: float | None = None
    stitches_per_event: int = 2

    def __post_init__(self) -> None:
        _require_count(self.start_stitches, "Starting stitch count")
        _require_count(self.target_stitches, "Target stitch count")
        _require_count(self.rows, "Shaping rows")
        _require_count(self.stitches_per_event, "Stitches per shaping event")


ConstructionParams = Union[
    TriangularShawlParams, NecklineParams, ArmholeParams, RectangularPanelParams, TaperParams
]


# ── Input / output ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CalculationInput:
    """
    Everything needed to calculate one garment piece.

    Attributes:
        params: Construction parameters for the piece kind.
        gauge: Stitch and row gauge; its unit is the unit of all params lengths.
        measurements: Body measurements, resolved with ``ease`` when present.
        ease: Ease preference; defaults to zero base ease.
        garment_type: Key into the ease multiplier table.
        stitch_pattern: Optional decorative motif worked across the piece.
        edge_stitches: Edge allowance each side kept out of the motif.
        craft: Knitting or crochet terminology.
        language: Terminology language for the abbreviation pass.
        abbreviate: Rewrite full terms to standard abbreviations.
    """

    params: ConstructionParams
    gauge: Gauge
    measurements: MeasurementSet | None = None
    ease: EasePreference | None = None
    garment_type: str = "sweater"
    stitch_pattern: StitchPatternDefinition | None = None
    edge_stitches: int = 0
    craft: Craft = Craft.KNITTING
    language: str = "en"
    abbreviate: bool = False

    def __post_init__(self) -> None:
        if self.edge_stitches < 0:
            raise ValueError(
                f"CalculationInput.edge_stitches must be >= 0, got {self.edge_stitches}"
            )


@dataclass(frozen=True)
class CalculationResult:
    """
    Outcome of calculating one piece.

    On failure ``schedule`` and ``instructions`` are None and ``errors`` holds
    the hard error messages. Warnings are attached in both cases.
    """

    success: bool
    schedule: ShapingSchedule | None = None
    instructions: tuple[InstructionStep, ...] | None = None
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    finished_measurements: FinishedMeasurements | None = None
    metrics: MappingProxyType[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if isinstance(self.metrics, dict):
            object.__setattr__(self, "metrics", MappingProxyType(self.metrics))
