"""
Neckline shaper: round, scoop and V necklines at the top of a panel.

The panel splits at the center. Row 1 binds off a center block, then each
side is worked separately, decreasing 1 stitch at the neck edge until only
the shoulder stitches remain.

Round and scoop necklines decrease in two phases per side: a rapid phase
close to the bind-off followed by a gradual phase. The cadence depends on
the neckline depth:

    depth < 6cm    rapid every row,       gradual every 3 rows
    6 - 12cm       rapid every 2 rows,    gradual every 4 rows
    depth > 12cm   rapid every 2 rows,    gradual every 6 rows

V necklines bind off at most one center stitch (for parity) and spread the
decreases evenly over the whole neckline depth.

Decreases start on row 3, the first right-side row after the split. Both
sides use the same row numbers; the left side is worked first, then the
yarn is rejoined for the right side.
"""

from __future__ import annotations

from loguru import logger

from knitwright.errors import InvalidShapingInputError
from knitwright.schemas.calculation import NecklineParams, NecklineStyle
from knitwright.schemas.shaping import (
    Placement,
    ShapingEvent,
    ShapingKind,
    ShapingPhase,
    ShapingResult,
    ShapingSchedule,
    ShapingSide,
)
from knitwright.utilities.conversion import (
    convert_length,
    length_to_rows,
    length_to_stitches,
    round_half_up,
)
from knitwright.utilities.shaping import Cadence, distribute_events
from knitwright.utilities.types import Gauge, LengthUnit

from .common import require_positive

# style -> (center ratio, rapid ratio, gradual ratio)
STYLE_RATIOS: dict[NecklineStyle, tuple[float, float, float]] = {
    NecklineStyle.ROUND: (1 / 3, 1 / 3, 1 / 3),
    NecklineStyle.SCOOP: (0.4, 0.4, 0.2),
}

SHALLOW_DEPTH_CM = 6.0
DEEP_DEPTH_CM = 12.0
VERY_DEEP_CM = 30.0
FIRST_DECREASE_ROW = 3


def neckline_cadence(depth: float, unit: LengthUnit = LengthUnit.CM) -> tuple[int, int]:
    """Return (rapid interval, gradual interval) in rows for a neckline depth."""
    depth_cm = convert_length(depth, unit, LengthUnit.CM)
    if depth_cm < SHALLOW_DEPTH_CM:
        return 1, 3
    if depth_cm > DEEP_DEPTH_CM:
        return 2, 6
    return 2, 4


def shape_neckline(params: NecklineParams, gauge: Gauge, panel_stitches: int) -> ShapingResult:
    """
    Build the split neckline schedule for a panel.

    Args:
        params: Style, depth and shoulder width (gauge unit).
        gauge: Stitch and row gauge.
        panel_stitches: Live stitches across the panel at the neckline base.

    Raises:
        InvalidShapingInputError: A dimension is not positive, or the shoulders
            leave no room for a neck opening.
    """
    require_positive(params.depth, "Neckline depth")
    require_positive(params.shoulder_width, "Shoulder width")
    require_positive(panel_stitches, "Panel width in stitches")

    shoulder = length_to_stitches(params.shoulder_width, gauge)
    if shoulder < 1:
        raise InvalidShapingInputError(
            f"Shoulder width {params.shoulder_width:g}{gauge.unit.value} is less than one stitch"
        )
    if 2 * shoulder >= panel_stitches:
        raise InvalidShapingInputError(
            f"Shoulders ({shoulder} sts each) leave no neck opening "
            f"in a {panel_stitches}-stitch panel"
        )

    neck = panel_stitches - 2 * shoulder
    depth_rows = length_to_rows(params.depth, gauge)

    if params.style == NecklineStyle.V_NECK:
        center, side_phases = _v_neck_sides(neck, depth_rows)
    else:
        center, side_phases = _curved_sides(params, gauge, neck)

    warnings: list[str] = []
    center_phase = ShapingPhase(
        name="center_bind_off",
        kind=ShapingKind.BIND_OFF,
        frequency=None,
        events=(
            (ShapingEvent(ShapingKind.BIND_OFF, center, 1, Placement.CENTER),) if center else ()
        ),
    )
    last_row = max((phase.last_row or 1 for phase in side_phases), default=1)
    if last_row > depth_rows:
        warnings.append(
            f"Neckline shaping needs {last_row} rows but the neckline depth "
            f"allows only {depth_rows}"
        )

    schedule = ShapingSchedule(
        method=params.style.value,
        starting_stitches=panel_stitches,
        final_stitch_count=2 * shoulder,
        total_rows=max(depth_rows, last_row),
        phases={
            ShapingSide.BOTH: (center_phase,),
            ShapingSide.LEFT: side_phases,
            ShapingSide.RIGHT: side_phases,
        },
    )
    warnings.extend(_proportion_warnings(params, gauge, center, panel_stitches))

    decreases_each_side = (neck - center) // 2
    logger.debug(
        "Neckline {}: panel {} sts, shoulders {} sts, center {} sts, "
        "{} decreases each side over {} rows",
        params.style.value,
        panel_stitches,
        shoulder,
        center,
        decreases_each_side,
        schedule.total_rows,
    )
    return ShapingResult(
        schedule=schedule,
        warnings=tuple(warnings),
        metrics={
            "panel_stitches": panel_stitches,
            "shoulder_stitches": shoulder,
            "neck_stitches": neck,
            "center_bind_off": center,
            "decreases_each_side": decreases_each_side,
            "depth_rows": depth_rows,
        },
    )


def _curved_sides(
    params: NecklineParams, gauge: Gauge, neck: int
) -> tuple[int, tuple[ShapingPhase, ...]]:
    center_ratio, rapid_ratio, gradual_ratio = STYLE_RATIOS[params.style]
    center = round_half_up(neck * center_ratio)
    # What is left after the center must split evenly between the sides.
    if (neck - center) % 2:
        center = center + 1 if center < neck else center - 1
    per_side = (neck - center) // 2
    rapid = round_half_up(per_side * rapid_ratio / (rapid_ratio + gradual_ratio))
    gradual = per_side - rapid
    rapid_every, gradual_every = neckline_cadence(params.depth, gauge.unit)

    rapid_phase = _decrease_phase("rapid", FIRST_DECREASE_ROW, Cadence(rapid_every, rapid))
    gradual_start = (rapid_phase.last_row or FIRST_DECREASE_ROW - gradual_every) + gradual_every
    gradual_phase = _decrease_phase("gradual", gradual_start, Cadence(gradual_every, gradual))
    return center, (rapid_phase, gradual_phase)


def _v_neck_sides(neck: int, depth_rows: int) -> tuple[int, tuple[ShapingPhase, ...]]:
    center = neck % 2
    per_side = (neck - center) // 2
    available = max(depth_rows - FIRST_DECREASE_ROW + 1, 1)
    if per_side > available:
        # Too shallow to spread: decrease every row and let the caller warn.
        cadences = [Cadence(every_n_rows=1, times=per_side)]
    else:
        cadences = distribute_events(per_side, available)

    names = ("rapid", "gradual")
    phases: list[ShapingPhase] = []
    row = FIRST_DECREASE_ROW - 1
    for name, cadence in zip(names, cadences):
        phases.append(_decrease_phase(name, row + cadence.every_n_rows, cadence))
        row += cadence.rows
    for name in names[len(phases) :]:
        phases.append(ShapingPhase(name=name, kind=ShapingKind.DECREASE, frequency=None))
    return center, tuple(phases)


def _decrease_phase(name: str, start_row: int, cadence: Cadence) -> ShapingPhase:
    if cadence.times <= 0:
        return ShapingPhase(name=name, kind=ShapingKind.DECREASE, frequency=None)
    return ShapingPhase(
        name=name,
        kind=ShapingKind.DECREASE,
        frequency=cadence.every_n_rows,
        events=(
            ShapingEvent(
                kind=ShapingKind.DECREASE,
                stitches=1,
                start_row=start_row,
                placement=Placement.NECK_EDGE,
                repeat=cadence.times,
                interval=cadence.every_n_rows,
            ),
        ),
    )


def _proportion_warnings(
    params: NecklineParams, gauge: Gauge, center: int, panel_stitches: int
) -> list[str]:
    warnings: list[str] = []
    if center > panel_stitches * 0.5:
        warnings.append(
            f"Center bind-off ({center} sts) is more than half the panel width "
            f"({panel_stitches} sts)"
        )
    elif params.style != NecklineStyle.V_NECK and center < panel_stitches * 0.1:
        warnings.append(
            f"Center bind-off ({center} sts) is less than 10% of the panel width "
            f"({panel_stitches} sts)"
        )
    if convert_length(params.depth, gauge.unit, LengthUnit.CM) > VERY_DEEP_CM:
        warnings.append(
            f"Very deep neckline ({params.depth:g}{gauge.unit.value}) - please verify measurements"
        )
    return warnings
