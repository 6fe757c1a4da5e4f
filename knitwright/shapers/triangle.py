"""
Closed-shape (triangular shawl) shaper.

Three mutually exclusive constructions:

top_down_center_out
    Cast on 3. Every other row adds 4 stitches: one at each edge and one each
    side of a center spine. Rows come from the target depth.
side_to_side
    Cast on 4. Increase 1 stitch at the row start every other row until the
    depth in stitches is reached, then decrease the same edge at the same
    rate back to 4.
bottom_up
    Cast on the wingspan in stitches. Decrease 1 stitch at each edge every
    other row until 3 remain.

Achieved dimensions are computed from the rounded event counts and compared
with the targets; deviations beyond the per-method tolerance are warnings.

The 0.7 wingspan factor for top-down shawls is an empirical calibration
value: validate it against a blocked swatch before changing it.
"""

from __future__ import annotations

from loguru import logger

from knitwright.schemas.calculation import TriangleMethod, TriangularShawlParams
from knitwright.schemas.shaping import (
    Placement,
    ShapingEvent,
    ShapingKind,
    ShapingPhase,
    ShapingResult,
    ShapingSchedule,
    ShapingSide,
)
from knitwright.utilities.conversion import length_to_rows, length_to_stitches
from knitwright.utilities.types import Gauge

from .common import deviation_warning, require_positive

TOP_DOWN_CAST_ON = 3
SIDE_TO_SIDE_CAST_ON = 4
BOTTOM_UP_FINAL_STITCHES = 3
SHAPING_FREQUENCY = 2
TOP_DOWN_WINGSPAN_FACTOR = 0.7

# method -> (wingspan tolerance, depth tolerance)
TOLERANCES: dict[TriangleMethod, tuple[float, float]] = {
    TriangleMethod.TOP_DOWN_CENTER_OUT: (0.15, 0.10),
    TriangleMethod.SIDE_TO_SIDE: (0.10, 0.15),
    TriangleMethod.BOTTOM_UP: (0.05, 0.10),
}


def shape_triangular_shawl(params: TriangularShawlParams, gauge: Gauge) -> ShapingResult:
    """
    Build the shaping schedule for a triangular shawl.

    Raises:
        InvalidShapingInputError: Wingspan or depth is not positive.
    """
    require_positive(params.wingspan, "Target wingspan")
    require_positive(params.depth, "Target depth")

    match params.method:
        case TriangleMethod.TOP_DOWN_CENTER_OUT:
            schedule, wingspan, depth = _top_down(params, gauge)
        case TriangleMethod.SIDE_TO_SIDE:
            schedule, wingspan, depth = _side_to_side(params, gauge)
        case TriangleMethod.BOTTOM_UP:
            schedule, wingspan, depth = _bottom_up(params, gauge)
        case _:
            raise ValueError(f"Unsupported triangle method: {params.method!r}")

    wingspan_tolerance, depth_tolerance = TOLERANCES[params.method]
    warnings = [
        message
        for message in (
            deviation_warning("wingspan", wingspan, params.wingspan, wingspan_tolerance, gauge),
            deviation_warning("depth", depth, params.depth, depth_tolerance, gauge),
        )
        if message is not None
    ]
    logger.debug(
        "Triangle {}: cast on {}, final {}, {} rows, achieved {:.1f} x {:.1f}",
        params.method.value,
        schedule.starting_stitches,
        schedule.final_stitch_count,
        schedule.total_rows,
        wingspan,
        depth,
    )
    return ShapingResult(
        schedule=schedule,
        warnings=tuple(warnings),
        metrics={
            "cast_on_stitches": schedule.starting_stitches,
            "final_stitch_count": schedule.final_stitch_count,
            "total_rows": schedule.total_rows,
            "achieved_wingspan": wingspan,
            "achieved_depth": depth,
        },
    )


def _top_down(params: TriangularShawlParams, gauge: Gauge) -> tuple[ShapingSchedule, float, float]:
    events = length_to_rows(params.depth, gauge) // 2
    total_rows = events * SHAPING_FREQUENCY
    final = TOP_DOWN_CAST_ON + 4 * events
    increases = ShapingPhase(
        name="increases",
        kind=ShapingKind.INCREASE,
        frequency=SHAPING_FREQUENCY,
        events=_single_event(ShapingKind.INCREASE, 4, 1, Placement.CENTER_AND_ENDS, events),
    )
    schedule = ShapingSchedule(
        method=TriangleMethod.TOP_DOWN_CENTER_OUT.value,
        starting_stitches=TOP_DOWN_CAST_ON,
        final_stitch_count=final,
        total_rows=total_rows,
        phases={ShapingSide.BOTH: (increases,)},
    )
    wingspan = final * TOP_DOWN_WINGSPAN_FACTOR / gauge.stitches_per_unit
    depth = total_rows / gauge.rows_per_unit
    return schedule, wingspan, depth


def _side_to_side(
    params: TriangularShawlParams, gauge: Gauge
) -> tuple[ShapingSchedule, float, float]:
    events = max(0, length_to_stitches(params.depth, gauge) - SIDE_TO_SIDE_CAST_ON)
    phase_rows = events * SHAPING_FREQUENCY
    increases = ShapingPhase(
        name="increases",
        kind=ShapingKind.INCREASE,
        frequency=SHAPING_FREQUENCY,
        events=_single_event(ShapingKind.INCREASE, 1, 1, Placement.ROW_START, events),
    )
    decreases = ShapingPhase(
        name="decreases",
        kind=ShapingKind.DECREASE,
        frequency=SHAPING_FREQUENCY,
        events=_single_event(
            ShapingKind.DECREASE, 1, phase_rows + 1, Placement.ROW_START, events
        ),
    )
    total_rows = 2 * phase_rows
    schedule = ShapingSchedule(
        method=TriangleMethod.SIDE_TO_SIDE.value,
        starting_stitches=SIDE_TO_SIDE_CAST_ON,
        final_stitch_count=SIDE_TO_SIDE_CAST_ON,
        total_rows=total_rows,
        phases={ShapingSide.BOTH: (increases, decreases)},
    )
    wingspan = total_rows / gauge.rows_per_unit
    depth = (SIDE_TO_SIDE_CAST_ON + events) / gauge.stitches_per_unit
    return schedule, wingspan, depth


def _bottom_up(params: TriangularShawlParams, gauge: Gauge) -> tuple[ShapingSchedule, float, float]:
    cast_on = max(BOTTOM_UP_FINAL_STITCHES, length_to_stitches(params.wingspan, gauge))
    # Each event removes 2, so the excess over the final count must be even.
    if (cast_on - BOTTOM_UP_FINAL_STITCHES) % 2:
        cast_on += 1
    events = (cast_on - BOTTOM_UP_FINAL_STITCHES) // 2
    total_rows = events * SHAPING_FREQUENCY
    decreases = ShapingPhase(
        name="decreases",
        kind=ShapingKind.DECREASE,
        frequency=SHAPING_FREQUENCY,
        events=_single_event(ShapingKind.DECREASE, 2, 1, Placement.BOTH_ENDS, events),
    )
    schedule = ShapingSchedule(
        method=TriangleMethod.BOTTOM_UP.value,
        starting_stitches=cast_on,
        final_stitch_count=BOTTOM_UP_FINAL_STITCHES,
        total_rows=total_rows,
        phases={ShapingSide.BOTH: (decreases,)},
    )
    wingspan = cast_on / gauge.stitches_per_unit
    depth = total_rows / gauge.rows_per_unit
    return schedule, wingspan, depth


def _single_event(
    kind: ShapingKind, stitches: int, start_row: int, placement: Placement, repeat: int
) -> tuple[ShapingEvent, ...]:
    """One repeated event every SHAPING_FREQUENCY rows, or nothing for zero repeats."""
    if repeat <= 0:
        return ()
    return (
        ShapingEvent(
            kind=kind,
            stitches=stitches,
            start_row=start_row,
            placement=placement,
            repeat=repeat,
            interval=SHAPING_FREQUENCY,
        ),
    )
