"""
Rectangular panel: an unshaped piece (scarf, blanket square, plain body panel).

Width and length convert straight to a cast-on and a row count. With a
stitch pattern the cast-on is moved to the nearest count that holds whole
repeats plus the edge allowance on both sides.
"""

from __future__ import annotations

from loguru import logger

from knitwright.schemas.calculation import RectangularPanelParams
from knitwright.schemas.shaping import ShapingResult, ShapingSchedule
from knitwright.schemas.stitch_pattern import StitchPatternDefinition
from knitwright.utilities.conversion import (
    length_to_rows,
    length_to_stitches,
    raw_stitch_count,
    rows_to_length,
    stitches_to_length,
)
from knitwright.utilities.repeats import align_to_repeat
from knitwright.utilities.types import Gauge

from .common import deviation_warning, require_positive

WIDTH_TOLERANCE = 0.05


def shape_rectangular_panel(
    params: RectangularPanelParams,
    gauge: Gauge,
    pattern: StitchPatternDefinition | None = None,
    edge_stitches: int = 0,
) -> ShapingResult:
    """
    Size a rectangular panel.

    Raises:
        InvalidShapingInputError: Width or length is absent or not positive.
    """
    width = require_positive(params.width, "Panel width")
    length = require_positive(params.length, "Panel length")

    if pattern is not None and pattern.repeat_width >= 1:
        cast_on = align_to_repeat(
            raw_stitch_count(width, gauge), pattern.repeat_width, extra=2 * edge_stitches
        )
    else:
        cast_on = max(1, length_to_stitches(width, gauge))
    rows = max(1, length_to_rows(length, gauge))

    schedule = ShapingSchedule(
        method="rectangular",
        starting_stitches=cast_on,
        final_stitch_count=cast_on,
        total_rows=rows,
    )
    achieved_width = stitches_to_length(cast_on, gauge)
    warning = deviation_warning("width", achieved_width, width, WIDTH_TOLERANCE, gauge)
    logger.debug("Rectangular panel: cast on {}, {} rows", cast_on, rows)
    return ShapingResult(
        schedule=schedule,
        warnings=(warning,) if warning else (),
        metrics={
            "cast_on_stitches": cast_on,
            "total_rows": rows,
            "achieved_width": achieved_width,
            "achieved_length": rows_to_length(rows, gauge),
        },
    )
