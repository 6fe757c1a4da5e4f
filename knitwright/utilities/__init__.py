"""
Shared utilities for the knitwright shaping engine.

Deterministic tools used identically by the resolver, the shapers and the
instruction generator: gauge types, unit conversion, repeat arithmetic, and
even distribution of shaping events.
"""

from .conversion import (
    CM_PER_INCH,
    convert_length,
    length_to_rows,
    length_to_stitches,
    raw_row_count,
    raw_stitch_count,
    round_half_up,
    rows_to_length,
    stitches_to_length,
)
from .repeats import RepeatLayout, align_to_repeat, aligned_counts, plan_repeat_layout
from .shaping import Cadence, distribute_events, ordinal
from .types import Gauge, LengthUnit

__all__ = [
    # types
    "Gauge",
    "LengthUnit",
    "Cadence",
    "RepeatLayout",
    # conversion
    "CM_PER_INCH",
    "convert_length",
    "round_half_up",
    "raw_stitch_count",
    "raw_row_count",
    "length_to_stitches",
    "length_to_rows",
    "stitches_to_length",
    "rows_to_length",
    # repeats
    "aligned_counts",
    "align_to_repeat",
    "plan_repeat_layout",
    # shaping
    "distribute_events",
    "ordinal",
]
