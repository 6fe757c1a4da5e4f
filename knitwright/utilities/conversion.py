"""
Unit conversion between physical lengths and stitch/row counts.

Lengths are in the gauge's own unit unless a function says otherwise.
All functions are pure and hold no state. Rounding is to the
nearest integer with halves rounded up, which matches hand calculation;
callers that need a particular parity adjust at the call site.
"""

from __future__ import annotations

import math

from .types import Gauge, LengthUnit

CM_PER_INCH: float = 2.54


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return math.floor(value + 0.5)


def convert_length(value: float, from_unit: LengthUnit, to_unit: LengthUnit) -> float:
    """Convert a length between centimetres and inches."""
    if from_unit == to_unit:
        return value
    if from_unit == LengthUnit.INCH:
        return value * CM_PER_INCH
    return value / CM_PER_INCH


def raw_stitch_count(length: float, gauge: Gauge) -> float:
    """Convert a length to a raw (non-integer) stitch count."""
    return length * gauge.stitches_per_10 / 10


def raw_row_count(length: float, gauge: Gauge) -> float:
    """Convert a length to a raw (non-integer) row count."""
    return length * gauge.rows_per_10 / 10


def length_to_stitches(length: float, gauge: Gauge) -> int:
    """Convert a length to the nearest whole stitch count."""
    return round_half_up(raw_stitch_count(length, gauge))


def length_to_rows(length: float, gauge: Gauge) -> int:
    """Convert a length to the nearest whole row count."""
    return round_half_up(raw_row_count(length, gauge))


def stitches_to_length(count: float, gauge: Gauge) -> float:
    """Convert a stitch count back to a length in the gauge unit."""
    return count / gauge.stitches_per_unit


def rows_to_length(count: float, gauge: Gauge) -> float:
    """Convert a row count back to a length in the gauge unit."""
    return count / gauge.rows_per_unit
