"""
Validation and reporting helpers shared by every shaper.
"""

from __future__ import annotations

import math

from knitwright.errors import InvalidShapingInputError
from knitwright.utilities.types import Gauge


def require_positive(value: float | None, label: str) -> float:
    """Return ``value`` or raise InvalidShapingInputError if it is absent, <= 0 or not finite."""
    if value is None or value <= 0:
        raise InvalidShapingInputError(f"{label} must be greater than 0")
    if not math.isfinite(value):
        raise InvalidShapingInputError(f"{label} must be a finite number")
    return value


def deviation_warning(
    label: str, achieved: float, target: float, tolerance: float, gauge: Gauge
) -> str | None:
    """
    Compare an achieved dimension with its target.

    Args:
        label: Dimension name used in the message (e.g. "wingspan").
        achieved: Dimension produced by the rounded stitch/row counts.
        target: Requested dimension.
        tolerance: Allowed relative deviation (0.1 for ±10%).
        gauge: Supplies the unit for the message.

    Returns:
        A warning message, or None when within tolerance.
    """
    if abs(achieved - target) <= target * tolerance:
        return None
    unit = gauge.unit.value
    return (
        f"Actual {label} ({achieved:.1f}{unit}) differs from target ({target:g}{unit}) "
        f"by more than {tolerance * 100:g}%"
    )
