"""
Core type definitions for the shared utilities layer.

All types are frozen dataclasses with fail-fast validation in __post_init__.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from knitwright.errors import InvalidGaugeError


class LengthUnit(str, Enum):
    """Length unit shared by measurements and gauge."""

    CM = "cm"
    INCH = "in"


@dataclass(frozen=True)
class Gauge:
    """
    Knitting or crochet gauge: stitch and row density per 10 length units.

    Both values must be finite and strictly positive. Gauges are immutable after
    construction and safe to share across calculations.
    """

    stitches_per_10: float
    rows_per_10: float
    unit: LengthUnit = LengthUnit.CM

    def __post_init__(self) -> None:
        unit = self.unit.value
        if not math.isfinite(self.stitches_per_10):
            raise InvalidGaugeError(f"Gauge stitches per 10{unit} must be a finite number")
        if not math.isfinite(self.rows_per_10):
            raise InvalidGaugeError(f"Gauge rows per 10{unit} must be a finite number")
        if self.stitches_per_10 <= 0:
            raise InvalidGaugeError(
                f"Gauge stitches per 10{unit} must be greater than 0"
            )
        if self.rows_per_10 <= 0:
            raise InvalidGaugeError(f"Gauge rows per 10{unit} must be greater than 0")

    @property
    def stitches_per_unit(self) -> float:
        return self.stitches_per_10 / 10

    @property
    def rows_per_unit(self) -> float:
        return self.rows_per_10 / 10
