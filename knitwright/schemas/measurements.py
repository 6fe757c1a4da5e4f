"""
Body measurement, ease preference and finished measurement records.

Absent measurements are None, never zero: the resolver propagates unknown
values as unknown instead of inventing a dimension.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum

from knitwright.utilities.types import LengthUnit


class EaseType(str, Enum):
    """How ease values combine with body measurements."""

    ABSOLUTE = "absolute"  # finished = body + ease
    PERCENTAGE = "percentage"  # finished = body * (1 + ease / 100)


class GarmentType(str, Enum):
    SWEATER = "sweater"
    CARDIGAN = "cardigan"
    VEST = "vest"


# Measurement fields in declaration order; the first two are required.
MEASUREMENT_FIELDS: tuple[str, ...] = (
    "chest_circumference",
    "torso_length",
    "waist_circumference",
    "hip_circumference",
    "shoulder_width",
    "arm_length",
    "upper_arm_circumference",
    "neck_circumference",
)

REQUIRED_MEASUREMENTS: tuple[str, ...] = ("chest_circumference", "torso_length")


def _check_positive(record: object) -> None:
    for f in fields(record):  # type: ignore[arg-type]
        value = getattr(record, f.name)
        if f.name in MEASUREMENT_FIELDS and value is not None and value <= 0:
            raise ValueError(f"{type(record).__name__}.{f.name} must be > 0, got {value}")


@dataclass(frozen=True)
class MeasurementSet:
    """Raw body measurements in a single length unit."""

    chest_circumference: float | None = None
    torso_length: float | None = None
    waist_circumference: float | None = None
    hip_circumference: float | None = None
    shoulder_width: float | None = None
    arm_length: float | None = None
    upper_arm_circumference: float | None = None
    neck_circumference: float | None = None
    unit: LengthUnit = LengthUnit.CM

    def __post_init__(self) -> None:
        _check_positive(self)

    def missing_required(self) -> tuple[str, ...]:
        return tuple(name for name in REQUIRED_MEASUREMENTS if getattr(self, name) is None)


@dataclass(frozen=True)
class EasePreference:
    """
    Ease per measurement location.

    ``bust`` is the base ease: it applies to the chest directly and, scaled
    by the garment-type multiplier table, to every location without an
    explicit value. Values are signed (negative ease for fitted garments).

    Attributes:
        bust: Base ease.
        waist, hip, sleeve, length, shoulder, neck: Explicit per-location
            ease, or None to derive from the base ease. ``sleeve`` applies to
            the upper arm circumference.
        ease_type: Absolute length or percentage of the body measurement.
        unit: Unit of absolute ease values.
    """

    bust: float = 0.0
    waist: float | None = None
    hip: float | None = None
    sleeve: float | None = None
    length: float | None = None
    shoulder: float | None = None
    neck: float | None = None
    ease_type: EaseType = EaseType.ABSOLUTE
    unit: LengthUnit = LengthUnit.CM


@dataclass(frozen=True)
class FinishedMeasurements:
    """Garment dimensions after ease, in ``unit``. Unknown stays None."""

    chest_circumference: float
    torso_length: float
    waist_circumference: float | None = None
    hip_circumference: float | None = None
    shoulder_width: float | None = None
    arm_length: float | None = None
    upper_arm_circumference: float | None = None
    neck_circumference: float | None = None
    unit: LengthUnit = LengthUnit.CM

    def __post_init__(self) -> None:
        _check_positive(self)
