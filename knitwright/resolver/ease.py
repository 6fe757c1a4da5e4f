"""
Measurement/Ease Resolver: body measurements plus ease -> finished dimensions.

For each measurement location:
  - explicit ease:  finished = body + ease
  - no explicit:    finished = body + base_ease * multiplier[location]
where base_ease is the bust ease and the multipliers come from the garment
type's row in ease_multipliers.yaml. Percentage ease scales the body
measurement instead of adding to it.

Absent body measurements stay absent. Chest circumference and torso length
are required; everything else is optional.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from knitwright.errors import InvalidShapingInputError, MissingMeasurementError
from knitwright.schemas.measurements import (
    EasePreference,
    EaseType,
    FinishedMeasurements,
    MeasurementSet,
)
from knitwright.tables.registry import TableRegistry, get_registry
from knitwright.utilities.conversion import convert_length

# measurement field -> (explicit ease attribute or None, multiplier attribute or None)
_EASE_SOURCES: dict[str, tuple[str | None, str | None]] = {
    "chest_circumference": (None, None),
    "torso_length": ("length", "length"),
    "waist_circumference": ("waist", "waist"),
    "hip_circumference": ("hip", "hip"),
    "shoulder_width": ("shoulder", "shoulder"),
    "arm_length": (None, "arm_length"),
    "upper_arm_circumference": ("sleeve", "upper_arm"),
    "neck_circumference": ("neck", "neck"),
}


@dataclass(frozen=True)
class EaseResolution:
    """Finished measurements plus advisory warnings."""

    finished: FinishedMeasurements
    warnings: tuple[str, ...] = ()


def resolve_finished_measurements(
    measurements: MeasurementSet,
    ease: EasePreference | None = None,
    garment_type: str = "sweater",
    registry: TableRegistry | None = None,
) -> EaseResolution:
    """
    Apply ease to body measurements.

    Args:
        measurements: Raw body measurements.
        ease: Ease preference; None means zero ease everywhere.
        garment_type: Key into the ease multiplier table. Unknown types use
            the table's fallback entry.
        registry: Table registry; defaults to the module singleton.

    Returns:
        EaseResolution with finished measurements in the measurement unit.

    Raises:
        MissingMeasurementError: Chest circumference or torso length is absent.
        InvalidShapingInputError: Ease drives a dimension to zero or below.
    """
    missing = measurements.missing_required()
    if missing:
        raise MissingMeasurementError(missing)

    registry = registry or get_registry()
    ease = ease or EasePreference()
    multipliers = registry.get_ease_multipliers(garment_type)
    unit = measurements.unit

    def to_measurement_unit(value: float) -> float:
        if ease.ease_type == EaseType.PERCENTAGE:
            return value
        return convert_length(value, ease.unit, unit)

    base = to_measurement_unit(ease.bust)
    finished: dict[str, float | None] = {}
    for name, (ease_attr, multiplier_attr) in _EASE_SOURCES.items():
        body = getattr(measurements, name)
        if body is None:
            finished[name] = None
            continue
        explicit = getattr(ease, ease_attr) if ease_attr else None
        if explicit is not None:
            amount = to_measurement_unit(explicit)
        elif multiplier_attr is None:
            amount = base
        else:
            amount = base * getattr(multipliers, multiplier_attr)

        if ease.ease_type == EaseType.PERCENTAGE:
            value = body * (1 + amount / 100)
        else:
            value = body + amount
        if value <= 0:
            raise InvalidShapingInputError(
                f"Finished {name.replace('_', ' ')} must be greater than 0 after ease "
                f"(body {body:g}{unit.value}, ease {amount:g})"
            )
        finished[name] = value

    result = FinishedMeasurements(unit=unit, **finished)  # type: ignore[arg-type]
    logger.debug(
        "Resolved finished measurements for {} ({}): chest={:.1f}, length={:.1f}",
        multipliers.garment_type,
        ease.ease_type.value,
        result.chest_circumference,
        result.torso_length,
    )
    return EaseResolution(finished=result, warnings=plausibility_warnings(result, registry))


def plausibility_warnings(
    finished: FinishedMeasurements, registry: TableRegistry | None = None
) -> tuple[str, ...]:
    """Advisory warnings for implausible finished dimensions."""
    registry = registry or get_registry()
    unit = finished.unit.value
    warnings: list[str] = []

    chest = finished.chest_circumference
    chest_range = registry.get_plausible_range("chest_circumference", finished.unit)
    if chest_range is not None and not chest_range.contains(chest):
        size = "small" if chest_range.min is not None and chest < chest_range.min else "large"
        warnings.append(f"Very {size} chest circumference: {chest:.1f}{unit}")

    length = finished.torso_length
    length_range = registry.get_plausible_range("torso_length", finished.unit)
    if length_range is not None and not length_range.contains(length):
        size = "short" if length_range.min is not None and length < length_range.min else "long"
        warnings.append(f"Very {size} garment length: {length:.1f}{unit}")

    ratio_range = registry.get_plausible_ratio("waist_to_chest")
    if finished.waist_circumference is not None and ratio_range is not None:
        ratio = finished.waist_circumference / chest
        if ratio_range.max is not None and ratio > ratio_range.max:
            warnings.append("Waist measurement is significantly larger than chest measurement")
        elif ratio_range.min is not None and ratio < ratio_range.min:
            warnings.append("Waist measurement is significantly smaller than chest measurement")

    return tuple(warnings)
