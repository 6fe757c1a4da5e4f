"""
Entry types for the YAML lookup tables.

All entries are frozen after load and never written to at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType

from knitwright.schemas.instructions import Craft


@dataclass(frozen=True)
class EaseMultipliers:
    """Default ease multipliers for one garment type."""

    garment_type: str
    waist: float
    hip: float
    length: float
    arm_length: float
    upper_arm: float
    shoulder: float
    neck: float


@dataclass(frozen=True)
class PlausibleRange:
    """Inclusive advisory range; either bound may be open."""

    min: float | None = None
    max: float | None = None

    def contains(self, value: float) -> bool:
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True

    def scaled(self, factor: float) -> PlausibleRange:
        """Return the range with both bounds multiplied by ``factor``."""
        return PlausibleRange(
            min=None if self.min is None else self.min * factor,
            max=None if self.max is None else self.max * factor,
        )


@dataclass(frozen=True)
class CraftTemplates:
    """
    Instruction templates for one craft.

    Attributes:
        craft: The craft these templates render.
        kinds: Instruction kind -> template text.
        labels: Shaping kind value -> label used in shaping row headers.
        shaping: Shaping phrase key -> template text.
        pattern_shaping: Shaping phrase key -> template text for rows worked
            in a stitch pattern.
    """

    craft: Craft
    kinds: MappingProxyType[str, str] = field(default_factory=lambda: MappingProxyType({}))
    labels: MappingProxyType[str, str] = field(default_factory=lambda: MappingProxyType({}))
    shaping: MappingProxyType[str, str] = field(default_factory=lambda: MappingProxyType({}))
    pattern_shaping: MappingProxyType[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        # Accept plain dicts at construction sites and promote to MappingProxyType.
        for name in ("kinds", "labels", "shaping", "pattern_shaping"):
            value = getattr(self, name)
            if isinstance(value, dict):
                object.__setattr__(self, name, MappingProxyType(value))
