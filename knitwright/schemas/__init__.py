"""
Schema definitions for knitwright data contracts.

Provides the immutable records (measurements, shaping schedules, stitch
patterns, instruction steps, calculation inputs and results) that flow
between the resolver, the shapers and the instruction generator.
"""

from .calculation import (
    ArmholeConstruction,
    ArmholeParams,
    CalculationInput,
    CalculationResult,
    ConstructionParams,
    NecklineParams,
    NecklineStyle,
    RectangularPanelParams,
    TaperParams,
    TriangleMethod,
    TriangularShawlParams,
)
from .instructions import Craft, InstructionKind, InstructionStep
from .measurements import (
    EasePreference,
    EaseType,
    FinishedMeasurements,
    GarmentType,
    MeasurementSet,
)
from .shaping import (
    FabricSide,
    Placement,
    ShapingEvent,
    ShapingKind,
    ShapingOccurrence,
    ShapingPhase,
    ShapingResult,
    ShapingSchedule,
    ShapingSide,
)
from .stitch_pattern import PatternRow, StitchPatternDefinition

__all__ = [
    # measurements
    "EaseType",
    "GarmentType",
    "MeasurementSet",
    "EasePreference",
    "FinishedMeasurements",
    # shaping
    "ShapingKind",
    "FabricSide",
    "ShapingSide",
    "Placement",
    "ShapingEvent",
    "ShapingPhase",
    "ShapingOccurrence",
    "ShapingSchedule",
    "ShapingResult",
    # stitch pattern
    "PatternRow",
    "StitchPatternDefinition",
    # instructions
    "Craft",
    "InstructionKind",
    "InstructionStep",
    # calculation
    "TriangleMethod",
    "NecklineStyle",
    "ArmholeConstruction",
    "TriangularShawlParams",
    "NecklineParams",
    "ArmholeParams",
    "RectangularPanelParams",
    "TaperParams",
    "ConstructionParams",
    "CalculationInput",
    "CalculationResult",
]
