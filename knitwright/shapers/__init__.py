"""
Shaping schedulers.

Each shaper turns target dimensions, a gauge and a starting stitch count
into a ShapingResult: a ShapingSchedule plus advisory warnings and derived
metrics. Shapers raise InvalidShapingInputError for unusable input.
"""

from .armhole import ArmholeRatios, armhole_ratios, shape_armhole
from .neckline import neckline_cadence, shape_neckline
from .panel import shape_rectangular_panel
from .taper import shape_taper, taper_summary
from .triangle import shape_triangular_shawl

__all__ = [
    "shape_triangular_shawl",
    "shape_neckline",
    "neckline_cadence",
    "shape_armhole",
    "armhole_ratios",
    "ArmholeRatios",
    "shape_rectangular_panel",
    "shape_taper",
    "taper_summary",
]
