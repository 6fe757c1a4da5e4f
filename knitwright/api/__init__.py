"""Public API: one calculation per garment piece."""

from .calculate import calculate, calculate_garment
from .records import PIECE_KINDS, parse_calculation_input, piece_kind

__all__ = ["calculate", "calculate_garment", "parse_calculation_input", "piece_kind", "PIECE_KINDS"]
