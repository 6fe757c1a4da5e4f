"""Stitch-pattern cursor."""

from .cursor import StitchPatternCursor

__all__ = ["StitchPatternCursor"]
