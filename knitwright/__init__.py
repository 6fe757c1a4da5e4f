"""
knitwright: garment shaping and instruction generation engine.

Turns body measurements, ease, gauge and a construction method into stitch
and row counts, shaping schedules, and row-by-row knitting or crochet
instructions. Every entry point is a pure function of its inputs.

Logging goes through loguru and is disabled for this package by default;
call ``logger.enable("knitwright")`` to see it.
"""

from loguru import logger

__version__ = "0.1.0"

logger.disable("knitwright")
