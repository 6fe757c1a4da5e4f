"""
Stitch-pattern catalog records.

A definition is the static description of a motif as it arrives from the
pattern library. The row cursor that walks it lives in knitwright.pattern.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PatternRow:
    """One row of a motif: instruction text plus an optional note."""

    instruction: str
    note: str | None = None

    def __post_init__(self) -> None:
        if not self.instruction.strip():
            raise ValueError("PatternRow.instruction must not be empty")


@dataclass(frozen=True)
class StitchPatternDefinition:
    """
    A repeating decorative motif.

    Attributes:
        id: Catalog identifier.
        name: Display name (e.g. "Seed Stitch").
        rows: Pattern rows in working order; one per row of the repeat.
        repeat_width: Stitches per horizontal repeat.
        repeat_height: Rows per vertical repeat; must equal len(rows).
        full_repeats: Declared horizontal repeats across the body. When None
            the layout is derived from the stitch count.
        stockinette_each_side: Declared plain stitches between the edge
            allowance and the motif; only meaningful with ``full_repeats``.
    """

    id: str
    name: str
    rows: tuple[PatternRow, ...]
    repeat_width: int
    repeat_height: int
    full_repeats: int | None = None
    stockinette_each_side: int | None = None

    def __post_init__(self) -> None:
        if not self.rows:
            raise ValueError(f"StitchPatternDefinition {self.id!r}: rows must not be empty")
        if self.repeat_height != len(self.rows):
            raise ValueError(
                f"StitchPatternDefinition {self.id!r}: repeat_height {self.repeat_height} "
                f"does not match {len(self.rows)} pattern rows"
            )
        for name in ("full_repeats", "stockinette_each_side"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"StitchPatternDefinition {self.id!r}: {name} must be >= 0, got {value}")
        if self.stockinette_each_side is not None and self.full_repeats is None:
            raise ValueError(
                f"StitchPatternDefinition {self.id!r}: stockinette_each_side requires full_repeats"
            )
