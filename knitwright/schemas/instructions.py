"""
Instruction output records produced by the Instruction Generator.

Steps are immutable; consumers may group or paginate them but never mutate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from knitwright.schemas.shaping import FabricSide, ShapingSide


class Craft(str, Enum):
    KNITTING = "knitting"
    CROCHET = "crochet"


class InstructionKind(str, Enum):
    """What a step represents."""

    CAST_ON = "cast_on"
    ROW = "row"  # a worked row (plain, pattern or shaping)
    DIVIDE = "divide"  # split the work for a neck opening
    REJOIN = "rejoin"  # rejoin yarn to the held side
    FINISH = "finish"  # bind off / fasten off


@dataclass(frozen=True)
class InstructionStep:
    """
    One rendered instruction.

    Attributes:
        row_number: First row covered (0 for cast on; the last worked row for
            non-row steps such as divide or finish).
        end_row: Last row covered when consecutive rows were grouped, else None.
        side: Fabric side of the row, or None for grouped spans covering both
            sides and for non-row steps.
        text: Fully rendered instruction text.
        stitch_count: Live stitches after the step.
        kind: Step kind.
        is_shaping_row: True if stitches are added or removed on this row.
        is_pattern_row: True if a stitch-pattern row is worked.
        shaping_side: Which part of a split piece the step belongs to.
        note: Optional note carried from the pattern row.
    """

    row_number: int
    text: str
    stitch_count: int
    kind: InstructionKind = InstructionKind.ROW
    side: FabricSide | None = None
    end_row: int | None = None
    is_shaping_row: bool = False
    is_pattern_row: bool = False
    shaping_side: ShapingSide = ShapingSide.BOTH
    note: str | None = None

    def __post_init__(self) -> None:
        if self.end_row is not None and self.end_row < self.row_number:
            raise ValueError(
                f"InstructionStep.end_row {self.end_row} precedes row_number {self.row_number}"
            )
        if self.stitch_count < 0:
            raise ValueError(f"InstructionStep.stitch_count must be >= 0, got {self.stitch_count}")

    @property
    def row_span(self) -> int:
        """Number of rows the step covers (0 for non-row steps)."""
        if self.kind != InstructionKind.ROW:
            return 0
        return (self.end_row or self.row_number) - self.row_number + 1
