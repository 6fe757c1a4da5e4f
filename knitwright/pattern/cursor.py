"""
Stitch-pattern cursor: position within a repeating motif as rows are worked.

The cursor is an index into the motif's fixed row list that wraps modulo the
repeat height, so it never runs out. It knows nothing about shaping; the
Instruction Generator decides how a pattern row and a shaping row combine.

A cursor is owned by the one generation call that created it. It changes
only through advance() and explicit reset().
"""

from __future__ import annotations

from knitwright.schemas.stitch_pattern import PatternRow, StitchPatternDefinition
from knitwright.utilities.repeats import RepeatLayout, plan_repeat_layout


class StitchPatternCursor:
    """
    Row cursor plus horizontal layout for one stitch pattern on one piece.

    Attributes:
        pattern: The motif being worked.
        edge_stitches: Edge allowance each side, kept out of the motif.
        buffer_each_side: Stockinette stitches between edge and motif.
        full_repeats: Whole horizontal repeats worked across the body.
        leftover: Odd stockinette stitch after balancing the buffers.
    """

    def __init__(
        self,
        pattern: StitchPatternDefinition,
        edge_stitches: int = 0,
        buffer_each_side: int = 0,
        full_repeats: int = 0,
        leftover: int = 0,
    ) -> None:
        if min(edge_stitches, buffer_each_side, full_repeats, leftover) < 0:
            raise ValueError(
                "edge_stitches, buffer_each_side, full_repeats and leftover must be >= 0, got "
                f"{edge_stitches}, {buffer_each_side}, {full_repeats}, {leftover}"
            )
        self.pattern = pattern
        self.edge_stitches = edge_stitches
        self.buffer_each_side = buffer_each_side
        self.full_repeats = full_repeats
        self.leftover = leftover
        self._index = 0

    @classmethod
    def for_stitch_count(
        cls, pattern: StitchPatternDefinition, stitch_count: int, edge_stitches: int = 0
    ) -> StitchPatternCursor:
        """
        Lay the motif out across ``stitch_count`` stitches.

        A layout declared on the pattern is kept as declared so that
        validate() can report it against the real stitch count.
        """
        if pattern.repeat_width < 1:
            return cls(pattern, edge_stitches=edge_stitches)
        if pattern.full_repeats is not None:
            return cls(
                pattern,
                edge_stitches=edge_stitches,
                buffer_each_side=pattern.stockinette_each_side or 0,
                full_repeats=pattern.full_repeats,
            )
        layout = plan_repeat_layout(stitch_count, pattern.repeat_width, edge_stitches)
        return cls(
            pattern,
            edge_stitches=edge_stitches,
            buffer_each_side=layout.buffer_each_side,
            full_repeats=layout.full_repeats,
            leftover=layout.leftover,
        )

    @property
    def repeat_height(self) -> int:
        return self.pattern.repeat_height

    @property
    def planned_stitches(self) -> int:
        """Stitches the layout uses, edges included."""
        return (
            2 * (self.edge_stitches + self.buffer_each_side)
            + self.pattern.repeat_width * self.full_repeats
            + self.leftover
        )

    @property
    def position(self) -> int:
        """0-indexed position of the next row to be worked."""
        return self._index

    @property
    def row_number(self) -> int:
        """1-indexed pattern row number of the next row, as printed in instructions."""
        return self._index + 1

    def peek(self) -> PatternRow:
        """Return the next row without advancing."""
        return self.pattern.rows[self._index]

    def advance(self) -> PatternRow:
        """Return the next row and move past it, wrapping at the repeat height."""
        row = self.pattern.rows[self._index]
        self._index = (self._index + 1) % self.repeat_height
        return row

    def reset(self, position: int = 0) -> None:
        """Move the cursor to ``position`` (taken modulo the repeat height)."""
        self._index = position % self.repeat_height

    def layout_for(self, stitch_count: int) -> RepeatLayout:
        """
        Horizontal layout for a row of ``stitch_count`` stitches.

        The cursor's own layout is used while the row still holds exactly the
        planned stitches; after shaping changes the count the motif is laid
        out afresh.
        """
        if self.full_repeats > 0 and stitch_count == self.planned_stitches:
            return RepeatLayout(self.full_repeats, self.buffer_each_side, self.leftover)
        return plan_repeat_layout(stitch_count, self.pattern.repeat_width, self.edge_stitches)

    def validate(self, stitch_count: int) -> tuple[str, ...]:
        """
        Check the layout against a stitch budget.

        The edge allowance is taken off first; the remaining stitches must
        hold the full repeats plus the stockinette buffers and any leftover
        balancing stitch.

        Returns:
            Advisory warnings; empty when the layout uses exactly
            ``stitch_count`` stitches.
        """
        warnings: list[str] = []
        if self.pattern.repeat_width < 1:
            warnings.append(
                f"Pattern {self.pattern.name!r} has a repeat width of "
                f"{self.pattern.repeat_width}; it must be at least 1 stitch"
            )
            return tuple(warnings)
        if self.full_repeats == 0:
            warnings.append(
                f"Pattern {self.pattern.name!r} ({self.pattern.repeat_width} sts wide) "
                f"does not fit a full repeat in {stitch_count} stitches"
            )
            return tuple(warnings)
        available = stitch_count - 2 * self.edge_stitches
        pattern_stitches = self.pattern.repeat_width * self.full_repeats
        stockinette = 2 * self.buffer_each_side + self.leftover
        if pattern_stitches + stockinette != available:
            if stockinette > 0:
                expected = (
                    f"{pattern_stitches} pattern stitches + {stockinette} stockinette stitches"
                )
            else:
                expected = f"{pattern_stitches} pattern stitches"
            warnings.append(
                f"Stitch count mismatch: Expected {expected}, "
                f"but have {available} available stitches"
            )
        return tuple(warnings)
