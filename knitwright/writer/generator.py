"""
InstructionGenerator: turns a shaping schedule and/or a stitch pattern into
row-by-row instructions.

Pipeline for one piece:
  1. Optional cast-on step (row 0).
  2. Rows worked at full width, one per row, applying every shaping
     occurrence the schedule places on that row and advancing the pattern
     cursor once per row.
  3. For split pieces (necklines): a divide step, the left side's rows, a
     rejoin step, then the right side's rows. The right side restarts the
     pattern cursor where the left side started.
  4. Optional finishing step (bind off / fasten off).

Consecutive unshaped rows with identical text collapse into one "Rows i–j"
step. Shaping rows are never collapsed. The abbreviation pass, when enabled,
runs over each finished step.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from knitwright.pattern.cursor import StitchPatternCursor
from knitwright.schemas.instructions import Craft, InstructionKind, InstructionStep
from knitwright.schemas.shaping import (
    FabricSide,
    Placement,
    ShapingKind,
    ShapingOccurrence,
    ShapingSchedule,
    ShapingSide,
)
from knitwright.schemas.stitch_pattern import StitchPatternDefinition
from knitwright.tables.registry import TableRegistry, get_registry
from knitwright.writer.templates import (
    render_cast_on,
    render_divide,
    render_finish,
    render_pattern_body,
    render_pattern_edge_shaping,
    render_pattern_shaped,
    render_plain_body,
    render_rejoin,
    render_row,
    render_row_group,
    render_shaping_phrase,
    render_shaping_row,
)
from knitwright.writer.terminology import apply_terminology


@dataclass(frozen=True)
class GeneratorOutput:
    """Instruction steps plus advisory warnings raised while generating them."""

    steps: tuple[InstructionStep, ...]
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class _WorkedRow:
    """One row before grouping."""

    row: int
    side: FabricSide
    body: str
    text: str
    count: int
    is_shaping: bool
    is_pattern: bool
    note: str | None


@runtime_checkable
class InstructionWriter(Protocol):
    """Protocol for instruction generators."""

    def generate(
        self,
        starting_stitches: int,
        schedule: ShapingSchedule | None = None,
        pattern: StitchPatternDefinition | None = None,
        edge_stitches: int = 0,
        total_rows: int | None = None,
        cast_on: bool = False,
        finish: bool = False,
    ) -> GeneratorOutput: ...


class InstructionGenerator:
    """
    Deterministic template-based instruction generator.

    Uses the TableRegistry templates for the chosen craft. When
    ``abbreviate`` is set, the terminology for (craft, language) is looked up
    at construction so an unknown language fails before any row is written.
    """

    def __init__(
        self,
        craft: Craft = Craft.KNITTING,
        language: str = "en",
        abbreviate: bool = False,
        registry: TableRegistry | None = None,
    ) -> None:
        self.craft = craft
        self.language = language
        self.registry = registry or get_registry()
        self.templates = self.registry.get_templates(craft)
        self._terms = self.registry.get_terminology(craft, language) if abbreviate else None

    def generate(
        self,
        starting_stitches: int,
        schedule: ShapingSchedule | None = None,
        pattern: StitchPatternDefinition | None = None,
        edge_stitches: int = 0,
        total_rows: int | None = None,
        cast_on: bool = False,
        finish: bool = False,
    ) -> GeneratorOutput:
        """
        Produce the ordered instruction steps for one piece.

        Parameters
        ----------
        starting_stitches:
            Live stitches before row 1. Must match the schedule when one is given.
        schedule:
            Shaping schedule to follow; None for an unshaped piece.
        pattern:
            Stitch pattern worked on every row; None for stockinette.
        edge_stitches:
            Edge allowance each side, kept out of the pattern and used for
            edge shaping.
        total_rows:
            Rows to write. Defaults to the schedule's total rows, else one
            full pattern repeat.
        cast_on, finish:
            Emit a cast-on step before row 1 / a finishing step after the last row.

        Returns
        -------
        GeneratorOutput
            Steps in working order plus pattern layout warnings.
        """
        if schedule is not None and schedule.starting_stitches != starting_stitches:
            raise ValueError(
                f"starting_stitches {starting_stitches} does not match the schedule's "
                f"{schedule.starting_stitches}"
            )
        if total_rows is None:
            if schedule is not None:
                total_rows = schedule.total_rows
            elif pattern is not None:
                total_rows = pattern.repeat_height
            else:
                raise ValueError("total_rows is required without a schedule or pattern")

        warnings: tuple[str, ...] = ()
        cursor: StitchPatternCursor | None = None
        if pattern is not None:
            cursor = StitchPatternCursor.for_stitch_count(pattern, starting_stitches, edge_stitches)
            warnings = cursor.validate(starting_stitches)

        occurrences: dict[ShapingSide, dict[int, list[ShapingOccurrence]]] = defaultdict(
            lambda: defaultdict(list)
        )
        if schedule is not None:
            for occurrence in schedule.iter_occurrences():
                occurrences[occurrence.side][occurrence.row].append(occurrence)

        steps: list[InstructionStep] = []
        if cast_on:
            steps.append(
                self._step(
                    0, render_cast_on(self.templates, starting_stitches), starting_stitches,
                    kind=InstructionKind.CAST_ON,
                )
            )

        count = starting_stitches
        if schedule is None or not schedule.is_split:
            rows = self._work_rows(
                range(1, total_rows + 1), count, occurrences[ShapingSide.BOTH],
                ShapingSide.BOTH, cursor, edge_stitches,
            )
            steps.extend(self._collapse(rows, ShapingSide.BOTH))
            if rows:
                count = rows[-1].count
        else:
            split_row = max(occurrences[ShapingSide.BOTH], default=1)
            rows = self._work_rows(
                range(1, split_row + 1), count, occurrences[ShapingSide.BOTH],
                ShapingSide.BOTH, cursor, edge_stitches,
            )
            steps.extend(self._collapse(rows, ShapingSide.BOTH))

            side_rows = range(split_row + 1, total_rows + 1)
            resume_at = cursor.position if cursor is not None else 0
            left = schedule.side_starting_stitches(ShapingSide.LEFT)
            steps.append(
                self._step(split_row, render_divide(self.templates, left), left,
                           kind=InstructionKind.DIVIDE, shaping_side=ShapingSide.LEFT)
            )
            rows = self._work_rows(
                side_rows, left, occurrences[ShapingSide.LEFT], ShapingSide.LEFT,
                cursor, edge_stitches,
            )
            steps.extend(self._collapse(rows, ShapingSide.LEFT))

            right = schedule.side_starting_stitches(ShapingSide.RIGHT)
            steps.append(
                self._step(split_row, render_rejoin(self.templates, right), right,
                           kind=InstructionKind.REJOIN, shaping_side=ShapingSide.RIGHT)
            )
            if cursor is not None:
                cursor.reset(resume_at)
            rows = self._work_rows(
                side_rows, right, occurrences[ShapingSide.RIGHT], ShapingSide.RIGHT,
                cursor, edge_stitches,
            )
            steps.extend(self._collapse(rows, ShapingSide.RIGHT))
            count = schedule.final_stitch_count

        if finish:
            steps.append(
                self._step(total_rows, render_finish(self.templates, count), count,
                           kind=InstructionKind.FINISH)
            )
        return GeneratorOutput(steps=tuple(steps), warnings=warnings)

    # ── Rows ───────────────────────────────────────────────────────────────────

    def _work_rows(
        self,
        row_numbers: range,
        count: int,
        occurrences: dict[int, list[ShapingOccurrence]],
        piece_side: ShapingSide,
        cursor: StitchPatternCursor | None,
        edge_stitches: int,
    ) -> list[_WorkedRow]:
        worked: list[_WorkedRow] = []
        for row in row_numbers:
            side = FabricSide.for_row(row)
            pattern_number = cursor.row_number if cursor is not None else 0
            pattern_row = cursor.advance() if cursor is not None else None
            shaping = occurrences.get(row, [])

            if shaping:
                after = count + sum(o.event.kind.sign * o.event.stitches for o in shaping)
                if pattern_row is not None and _fits_edge_allowance(shaping, edge_stitches):
                    body = render_pattern_edge_shaping(
                        self.templates, shaping[0].event.kind, side, pattern_number,
                        pattern_row.instruction, edge_stitches,
                    )
                else:
                    body = "; ".join(
                        render_shaping_phrase(
                            self.templates,
                            o.event.kind,
                            o.event.placement,
                            side,
                            piece_side,
                            stitches=o.event.stitches,
                            before=(count - o.event.stitches) // 2,
                            after=after,
                            within_pattern=pattern_row is not None,
                        )
                        for o in shaping
                    )
                    if pattern_row is not None:
                        body = render_pattern_shaped(
                            self.templates, body, pattern_number, pattern_row.instruction
                        )
                count = after
                text = render_shaping_row(
                    self.templates, row, side, shaping[0].event.kind, body, count
                )
            else:
                if pattern_row is None:
                    body = render_plain_body(self.templates)
                else:
                    body = self._pattern_body(cursor, pattern_number, pattern_row.instruction,
                                              count, edge_stitches)
                text = render_row(self.templates, row, side, body, count)

            worked.append(
                _WorkedRow(
                    row=row,
                    side=side,
                    body=body,
                    text=text,
                    count=count,
                    is_shaping=bool(shaping),
                    is_pattern=pattern_row is not None,
                    note=pattern_row.note if pattern_row is not None else None,
                )
            )
        return worked

    def _pattern_body(
        self,
        cursor: StitchPatternCursor | None,
        pattern_number: int,
        instruction: str,
        count: int,
        edge_stitches: int,
    ) -> str:
        width = cursor.pattern.repeat_width if cursor is not None else 0
        if width < 1:
            return render_pattern_body(self.templates, pattern_number, instruction, 0, 0, 0)
        layout = cursor.layout_for(count)
        if layout.full_repeats == 0:
            return render_pattern_body(self.templates, pattern_number, instruction, 0, 0, 0)
        before = edge_stitches + layout.buffer_each_side
        after = before + layout.leftover
        return render_pattern_body(
            self.templates, pattern_number, instruction, layout.full_repeats, before, after
        )

    def _collapse(self, rows: list[_WorkedRow], piece_side: ShapingSide) -> list[InstructionStep]:
        """Group runs of identical unshaped rows; keep shaping rows separate."""
        steps: list[InstructionStep] = []
        i = 0
        while i < len(rows):
            first = rows[i]
            j = i
            if not first.is_shaping:
                while (
                    j + 1 < len(rows)
                    and not rows[j + 1].is_shaping
                    and rows[j + 1].body == first.body
                    and rows[j + 1].note == first.note
                ):
                    j += 1
            last = rows[j]
            if j == i:
                steps.append(
                    self._step(
                        first.row, first.text, first.count,
                        side=first.side,
                        is_shaping_row=first.is_shaping,
                        is_pattern_row=first.is_pattern,
                        shaping_side=piece_side,
                        note=first.note,
                    )
                )
            else:
                text = render_row_group(self.templates, first.row, last.row, first.body, last.count)
                steps.append(
                    self._step(
                        first.row, text, last.count,
                        end_row=last.row,
                        is_pattern_row=first.is_pattern,
                        shaping_side=piece_side,
                        note=first.note,
                    )
                )
            i = j + 1
        return steps

    def _step(
        self,
        row_number: int,
        text: str,
        stitch_count: int,
        kind: InstructionKind = InstructionKind.ROW,
        side: FabricSide | None = None,
        end_row: int | None = None,
        is_shaping_row: bool = False,
        is_pattern_row: bool = False,
        shaping_side: ShapingSide = ShapingSide.BOTH,
        note: str | None = None,
    ) -> InstructionStep:
        if self._terms is not None:
            text = apply_terminology(text, self._terms)
        return InstructionStep(
            row_number=row_number,
            text=text,
            stitch_count=stitch_count,
            kind=kind,
            side=side,
            end_row=end_row,
            is_shaping_row=is_shaping_row,
            is_pattern_row=is_pattern_row,
            shaping_side=shaping_side,
            note=note,
        )


def _fits_edge_allowance(shaping: list[ShapingOccurrence], edge_stitches: int) -> bool:
    """True when one stitch at each edge can be shaped inside the edge allowance."""
    if edge_stitches < 1 or len(shaping) != 1:
        return False
    event = shaping[0].event
    return (
        event.placement == Placement.BOTH_ENDS
        and event.kind in (ShapingKind.DECREASE, ShapingKind.INCREASE)
        and event.stitches == 2
    )
