"""
Taper shaper: a straight run of increases or decreases between two widths.

Used for sleeves, body side seams and any section that only widens or
narrows. The stitch change is split into shaping rows of
``stitches_per_event`` stitches and spread over the section:

    shaping rows = ceil(|target - start| / stitches_per_event)

When the rows do not divide evenly the frequent cadence is worked first,
as in "decrease 2 stitches every 4th row 7 times, then every 5th row 3
times". The last shaping row falls on the last row of the section. When the
change is not a multiple of ``stitches_per_event`` the last shaping row
works only the remainder, so the section always ends on the target count.

Placement follows the stitches per row: 1 at the row start, 2 one at each
end, more spread evenly across the row.
"""

from __future__ import annotations

from loguru import logger

from knitwright.errors import InvalidShapingInputError
from knitwright.schemas.calculation import TaperParams
from knitwright.schemas.shaping import (
    Placement,
    ShapingEvent,
    ShapingKind,
    ShapingPhase,
    ShapingResult,
    ShapingSchedule,
    ShapingSide,
)
from knitwright.utilities.conversion import length_to_rows, length_to_stitches
from knitwright.utilities.shaping import Cadence, distribute_events, ordinal
from knitwright.utilities.types import Gauge

from .common import require_positive

VERY_LONG_SECTION_ROWS = 500


def shape_taper(params: TaperParams, gauge: Gauge) -> ShapingResult:
    """
    Build a linear shaping schedule from the starting to the target count.

    Raises:
        InvalidShapingInputError: A count or dimension is missing or not
            positive, or the section has fewer rows than shaping rows.
    """
    start = _stitch_count(params.start_stitches, params.start_width, gauge, "Starting")
    target = _stitch_count(params.target_stitches, params.target_width, gauge, "Target")
    rows = _row_count(params, gauge)
    per_event = int(require_positive(params.stitches_per_event, "Stitches per shaping event"))

    change = abs(target - start)
    shaping_rows = -(-change // per_event)
    if shaping_rows > rows:
        raise InvalidShapingInputError(
            f"Not enough rows for shaping: need {shaping_rows} shaping rows "
            f"but only have {rows} total rows"
        )

    kind = ShapingKind.INCREASE if target > start else ShapingKind.DECREASE
    cadences = distribute_events(shaping_rows, rows)
    phases = _phases(kind, cadences, change, per_event)
    schedule = ShapingSchedule(
        method="taper",
        starting_stitches=start,
        final_stitch_count=target,
        total_rows=rows,
        phases={ShapingSide.BOTH: phases},
    )

    warnings: list[str] = []
    if 0 < change < per_event:
        warnings.append("Total stitch change is less than stitches per shaping event")
    if rows > VERY_LONG_SECTION_ROWS:
        warnings.append("Very large number of rows for shaping - please verify")
    if change > start:
        warnings.append(
            "Large change relative to starting stitch count - please verify measurements"
        )

    summary = taper_summary(kind, per_event, cadences, change % per_event)
    logger.debug("Taper {} -> {} sts over {} rows: {}", start, target, rows, summary)
    return ShapingResult(
        schedule=schedule,
        warnings=tuple(warnings),
        metrics={
            "starting_stitches": start,
            "target_stitches": target,
            "stitch_change": change,
            "shaping_rows": shaping_rows,
            "total_rows": rows,
            "stitches_per_event": per_event,
            "summary": summary,
        },
    )


def taper_summary(
    kind: ShapingKind, per_event: int, cadences: list[Cadence], remainder: int = 0
) -> str:
    """
    One-line description of a taper, e.g.
    "Decrease 2 stitches every 4th row 7 times, then every 5th row 3 times."
    """
    if not cadences:
        return "No shaping needed."
    action = "Increase" if kind == ShapingKind.INCREASE else "Decrease"
    stitches = "1 stitch" if per_event == 1 else f"{per_event} stitches"
    first = cadences[0]
    text = f"{action} {stitches} every {ordinal(first.every_n_rows)} row"
    if len(cadences) == 1:
        text += f", {_times(first.times)}."
    else:
        then = cadences[1]
        text += (
            f" {_times(first.times)}, then every {ordinal(then.every_n_rows)} row {_times(then.times)}."
        )
    if remainder:
        noun = "stitch" if remainder == 1 else "stitches"
        text += f" The last shaping row {action.lower()}s only {remainder} {noun}."
    return text


# ── Helpers ────────────────────────────────────────────────────────────────────


def _times(n: int) -> str:
    return "once" if n == 1 else f"{n} times"


def _stitch_count(explicit: int | None, width: float | None, gauge: Gauge, label: str) -> int:
    if explicit is not None:
        return int(require_positive(explicit, f"{label} stitch count"))
    if width is None:
        raise InvalidShapingInputError(
            f"{label} stitch count is unknown: supply a stitch count or a width"
        )
    require_positive(width, f"{label} width")
    return int(require_positive(length_to_stitches(width, gauge), f"{label} stitch count"))


def _row_count(params: TaperParams, gauge: Gauge) -> int:
    if params.rows is not None:
        return int(require_positive(params.rows, "Shaping rows"))
    if params.length is None:
        raise InvalidShapingInputError("Shaping rows are unknown: supply rows or a length")
    require_positive(params.length, "Shaping length")
    return int(require_positive(length_to_rows(params.length, gauge), "Shaping rows"))


def _placement(stitches: int) -> Placement:
    if stitches == 1:
        return Placement.ROW_START
    if stitches == 2:
        return Placement.BOTH_ENDS
    return Placement.EVENLY


def _phases(
    kind: ShapingKind, cadences: list[Cadence], change: int, per_event: int
) -> tuple[ShapingPhase, ...]:
    remainder = change % per_event
    names = ("rapid", "gradual") if len(cadences) > 1 else ("taper",)
    phases: list[ShapingPhase] = []
    row = 0
    for index, (name, cadence) in enumerate(zip(names, cadences)):
        times = cadence.times
        if remainder and index == len(cadences) - 1:
            # The final shaping row moves to its own phase.
            times -= 1
        start_row = row + cadence.every_n_rows
        phases.append(_phase(name, kind, per_event, start_row, cadence.every_n_rows, times))
        row += cadence.rows
    if remainder:
        phases.append(_phase("final", kind, remainder, row, None, 1))
    return tuple(phases)


def _phase(
    name: str, kind: ShapingKind, stitches: int, start_row: int, every: int | None, times: int
) -> ShapingPhase:
    if times <= 0:
        return ShapingPhase(name=name, kind=kind, frequency=None)
    return ShapingPhase(
        name=name,
        kind=kind,
        frequency=every,
        events=(
            ShapingEvent(
                kind=kind,
                stitches=stitches,
                start_row=start_row,
                placement=_placement(stitches),
                repeat=times,
                interval=every if times > 1 else None,
            ),
        ),
    )
