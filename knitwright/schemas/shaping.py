"""
Shaping event model shared by every shaper.

A schedule is made of phases; a phase is a homogeneous run of events sharing
one cadence; an event is a single shaping action optionally repeated every N
rows. Rows are numbered from 1 and row 1 is a right-side row, so odd rows are
worked on the right side in flat construction.

ShapingSchedule is the unit of exchange between the shapers and the
Instruction Generator. Both sides read it through iter_occurrences() so they
agree on which row does what.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterator, NamedTuple

# ── Enums ──────────────────────────────────────────────────────────────────────


class ShapingKind(str, Enum):
    BIND_OFF = "bind_off"
    DECREASE = "decrease"
    INCREASE = "increase"

    @property
    def sign(self) -> int:
        """+1 for stitch-adding kinds, -1 for stitch-removing kinds."""
        return 1 if self is ShapingKind.INCREASE else -1


class FabricSide(str, Enum):
    """Right side (public face) or wrong side of flat fabric."""

    RS = "RS"
    WS = "WS"

    @classmethod
    def for_row(cls, row: int) -> FabricSide:
        return cls.RS if row % 2 == 1 else cls.WS


class ShapingSide(str, Enum):
    """Which part of a (possibly split) piece a phase applies to."""

    BOTH = "both"
    LEFT = "left"
    RIGHT = "right"


class Placement(str, Enum):
    """Where along the row the stitches are added or removed."""

    BOTH_ENDS = "both_ends"  # one stitch (or block) at each edge
    ROW_START = "row_start"  # at the beginning of the row only
    CENTER = "center"  # a block in the middle of the row
    CENTER_AND_ENDS = "center_and_ends"  # both edges plus either side of a center spine
    NECK_EDGE = "neck_edge"  # the edge facing the neck opening
    EVENLY = "evenly"  # spread across the row


# ── Events and phases ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ShapingEvent:
    """
    One discrete shaping action, optionally repeated.

    Attributes:
        kind: bind_off, decrease or increase.
        stitches: Stitches added or removed per occurrence (> 0).
        start_row: Row of the first occurrence (1-indexed).
        placement: Where along the row the shaping is worked.
        repeat: Number of occurrences (>= 1).
        interval: Rows between occurrences; required when repeat > 1.
    """

    kind: ShapingKind
    stitches: int
    start_row: int
    placement: Placement
    repeat: int = 1
    interval: int | None = None

    def __post_init__(self) -> None:
        if self.stitches <= 0:
            raise ValueError(f"ShapingEvent.stitches must be > 0, got {self.stitches}")
        if self.repeat < 1:
            raise ValueError(f"ShapingEvent.repeat must be >= 1, got {self.repeat}")
        if self.repeat > 1 and (self.interval is None or self.interval < 1):
            raise ValueError(
                f"ShapingEvent.interval must be >= 1 when repeat > 1, got {self.interval}"
            )
        if self.start_row < 1:
            raise ValueError(f"ShapingEvent.start_row must be >= 1, got {self.start_row}")

    @property
    def side(self) -> FabricSide:
        """Fabric side of the first occurrence."""
        return FabricSide.for_row(self.start_row)

    @property
    def rows(self) -> tuple[int, ...]:
        """Row number of every occurrence, in order."""
        step = self.interval or 1
        return tuple(self.start_row + k * step for k in range(self.repeat))

    @property
    def last_row(self) -> int:
        return self.rows[-1]

    @property
    def stitch_delta(self) -> int:
        """Signed change in stitch count across all occurrences."""
        return self.kind.sign * self.stitches * self.repeat


@dataclass(frozen=True)
class ShapingPhase:
    """
    An ordered, homogeneous run of events sharing one cadence.

    A phase may be empty (e.g. a gradual phase that rounding left with no
    events); it still appears in the schedule so consumers can find it by name.

    Attributes:
        name: Identifier within the schedule side (e.g. "rapid", "increases").
        kind: Shared kind of every event in the phase.
        frequency: Rows between occurrences, or None for single-row phases.
        events: Events in the order they are worked.
    """

    name: str
    kind: ShapingKind
    frequency: int | None
    events: tuple[ShapingEvent, ...] = ()

    def __post_init__(self) -> None:
        for event in self.events:
            if event.kind != self.kind:
                raise ValueError(
                    f"ShapingPhase {self.name!r}: event kind {event.kind.value!r} "
                    f"does not match phase kind {self.kind.value!r}"
                )
            if event.repeat > 1 and event.interval != self.frequency:
                raise ValueError(
                    f"ShapingPhase {self.name!r}: event interval {event.interval} "
                    f"does not match phase frequency {self.frequency}"
                )
        if len({event.stitches for event in self.events}) > 1:
            raise ValueError(f"ShapingPhase {self.name!r}: events change different stitch counts")

    @property
    def stitches_per_event(self) -> int:
        return self.events[0].stitches if self.events else 0

    @property
    def total_shaping_rows(self) -> int:
        """Number of rows on which this phase shapes."""
        return sum(event.repeat for event in self.events)

    @property
    def stitch_delta(self) -> int:
        return sum(event.stitch_delta for event in self.events)

    @property
    def first_row(self) -> int | None:
        return self.events[0].start_row if self.events else None

    @property
    def last_row(self) -> int | None:
        return max(event.last_row for event in self.events) if self.events else None


# ── Schedule ───────────────────────────────────────────────────────────────────


class ShapingOccurrence(NamedTuple):
    """A single worked occurrence of an event, as seen row by row."""

    row: int
    side: ShapingSide
    phase: str
    event: ShapingEvent


_SIDE_ORDER = {ShapingSide.BOTH: 0, ShapingSide.LEFT: 1, ShapingSide.RIGHT: 2}


@dataclass(frozen=True)
class ShapingSchedule:
    """
    Complete shaping plan for one piece.

    ``phases`` maps each shaping side to its phases in working order. A
    symmetric piece only uses ShapingSide.BOTH. A split piece (necklines)
    shapes the full width under BOTH, after which the remaining stitches are
    divided evenly between LEFT and RIGHT.

    Attributes:
        method: Construction method or style that produced the schedule.
        starting_stitches: Live stitches before row 1.
        final_stitch_count: Live stitches after the last row, summed over sides.
        total_rows: Rows worked in the shaped section.
        phases: Side -> phases, in working order.
    """

    method: str
    starting_stitches: int
    final_stitch_count: int
    total_rows: int
    phases: MappingProxyType[ShapingSide, tuple[ShapingPhase, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        # Accept plain dicts at construction sites and promote to MappingProxyType.
        if isinstance(self.phases, dict):
            object.__setattr__(self, "phases", MappingProxyType(self.phases))
        if self.starting_stitches < 0:
            raise ValueError(
                f"ShapingSchedule.starting_stitches must be >= 0, got {self.starting_stitches}"
            )
        if self.total_rows < 0:
            raise ValueError(f"ShapingSchedule.total_rows must be >= 0, got {self.total_rows}")
        expected = self.starting_stitches + self.stitch_delta
        if expected != self.final_stitch_count:
            raise ValueError(
                f"ShapingSchedule {self.method!r}: starting {self.starting_stitches} sts "
                f"plus shaping delta {self.stitch_delta} gives {expected}, "
                f"but final_stitch_count is {self.final_stitch_count}"
            )
        for occurrence in self.iter_occurrences():
            if occurrence.row > self.total_rows:
                raise ValueError(
                    f"ShapingSchedule {self.method!r}: phase {occurrence.phase!r} shapes "
                    f"row {occurrence.row} beyond total_rows {self.total_rows}"
                )

    @property
    def stitch_delta(self) -> int:
        return sum(phase.stitch_delta for phases in self.phases.values() for phase in phases)

    @property
    def is_split(self) -> bool:
        return ShapingSide.LEFT in self.phases or ShapingSide.RIGHT in self.phases

    def phase(self, name: str, side: ShapingSide = ShapingSide.BOTH) -> ShapingPhase | None:
        """Return the named phase on the given side, or None."""
        for phase in self.phases.get(side, ()):
            if phase.name == name:
                return phase
        return None

    def side_starting_stitches(self, side: ShapingSide) -> int:
        """Live stitches on ``side`` when its own shaping begins."""
        if side == ShapingSide.BOTH:
            return self.starting_stitches
        shared = sum(phase.stitch_delta for phase in self.phases.get(ShapingSide.BOTH, ()))
        return (self.starting_stitches + shared) // 2

    def side_final_stitches(self, side: ShapingSide) -> int:
        """Live stitches on ``side`` after its last phase."""
        if side == ShapingSide.BOTH and not self.is_split:
            return self.final_stitch_count
        own = sum(phase.stitch_delta for phase in self.phases.get(side, ()))
        return self.side_starting_stitches(side) + own

    def iter_occurrences(self, side: ShapingSide | None = None) -> Iterator[ShapingOccurrence]:
        """
        Yield every shaping occurrence ordered by row, then side, then phase.

        Args:
            side: Restrict to one side; None yields all sides.
        """
        found: list[tuple[int, int, int, ShapingOccurrence]] = []
        for shaping_side, phases in self.phases.items():
            if side is not None and shaping_side != side:
                continue
            for phase_index, phase in enumerate(phases):
                for event in phase.events:
                    for row in event.rows:
                        found.append(
                            (
                                row,
                                _SIDE_ORDER[shaping_side],
                                phase_index,
                                ShapingOccurrence(row, shaping_side, phase.name, event),
                            )
                        )
        found.sort(key=lambda item: item[:3])
        for *_, occurrence in found:
            yield occurrence


@dataclass(frozen=True)
class ShapingResult:
    """
    A schedule plus the advisory signals raised while computing it.

    Attributes:
        schedule: The computed schedule.
        warnings: Advisory messages; never block output.
        metrics: Named derived values (achieved dimensions, converted counts).
    """

    schedule: ShapingSchedule
    warnings: tuple[str, ...] = ()
    metrics: MappingProxyType[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if isinstance(self.metrics, dict):
            object.__setattr__(self, "metrics", MappingProxyType(self.metrics))
