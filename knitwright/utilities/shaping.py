"""
Shaping cadence calculator: spread shaping events evenly across a section.

Given the number of shaping events needed and the number of rows available,
produces cadences that distribute the events as evenly as possible.

When the division is uneven, two cadences are returned: one at the more
frequent rate and one at the less frequent rate, matching standard pattern
conventions (e.g. "decrease every 4th row 7 times, then every 5th row 3
times").
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Cadence:
    """Shape every N rows, M times."""

    every_n_rows: int
    times: int

    @property
    def rows(self) -> int:
        return self.every_n_rows * self.times


def distribute_events(event_count: int, section_rows: int) -> list[Cadence]:
    """
    Distribute ``event_count`` shaping events over ``section_rows`` rows.

    Args:
        event_count: Number of shaping events to place.
        section_rows: Number of rows available for shaping.

    Returns:
        List of Cadence(s). Empty if event_count is 0.
        One cadence if the rows divide evenly, two if not; the more frequent
        cadence comes first.

    Raises:
        ValueError: If event_count < 0, section_rows < 1, or there are fewer
            rows than events.
    """
    if event_count < 0:
        raise ValueError(f"event_count must be >= 0, got {event_count}")
    if event_count == 0:
        return []
    if section_rows < 1:
        raise ValueError(f"section_rows must be >= 1, got {section_rows}")
    if event_count > section_rows:
        raise ValueError(
            f"Not enough rows ({section_rows}) for {event_count} shaping events "
            f"(need at least 1 row per event)"
        )

    base_interval = section_rows // event_count
    remainder = section_rows % event_count

    if remainder == 0:
        return [Cadence(every_n_rows=base_interval, times=event_count)]

    # `remainder` events get one extra row each (less frequent).
    frequent_times = event_count - remainder
    cadences: list[Cadence] = []
    if frequent_times > 0:
        cadences.append(Cadence(every_n_rows=base_interval, times=frequent_times))
    cadences.append(Cadence(every_n_rows=base_interval + 1, times=remainder))
    return cadences


def ordinal(n: int) -> str:
    """Return ``n`` as an English ordinal: 1st, 2nd, 3rd, 4th, 11th, 21st, 112th."""
    if 11 <= n % 100 <= 13:
        return f"{n}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"
