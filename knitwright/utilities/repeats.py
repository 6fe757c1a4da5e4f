"""
Pattern repeat arithmetic: stitch count alignment and repeat layout.

A motif of width ``repeat`` fits a piece when the stitch count equals
``k * repeat + extra`` for some whole ``k >= 1``, where ``extra`` covers the
non-repeating stitches (edge allowance on both sides, balancing stitches).
"""

from __future__ import annotations

from dataclasses import dataclass


def aligned_counts(raw_target: float, tolerance: float, repeat: int, extra: int = 0) -> list[int]:
    """
    Find every stitch count within ``raw_target ± tolerance`` of the form
    ``k * repeat + extra``.

    Returns:
        Sorted list of candidate counts. Empty if none lie inside the band.
    """
    if repeat < 1:
        raise ValueError(f"repeat must be >= 1, got {repeat}")
    if tolerance < 0:
        raise ValueError(f"tolerance must be >= 0, got {tolerance}")
    if extra < 0:
        raise ValueError(f"extra must be >= 0, got {extra}")

    low = raw_target - tolerance
    high = raw_target + tolerance

    k = max(1, -(-(low - extra) // repeat))  # ceil division
    result: list[int] = []
    count = int(k * repeat + extra)
    while count <= high:
        result.append(count)
        count += repeat
    return result


def align_to_repeat(raw_target: float, repeat: int, extra: int = 0) -> int:
    """
    Pick the count of form ``k * repeat + extra`` nearest to ``raw_target``.

    On a tie the larger count wins, favouring slightly more ease over
    slightly less. At least one full repeat is always kept.
    """
    candidates = aligned_counts(raw_target, repeat, repeat, extra)
    if not candidates:
        return repeat + extra
    return min(candidates, key=lambda c: (abs(c - raw_target), -c))


@dataclass(frozen=True)
class RepeatLayout:
    """How a motif sits across a row.

    Attributes:
        full_repeats: Whole motif repeats worked across the body.
        buffer_each_side: Plain stitches between edge allowance and motif.
        leftover: Odd stitch left after balancing the buffers (0 or 1).
    """

    full_repeats: int
    buffer_each_side: int
    leftover: int


def plan_repeat_layout(stitch_count: int, repeat_width: int, edge_each_side: int = 0) -> RepeatLayout:
    """Fit as many whole repeats as possible inside the edge allowance."""
    if repeat_width < 1:
        raise ValueError(f"repeat_width must be >= 1, got {repeat_width}")
    available = max(0, stitch_count - 2 * edge_each_side)
    full_repeats = available // repeat_width
    spare = available - full_repeats * repeat_width
    return RepeatLayout(
        full_repeats=full_repeats,
        buffer_each_side=spare // 2,
        leftover=spare % 2,
    )
