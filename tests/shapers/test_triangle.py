"""Tests for the closed-shape (triangular shawl) shaper."""

import pytest

from knitwright.errors import InvalidGaugeError, InvalidShapingInputError
from knitwright.schemas import (
    Placement,
    ShapingKind,
    ShapingSide,
    TriangleMethod,
    TriangularShawlParams,
)
from knitwright.shapers import shape_triangular_shawl
from knitwright.utilities.types import Gauge

_GAUGE_28 = Gauge(stitches_per_10=20.0, rows_per_10=28.0)
_GAUGE_26 = Gauge(stitches_per_10=20.0, rows_per_10=26.0)


def _shawl(method, wingspan, depth, gauge=_GAUGE_28):
    return shape_triangular_shawl(TriangularShawlParams(method, wingspan, depth), gauge)


# ── Top-down center-out ────────────────────────────────────────────────────────


class TestTopDown:
    @pytest.fixture(scope="class")
    def result(self):
        return _shawl(TriangleMethod.TOP_DOWN_CENTER_OUT, 150, 75)

    def test_cast_on_three(self, result):
        assert result.schedule.starting_stitches == 3
        assert result.metrics["cast_on_stitches"] == 3

    def test_increase_phase(self, result):
        increases = result.schedule.phase("increases")
        assert increases.stitches_per_event == 4
        assert increases.frequency == 2
        assert increases.kind == ShapingKind.INCREASE
        assert increases.events[0].placement == Placement.CENTER_AND_ENDS

    def test_no_decrease_phase(self, result):
        assert result.schedule.phase("decreases") is None

    def test_final_count(self, result):
        """210 depth rows → 105 events → 3 + 4 * 105."""
        assert result.schedule.final_stitch_count == 423
        assert result.schedule.final_stitch_count > 3

    def test_achieved_dimensions_within_tolerance(self, result):
        assert 127.5 <= result.metrics["achieved_wingspan"] <= 172.5
        assert 67.5 <= result.metrics["achieved_depth"] <= 82.5
        assert result.warnings == ()


# ── Side-to-side ───────────────────────────────────────────────────────────────


class TestSideToSide:
    def test_cast_on_four(self):
        assert _shawl(TriangleMethod.SIDE_TO_SIDE, 150, 75).schedule.starting_stitches == 4

    @pytest.mark.parametrize(
        "wingspan, depth, gauge",
        [
            (150, 75, _GAUGE_28),
            (120, 50, _GAUGE_26),
            (60, 7, Gauge(stitches_per_10=12.0, rows_per_10=18.0)),
            (200, 90, Gauge(stitches_per_10=28.0, rows_per_10=36.0)),
        ],
    )
    def test_symmetric_and_returns_to_cast_on(self, wingspan, depth, gauge):
        schedule = _shawl(TriangleMethod.SIDE_TO_SIDE, wingspan, depth, gauge).schedule
        increases = schedule.phase("increases")
        decreases = schedule.phase("decreases")
        assert increases.total_shaping_rows == decreases.total_shaping_rows
        assert schedule.final_stitch_count == schedule.starting_stitches

    def test_increase_count_from_depth(self):
        """75cm at 20 sts/10cm = 150 sts, so 146 single-stitch increases."""
        schedule = _shawl(TriangleMethod.SIDE_TO_SIDE, 150, 75).schedule
        assert schedule.phase("increases").total_shaping_rows == 146
        assert schedule.phase("decreases").first_row == 293
        assert schedule.total_rows == 584

    def test_shapes_one_edge_only(self):
        schedule = _shawl(TriangleMethod.SIDE_TO_SIDE, 150, 75).schedule
        for phase in schedule.phases[ShapingSide.BOTH]:
            assert all(event.placement == Placement.ROW_START for event in phase.events)
            assert phase.stitches_per_event == 1

    def test_wingspan_deviation_warns(self):
        """Wingspan follows from the depth, so a mismatched target is advisory only."""
        result = _shawl(TriangleMethod.SIDE_TO_SIDE, 150, 75)
        assert any(w.startswith("Actual wingspan") for w in result.warnings)


# ── Bottom-up ──────────────────────────────────────────────────────────────────


class TestBottomUp:
    def test_scenario(self):
        result = _shawl(TriangleMethod.BOTTOM_UP, 120, 50, _GAUGE_26)
        assert abs(result.schedule.starting_stitches - 240) <= 1
        assert result.schedule.final_stitch_count == 3
        assert result.metrics["achieved_wingspan"] == pytest.approx(120, rel=0.05)

    @pytest.mark.parametrize(
        "wingspan, depth",
        [(120, 50), (121, 40), (30, 15), (250, 100), (1, 1)],
    )
    def test_always_ends_at_three(self, wingspan, depth):
        schedule = _shawl(TriangleMethod.BOTTOM_UP, wingspan, depth).schedule
        assert schedule.final_stitch_count == 3

    def test_decreases_both_edges(self):
        schedule = _shawl(TriangleMethod.BOTTOM_UP, 120, 50, _GAUGE_26).schedule
        decreases = schedule.phase("decreases")
        assert decreases.stitches_per_event == 2
        assert decreases.frequency == 2
        assert decreases.events[0].placement == Placement.BOTH_ENDS


# ── Validation ─────────────────────────────────────────────────────────────────


class TestValidation:
    def test_zero_wingspan(self):
        with pytest.raises(InvalidShapingInputError, match="Target wingspan must be greater than 0"):
            _shawl(TriangleMethod.TOP_DOWN_CENTER_OUT, 0, 75)

    def test_negative_depth(self):
        with pytest.raises(InvalidShapingInputError, match="Target depth must be greater than 0"):
            _shawl(TriangleMethod.BOTTOM_UP, 120, -10)

    def test_zero_gauge_stitches(self):
        with pytest.raises(InvalidGaugeError, match="Gauge stitches per 10cm must be greater than 0"):
            _shawl(TriangleMethod.BOTTOM_UP, 120, 50, Gauge(stitches_per_10=0, rows_per_10=26.0))

    def test_deterministic(self):
        first = _shawl(TriangleMethod.TOP_DOWN_CENTER_OUT, 150, 75)
        second = _shawl(TriangleMethod.TOP_DOWN_CENTER_OUT, 150, 75)
        assert first.schedule == second.schedule
        assert first.warnings == second.warnings
