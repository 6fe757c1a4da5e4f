"""Tests for the neckline shaper."""

import pytest

from knitwright.errors import InvalidShapingInputError
from knitwright.schemas import NecklineParams, NecklineStyle, Placement, ShapingKind, ShapingSide
from knitwright.shapers import neckline_cadence, shape_neckline
from knitwright.utilities.types import Gauge, LengthUnit

# 2 sts and 2 rows per cm keeps the arithmetic readable.
_GAUGE = Gauge(stitches_per_10=20.0, rows_per_10=20.0)


def _neck(style=NecklineStyle.ROUND, depth=10.0, shoulder=5.0, panel=40):
    return shape_neckline(NecklineParams(style, depth, shoulder), _GAUGE, panel)


class TestNecklineCadence:
    def test_shallow_is_fastest(self):
        assert neckline_cadence(5.0) == (1, 3)

    def test_normal(self):
        assert neckline_cadence(8.0) == (2, 4)

    def test_deep_is_slowest(self):
        assert neckline_cadence(13.0) == (2, 6)

    def test_inches_converted(self):
        assert neckline_cadence(3.0, LengthUnit.INCH) == (2, 4)


class TestRoundNeckline:
    @pytest.fixture(scope="class")
    def result(self):
        return _neck()

    def test_split_schedule(self, result):
        schedule = result.schedule
        assert schedule.is_split
        assert schedule.phases[ShapingSide.LEFT] == schedule.phases[ShapingSide.RIGHT]

    def test_center_bind_off_on_row_one(self, result):
        center = result.schedule.phase("center_bind_off")
        assert center.kind == ShapingKind.BIND_OFF
        assert center.events[0].start_row == 1
        assert center.events[0].placement == Placement.CENTER
        assert center.stitches_per_event == 8

    def test_rapid_then_gradual(self, result):
        rapid = result.schedule.phase("rapid", ShapingSide.LEFT)
        gradual = result.schedule.phase("gradual", ShapingSide.LEFT)
        assert rapid.events[0].rows == (3, 5, 7)
        assert gradual.events[0].rows == (11, 15, 19)
        assert rapid.events[0].placement == Placement.NECK_EDGE

    def test_side_counts(self, result):
        schedule = result.schedule
        assert schedule.side_starting_stitches(ShapingSide.LEFT) == 16
        assert schedule.side_final_stitches(ShapingSide.LEFT) == 10
        assert schedule.final_stitch_count == 20
        assert schedule.total_rows == 20

    def test_metrics(self, result):
        assert result.metrics["shoulder_stitches"] == 10
        assert result.metrics["neck_stitches"] == 20
        assert result.metrics["center_bind_off"] == 8
        assert result.metrics["decreases_each_side"] == 6
        assert result.metrics["depth_rows"] == 20

    def test_no_warnings(self, result):
        assert result.warnings == ()


class TestStyles:
    def test_scoop_binds_off_more_rapidly(self):
        schedule = _neck(NecklineStyle.SCOOP).schedule
        assert schedule.phase("center_bind_off").stitches_per_event == 8
        assert schedule.phase("rapid", ShapingSide.LEFT).total_shaping_rows == 4
        assert schedule.phase("gradual", ShapingSide.LEFT).total_shaping_rows == 2

    def test_v_neck_parity_stitch(self):
        result = _neck(NecklineStyle.V_NECK, panel=41)
        assert result.metrics["center_bind_off"] == 1
        assert result.warnings == ()

    def test_v_neck_even_neck_binds_off_nothing(self):
        schedule = _neck(NecklineStyle.V_NECK).schedule
        assert schedule.phase("center_bind_off").events == ()
        assert schedule.side_starting_stitches(ShapingSide.LEFT) == 20

    def test_v_neck_spreads_over_depth(self):
        """10 decreases in rows 3-20: twice every row, then 8 times every 2 rows."""
        schedule = _neck(NecklineStyle.V_NECK, panel=41).schedule
        rapid = schedule.phase("rapid", ShapingSide.LEFT)
        gradual = schedule.phase("gradual", ShapingSide.LEFT)
        assert rapid.events[0].rows == (3, 4)
        assert gradual.events[0].rows == (6, 8, 10, 12, 14, 16, 18, 20)
        assert schedule.total_rows == 20


class TestWarnings:
    def test_shallow_neckline_needs_more_rows(self):
        result = _neck(depth=5.0)
        assert result.warnings == (
            "Neckline shaping needs 14 rows but the neckline depth allows only 10",
        )
        assert result.schedule.total_rows == 14

    def test_small_center_bind_off(self):
        result = _neck(shoulder=22.0, panel=100)
        assert (
            "Center bind-off (4 sts) is less than 10% of the panel width (100 sts)"
            in result.warnings
        )

    def test_very_deep_neckline(self):
        result = _neck(depth=31.0)
        assert "Very deep neckline (31cm) - please verify measurements" in result.warnings


class TestValidation:
    def test_zero_depth(self):
        with pytest.raises(InvalidShapingInputError, match="Neckline depth must be greater than 0"):
            _neck(depth=0)

    def test_negative_shoulder(self):
        with pytest.raises(InvalidShapingInputError, match="Shoulder width must be greater than 0"):
            _neck(shoulder=-1.0)

    def test_shoulder_under_one_stitch(self):
        with pytest.raises(InvalidShapingInputError, match="less than one stitch"):
            _neck(shoulder=0.1)

    def test_shoulders_fill_panel(self):
        with pytest.raises(
            InvalidShapingInputError,
            match="Shoulders \\(20 sts each\\) leave no neck opening in a 40-stitch panel",
        ):
            _neck(shoulder=10.0)


class TestShoulderInvariant:
    @pytest.mark.parametrize("style", list(NecklineStyle))
    @pytest.mark.parametrize(
        "panel, shoulder, depth",
        [(40, 5.0, 10.0), (41, 3.0, 6.5), (120, 12.0, 8.0), (99, 20.0, 14.0), (7, 1.0, 3.0)],
    )
    def test_shoulders_narrower_than_panel(self, style, panel, shoulder, depth):
        schedule = _neck(style, depth, shoulder, panel).schedule
        final_shoulder = schedule.side_final_stitches(ShapingSide.LEFT)
        assert final_shoulder == schedule.side_final_stitches(ShapingSide.RIGHT)
        assert 2 * final_shoulder < panel
        assert 2 * final_shoulder == schedule.final_stitch_count
