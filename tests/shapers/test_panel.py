"""Tests for the rectangular panel shaper."""

import pytest

from knitwright.errors import InvalidShapingInputError
from knitwright.schemas import PatternRow, RectangularPanelParams, StitchPatternDefinition
from knitwright.shapers import shape_rectangular_panel
from knitwright.utilities.types import Gauge

_GAUGE = Gauge(stitches_per_10=20.0, rows_per_10=28.0)

_CABLE = StitchPatternDefinition(
    id="cable-4",
    name="Four-stitch Cable",
    rows=(PatternRow("C4F"), PatternRow("P4"), PatternRow("K4"), PatternRow("P4")),
    repeat_width=4,
    repeat_height=4,
)


class TestPlainPanel:
    def test_counts(self):
        result = shape_rectangular_panel(RectangularPanelParams(width=20.0, length=30.0), _GAUGE)
        assert result.schedule.starting_stitches == 40
        assert result.schedule.final_stitch_count == 40
        assert result.schedule.total_rows == 84
        assert result.schedule.phases == {}
        assert result.warnings == ()

    def test_metrics(self):
        result = shape_rectangular_panel(RectangularPanelParams(width=20.0, length=30.0), _GAUGE)
        assert result.metrics["achieved_width"] == pytest.approx(20.0)
        assert result.metrics["achieved_length"] == pytest.approx(30.0)


class TestPatternAlignment:
    def test_cast_on_fits_whole_repeats_plus_edges(self):
        result = shape_rectangular_panel(
            RectangularPanelParams(width=20.5, length=30.0), _GAUGE, _CABLE, edge_stitches=2
        )
        cast_on = result.schedule.starting_stitches
        assert cast_on == 40
        assert (cast_on - 4) % 4 == 0

    def test_width_deviation_warns(self):
        """A 1.5cm-wide scarf cannot hold a 4-stitch repeat plus 2 edge stitches each side."""
        result = shape_rectangular_panel(
            RectangularPanelParams(width=1.5, length=30.0), _GAUGE, _CABLE, edge_stitches=2
        )
        assert result.schedule.starting_stitches == 8
        assert result.warnings == (
            "Actual width (4.0cm) differs from target (1.5cm) by more than 5%",
        )


class TestValidation:
    def test_missing_width(self):
        with pytest.raises(InvalidShapingInputError, match="Panel width must be greater than 0"):
            shape_rectangular_panel(RectangularPanelParams(length=30.0), _GAUGE)

    def test_negative_length(self):
        with pytest.raises(InvalidShapingInputError, match="Panel length must be greater than 0"):
            shape_rectangular_panel(RectangularPanelParams(width=20.0, length=-1.0), _GAUGE)
