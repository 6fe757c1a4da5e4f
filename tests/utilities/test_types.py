"""Tests for utilities type definitions."""

import pytest

from knitwright.errors import InvalidGaugeError, InvalidShapingInputError
from knitwright.utilities.types import Gauge, LengthUnit


class TestGauge:
    def test_construction_with_valid_values(self):
        g = Gauge(stitches_per_10=20.0, rows_per_10=28.0)
        assert g.stitches_per_10 == 20.0
        assert g.rows_per_10 == 28.0
        assert g.unit == LengthUnit.CM

    def test_per_unit_values(self):
        g = Gauge(stitches_per_10=20.0, rows_per_10=28.0)
        assert g.stitches_per_unit == pytest.approx(2.0)
        assert g.rows_per_unit == pytest.approx(2.8)

    def test_is_frozen(self):
        g = Gauge(stitches_per_10=20.0, rows_per_10=28.0)
        with pytest.raises(AttributeError):
            g.stitches_per_10 = 22.0  # type: ignore[misc]

    def test_rejects_zero_stitches(self):
        with pytest.raises(InvalidGaugeError, match="Gauge stitches per 10cm must be greater than 0"):
            Gauge(stitches_per_10=0, rows_per_10=28.0)

    def test_rejects_negative_rows(self):
        with pytest.raises(InvalidGaugeError, match="Gauge rows per 10cm must be greater than 0"):
            Gauge(stitches_per_10=20.0, rows_per_10=-3.0)

    @pytest.mark.parametrize("value", [float("inf"), float("nan"), float("-inf")])
    def test_rejects_non_finite_stitches(self, value):
        with pytest.raises(InvalidGaugeError, match="Gauge stitches per 10cm must be a finite number"):
            Gauge(stitches_per_10=value, rows_per_10=28.0)

    def test_rejects_infinite_rows(self):
        with pytest.raises(InvalidGaugeError, match="Gauge rows per 10cm must be a finite number"):
            Gauge(stitches_per_10=20.0, rows_per_10=float("inf"))

    def test_inch_message_names_unit(self):
        with pytest.raises(InvalidGaugeError, match="per 10in"):
            Gauge(stitches_per_10=0, rows_per_10=28.0, unit=LengthUnit.INCH)

    def test_gauge_error_is_shaping_input_error(self):
        """Gauge failures are hard input errors like any other non-positive dimension."""
        assert issubclass(InvalidGaugeError, InvalidShapingInputError)
        assert issubclass(InvalidGaugeError, ValueError)

    def test_hashable(self):
        g = Gauge(stitches_per_10=20.0, rows_per_10=28.0)
        d = {g: "dk"}
        assert d[Gauge(stitches_per_10=20.0, rows_per_10=28.0)] == "dk"


class TestLengthUnit:
    def test_values(self):
        assert LengthUnit.CM.value == "cm"
        assert LengthUnit.INCH.value == "in"

    def test_is_str(self):
        assert isinstance(LengthUnit.CM, str)
