"""Tests for the Measurement/Ease Resolver."""

import pytest

from knitwright.errors import InvalidShapingInputError, MissingMeasurementError
from knitwright.resolver import plausibility_warnings, resolve_finished_measurements
from knitwright.schemas import EasePreference, EaseType, FinishedMeasurements, MeasurementSet
from knitwright.utilities.types import LengthUnit

_BODY = MeasurementSet(
    chest_circumference=90.0,
    torso_length=60.0,
    waist_circumference=75.0,
    upper_arm_circumference=30.0,
)


class TestRequiredMeasurements:
    def test_missing_chest(self):
        with pytest.raises(MissingMeasurementError) as exc_info:
            resolve_finished_measurements(MeasurementSet(torso_length=60.0))
        assert exc_info.value.missing == ("chest_circumference",)
        assert str(exc_info.value) == "Missing essential body measurements: chest circumference"

    def test_missing_both(self):
        with pytest.raises(MissingMeasurementError, match="chest circumference, torso length"):
            resolve_finished_measurements(MeasurementSet())


class TestAbsoluteEase:
    def test_no_ease_keeps_body(self):
        finished = resolve_finished_measurements(_BODY).finished
        assert finished.chest_circumference == pytest.approx(90.0)
        assert finished.waist_circumference == pytest.approx(75.0)

    def test_chest_takes_base_ease(self):
        finished = resolve_finished_measurements(_BODY, EasePreference(bust=10.0)).finished
        assert finished.chest_circumference == pytest.approx(100.0)

    def test_multipliers_scale_base_ease(self):
        """Sweater: waist 1.0, upper arm 0.5, length 0.0."""
        finished = resolve_finished_measurements(_BODY, EasePreference(bust=10.0)).finished
        assert finished.waist_circumference == pytest.approx(85.0)
        assert finished.upper_arm_circumference == pytest.approx(35.0)
        assert finished.torso_length == pytest.approx(60.0)

    def test_garment_type_changes_multipliers(self):
        finished = resolve_finished_measurements(
            _BODY, EasePreference(bust=10.0), garment_type="cardigan"
        ).finished
        assert finished.waist_circumference == pytest.approx(87.0)

    def test_explicit_ease_wins(self):
        finished = resolve_finished_measurements(
            _BODY, EasePreference(bust=10.0, waist=4.0, length=2.0)
        ).finished
        assert finished.waist_circumference == pytest.approx(79.0)
        assert finished.torso_length == pytest.approx(62.0)

    def test_negative_ease(self):
        finished = resolve_finished_measurements(_BODY, EasePreference(bust=-5.0)).finished
        assert finished.chest_circumference == pytest.approx(85.0)

    def test_absent_measurements_stay_absent(self):
        finished = resolve_finished_measurements(_BODY, EasePreference(bust=10.0)).finished
        assert finished.hip_circumference is None
        assert finished.neck_circumference is None

    def test_ease_unit_converted(self):
        finished = resolve_finished_measurements(
            _BODY, EasePreference(bust=1.0, unit=LengthUnit.INCH)
        ).finished
        assert finished.chest_circumference == pytest.approx(92.54)

    def test_ease_driving_dimension_negative_is_error(self):
        with pytest.raises(InvalidShapingInputError, match="Finished chest circumference"):
            resolve_finished_measurements(_BODY, EasePreference(bust=-100.0))


class TestPercentageEase:
    def test_chest_scaled(self):
        finished = resolve_finished_measurements(
            _BODY, EasePreference(bust=10.0, ease_type=EaseType.PERCENTAGE)
        ).finished
        assert finished.chest_circumference == pytest.approx(99.0)

    def test_percentage_ignores_ease_unit(self):
        finished = resolve_finished_measurements(
            _BODY, EasePreference(bust=10.0, ease_type=EaseType.PERCENTAGE, unit=LengthUnit.INCH)
        ).finished
        assert finished.chest_circumference == pytest.approx(99.0)


class TestPlausibility:
    def test_plausible_body_has_no_warnings(self):
        assert resolve_finished_measurements(_BODY).warnings == ()

    def test_small_chest(self):
        result = resolve_finished_measurements(
            MeasurementSet(chest_circumference=40.0, torso_length=60.0)
        )
        assert result.warnings == ("Very small chest circumference: 40.0cm",)

    def test_long_garment(self):
        warnings = plausibility_warnings(
            FinishedMeasurements(chest_circumference=100.0, torso_length=130.0)
        )
        assert warnings == ("Very long garment length: 130.0cm",)

    def test_waist_larger_than_chest(self):
        warnings = plausibility_warnings(
            FinishedMeasurements(
                chest_circumference=100.0, torso_length=60.0, waist_circumference=130.0
            )
        )
        assert warnings == ("Waist measurement is significantly larger than chest measurement",)

    def test_waist_much_smaller_than_chest(self):
        warnings = plausibility_warnings(
            FinishedMeasurements(
                chest_circumference=100.0, torso_length=60.0, waist_circumference=50.0
            )
        )
        assert warnings == ("Waist measurement is significantly smaller than chest measurement",)

    def test_inch_thresholds_scaled(self):
        """A 40in chest is an ordinary adult size, not a tiny one."""
        result = resolve_finished_measurements(
            MeasurementSet(chest_circumference=40.0, torso_length=24.0, unit=LengthUnit.INCH)
        )
        assert result.warnings == ()
        assert result.finished.unit == LengthUnit.INCH
