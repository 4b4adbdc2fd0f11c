import dataclasses

import numpy as np
import pytest

from core.variogram_math import (
    DivisionUndefined,
    InvalidParameter,
    VariogramParameters,
    derived_statistics,
    evaluate_spherical,
    spatial_dependence,
    spherical_curve,
)

PARAMS = VariogramParameters(nugget=15, sill=160, range=30)


class TestEvaluateSpherical:
    def test_zero_distance_is_nugget(self):
        assert evaluate_spherical(0, PARAMS) == 15

    def test_at_range_is_sill(self):
        assert evaluate_spherical(30, PARAMS) == 160

    def test_beyond_range_clamps_to_sill(self):
        assert evaluate_spherical(50, PARAMS) == 160
        assert evaluate_spherical(1e9, PARAMS) == 160

    def test_half_range(self):
        assert evaluate_spherical(15, PARAMS) == pytest.approx(15 + 145 * 0.6875)
        assert evaluate_spherical(15, PARAMS) == pytest.approx(114.69, abs=0.01)

    def test_continuous_at_range(self):
        for eps in (1e-3, 1e-6, 1e-9):
            assert evaluate_spherical(30 - eps, PARAMS) == pytest.approx(160, abs=1e-2)

    def test_monotone_up_to_range(self):
        values = spherical_curve(np.linspace(0, 30, 301), PARAMS)
        assert all(a <= b for a, b in zip(values, values[1:]))

    @pytest.mark.parametrize("params", [
        VariogramParameters(nugget=0, sill=1, range=1),
        VariogramParameters(nugget=2.5, sill=2.5, range=0.1),
        VariogramParameters(nugget=0.3, sill=7.0, range=1000),
    ])
    def test_endpoints_hold_for_other_models(self, params):
        assert evaluate_spherical(0, params) == params.nugget
        assert evaluate_spherical(params.range, params) == params.sill
        assert evaluate_spherical(params.range * 3, params) == params.sill

    def test_zero_range_rejected(self):
        with pytest.raises(InvalidParameter):
            evaluate_spherical(5, VariogramParameters(nugget=0, sill=1, range=0))

    def test_inverted_sill_rejected(self):
        with pytest.raises(InvalidParameter):
            VariogramParameters(nugget=10, sill=5, range=3)

    def test_negative_nugget_rejected(self):
        with pytest.raises(InvalidParameter):
            VariogramParameters(nugget=-1, sill=5, range=3)

    def test_nan_rejected(self):
        with pytest.raises(InvalidParameter):
            VariogramParameters(nugget=0, sill=float("nan"), range=3)

    def test_negative_distance_rejected(self):
        with pytest.raises(InvalidParameter):
            evaluate_spherical(-1, PARAMS)

    def test_nan_distance_rejected(self):
        with pytest.raises(InvalidParameter):
            evaluate_spherical(float("nan"), PARAMS)

    def test_nan_inside_curve_rejected(self):
        with pytest.raises(InvalidParameter):
            spherical_curve([0, float("nan"), 50], PARAMS)

    def test_invalid_parameter_is_value_error(self):
        with pytest.raises(ValueError):
            VariogramParameters(nugget=0, sill=1, range=-2)

    def test_parameters_are_immutable(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            PARAMS.sill = 1


class TestSphericalCurve:
    def test_preserves_length_and_order(self):
        distances = [50, 0, 15, 30, 15]
        assert spherical_curve(distances, PARAMS) == [
            160, 15, pytest.approx(114.6875), 160, pytest.approx(114.6875),
        ]

    def test_empty_sample(self):
        assert spherical_curve([], PARAMS) == []

    def test_accepts_numpy_array(self):
        curve = spherical_curve(np.array([0.0, 60.0]), PARAMS)
        assert curve == [15.0, 160.0]


class TestDerivedStatistics:
    def test_reference_model(self):
        stats = derived_statistics(PARAMS, 100)
        assert stats.structured_variance == 145
        assert stats.relative_nugget_effect == pytest.approx(0.09375)
        assert stats.range_to_distance_ratio == pytest.approx(0.3)
        assert stats.partial_sill == 145
        assert stats.proportion_structured == pytest.approx(0.90625)

    def test_as_dict_keeps_field_order(self):
        assert list(derived_statistics(PARAMS, 100).as_dict()) == [
            "structured_variance",
            "relative_nugget_effect",
            "range_to_distance_ratio",
            "partial_sill",
            "proportion_structured",
        ]

    @pytest.mark.parametrize("nugget,sill", [(0, 1), (0.5, 1), (1, 1), (3, 200)])
    def test_partial_sill_equals_structured_variance(self, nugget, sill):
        stats = derived_statistics(VariogramParameters(nugget=nugget, sill=sill, range=5), 20)
        assert stats.partial_sill == stats.structured_variance
        assert 0 <= stats.proportion_structured <= 1

    def test_zero_sill(self):
        with pytest.raises(DivisionUndefined):
            derived_statistics(VariogramParameters(nugget=0, sill=0, range=10), 100)

    def test_zero_sill_is_zero_division(self):
        with pytest.raises(ZeroDivisionError):
            derived_statistics(VariogramParameters(nugget=0, sill=0, range=10), 100)

    @pytest.mark.parametrize("max_distance", [0, -5])
    def test_non_positive_max_distance(self, max_distance):
        with pytest.raises(InvalidParameter):
            derived_statistics(PARAMS, max_distance)


class TestSpatialDependence:
    def test_reference_model_is_strong(self):
        assert spatial_dependence(PARAMS) == "strong"

    def test_moderate(self):
        assert spatial_dependence(VariogramParameters(nugget=50, sill=100, range=1)) == "moderate"
        assert spatial_dependence(VariogramParameters(nugget=75, sill=100, range=1)) == "moderate"

    def test_weak(self):
        assert spatial_dependence(VariogramParameters(nugget=100, sill=100, range=1)) == "weak"

    def test_zero_sill(self):
        with pytest.raises(DivisionUndefined):
            spatial_dependence(VariogramParameters(nugget=0, sill=0, range=1))
