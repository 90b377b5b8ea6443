# tests/pupgrowth/test_gompertz.py
"""Tests for the Gompertz growth curve."""

import math

import numpy as np
import pytest

from pupgrowth.models.gompertz import (
    GOMPERTZ_SPAN,
    GompertzParameters,
    explain_gompertz_parameters,
    gompertz_curve,
    gompertz_weight,
    validate_gompertz_parameters,
)


@pytest.fixture
def params() -> GompertzParameters:
    return GompertzParameters(adult_weight=25.0, growth_duration=300.0, inflection_age=90.0)


class TestGompertzWeight:
    """Tests for gompertz_weight."""

    def test_inflection_is_adult_over_e(self, params):
        """At the inflection age the weight is A / e."""
        assert gompertz_weight(90.0, params) == pytest.approx(25.0 / math.e)

    def test_strictly_increasing(self, params):
        """Weights increase strictly with age."""
        ages = np.arange(0, 720, 5)
        weights = [gompertz_weight(float(a), params) for a in ages]
        assert all(b > a for a, b in zip(weights, weights[1:]))

    def test_never_exceeds_adult_weight(self, params):
        """Weights stay within [0, A], even very late."""
        for age in (0.0, 100.0, 1000.0, 10000.0):
            weight = gompertz_weight(age, params)
            assert 0.0 <= weight <= params.adult_weight

    def test_negative_age_is_zero(self, params):
        """Ages before birth map to zero."""
        assert gompertz_weight(-1.0, params) == 0.0

    def test_invalid_parameters_are_zero(self):
        """Non-positive adult weight or duration map to zero."""
        assert gompertz_weight(100.0, GompertzParameters(0.0, 300.0, 90.0)) == 0.0
        assert gompertz_weight(100.0, GompertzParameters(25.0, 0.0, 90.0)) == 0.0

    def test_growth_duration_spans_five_to_ninety_five_percent(self, params):
        """The curve climbs from 5% to 95% of A over exactly D days."""
        k = params.growth_rate
        t5 = params.inflection_age - math.log(-math.log(0.05)) / k
        t95 = params.inflection_age - math.log(-math.log(0.95)) / k

        assert t95 - t5 == pytest.approx(params.growth_duration)
        assert gompertz_weight(t5, params) == pytest.approx(0.05 * 25.0)
        assert gompertz_weight(t95, params) == pytest.approx(0.95 * 25.0)

    def test_growth_rate_from_duration(self, params):
        """k = GOMPERTZ_SPAN / D."""
        assert params.growth_rate == pytest.approx(GOMPERTZ_SPAN / 300.0)


class TestGompertzCurve:
    """Tests for the vectorised curve."""

    def test_matches_scalar_version(self, params):
        """The vectorised curve agrees with gompertz_weight."""
        ages = np.array([10.0, 60.0, 200.0, 400.0])
        curve = gompertz_curve(ages, 25.0, 300.0, 90.0)
        expected = [gompertz_weight(a, params) for a in ages]
        np.testing.assert_allclose(curve, expected)

    def test_extreme_parameters_do_not_overflow(self):
        """Very steep curves give 0 at birth instead of NaN."""
        weights = gompertz_curve(np.array([0.0, 800.0]), 25.0, 10.0, 800.0)
        assert np.all(np.isfinite(weights))
        assert weights[0] == 0.0


class TestValidation:
    """Tests for biological plausibility checks."""

    def test_plausible_parameters(self, params):
        """A medium-breed curve passes every check."""
        assert validate_gompertz_parameters(params)
        assert explain_gompertz_parameters(params) == []

    def test_adult_weight_out_of_bounds(self):
        """Adult weights above 100 kg are rejected."""
        reasons = explain_gompertz_parameters(GompertzParameters(150.0, 300.0, 90.0))
        assert any("adult weight" in r for r in reasons)

    def test_inflection_age_out_of_bounds(self):
        """Inflection ages below 10 days are rejected."""
        reasons = explain_gompertz_parameters(GompertzParameters(25.0, 300.0, 5.0))
        assert any("inflection age" in r for r in reasons)

    def test_heavy_birth_weight_rejected(self):
        """A curve starting at a third of adult weight is implausible."""
        reasons = explain_gompertz_parameters(GompertzParameters(25.0, 1000.0, 20.0))
        assert any("birth weight fraction" in r for r in reasons)

    def test_inflection_far_past_duration_rejected(self):
        """Inflection more than twice the growth duration is rejected."""
        assert not validate_gompertz_parameters(GompertzParameters(25.0, 100.0, 300.0))

    def test_non_finite_parameters(self):
        """NaN parameters fail with a single explanatory reason."""
        reasons = explain_gompertz_parameters(GompertzParameters(float("nan"), 300.0, 90.0))
        assert len(reasons) == 1
        assert "non-finite" in reasons[0]

    def test_with_fit_keeps_shape(self, params):
        """with_fit only updates the fit statistics."""
        fitted = params.with_fit(r_squared=0.9, confidence=0.8)
        assert fitted.as_array().tolist() == params.as_array().tolist()
        assert fitted.r_squared == 0.9
        assert fitted.confidence == 0.8

    @pytest.mark.parametrize("duration", [10.0, 100.0, 400.0, 1000.0])
    @pytest.mark.parametrize("inflection", [10.0, 150.0, 800.0])
    def test_shape_points_fixed_by_duration(self, duration, inflection):
        """Inflection and end-of-window fractions do not depend on the parameters."""
        p = GompertzParameters(25.0, duration, inflection)

        assert gompertz_weight(inflection, p) / 25.0 == pytest.approx(math.exp(-1.0))
        assert gompertz_weight(inflection + duration, p) / 25.0 == pytest.approx(
            math.exp(-math.exp(-GOMPERTZ_SPAN))
        )
        assert gompertz_weight(inflection + duration, p) / 25.0 > 0.98

    def test_only_birth_fraction_judges_shape(self):
        """A curve inside the parameter box is rejected for its birth weight alone."""
        reasons = explain_gompertz_parameters(GompertzParameters(25.0, 1000.0, 20.0))
        assert len(reasons) == 1
        assert reasons[0].startswith("birth weight fraction")

    def test_birth_weight_small_positive_fraction(self, params):
        """Birth weight is a small but positive share of adult weight."""
        birth_fraction = gompertz_weight(0.0, params) / params.adult_weight
        assert 0.0 < birth_fraction <= 0.15
