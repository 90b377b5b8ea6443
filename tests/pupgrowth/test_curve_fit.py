# tests/pupgrowth/test_curve_fit.py
"""Tests for Gompertz curve fitting."""

from datetime import timedelta

import numpy as np
import pytest

from pupgrowth.data.breeds import CATEGORY_PROFILES, BreedCategory
from pupgrowth.data.observations import DataInsufficientError, WeightObservation
from pupgrowth.models.breed_prior import calculate_breed_based_parameters
from pupgrowth.models.curve_fit import FitSettings, fit_gompertz_to_data
from pupgrowth.models.gompertz import GompertzParameters, gompertz_curve


@pytest.fixture
def medium_prior() -> GompertzParameters:
    return calculate_breed_based_parameters(CATEGORY_PROFILES[BreedCategory.MEDIUM])


class TestFitGompertz:
    """Tests for fit_gompertz_to_data."""

    def test_recovers_synthetic_curve(self, make_observations, birth_date, medium_prior):
        """A noiseless Gompertz series is recovered closely."""
        ages = np.arange(30, 331, 30)
        weights = gompertz_curve(ages, 25.0, 300.0, 90.0)
        observations = make_observations(list(zip(ages.tolist(), weights.tolist())))

        result = fit_gompertz_to_data(observations, birth_date, medium_prior)

        assert result.parameters.adult_weight == pytest.approx(25.0, abs=1.5)
        assert result.quality.r_squared > 0.99
        assert result.parameters.confidence == pytest.approx(0.9)
        assert result.is_valid

    def test_medium_puppy(self, medium_puppy_observations, birth_date, medium_prior):
        """A typical medium puppy yields a valid, well-fitting curve."""
        result = fit_gompertz_to_data(medium_puppy_observations, birth_date, medium_prior)

        assert result.is_valid
        assert result.quality.r_squared > 0.9
        assert 22.0 < result.parameters.adult_weight < 40.0
        assert result.n_observations == 4

    def test_predictions_at_observed_ages(
        self, medium_puppy_observations, birth_date, medium_prior
    ):
        """Fitted points are reported at each observation's age, in days."""
        result = fit_gompertz_to_data(medium_puppy_observations, birth_date, medium_prior)

        assert [p.age for p in result.predictions] == [56.0, 90.0, 120.0, 180.0]
        assert all(p.is_observed for p in result.predictions)
        assert all(p.time_unit == "days" for p in result.predictions)

    def test_input_not_mutated(self, medium_puppy_observations, birth_date, medium_prior):
        """The caller's observation list is left untouched."""
        shuffled = list(reversed(medium_puppy_observations))
        snapshot = list(shuffled)

        fit_gompertz_to_data(shuffled, birth_date, medium_prior)

        assert shuffled == snapshot

    def test_deterministic(self, medium_puppy_observations, birth_date, medium_prior):
        """Repeated fits give identical parameters."""
        first = fit_gompertz_to_data(medium_puppy_observations, birth_date, medium_prior)
        second = fit_gompertz_to_data(medium_puppy_observations, birth_date, medium_prior)

        assert first.parameters == second.parameters

    def test_two_observations_lower_confidence(self, make_observations, birth_date, medium_prior):
        """Two observations cap the confidence one tier lower."""
        observations = make_observations([(60, 6.0), (120, 14.0)])
        result = fit_gompertz_to_data(observations, birth_date, medium_prior)

        assert result.parameters.confidence <= 0.8

    def test_same_day_observations(self, make_observations, birth_date, medium_prior):
        """Observations on a single day give at most 0.3 confidence."""
        observations = make_observations([(90, 9.8), (90, 10.2)])
        result = fit_gompertz_to_data(observations, birth_date, medium_prior)

        assert result.parameters.confidence <= 0.3

    def test_invalid_observations_dropped(self, make_observations, birth_date, medium_prior):
        """Pre-birth and non-positive observations are ignored."""
        observations = make_observations([(56, 5.0), (90, 0.0), (120, 15.0)])
        observations.append(WeightObservation(birth_date - timedelta(days=3), 1.0))

        result = fit_gompertz_to_data(observations, birth_date, medium_prior)

        assert result.n_observations == 2

    def test_too_few_observations(self, make_observations, birth_date, medium_prior):
        """A single valid observation raises DataInsufficientError."""
        observations = make_observations([(56, 5.0), (90, -1.0)])

        with pytest.raises(DataInsufficientError) as excinfo:
            fit_gompertz_to_data(observations, birth_date, medium_prior)

        assert excinfo.value.required == 2
        assert excinfo.value.available == 1

    def test_invalid_iteration_budget(self, medium_puppy_observations, birth_date, medium_prior):
        """max_iterations must be positive."""
        with pytest.raises(ValueError, match="max_iterations"):
            fit_gompertz_to_data(medium_puppy_observations, birth_date, medium_prior, 0)

    def test_out_of_box_prior_is_clipped(self, medium_puppy_observations, birth_date):
        """A prior outside the parameter box still yields a bounded fit."""
        prior = GompertzParameters(adult_weight=500.0, growth_duration=5.0, inflection_age=2.0)
        result = fit_gompertz_to_data(medium_puppy_observations, birth_date, prior)

        assert 0.5 <= result.parameters.adult_weight <= 100.0
        assert 10.0 <= result.parameters.growth_duration <= 1000.0
        assert 10.0 <= result.parameters.inflection_age <= 800.0

    def test_single_restart(self, medium_puppy_observations, birth_date, medium_prior):
        """An empty restart list falls back to the prior as the only start."""
        result = fit_gompertz_to_data(
            medium_puppy_observations,
            birth_date,
            medium_prior,
            settings=FitSettings(restart_scales=()),
        )

        assert result.quality.r_squared > 0.9
