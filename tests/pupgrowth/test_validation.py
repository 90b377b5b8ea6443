# tests/pupgrowth/test_validation.py
"""Tests for plausibility checks and estimate bounding."""

import logging

import pytest

from pupgrowth.data.breeds import BreedCategory
from pupgrowth.evaluation.validation import (
    ModelValidationFailure,
    bound_veterinary_estimate,
    check_gompertz_parameters,
    validate_veterinary_estimate,
)
from pupgrowth.models.gompertz import GompertzParameters


class TestValidateVeterinaryEstimate:
    """Tests for validate_veterinary_estimate."""

    @pytest.mark.parametrize(
        "current,estimate,age_weeks,expected",
        [
            (5.0, 12.0, 12.0, True),
            (5.0, 25.0, 8.0, False),  # more than 4x
            (10.0, 9.0, 20.0, False),  # shrinks
            (20.0, 28.0, 40.0, False),  # > 30% after 32 weeks
            (20.0, 25.0, 40.0, True),
            (30.0, 90.0, 10.0, False),  # above species ceiling
        ],
    )
    def test_cases(self, current, estimate, age_weeks, expected):
        assert validate_veterinary_estimate(current, estimate, age_weeks) is expected


class TestBoundVeterinaryEstimate:
    """Tests for bound_veterinary_estimate."""

    def test_growth_factor_cap(self):
        """Young subjects are capped at 4x their current weight."""
        assert bound_veterinary_estimate(5.0, 25.0, 8.0) == pytest.approx(20.0)

    def test_adult_cap(self):
        """Past 32 weeks the estimate is capped at 1.3x."""
        assert bound_veterinary_estimate(20.0, 40.0, 40.0) == pytest.approx(26.0)

    def test_category_cap(self):
        """The category maximum applies when a category is given."""
        assert bound_veterinary_estimate(3.0, 10.0, 16.0, BreedCategory.TOY) == pytest.approx(5.0)

    def test_species_ceiling(self):
        """No estimate exceeds 80 kg."""
        assert bound_veterinary_estimate(40.0, 120.0, 20.0) == pytest.approx(80.0)

    def test_floor_at_current_weight(self):
        """Estimates below the current weight are raised to it."""
        assert bound_veterinary_estimate(12.0, 10.0, 30.0) == pytest.approx(12.0)

    def test_heavier_than_category_cap(self):
        """A subject above its category cap keeps its current weight."""
        assert bound_veterinary_estimate(35.0, 40.0, 20.0, BreedCategory.MEDIUM) == 35.0

    @pytest.mark.parametrize("estimate", [0.5, 8.0, 15.0, 30.0, 200.0])
    def test_bounded_estimates_validate(self, estimate):
        """Bounded estimates always pass validate_veterinary_estimate."""
        bounded = bound_veterinary_estimate(6.0, estimate, 20.0)
        assert validate_veterinary_estimate(6.0, bounded, 20.0)


class TestCheckGompertzParameters:
    """Tests for check_gompertz_parameters."""

    def test_valid(self):
        assert check_gompertz_parameters(GompertzParameters(25.0, 300.0, 90.0)) is None

    def test_failure_record(self, caplog):
        """Implausible parameters return a failure record and log a warning."""
        with caplog.at_level(logging.WARNING):
            failure = check_gompertz_parameters(GompertzParameters(150.0, 300.0, 5.0))

        assert isinstance(failure, ModelValidationFailure)
        assert len(failure.reasons) >= 2
        assert "adult weight" in str(failure)
        assert "failed validation" in caplog.text
