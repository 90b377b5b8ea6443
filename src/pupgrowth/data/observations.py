# src/pupgrowth/data/observations.py
"""Weight observations and age arithmetic.

Observations are owned by the caller: every helper here returns new
values and never mutates or reorders the input collection.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Tuple

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7.0


class GrowthEstimationError(Exception):
    """Base class for errors raised by the growth estimators."""

    pass


class DataInsufficientError(GrowthEstimationError):
    """Fewer valid observations than an estimator needs.

    Args:
        required: Minimum number of valid observations.
        available: Number of valid observations that were supplied.
    """

    def __init__(self, required: int, available: int, message: str = "") -> None:
        self.required = required
        self.available = available
        if not message:
            message = (
                f"At least {required} valid weight observation(s) required, "
                f"got {available}"
            )
        super().__init__(message)


@dataclass(frozen=True)
class WeightObservation:
    """A single dated body-weight measurement.

    Attributes:
        date: Calendar date of the measurement.
        weight_kg: Measured weight in kilograms.
    """

    date: date
    weight_kg: float


def _as_date(value: date) -> date:
    # datetime is a date subclass but cannot be subtracted from a plain date
    if isinstance(value, datetime):
        return value.date()
    return value


def age_in_days(when: date, birth_date: date) -> int:
    """Whole days elapsed between ``birth_date`` and ``when``.

    Negative when ``when`` precedes the birth date.
    """
    return (_as_date(when) - _as_date(birth_date)).days


def age_in_weeks(when: date, birth_date: date) -> float:
    """Age in (fractional) weeks, derived from whole days."""
    return age_in_days(when, birth_date) / DAYS_PER_WEEK


def sort_observations(observations: Iterable[WeightObservation]) -> List[WeightObservation]:
    """Return observations ordered by date; equal dates keep input order."""
    return sorted(observations, key=lambda obs: _as_date(obs.date))


def filter_valid_observations(
    observations: Iterable[WeightObservation],
    birth_date: date,
) -> List[WeightObservation]:
    """Drop observations dated before birth or with a non-positive weight.

    Returns:
        Remaining observations sorted by date.
    """
    observations = list(observations)
    valid = [
        obs
        for obs in observations
        if age_in_days(obs.date, birth_date) >= 0
        and math.isfinite(obs.weight_kg)
        and obs.weight_kg > 0
    ]
    dropped = len(observations) - len(valid)
    if dropped:
        logger.debug(f"Dropped {dropped} observation(s) before birth or with invalid weight")
    return sort_observations(valid)


def valid_observation_ages(
    observations: Iterable[WeightObservation],
    birth_date: date,
) -> List[Tuple[int, float]]:
    """Convert observations to ``(age_in_days, weight_kg)`` pairs.

    Args:
        observations: Weight observations in any order.
        birth_date: Reference birth date, treated as ground truth.

    Returns:
        Pairs for the valid observations, sorted by age.
    """
    return [
        (age_in_days(obs.date, birth_date), float(obs.weight_kg))
        for obs in filter_valid_observations(observations, birth_date)
    ]
