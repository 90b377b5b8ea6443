# src/pupgrowth/models/gompertz.py
"""Gompertz growth curve and its biological plausibility checks.

Implements:
    W(t) = A * exp(-exp(-k * (t - t_i)))

with ages in days, where A is the adult weight, t_i the inflection age and
k the growth-rate constant. k is derived from the growth duration D as

    k = GOMPERTZ_SPAN / D,    GOMPERTZ_SPAN = ln(-ln 0.05) - ln(-ln 0.95)

so the curve climbs from 5% to 95% of A over exactly D days. The 5% point
lies 1.10 / k days before t_i and the 95% point 2.97 / k days after it,
which puts the inflection in the first third of the growth window.

At t = t_i the curve is exactly A / e (about 36.8% of A) and at t_i + D it
is about 98.3% of A, whatever the parameters; only the birth weight
fraction depends on them. The curve is strictly increasing and never
exceeds A.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Union

import numpy as np

logger = logging.getLogger(__name__)

GOMPERTZ_SPAN = math.log(-math.log(0.05)) - math.log(-math.log(0.95))

# Parameter box, shared with the curve fitter
ADULT_WEIGHT_BOUNDS = (0.5, 100.0)
GROWTH_DURATION_BOUNDS = (10.0, 1000.0)
INFLECTION_AGE_BOUNDS = (10.0, 800.0)
MAX_INFLECTION_TO_DURATION = 2.0

# Plausible birth weight as a fraction of the adult weight
BIRTH_FRACTION_BOUNDS = (0.001, 0.15)


@dataclass(frozen=True)
class GompertzParameters:
    """Parameters of a Gompertz growth curve.

    Attributes:
        adult_weight: Asymptotic adult weight in kg.
        growth_duration: Days needed to grow from 5% to 95% of adult weight.
        inflection_age: Age in days of maximal growth rate.
        r_squared: Goodness of fit in [0, 1]; 0 for unfitted priors.
        confidence: Confidence in the parameter set, in [0, 1].
    """

    adult_weight: float
    growth_duration: float
    inflection_age: float
    r_squared: float = 0.0
    confidence: float = 0.0

    @property
    def growth_rate(self) -> float:
        """Growth-rate constant k (per day)."""
        return growth_rate_constant(self.growth_duration)

    def as_array(self) -> np.ndarray:
        """Shape parameters as ``[adult_weight, growth_duration, inflection_age]``."""
        return np.array(
            [self.adult_weight, self.growth_duration, self.inflection_age], dtype=float
        )

    def with_fit(self, r_squared: float, confidence: float) -> "GompertzParameters":
        return replace(self, r_squared=r_squared, confidence=confidence)


def growth_rate_constant(growth_duration: float) -> float:
    """Growth-rate constant k for a given growth duration in days."""
    return GOMPERTZ_SPAN / growth_duration


def gompertz_curve(
    ages: Union[np.ndarray, float],
    adult_weight: float,
    growth_duration: float,
    inflection_age: float,
) -> np.ndarray:
    """Vectorised Gompertz curve without input checks.

    Args:
        ages: Ages in days.
        adult_weight: Asymptotic weight A (> 0).
        growth_duration: Growth duration D (> 0).
        inflection_age: Inflection age t_i.

    Returns:
        Weights with the same shape as ``ages``, each in [0, A].
    """
    ages = np.asarray(ages, dtype=float)
    k = growth_rate_constant(growth_duration)
    # Very young ages under extreme parameters overflow the inner exp to inf,
    # which correctly drives the weight to 0
    with np.errstate(over="ignore"):
        weights = adult_weight * np.exp(-np.exp(-k * (ages - inflection_age)))
    return np.minimum(weights, adult_weight)


def gompertz_weight(age: float, params: GompertzParameters) -> float:
    """Predicted weight in kg at ``age`` days.

    Returns 0.0 for negative ages and for parameter sets with a
    non-positive adult weight or growth duration.

    Example:
        >>> params = GompertzParameters(25.0, 300.0, 90.0)
        >>> round(gompertz_weight(90.0, params) / 25.0, 3)
        0.368
    """
    if age < 0 or params.adult_weight <= 0 or params.growth_duration <= 0:
        return 0.0
    return float(
        gompertz_curve(age, params.adult_weight, params.growth_duration, params.inflection_age)
    )


def explain_gompertz_parameters(params: GompertzParameters) -> List[str]:
    """List the reasons a parameter set is biologically implausible.

    Args:
        params: Parameters to check.

    Returns:
        Human-readable reasons; empty when the parameters are plausible.
    """
    values = (params.adult_weight, params.growth_duration, params.inflection_age)
    if not all(math.isfinite(v) for v in values):
        return [f"non-finite parameters: {values}"]

    reasons = []
    low, high = ADULT_WEIGHT_BOUNDS
    if not low <= params.adult_weight <= high:
        reasons.append(f"adult weight {params.adult_weight:.2f} kg outside [{low}, {high}]")

    low, high = GROWTH_DURATION_BOUNDS
    if not low <= params.growth_duration <= high:
        reasons.append(f"growth duration {params.growth_duration:.1f} d outside [{low}, {high}]")

    low, high = INFLECTION_AGE_BOUNDS
    if not low <= params.inflection_age <= high:
        reasons.append(f"inflection age {params.inflection_age:.1f} d outside [{low}, {high}]")

    if params.inflection_age > MAX_INFLECTION_TO_DURATION * params.growth_duration:
        reasons.append(
            f"inflection age {params.inflection_age:.1f} d exceeds "
            f"{MAX_INFLECTION_TO_DURATION:g}x growth duration {params.growth_duration:.1f} d"
        )

    # The birth fraction needs a computable curve
    if params.adult_weight <= 0 or params.growth_duration <= 0:
        return reasons

    birth_fraction = gompertz_weight(0.0, params) / params.adult_weight
    low, high = BIRTH_FRACTION_BOUNDS
    if not low <= birth_fraction <= high:
        reasons.append(f"birth weight fraction {birth_fraction:.4f} outside [{low}, {high}]")

    return reasons


def validate_gompertz_parameters(params: GompertzParameters) -> bool:
    """True when the parameter set is biologically plausible.

    See explain_gompertz_parameters for the individual checks.
    """
    return not explain_gompertz_parameters(params)
