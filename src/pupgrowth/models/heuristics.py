# src/pupgrowth/models/heuristics.py
"""Rule-of-thumb adult weight estimation used alongside the Gompertz fit.

Veterinary practice estimates adult weight from a single recent weight
with age-specific rules ("double the 16-week weight", "8 weeks is about
27.5% of adult weight", ...). Each rule is an entry of HEURISTIC_FORMULAS:

- window(age_weeks, maturity_weeks) -> bool: where the rule applies
- estimate(weight, age_weeks) -> float: the rule itself
- confidence(age_weeks, maturity_weeks) -> float: trust at that age

Rules are evaluated in table order. All applicable estimates are combined
into a confidence-weighted average, then bounded by
pupgrowth.evaluation.validation.bound_veterinary_estimate. Adding a rule
means adding a table entry.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, List, Optional, Tuple

from pupgrowth.data.breeds import BreedCategory, BreedProfile
from pupgrowth.data.observations import (
    DataInsufficientError,
    WeightObservation,
    age_in_days,
    age_in_weeks,
    filter_valid_observations,
)
from pupgrowth.data.trajectory import TIME_UNIT_WEEKS, GrowthPrediction
from pupgrowth.evaluation.validation import bound_veterinary_estimate
from pupgrowth.models.breed_prior import estimate_breed_profile_from_weight

logger = logging.getLogger(__name__)

YOUNG_AGE_WEEKS = 6.0

# Extra confidence per supporting observation beyond the latest one
SUPPORT_BONUS_PER_OBSERVATION = 0.02
MAX_SUPPORT_BONUS = 0.1
MAX_CONFIDENCE = 0.98


@dataclass(frozen=True)
class HeuristicFormula:
    """One age-windowed adult weight rule."""

    identifier: str
    description: str
    window: Callable[[float, float], bool]
    estimate: Callable[[float, float], float]
    confidence: Callable[[float, float], float]


@dataclass(frozen=True)
class FormulaEstimate:
    """Adult weight proposed by one applied formula."""

    formula: str
    weight: float
    confidence: float


@dataclass(frozen=True)
class VeterinaryEstimate:
    """Combined heuristic adult weight estimate.

    Attributes:
        estimated_adult_weight: Bounded adult weight in kg.
        confidence: Overall confidence in [0, 1].
        breed_category: Category used for bounding.
        used_formulas: Identifiers of the applied formulas, in order.
        formula_estimates: Individual estimates behind the result.
    """

    estimated_adult_weight: float
    confidence: float
    breed_category: BreedCategory
    used_formulas: Tuple[str, ...]
    formula_estimates: Tuple[FormulaEstimate, ...] = ()


def _near(ideal: float, tolerance: float, near: float, far: float) -> Callable[[float, float], float]:
    return lambda age, maturity: near if abs(age - ideal) <= tolerance else far


HEURISTIC_FORMULAS: Tuple[HeuristicFormula, ...] = (
    HeuristicFormula(
        identifier="annualized_weekly_rate",
        description="(weight / age in weeks) x 52",
        window=lambda age, maturity: YOUNG_AGE_WEEKS <= age <= 52,
        estimate=lambda weight, age: weight / age * 52,
        confidence=lambda age, maturity: 0.8 if age >= 12 else 0.6,
    ),
    HeuristicFormula(
        identifier="eight_week_ratio",
        description="weight / 0.275 (8 weeks is ~27.5% of adult weight)",
        window=lambda age, maturity: 6 <= age <= 10,
        estimate=lambda weight, age: weight / 0.275,
        confidence=_near(8, 1, near=0.75, far=0.6),
    ),
    HeuristicFormula(
        identifier="fourteen_week_multiplier",
        description="weight x 2.5 around 14 weeks",
        window=lambda age, maturity: 10 <= age <= 18,
        estimate=lambda weight, age: weight * 2.5,
        confidence=_near(14, 2, near=0.8, far=0.65),
    ),
    HeuristicFormula(
        identifier="sixteen_week_doubling",
        description="weight x 2 (16 weeks is ~50% of adult weight)",
        window=lambda age, maturity: 12 <= age <= 20,
        estimate=lambda weight, age: weight * 2,
        confidence=_near(16, 2, near=0.9, far=0.7),
    ),
    HeuristicFormula(
        identifier="six_month_ratio",
        description="weight / 0.75 (26 weeks is ~75% of adult weight)",
        window=lambda age, maturity: 20 <= age <= 30,
        estimate=lambda weight, age: weight / 0.75,
        confidence=_near(26, 2, near=0.85, far=0.7),
    ),
    HeuristicFormula(
        identifier="approaching_adult_margin",
        description="weight x 1.2 between 30 weeks and maturity",
        window=lambda age, maturity: 30 < age < maturity,
        estimate=lambda weight, age: weight * 1.2,
        confidence=lambda age, maturity: 0.7,
    ),
    HeuristicFormula(
        identifier="adult_margin",
        description="weight x 1.1 once the breed's maturity age is reached",
        window=lambda age, maturity: age >= maturity,
        estimate=lambda weight, age: weight * 1.1,
        confidence=lambda age, maturity: 0.95 if age >= maturity + 8 else 0.85,
    ),
    HeuristicFormula(
        identifier="young_puppy_rate",
        description="(weight / age in weeks) x 52 for puppies under 6 weeks",
        window=lambda age, maturity: age < YOUNG_AGE_WEEKS,
        estimate=lambda weight, age: weight / max(age, 1.0) * 52,
        confidence=lambda age, maturity: 0.4,
    ),
)


def apply_formulas(
    weight: float,
    age_weeks: float,
    maturity_weeks: float,
    formulas: Tuple[HeuristicFormula, ...] = HEURISTIC_FORMULAS,
) -> List[FormulaEstimate]:
    """Evaluate every formula whose window contains ``age_weeks``."""
    return [
        FormulaEstimate(
            formula=formula.identifier,
            weight=formula.estimate(weight, age_weeks),
            confidence=formula.confidence(age_weeks, maturity_weeks),
        )
        for formula in formulas
        if formula.window(age_weeks, maturity_weeks)
    ]


def calculate_veterinary_growth_estimate(
    observations: Iterable[WeightObservation],
    birth_date: date,
    profile: Optional[BreedProfile] = None,
) -> VeterinaryEstimate:
    """Estimate adult weight from the latest observation with veterinary rules.

    Args:
        observations: Weight observations in any order.
        birth_date: Reference birth date.
        profile: Breed profile; synthesised from the latest observation
            when omitted.

    Returns:
        VeterinaryEstimate bounded to the plausible region.

    Raises:
        DataInsufficientError: If no valid observation remains.

    Example:
        >>> estimate = calculate_veterinary_growth_estimate(observations, birth)
        >>> estimate.used_formulas
        ('annualized_weekly_rate', 'eight_week_ratio')
    """
    valid = filter_valid_observations(observations, birth_date)
    if not valid:
        raise DataInsufficientError(required=1, available=0)

    latest = valid[-1]
    current_weight = latest.weight_kg
    age_weeks = age_in_weeks(latest.date, birth_date)

    if profile is None:
        profile = estimate_breed_profile_from_weight(
            current_weight, age_in_days(latest.date, birth_date)
        )
    maturity_weeks = profile.maturity_age_weeks

    estimates = apply_formulas(current_weight, age_weeks, maturity_weeks)
    total_confidence = sum(est.confidence for est in estimates)
    combined = sum(est.weight * est.confidence for est in estimates) / total_confidence

    bounded = bound_veterinary_estimate(current_weight, combined, age_weeks, profile.category)

    support_bonus = min(MAX_SUPPORT_BONUS, SUPPORT_BONUS_PER_OBSERVATION * (len(valid) - 1))
    confidence = min(MAX_CONFIDENCE, total_confidence / len(estimates) + support_bonus)

    logger.info(
        f"Heuristic estimate at {age_weeks:.1f} wk ({profile.category.value}): "
        f"{bounded:.2f} kg from {[est.formula for est in estimates]}, "
        f"confidence {confidence:.2f}"
    )

    return VeterinaryEstimate(
        estimated_adult_weight=bounded,
        confidence=confidence,
        breed_category=profile.category,
        used_formulas=tuple(est.formula for est in estimates),
        formula_estimates=tuple(estimates),
    )


def create_simple_growth_prediction(
    observations: Iterable[WeightObservation],
    birth_date: date,
    num_future_points: int = 26,
    profile: Optional[BreedProfile] = None,
) -> List[GrowthPrediction]:
    """Observed weights followed by weekly points easing toward the adult estimate.

    Future growth slows exponentially as the subject approaches maturity;
    future weights never decrease and never exceed the heuristic estimate.

    Args:
        observations: Weight observations in any order.
        birth_date: Reference birth date.
        num_future_points: Number of weekly points after the latest observation.
        profile: Optional breed profile, as for calculate_veterinary_growth_estimate.

    Returns:
        Predictions in weeks: observed points in date order, then future points.

    Raises:
        DataInsufficientError: If no valid observation remains.
        ValueError: If num_future_points is negative.
    """
    if num_future_points < 0:
        raise ValueError(f"num_future_points must be >= 0, got {num_future_points}")

    valid = filter_valid_observations(observations, birth_date)
    if not valid:
        raise DataInsufficientError(required=1, available=0)
    if profile is None:
        latest = valid[-1]
        profile = estimate_breed_profile_from_weight(
            latest.weight_kg, age_in_days(latest.date, birth_date)
        )
    estimate = calculate_veterinary_growth_estimate(valid, birth_date, profile)

    predictions = [
        GrowthPrediction(
            age=age_in_weeks(obs.date, birth_date),
            weight_kg=obs.weight_kg,
            is_observed=True,
            time_unit=TIME_UNIT_WEEKS,
        )
        for obs in valid
    ]

    target = estimate.estimated_adult_weight
    current_age = predictions[-1].age
    remaining = max(0.0, target - predictions[-1].weight_kg)
    maturity_weeks = profile.maturity_age_weeks

    for week in range(1, num_future_points + 1):
        future_age = current_age + week
        maturity_progress = min(1.0, future_age / maturity_weeks)
        growth_rate = math.exp(-2.0 * maturity_progress)
        weekly_growth = remaining * growth_rate / num_future_points
        previous = predictions[-1].weight_kg
        predictions.append(
            GrowthPrediction(
                age=future_age,
                weight_kg=min(previous + weekly_growth, target),
                is_observed=False,
                time_unit=TIME_UNIT_WEEKS,
            )
        )

    return predictions
