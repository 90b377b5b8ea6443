# src/pupgrowth/evaluation/validation.py
"""Sanity bounds shared by both adult-weight estimators.

Every plausibility threshold used when judging an adult-weight estimate
lives here:
- MAX_GROWTH_FACTOR: no subject more than quadruples its current weight
- ADULT_AGE_THRESHOLD_WEEKS / ADULT_MAX_GROWTH_FACTOR: past ~8 months no
  subject gains another 30%
- SPECIES_MAX_WEIGHT_KG: absolute ceiling for any dog
- CATEGORY_MAX_WEIGHT_KG: per-category adult caps (defined with the categories)

Gompertz parameter sets are not thrown away when they fail validation:
check_gompertz_parameters returns a ModelValidationFailure record that
travels with the parameters so callers can still display them.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from pupgrowth.data.breeds import CATEGORY_MAX_WEIGHT_KG, BreedCategory
from pupgrowth.models.gompertz import GompertzParameters, explain_gompertz_parameters

logger = logging.getLogger(__name__)

MAX_GROWTH_FACTOR = 4.0
ADULT_AGE_THRESHOLD_WEEKS = 32.0
ADULT_MAX_GROWTH_FACTOR = 1.3
SPECIES_MAX_WEIGHT_KG = 80.0

__all__ = [
    "ADULT_AGE_THRESHOLD_WEEKS",
    "ADULT_MAX_GROWTH_FACTOR",
    "CATEGORY_MAX_WEIGHT_KG",
    "MAX_GROWTH_FACTOR",
    "SPECIES_MAX_WEIGHT_KG",
    "ModelValidationFailure",
    "bound_veterinary_estimate",
    "check_gompertz_parameters",
    "validate_veterinary_estimate",
]


@dataclass(frozen=True)
class ModelValidationFailure:
    """A parameter set failed biological validation.

    Attributes:
        reasons: Human-readable description of each failed check.
    """

    reasons: Tuple[str, ...]

    def __str__(self) -> str:
        return "; ".join(self.reasons)


def check_gompertz_parameters(params: GompertzParameters) -> Optional[ModelValidationFailure]:
    """Validate Gompertz parameters, returning the failure record if any."""
    reasons = explain_gompertz_parameters(params)
    if not reasons:
        return None
    failure = ModelValidationFailure(reasons=tuple(reasons))
    logger.warning(f"Gompertz parameters failed validation: {failure}")
    return failure


def validate_veterinary_estimate(
    current_weight: float,
    estimated_adult_weight: float,
    current_age_in_weeks: float,
) -> bool:
    """Check that an adult-weight estimate is biologically plausible.

    Args:
        current_weight: Latest observed weight in kg.
        estimated_adult_weight: Estimated adult weight in kg.
        current_age_in_weeks: Age at the latest observation.

    Returns:
        False if the estimate shrinks the subject, more than quadruples it,
        adds over 30% past adult age, or exceeds the species ceiling.

    Example:
        >>> validate_veterinary_estimate(5, 25, 8)
        False
        >>> validate_veterinary_estimate(5, 12, 12)
        True
    """
    if estimated_adult_weight < current_weight:
        return False
    if estimated_adult_weight > current_weight * MAX_GROWTH_FACTOR:
        return False
    if (
        current_age_in_weeks > ADULT_AGE_THRESHOLD_WEEKS
        and estimated_adult_weight > current_weight * ADULT_MAX_GROWTH_FACTOR
    ):
        return False
    if estimated_adult_weight > SPECIES_MAX_WEIGHT_KG:
        return False
    return True


def bound_veterinary_estimate(
    current_weight: float,
    estimate: float,
    current_age_in_weeks: float,
    category: Optional[BreedCategory] = None,
) -> float:
    """Clamp an adult-weight estimate into the plausible region.

    Upper limits (category cap, species ceiling, growth factors) are applied
    first; the estimate is then raised to at least the current weight, so
    a subject heavier than its category cap keeps its current weight.
    """
    upper = min(current_weight * MAX_GROWTH_FACTOR, SPECIES_MAX_WEIGHT_KG)
    if current_age_in_weeks > ADULT_AGE_THRESHOLD_WEEKS:
        upper = min(upper, current_weight * ADULT_MAX_GROWTH_FACTOR)
    if category is not None:
        upper = min(upper, CATEGORY_MAX_WEIGHT_KG[category])

    bounded = max(min(estimate, upper), current_weight)
    if bounded != estimate:
        logger.debug(f"Bounded adult estimate {estimate:.2f} kg -> {bounded:.2f} kg")
    return bounded
