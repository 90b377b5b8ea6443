# src/pupgrowth/data/breeds.py
"""Breed size categories, breed profiles and growth phases.

Categories are ordered by typical adult mass:
    toy < small < medium < large < giant

Each category has a reference profile used whenever the caller does not
supply one. Female weight ranges are the male range scaled by
``FEMALE_RANGE_FACTOR``, which makes them both lower and narrower.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Tuple

from pupgrowth.utils.config import ConfigurationError

logger = logging.getLogger(__name__)

# Calendar constants used to convert profile maturity ages
DAYS_PER_MONTH = 30.44
WEEKS_PER_MONTH = 4.33

FEMALE_RANGE_FACTOR = 0.85


class BreedCategory(Enum):
    """Coarse breed size class, totally ordered by typical adult mass."""

    TOY = "toy"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    GIANT = "giant"

    @property
    def rank(self) -> int:
        """Position in the size ordering (toy is 0)."""
        return _CATEGORY_ORDER.index(self)

    def __lt__(self, other: "BreedCategory") -> bool:
        if not isinstance(other, BreedCategory):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "BreedCategory") -> bool:
        if not isinstance(other, BreedCategory):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: "BreedCategory") -> bool:
        if not isinstance(other, BreedCategory):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: "BreedCategory") -> bool:
        if not isinstance(other, BreedCategory):
            return NotImplemented
        return self.rank >= other.rank


_CATEGORY_ORDER = list(BreedCategory)


class Sex(Enum):
    """Sex of the animal; selects the adult weight range."""

    MALE = "male"
    FEMALE = "female"


def parse_sex(sex: "Sex | str") -> Sex:
    """Accept a Sex member or its string value ("male" / "female")."""
    if isinstance(sex, Sex):
        return sex
    try:
        return Sex(str(sex).lower())
    except ValueError as e:
        raise ValueError(f"Unknown sex: {sex!r} (expected 'male' or 'female')") from e


class GrowthPhase(Enum):
    """Stage of the growth curve a subject is in."""

    RAPID_GROWTH = "rapid_growth"
    STEADY_GROWTH = "steady_growth"
    SLOWING_GROWTH = "slowing_growth"
    APPROACHING_ADULT = "approaching_adult"
    ADULT = "adult"


@dataclass(frozen=True)
class BreedProfile:
    """Breed-level growth expectations.

    Attributes:
        category: Size category.
        male_weight_range: (min, max) adult weight in kg for males.
        female_weight_range: (min, max) adult weight in kg for females.
        maturity_age_months: Age at which adult weight is reached.

    Raises:
        ConfigurationError: If a range is inverted or non-positive, or the
            maturity age is not positive.
    """

    category: BreedCategory
    male_weight_range: Tuple[float, float]
    female_weight_range: Tuple[float, float]
    maturity_age_months: float

    def __post_init__(self) -> None:
        if not isinstance(self.category, BreedCategory):
            raise ConfigurationError(f"Invalid breed category: {self.category!r}")
        for sex, weight_range in (
            ("male", self.male_weight_range),
            ("female", self.female_weight_range),
        ):
            if len(weight_range) != 2:
                raise ConfigurationError(
                    f"{sex} weight range must be [min, max], got {weight_range!r}"
                )
            low, high = weight_range
            if low <= 0 or high <= 0:
                raise ConfigurationError(f"{sex} weight range must be positive, got {weight_range!r}")
            if low > high:
                raise ConfigurationError(f"{sex} weight range is inverted: {weight_range!r}")
        if self.maturity_age_months <= 0:
            raise ConfigurationError(
                f"Maturity age must be positive, got {self.maturity_age_months}"
            )

    def weight_range(self, sex: "Sex | str") -> Tuple[float, float]:
        """Adult weight range for the given sex."""
        if parse_sex(sex) is Sex.FEMALE:
            return self.female_weight_range
        return self.male_weight_range

    def midpoint_weight(self, sex: "Sex | str") -> float:
        """Midpoint of the sex-specific adult weight range."""
        low, high = self.weight_range(sex)
        return (low + high) / 2.0

    @property
    def maturity_age_days(self) -> float:
        return self.maturity_age_months * DAYS_PER_MONTH

    @property
    def maturity_age_weeks(self) -> float:
        return self.maturity_age_months * WEEKS_PER_MONTH

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BreedProfile":
        """Build a profile from a loosely structured mapping.

        Expected keys: ``category``, ``male`` ([min, max]), ``female``
        ([min, max]) and ``maturity_age_months``.

        Raises:
            ConfigurationError: On missing keys or malformed values.
        """
        try:
            category = data["category"]
            if not isinstance(category, BreedCategory):
                category = BreedCategory(str(category).lower())
            male = tuple(float(v) for v in data["male"])
            female = tuple(float(v) for v in data["female"])
            maturity = float(data["maturity_age_months"])
        except KeyError as e:
            raise ConfigurationError(f"Breed profile is missing key {e}") from e
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed breed profile {dict(data)!r}: {e}") from e

        return cls(
            category=category,
            male_weight_range=male,
            female_weight_range=female,
            maturity_age_months=maturity,
        )


def _reference_profile(
    category: BreedCategory, male_range: Tuple[float, float], maturity_months: float
) -> BreedProfile:
    low, high = male_range
    return BreedProfile(
        category=category,
        male_weight_range=(low, high),
        female_weight_range=(low * FEMALE_RANGE_FACTOR, high * FEMALE_RANGE_FACTOR),
        maturity_age_months=maturity_months,
    )


# Mixed-breed reference profiles; male ranges tile 1-80 kg
CATEGORY_PROFILES: Dict[BreedCategory, BreedProfile] = {
    BreedCategory.TOY: _reference_profile(BreedCategory.TOY, (1.0, 5.0), 8),
    BreedCategory.SMALL: _reference_profile(BreedCategory.SMALL, (5.0, 15.0), 10),
    BreedCategory.MEDIUM: _reference_profile(BreedCategory.MEDIUM, (15.0, 30.0), 12),
    BreedCategory.LARGE: _reference_profile(BreedCategory.LARGE, (30.0, 50.0), 15),
    BreedCategory.GIANT: _reference_profile(BreedCategory.GIANT, (50.0, 80.0), 20),
}

# Upper adult weight (kg) of each category; also the classification thresholds
CATEGORY_MAX_WEIGHT_KG: Dict[BreedCategory, float] = {
    category: profile.male_weight_range[1] for category, profile in CATEGORY_PROFILES.items()
}

# End of the rapid, steady and slowing phases in weeks
PHASE_BOUNDARIES_WEEKS: Dict[BreedCategory, Tuple[float, float, float]] = {
    BreedCategory.TOY: (12, 24, 32),
    BreedCategory.SMALL: (16, 32, 40),
    BreedCategory.MEDIUM: (16, 36, 48),
    BreedCategory.LARGE: (20, 40, 60),
    BreedCategory.GIANT: (24, 48, 80),
}


def classify_breed_category(estimated_adult_weight: float) -> BreedCategory:
    """Map a projected adult weight onto a size category.

    Total and monotonic: a heavier projected adult never maps to a
    smaller category. Weights above the giant cap still map to giant.
    """
    for category in _CATEGORY_ORDER:
        if estimated_adult_weight <= CATEGORY_MAX_WEIGHT_KG[category]:
            return category
    return BreedCategory.GIANT


def determine_growth_phase(age_weeks: float, profile: BreedProfile) -> GrowthPhase:
    """Growth phase for a subject of ``profile`` at ``age_weeks``."""
    rapid_end, steady_end, slowing_end = PHASE_BOUNDARIES_WEEKS[profile.category]

    if age_weeks < rapid_end:
        return GrowthPhase.RAPID_GROWTH
    if age_weeks < steady_end:
        return GrowthPhase.STEADY_GROWTH
    if age_weeks < slowing_end:
        return GrowthPhase.SLOWING_GROWTH
    if age_weeks < profile.maturity_age_weeks:
        return GrowthPhase.APPROACHING_ADULT
    return GrowthPhase.ADULT
