# src/pupgrowth/data/__init__.py
"""
Data model for growth forecasting.

Components:
- observations: Dated weight observations, age helpers, estimation errors
- breeds: Breed categories, reference profiles, growth phases
- trajectory: Prediction points and confidence intervals
"""

from .breeds import (
    CATEGORY_MAX_WEIGHT_KG,
    CATEGORY_PROFILES,
    BreedCategory,
    BreedProfile,
    GrowthPhase,
    Sex,
    classify_breed_category,
    determine_growth_phase,
    parse_sex,
)
from .observations import (
    DataInsufficientError,
    GrowthEstimationError,
    WeightObservation,
    age_in_days,
    age_in_weeks,
    filter_valid_observations,
    sort_observations,
)
from .trajectory import ConfidenceInterval, GrowthPrediction, is_non_decreasing

__all__ = [
    # Breeds
    "BreedCategory",
    "BreedProfile",
    "CATEGORY_MAX_WEIGHT_KG",
    "CATEGORY_PROFILES",
    "GrowthPhase",
    "Sex",
    "classify_breed_category",
    "determine_growth_phase",
    "parse_sex",
    # Observations
    "DataInsufficientError",
    "GrowthEstimationError",
    "WeightObservation",
    "age_in_days",
    "age_in_weeks",
    "filter_valid_observations",
    "sort_observations",
    # Trajectory
    "ConfidenceInterval",
    "GrowthPrediction",
    "is_non_decreasing",
]
