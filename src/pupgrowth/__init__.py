# src/pupgrowth/__init__.py
"""
Puppy growth forecasting.

Fits breed-conditioned Gompertz growth curves to sparse weight
observations, cross-checked against veterinary rule-of-thumb estimates.

Components:
- data: Observations, breed categories and profiles, trajectory points
- models: Gompertz curve, breed prior, curve fitter, heuristic estimator
- evaluation: Fit quality metrics and plausibility bounds
- inference: Prediction bands and the end-to-end forecast
- utils: OmegaConf configuration and logging setup
"""

from pupgrowth.utils.config import ConfigurationError, load_config
from pupgrowth.data.breeds import (
    CATEGORY_PROFILES,
    BreedCategory,
    BreedProfile,
    GrowthPhase,
    Sex,
)
from pupgrowth.data.observations import (
    DataInsufficientError,
    GrowthEstimationError,
    WeightObservation,
)
from pupgrowth.data.trajectory import ConfidenceInterval, GrowthPrediction
from pupgrowth.models.gompertz import GompertzParameters, gompertz_weight
from pupgrowth.evaluation.validation import ModelValidationFailure
from pupgrowth.models.breed_prior import (
    calculate_breed_based_parameters,
    estimate_breed_profile_from_weight,
)
from pupgrowth.models.curve_fit import GompertzFitResult, fit_gompertz_to_data
from pupgrowth.models.heuristics import (
    VeterinaryEstimate,
    calculate_veterinary_growth_estimate,
    create_simple_growth_prediction,
)
from pupgrowth.inference.predictions import generate_gompertz_predictions
from pupgrowth.inference.forecast import (
    ForecastSettings,
    GrowthForecast,
    forecast_growth,
    settings_from_config,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "ConfigurationError",
    "DataInsufficientError",
    "GrowthEstimationError",
    "ModelValidationFailure",
    # Data
    "BreedCategory",
    "BreedProfile",
    "CATEGORY_PROFILES",
    "ConfidenceInterval",
    "GrowthPhase",
    "GrowthPrediction",
    "Sex",
    "WeightObservation",
    # Gompertz
    "GompertzParameters",
    "GompertzFitResult",
    "calculate_breed_based_parameters",
    "estimate_breed_profile_from_weight",
    "fit_gompertz_to_data",
    "generate_gompertz_predictions",
    "gompertz_weight",
    # Heuristics
    "VeterinaryEstimate",
    "calculate_veterinary_growth_estimate",
    "create_simple_growth_prediction",
    # Forecast
    "ForecastSettings",
    "GrowthForecast",
    "forecast_growth",
    "settings_from_config",
    "load_config",
]
