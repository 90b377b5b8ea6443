# src/pupgrowth/inference/forecast.py
"""End-to-end growth forecast.

Pipeline:
1. Filter observations and pick a breed profile (given or inferred)
2. Build the breed prior and, with two or more observations, fit the
   Gompertz curve
3. Forecast with the fitted curve when it validates, otherwise fall back
   to the heuristic trajectory
4. Cross-check the adult weight against the heuristic estimate
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional, Union

from omegaconf import DictConfig

from pupgrowth.data.breeds import (
    CATEGORY_PROFILES,
    BreedCategory,
    BreedProfile,
    GrowthPhase,
    Sex,
    determine_growth_phase,
)
from pupgrowth.data.observations import (
    DAYS_PER_WEEK,
    DataInsufficientError,
    WeightObservation,
    age_in_days,
    age_in_weeks,
    filter_valid_observations,
)
from pupgrowth.data.trajectory import GrowthPrediction
from pupgrowth.inference.predictions import PredictionSettings, generate_gompertz_predictions
from pupgrowth.models.breed_prior import (
    calculate_breed_based_parameters,
    estimate_breed_profile_from_weight,
)
from pupgrowth.models.curve_fit import (
    MIN_FIT_OBSERVATIONS,
    FitSettings,
    GompertzFitResult,
    fit_gompertz_to_data,
)
from pupgrowth.models.gompertz import GompertzParameters
from pupgrowth.models.heuristics import (
    VeterinaryEstimate,
    calculate_veterinary_growth_estimate,
    create_simple_growth_prediction,
)
from pupgrowth.utils.config import get_value, load_category_profiles

logger = logging.getLogger(__name__)

METHOD_GOMPERTZ = "gompertz"
METHOD_HEURISTIC = "heuristic"

# Relative disagreement between the two estimators that triggers a warning
CROSS_CHECK_WARNING_RATIO = 0.3

# Share of the adult weight taken as the end of growth
MATURITY_WEIGHT_FRACTION = 0.95


@dataclass(frozen=True)
class ForecastSettings:
    """Settings for forecast_growth, usually built with settings_from_config."""

    fit: FitSettings = field(default_factory=FitSettings)
    prediction: PredictionSettings = field(default_factory=PredictionSettings)
    max_iterations: int = 100
    horizon_days: float = 365.0
    step_days: float = 7.0
    future_weeks: int = 26
    profiles: Dict[BreedCategory, BreedProfile] = field(
        default_factory=lambda: dict(CATEGORY_PROFILES)
    )


def settings_from_config(cfg: Optional[DictConfig]) -> ForecastSettings:
    """Translate a loaded configuration into ForecastSettings.

    Missing keys keep their defaults.
    """
    defaults = ForecastSettings()
    fit = FitSettings(
        prior_strength=float(get_value(cfg, "fitting.prior_strength", defaults.fit.prior_strength)),
        restart_scales=tuple(
            float(s) for s in get_value(cfg, "fitting.restart_scales", defaults.fit.restart_scales)
        ),
        tolerance=float(get_value(cfg, "fitting.tolerance", defaults.fit.tolerance)),
    )
    prediction = PredictionSettings(
        base_interval_fraction=float(
            get_value(
                cfg,
                "prediction.base_interval_fraction",
                defaults.prediction.base_interval_fraction,
            )
        ),
        widening_per_year=float(
            get_value(cfg, "prediction.widening_per_year", defaults.prediction.widening_per_year)
        ),
    )
    return ForecastSettings(
        fit=fit,
        prediction=prediction,
        max_iterations=int(get_value(cfg, "fitting.max_iterations", defaults.max_iterations)),
        horizon_days=float(get_value(cfg, "prediction.horizon_days", defaults.horizon_days)),
        step_days=float(get_value(cfg, "prediction.step_days", defaults.step_days)),
        future_weeks=int(get_value(cfg, "heuristic.future_weeks", defaults.future_weeks)),
        profiles=load_category_profiles(cfg),
    )


@dataclass(frozen=True)
class GrowthForecast:
    """Everything forecast_growth knows about one subject.

    Attributes:
        profile: Breed profile used (given or inferred).
        prior_parameters: Breed prior that seeded the fit.
        fit: Gompertz fit result, or None with fewer than two observations.
        predictions: Forecast trajectory; days for the Gompertz method,
            weeks for the heuristic method.
        veterinary_estimate: Heuristic adult weight estimate.
        method: "gompertz" or "heuristic".
        growth_phase: Growth phase at the latest observation.
        weekly_growth_rate: kg/week between the two most recent dates,
            None with a single observation date.
    """

    profile: BreedProfile
    prior_parameters: GompertzParameters
    fit: Optional[GompertzFitResult]
    predictions: List[GrowthPrediction]
    veterinary_estimate: VeterinaryEstimate
    method: str
    growth_phase: GrowthPhase
    weekly_growth_rate: Optional[float] = None

    @property
    def adult_weight(self) -> float:
        """Adult weight according to the chosen method."""
        if self.method == METHOD_GOMPERTZ and self.fit is not None:
            return self.fit.parameters.adult_weight
        return self.veterinary_estimate.estimated_adult_weight

    @property
    def estimated_maturity_age_days(self) -> float:
        """Age in days at which growth is considered complete.

        The fitted curve's 95% point for the Gompertz method, the breed
        profile's maturity age otherwise.
        """
        if self.method == METHOD_GOMPERTZ and self.fit is not None:
            params = self.fit.parameters
            offset = -math.log(-math.log(MATURITY_WEIGHT_FRACTION)) / params.growth_rate
            return params.inflection_age + offset
        return self.profile.maturity_age_days

    @property
    def cross_check_ratio(self) -> Optional[float]:
        """Relative gap between the fitted and heuristic adult weights."""
        if self.fit is None:
            return None
        heuristic = self.veterinary_estimate.estimated_adult_weight
        return abs(self.fit.parameters.adult_weight - heuristic) / heuristic

    def summary(self) -> Dict[str, object]:
        """Plain-dict view, suitable for JSON output."""
        result: Dict[str, object] = {
            "method": self.method,
            "breed_category": self.profile.category.value,
            "adult_weight_kg": round(self.adult_weight, 3),
            "estimated_maturity_age_days": round(self.estimated_maturity_age_days, 1),
            "growth_phase": self.growth_phase.value,
            "weekly_growth_rate_kg": (
                None if self.weekly_growth_rate is None else round(self.weekly_growth_rate, 4)
            ),
            "heuristic": {
                "adult_weight_kg": round(self.veterinary_estimate.estimated_adult_weight, 3),
                "confidence": round(self.veterinary_estimate.confidence, 3),
                "formulas": list(self.veterinary_estimate.used_formulas),
            },
            "predictions": [
                {
                    "age": round(p.age, 3),
                    "time_unit": p.time_unit,
                    "weight_kg": round(p.weight_kg, 3),
                    "observed": p.is_observed,
                    "lower_kg": (
                        None
                        if p.confidence_interval is None
                        else round(p.confidence_interval.lower, 3)
                    ),
                    "upper_kg": (
                        None
                        if p.confidence_interval is None
                        else round(p.confidence_interval.upper, 3)
                    ),
                }
                for p in self.predictions
            ],
        }
        if self.fit is not None:
            params = self.fit.parameters
            result["gompertz"] = {
                "adult_weight_kg": round(params.adult_weight, 3),
                "growth_duration_days": round(params.growth_duration, 2),
                "inflection_age_days": round(params.inflection_age, 2),
                "r_squared": round(params.r_squared, 4),
                "confidence": round(params.confidence, 3),
                "rmse_kg": round(self.fit.quality.rmse, 4),
                "valid": self.fit.is_valid,
                "validation_failure": (
                    None if self.fit.validation_failure is None else str(self.fit.validation_failure)
                ),
            }
            result["cross_check_ratio"] = round(self.cross_check_ratio, 4)
        return result


def _weekly_growth_rate(observations: List[WeightObservation]) -> Optional[float]:
    latest = observations[-1]
    for earlier in reversed(observations[:-1]):
        days = age_in_days(latest.date, earlier.date)
        if days > 0:
            return (latest.weight_kg - earlier.weight_kg) / days * DAYS_PER_WEEK
    return None


def forecast_growth(
    observations: Iterable[WeightObservation],
    birth_date: date,
    profile: Optional[BreedProfile] = None,
    sex: Union[Sex, str] = Sex.MALE,
    settings: Optional[ForecastSettings] = None,
) -> GrowthForecast:
    """Forecast the growth of one subject.

    Args:
        observations: Weight observations in any order.
        birth_date: Reference birth date.
        profile: Breed profile; inferred from the latest observation when
            omitted.
        sex: "male" or "female".
        settings: Optional ForecastSettings.

    Returns:
        GrowthForecast.

    Raises:
        DataInsufficientError: If no valid observation remains.
        ConfigurationError: If the profile is malformed.

    Example:
        >>> forecast = forecast_growth(observations, date(2024, 1, 1), sex="female")
        >>> forecast.method, round(forecast.adult_weight, 1)
        ('gompertz', 24.3)
    """
    settings = settings or ForecastSettings()

    valid = filter_valid_observations(observations, birth_date)
    if not valid:
        raise DataInsufficientError(required=1, available=0)

    latest = valid[-1]
    latest_age_days = age_in_days(latest.date, birth_date)
    if profile is None:
        profile = estimate_breed_profile_from_weight(
            latest.weight_kg, latest_age_days, settings.profiles
        )
        logger.info(f"Inferred breed category: {profile.category.value}")

    prior = calculate_breed_based_parameters(profile, sex)
    estimate = calculate_veterinary_growth_estimate(valid, birth_date, profile)

    fit = None
    if len(valid) >= MIN_FIT_OBSERVATIONS:
        fit = fit_gompertz_to_data(
            valid,
            birth_date,
            prior,
            max_iterations=settings.max_iterations,
            settings=settings.fit,
        )

    if fit is not None and fit.is_valid:
        method = METHOD_GOMPERTZ
        first_age = age_in_days(valid[0].date, birth_date)
        predictions = generate_gompertz_predictions(
            fit.parameters,
            latest_age_days,
            latest_age_days + settings.horizon_days,
            step_size=settings.step_days,
            support_start=first_age,
            support_end=latest_age_days,
            settings=settings.prediction,
        )
    else:
        method = METHOD_HEURISTIC
        if fit is not None:
            logger.warning(
                f"Gompertz fit rejected ({fit.validation_failure}); using heuristic trajectory"
            )
        predictions = create_simple_growth_prediction(
            valid, birth_date, num_future_points=settings.future_weeks, profile=profile
        )

    forecast = GrowthForecast(
        profile=profile,
        prior_parameters=prior,
        fit=fit,
        predictions=predictions,
        veterinary_estimate=estimate,
        method=method,
        growth_phase=determine_growth_phase(age_in_weeks(latest.date, birth_date), profile),
        weekly_growth_rate=_weekly_growth_rate(valid),
    )

    ratio = forecast.cross_check_ratio
    if ratio is not None and ratio > CROSS_CHECK_WARNING_RATIO:
        logger.warning(
            f"Fitted adult weight {fit.parameters.adult_weight:.2f} kg differs from the "
            f"heuristic estimate {estimate.estimated_adult_weight:.2f} kg by {ratio:.0%}"
        )

    logger.info(
        f"Forecast via {method}: adult weight {forecast.adult_weight:.2f} kg, "
        f"phase {forecast.growth_phase.value}"
    )
    return forecast
