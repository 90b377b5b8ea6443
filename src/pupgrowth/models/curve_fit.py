# src/pupgrowth/models/curve_fit.py
"""Nonlinear least-squares fitting of the Gompertz curve to weight data.

The objective combines the weight residuals with a weak log-space pull
toward the breed prior:

    r_data_i  = W(t_i; theta) - w_i
    r_prior_j = lambda * w_max * (log theta_j - log theta0_j)
    lambda    = prior_strength / sqrt(n)

With only two or three observations for three unknowns the data alone do
not pin the curve down; the prior term keeps the problem well posed and
fades as observations accumulate.

Optimisation uses scipy's trust-region reflective solver inside the
parameter box of pupgrowth.models.gompertz. Restarts run sequentially
from fixed scalings of the prior, so results are deterministic. The best
local optimum found is returned; there is no global-optimality guarantee,
so r_squared should be read as a confidence signal.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Tuple

import numpy as np
from scipy.optimize import least_squares

from pupgrowth.data.observations import (
    DataInsufficientError,
    WeightObservation,
    valid_observation_ages,
)
from pupgrowth.data.trajectory import TIME_UNIT_DAYS, GrowthPrediction
from pupgrowth.evaluation.fit_quality import FitQuality, compute_fit_quality
from pupgrowth.evaluation.validation import ModelValidationFailure, check_gompertz_parameters
from pupgrowth.models.gompertz import (
    ADULT_WEIGHT_BOUNDS,
    GROWTH_DURATION_BOUNDS,
    INFLECTION_AGE_BOUNDS,
    GompertzParameters,
    gompertz_curve,
)

logger = logging.getLogger(__name__)

MIN_FIT_OBSERVATIONS = 2

_LOWER = np.array(
    [ADULT_WEIGHT_BOUNDS[0], GROWTH_DURATION_BOUNDS[0], INFLECTION_AGE_BOUNDS[0]]
)
_UPPER = np.array(
    [ADULT_WEIGHT_BOUNDS[1], GROWTH_DURATION_BOUNDS[1], INFLECTION_AGE_BOUNDS[1]]
)


@dataclass(frozen=True)
class FitSettings:
    """Tuning knobs for fit_gompertz_to_data.

    Attributes:
        prior_strength: Weight of the pull toward the initial parameters.
        restart_scales: One restart per entry, scaling the prior adult weight.
        tolerance: ftol / xtol / gtol passed to the solver.
    """

    prior_strength: float = 0.1
    restart_scales: Tuple[float, ...] = (1.0, 0.75, 1.35)
    tolerance: float = 1e-8


@dataclass(frozen=True)
class GompertzFitResult:
    """Outcome of a Gompertz fit.

    Attributes:
        parameters: Fitted parameters with r_squared and confidence set.
        quality: R², RMSE and MAE against the retained observations.
        predictions: Fitted weight at each retained observation's age.
        validation_failure: Set when the fitted parameters are implausible.
        n_observations: Number of observations retained for fitting.
        converged: Whether the solver met its tolerance within budget.
    """

    parameters: GompertzParameters
    quality: FitQuality
    predictions: Tuple[GrowthPrediction, ...]
    validation_failure: Optional[ModelValidationFailure]
    n_observations: int
    converged: bool

    @property
    def is_valid(self) -> bool:
        return self.validation_failure is None


def _fit_confidence(
    r_squared: float,
    n_observations: int,
    age_span: float,
    failure: Optional[ModelValidationFailure],
) -> float:
    if r_squared > 0.85:
        confidence = 0.9
    elif r_squared > 0.75:
        confidence = 0.8
    elif r_squared > 0.6:
        confidence = 0.7
    else:
        confidence = 0.5

    if n_observations < 3:
        confidence -= 0.1
    if age_span == 0:
        confidence = min(confidence, 0.3)
    if failure is not None:
        confidence *= 0.5
    return confidence


def _residuals(
    x: np.ndarray,
    ages: np.ndarray,
    weights: np.ndarray,
    prior_log: np.ndarray,
    prior_weight: float,
) -> np.ndarray:
    data_residuals = gompertz_curve(ages, x[0], x[1], x[2]) - weights
    prior_residuals = prior_weight * (np.log(x) - prior_log)
    return np.concatenate([data_residuals, prior_residuals])


def fit_gompertz_to_data(
    observations: Iterable[WeightObservation],
    birth_date: date,
    initial_params: GompertzParameters,
    max_iterations: int = 100,
    settings: Optional[FitSettings] = None,
) -> GompertzFitResult:
    """Fit a Gompertz curve to dated weight observations.

    Args:
        observations: Weight observations in any order. Observations dated
            before ``birth_date`` or with non-positive weights are ignored.
        birth_date: Reference birth date.
        initial_params: Prior parameters, usually from
            calculate_breed_based_parameters. Values outside the parameter
            box are clipped into it.
        max_iterations: Function-evaluation budget per restart.
        settings: Optional FitSettings.

    Returns:
        GompertzFitResult. Parameters that fail validation are still
        returned, flagged through ``validation_failure``.

    Raises:
        DataInsufficientError: If fewer than two valid observations remain.
        ValueError: If max_iterations < 1.

    Example:
        >>> prior = calculate_breed_based_parameters(profile)
        >>> result = fit_gompertz_to_data(observations, birth, prior)
        >>> print(result.quality)
    """
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
    settings = settings or FitSettings()

    points = valid_observation_ages(observations, birth_date)
    if len(points) < MIN_FIT_OBSERVATIONS:
        raise DataInsufficientError(required=MIN_FIT_OBSERVATIONS, available=len(points))

    ages = np.array([age for age, _ in points], dtype=float)
    weights = np.array([weight for _, weight in points], dtype=float)
    n = len(points)

    prior = np.clip(initial_params.as_array(), _LOWER, _UPPER)
    prior_log = np.log(prior)
    prior_weight = settings.prior_strength * float(weights.max()) / math.sqrt(n)

    best = None
    for scale in settings.restart_scales or (1.0,):
        start = prior.copy()
        start[0] = np.clip(prior[0] * scale, _LOWER[0], _UPPER[0])
        solution = least_squares(
            _residuals,
            start,
            bounds=(_LOWER, _UPPER),
            method="trf",
            x_scale="jac",
            ftol=settings.tolerance,
            xtol=settings.tolerance,
            gtol=settings.tolerance,
            max_nfev=max_iterations,
            args=(ages, weights, prior_log, prior_weight),
        )
        logger.debug(
            f"Restart x{scale:g}: cost={solution.cost:.6g}, status={solution.status}, "
            f"x={np.round(solution.x, 3).tolist()}"
        )
        # Strict comparison keeps the earliest start on ties
        if best is None or solution.cost < best.cost:
            best = solution

    fitted = GompertzParameters(
        adult_weight=float(best.x[0]),
        growth_duration=float(best.x[1]),
        inflection_age=float(best.x[2]),
    )
    fitted_weights = gompertz_curve(
        ages, fitted.adult_weight, fitted.growth_duration, fitted.inflection_age
    )
    quality = compute_fit_quality(weights, fitted_weights)
    failure = check_gompertz_parameters(fitted)
    confidence = _fit_confidence(quality.r_squared, n, float(np.ptp(ages)), failure)
    fitted = fitted.with_fit(r_squared=quality.r_squared, confidence=confidence)

    predictions = tuple(
        GrowthPrediction(
            age=float(age),
            weight_kg=float(weight),
            is_observed=True,
            time_unit=TIME_UNIT_DAYS,
        )
        for age, weight in zip(ages, fitted_weights)
    )

    logger.info(
        f"Fitted Gompertz curve to {n} observations: A={fitted.adult_weight:.2f} kg, "
        f"D={fitted.growth_duration:.1f} d, t_i={fitted.inflection_age:.1f} d ({quality})"
    )

    return GompertzFitResult(
        parameters=fitted,
        quality=quality,
        predictions=predictions,
        validation_failure=failure,
        n_observations=n,
        converged=bool(best.status > 0),
    )
