# src/pupgrowth/inference/predictions.py
"""Gompertz weight forecasts with widening confidence bands.

The band half-width around each point is

    weight * (base_fraction + (1 - confidence) * 0.15)
           * (1 + widening_per_year * distance / 365)

where ``distance`` is the number of days between the prediction age and
the support region (the age range covered by observations). Inside the
region the band is flat; it widens linearly with extrapolation in both
directions.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from pupgrowth.data.trajectory import TIME_UNIT_DAYS, ConfidenceInterval, GrowthPrediction
from pupgrowth.models.gompertz import GompertzParameters, gompertz_weight

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = 365.0
LOW_CONFIDENCE_BAND = 0.15
MIN_LOWER_BOUND_KG = 0.01
STEP_EPSILON = 1e-9


@dataclass(frozen=True)
class PredictionSettings:
    """Band shape for generate_gompertz_predictions.

    Attributes:
        base_interval_fraction: Relative half-width for a fully confident fit.
        widening_per_year: Relative growth of the band per year outside the
            support region.
    """

    base_interval_fraction: float = 0.05
    widening_per_year: float = 0.2


def _extrapolation_distance(age: float, support_start: float, support_end: float) -> float:
    return max(0.0, support_start - age, age - support_end)


def prediction_interval(
    weight: float,
    confidence: float,
    distance: float,
    settings: Optional[PredictionSettings] = None,
) -> ConfidenceInterval:
    """Confidence interval around ``weight`` at ``distance`` days from the data."""
    settings = settings or PredictionSettings()
    confidence = min(max(confidence, 0.0), 1.0)
    relative = settings.base_interval_fraction + (1.0 - confidence) * LOW_CONFIDENCE_BAND
    widening = 1.0 + settings.widening_per_year * distance / DAYS_PER_YEAR
    half_width = weight * relative * widening
    return ConfidenceInterval(
        lower=max(MIN_LOWER_BOUND_KG, weight - half_width),
        upper=weight + half_width,
    )


def generate_gompertz_predictions(
    params: GompertzParameters,
    start_age: float,
    end_age: float,
    step_size: float = 7.0,
    support_start: Optional[float] = None,
    support_end: Optional[float] = None,
    settings: Optional[PredictionSettings] = None,
) -> List[GrowthPrediction]:
    """Predict weights from ``start_age`` to ``end_age`` (days, inclusive).

    Args:
        params: Fitted or prior Gompertz parameters.
        start_age: First age in days.
        end_age: Last age in days; the final point may fall short of it when
            the span is not a multiple of ``step_size``.
        step_size: Spacing in days.
        support_start: Youngest observed age. Defaults to ``start_age``.
        support_end: Oldest observed age. Defaults to ``support_start``.
        settings: Optional PredictionSettings.

    Returns:
        Predictions ordered by age with non-decreasing weights, each with
        ``is_observed=False`` and a confidence interval. Empty when
        ``end_age < start_age``.

    Raises:
        ValueError: If step_size is not positive.

    Example:
        >>> preds = generate_gompertz_predictions(params, 180, 540, step_size=7)
        >>> preds[-1].confidence_interval.width > preds[0].confidence_interval.width
        True
    """
    if step_size <= 0:
        raise ValueError(f"step_size must be positive, got {step_size}")

    support_start = start_age if support_start is None else support_start
    support_end = support_start if support_end is None else support_end
    if support_end < support_start:
        support_start, support_end = support_end, support_start

    predictions = []
    # Index-based stepping avoids drift from repeated float addition
    if end_age >= start_age:
        n_steps = int(math.floor((end_age - start_age) / step_size + STEP_EPSILON))
    else:
        n_steps = -1
    for i in range(n_steps + 1):
        age = min(start_age + i * step_size, end_age)
        weight = gompertz_weight(age, params)
        distance = _extrapolation_distance(age, support_start, support_end)
        predictions.append(
            GrowthPrediction(
                age=age,
                weight_kg=weight,
                is_observed=False,
                confidence_interval=prediction_interval(
                    weight, params.confidence, distance, settings
                ),
                time_unit=TIME_UNIT_DAYS,
            )
        )

    logger.debug(
        f"Generated {len(predictions)} predictions for ages {start_age:g}-{end_age:g} d"
    )
    return predictions
