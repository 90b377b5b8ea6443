# src/pupgrowth/data/trajectory.py
"""Growth trajectory points shared by the curve fitter and the estimators."""

from dataclasses import dataclass
from typing import Optional, Sequence

TIME_UNIT_DAYS = "days"
TIME_UNIT_WEEKS = "weeks"


@dataclass(frozen=True)
class ConfidenceInterval:
    """Lower and upper weight bounds in kg."""

    lower: float
    upper: float

    @property
    def width(self) -> float:
        return self.upper - self.lower


@dataclass(frozen=True)
class GrowthPrediction:
    """One point of a growth trajectory.

    Attributes:
        age: Age of the subject, in ``time_unit``.
        weight_kg: Observed or predicted weight.
        is_observed: True for points backed by a measurement.
        confidence_interval: Optional uncertainty band around ``weight_kg``.
        time_unit: "days" or "weeks".
    """

    age: float
    weight_kg: float
    is_observed: bool
    confidence_interval: Optional[ConfidenceInterval] = None
    time_unit: str = TIME_UNIT_DAYS


def is_non_decreasing(predictions: Sequence[GrowthPrediction]) -> bool:
    """True when neither ages nor weights ever decrease along the sequence."""
    return all(
        later.age >= earlier.age and later.weight_kg >= earlier.weight_kg
        for earlier, later in zip(predictions, predictions[1:])
    )
