# src/pupgrowth/evaluation/fit_quality.py
"""Goodness-of-fit metrics for fitted growth curves."""

import logging
from dataclasses import dataclass

import numpy as np
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FitQuality:
    """Fit quality against the observations used for fitting.

    Attributes:
        r_squared: Coefficient of determination, clipped to [0, 1].
        rmse: Root mean squared error in kg.
        mae: Mean absolute error in kg.
    """

    r_squared: float
    rmse: float
    mae: float

    def __str__(self) -> str:
        return f"R²={self.r_squared:.3f}, RMSE={self.rmse:.3f} kg, MAE={self.mae:.3f} kg"


def compute_fit_quality(observed: np.ndarray, predicted: np.ndarray) -> FitQuality:
    """Compute R², RMSE and MAE.

    R² is undefined when every observed weight is identical; it is then
    reported as 0 so the fit reads as uninformative rather than perfect.

    Args:
        observed: Observed weights [N].
        predicted: Model weights at the same ages [N].

    Returns:
        FitQuality with r_squared in [0, 1].
    """
    observed = np.asarray(observed, dtype=float)
    predicted = np.asarray(predicted, dtype=float)
    if observed.shape != predicted.shape:
        raise ValueError(
            f"Shape mismatch: observed {observed.shape} vs predicted {predicted.shape}"
        )

    if observed.size < 2 or np.ptp(observed) == 0:
        r2 = 0.0
    else:
        r2 = float(r2_score(observed, predicted))

    rmse = float(np.sqrt(mean_squared_error(observed, predicted)))
    mae = float(mean_absolute_error(observed, predicted))

    return FitQuality(r_squared=float(np.clip(r2, 0.0, 1.0)), rmse=rmse, mae=mae)
