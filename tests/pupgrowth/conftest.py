# tests/pupgrowth/conftest.py
"""Shared fixtures for pupgrowth tests."""

import tempfile
from datetime import date, timedelta
from pathlib import Path
from typing import Callable, Dict, Generator, List, Sequence, Tuple

import pytest
import yaml

from pupgrowth.data.observations import WeightObservation


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def birth_date() -> date:
    """Birth date shared by the observation fixtures."""
    return date(2024, 1, 1)


@pytest.fixture
def make_observations(
    birth_date: date,
) -> Callable[[Sequence[Tuple[int, float]]], List[WeightObservation]]:
    """Build observations from (age_in_days, weight_kg) pairs."""

    def _make(points: Sequence[Tuple[int, float]]) -> List[WeightObservation]:
        return [
            WeightObservation(date=birth_date + timedelta(days=age), weight_kg=weight)
            for age, weight in points
        ]

    return _make


@pytest.fixture
def medium_puppy_observations(make_observations) -> List[WeightObservation]:
    """Four weigh-ins of a medium-sized puppy between 8 weeks and 6 months."""
    return make_observations([(56, 5.0), (90, 10.0), (120, 15.0), (180, 22.0)])


@pytest.fixture
def sample_config_dict() -> Dict:
    """Provide a sample configuration dictionary."""
    return {
        "fitting": {
            "max_iterations": 50,
            "prior_strength": 0.2,
            "restart_scales": [1.0, 0.8],
            "tolerance": 1.0e-8,
        },
        "prediction": {
            "step_days": 14.0,
            "horizon_days": 180.0,
            "base_interval_fraction": 0.05,
            "widening_per_year": 0.2,
        },
        "heuristic": {"future_weeks": 12},
        "logging": {"level": "DEBUG", "log_dir": None},
    }


@pytest.fixture
def sample_config_file(temp_dir: Path, sample_config_dict: Dict) -> Path:
    """Create a sample config file."""
    config_path = temp_dir / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config_dict, f)
    return config_path
