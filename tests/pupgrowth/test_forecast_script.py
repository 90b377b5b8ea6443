# tests/pupgrowth/test_forecast_script.py
"""Tests for the forecast_growth.py command-line script."""

import importlib.util
import json
import logging
import sys
from pathlib import Path

import pandas as pd
import pytest

from pupgrowth.utils.config import ConfigurationError

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "scripts" / "forecast_growth.py"


@pytest.fixture
def script():
    """Load the script as a module without running it."""
    spec = importlib.util.spec_from_file_location("forecast_growth_script", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() reconfigures the root logger; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def weights_csv(temp_dir: Path, medium_puppy_observations) -> Path:
    """CSV with the medium puppy's weigh-ins and an extra ignored column."""
    csv_path = temp_dir / "weights.csv"
    pd.DataFrame(
        {
            "date": [obs.date.isoformat() for obs in medium_puppy_observations],
            "weight_kg": [obs.weight_kg for obs in medium_puppy_observations],
            "note": ["vet visit"] * len(medium_puppy_observations),
        }
    ).to_csv(csv_path, index=False)
    return csv_path


def _run(script, monkeypatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["forecast_growth.py", *args])
    return script.main()


class TestReadObservations:
    """Tests for read_observations."""

    def test_reads_dates_and_weights(self, script, weights_csv, medium_puppy_observations):
        assert script.read_observations(str(weights_csv)) == medium_puppy_observations

    def test_missing_columns(self, script, temp_dir):
        """A CSV without a weight_kg column is a configuration error."""
        csv_path = temp_dir / "bad.csv"
        pd.DataFrame({"date": ["2024-03-01"], "kg": [5.0]}).to_csv(csv_path, index=False)

        with pytest.raises(ConfigurationError, match="weight_kg"):
            script.read_observations(str(csv_path))


class TestMain:
    """Tests for main()."""

    def test_prints_json_forecast(self, script, weights_csv, monkeypatch, capsys):
        """A valid CSV yields exit code 0 and a JSON report on stdout."""
        code = _run(script, monkeypatch, "--csv", str(weights_csv), "--birth-date", "2024-01-01")

        assert code == 0
        report = json.loads(capsys.readouterr().out)
        assert report["method"] == "gompertz"
        assert report["breed_category"] == "medium"
        assert report["estimated_maturity_age_days"] > 180
        assert report["predictions"][0]["age"] == 180

    def test_category_and_overrides(self, script, weights_csv, monkeypatch, capsys):
        """--category fixes the profile and --override changes the prediction grid."""
        code = _run(
            script,
            monkeypatch,
            "--csv",
            str(weights_csv),
            "--birth-date",
            "2024-01-01",
            "--sex",
            "female",
            "--category",
            "large",
            "--override",
            "prediction.step_days=30",
            "--override",
            "prediction.horizon_days=60",
        )

        assert code == 0
        report = json.loads(capsys.readouterr().out)
        assert report["breed_category"] == "large"
        if report["method"] == "gompertz":
            assert [p["age"] for p in report["predictions"]] == [180, 210, 240]
        else:
            assert len(report["predictions"]) == 4 + 26

    def test_config_file(self, script, weights_csv, sample_config_file, monkeypatch, capsys):
        """Settings are read from --config."""
        code = _run(
            script,
            monkeypatch,
            "--csv",
            str(weights_csv),
            "--birth-date",
            "2024-01-01",
            "--config",
            str(sample_config_file),
        )

        assert code == 0
        report = json.loads(capsys.readouterr().out)
        if report["method"] == "gompertz":
            assert report["predictions"][1]["age"] == 194
        else:
            assert len(report["predictions"]) == 4 + 12

    def test_no_observations_exit_code(self, script, temp_dir, monkeypatch, capsys):
        """A CSV with only a header row exits with 1 and prints nothing."""
        csv_path = temp_dir / "empty.csv"
        csv_path.write_text("date,weight_kg\n")

        code = _run(script, monkeypatch, "--csv", str(csv_path), "--birth-date", "2024-01-01")

        assert code == 1
        assert capsys.readouterr().out == ""
