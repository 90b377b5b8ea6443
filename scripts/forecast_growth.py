#!/usr/bin/env python
"""Forecast a puppy's growth from a CSV of dated weights.

The CSV needs ``date`` (ISO format) and ``weight_kg`` columns; other
columns are ignored. The forecast is printed to stdout as JSON, logs go
to stderr (and to <log_dir>/forecast.log when configured).

Workflow:
1. Load configuration from YAML, applying CLI overrides
2. Setup logging
3. Read observations
4. Run the forecast (Gompertz fit with heuristic fallback)
5. Print the summary

Usage:
    python scripts/forecast_growth.py --csv weights.csv --birth-date 2024-01-15

    # Female of a known category, two-week prediction steps
    python scripts/forecast_growth.py --csv weights.csv --birth-date 2024-01-15 \
        --sex female --category large --override prediction.step_days=14
"""

import argparse
import json
import logging
import sys
from datetime import date

import pandas as pd

from pupgrowth.data.breeds import BreedCategory
from pupgrowth.data.observations import GrowthEstimationError, WeightObservation
from pupgrowth.inference.forecast import forecast_growth, settings_from_config
from pupgrowth.utils.config import ConfigurationError, get_value, load_config, validate_config
from pupgrowth.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Forecast puppy growth from weight records")
    parser.add_argument(
        "--csv",
        type=str,
        required=True,
        help="CSV file with 'date' and 'weight_kg' columns",
    )
    parser.add_argument(
        "--birth-date",
        type=date.fromisoformat,
        required=True,
        help="Birth date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--sex",
        choices=["male", "female"],
        default="male",
    )
    parser.add_argument(
        "--category",
        choices=[c.value for c in BreedCategory],
        default=None,
        help="Breed size category; inferred from the latest weight when omitted",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file (defaults to the packaged config)",
    )
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        help="Config override in key=value form; may be repeated",
    )
    return parser.parse_args()


def read_observations(csv_path: str) -> list:
    """Read weight observations from a CSV file."""
    df = pd.read_csv(csv_path)
    missing = {"date", "weight_kg"} - set(df.columns)
    if missing:
        raise ConfigurationError(f"{csv_path} is missing columns: {sorted(missing)}")

    df = df.dropna(subset=["date", "weight_kg"])
    df["date"] = pd.to_datetime(df["date"])
    return [
        WeightObservation(date=row.date.date(), weight_kg=float(row.weight_kg))
        for row in df.itertuples(index=False)
    ]


def main() -> int:
    """Main forecasting function."""
    args = parse_args()

    cfg = load_config(args.config, overrides=args.override)
    validate_config(cfg)

    setup_logging(
        get_value(cfg, "logging.log_dir"),
        level=get_value(cfg, "logging.level", "INFO"),
    )

    settings = settings_from_config(cfg)
    profile = None
    if args.category is not None:
        profile = settings.profiles[BreedCategory(args.category)]

    observations = read_observations(args.csv)
    logger.info(f"Read {len(observations)} observations from {args.csv}")

    try:
        forecast = forecast_growth(
            observations,
            args.birth_date,
            profile=profile,
            sex=args.sex,
            settings=settings,
        )
    except GrowthEstimationError as e:
        logger.error(f"Cannot forecast growth: {e}")
        return 1

    json.dump(forecast.summary(), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
