# src/pupgrowth/utils/config.py
"""OmegaConf configuration loading and validation utilities.

This module provides:
- Config loading from YAML with optional CLI overrides
- Schema validation for required fields
- Breed category profile overrides read from the ``breed_categories`` section
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from omegaconf import DictConfig, MissingMandatoryValue, OmegaConf

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default.yaml"


class ConfigurationError(Exception):
    """Malformed configuration or breed profile."""

    pass


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[List[str]] = None,
    resolve: bool = True,
) -> DictConfig:
    """Load configuration from YAML file with optional CLI overrides.

    Args:
        config_path: Path to YAML configuration file. Defaults to the
            packaged ``config/default.yaml``.
        overrides: List of CLI overrides in "key=value" format.
            Example: ["fitting.max_iterations=200", "prediction.step_days=14"]
        resolve: If True, resolve interpolations (${...}).

    Returns:
        OmegaConf DictConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigurationError: If config loading fails.

    Example:
        >>> cfg = load_config(overrides=["fitting.max_iterations=50"])
        >>> print(cfg.fitting.max_iterations)
        50
    """
    config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        cfg = OmegaConf.load(config_path)
        logger.info(f"Loaded config from: {config_path}")

        if overrides:
            override_cfg = OmegaConf.from_dotlist(overrides)
            cfg = OmegaConf.merge(cfg, override_cfg)
            logger.info(f"Applied {len(overrides)} config overrides")

        if resolve:
            OmegaConf.resolve(cfg)

        return cfg

    except Exception as e:
        raise ConfigurationError(f"Failed to load config from {config_path}: {e}") from e


def validate_config(
    cfg: DictConfig,
    schema: Optional[Dict[str, type]] = None,
) -> None:
    """Validate configuration against schema.

    Args:
        cfg: Configuration to validate.
        schema: Optional schema dict mapping dotted paths to expected types.
            If None, uses the default forecasting schema.

    Raises:
        ConfigurationError: If validation fails with detailed error messages.
    """
    if schema is None:
        schema = _get_default_schema()

    errors = []
    for path, expected_type in schema.items():
        try:
            value = OmegaConf.select(cfg, path)
            if value is None:
                errors.append(f"Missing required field: {path}")
            elif expected_type is list:
                if not hasattr(value, "__iter__") or isinstance(value, (str, dict)):
                    errors.append(
                        f"Invalid type for {path}: expected list, "
                        f"got {type(value).__name__}"
                    )
            elif expected_type is float:
                # YAML writes 1.0 as 1 often enough that ints must pass
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    errors.append(
                        f"Invalid type for {path}: expected float, "
                        f"got {type(value).__name__}"
                    )
            elif not isinstance(value, expected_type):
                errors.append(
                    f"Invalid type for {path}: expected {expected_type.__name__}, "
                    f"got {type(value).__name__}"
                )
        except MissingMandatoryValue:
            errors.append(f"Missing required field: {path}")

    if errors:
        error_msg = "Configuration validation failed:\n  " + "\n  ".join(errors)
        raise ConfigurationError(error_msg)

    logger.info("Configuration validation passed")


def _get_default_schema() -> Dict[str, type]:
    """Get default schema for the forecasting config.

    Returns:
        Dictionary mapping dotted paths to expected types.
    """
    return {
        "fitting.max_iterations": int,
        "fitting.prior_strength": float,
        "fitting.restart_scales": list,
        "prediction.step_days": float,
        "prediction.horizon_days": float,
        "prediction.base_interval_fraction": float,
        "prediction.widening_per_year": float,
        "heuristic.future_weeks": int,
    }


def to_dict(cfg: DictConfig, resolve: bool = True) -> Dict[str, Any]:
    """Convert OmegaConf DictConfig to plain Python dict.

    Args:
        cfg: OmegaConf DictConfig to convert.
        resolve: If True, resolve interpolations before converting.

    Returns:
        Plain Python dictionary.
    """
    return OmegaConf.to_container(cfg, resolve=resolve)


def get_value(
    cfg: Optional[DictConfig],
    path: str,
    default: Any = None,
) -> Any:
    """Get a nested config value, falling back to ``default`` when absent.

    Args:
        cfg: Configuration object (None is treated as empty).
        path: Dotted path to value (e.g., "fitting.prior_strength").
        default: Default value if path doesn't exist.

    Returns:
        Config value or default.

    Example:
        >>> strength = get_value(cfg, "fitting.prior_strength", default=0.1)
    """
    if cfg is None:
        return default
    value = OmegaConf.select(cfg, path, default=None)
    return value if value is not None else default


def load_category_profiles(cfg: Optional[DictConfig]) -> Dict[Any, Any]:
    """Build breed category profiles, applying the config's overrides.

    The ``breed_categories`` section maps category names to
    ``{male: [min, max], female: [min, max], maturity_age_months: n}``.
    Categories not listed keep their built-in reference profile.

    Args:
        cfg: Configuration object, may be None.

    Returns:
        Dict mapping BreedCategory to BreedProfile.

    Raises:
        ConfigurationError: If a category name or profile entry is malformed.
    """
    from pupgrowth.data.breeds import CATEGORY_PROFILES, BreedCategory, BreedProfile

    profiles = dict(CATEGORY_PROFILES)
    section = get_value(cfg, "breed_categories")
    if section is None:
        return profiles

    for name, entry in to_dict(section).items():
        try:
            category = BreedCategory(name)
        except ValueError as e:
            raise ConfigurationError(f"Unknown breed category in config: {name!r}") from e
        profiles[category] = BreedProfile.from_dict({"category": name, **entry})
        logger.info(f"Overrode reference profile for category '{name}'")

    return profiles
