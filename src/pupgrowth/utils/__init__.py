# src/pupgrowth/utils/__init__.py
"""
Utility functions for growth forecasting.

Components:
- config: OmegaConf loading, validation and breed profile overrides
- logging: Console and file logging setup
"""

from pupgrowth.utils.config import (
    ConfigurationError,
    get_value,
    load_category_profiles,
    load_config,
    to_dict,
    validate_config,
)
from pupgrowth.utils.logging import setup_logging

__all__ = [
    # Config
    "ConfigurationError",
    "get_value",
    "load_category_profiles",
    "load_config",
    "to_dict",
    "validate_config",
    # Logging
    "setup_logging",
]
