"""Logging utilities.

This module provides functions for configuring Python's logging system
to output to both console and file.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


def setup_logging(
    log_dir: Optional[Union[str, Path]] = None,
    log_filename: str = "forecast.log",
    level: Union[int, str] = logging.INFO,
) -> logging.Logger:
    """Setup logging to console and optionally to file.

    Args:
        log_dir: Directory for the log file. If provided, logs will also be
                 written to <log_dir>/<log_filename>.
        log_filename: Name of log file within log_dir.
        level: Logging level, as an int or a name such as "DEBUG".

    Returns:
        Root logger instance.
    """
    if isinstance(level, str):
        level_name = level
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown logging level: {level_name}")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers = []

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console output goes to stderr so JSON reports on stdout stay clean
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        log_file = log_path / log_filename

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        root_logger.info(f"Logging to {log_file}")

    return root_logger
