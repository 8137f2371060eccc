"""
Settings

Runtime settings read from ``CREDKIT_*`` environment variables. Command
line options take precedence over these.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """credkit runtime settings."""

    log_level: str = "INFO"
    log_file: Optional[str] = None
    verbose: bool = False
    types_file: Optional[str] = None
    max_workers: Optional[int] = None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Load settings from environment variables.

    Args:
        environ: Environment to read, defaults to ``os.environ``

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If a variable holds an invalid value
    """
    if environ is None:
        environ = os.environ

    log_level = environ.get("CREDKIT_LOG_LEVEL", "INFO").upper()
    if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        raise ConfigurationError(
            f"Invalid log level: {log_level}",
            config_path="CREDKIT_LOG_LEVEL"
        )

    max_workers = None
    raw_workers = environ.get("CREDKIT_MAX_WORKERS")
    if raw_workers:
        try:
            max_workers = int(raw_workers)
        except ValueError:
            raise ConfigurationError(
                f"CREDKIT_MAX_WORKERS must be an integer, got '{raw_workers}'",
                config_path="CREDKIT_MAX_WORKERS"
            )
        if max_workers < 1:
            raise ConfigurationError(
                "CREDKIT_MAX_WORKERS must be at least 1",
                config_path="CREDKIT_MAX_WORKERS"
            )

    return Settings(
        log_level=log_level,
        log_file=environ.get("CREDKIT_LOG_FILE") or None,
        verbose=environ.get("CREDKIT_VERBOSE", "").strip().lower() in _TRUE_VALUES,
        types_file=environ.get("CREDKIT_TYPES_FILE") or None,
        max_workers=max_workers,
    )
