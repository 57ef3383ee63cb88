"""Environment variable validation and management."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "EXAM_ANALYSIS_LOG_LEVEL"
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class EnvironmentError(Exception):
    """Raised when required environment variables are missing or invalid."""
    pass


def validate_environment() -> None:
    """Validate the optional analysis environment variables.

    Raises EnvironmentError if validation fails.
    """
    optional_vars = {
        "EXAM_CATALOG_PATH": "Path to a subject catalog JSON file",
        LOG_LEVEL_ENV: "Log level for the analysis tools",
    }

    catalog_path = os.getenv("EXAM_CATALOG_PATH")
    if catalog_path and not Path(catalog_path).is_file():
        raise EnvironmentError(f"EXAM_CATALOG_PATH does not point to a file: {catalog_path}")

    level = os.getenv(LOG_LEVEL_ENV)
    if level and level.strip().upper() not in _LOG_LEVELS:
        raise EnvironmentError(
            f"Invalid {LOG_LEVEL_ENV}: {level} (expected one of {', '.join(sorted(_LOG_LEVELS))})"
        )

    for var, description in optional_vars.items():
        if not os.getenv(var):
            logger.debug("Optional environment variable not set: %s (%s)", var, description)


def get_log_level(default: str = "WARNING") -> int:
    """Return the numeric log level named by ``EXAM_ANALYSIS_LOG_LEVEL``."""
    value = (os.getenv(LOG_LEVEL_ENV) or default).strip().upper()
    if value not in _LOG_LEVELS:
        value = default
    return getattr(logging, value)


def get_env_bool(name: str, default: bool = False) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on", "enabled"}
