"""
Configuration management for tabbridge.

Settings are read from the environment (prefix ``TABBRIDGE_``) or a ``.env``
file and validated with Pydantic.
"""

import logging
import os
from functools import lru_cache
from logging import Handler
from logging.handlers import RotatingFileHandler
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_LOGGER = "tabbridge"


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure the ``tabbridge`` logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a size-rotated log file
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    # Remove all existing handlers to prevent duplicates
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        try:
            file_handler: Handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s [%(levelname)8s] %(name)s: %(message)s "
                    "[%(filename)s:%(lineno)d in %(funcName)s()]"
                )
            )
            package_logger.addHandler(file_handler)
        except OSError as e:
            package_logger.warning("Could not setup file logging to %s: %s", log_file, e)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    package_logger.addHandler(console_handler)

    package_logger.info(f"Logging initialized. Level: {log_level}, file: {log_file or '-'}")


class Settings(BaseSettings):
    """Library-wide defaults, overridable through ``TABBRIDGE_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="TABBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # What to do with a value a closed (nominal/date) attribute does not know
    UNKNOWN_VALUE_POLICY: str = "error"
    # What predict_distribution does for models without probability output
    DISTRIBUTION_FALLBACK: str = "one_hot"
    DEFAULT_DATE_FORMAT: str = "%Y-%m-%dT%H:%M:%S"

    LOG_LEVEL: str = "WARNING"
    LOG_FILE: Optional[str] = None

    ARTIFACT_DIR: str = "artifacts"

    @field_validator("UNKNOWN_VALUE_POLICY")
    @classmethod
    def validate_unknown_value_policy(cls, v):
        v = v.lower()
        if v not in ("error", "missing"):
            raise ValueError("UNKNOWN_VALUE_POLICY must be 'error' or 'missing'")
        return v

    @field_validator("DISTRIBUTION_FALLBACK")
    @classmethod
    def validate_distribution_fallback(cls, v):
        v = v.lower()
        if v not in ("one_hot", "error"):
            raise ValueError("DISTRIBUTION_FALLBACK must be 'one_hot' or 'error'")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    def setup_logging(self) -> None:
        setup_logging(log_level=self.LOG_LEVEL, log_file=self.LOG_FILE)


@lru_cache()
def get_settings() -> Settings:
    """
    Get library settings.
    Uses lru_cache to avoid re-reading the environment on every call.
    """
    return Settings()
