"""Centralized configuration for ride processors.

Usage:
    from ride_processors.config import get_config

    config = get_config()
    db_path = config.db_path
    seconds = config.seconds_to_process
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_SECONDS_TO_PROCESS = 10.0
MAX_SECONDS_TO_PROCESS = 99.99
# Fixed threshold separating real effort from warm-up noise
FIX_START_POWER_THRESHOLD = 120.0
DEFAULT_XDATA_NAME = "DEVELOPER"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class RideProcessorsConfig:
    """Immutable configuration for ride processing.

    All settings are resolved at creation time. Use `from_env()` to
    create from environment variables, or construct directly for testing.
    """

    data_dir: Path
    db_path: Path
    seconds_to_process: float = DEFAULT_SECONDS_TO_PROCESS
    power_threshold: float = FIX_START_POWER_THRESHOLD
    xdata_name: str = DEFAULT_XDATA_NAME
    log_level: str = DEFAULT_LOG_LEVEL

    def validate(self) -> list[str]:
        """Validate configuration and return list of warnings.

        Returns:
            List of warning messages (empty if all OK).
        """
        warnings: list[str] = []
        if not self.data_dir.exists():
            warnings.append(f"Data directory does not exist: {self.data_dir}")
        if not self.db_path.parent.exists():
            warnings.append(f"Database directory does not exist: {self.db_path.parent}")
        if not 0 <= self.seconds_to_process <= MAX_SECONDS_TO_PROCESS:
            warnings.append(f"Invalid seconds_to_process: {self.seconds_to_process}")
        if self.log_level.upper() not in logging.getLevelNamesMapping():
            warnings.append(f"Unknown log_level: {self.log_level}")
        return warnings

    @staticmethod
    def from_env() -> RideProcessorsConfig:
        """Create config from environment variables.

        Environment variables:
            RIDE_DATA_DIR: Override default data directory
            RIDE_FIX_START_SECONDS: Default "seconds to process" setting
            RIDE_LOG_LEVEL: Log level for scripts
        """
        from ride_processors.utils.paths import (
            DEFAULT_DB_NAME,
            get_data_base_dir,
            get_database_dir,
        )

        seconds = DEFAULT_SECONDS_TO_PROCESS
        raw_seconds = os.getenv("RIDE_FIX_START_SECONDS")
        if raw_seconds:
            try:
                seconds = float(raw_seconds)
            except ValueError:
                logger.warning(
                    f"Ignoring non-numeric RIDE_FIX_START_SECONDS={raw_seconds!r}"
                )

        return RideProcessorsConfig(
            data_dir=get_data_base_dir(),
            db_path=get_database_dir() / DEFAULT_DB_NAME,
            seconds_to_process=seconds,
            log_level=os.getenv("RIDE_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )


@lru_cache(maxsize=1)
def get_config() -> RideProcessorsConfig:
    """Get the singleton config instance.

    Returns:
        RideProcessorsConfig instance created from environment variables.
    """
    return RideProcessorsConfig.from_env()
