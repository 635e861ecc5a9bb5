"""Configuration for csvcalc.

Settings are read from environment variables with the ``CSVCALC_`` prefix.

Environment Variables:
    CSVCALC_MAX_VALUE: Largest representable cell value (default: 4294967295)
    CSVCALC_STRATEGY: Formula resolution strategy, ``topological`` or
        ``deferred`` (default: topological)
    CSVCALC_LOG_LEVEL: Logging level used by the CLI (default: WARNING)
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from csvcalc.calc._arithmetic import UINT32_MAX
from csvcalc.calc._protocol import ResolutionStrategy


class Settings(BaseSettings):
    """Runtime settings for loading and resolving tables."""

    model_config = SettingsConfigDict(
        env_prefix="CSVCALC_",
        extra="ignore",
    )

    max_value: int = UINT32_MAX
    """Largest value a cell may hold; literals and results above it fail."""

    strategy: ResolutionStrategy = ResolutionStrategy.TOPOLOGICAL
    """How pending formulas are ordered for evaluation."""

    log_level: str = "WARNING"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    @field_validator("max_value")
    @classmethod
    def validate_max_value(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_value must be positive, got {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return upper_v

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, read once from the environment."""
    return Settings()
