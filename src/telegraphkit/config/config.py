"""
Configuration management for telegraphkit using Pydantic.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Setup Logging ---
log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.telegra.ph"
DEFAULT_USER_AGENT = "telegraphkit/0.1.0"

# --- Nested Configuration Models ---


class RetryPolicy(BaseModel):
    """Retry behaviour for transient failures."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt.")
    initial_delay: float = Field(default=0.1, ge=0.0, description="Delay before the first retry, in seconds.")
    max_delay: float = Field(default=5.0, ge=0.0, description="Upper bound for any single delay, in seconds.")
    multiplier: float = Field(default=2.0, ge=1.0, description="Growth factor applied per attempt.")

    @model_validator(mode="after")
    def check_delay_bounds(self) -> RetryPolicy:
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must be greater than or equal to initial_delay")
        return self


class RateLimitPolicy(BaseModel):
    """Token-bucket limits shared by every call made through one client."""

    model_config = ConfigDict(frozen=True)

    requests_per_second: float = Field(default=10.0, gt=0.0, description="Bucket refill rate.")
    burst: Optional[int] = Field(default=None, ge=1, description="Bucket capacity. Defaults to the rate.")

    @property
    def capacity(self) -> int:
        if self.burst is not None:
            return self.burst
        return max(1, int(self.requests_per_second))


class MonitoringConfig(BaseModel):
    """
    Configuration for logging output.

    Applied by :func:`telegraphkit.observability.configure_logging`, which the
    application calls at start-up; library code only emits events.
    """

    model_config = ConfigDict(frozen=True)

    log_level: str = Field(default="INFO", description="Logging level (e.g., DEBUG, INFO, WARNING).")
    log_file: str | None = Field(default=None, description="Path to log file. If None, logs to console.")

    @field_validator("log_level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {v}")
        return level


# --- Main Configuration Class ---


class ClientConfig(BaseSettings):
    """Everything a client needs besides its transport handle."""

    base_url: str = Field(default=DEFAULT_BASE_URL, description="API endpoint root.")
    timeout: float = Field(default=30.0, gt=0.0, description="Per-request transport timeout in seconds.")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent header sent with every request.")
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    rate_limit: RateLimitPolicy = Field(default_factory=RateLimitPolicy)
    monitoring: MonitoringConfig = Field(
        default_factory=MonitoringConfig,
        description=(
            "Logging settings. The client never reconfigures logging itself; the application "
            "applies them once at start-up with telegraphkit.observability.configure_logging(config.monitoring)."
        ),
    )

    model_config = SettingsConfigDict(
        env_prefix="TELEGRAPH_",
        env_nested_delimiter="__",
        case_sensitive=False,
        frozen=True,
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("base_url must not be empty")
        return v

    @classmethod
    def from_yaml(cls, path: Path) -> ClientConfig:
        log.debug("Loading configuration from YAML file: %s", path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found or is not a file: {path}")
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
        if not yaml_data:
            log.warning("Configuration file is empty: %s. Using default settings.", path)
            return cls.model_validate({})
        return cls.model_validate(yaml_data)
