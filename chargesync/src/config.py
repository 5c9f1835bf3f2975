"""
Charger monitor configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
All configuration values come from environment variables or .env files;
API credentials are owned by the host's API client and never read here.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-001)

TODO:
- None
"""

import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

DEFAULT_POLL_INTERVAL_S = 10


class MonitorSettings(BaseSettings):
    """Charger monitor configuration.

    All values are loaded from environment variables. Required variables
    must be set; optional variables have sensible defaults.

    Attributes:
        charger_id: Wallbox charger identifier, used as the API device key.
        charger_name: Human-readable name for logs. Defaults to charger_id.
        poll_interval_s: Seconds between poll cycles (default 10, min 1).
            Can be changed at runtime through DeviceMonitor.apply_settings().
        health_path: Optional path of the JSON health file. Empty disables it.
        log_level: Root log level name (default INFO).
    """

    charger_id: str
    charger_name: str = ""
    poll_interval_s: int = DEFAULT_POLL_INTERVAL_S
    health_path: str = ""
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _default_charger_name(self) -> "MonitorSettings":
        """Default charger_name to charger_id when not explicitly set."""
        if not self.charger_name:
            self.charger_name = self.charger_id
        return self

    @field_validator("charger_id")
    @classmethod
    def charger_id_must_not_be_blank(cls, v: str) -> str:
        """Reject an empty or whitespace-only charger id."""
        if not v.strip():
            raise ValueError("CHARGER_ID must not be empty")
        return v.strip()

    @field_validator("poll_interval_s")
    @classmethod
    def poll_interval_must_be_positive(cls, v: int) -> int:
        """Validate poll interval is at least one second."""
        if v < 1:
            raise ValueError("POLL_INTERVAL_S must be >= 1")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Validate log level is one of the standard logging level names."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL must be a logging level name (got '{v}')")
        return level

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}
