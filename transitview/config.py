"""
Configuration loading for transitview.

Loads non-secret settings from config.yaml, secrets from environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from pydantic import BaseModel, Field, field_validator


class AppConfig(BaseModel):
    """Application configuration. Secrets come from env vars, rest from YAML."""

    # Secrets (from environment only)
    mbta_api_key: Optional[str] = None

    # MBTA settings
    mbta_base_url: str = "https://api-v3.mbta.com"
    request_timeout: float = Field(default=10.0, gt=0)

    # Alert list settings
    alert_activities: list[str] = Field(
        default_factory=lambda: ["BOARD", "EXIT", "RIDE"], min_length=1
    )
    alert_max_chars: int = Field(default=140, ge=1)

    # Time zone for formatted timestamps
    display_timezone: str = "America/New_York"

    @field_validator("alert_activities")
    @classmethod
    def normalize_activities(cls, value: list[str]) -> list[str]:
        activities = [a.strip().upper() for a in value if a.strip()]
        if not activities:
            raise ValueError("alert_activities must name at least one activity")
        return activities

    @field_validator("display_timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone: {value}") from exc
        return value

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.display_timezone)


def load_config(config_path: str | None = None) -> AppConfig:
    """
    Load configuration from YAML file + environment variables.

    Args:
        config_path: Path to config.yaml. If None, reads CONFIG_PATH env var
                     (default: config.yaml in current directory).

    Returns:
        Validated AppConfig instance.
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config.yaml")

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}

    # Inject secrets from environment (never from YAML)
    config_data = {
        **raw,
        "mbta_api_key": os.environ.get("MBTA_API_KEY"),
    }

    return AppConfig(**config_data)
