"""Centralised application settings loaded from environment / .env file."""

from datetime import time

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Sweeps
    sweep_interval_seconds: int = 300
    stale_after_hours: int = 48  # ready vehicles untouched this long go unknown
    bounty_sweep_at: time = time(21, 30)  # UTC, daily ready/batteryLow -> bounty

    # Logging
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_prefix": "FLEET_", "extra": "ignore"}


settings = Settings()
