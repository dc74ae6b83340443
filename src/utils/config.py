from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = Field(default="0.0.0.0", description="Bind address for the API server")
    port: int = Field(
        default=5000,
        validation_alias=AliasChoices("port", "tracker_port"),
        description="Bind port for the API server",
    )

    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/tracker.log", description="Log file path")

    seed_default_habits: bool = Field(default=True, description="Create the starter habits on startup")
    streak_lookback_days: int = Field(default=365, description="Maximum days walked back for a streak")
    max_range_days: int = Field(default=366, description="Longest inclusive date range accepted by range queries")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    global _settings
    _settings = Settings()
    return _settings
