"""Centralized configuration using Pydantic Settings.

Clinical cut points and triage rules are fixed in code; only operational
knobs live here (recommendation list length, storage keys, history window,
logging). All settings can be overridden via environment variables.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Skip reading .env file during testing to use code defaults
ENV_FILE = None if os.environ.get("TESTING") else ".env"
ENV_FILE_ENCODING = "utf-8"


class EngineSettings(BaseSettings):
    """Scoring engine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ENGINE_",
        env_file=ENV_FILE,
        env_file_encoding=ENV_FILE_ENCODING,
        extra="ignore",
    )

    max_recommendations: int = Field(
        default=6,
        ge=2,
        le=14,
        description="Upper bound on suggested techniques (baseline needs 2)",
    )


class StorageSettings(BaseSettings):
    """Key-value persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        env_file=ENV_FILE,
        env_file_encoding=ENV_FILE_ENCODING,
        extra="ignore",
    )

    key_prefix: str = Field(default="mindease_", description="Namespace for every stored key")
    latest_snapshot_key: str = Field(default="latest_snapshot", min_length=1)
    history_key: str = Field(default="assessments", min_length=1)
    consent_key: str = Field(default="allow_save", min_length=1)
    history_limit: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Snapshots kept in history (newest first)",
    )
    file_path: Path = Field(
        default=Path("data/mindease.json"),
        description="Backing file for the JSON file store",
    )

    @model_validator(mode="after")
    def validate_distinct_keys(self) -> StorageSettings:
        """Stored documents must not overwrite each other."""
        keys = (self.latest_snapshot_key, self.history_key, self.consent_key)
        if len(set(keys)) != len(keys):
            raise ValueError(f"Storage keys must be distinct, got {keys}")
        return self


class HistorySettings(BaseSettings):
    """Score history statistics configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HISTORY_",
        env_file=ENV_FILE,
        env_file_encoding=ENV_FILE_ENCODING,
        extra="ignore",
    )

    period_days: int = Field(default=30, ge=1, le=3650, description="Statistics window")
    trend_threshold: float = Field(
        default=2.0,
        ge=0.0,
        description="Mean score change (points) needed to call a trend",
    )
    min_records_for_trend: int = Field(
        default=3,
        ge=2,
        description="Fewer in-period records than this always report a stable trend",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=ENV_FILE,
        env_file_encoding=ENV_FILE_ENCODING,
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum log level",
    )
    format: Literal["json", "console"] = Field(
        default="json",
        description="Log output format",
    )
    include_timestamp: bool = Field(default=True)
    include_caller: bool = Field(default=True)


class Settings(BaseSettings):
    """Root settings combining all configuration groups."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding=ENV_FILE_ENCODING,
        env_nested_delimiter="__",
        extra="ignore",
    )

    engine: EngineSettings = Field(default_factory=EngineSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    history: HistorySettings = Field(default_factory=HistorySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
