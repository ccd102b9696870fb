"""
Configuration settings for fusion-model.

Uses Pydantic Settings to load environment variables for logging and the
serialization behavior knobs (reserved type key, eager default validation,
strict document keys).
"""
from __future__ import annotations

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="JSON_LOGS")

    # Serialization
    type_key: str = Field("model_type", alias="MODEL_TYPE_KEY", min_length=1)
    validate_defaults: bool = Field(True, alias="VALIDATE_DEFAULTS")
    strict_keys: bool = Field(False, alias="STRICT_KEYS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
