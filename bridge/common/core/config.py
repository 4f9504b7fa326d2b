"""
Shared settings base.

Every setting is an upper-case environment variable (the Lambda console and
SAM templates use that convention); a local `.env` file is honored for
development runs.
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppConfig(BaseSettings):
    LOG_LEVEL: str = Field(default="INFO", description="Root level for the bridge loggers")
    LOG_CONFIG_PATH: str = Field(
        default="", description="logging YAML replacing the packaged one (empty = packaged)"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level
