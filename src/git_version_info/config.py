from __future__ import annotations

"""Settings for the version resolver, read from ``GIT_VERSION_INFO_*`` variables."""

from functools import lru_cache
from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class VersionSettings(BaseSettings):
    """Defaults for the CLI; explicit options always take precedence."""

    model_config = SettingsConfigDict(
        env_prefix="GIT_VERSION_INFO_",
        env_file=".env",
        extra="ignore",
    )

    release_branch: Optional[str] = Field(None, description="Branch whose first-parent history holds release tags")
    git_executable: str = Field("git", min_length=1)
    timeout: int = Field(30, ge=1, le=600, description="Per-command git timeout in seconds")
    log_level: str = Field("INFO")

    @field_validator("release_branch", mode="before")
    @classmethod
    def _blank_branch_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("git_executable", mode="before")
    @classmethod
    def _strip_executable(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(_LOG_LEVELS)}")
        return level


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> VersionSettings:
    """Return cached settings object with optional overrides for tests."""

    if overrides:
        return VersionSettings(**overrides)
    return VersionSettings()


__all__ = ["VersionSettings", "get_settings"]
