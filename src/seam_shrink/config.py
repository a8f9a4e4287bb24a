"""Runtime configuration from environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Worker threads per parallel phase (None = one per CPU)
    max_workers: Optional[int] = Field(default=None, ge=1)
    show_progress: bool = True
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "warning"

    # Rows/columns that must survive carving
    safety_margin: int = Field(default=2, ge=2)

    model_config = SettingsConfigDict(
        env_prefix="SEAM_SHRINK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _lower_level(cls, value):
        return value.lower() if isinstance(value, str) else value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
