"""Configuration loading for Fretwise.

Reads environment variables into a typed settings object using Pydantic v2.

Env variables (see .env.example):
- FW_LOG_LEVEL (default: INFO)
- FW_ENV (default: development)
- FW_OTEL_ENDPOINT (optional)
- FW_DEFAULT_OCTAVE (default: 3)
- FW_EASY_SPAN (default: 3)
- FW_HARD_SPAN (default: 5)
- FW_MAX_FRETS (default: 24)
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


class Settings(BaseModel):
    FW_LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    FW_ENV: str = Field(default="development", description="Environment name")
    FW_OTEL_ENDPOINT: Optional[str] = Field(
        default=None, description="OTLP HTTP endpoint (e.g., http://localhost:4318)"
    )

    FW_DEFAULT_OCTAVE: int = Field(
        default=3, ge=-1, le=9, description="Reference octave when none is selected"
    )
    FW_EASY_SPAN: int = Field(
        default=3, ge=1, description="Max string/fret span of an easy fingering"
    )
    FW_HARD_SPAN: int = Field(
        default=5, ge=1, description="Max string/fret span of a hard fingering"
    )
    FW_MAX_FRETS: int = Field(default=24, ge=1, le=36, description="Fret search limit")

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="after")
    def check_spans(self) -> "Settings":
        if self.FW_HARD_SPAN < self.FW_EASY_SPAN:
            raise ValueError("FW_HARD_SPAN must be >= FW_EASY_SPAN")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment and memoize.

    Raises:
        ValueError: if an environment variable holds an invalid value.
    """

    env = {
        key: os.getenv(key)
        for key in Settings.model_fields
        if os.getenv(key) not in (None, "")
    }

    try:
        return Settings.model_validate(env)
    except ValidationError as exc:
        raise ValueError(f"Invalid Fretwise settings: {exc}") from exc


__all__ = ["Settings", "get_settings"]
