from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CORS_ORIGINS = [
    "http://localhost:8081",
    "http://127.0.0.1:8081",
]

OPENWEATHERMAP_BASE_URL = "https://api.openweathermap.org/data/2.5"
OPENWEATHERMAP_ICON_URL = "https://openweathermap.org/img/wn/{icon}@2x.png"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SKYCAST_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    http_timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)
    log_level: str = Field(default="INFO")

    # OpenWeatherMap
    openweathermap_api_key: str | None = Field(default=None)
    openweathermap_base_url: str = Field(default=OPENWEATHERMAP_BASE_URL)
    icon_url_template: str = Field(default=OPENWEATHERMAP_ICON_URL)
    units: str = Field(default="metric")

    # Forecast presentation
    summary_days: int = Field(default=5, ge=1, le=5)
    day_timezone: str = Field(default="UTC", min_length=1, max_length=64)

    @field_validator("units")
    @classmethod
    def _metric_only(cls, value: str) -> str:
        # Temperatures are Celsius and wind is m/s everywhere downstream.
        if value != "metric":
            raise ValueError("only metric units are supported")
        return value

    def model_post_init(self, __context: Any) -> None:
        # Allow SKYCAST_CORS_ORIGINS as JSON array or comma-separated string.
        raw_cors = getattr(self, "cors_origins", None)
        if isinstance(raw_cors, str):
            parsed = raw_cors.strip()
            if parsed.startswith("["):
                try:
                    self.cors_origins = [str(x).strip() for x in json.loads(parsed) if str(x).strip()]
                except ValueError:
                    self.cors_origins = [s.strip() for s in parsed.split(",") if s.strip()]
            else:
                self.cors_origins = [s.strip() for s in parsed.split(",") if s.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
