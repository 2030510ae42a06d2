from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def to_params(self) -> dict[str, float]:
        return {"lat": self.latitude, "lon": self.longitude}


class PlaceQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, max_length=120)

    @field_validator("name")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("place name must not be blank")
        return value

    def to_params(self) -> dict[str, str]:
        return {"q": self.name}


LocationQuery = Union[Coordinates, PlaceQuery]


class CurrentConditions(BaseModel):
    model_config = ConfigDict(frozen=True)

    place_name: str
    temperature_c: float = Field(..., description="Air temperature (C).")
    feels_like_c: float = Field(..., description="Apparent temperature (C).")
    humidity_pct: float = Field(..., description="Relative humidity (%).")
    wind_speed_ms: float = Field(..., description="Wind speed (m/s).")
    description: str
    icon_id: str
    icon_url: str


class ForecastSample(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(..., description="Unix seconds (UTC).")
    temperature_c: float
    feels_like_c: float
    humidity_pct: float
    wind_speed_ms: float
    description: str
    icon_id: str
    icon_url: str


class ForecastSet(BaseModel):
    place_name: str | None = None
    utc_offset_seconds: int | None = Field(None, description="Location offset reported by the provider.")
    samples: list[ForecastSample] = Field(default_factory=list)


class DayBucket(BaseModel):
    day: date
    samples: list[ForecastSample]


class ChartPoint(BaseModel):
    index: int
    hour: int
    temperature_c: int
    selected: bool = False


class DailyForecastResponse(BaseModel):
    place_name: str | None
    days: list[date]
    buckets: list[DayBucket]
    summary: list[ForecastSample]
    selected_day: date | None
    hourly: list[ForecastSample]
    chart: list[ChartPoint]


class FetchStatus(str, Enum):
    idle = "idle"
    pending = "pending"
    success = "success"
    failure = "failure"


class FetchState(BaseModel):
    status: FetchStatus = FetchStatus.idle
    error: str | None = None


class DisplayState(str, Enum):
    loading = "loading"
    error = "error"
    data = "data"
    no_data = "no_data"


class SelectionView(BaseModel):
    day: date | None = None
    hour_index: int | None = None
    hour_timestamp: int | None = None


class SessionView(BaseModel):
    display: DisplayState
    generation: int
    error: str | None = None
    conditions_state: FetchState
    forecast_state: FetchState
    conditions: CurrentConditions | None = None
    place_name: str | None = None
    days: list[date] = Field(default_factory=list)
    summary: list[ForecastSample] = Field(default_factory=list)
    hourly: list[ForecastSample] = Field(default_factory=list)
    chart: list[ChartPoint] = Field(default_factory=list)
    selection: SelectionView = Field(default_factory=SelectionView)


class LocateRequest(BaseModel):
    permission_granted: bool
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)


class SearchRequest(BaseModel):
    city: str = Field(..., max_length=120)


class SelectDayRequest(BaseModel):
    day: date


class SelectHourRequest(BaseModel):
    index: int


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
