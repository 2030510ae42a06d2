from __future__ import annotations

from app.schemas.weather import CurrentConditions, ForecastSample, ForecastSet, SessionView

__all__ = ["CurrentConditions", "ForecastSample", "ForecastSet", "SessionView"]
