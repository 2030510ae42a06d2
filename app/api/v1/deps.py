from __future__ import annotations

from fastapi import HTTPException, Query, Request

from app.schemas.weather import Coordinates, LocationQuery, PlaceQuery
from app.services.weather.session import WeatherSession


def get_weather_session(request: Request) -> WeatherSession:
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise RuntimeError("Weather session not initialized. Did you start the FastAPI app?")
    return session


def get_location_query(
    lat: float | None = Query(None, ge=-90, le=90),
    lon: float | None = Query(None, ge=-180, le=180),
    q: str | None = Query(None, min_length=1, max_length=120, description="City name."),
) -> LocationQuery:
    """Either a place name or a full coordinate pair."""
    if q is not None and q.strip():
        return PlaceQuery(name=q)
    if lat is not None and lon is not None:
        return Coordinates(latitude=lat, longitude=lon)
    raise HTTPException(status_code=422, detail="Provide either q or both lat and lon")
