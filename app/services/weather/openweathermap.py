from __future__ import annotations

import logging
from typing import Any

import httpx

from app.core.config import get_settings
from app.core.errors import (
    ProviderNotConfigured,
    ProviderPayloadError,
    ProviderStatusError,
    ProviderUnavailable,
)
from app.core.http import get_http_client, get_once
from app.schemas.weather import CurrentConditions, ForecastSample, ForecastSet, LocationQuery


logger = logging.getLogger(__name__)


def icon_url(icon_id: str) -> str:
    return get_settings().icon_url_template.format(icon=icon_id)


def _upstream_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return f"Weather provider error: {body['message']}"
    return f"Weather upstream status {resp.status_code}"


async def _get_json(endpoint: str, query: LocationQuery) -> dict[str, Any]:
    settings = get_settings()
    if not settings.openweathermap_api_key:
        raise ProviderNotConfigured("Weather provider API key is not configured")

    params: dict[str, Any] = {
        **query.to_params(),
        "appid": settings.openweathermap_api_key,
        "units": settings.units,
    }
    url = f"{settings.openweathermap_base_url.rstrip('/')}/{endpoint}"
    try:
        resp = await get_once(get_http_client(), url=url, params=params)
    except httpx.HTTPError as exc:
        logger.warning("OpenWeatherMap %s request failed: %s", endpoint, type(exc).__name__)
        raise ProviderUnavailable(f"Weather upstream error: {type(exc).__name__}") from exc

    if not resp.is_success:
        logger.warning("OpenWeatherMap %s returned %s", endpoint, resp.status_code)
        raise ProviderStatusError(_upstream_message(resp), status_code=resp.status_code)

    try:
        data = resp.json()
    except ValueError as exc:
        raise ProviderPayloadError("Weather provider returned invalid JSON") from exc
    if not isinstance(data, dict):
        raise ProviderPayloadError("Weather provider returned an unexpected body")
    return data


_MALFORMED = (AttributeError, KeyError, IndexError, TypeError, ValueError)


def _observation(item: dict[str, Any]) -> dict[str, Any]:
    """Pull the fields shared by the current and forecast payloads."""
    main = item["main"]
    weather = (item.get("weather") or [{}])[0]
    if not isinstance(main, dict) or not isinstance(weather, dict):
        raise TypeError("observation fields must be objects")
    icon = str(weather.get("icon") or "")
    return {
        "temperature_c": float(main["temp"]),
        "feels_like_c": float(main["feels_like"]),
        "humidity_pct": float(main["humidity"]),
        "wind_speed_ms": float((item.get("wind") or {})["speed"]),
        "description": str(weather.get("description") or ""),
        "icon_id": icon,
        "icon_url": icon_url(icon) if icon else "",
    }


async def fetch_current_conditions(query: LocationQuery) -> CurrentConditions:
    data = await _get_json("weather", query)
    try:
        return CurrentConditions(place_name=str(data.get("name") or ""), **_observation(data))
    except _MALFORMED as exc:
        raise ProviderPayloadError("Weather provider returned malformed current conditions") from exc


async def fetch_forecast(query: LocationQuery) -> ForecastSet:
    data = await _get_json("forecast", query)
    items = data.get("list")
    if not isinstance(items, list):
        raise ProviderPayloadError("Weather provider returned no forecast list")

    try:
        samples = [ForecastSample(timestamp=int(item["dt"]), **_observation(item)) for item in items]
        city = data.get("city") or {}
        offset = city.get("timezone")
        return ForecastSet(
            place_name=city.get("name"),
            utc_offset_seconds=int(offset) if offset is not None else None,
            samples=samples,
        )
    except _MALFORMED as exc:
        raise ProviderPayloadError("Weather provider returned a malformed forecast") from exc
