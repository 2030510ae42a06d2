from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.v1.deps import get_location_query
from app.core.config import get_settings
from app.core.errors import ProviderError, ProviderNotConfigured
from app.schemas.weather import CurrentConditions, DailyForecastResponse, ForecastSet, LocationQuery
from app.services.weather import grouping
from app.services.weather.openweathermap import fetch_current_conditions, fetch_forecast


router = APIRouter()


def _upstream_failure(exc: ProviderError) -> HTTPException:
    if isinstance(exc, ProviderNotConfigured):
        return HTTPException(status_code=503, detail=exc.message)
    return HTTPException(status_code=502, detail=exc.message)


@router.get("/current", response_model=CurrentConditions)
async def current_conditions(query: LocationQuery = Depends(get_location_query)):
    try:
        return await fetch_current_conditions(query)
    except ProviderError as exc:
        raise _upstream_failure(exc)


@router.get("/forecast", response_model=ForecastSet)
async def forecast(query: LocationQuery = Depends(get_location_query)):
    try:
        return await fetch_forecast(query)
    except ProviderError as exc:
        raise _upstream_failure(exc)


@router.get("/daily", response_model=DailyForecastResponse)
async def daily_forecast(
    query: LocationQuery = Depends(get_location_query),
    day: date | None = Query(None, description="Day to expand into hourly detail."),
):
    settings = get_settings()
    try:
        result = await fetch_forecast(query)
    except ProviderError as exc:
        raise _upstream_failure(exc)

    tz = grouping.forecast_timezone(result, settings.day_timezone)
    buckets = grouping.group_by_day(result.samples, tz)
    selected = day if day is not None else next(iter(buckets), None)
    if selected is not None and selected not in buckets:
        raise HTTPException(status_code=409, detail=f"No forecast for {selected.isoformat()}")

    hourly = grouping.hourly_detail(buckets, selected)
    return DailyForecastResponse(
        place_name=result.place_name,
        days=list(buckets),
        buckets=grouping.as_day_buckets(buckets),
        summary=grouping.daily_summary(buckets, settings.summary_days),
        selected_day=selected,
        hourly=hourly,
        chart=grouping.chart_points(hourly, tz),
    )
