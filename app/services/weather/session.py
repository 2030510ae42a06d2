"""Single-user weather view state.

Each endpoint (current conditions, forecast) has its own fetch state, so a
failure of one never hides the data of the other. Every refresh is tagged with
a generation number and only results of the latest generation are applied.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, timezone as dt_timezone, tzinfo
from typing import Awaitable, Callable, TypeVar

from app.core.errors import LocationError, SkycastError
from app.schemas.weather import (
    CurrentConditions,
    DisplayState,
    FetchState,
    FetchStatus,
    ForecastSet,
    LocationQuery,
    SessionView,
)
from app.services.location import LocationService, resolve_device_location, resolve_place
from app.services.weather import grouping
from app.services.weather.openweathermap import fetch_current_conditions, fetch_forecast
from app.services.weather.selection import Selection


logger = logging.getLogger(__name__)

T = TypeVar("T")

GENERIC_FAILURE = "Failed to get weather. Please try again."


class WeatherSession:
    def __init__(
        self,
        *,
        day_timezone: str = "UTC",
        summary_days: int = 5,
        conditions_fetcher: Callable[[LocationQuery], Awaitable[CurrentConditions]] = fetch_current_conditions,
        forecast_fetcher: Callable[[LocationQuery], Awaitable[ForecastSet]] = fetch_forecast,
    ) -> None:
        self.day_timezone = day_timezone
        self.summary_days = summary_days
        self._fetch_conditions = conditions_fetcher
        self._fetch_forecast = forecast_fetcher

        self.generation = 0
        self.error: str | None = None
        self.conditions_state = FetchState()
        self.forecast_state = FetchState()
        self.conditions: CurrentConditions | None = None
        self.forecast: ForecastSet | None = None
        self.tz: tzinfo = dt_timezone.utc
        self.selection = Selection()

    # Triggers

    async def load_device_location(self, service: LocationService) -> SessionView:
        generation = self._next_generation()
        try:
            coordinates = await resolve_device_location(service)
        except LocationError as exc:
            if generation == self.generation:
                self._fail_resolution(exc.message)
            return self.view()
        if generation != self.generation:
            logger.info("Discarding device location for stale generation %s", generation)
            return self.view()
        await self._refresh(coordinates, generation)
        return self.view()

    async def search(self, name: str) -> SessionView:
        # A blank name raises ValueError before any state changes.
        query = resolve_place(name)
        await self._refresh(query, self._next_generation())
        return self.view()

    async def refresh(self, query: LocationQuery) -> SessionView:
        await self._refresh(query, self._next_generation())
        return self.view()

    def select_day(self, day: date) -> SessionView:
        self.selection.select_day(day)
        return self.view()

    def select_hour(self, index: int) -> SessionView:
        self.selection.select_hour(index)
        return self.view()

    # State

    @property
    def display_state(self) -> DisplayState:
        states = (self.conditions_state.status, self.forecast_state.status)
        if FetchStatus.pending in states:
            return DisplayState.loading
        if self.error:
            return DisplayState.error
        if self.conditions is not None or self.selection.buckets:
            return DisplayState.data
        if FetchStatus.failure in states:
            return DisplayState.error
        return DisplayState.no_data

    def view(self) -> SessionView:
        display = self.display_state
        error = self.error
        if display is DisplayState.error and error is None:
            error = self.conditions_state.error or self.forecast_state.error

        hourly = self.selection.hourly
        return SessionView(
            display=display,
            generation=self.generation,
            error=error,
            conditions_state=self.conditions_state.model_copy(),
            forecast_state=self.forecast_state.model_copy(),
            conditions=self.conditions,
            place_name=self._place_name(),
            days=list(self.selection.buckets),
            summary=grouping.daily_summary(self.selection.buckets, self.summary_days),
            hourly=hourly,
            chart=grouping.chart_points(hourly, self.tz, self.selection.hour_index),
            selection=self.selection.view(),
        )

    # Internals

    def _next_generation(self) -> int:
        self.generation += 1
        return self.generation

    def _place_name(self) -> str | None:
        if self.conditions is not None and self.conditions.place_name:
            return self.conditions.place_name
        if self.forecast is not None:
            return self.forecast.place_name
        return None

    def _fail_resolution(self, message: str) -> None:
        self.error = message
        self.conditions_state = FetchState()
        self.forecast_state = FetchState()
        self.conditions = None
        self.forecast = None
        self.selection.reset(None)

    async def _refresh(self, query: LocationQuery, generation: int) -> None:
        self.error = None
        self.conditions_state = FetchState(status=FetchStatus.pending)
        self.forecast_state = FetchState(status=FetchStatus.pending)
        logger.info("Fetching weather for %s (generation %s)", query, generation)

        await asyncio.gather(
            self._run(self._fetch_conditions, query, generation, self._apply_conditions, "conditions"),
            self._run(self._fetch_forecast, query, generation, self._apply_forecast, "forecast"),
        )

    async def _run(
        self,
        fetcher: Callable[[LocationQuery], Awaitable[T]],
        query: LocationQuery,
        generation: int,
        apply: Callable[[T | None, str | None], None],
        label: str,
    ) -> None:
        result: T | None = None
        message: str | None = None
        try:
            result = await fetcher(query)
        except SkycastError as exc:
            message = exc.message
        except Exception:
            logger.exception("Unexpected %s fetch failure", label)
            message = GENERIC_FAILURE

        if generation != self.generation:
            logger.info("Discarding stale %s result of generation %s", label, generation)
            return
        apply(result, message)

    def _apply_conditions(self, result: CurrentConditions | None, message: str | None) -> None:
        if message is not None:
            self.conditions = None
            self.conditions_state = FetchState(status=FetchStatus.failure, error=message)
            return
        self.conditions = result
        self.conditions_state = FetchState(status=FetchStatus.success)

    def _apply_forecast(self, result: ForecastSet | None, message: str | None) -> None:
        if message is not None or result is None:
            self.forecast = None
            self.forecast_state = FetchState(status=FetchStatus.failure, error=message or GENERIC_FAILURE)
            self.selection.reset(None)
            return
        self.forecast = result
        self.tz = grouping.forecast_timezone(result, self.day_timezone)
        self.selection.reset(grouping.group_by_day(result.samples, self.tz))
        self.forecast_state = FetchState(status=FetchStatus.success)
