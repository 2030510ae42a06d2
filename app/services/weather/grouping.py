"""Reshape a flat forecast list into per-day buckets.

Day keys are ``datetime.date`` values computed in one timezone chosen per
forecast, so grouping never depends on the runtime locale.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone as dt_timezone, tzinfo
from typing import Iterable, Mapping
from zoneinfo import ZoneInfo

from app.schemas.weather import ChartPoint, DayBucket, ForecastSample, ForecastSet


Buckets = dict[date, list[ForecastSample]]


def resolve_timezone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except Exception:
        return dt_timezone.utc


def forecast_timezone(forecast: ForecastSet, fallback: str = "UTC") -> tzinfo:
    if forecast.utc_offset_seconds is not None:
        return dt_timezone(timedelta(seconds=forecast.utc_offset_seconds))
    return resolve_timezone(fallback)


def local_time(timestamp: int, tz: tzinfo) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=dt_timezone.utc).astimezone(tz)


def day_key(timestamp: int, tz: tzinfo = dt_timezone.utc) -> date:
    return local_time(timestamp, tz).date()


def group_by_day(samples: Iterable[ForecastSample], tz: tzinfo = dt_timezone.utc) -> Buckets:
    # dict keeps insertion order, which is first-seen order of each day.
    buckets: Buckets = {}
    for sample in samples:
        buckets.setdefault(day_key(sample.timestamp, tz), []).append(sample)
    return buckets


def daily_summary(buckets: Mapping[date, list[ForecastSample]], days: int = 5) -> list[ForecastSample]:
    return [samples[0] for samples in list(buckets.values())[:days] if samples]


def hourly_detail(buckets: Mapping[date, list[ForecastSample]], day: date | None) -> list[ForecastSample]:
    if day is None:
        return []
    return list(buckets.get(day, []))


def as_day_buckets(buckets: Mapping[date, list[ForecastSample]]) -> list[DayBucket]:
    return [DayBucket(day=day, samples=list(samples)) for day, samples in buckets.items()]


def chart_points(
    samples: list[ForecastSample],
    tz: tzinfo = dt_timezone.utc,
    selected_index: int | None = None,
) -> list[ChartPoint]:
    return [
        ChartPoint(
            index=i,
            hour=local_time(s.timestamp, tz).hour,
            temperature_c=round(s.temperature_c),
            selected=i == selected_index,
        )
        for i, s in enumerate(samples)
    ]
