from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping

from app.core.errors import SelectionError
from app.schemas.weather import ForecastSample, SelectionView


@dataclass
class Selection:
    """Day/hour selection over the current day buckets.

    ``day is None`` is the no-selection state. The selection always points
    at a key (and sample index) of ``buckets``; anything else is rejected.
    """

    buckets: dict[date, list[ForecastSample]] = field(default_factory=dict)
    day: date | None = None
    hour_index: int | None = None

    def reset(self, buckets: Mapping[date, list[ForecastSample]] | None) -> None:
        self.buckets = dict(buckets or {})
        self.day = next(iter(self.buckets), None)
        self.hour_index = None

    def select_day(self, day: date) -> None:
        if day not in self.buckets:
            raise SelectionError(f"No forecast for {day.isoformat()}")
        self.day = day
        self.hour_index = None

    def select_hour(self, index: int) -> None:
        if self.day is None:
            raise SelectionError("No day selected")
        if not 0 <= index < len(self.buckets[self.day]):
            raise SelectionError(f"No forecast sample at index {index}")
        self.hour_index = index

    @property
    def hourly(self) -> list[ForecastSample]:
        if self.day is None:
            return []
        return list(self.buckets[self.day])

    @property
    def selected_sample(self) -> ForecastSample | None:
        if self.day is None or self.hour_index is None:
            return None
        return self.buckets[self.day][self.hour_index]

    def view(self) -> SelectionView:
        sample = self.selected_sample
        return SelectionView(
            day=self.day,
            hour_index=self.hour_index,
            hour_timestamp=sample.timestamp if sample else None,
        )
