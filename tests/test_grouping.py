from datetime import date, timedelta, timezone

from app.schemas.weather import ForecastSample, ForecastSet
from app.services.weather import grouping


JAN_1 = 1735689600  # 2025-01-01T00:00:00Z
HOUR = 3600
DAY = 24 * HOUR


def _sample(ts: int, temp: float) -> ForecastSample:
    return ForecastSample(
        timestamp=ts,
        temperature_c=temp,
        feels_like_c=temp - 1,
        humidity_pct=70,
        wind_speed_ms=3.5,
        description="light rain",
        icon_id="10d",
        icon_url="https://openweathermap.org/img/wn/10d@2x.png",
    )


def _five_day_forecast() -> list[ForecastSample]:
    # 40 samples at 3h intervals starting 21:00 UTC, the provider's usual shape.
    start = JAN_1 - 3 * HOUR
    return [_sample(start + i * 3 * HOUR, float(i)) for i in range(40)]


def test_groups_two_days_in_order():
    samples = [_sample(JAN_1, 5), _sample(JAN_1 + 3 * HOUR, 6), _sample(JAN_1 + DAY, 2)]

    buckets = grouping.group_by_day(samples)

    assert list(buckets) == [date(2025, 1, 1), date(2025, 1, 2)]
    assert [s.temperature_c for s in buckets[date(2025, 1, 1)]] == [5, 6]
    assert [s.temperature_c for s in buckets[date(2025, 1, 2)]] == [2]
    assert [s.temperature_c for s in grouping.daily_summary(buckets)] == [5, 2]


def test_every_sample_lands_in_exactly_one_bucket():
    samples = _five_day_forecast()

    buckets = grouping.group_by_day(samples)

    flattened = [s for bucket in buckets.values() for s in bucket]
    assert flattened == samples
    for day, bucket in buckets.items():
        assert all(grouping.day_key(s.timestamp) == day for s in bucket)
        assert [s.timestamp for s in bucket] == sorted(s.timestamp for s in bucket)


def test_bucket_order_follows_first_occurrence():
    samples = [_sample(JAN_1 + DAY, 1), _sample(JAN_1, 2), _sample(JAN_1 + DAY + HOUR, 3)]

    buckets = grouping.group_by_day(samples)

    assert list(buckets) == [date(2025, 1, 2), date(2025, 1, 1)]
    assert [s.temperature_c for s in buckets[date(2025, 1, 2)]] == [1, 3]


def test_summary_truncates_to_five_days():
    buckets = grouping.group_by_day(_five_day_forecast())
    assert len(buckets) == 6

    summary = grouping.daily_summary(buckets)

    assert len(summary) == 5
    assert summary == [bucket[0] for bucket in list(buckets.values())[:5]]


def test_summary_with_fewer_days_has_one_entry_per_day():
    buckets = grouping.group_by_day([_sample(JAN_1, 1), _sample(JAN_1 + DAY, 2), _sample(JAN_1 + 2 * DAY, 3)])

    assert len(grouping.daily_summary(buckets)) == 3
    assert grouping.daily_summary({}) == []


def test_day_key_uses_the_given_timezone():
    late_evening_utc = JAN_1 - 2 * HOUR  # 2024-12-31T22:00:00Z
    istanbul = timezone(timedelta(hours=3))

    assert grouping.day_key(late_evening_utc) == date(2024, 12, 31)
    assert grouping.day_key(late_evening_utc, istanbul) == date(2025, 1, 1)


def test_forecast_timezone_prefers_provider_offset():
    with_offset = ForecastSet(place_name="Istanbul", utc_offset_seconds=10800, samples=[])
    without_offset = ForecastSet(place_name="Nowhere", samples=[])

    an_hour_before_midnight = JAN_1 - HOUR

    assert grouping.day_key(an_hour_before_midnight, grouping.forecast_timezone(with_offset)) == date(2025, 1, 1)
    assert grouping.day_key(an_hour_before_midnight, grouping.forecast_timezone(without_offset, "UTC")) == date(
        2024, 12, 31
    )
    assert grouping.forecast_timezone(without_offset, "Not/AZone") == timezone.utc


def test_hourly_detail_returns_the_selected_bucket():
    buckets = grouping.group_by_day(_five_day_forecast())
    day = date(2025, 1, 2)

    assert grouping.hourly_detail(buckets, day) == buckets[day]
    assert len(grouping.hourly_detail(buckets, day)) == 8
    assert grouping.hourly_detail(buckets, date(2030, 1, 1)) == []
    assert grouping.hourly_detail(buckets, None) == []


def test_chart_points_label_hours_and_mark_selection():
    samples = [_sample(JAN_1, 4.6), _sample(JAN_1 + 3 * HOUR, 6.2)]

    points = grouping.chart_points(samples, timezone.utc, selected_index=1)

    assert [(p.hour, p.temperature_c, p.selected) for p in points] == [(0, 5, False), (3, 6, True)]


def test_as_day_buckets_keeps_day_order_and_samples():
    samples = [_sample(JAN_1, 5), _sample(JAN_1 + 3 * HOUR, 6), _sample(JAN_1 + DAY, 2)]

    day_buckets = grouping.as_day_buckets(grouping.group_by_day(samples))

    assert [b.day for b in day_buckets] == [date(2025, 1, 1), date(2025, 1, 2)]
    assert [b.samples for b in day_buckets] == [samples[:2], samples[2:]]
