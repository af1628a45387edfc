from collections.abc import Callable

import pytest

from city_weather.weather.forecast import calendar_day, reduce_to_daily

from .utils import BASE_TS, DAY, STEP, make_sample, samples_for_days


@pytest.fixture
def utc_server(server_timezone: Callable[[str], None]) -> None:
    server_timezone("UTC")


def test_calendar_day_uses_given_zone() -> None:
    assert calendar_day(BASE_TS, "UTC") == "2025-01-01"
    assert calendar_day(BASE_TS, "America/New_York") == "2024-12-31"
    assert calendar_day(BASE_TS, "Asia/Tokyo") == "2025-01-01"


def test_calendar_day_defaults_to_server_local_time(server_timezone: Callable[[str], None]) -> None:
    server_timezone("America/New_York")
    assert calendar_day(BASE_TS) == "2024-12-31"

    server_timezone("UTC")
    assert calendar_day(BASE_TS) == "2025-01-01"


def test_empty_input_gives_empty_output(utc_server: None) -> None:
    assert reduce_to_daily([], "metric") == []


def test_single_day_keeps_only_first_sample(utc_server: None) -> None:
    samples = samples_for_days(1)

    daily = reduce_to_daily(samples, "metric")

    assert len(daily) == 1
    assert daily[0].timestamp == samples[0].timestamp


def test_three_days_keep_first_sample_of_each_day(utc_server: None) -> None:
    samples = samples_for_days(3)

    daily = reduce_to_daily(samples, "imperial")

    assert [d.timestamp for d in daily] == [BASE_TS, BASE_TS + DAY, BASE_TS + 2 * DAY]
    assert all(d.units == "imperial" for d in daily)


def test_five_days_are_capped_at_first_three(utc_server: None) -> None:
    samples = samples_for_days(5)

    daily = reduce_to_daily(samples, "metric")

    assert len(daily) == 3
    assert [calendar_day(d.timestamp) for d in daily] == ["2025-01-01", "2025-01-02", "2025-01-03"]


def test_fewer_than_three_days_gives_shorter_output(utc_server: None) -> None:
    samples = samples_for_days(2)

    assert len(reduce_to_daily(samples, "metric")) == 2


def test_summary_matches_source_sample_field_for_field(utc_server: None) -> None:
    samples = samples_for_days(3)
    first_of_day = {s.timestamp: s for s in samples}

    for summary in reduce_to_daily(samples, "standard"):
        source = first_of_day[summary.timestamp]
        assert summary.model_dump(exclude={"units"}) == source.model_dump()
        assert summary.units == "standard"


def test_output_days_are_distinct_and_bounded(utc_server: None) -> None:
    # Irregular spacing: several samples per day, some days skipped
    offsets = [0, 1, 2, 9, 10, 11, 25, 26, 40, 41, 42]
    samples = [make_sample(BASE_TS + o * STEP) for o in offsets]
    distinct_days = {calendar_day(s.timestamp) for s in samples}

    daily = reduce_to_daily(samples, "metric")
    days = [calendar_day(d.timestamp) for d in daily]

    assert len(daily) <= min(3, len(distinct_days))
    assert len(set(days)) == len(days)
    assert days == sorted(days)


def test_reducing_output_again_is_identity(utc_server: None) -> None:
    daily = reduce_to_daily(samples_for_days(4), "metric")

    assert reduce_to_daily(daily, "metric") == daily


def test_day_boundaries_follow_server_time_zone(server_timezone: Callable[[str], None]) -> None:
    # Midnight UTC is 19:00 the previous evening in New York
    server_timezone("America/New_York")
    samples = samples_for_days(3)

    daily = reduce_to_daily(samples, "metric")

    assert [d.timestamp for d in daily] == [BASE_TS, BASE_TS + 2 * STEP, BASE_TS + 10 * STEP]


def test_explicit_time_zone_overrides_server_time_zone(server_timezone: Callable[[str], None]) -> None:
    server_timezone("America/New_York")
    samples = samples_for_days(3)

    daily = reduce_to_daily(samples, "metric", timezone_str="Asia/Tokyo")

    assert [d.timestamp for d in daily] == [BASE_TS, BASE_TS + 5 * STEP, BASE_TS + 13 * STEP]


def test_max_days_limits_output(utc_server: None) -> None:
    daily = reduce_to_daily(samples_for_days(3), "metric", max_days=1)

    assert [d.timestamp for d in daily] == [BASE_TS]
