"""Reduction of the 3-hour forecast list into daily summaries."""

import zoneinfo
from datetime import datetime
from typing import Iterable, List, Optional

from city_weather.config import FORECAST_DAYS
from city_weather.weather.models import DailySummary, ForecastSample


def calendar_day(timestamp: int, timezone_str: Optional[str] = None) -> str:
    """Return the ``YYYY-MM-DD`` calendar day of a Unix timestamp.

    Args:
        timestamp: Unix seconds
        timezone_str: IANA time zone name; None uses the server's local time zone

    Returns:
        Date string
    """
    if timezone_str is None:
        moment = datetime.fromtimestamp(timestamp)
    else:
        moment = datetime.fromtimestamp(timestamp, tz=zoneinfo.ZoneInfo(timezone_str))
    return moment.strftime('%Y-%m-%d')


def reduce_to_daily(
    samples: Iterable[ForecastSample],
    units: str,
    timezone_str: Optional[str] = None,
    max_days: int = FORECAST_DAYS
) -> List[DailySummary]:
    """Keep the first sample of each calendar day, up to ``max_days`` days.

    Samples must be ordered by timestamp. A sample is kept when its day differs
    from the day of the previously kept sample.

    Args:
        samples: Forecast samples in ascending timestamp order
        units: Unit system of the request, copied onto every summary
        timezone_str: Time zone for day boundaries; None uses server local time
        max_days: Maximum number of summaries

    Returns:
        Daily summaries in first-seen order
    """
    daily: List[DailySummary] = []
    day_count = 0
    previous_day = None

    for sample in samples:
        day = calendar_day(sample.timestamp, timezone_str)
        if day != previous_day and day_count < max_days:
            fields = {name: getattr(sample, name) for name in ForecastSample.model_fields}
            daily.append(DailySummary(**fields, units=units))
            previous_day = day
            day_count += 1

    return daily
