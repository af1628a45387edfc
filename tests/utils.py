from typing import Any, Callable, Optional

import httpx

from city_weather.weather.client import OpenWeatherClient
from city_weather.weather.models import ForecastSample

# 2025-01-01 00:00:00Z
BASE_TS = 1735689600
STEP = 3 * 60 * 60
DAY = 24 * 60 * 60

LONDON = {"name": "London", "lat": 51.5073, "lon": -0.1276, "country": "GB", "state": "England"}


def forecast_item(dt: int, temp: float = 10.0, icon: str = "04d") -> dict[str, Any]:
    return {
        "dt": dt,
        "main": {
            "temp": temp,
            "feels_like": temp - 1.5,
            "temp_min": temp - 1.0,
            "temp_max": temp + 1.0,
            "pressure": 1012,
            "humidity": 81,
        },
        "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds", "icon": icon}],
        "wind": {"speed": 4.6, "deg": 250},
        "dt_txt": "",
    }


def forecast_payload(count: int = 24, start: int = BASE_TS) -> dict[str, Any]:
    return {
        "cod": "200",
        "message": 0,
        "cnt": count,
        "list": [forecast_item(start + i * STEP, temp=float(i)) for i in range(count)],
        "city": {"id": 2643743, "name": "London", "country": "GB", "timezone": 0},
    }


def current_payload(dt: int = BASE_TS) -> dict[str, Any]:
    return {
        "dt": dt,
        "main": {"temp": 7.3, "feels_like": 4.9, "temp_min": 6.0, "temp_max": 8.4, "humidity": 87},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10n"}],
        "wind": {"speed": 3.1, "deg": 230},
        "name": "London",
    }


def make_sample(dt: int, temp: float = 10.0) -> ForecastSample:
    return ForecastSample.from_openweather(forecast_item(dt, temp=temp))


def samples_for_days(days: int, per_day: int = 8, start: int = BASE_TS) -> list[ForecastSample]:
    return [make_sample(start + i * STEP, temp=float(i)) for i in range(days * per_day)]


def openweather_transport(
    geocode: Optional[list[dict[str, Any]]] = None,
    current: Optional[dict[str, Any]] = None,
    forecast: Optional[dict[str, Any]] = None,
    status_code: int = 200,
    requests: Optional[list[httpx.Request]] = None,
) -> httpx.MockTransport:
    """Fake OpenWeatherMap API routing on request path."""
    routes: dict[str, Any] = {
        "/geo/1.0/direct": [LONDON] if geocode is None else geocode,
        "/data/2.5/weather": current if current is not None else current_payload(),
        "/data/2.5/forecast": forecast if forecast is not None else forecast_payload(),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if status_code != 200:
            return httpx.Response(status_code, json={"cod": status_code, "message": "Invalid API key"})
        return httpx.Response(200, json=routes[request.url.path])

    return httpx.MockTransport(handler)


def make_client(transport: httpx.MockTransport) -> OpenWeatherClient:
    return OpenWeatherClient(
        base_url="https://api.test/",
        api_key="test-key",
        http_client=httpx.AsyncClient(transport=transport),
    )


def failing_transport(exc_factory: Callable[[httpx.Request], Exception]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_factory(request)

    return httpx.MockTransport(handler)


class FakePipeline:
    def __init__(self, count: int, fail: bool) -> None:
        self.count = count
        self.fail = fail
        self.commands: list[str] = []

    def __getattr__(self, name: str) -> Any:
        def record(*_args: Any, **_kwargs: Any) -> "FakePipeline":
            self.commands.append(name)
            return self

        return record

    async def execute(self) -> list[Any]:
        if self.fail:
            raise ConnectionError("redis down")
        return [1, 0, self.count, True]


class FakeRedis:
    """Stands in for ``redis.asyncio.Redis`` in the rate limiter and app lifespan."""

    def __init__(self, count: int = 1, fail: bool = False) -> None:
        self.last_pipeline: Optional[FakePipeline] = None
        self.count = count
        self.fail = fail
        self.closed = False

    def pipeline(self) -> FakePipeline:
        self.last_pipeline = FakePipeline(self.count, self.fail)
        return self.last_pipeline

    async def aclose(self) -> None:
        self.closed = True
