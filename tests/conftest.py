import os
import time
from collections.abc import Callable, Iterator

import pytest

# Environment variables read at import time by city_weather.config
os.environ.setdefault("OPENWEATHER_API_KEY", "test-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("GEOCODING_PROVIDER", "openweathermap")

from fastapi_cache import FastAPICache  # noqa: E402
from fastapi_cache.backends.inmemory import InMemoryBackend  # noqa: E402


@pytest.fixture(autouse=True)
def disabled_cache() -> Iterator[None]:
    # The endpoint decorator needs an initialized cache; keep it pass-through.
    # Re-initialized per test since the app lifespan installs a Redis backend.
    FastAPICache.reset()
    FastAPICache.init(InMemoryBackend(), prefix="test", enable=False)
    yield
    FastAPICache.reset()


@pytest.fixture
def server_timezone(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[[str], None]]:
    """Switch the process local time zone for the duration of a test."""

    def apply(name: str) -> None:
        monkeypatch.setenv("TZ", name)
        time.tzset()

    yield apply
    monkeypatch.undo()
    time.tzset()
