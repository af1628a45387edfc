"""Configuration settings for the city weather service."""

import os
from typing import Final
from dotenv import load_dotenv

load_dotenv()

# OpenWeatherMap API configuration
OPENWEATHER_API_BASE_URL: Final[str] = "https://api.openweathermap.org/"
OPENWEATHER_ICON_URL: Final[str] = "https://openweathermap.org/img/wn/{icon}@2x.png"
OPENWEATHER_API_KEY: str = os.getenv("OPENWEATHER_API_KEY", "")
HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "2.0"))

# Forecast shape: 24 entries at 3 hour intervals, reduced to 3 days
FORECAST_SAMPLE_COUNT: Final[int] = 24
FORECAST_DAYS: Final[int] = 3

# Units accepted by the upstream API
DEFAULT_UNITS: Final[str] = "metric"
SUPPORTED_UNITS: Final[tuple] = ("metric", "imperial", "standard")

# Geocoding configuration
GEOCODING_PROVIDER: str = os.getenv("GEOCODING_PROVIDER", "openweathermap").lower()
GEOCODING_USER_AGENT: str = os.getenv("GEOCODING_USER_AGENT", "CityWeatherService/0.1 (user@example.com)")

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Redis cache configuration
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
CACHE_EXPIRE_SECONDS: int = int(os.getenv("CACHE_EXPIRE_SECONDS", "60"))  # 60 seconds default
CACHE_PREFIX: str = os.getenv("CACHE_PREFIX", "city-weather")

# Rate limiting configuration
RATE_LIMIT_REQUESTS_PER_SECOND: int = int(os.getenv("RATE_LIMIT_REQUESTS_PER_SECOND", "20"))
RATE_LIMIT_REDIS_KEY_PREFIX: str = os.getenv("RATE_LIMIT_REDIS_KEY_PREFIX", "rate_limit")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
