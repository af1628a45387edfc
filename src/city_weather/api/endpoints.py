"""API endpoints for the city weather service."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi_cache.decorator import cache
from pydantic import ValidationError

from city_weather.config import (
    CACHE_EXPIRE_SECONDS, DEFAULT_UNITS, SUPPORTED_UNITS,
    FORECAST_DAYS, GEOCODING_PROVIDER
)
from city_weather.weather.geocoding import CityNotFoundError
from city_weather.weather.models import WeatherReport
from city_weather.weather.service import WeatherService

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/api/weather", tags=["weather"])


def get_weather_service() -> WeatherService:
    """Build a weather service for one request."""
    return WeatherService()


@router.get("", response_model=WeatherReport)
@cache(expire=CACHE_EXPIRE_SECONDS)
async def get_weather(
    city: Optional[str] = Query(
        None,
        description="City name, optionally followed by country code (e.g. 'London,GB')"
    ),
    units: str = Query(
        DEFAULT_UNITS,
        pattern="^(metric|imperial|standard)$",
        description="Unit system: 'metric' (default), 'imperial' or 'standard'"
    ),
    timezone_option: str = Query(
        "server",
        pattern="^(server|utc|local)$",
        description="Day boundaries for the forecast: 'server' (default), 'utc' or the city's 'local' time"
    )
) -> WeatherReport:
    """Get current weather and a three day forecast for a city.

    Args:
        city: City name to look up
        units: Unit system for temperatures and wind speed
        timezone_option: Time zone used to split the forecast into days

    Returns:
        WeatherReport with current conditions and up to three daily summaries

    Raises:
        HTTPException: If the city is missing or unknown, or the upstream call fails
    """
    city = validate_city(city)

    try:
        weather_service = get_weather_service()
        async with weather_service:
            report = await weather_service.get_weather_report(
                city=city,
                units=units,
                timezone_option=timezone_option
            )

        logger.info(f"Successfully retrieved weather for {report.city} with {len(report.forecast)} forecast days")
        return report

    except CityNotFoundError as e:
        logger.warning(f"City lookup failed: {e}")
        raise HTTPException(status_code=404, detail="City not found")

    except ValidationError as e:
        logger.error(f"Data validation error: {e}")
        raise HTTPException(status_code=500, detail="Internal server error: data validation failed")

    except Exception as e:
        logger.error(f"Unexpected error getting weather for '{city}': {e}")
        raise HTTPException(status_code=500, detail=str(e))


def validate_city(city: Optional[str]) -> str:
    """Validate and normalize the city parameter.

    Raises:
        HTTPException: If the city is missing or blank
    """
    if city is None or not city.strip():
        raise HTTPException(status_code=400, detail="City name is required")
    return city.strip()


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status response
    """
    return {"status": "healthy", "service": "city-weather"}


@router.get("/info")
async def get_service_info() -> dict:
    """Get service information."""
    return {
        "service": "City Weather Service",
        "version": "0.1.0",
        "units": list(SUPPORTED_UNITS),
        "default_units": DEFAULT_UNITS,
        "forecast_days": FORECAST_DAYS,
        "geocoding_provider": GEOCODING_PROVIDER,
        "features": [
            "Current conditions by city name",
            f"Daily forecast for up to {FORECAST_DAYS} days"
        ],
        "data_source": "OpenWeatherMap API"
    }
