"""Weather service assembling current conditions and daily forecasts."""

import logging
from typing import Dict, List, Optional

from pydantic import ValidationError

from city_weather.config import DEFAULT_UNITS
from city_weather.weather.client import OpenWeatherClient
from city_weather.weather.forecast import reduce_to_daily
from city_weather.weather.geocoding import GeocodingService
from city_weather.weather.models import (
    CurrentConditions, ForecastSample, GeocodedLocation, WeatherReport
)

logger = logging.getLogger(__name__)

TIMEZONE_OPTIONS = ("server", "utc", "local")


class WeatherService:
    """Service for looking up weather by city name."""

    def __init__(
        self,
        client: Optional[OpenWeatherClient] = None,
        geocoding_service: Optional[GeocodingService] = None
    ):
        """Initialize the weather service.

        Args:
            client: Weather client instance (creates default if None)
            geocoding_service: Geocoding service instance (creates default if None)
        """
        self.client = client or OpenWeatherClient()
        self.geocoding_service = geocoding_service or GeocodingService(self.client)

    async def get_weather_report(
        self,
        city: str,
        units: str = DEFAULT_UNITS,
        timezone_option: str = "server"
    ) -> WeatherReport:
        """Get current conditions and a three day forecast for a city.

        Args:
            city: City name
            units: Unit system passed through to the upstream API
            timezone_option: Day boundaries in 'server' local time (default),
                'utc', or the city's 'local' time zone

        Returns:
            WeatherReport for the resolved city

        Raises:
            CityNotFoundError: If the city cannot be geocoded
            GeocodingError: If geocoding fails
            ValueError: If upstream data is malformed
            httpx.HTTPError: If an API request fails
            ValidationError: If a response format is invalid
        """
        location = await self.geocoding_service.resolve_city(city)
        timezone = self._resolve_timezone(location, timezone_option)

        logger.info(
            f"Getting weather for {location.name}, {location.country} "
            f"(lat={location.lat}, lon={location.lon}, units={units}, timezone={timezone or 'server'})"
        )

        current_data = await self.client.get_current_weather(location.lat, location.lon, units)
        forecast_data = await self.client.get_forecast(location.lat, location.lon, units)

        current = self._parse_current(current_data)
        samples = self._parse_forecast_samples(forecast_data)
        forecast = reduce_to_daily(samples, units, timezone_str=timezone)
        logger.info(f"Reduced {len(samples)} forecast entries to {len(forecast)} days")

        return WeatherReport(
            city=location.name,
            country=location.country,
            current=current,
            forecast=forecast
        )

    def _resolve_timezone(self, location: GeocodedLocation, timezone_option: str) -> Optional[str]:
        """Map a timezone option to a zone name, None meaning server local time."""
        if timezone_option not in TIMEZONE_OPTIONS:
            raise ValueError(f"Unknown timezone option '{timezone_option}'")

        if timezone_option == "local":
            return self.geocoding_service.get_timezone(location.lat, location.lon)
        if timezone_option == "utc":
            return "UTC"
        return None

    def _parse_current(self, raw_data: Dict) -> CurrentConditions:
        try:
            return CurrentConditions.from_openweather(raw_data)
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Invalid current weather data format: {e!r}")
            raise ValueError(f"Invalid current weather data format: missing {e}")

    def _parse_forecast_samples(self, raw_data: Dict) -> List[ForecastSample]:
        """Parse the upstream forecast list into samples.

        Args:
            raw_data: Raw forecast response

        Returns:
            Samples in upstream (ascending timestamp) order
        """
        try:
            return [ForecastSample.from_openweather(item) for item in raw_data.get("list", [])]
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Invalid forecast data format: {e!r}")
            raise ValueError(f"Invalid forecast data format: missing {e}")
        except ValidationError as e:
            logger.error(f"Forecast entry failed validation: {e}")
            raise

    async def aclose(self):
        """Close the weather client."""
        if self.client:
            try:
                await self.client.aclose()
            except Exception as e:
                logger.error(f"Error closing weather client: {e}")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
