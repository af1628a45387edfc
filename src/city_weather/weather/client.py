"""HTTP client for the OpenWeatherMap API."""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from city_weather.config import (
    OPENWEATHER_API_BASE_URL, OPENWEATHER_API_KEY, HTTP_TIMEOUT_SECONDS,
    FORECAST_SAMPLE_COUNT
)
from city_weather.weather.models import OpenWeatherForecastResponse

logger = logging.getLogger(__name__)

GEOCODING_PATH = "geo/1.0/direct"
CURRENT_WEATHER_PATH = "data/2.5/weather"
FORECAST_PATH = "data/2.5/forecast"


def _validate_coordinates(lat: float, lon: float) -> None:
    if not (-90 <= lat <= 90) or not (-180 <= lon <= 180):
        raise ValueError(f"Invalid coordinates: lat={lat}, lon={lon}")


class OpenWeatherClient:
    """Async client for fetching geocoding and weather data from OpenWeatherMap."""

    def __init__(
        self,
        base_url: str = OPENWEATHER_API_BASE_URL,
        api_key: str = OPENWEATHER_API_KEY,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        """Initialize the weather client.

        Args:
            base_url: Base URL for the OpenWeatherMap API
            api_key: API key sent as the ``appid`` parameter
            timeout: Request timeout in seconds
            http_client: Pre-built httpx client to send requests with. When given,
                the caller owns it and it is not closed by ``aclose``.
        """
        self.base_url = base_url
        self.api_key = api_key
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def _get(self, path: str, params: Dict[str, Any]) -> Any:
        """Send a GET request and return decoded JSON.

        Raises:
            httpx.HTTPStatusError: On non-2xx responses
            httpx.RequestError: On transport failures
        """
        url = httpx.URL(self.base_url).join(path)
        query = {**params, "appid": self.api_key}

        try:
            response = await self.client.get(url, params=query)
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error from OpenWeatherMap API ({path}): {e.response.status_code} - {e.response.text}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Request error to OpenWeatherMap API ({path}): {e}")
            raise

    async def geocode_city(self, city: str, limit: int = 1) -> List[Dict[str, Any]]:
        """Look up coordinates for a city name.

        Args:
            city: City name, optionally with state and country code
            limit: Maximum number of matches

        Returns:
            List of matches with 'lat', 'lon', 'name' and usually 'country'
        """
        logger.info(f"Geocoding city via OpenWeatherMap: {city}")
        matches = await self._get(GEOCODING_PATH, {"q": city, "limit": limit})
        logger.info(f"Geocoding returned {len(matches)} matches for '{city}'")
        return matches

    async def get_current_weather(self, lat: float, lon: float, units: str) -> Dict[str, Any]:
        """Fetch current conditions for given coordinates.

        Raises:
            ValueError: If coordinates are invalid
        """
        _validate_coordinates(lat, lon)
        logger.info(f"Fetching current weather for lat={lat}, lon={lon}, units={units}")
        return await self._get(CURRENT_WEATHER_PATH, {"lat": lat, "lon": lon, "units": units})

    async def get_forecast(
        self,
        lat: float,
        lon: float,
        units: str,
        count: int = FORECAST_SAMPLE_COUNT
    ) -> Dict[str, Any]:
        """Fetch the 3-hour interval forecast for given coordinates.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees
            units: Unit system ('metric', 'imperial' or 'standard')
            count: Number of 3-hour entries to request

        Returns:
            Raw forecast data from the API

        Raises:
            ValueError: If coordinates are invalid
            httpx.HTTPError: If the API request fails
            ValidationError: If the response format is invalid
        """
        _validate_coordinates(lat, lon)
        logger.info(f"Fetching forecast for lat={lat}, lon={lon}, units={units}, cnt={count}")

        data = await self._get(FORECAST_PATH, {"lat": lat, "lon": lon, "units": units, "cnt": count})

        try:
            OpenWeatherForecastResponse.model_validate(data)
        except ValidationError as e:
            logger.error(f"Invalid forecast response format: {e}")
            raise

        logger.info(f"Successfully fetched forecast with {len(data.get('list', []))} entries")
        return data

    async def aclose(self):
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
