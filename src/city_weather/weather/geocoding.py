"""Geocoding service for city weather lookups."""

import logging
from functools import lru_cache
from typing import Optional

from geopy.exc import GeocoderUnavailable, GeocoderTimedOut
from geopy.geocoders import Nominatim
from timezonefinder import TimezoneFinder

from city_weather.config import GEOCODING_PROVIDER, GEOCODING_USER_AGENT
from city_weather.weather.client import OpenWeatherClient
from city_weather.weather.models import GeocodedLocation

logger = logging.getLogger(__name__)

PROVIDERS = ("openweathermap", "nominatim")


class GeocodingError(Exception):
    """Raised when geocoding fails."""
    pass


class CityNotFoundError(GeocodingError):
    """Raised when a city name matches no location."""
    pass


@lru_cache(maxsize=1)
def _timezone_finder() -> TimezoneFinder:
    # Loading the polygon data is expensive; share one instance per process
    return TimezoneFinder(in_memory=True)


class GeocodingService:
    """Service for resolving city names and detecting time zones."""

    def __init__(
        self,
        client: OpenWeatherClient,
        provider: str = GEOCODING_PROVIDER,
        geolocator: Optional[Nominatim] = None
    ):
        """Initialize the geocoding service.

        Args:
            client: OpenWeatherMap client, used by the 'openweathermap' provider
            provider: 'openweathermap' or 'nominatim'
            geolocator: Nominatim geocoder (created on demand if None)

        Raises:
            ValueError: If the provider is unknown
        """
        if provider not in PROVIDERS:
            raise ValueError(f"Unknown geocoding provider '{provider}', expected one of {PROVIDERS}")

        self.client = client
        self.provider = provider
        self._geolocator = geolocator

    @property
    def geolocator(self) -> Nominatim:
        if self._geolocator is None:
            self._geolocator = Nominatim(user_agent=GEOCODING_USER_AGENT)
        return self._geolocator

    async def resolve_city(self, city: str) -> GeocodedLocation:
        """Convert a city name to coordinates, name and country.

        Args:
            city: City name to geocode

        Returns:
            GeocodedLocation of the best match

        Raises:
            CityNotFoundError: If no location matches
            GeocodingError: If the geocoder is unavailable
        """
        if self.provider == "nominatim":
            return self._resolve_with_nominatim(city)
        return await self._resolve_with_openweather(city)

    async def _resolve_with_openweather(self, city: str) -> GeocodedLocation:
        matches = await self.client.geocode_city(city, limit=1)

        if not matches:
            raise CityNotFoundError(f"City '{city}' not found")

        match = matches[0]
        location = GeocodedLocation(
            lat=match["lat"],
            lon=match["lon"],
            name=match["name"],
            country=match.get("country") or ""
        )
        logger.info(f"Successfully geocoded '{city}' to {location.name}, {location.country} ({location.lat}, {location.lon})")
        return location

    def _resolve_with_nominatim(self, city: str) -> GeocodedLocation:
        try:
            logger.info(f"Geocoding city via Nominatim: {city}")
            match = self.geolocator.geocode(city, addressdetails=True)
        except (GeocoderUnavailable, GeocoderTimedOut) as e:
            logger.error(f"Geocoding service unavailable for '{city}': {e}")
            raise GeocodingError("Geocoding service temporarily unavailable")

        if not match:
            raise CityNotFoundError(f"City '{city}' not found")

        address = match.raw.get("address", {})
        name = (
            address.get("city") or
            address.get("town") or
            address.get("village") or
            address.get("municipality") or
            match.raw.get("name") or
            city
        )
        location = GeocodedLocation(
            lat=match.latitude,
            lon=match.longitude,
            name=name,
            country=(address.get("country_code") or "").upper()
        )
        logger.info(f"Successfully geocoded '{city}' to {location.name}, {location.country} ({location.lat}, {location.lon})")
        return location

    def get_timezone(self, lat: float, lon: float) -> str:
        """Get time zone for coordinates.

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            Time zone name (e.g. "Europe/London") or "UTC" if not found
        """
        try:
            timezone = _timezone_finder().timezone_at(lng=lon, lat=lat)
        except ValueError as e:
            logger.error(f"Error getting timezone for ({lat}, {lon}): {e}")
            return "UTC"

        if timezone:
            logger.info(f"Found timezone '{timezone}' for ({lat}, {lon})")
            return timezone

        logger.warning(f"No timezone found for ({lat}, {lon}), defaulting to UTC")
        return "UTC"
