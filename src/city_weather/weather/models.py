"""Data models for the city weather service.

Field names follow Python naming while aliases keep the OpenWeatherMap wire
names (``dt``, ``temp``, ``weather`` ...), which are also what the HTTP API
returns to its clients.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from city_weather.config import OPENWEATHER_ICON_URL


class WeatherCondition(BaseModel):
    """Weather condition summary as reported upstream."""
    model_config = ConfigDict(populate_by_name=True)

    main: str = Field(..., description="Condition group, e.g. 'Rain'")
    description: str = Field(..., description="Human readable condition")
    icon_code: str = Field(..., alias="icon", description="Upstream icon code, e.g. '10d'")

    @computed_field
    @property
    def icon_url(self) -> str:
        return OPENWEATHER_ICON_URL.format(icon=self.icon_code)

    @classmethod
    def from_openweather(cls, item: Dict[str, Any]) -> "WeatherCondition":
        """Build from the first entry of an upstream ``weather`` array."""
        return cls(
            main=item["main"],
            description=item["description"],
            icon_code=item["icon"],
        )


class ForecastSample(BaseModel):
    """One 3-hour forecast reading."""
    model_config = ConfigDict(populate_by_name=True)

    timestamp: int = Field(..., alias="dt", description="Unix seconds, UTC")
    temperature: float = Field(..., alias="temp", description="Temperature in requested units")
    temperature_min: float = Field(..., alias="temp_min", description="Minimum temperature")
    temperature_max: float = Field(..., alias="temp_max", description="Maximum temperature")
    humidity: int = Field(..., ge=0, le=100, description="Relative humidity in percent")
    wind_speed: float = Field(..., description="Wind speed, m/s or mph depending on units")
    weather_condition: WeatherCondition = Field(..., alias="weather", description="Weather condition")

    @classmethod
    def from_openweather(cls, item: Dict[str, Any]) -> "ForecastSample":
        """Build a sample from one entry of the upstream forecast ``list``.

        Args:
            item: Raw forecast list entry

        Returns:
            ForecastSample instance

        Raises:
            KeyError, IndexError: If the entry is missing required fields
        """
        main = item["main"]
        return cls(
            timestamp=item["dt"],
            temperature=main["temp"],
            temperature_min=main["temp_min"],
            temperature_max=main["temp_max"],
            humidity=main["humidity"],
            wind_speed=item["wind"]["speed"],
            weather_condition=WeatherCondition.from_openweather(item["weather"][0]),
        )


class DailySummary(ForecastSample):
    """First forecast sample of a calendar day, tagged with request units."""
    units: str = Field(..., description="Unit system used for the request")


class CurrentConditions(BaseModel):
    """Current weather conditions."""
    model_config = ConfigDict(populate_by_name=True)

    timestamp: int = Field(..., alias="dt", description="Observation time, Unix seconds")
    temperature: float = Field(..., alias="temp", description="Temperature in requested units")
    feels_like: float = Field(..., description="Perceived temperature")
    humidity: int = Field(..., ge=0, le=100, description="Relative humidity in percent")
    wind_speed: float = Field(..., description="Wind speed, m/s or mph depending on units")
    weather_condition: WeatherCondition = Field(..., alias="weather", description="Weather condition")

    @classmethod
    def from_openweather(cls, data: Dict[str, Any]) -> "CurrentConditions":
        """Build from an upstream current weather response."""
        main = data["main"]
        return cls(
            timestamp=data["dt"],
            temperature=main["temp"],
            feels_like=main["feels_like"],
            humidity=main["humidity"],
            wind_speed=data["wind"]["speed"],
            weather_condition=WeatherCondition.from_openweather(data["weather"][0]),
        )


class GeocodedLocation(BaseModel):
    """Result of resolving a city name."""
    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lon: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    name: str = Field(..., description="Resolved city name")
    country: str = Field("", description="Country code, empty if unknown")


class WeatherReport(BaseModel):
    """Weather response model."""
    city: str = Field(..., description="Resolved city name")
    country: str = Field(..., description="Country code")
    current: CurrentConditions = Field(..., description="Current conditions")
    forecast: List[DailySummary] = Field(..., max_length=3, description="Up to three daily summaries")


class OpenWeatherForecastResponse(BaseModel):
    """Raw response from the OpenWeatherMap 5 day / 3 hour forecast API."""
    model_config = ConfigDict(populate_by_name=True)

    cnt: int = Field(..., description="Number of entries returned")
    entries: List[dict] = Field(..., alias="list", description="Forecast entries")
    city: Optional[dict] = Field(None, description="City metadata")
