"""HTTP client for the OpenWeatherMap API."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from weather_webhook.config import WeatherSettings
from weather_webhook.weather.errors import UpstreamError, UpstreamTimeoutError
from weather_webhook.weather.models import (
    CurrentConditions, ForecastRecord, OwmCurrentResponse, OwmForecastEntry,
    OwmForecastResponse
)

logger = logging.getLogger(__name__)

FORECAST_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class OpenWeatherClient:
    """Async client for current weather and 5 day / 3 hour forecasts."""

    def __init__(self, settings: WeatherSettings, client: Optional[httpx.AsyncClient] = None):
        """Initialize the weather client.

        Args:
            settings: Service settings (API key, base URL, timeout)
            client: HTTP client to use (creates one if None)
        """
        self.base_url = settings.base_url.rstrip("/")
        self.api_key = settings.api_key
        self.client = client or httpx.AsyncClient(timeout=settings.http_timeout)

        if not self.api_key:
            logger.warning("OpenWeatherMap API key is not configured")

    async def _get(self, endpoint: str, lat: float, lon: float) -> Dict[str, Any]:
        """Call an OpenWeatherMap endpoint for the given coordinates.

        Raises:
            UpstreamTimeoutError: If the request timed out
            UpstreamError: If the request failed or returned an error status
        """
        url = f"{self.base_url}/{endpoint}"
        params = {"lat": lat, "lon": lon, "units": "metric", "appid": self.api_key}

        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
            return response.json()

        except httpx.TimeoutException as e:
            logger.error(f"Timeout calling OpenWeatherMap {endpoint}: {e!r}")
            raise UpstreamTimeoutError("The weather service did not respond in time") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error from OpenWeatherMap: {e.response.status_code} - {e.response.text}")
            raise UpstreamError(f"Weather service returned status {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error(f"Request error to OpenWeatherMap: {e!r}")
            raise UpstreamError("Could not reach the weather service") from e
        except ValueError as e:
            logger.error(f"Invalid JSON from OpenWeatherMap {endpoint}: {e}")
            raise UpstreamError("Weather service returned an invalid response") from e

    async def get_current_weather(self, lat: float, lon: float, city: str) -> CurrentConditions:
        """Fetch current conditions for given coordinates.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees
            city: City name to report back

        Returns:
            Current weather conditions

        Raises:
            UpstreamError: If the API request fails or the response is malformed
        """
        logger.info(f"Fetching current weather for lat={lat}, lon={lon}")
        data = await self._get("weather", lat, lon)

        try:
            current = OwmCurrentResponse(**data)
        except (TypeError, ValidationError) as e:
            logger.error(f"Invalid current weather response format: {e}")
            raise UpstreamError("Weather service returned an invalid response") from e

        return CurrentConditions(
            city=city,
            temperature=current.main.temp,
            feels_like=current.main.feels_like,
            description=current.weather[0].description,
            humidity=current.main.humidity,
            wind_speed=current.wind.speed,
            icon=current.weather[0].icon,
        )

    async def get_forecast(self, lat: float, lon: float) -> List[ForecastRecord]:
        """Fetch the 3-hour forecast samples for given coordinates.

        Returns:
            Forecast records in the order the provider returned them

        Raises:
            UpstreamError: If the API request fails or the response is malformed
        """
        logger.info(f"Fetching forecast for lat={lat}, lon={lon}")
        data = await self._get("forecast", lat, lon)

        try:
            forecast = OwmForecastResponse(**data)
            records = [self._to_record(entry) for entry in forecast.list]
        except (TypeError, ValueError) as e:
            logger.error(f"Invalid forecast response format: {e}")
            raise UpstreamError("Weather service returned an invalid forecast") from e

        logger.info(f"Successfully fetched forecast with {len(records)} entries")
        return records

    @staticmethod
    def _to_record(entry: OwmForecastEntry) -> ForecastRecord:
        return ForecastRecord(
            timestamp=datetime.strptime(entry.dt_txt, FORECAST_TIME_FORMAT),
            temperature=entry.main.temp,
            humidity=entry.main.humidity,
            wind_speed=entry.wind.speed,
            description=entry.weather[0].description,
            icon=entry.weather[0].icon,
        )

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()
