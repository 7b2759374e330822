"""Weather service tying geocoding, fetching and aggregation together."""

import asyncio
import logging
from datetime import date
from typing import Dict, List, Optional

from weather_webhook.config import WeatherSettings
from weather_webhook.weather.aggregation import (
    group_by_date, select_by_date, select_days, validate_day_count
)
from weather_webhook.weather.client import OpenWeatherClient
from weather_webhook.weather.geocoding import GeocodingService
from weather_webhook.weather.models import (
    Coordinates, CurrentConditions, DayAggregate, ForecastRecord
)

logger = logging.getLogger(__name__)


class WeatherService:
    """Service answering current weather and forecast questions for a city."""

    def __init__(
        self,
        settings: WeatherSettings,
        client: Optional[OpenWeatherClient] = None,
        geocoding_service: Optional[GeocodingService] = None
    ):
        """Initialize the weather service.

        Args:
            settings: Service settings
            client: Weather client instance (creates default if None)
            geocoding_service: Geocoding service instance (creates default if None)
        """
        self.settings = settings
        self.client = client or OpenWeatherClient(settings)
        self.geocoding_service = geocoding_service or GeocodingService(settings)

    async def _locate(self, city: str) -> Coordinates:
        # geopy is blocking
        return await asyncio.to_thread(self.geocoding_service.forward_geocode, city)

    async def _fetch_daily_data(self, city: str) -> Dict[date, List[ForecastRecord]]:
        coords = await self._locate(city)
        records = await self.client.get_forecast(coords.lat, coords.lon)
        daily_data = group_by_date(records)
        logger.info(f"Grouped {len(records)} forecast entries for {city} into {len(daily_data)} days")
        return daily_data

    async def get_current_weather(self, city: str) -> CurrentConditions:
        """Get current conditions for a city.

        Raises:
            CityNotFoundError: If the city cannot be geocoded
            UpstreamError: If a provider call fails
        """
        coords = await self._locate(city)
        return await self.client.get_current_weather(coords.lat, coords.lon, city)

    async def get_forecast_for_date(self, city: str, target: date) -> DayAggregate:
        """Get the daily summary for one date.

        Raises:
            CityNotFoundError: If the city cannot be geocoded
            NoForecastDataError: If the forecast does not cover the date
            UpstreamError: If a provider call fails
        """
        daily_data = await self._fetch_daily_data(city)
        return select_by_date(target, daily_data)

    async def get_daily_forecasts(self, city: str, day_count: int) -> List[DayAggregate]:
        """Get daily summaries for the first day_count forecast days.

        The day count is checked before anything is fetched.

        Raises:
            DayCountOutOfRangeError: If day_count is outside the supported range
            CityNotFoundError: If the city cannot be geocoded
            UpstreamError: If a provider call fails
        """
        max_days = self.settings.max_forecast_days
        validate_day_count(day_count, max_days)
        daily_data = await self._fetch_daily_data(city)
        return select_days(day_count, daily_data, max_days)

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
