"""Routing of Dialogflow intents to weather lookups."""

import logging
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from weather_webhook.api.models import WebhookResponse
from weather_webhook.config import WeatherSettings
from weather_webhook.intents import messages
from weather_webhook.weather.dates import resolve_date, resolve_day_count, utc_today
from weather_webhook.weather.errors import NoForecastDataError, WeatherWebhookError
from weather_webhook.weather.service import WeatherService

logger = logging.getLogger(__name__)


class Intent(str, Enum):
    CURRENT_WEATHER = "CurrentWeather"
    SINGLE_DATE_FORECAST = "SingleDateForecast"
    MULTI_DAY_FORECAST = "MultiDayForecast"


# Display names as configured in the Dialogflow agent
INTENT_ALIASES: Dict[str, Intent] = {
    "CurrentWeather": Intent.CURRENT_WEATHER,
    "Current Weather Intent": Intent.CURRENT_WEATHER,
    "SingleDateForecast": Intent.SINGLE_DATE_FORECAST,
    "Weather Forecast Intent": Intent.SINGLE_DATE_FORECAST,
    "Forecast Weather Intent": Intent.SINGLE_DATE_FORECAST,
    "MultiDayForecast": Intent.MULTI_DAY_FORECAST,
    "Multi Day Forecast Intent": Intent.MULTI_DAY_FORECAST,
}


class IntentDispatcher:
    """Turns an intent name and its parameters into a fulfillment reply."""

    def __init__(
        self,
        service: WeatherService,
        settings: WeatherSettings,
        today: Callable[[], date] = utc_today
    ):
        """Initialize the dispatcher.

        Args:
            service: Weather service used for lookups
            settings: Service settings (parameter keys, day limits)
            today: Returns the reference day for date expressions (UTC day)
        """
        self.service = service
        self.settings = settings
        self.today = today

    def extract_city(self, parameters: Mapping[str, Any]) -> str:
        """Return the first non-empty city parameter, trimmed."""
        for key in self.settings.city_parameter_keys:
            value = parameters.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return ""

    async def dispatch(
        self,
        intent_name: Optional[str],
        parameters: Mapping[str, Any]
    ) -> WebhookResponse:
        """Answer one webhook call.

        Expected failures are rendered into the reply with their error code.
        Unexpected exceptions propagate.
        """
        intent = INTENT_ALIASES.get(intent_name or "")
        if intent is None:
            logger.info(f"Unrecognized intent: {intent_name!r}")
            return WebhookResponse(fulfillment_text=messages.FALLBACK_TEXT)

        city = self.extract_city(parameters)
        if not city:
            return WebhookResponse(fulfillment_text=messages.MISSING_CITY_TEXT)

        logger.info(f"Dispatching {intent.value} for city={city}")

        try:
            if intent is Intent.CURRENT_WEATHER:
                text = await self._current_weather(city)
            elif intent is Intent.SINGLE_DATE_FORECAST:
                text = await self._single_date_forecast(city, parameters)
            else:
                text = await self._multi_day_forecast(city, parameters)

        except WeatherWebhookError as e:
            logger.error(f"{intent.value} failed for {city}: [{e.code.value}] {e}")
            return WebhookResponse.from_error(messages.render_error(e), e.code.value)

        return WebhookResponse(fulfillment_text=text)

    async def _current_weather(self, city: str) -> str:
        conditions = await self.service.get_current_weather(city)
        return messages.render_current(conditions)

    async def _single_date_forecast(self, city: str, parameters: Mapping[str, Any]) -> str:
        target = resolve_date(parameters.get("date-time"), self.today())
        aggregate = await self.service.get_forecast_for_date(city, target)
        return messages.render_day(city, aggregate)

    async def _multi_day_forecast(self, city: str, parameters: Mapping[str, Any]) -> str:
        day_count = resolve_day_count(
            number=parameters.get("number"),
            date_period=parameters.get("date-period"),
            today=self.today(),
            default=self.settings.default_forecast_days,
        )

        if day_count > self.settings.max_forecast_days:
            logger.info(f"Refusing {day_count}-day forecast for {city}")
            return messages.render_too_many_days(self.settings.max_forecast_days)

        aggregates = await self.service.get_daily_forecasts(city, day_count)
        if not aggregates:
            raise NoForecastDataError(self.today())
        return messages.render_days(city, aggregates)
