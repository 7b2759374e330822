"""Natural-language replies for the webhook."""

from datetime import date
from typing import List

from weather_webhook.weather.errors import (
    CityNotFoundError, DayCountOutOfRangeError, NoForecastDataError,
    UpstreamTimeoutError, WeatherWebhookError
)
from weather_webhook.weather.models import CurrentConditions, DayAggregate

FALLBACK_TEXT = "I can help you with current weather or weather forecasts. Please specify a city."
MISSING_CITY_TEXT = "Please provide a valid city name."
GENERIC_ERROR_TEXT = "Sorry, there was an error processing your request: {message}"


def format_day(day: date) -> str:
    """Format a date like 'Mon Oct 19 2026'."""
    return day.strftime("%a %b %d %Y")


def render_current(conditions: CurrentConditions) -> str:
    return (
        f"Current weather in {conditions.city}: {conditions.temperature}°C, "
        f"{conditions.description}. Humidity: {conditions.humidity}%, "
        f"Wind: {conditions.wind_speed} m/s."
    )


def render_day(city: str, aggregate: DayAggregate) -> str:
    return (
        f"Forecast for {city} on {format_day(aggregate.date)}: "
        f"Temperature between {aggregate.temperature_min:.1f}°C and {aggregate.temperature_max:.1f}°C. "
        f"{aggregate.description}. Humidity: {aggregate.humidity:.1f}%, "
        f"Wind: {aggregate.wind_speed:.1f} m/s."
    )


def render_days(city: str, aggregates: List[DayAggregate]) -> str:
    """One line per day."""
    return "\n".join(render_day(city, aggregate) for aggregate in aggregates)


def render_too_many_days(max_days: int) -> str:
    return f"Sorry, I can only provide forecasts for up to {max_days} days."


def render_error(error: WeatherWebhookError) -> str:
    """Pick the reply for an expected failure by its kind."""
    if isinstance(error, CityNotFoundError):
        return f"Sorry, I couldn't find a city called {error.city}."
    if isinstance(error, NoForecastDataError):
        return (
            f"Sorry, there is no forecast data available for {format_day(error.requested_date)}. "
            "Forecasts only cover the next few days."
        )
    if isinstance(error, DayCountOutOfRangeError):
        return (
            f"Sorry, I can only provide forecasts for 1 to {error.max_days} days, "
            f"not {error.day_count}."
        )
    if isinstance(error, UpstreamTimeoutError):
        return "Sorry, the weather service is taking too long to respond. Please try again shortly."
    return GENERIC_ERROR_TEXT.format(message=error)
