"""Error types raised by the weather pipeline."""

from datetime import date
from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error kinds returned alongside fulfillment text."""
    CITY_NOT_FOUND = "city_not_found"
    NO_FORECAST_DATA = "no_forecast_data"
    DAY_COUNT_OUT_OF_RANGE = "day_count_out_of_range"
    UPSTREAM_ERROR = "upstream_error"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    INVALID_REQUEST = "invalid_request"
    INTERNAL_ERROR = "internal_error"


class WeatherWebhookError(Exception):
    """Base class for expected failures of a webhook request."""
    code: ErrorCode = ErrorCode.INTERNAL_ERROR


class CityNotFoundError(WeatherWebhookError):
    """Raised when geocoding finds no match for a city."""
    code = ErrorCode.CITY_NOT_FOUND

    def __init__(self, city: str):
        self.city = city
        super().__init__(f"Could not find coordinates for {city}")


class NoForecastDataError(WeatherWebhookError):
    """Raised when the forecast holds no samples for the requested date."""
    code = ErrorCode.NO_FORECAST_DATA

    def __init__(self, requested_date: date):
        self.requested_date = requested_date
        super().__init__(f"No forecast data available for {requested_date.isoformat()}")


class DayCountOutOfRangeError(WeatherWebhookError):
    """Raised when a multi-day request asks for an unsupported number of days."""
    code = ErrorCode.DAY_COUNT_OUT_OF_RANGE

    def __init__(self, day_count: int, max_days: int = 5):
        self.day_count = day_count
        self.max_days = max_days
        super().__init__(f"Day count must be between 1 and {max_days}, got {day_count}")


class UpstreamError(WeatherWebhookError):
    """Raised when the geocoding or weather provider fails."""
    code = ErrorCode.UPSTREAM_ERROR


class UpstreamTimeoutError(UpstreamError):
    """Raised when the geocoding or weather provider does not answer in time."""
    code = ErrorCode.UPSTREAM_TIMEOUT
