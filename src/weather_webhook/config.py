"""Configuration settings for the weather webhook service."""

import os
from typing import Final, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

load_dotenv()

# API Configuration
OPENWEATHER_BASE_URL: Final[str] = os.getenv(
    "OPENWEATHER_BASE_URL", "https://api.openweathermap.org/data/2.5"
)
OPENWEATHER_API_KEY: str = os.getenv("OPENWEATHER_API_KEY", os.getenv("API_KEY", ""))
GEOCODING_USER_AGENT: str = os.getenv(
    "GEOCODING_USER_AGENT", "WeatherWebhookService/0.1 (user@example.com)"
)
HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "3000"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Forecast window settings
MAX_FORECAST_DAYS: int = int(os.getenv("MAX_FORECAST_DAYS", "5"))
DEFAULT_FORECAST_DAYS: int = int(os.getenv("DEFAULT_FORECAST_DAYS", "3"))

# Dialogflow parameter names holding the city, first non-empty wins
CITY_PARAMETER_KEYS: Final[Tuple[str, ...]] = ("geo-city", "pakistan-city")


class WeatherSettings(BaseModel):
    """Read-only settings shared by every request."""
    model_config = ConfigDict(frozen=True)

    api_key: str = Field("", description="OpenWeatherMap API key")
    base_url: str = Field(OPENWEATHER_BASE_URL, description="OpenWeatherMap data API base URL")
    geocoding_user_agent: str = Field(GEOCODING_USER_AGENT, description="User-Agent for Nominatim")
    http_timeout: float = Field(HTTP_TIMEOUT_SECONDS, gt=0, description="Per-call timeout in seconds")
    max_forecast_days: int = Field(MAX_FORECAST_DAYS, ge=1)
    default_forecast_days: int = Field(DEFAULT_FORECAST_DAYS, ge=1)
    city_parameter_keys: Tuple[str, ...] = CITY_PARAMETER_KEYS

    @classmethod
    def from_env(cls) -> "WeatherSettings":
        """Build settings from the environment loaded at import time."""
        return cls(
            api_key=OPENWEATHER_API_KEY,
            base_url=OPENWEATHER_BASE_URL,
            geocoding_user_agent=GEOCODING_USER_AGENT,
            http_timeout=HTTP_TIMEOUT_SECONDS,
            max_forecast_days=MAX_FORECAST_DAYS,
            default_forecast_days=DEFAULT_FORECAST_DAYS,
        )
