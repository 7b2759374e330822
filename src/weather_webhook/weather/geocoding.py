"""Geocoding service for weather lookups."""

import logging
from typing import Any, Optional

from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable
from geopy.geocoders import Nominatim

from weather_webhook.config import WeatherSettings
from weather_webhook.weather.errors import CityNotFoundError, UpstreamError, UpstreamTimeoutError
from weather_webhook.weather.models import Coordinates

logger = logging.getLogger(__name__)


class GeocodingService:
    """Service for resolving city names to coordinates."""

    def __init__(self, settings: WeatherSettings, geolocator: Optional[Any] = None):
        """Initialize the geocoding service.

        Args:
            settings: Service settings (user agent, timeout)
            geolocator: geopy geocoder instance (creates Nominatim if None)
        """
        self.geolocator = geolocator or Nominatim(
            user_agent=settings.geocoding_user_agent,
            timeout=settings.http_timeout
        )

    def forward_geocode(self, city: str) -> Coordinates:
        """Convert city name to coordinates.

        Args:
            city: City name to geocode

        Returns:
            Coordinates of the best match

        Raises:
            CityNotFoundError: If no place matches the name
            UpstreamTimeoutError: If the geocoder timed out
            UpstreamError: If the geocoder is unavailable or failed
        """
        try:
            logger.info(f"Geocoding city: {city}")
            location = self.geolocator.geocode(city)
        except GeocoderTimedOut as e:
            logger.error(f"Geocoding timed out for '{city}': {e}")
            raise UpstreamTimeoutError("Geocoding service timed out") from e
        except GeocoderUnavailable as e:
            logger.error(f"Geocoding service unavailable for '{city}': {e}")
            raise UpstreamError("Geocoding service temporarily unavailable") from e
        except GeocoderServiceError as e:
            logger.error(f"Geocoding failed for '{city}': {e}")
            raise UpstreamError(f"Failed to geocode city: {e}") from e

        if not location:
            logger.error(f"Could not find coordinates for {city}")
            raise CityNotFoundError(city)

        lat, lon = location.latitude, location.longitude
        logger.info(f"Successfully geocoded '{city}' to ({lat}, {lon})")
        return Coordinates(lat=lat, lon=lon, city=city)
