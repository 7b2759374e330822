from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

import httpx
import pytest

from weather_webhook.config import WeatherSettings
from weather_webhook.weather import dates
from weather_webhook.weather.client import OpenWeatherClient
from weather_webhook.weather.geocoding import GeocodingService
from weather_webhook.weather.models import ForecastRecord
from weather_webhook.weather.service import WeatherService

TODAY = date(2026, 10, 19)

LAHORE = (31.5204, 74.3587)

CURRENT_LAHORE = {
    "main": {"temp": 30.2, "feels_like": 31.4, "humidity": 40},
    "wind": {"speed": 3.1},
    "weather": [{"description": "clear sky", "icon": "01d"}],
    "name": "Lahore",
}


def make_record(timestamp, temperature=20.0, humidity=50, wind_speed=2.0,
                description="clear sky", icon="01d"):
    if isinstance(timestamp, str):
        timestamp = datetime.fromisoformat(timestamp)
    return ForecastRecord(
        timestamp=timestamp,
        temperature=temperature,
        humidity=humidity,
        wind_speed=wind_speed,
        description=description,
        icon=icon,
    )


def forecast_entry(dt_txt, temp, humidity=50, wind=2.0, description="clear sky", icon="01d"):
    return {
        "dt": 0,
        "dt_txt": dt_txt,
        "main": {"temp": temp, "feels_like": temp, "humidity": humidity},
        "wind": {"speed": wind},
        "weather": [{"description": description, "icon": icon}],
    }


def forecast_payload(start=TODAY, days=5):
    """Eight 3-hour samples per day, temperatures rising through each day."""
    entries = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        for slot in range(8):
            entries.append(forecast_entry(
                f"{day.isoformat()} {slot * 3:02d}:00:00",
                temp=10.0 + offset + slot,
                humidity=40 + slot * 2,
                wind=1.0 + slot * 0.5,
                description="light rain" if slot < 5 else "few clouds",
                icon="10d" if slot < 5 else "02d",
            ))
    return {"cod": "200", "cnt": len(entries), "list": entries}


class OpenWeatherStub:
    """httpx MockTransport handler standing in for OpenWeatherMap."""

    def __init__(self, current=None, forecast=None, status_code=200, error=None):
        self.current = current if current is not None else CURRENT_LAHORE
        self.forecast = forecast if forecast is not None else forecast_payload()
        self.status_code = status_code
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(f"simulated {self.error.__name__}", request=request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"cod": self.status_code, "message": "boom"})
        if request.url.path.endswith("/forecast"):
            return httpx.Response(200, json=self.forecast)
        return httpx.Response(200, json=self.current)


class FakeGeolocator:
    """Stands in for geopy's Nominatim."""

    def __init__(self, places=None, error=None):
        self.places = {"Lahore": LAHORE} if places is None else places
        self.error = error
        self.calls = []

    def geocode(self, query):
        self.calls.append(query)
        if self.error is not None:
            raise self.error
        coords = self.places.get(query)
        if coords is None:
            return None
        return SimpleNamespace(latitude=coords[0], longitude=coords[1], address=query)


@pytest.fixture
def settings():
    return WeatherSettings(api_key="test-key", base_url="https://owm.test/data/2.5", http_timeout=5)


@pytest.fixture
def openweather():
    return OpenWeatherStub()


@pytest.fixture
def geolocator():
    return FakeGeolocator()


@pytest.fixture
def make_service(settings):
    def _make(stub, geolocator):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(stub))
        return WeatherService(
            settings,
            client=OpenWeatherClient(settings, client=http_client),
            geocoding_service=GeocodingService(settings, geolocator=geolocator),
        )
    return _make


class EveningWestOfUtc(datetime):
    """Clock at 02:30 UTC on TODAY, while local time is still the previous evening."""

    @classmethod
    def now(cls, tz=None):
        instant = datetime(2026, 10, 19, 2, 30, tzinfo=timezone.utc)
        if tz is None:
            return (instant - timedelta(hours=7)).replace(tzinfo=None)
        return instant.astimezone(tz)


class LocalDayBehindUtc(date):
    """Local calendar day that still lags the UTC day."""

    @classmethod
    def today(cls):
        return date(2026, 10, 18)


@pytest.fixture
def evening_west_of_utc(monkeypatch):
    monkeypatch.setattr(dates, "datetime", EveningWestOfUtc)
    monkeypatch.setattr(dates, "date", LocalDayBehindUtc)
