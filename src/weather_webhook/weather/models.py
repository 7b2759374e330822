"""Data models for the weather webhook service."""

from datetime import date as date_type, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """Geocoded location."""
    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lon: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    city: str = Field(..., description="City name as requested")


class ForecastRecord(BaseModel):
    """One 3-hour forecast sample."""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(..., description="Sample time as reported by the provider")
    temperature: float = Field(..., description="Temperature in Celsius")
    humidity: int = Field(..., description="Relative humidity in percent")
    wind_speed: float = Field(..., description="Wind speed in m/s")
    description: str = Field(..., description="Short condition label, e.g. 'light rain'")
    icon: str = Field(..., description="Provider icon code")

    @property
    def date(self) -> date_type:
        """Calendar day of the sample, used as bucket key."""
        return self.timestamp.date()


class DayAggregate(BaseModel):
    """Summary of all forecast samples of one calendar day."""
    model_config = ConfigDict(frozen=True)

    date: date_type = Field(..., description="Calendar day")
    temperature_min: float = Field(..., description="Minimum temperature in Celsius")
    temperature_max: float = Field(..., description="Maximum temperature in Celsius")
    description: str = Field(..., description="Most frequent condition label")
    icon: str = Field(..., description="Most frequent icon code")
    humidity: float = Field(..., description="Average humidity in percent")
    wind_speed: float = Field(..., description="Average wind speed in m/s")
    samples: int = Field(..., ge=1, description="Number of samples aggregated")


class CurrentConditions(BaseModel):
    """Current weather for a city."""
    city: str
    temperature: float = Field(..., description="Temperature in Celsius")
    feels_like: Optional[float] = Field(None, description="Apparent temperature in Celsius")
    description: str
    humidity: int = Field(..., description="Relative humidity in percent")
    wind_speed: float = Field(..., description="Wind speed in m/s")
    icon: Optional[str] = None


class OwmCondition(BaseModel):
    """Entry of the OpenWeatherMap 'weather' array."""
    description: str
    icon: str


class OwmMain(BaseModel):
    """OpenWeatherMap 'main' block."""
    temp: float
    feels_like: Optional[float] = None
    humidity: int


class OwmWind(BaseModel):
    """OpenWeatherMap 'wind' block."""
    speed: float


class OwmCurrentResponse(BaseModel):
    """Raw response of the current weather endpoint."""
    main: OwmMain
    wind: OwmWind
    weather: List[OwmCondition] = Field(..., min_length=1)


class OwmForecastEntry(BaseModel):
    """Raw entry of the 5 day / 3 hour forecast list."""
    dt_txt: str = Field(..., description="Sample time, 'YYYY-MM-DD HH:MM:SS'")
    main: OwmMain
    wind: OwmWind
    weather: List[OwmCondition] = Field(..., min_length=1)


class OwmForecastResponse(BaseModel):
    """Raw response of the 5 day / 3 hour forecast endpoint."""
    list: List[OwmForecastEntry] = Field(default_factory=list)
