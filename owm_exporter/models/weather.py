"""Current-weather data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WeatherReading:
    location: str
    temperature: float
    temperature_min: float
    temperature_max: float
    feels_like: float
    pressure: float  # hPa
    humidity: float  # percent
    visibility: float  # meters
    wind_speed: float
    wind_direction: float  # degrees
    # None means the upstream did not report the value
    clouds: float | None = None
    rain_1h: float | None = None
    rain_3h: float | None = None
    snow_1h: float | None = None
    snow_3h: float | None = None


@dataclass(frozen=True)
class CacheEntry:
    reading: WeatherReading
    fetched_at: float  # monotonic seconds
