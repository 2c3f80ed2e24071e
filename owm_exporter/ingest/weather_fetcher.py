"""Weather fetcher: serves readings from the TTL cache or the OWM API."""

import logging
from typing import Protocol

from owm_exporter.config.schema import TargetConfig
from owm_exporter.ingest.owm_client import OwmClient, OwmDecodeError, OwmTransportError
from owm_exporter.ingest.ttl_cache import TtlCache
from owm_exporter.metrics.exporter_metrics import ExporterMetrics
from owm_exporter.models.weather import WeatherReading

logger = logging.getLogger(__name__)


class WeatherSource(Protocol):
    def fetch(self, target: TargetConfig, timeout: float | None = None) -> WeatherReading:
        """Return current conditions for a target or raise OwmClientError."""


class WeatherFetcher:
    def __init__(
        self,
        client: OwmClient,
        cache: TtlCache,
        metrics: ExporterMetrics,
    ):
        self.client = client
        self.cache = cache
        self.metrics = metrics

    def fetch(self, target: TargetConfig, timeout: float | None = None) -> WeatherReading:
        """Fetch current conditions for a target.

        A fresh cache entry is returned without network access. Otherwise a
        single live request is made; only a successful, decodable response
        replaces the cached entry.
        """
        cached = self.cache.lookup(target.name, target.interval)
        if cached is not None:
            self.metrics.cache_hit.labels(location=target.name).inc()
            logger.debug("Results are being fetched from cache for %s", target.name)
            return cached

        self.metrics.api_requests.labels(location=target.name).inc()
        if timeout is not None and timeout <= 0:
            raise OwmTransportError(
                f"scrape deadline exceeded before fetching {target.name}"
            )

        logger.info("Fetching current conditions for %s", target.name)
        raw = self.client.get_current(target.lat, target.lon, timeout=timeout)
        reading = _normalize_reading(raw)
        self.cache.store(target.name, reading)
        return reading


def _normalize_reading(raw: dict) -> WeatherReading:
    """Map an OWM current-weather document onto a WeatherReading.

    Missing required values become 0.0. Missing or zero cloud and
    precipitation values become None.
    """
    main = _section(raw, "main")
    wind = _section(raw, "wind")
    clouds = _section(raw, "clouds")
    rain = _section(raw, "rain")
    snow = _section(raw, "snow")

    location = raw.get("name", "")
    if not isinstance(location, str):
        raise OwmDecodeError(f"field 'name' is not a string: {location!r}")

    return WeatherReading(
        location=location,
        temperature=_number(main, "temp"),
        temperature_min=_number(main, "temp_min"),
        temperature_max=_number(main, "temp_max"),
        feels_like=_number(main, "feels_like"),
        pressure=_number(main, "pressure"),
        humidity=_number(main, "humidity"),
        visibility=_number(raw, "visibility"),
        wind_speed=_number(wind, "speed"),
        wind_direction=_number(wind, "deg"),
        clouds=_optional(clouds, "all"),
        rain_1h=_optional(rain, "1h"),
        rain_3h=_optional(rain, "3h"),
        snow_1h=_optional(snow, "1h"),
        snow_3h=_optional(snow, "3h"),
    )


def _section(raw: dict, key: str) -> dict:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise OwmDecodeError(f"field {key!r} is not an object: {value!r}")
    return value


def _number(section: dict, key: str) -> float:
    value = section.get(key)
    if value is None:
        return 0.0
    # bool is an int subclass but never a valid reading
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise OwmDecodeError(f"field {key!r} is not numeric: {value!r}")
    return float(value)


def _optional(section: dict, key: str) -> float | None:
    value = _number(section, key)
    return value if value != 0.0 else None
