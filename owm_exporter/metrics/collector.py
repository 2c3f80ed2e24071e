"""Prometheus collector mapping cached weather readings onto gauges."""

import logging
import time
from collections.abc import Callable, Iterator, Sequence

from prometheus_client.core import GaugeMetricFamily, Metric

from owm_exporter.config.schema import TargetConfig
from owm_exporter.ingest.owm_client import OwmClientError
from owm_exporter.ingest.weather_fetcher import WeatherSource
from owm_exporter.metrics.exporter_metrics import (
    ERROR_HELP,
    NAMESPACE,
    SUBSYSTEM,
    ExporterMetrics,
)
from owm_exporter.models.weather import WeatherReading

logger = logging.getLogger(__name__)

LOCATION_LABEL = "location"

# (metric suffix, reading attribute, help, emitted only when present)
CURRENT_GAUGES: list[tuple[str, str, str, bool]] = [
    ("temperature", "temperature", "The current temperature.", False),
    ("temperature_min", "temperature_min", "The minimal currently observed temperature.", False),
    ("temperature_max", "temperature_max", "The maximal currently observed temperature.", False),
    ("temperature_feel", "feels_like", "The current temperature feel like.", False),
    ("humidity", "humidity", "The current humidity.", False),
    ("pressure", "pressure", "The current atmospheric pressure.", False),
    ("wind_speed", "wind_speed", "The current wind speed.", False),
    ("wind_direction", "wind_direction", "The current wind direction in degrees.", False),
    ("clouds", "clouds", "The current cloudiness in percent.", True),
    ("rain_1h", "rain_1h", "Rain volume for the last 1 hour, in millimeters.", True),
    ("rain_3h", "rain_3h", "Rain volume for the last 3 hours, in millimeters.", True),
    ("snow_1h", "snow_1h", "Snow volume for the last 1 hour, in millimeters.", True),
    ("snow_3h", "snow_3h", "Snow volume for the last 3 hours, in millimeters.", True),
]


def _current_families() -> dict[str, GaugeMetricFamily]:
    return {
        suffix: GaugeMetricFamily(
            f"{NAMESPACE}_current_{suffix}", help_text, labels=[LOCATION_LABEL]
        )
        for suffix, _, help_text, _ in CURRENT_GAUGES
    }


class WeatherCollector:
    """Scrapes every configured target once per collect() call.

    Per-target failures are logged and counted; they never abort the scrape.
    """

    def __init__(
        self,
        targets: Sequence[TargetConfig],
        source: WeatherSource,
        metrics: ExporterMetrics,
        scrape_timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.targets = list(targets)
        self.source = source
        self.metrics = metrics
        self.scrape_timeout = scrape_timeout
        self.clock = clock

    def describe(self) -> Iterator[Metric]:
        yield from _current_families().values()
        for metric in (
            self.metrics.total_scrapes,
            self.metrics.error,
            self.metrics.scrape_errors,
            self.metrics.api_requests,
            self.metrics.cache_hit,
        ):
            yield from metric.describe()

    def collect(self, timeout: float | None = None) -> Iterator[Metric]:
        yield from self.scrape(timeout)
        for metric in (
            self.metrics.total_scrapes,
            self.metrics.scrape_errors,
            self.metrics.api_requests,
            self.metrics.cache_hit,
        ):
            yield from metric.collect()

    def scrape(self, timeout: float | None = None) -> list[Metric]:
        """Run one scrape cycle.

        Returns the per-location gauge families and this scrape's own
        last-scrape-error family. ``timeout`` is the caller's budget in
        seconds; the tighter of it and ``scrape_timeout`` bounds every
        upstream call.
        """
        families = _current_families()
        failed = False
        self.metrics.error.set(0)

        with self.metrics.total_scrapes.time():
            budgets = [b for b in (timeout, self.scrape_timeout) if b is not None]
            deadline = self.clock() + min(budgets) if budgets else None

            for target in self.targets:
                logger.debug("Processing target %s", target.name)
                remaining = None if deadline is None else deadline - self.clock()
                try:
                    reading = self.source.fetch(target, timeout=remaining)
                except OwmClientError as e:
                    logger.error(
                        "Error while fetching current conditions for %s: %s",
                        target.name, e,
                    )
                    self._record_failure(target)
                    failed = True
                    continue
                except Exception:
                    logger.exception(
                        "Unexpected error while fetching current conditions for %s",
                        target.name,
                    )
                    self._record_failure(target)
                    failed = True
                    continue
                _add_reading(families, target.name, reading)

        result: list[Metric] = [f for f in families.values() if f.samples]
        # The shared gauge may be reset by an overlapping scrape, so the
        # response carries the flag observed by this scrape.
        result.append(
            GaugeMetricFamily(
                f"{NAMESPACE}_{SUBSYSTEM}_last_scrape_error",
                ERROR_HELP,
                value=1 if failed else 0,
            )
        )
        return result

    def _record_failure(self, target: TargetConfig) -> None:
        self.metrics.scrape_errors.labels(
            collector=f"collect.current.{target.name}"
        ).inc()
        self.metrics.error.set(1)


def _add_reading(
    families: dict[str, GaugeMetricFamily], location: str, reading: WeatherReading
) -> None:
    for suffix, attr, _, optional in CURRENT_GAUGES:
        value = getattr(reading, attr)
        if optional and value is None:
            continue
        families[suffix].add_metric([location], value)
