"""Exporter self-metrics: scrape counts, API calls, cache hits, errors."""

from dataclasses import dataclass

from prometheus_client import Counter, Gauge, Summary

NAMESPACE = "owm"
SUBSYSTEM = "exporter"
ERROR_HELP = (
    "Whether the last scrape of metrics from OWM resulted in an error "
    "(1 for error, 0 for success)."
)


@dataclass
class ExporterMetrics:
    total_scrapes: Summary
    api_requests: Counter
    cache_hit: Counter
    scrape_errors: Counter
    error: Gauge

    def collect(self):
        """Yield every accumulator's current samples."""
        for metric in (
            self.total_scrapes,
            self.error,
            self.scrape_errors,
            self.api_requests,
            self.cache_hit,
        ):
            yield from metric.collect()


def new_exporter_metrics() -> ExporterMetrics:
    """Build unregistered accumulators; the collector exposes them."""
    return ExporterMetrics(
        total_scrapes=Summary(
            "scrapes_total",
            "Total number of times OWM was scraped for metrics.",
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=None,
        ),
        api_requests=Counter(
            "api_requests",
            "Total number of API requests for given location.",
            ["location"],
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=None,
        ),
        cache_hit=Counter(
            "cache_hit",
            "Total number of cache hits for given location.",
            ["location"],
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=None,
        ),
        scrape_errors=Counter(
            "scrape_errors",
            "Total number of times an error occurred scraping a OWM.",
            ["collector"],
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=None,
        ),
        error=Gauge(
            "last_scrape_error",
            ERROR_HELP,
            namespace=NAMESPACE,
            subsystem=SUBSYSTEM,
            registry=None,
        ),
    )
