"""HTTP endpoint: Prometheus metrics, health check and landing page."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

from owm_exporter.metrics.collector import WeatherCollector
from owm_exporter.version import PROG_NAME, VERSION

logger = logging.getLogger(__name__)

SCRAPE_TIMEOUT_HEADER = "X-Prometheus-Scrape-Timeout-Seconds"

LANDING_PAGE = """<!DOCTYPE html>
<html>
<head><title>{title}</title></head>
<body>
<h1>{title}</h1>
<p>Prometheus exporter for www.openweathermap.org</p>
<p>Version: {version}</p>
<ul>
<li><a href="{metrics_path}">Metrics</a></li>
<li><a href="/health">Health</a></li>
</ul>
</body>
</html>
"""


class _BoundedScrape:
    """Exposes one collector run under the requester's timeout to generate_latest."""

    def __init__(self, collector: WeatherCollector, timeout: float | None):
        self.collector = collector
        self.timeout = timeout

    def collect(self):
        return self.collector.collect(self.timeout)


def parse_scrape_timeout(value: str | None) -> float | None:
    """Parse the scrape timeout header; missing or unusable values mean no limit."""
    if value is None:
        return None
    try:
        timeout = float(value)
    except ValueError:
        logger.warning("Ignoring invalid %s header: %r", SCRAPE_TIMEOUT_HEADER, value)
        return None
    if timeout <= 0:
        logger.warning("Ignoring non-positive %s header: %r", SCRAPE_TIMEOUT_HEADER, value)
        return None
    return timeout


def create_app(
    collector: WeatherCollector,
    registry: CollectorRegistry | None = None,
    metrics_path: str = "/metrics",
) -> FastAPI:
    """Build the exporter app.

    Each metrics request scrapes ``collector`` bounded by the scraper's
    timeout header, then appends whatever ``registry`` holds (build info,
    process metrics). Handlers are sync so FastAPI runs each scrape in its
    threadpool; overlapping scrapes therefore run concurrently.
    """
    app = FastAPI(title=PROG_NAME, version=VERSION)
    landing = LANDING_PAGE.format(
        title=PROG_NAME.replace("_", " "), version=VERSION, metrics_path=metrics_path
    )

    def metrics(request: Request) -> Response:
        timeout = parse_scrape_timeout(request.headers.get(SCRAPE_TIMEOUT_HEADER))
        body = generate_latest(_BoundedScrape(collector, timeout))
        if registry is not None:
            body += generate_latest(registry)
        return Response(content=body, media_type=CONTENT_TYPE_LATEST)

    app.add_api_route(metrics_path, metrics, methods=["GET"], include_in_schema=False)

    @app.get("/health", response_class=PlainTextResponse)
    def health():
        return "OK"

    if metrics_path != "/":

        @app.get("/", response_class=HTMLResponse)
        def landing_page():
            return landing

    return app
