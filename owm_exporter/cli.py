"""CLI entry point for the OpenWeatherMap exporter."""

import argparse
import logging

import uvicorn
from prometheus_client import (
    CollectorRegistry,
    GCCollector,
    Info,
    PlatformCollector,
    ProcessCollector,
)

from owm_exporter.config.loader import ConfigError, load_config
from owm_exporter.config.schema import ExporterConfig
from owm_exporter.ingest.owm_client import OwmClient
from owm_exporter.ingest.ttl_cache import TtlCache
from owm_exporter.ingest.weather_fetcher import WeatherFetcher
from owm_exporter.metrics.collector import WeatherCollector
from owm_exporter.metrics.exporter_metrics import new_exporter_metrics
from owm_exporter.server import create_app
from owm_exporter.version import PROG_NAME, VERSION

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = "config.yaml"
DEFAULT_LISTEN_ADDRESS = ":9111"
DEFAULT_METRICS_PATH = "/metrics"
LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="Prometheus exporter for www.openweathermap.org",
    )
    parser.add_argument(
        "--config.file", dest="config_file", default=DEFAULT_CONFIG,
        help="Path to YAML file with configuration",
    )
    parser.add_argument(
        "--web.listen-address", dest="listen_address", default=DEFAULT_LISTEN_ADDRESS,
        help="Address on which to expose metrics and web interface",
    )
    parser.add_argument(
        "--web.telemetry-path", dest="metrics_path", default=DEFAULT_METRICS_PATH,
        help="Path under which to expose metrics",
    )
    parser.add_argument(
        "--disable-default-metrics", action="store_true",
        help="Exclude default metrics about the exporter itself (process_*, python_*)",
    )
    parser.add_argument(
        "--log.level", dest="log_level", choices=sorted(LOG_LEVELS), default="info",
        help="Only log messages with the given severity or above",
    )
    parser.add_argument(
        "--version", action="version", version=f"{PROG_NAME} {VERSION}"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=LOG_LEVELS[args.log_level],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting %s, version=%s", PROG_NAME, VERSION)
    logger.info("Loading configuration from file %s", args.config_file)

    try:
        config = load_config(args.config_file)
    except ConfigError as e:
        logger.error("Error reading configuration: %s", e)
        return 1
    logger.info("Got %d targets", len(config.targets))

    try:
        host, port = parse_listen_address(args.listen_address)
    except ValueError as e:
        logger.error("Invalid listen address: %s", e)
        return 1

    collector = build_collector(config)
    registry = build_registry(args.disable_default_metrics)
    app = create_app(collector, registry, args.metrics_path)

    # uvicorn reports a failed bind by logging and calling sys.exit
    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level=logging.getLevelName(LOG_LEVELS[args.log_level]).lower(),
        )
    except SystemExit as e:
        if e.code:
            logger.error("Error starting server on %s:%d", host, port)
            return 1
    return 0


def build_collector(config: ExporterConfig) -> WeatherCollector:
    """Wire the OWM client, cache and fetcher into a collector."""
    metrics = new_exporter_metrics()
    client = OwmClient(
        api_key=config.api_key,
        base_url=config.base_url,
        units=config.units.value,
        language=config.language,
        timeout=config.timeout,
    )
    fetcher = WeatherFetcher(client, TtlCache(), metrics)
    return WeatherCollector(
        config.targets, fetcher, metrics, scrape_timeout=config.timeout
    )


def build_registry(disable_default_metrics: bool = False) -> CollectorRegistry:
    """Registry for everything served next to the weather collector."""
    registry = CollectorRegistry()
    build_info = Info(
        "owm_exporter_build", "A metric with the exporter version.", registry=registry
    )
    build_info.info({"version": VERSION})

    if not disable_default_metrics:
        ProcessCollector(registry=registry)
        PlatformCollector(registry=registry)
        GCCollector(registry=registry)
    return registry


def parse_listen_address(address: str) -> tuple[str, int]:
    """Split ``host:port``; an empty host listens on all interfaces."""
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"expected [host]:port, got {address!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)
