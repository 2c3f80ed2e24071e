"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
import yaml

from owm_exporter.config.schema import ExporterConfig, TargetConfig
from owm_exporter.ingest.ttl_cache import TtlCache
from owm_exporter.metrics.exporter_metrics import ExporterMetrics, new_exporter_metrics
from owm_exporter.models.weather import WeatherReading

FIXTURE_DIR = Path(__file__).parent / "fixtures"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TtlCache:
    return TtlCache(clock=clock)


@pytest.fixture
def metrics() -> ExporterMetrics:
    return new_exporter_metrics()


@pytest.fixture
def prague() -> TargetConfig:
    return TargetConfig(name="prague", lat=50.08, lon=14.42, interval=60)


@pytest.fixture
def london() -> TargetConfig:
    return TargetConfig(name="london", lat=51.51, lon=-0.13, interval=60)


@pytest.fixture
def exporter_config(prague: TargetConfig, london: TargetConfig) -> ExporterConfig:
    return ExporterConfig(
        api_key="test-key",
        base_url="https://test-owm.example.com",
        timeout=5.0,
        targets=[prague, london],
    )


@pytest.fixture
def reading() -> WeatherReading:
    return WeatherReading(
        location="Prague",
        temperature=12.5,
        temperature_min=10.9,
        temperature_max=13.7,
        feels_like=11.8,
        pressure=1012.0,
        humidity=81.0,
        visibility=10000.0,
        wind_speed=4.6,
        wind_direction=250.0,
        clouds=42.0,
        rain_1h=0.38,
    )


@pytest.fixture
def prague_current() -> dict:
    with open(FIXTURE_DIR / "owm_current_prague.json") as f:
        return json.load(f)


@pytest.fixture
def clear_current() -> dict:
    with open(FIXTURE_DIR / "owm_current_clear.json") as f:
        return json.load(f)


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "apiKey": "yaml-key",
        "targets": [
            {"name": "prague", "lat": "50.08", "lon": "14.42", "interval": 300},
            {"name": "london", "lat": 51.51, "lon": -0.13, "interval": 60},
        ],
    }
    path = tmp_path / "config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURE_DIR
