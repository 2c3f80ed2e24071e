"""Tests for YAML config loading and validation."""

from pathlib import Path

import pytest
import yaml

from owm_exporter.config.loader import API_KEY_ENV, ConfigError, load_config
from owm_exporter.config.schema import OWM_BASE_URL, Units


def _write(tmp_path: Path, data) -> Path:
    path = tmp_path / "config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path


class TestLoadConfig:
    def test_load_from_yaml(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.api_key == "yaml-key"
        assert [t.name for t in config.targets] == ["prague", "london"]

    def test_string_coordinates_coerced(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.targets[0].lat == 50.08
        assert config.targets[0].lon == 14.42
        assert config.targets[0].interval == 300

    def test_defaults(self, config_yaml_path: Path):
        config = load_config(config_yaml_path)
        assert config.base_url == OWM_BASE_URL
        assert config.units == Units.METRIC
        assert config.language == "en"
        assert config.timeout == 10.0

    def test_target_order_preserved(self, tmp_path: Path):
        names = ["c", "a", "b"]
        path = _write(tmp_path, {
            "apiKey": "k",
            "targets": [{"name": n, "lat": 0, "lon": 0} for n in names],
        })
        config = load_config(path)
        assert [t.name for t in config.targets] == names

    def test_api_key_from_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "env-key")
        path = _write(tmp_path, {"targets": []})
        config = load_config(path)
        assert config.api_key == "env-key"

    def test_yaml_key_wins_over_env(self, config_yaml_path: Path, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV, "env-key")
        config = load_config(config_yaml_path)
        assert config.api_key == "yaml-key"

    def test_missing_api_key(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv(API_KEY_ENV, raising=False)
        path = _write(tmp_path, {"targets": []})
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="cannot read"):
            load_config(tmp_path / "nope.yaml")

    def test_malformed_yaml(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("apiKey: [unclosed\n")
        with pytest.raises(ConfigError, match="cannot parse"):
            load_config(path)

    def test_non_mapping(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_unknown_key_rejected(self, tmp_path: Path):
        path = _write(tmp_path, {"apiKey": "k", "targetz": []})
        with pytest.raises(ConfigError):
            load_config(path)

    def test_unknown_target_key_rejected(self, tmp_path: Path):
        path = _write(tmp_path, {
            "apiKey": "k",
            "targets": [{"name": "x", "lat": 1, "lon": 2, "altitude": 3}],
        })
        with pytest.raises(ConfigError):
            load_config(path)
