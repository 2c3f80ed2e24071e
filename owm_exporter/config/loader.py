"""YAML config loader."""

import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from owm_exporter.config.schema import ExporterConfig

API_KEY_ENV = "OWM_API_KEY"


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or is invalid."""


def load_config(path: str | Path) -> ExporterConfig:
    """Load and validate config from a YAML file.

    If ``apiKey`` is missing from the YAML, falls back to $OWM_API_KEY.
    """
    path = Path(path)
    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"cannot parse {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{path}: top-level YAML value must be a mapping")

    if not raw.get("apiKey") and not raw.get("api_key"):
        env_key = os.environ.get(API_KEY_ENV, "")
        if env_key:
            raw["apiKey"] = env_key

    try:
        return ExporterConfig(**raw)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration in {path}: {e}") from e
