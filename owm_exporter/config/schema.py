"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

OWM_BASE_URL = "https://api.openweathermap.org"


class Units(StrEnum):
    METRIC = "metric"
    IMPERIAL = "imperial"
    STANDARD = "standard"


class TargetConfig(BaseModel):
    model_config = {"extra": "forbid", "frozen": True}

    name: str = Field(min_length=1)
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)
    interval: float = Field(default=0.0, ge=0.0)  # seconds between live fetches


class ExporterConfig(BaseModel):
    model_config = {"extra": "forbid", "frozen": True, "populate_by_name": True}

    api_key: str = Field(alias="apiKey", min_length=1)
    base_url: str = Field(default=OWM_BASE_URL, alias="baseUrl")
    units: Units = Units.METRIC
    language: str = "en"
    timeout: float = Field(default=10.0, gt=0.0)
    targets: list[TargetConfig] = []

    @model_validator(mode="after")
    def _unique_target_names(self) -> "ExporterConfig":
        seen: set[str] = set()
        for target in self.targets:
            if target.name in seen:
                raise ValueError(f"duplicate target name: {target.name}")
            seen.add(target.name)
        return self
