from __future__ import annotations

"""Configuration utilities for rmssd.

This module defines a hierarchical configuration schema using Pydantic models.
The :class:`Settings` container groups the data source, the set of
(representation, rounding) combinations to evaluate and the report options.
Instances can be populated from environment variables or from YAML/JSON
files with matching nested keys.
"""

import json
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic_settings.sources import EnvSettingsSource

from .types import Representation, parse_rounding


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _split_strings(value: str) -> list[str]:
    return [item.strip() for item in value.split(",")]


class SectionModel(BaseModel):
    """Base model for configuration subsections that ignores unknown fields."""

    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------------
# Settings schema
# ---------------------------------------------------------------------------


class SourceSettings(SectionModel):
    """Location and reading options of the RR-interval file."""

    path: str = "test/RRIntervals_P7D1_Baseline.txt"
    encoding: str = "utf8"
    skip_blank: bool = False


class RunSettings(SectionModel):
    """Combinations of representation and rounding to evaluate."""

    representations: list[Representation] = Field(default_factory=lambda: list(Representation))
    roundings: list[Optional[int]] = Field(default_factory=lambda: [None, 3])

    @field_validator("representations", mode="before")
    @classmethod
    def _coerce_representations(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [item for item in _split_strings(value) if item]
        if isinstance(value, (list, tuple)):
            return [Representation.parse(item) for item in value]
        return value

    @field_validator("roundings", mode="before")
    @classmethod
    def _coerce_roundings(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = _split_strings(value)
        if value is None or isinstance(value, int):
            value = [value]
        if isinstance(value, (list, tuple)):
            return [parse_rounding(item) for item in value]
        return value


class ReportSettings(SectionModel):
    """Output options."""

    digits: int = Field(80, ge=0)
    compare: bool = False
    json_path: Optional[str] = None


class Settings(BaseSettings):
    """Container for all runtime configuration sections."""

    source: SourceSettings = Field(default_factory=SourceSettings)
    run: RunSettings = Field(default_factory=RunSettings)
    report: ReportSettings = Field(default_factory=ReportSettings)

    model_config = SettingsConfigDict(
        env_prefix="RMSSD_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        class LegacyEnvSettingsSource(EnvSettingsSource):
            def decode_complex_value(self, field_name, target_field, value):  # type: ignore[override]
                try:
                    return super().decode_complex_value(field_name, target_field, value)
                except json.JSONDecodeError:
                    return value

        env_settings.__class__ = LegacyEnvSettingsSource
        return init_settings, env_settings, dotenv_settings, file_secret_settings


# ---------------------------------------------------------------------------
# Loading utilities
# ---------------------------------------------------------------------------


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON or YAML file."""

    p = Path(path)
    text = p.read_text()
    if p.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError("Configuration file must define a mapping")
    return Settings.model_validate(data)
