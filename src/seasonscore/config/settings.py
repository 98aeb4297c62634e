# src/seasonscore/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/seasonscore/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `SEASONSCORE_LOG_LEVEL`, `SEASONSCORE_REFERENCE_DIR`)
- an external YAML file via `SEASONSCORE_CONFIG_PATH`

Design rule:
- Tuning knobs (comfort bands, weights, penalty ramps, blend ratios) live in YAML,
  not hard-coded in the scoring functions.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal
from seasonscore.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `seasonscore.config`."""
    text = resources.files("seasonscore.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class AppSettings(_Frozen):
    name: str = "SeasonScore"
    log_level: str = "INFO"


class ReferenceSettings(_Frozen):
    countries_path: str = "data/reference/countries.json"
    advisories_path: str = "data/reference/advisories.json"


class TemperatureNormalizerSettings(_Frozen):
    comfort_min_c: float = 22
    comfort_max_c: float = 27
    sigma_below_c: float = Field(8, gt=0)
    sigma_above_c: float = Field(4, gt=0)


class RainfallNormalizerSettings(_Frozen):
    midpoint_mm: float = Field(60, gt=0)
    exponent: float = Field(3, gt=0)


class SunshineNormalizerSettings(_Frozen):
    cap_hours: float = Field(10, gt=0)


class HumidityNormalizerSettings(_Frozen):
    comfort_max_pct: float = Field(55, ge=0, lt=100)
    exponent: float = Field(1.8, gt=0)


class WindNormalizerSettings(_Frozen):
    calm_max_kmh: float = 20
    zero_at_kmh: float = 50


class SeaTemperatureNormalizerSettings(_Frozen):
    center_c: float = 26
    sigma_c: float = Field(5, gt=0)


class NormalizerSettings(_Frozen):
    temperature: TemperatureNormalizerSettings = Field(default_factory=TemperatureNormalizerSettings)
    rainfall: RainfallNormalizerSettings = Field(default_factory=RainfallNormalizerSettings)
    sunshine: SunshineNormalizerSettings = Field(default_factory=SunshineNormalizerSettings)
    humidity: HumidityNormalizerSettings = Field(default_factory=HumidityNormalizerSettings)
    wind: WindNormalizerSettings = Field(default_factory=WindNormalizerSettings)
    sea_temperature: SeaTemperatureNormalizerSettings = Field(default_factory=SeaTemperatureNormalizerSettings)


class PerceivedTemperatureSettings(_Frozen):
    daytime_max_weight: float = Field(0.75, ge=0, le=1)
    temp_threshold_c: float = 25
    humidity_threshold_pct: float = 40
    amplification: float = 1.5


class LinearRamp(_Frozen):
    """A linear multiplier ramp: 1.0 at `start`, `floor` at `end` and beyond."""

    start: float
    end: float
    floor: float = Field(..., gt=0, le=1)

    @model_validator(mode="after")
    def _check_span(self) -> LinearRamp:
        if self.start == self.end:
            raise ValueError(f"ramp start and end must differ (both {self.start})")
        return self


class HumidHeatSettings(_Frozen):
    temp_threshold_c: float = 30
    temp_span_c: float = Field(10, gt=0)
    humidity_threshold_pct: float = 75
    humidity_span_pct: float = Field(25, gt=0)
    max_reduction: float = Field(0.40, ge=0, lt=1)
    floor: float = Field(0.60, gt=0, le=1)


class PenaltySettings(_Frozen):
    monsoon_multiplier: float = Field(0.30, gt=0, le=1)
    heat: LinearRamp = Field(default_factory=lambda: LinearRamp(start=29, end=43, floor=0.15))
    cold: LinearRamp = Field(default_factory=lambda: LinearRamp(start=5, end=-15, floor=0.20))
    heavy_rain: LinearRamp = Field(default_factory=lambda: LinearRamp(start=200, end=400, floor=0.30))
    humid_heat: HumidHeatSettings = Field(default_factory=HumidHeatSettings)
    wind: LinearRamp = Field(default_factory=lambda: LinearRamp(start=30, end=60, floor=0.30))


class CrowdSettings(_Frozen):
    quietness_step: float = Field(0.2, ge=0)
    quietness_floor: float = Field(0.2, gt=0, le=1)
    default_busyness: int = Field(3, ge=1, le=5)


class CompositeSettings(_Frozen):
    default_weights: dict[Literal["best_time", "cost"], float] = Field(
        default_factory=lambda: {"best_time": 0.75, "cost": 0.25}
    )
    food_weights: dict[Literal["best_time", "cost", "cuisine"], float] = Field(
        default_factory=lambda: {"best_time": 0.55, "cost": 0.20, "cuisine": 0.25}
    )
    cost_base: float = 120
    cost_step: float = 20
    lift_price_best_usd: float = 10
    lift_price_worst_usd: float = 180
    lift_price_assumed_usd: float = 95
    ski_cost_blend: float = Field(0.5, ge=0, le=1)
    safety_multipliers: dict[int, float] = Field(
        default_factory=lambda: {1: 1.0, 2: 0.95, 3: 0.75, 4: 0.35}
    )
    default_cost_tier: int = Field(3, ge=1, le=5)
    default_safety_tier: int = Field(1, ge=1, le=4)
    default_cuisine_score: float = Field(50, ge=0, le=100)
    default_biodiversity_score: float = Field(30, ge=0, le=100)


class ScoringSettings(_Frozen):
    neutral_score: float = 0.5
    factor_weights: dict[Literal["temp", "rain", "sun", "cloud", "humidity", "wind"], float] = Field(
        default_factory=lambda: {
            "temp": 0.30,
            "rain": 0.25,
            "sun": 0.15,
            "cloud": 0.05,
            "humidity": 0.15,
            "wind": 0.10,
        }
    )
    sea_temp_weight: float = Field(0.08, ge=0, lt=1)
    normalizers: NormalizerSettings = Field(default_factory=NormalizerSettings)
    perceived: PerceivedTemperatureSettings = Field(default_factory=PerceivedTemperatureSettings)
    penalties: PenaltySettings = Field(default_factory=PenaltySettings)
    crowd: CrowdSettings = Field(default_factory=CrowdSettings)
    preset_alpha: dict[Literal["weather-chaser", "balanced", "crowd-avoider"], float] = Field(
        default_factory=lambda: {"weather-chaser": 0.95, "balanced": 0.75, "crowd-avoider": 0.05}
    )
    composite: CompositeSettings = Field(default_factory=CompositeSettings)
    top_n_default: int = 20


class Settings(_Frozen):
    app: AppSettings = Field(default_factory=AppSettings)
    reference: ReferenceSettings = Field(default_factory=ReferenceSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small.
    """
    load_dotenv_if_present()
    data = dict(data)
    log_level = os.getenv("SEASONSCORE_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    reference_dir = os.getenv("SEASONSCORE_REFERENCE_DIR")
    if reference_dir:
        ref = data.setdefault("reference", {})
        ref["countries_path"] = str(Path(reference_dir) / "countries.json")
        ref["advisories_path"] = str(Path(reference_dir) / "advisories.json")

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("SEASONSCORE_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
