# src/seasonscore/features/normalizers.py
"""
Climate factor normalizers.

Each normalizer maps one raw monthly measurement to a 0..1 "goodness" value using
a fixed response shape:

- temperature: flat comfort band, asymmetric Gaussian decay outside it
- rainfall: logistic-style decay around a midpoint
- sunshine: linear ramp up to a cap
- cloud cover: linear inverse
- humidity: flat up to a comfort limit, power-law decay to 0 at 100%
- wind: flat up to a calm limit, quadratic decay to 0
- sea temperature: Gaussian around an ideal water temperature

Inputs outside realistic ranges are clamped here so that downstream weights
never see values outside 0..1. `normalize_factor` is the dispatch entrypoint and
the only place that turns a missing measurement into the neutral 0.5.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Callable

from seasonscore.config.settings import ScoringSettings, get_settings
from seasonscore.domain.models import ClimateObservation
from seasonscore.scoring.composite import clamp, clamp01


class FactorKind(str, Enum):
    TEMP = "temp"
    RAIN = "rain"
    SUN = "sun"
    CLOUD = "cloud"
    HUMIDITY = "humidity"
    WIND = "wind"
    SEA_TEMP = "sea_temp"


FACTOR_LABELS: dict[FactorKind, str] = {
    FactorKind.TEMP: "Temperature",
    FactorKind.RAIN: "Rainfall",
    FactorKind.SUN: "Sunshine",
    FactorKind.CLOUD: "Cloud cover",
    FactorKind.HUMIDITY: "Humidity",
    FactorKind.WIND: "Wind",
    FactorKind.SEA_TEMP: "Sea temperature",
}


def _cfg(cfg: ScoringSettings | None) -> ScoringSettings:
    return cfg if cfg is not None else get_settings().scoring


def temperature_score(temp_c: float, *, cfg: ScoringSettings | None = None) -> float:
    """Comfort of a (perceived) air temperature; cooler misses hurt less than warmer ones."""
    t = _cfg(cfg).normalizers.temperature
    temp_c = float(temp_c)
    if t.comfort_min_c <= temp_c <= t.comfort_max_c:
        return 1.0
    if temp_c < t.comfort_min_c:
        dist, sigma = t.comfort_min_c - temp_c, t.sigma_below_c
    else:
        dist, sigma = temp_c - t.comfort_max_c, t.sigma_above_c
    return clamp01(math.exp(-(dist * dist) / (2 * sigma * sigma)))


def rainfall_score(mm: float, *, cfg: ScoringSettings | None = None) -> float:
    r = _cfg(cfg).normalizers.rainfall
    mm = max(0.0, float(mm))
    return clamp01(1.0 / (1.0 + (mm / r.midpoint_mm) ** r.exponent))


def sunshine_score(hours: float, *, cfg: ScoringSettings | None = None) -> float:
    s = _cfg(cfg).normalizers.sunshine
    return clamp01(float(hours) / s.cap_hours)


def cloud_score(pct: float, *, cfg: ScoringSettings | None = None) -> float:
    return 1.0 - clamp(float(pct), 0.0, 100.0) / 100.0


def humidity_score(pct: float, *, cfg: ScoringSettings | None = None) -> float:
    h = _cfg(cfg).normalizers.humidity
    pct = clamp(float(pct), 0.0, 100.0)
    if pct <= h.comfort_max_pct:
        return 1.0
    excess = (pct - h.comfort_max_pct) / (100.0 - h.comfort_max_pct)
    return clamp01(1.0 - excess**h.exponent)


def wind_score(kmh: float, *, cfg: ScoringSettings | None = None) -> float:
    w = _cfg(cfg).normalizers.wind
    kmh = max(0.0, float(kmh))
    if kmh <= w.calm_max_kmh:
        return 1.0
    if kmh >= w.zero_at_kmh:
        return 0.0
    return clamp01(1.0 - ((kmh - w.calm_max_kmh) / (w.zero_at_kmh - w.calm_max_kmh)) ** 2)


def sea_temperature_score(sea_c: float, *, cfg: ScoringSettings | None = None) -> float:
    s = _cfg(cfg).normalizers.sea_temperature
    dev = float(sea_c) - s.center_c
    return clamp01(math.exp(-(dev * dev) / (2 * s.sigma_c * s.sigma_c)))


_NORMALIZERS: dict[FactorKind, Callable[..., float]] = {
    FactorKind.TEMP: temperature_score,
    FactorKind.RAIN: rainfall_score,
    FactorKind.SUN: sunshine_score,
    FactorKind.CLOUD: cloud_score,
    FactorKind.HUMIDITY: humidity_score,
    FactorKind.WIND: wind_score,
    FactorKind.SEA_TEMP: sea_temperature_score,
}


def normalize_factor(
    kind: FactorKind | str, raw_value: float | None, *, cfg: ScoringSettings | None = None
) -> float:
    """Map one raw measurement to 0..1; a missing value yields the neutral score."""
    try:
        kind = FactorKind(kind)
    except ValueError as e:
        raise ValueError(f"Unknown factor kind '{kind}'.") from e
    cfg = _cfg(cfg)
    if raw_value is None:
        return float(cfg.neutral_score)
    return _NORMALIZERS[kind](raw_value, cfg=cfg)


# --- Perceived temperature -------------------------------------------------


def daytime_temperature(obs: ClimateObservation, *, cfg: ScoringSettings | None = None) -> float | None:
    """Daytime-weighted air temperature (mostly the max), or the plain average as fallback."""
    p = _cfg(cfg).perceived
    if obs.temp_max_c is not None and obs.temp_min_c is not None:
        w = p.daytime_max_weight
        return w * float(obs.temp_max_c) + (1.0 - w) * float(obs.temp_min_c)
    if obs.temp_avg_c is not None:
        return float(obs.temp_avg_c)
    return None


def perceived_temperature(
    temp_c: float | None, humidity_pct: float | None, *, cfg: ScoringSettings | None = None
) -> float | None:
    """Heat-index-like temperature: humidity amplifies heat once both thresholds are exceeded."""
    if temp_c is None:
        return None
    p = _cfg(cfg).perceived
    temp_c = float(temp_c)
    if humidity_pct is None:
        return temp_c
    humidity_pct = clamp(float(humidity_pct), 0.0, 100.0)
    if temp_c <= p.temp_threshold_c or humidity_pct <= p.humidity_threshold_pct:
        return temp_c
    return temp_c + (temp_c - p.temp_threshold_c) * ((humidity_pct - p.humidity_threshold_pct) / 100.0) * p.amplification


def observation_perceived_temperature(
    obs: ClimateObservation, *, cfg: ScoringSettings | None = None
) -> float | None:
    cfg = _cfg(cfg)
    return perceived_temperature(daytime_temperature(obs, cfg=cfg), obs.humidity_pct, cfg=cfg)
