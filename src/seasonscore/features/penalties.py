"""
Extreme-condition penalties.

Each penalty is an independent multiplier in (0, 1] computed from raw (or
perceived) inputs, never from an already-penalized score. The weather scorer
folds the whole set with one multiplication, so order does not matter and each
function can be tested on its own. Missing inputs never penalize.
"""

from __future__ import annotations

import math
from typing import Callable, Mapping

from seasonscore.config.settings import LinearRamp, ScoringSettings, get_settings
from seasonscore.domain.models import ClimateObservation
from seasonscore.features.normalizers import daytime_temperature, perceived_temperature
from seasonscore.scoring.composite import clamp01


def _ramp(value: float, ramp: LinearRamp) -> float:
    """1.0 up to `start`, linear down to `floor` at `end`, flat beyond (works for falling ramps too)."""
    span = ramp.end - ramp.start
    progress = clamp01((float(value) - ramp.start) / span)
    return 1.0 - (1.0 - ramp.floor) * progress


def _cfg(cfg: ScoringSettings | None) -> ScoringSettings:
    return cfg if cfg is not None else get_settings().scoring


def monsoon_penalty(has_monsoon: bool, *, cfg: ScoringSettings | None = None) -> float:
    return float(_cfg(cfg).penalties.monsoon_multiplier) if has_monsoon else 1.0


def heat_penalty(perceived_c: float | None, *, cfg: ScoringSettings | None = None) -> float:
    if perceived_c is None:
        return 1.0
    return _ramp(perceived_c, _cfg(cfg).penalties.heat)


def cold_penalty(perceived_c: float | None, *, cfg: ScoringSettings | None = None) -> float:
    if perceived_c is None:
        return 1.0
    return _ramp(perceived_c, _cfg(cfg).penalties.cold)


def heavy_rain_penalty(rainfall_mm: float | None, *, cfg: ScoringSettings | None = None) -> float:
    if rainfall_mm is None:
        return 1.0
    return _ramp(rainfall_mm, _cfg(cfg).penalties.heavy_rain)


def humid_heat_penalty(
    temp_c: float | None, humidity_pct: float | None, *, cfg: ScoringSettings | None = None
) -> float:
    """Sticky heat: only bites when both the temperature and humidity thresholds are exceeded."""
    if temp_c is None or humidity_pct is None:
        return 1.0
    h = _cfg(cfg).penalties.humid_heat
    if temp_c <= h.temp_threshold_c or humidity_pct <= h.humidity_threshold_pct:
        return 1.0
    heat = clamp01((temp_c - h.temp_threshold_c) / h.temp_span_c)
    damp = clamp01((humidity_pct - h.humidity_threshold_pct) / h.humidity_span_pct)
    return max(h.floor, 1.0 - h.max_reduction * heat * damp)


def wind_penalty(wind_kmh: float | None, *, cfg: ScoringSettings | None = None) -> float:
    if wind_kmh is None:
        return 1.0
    return _ramp(wind_kmh, _cfg(cfg).penalties.wind)


PenaltyFn = Callable[[ClimateObservation, ScoringSettings], float]


def _perceived(obs: ClimateObservation, cfg: ScoringSettings) -> float | None:
    return perceived_temperature(daytime_temperature(obs, cfg=cfg), obs.humidity_pct, cfg=cfg)


def _mean_temperature(obs: ClimateObservation, cfg: ScoringSettings) -> float | None:
    """Monthly mean air temperature; the daytime value stands in when the mean is missing."""
    if obs.temp_avg_c is not None:
        return float(obs.temp_avg_c)
    return daytime_temperature(obs, cfg=cfg)


PENALTIES: tuple[tuple[str, PenaltyFn], ...] = (
    ("monsoon", lambda obs, cfg: monsoon_penalty(obs.has_monsoon, cfg=cfg)),
    ("heat", lambda obs, cfg: heat_penalty(_perceived(obs, cfg), cfg=cfg)),
    ("cold", lambda obs, cfg: cold_penalty(_perceived(obs, cfg), cfg=cfg)),
    ("heavy_rain", lambda obs, cfg: heavy_rain_penalty(obs.rainfall_mm, cfg=cfg)),
    (
        "humid_heat",
        lambda obs, cfg: humid_heat_penalty(_mean_temperature(obs, cfg), obs.humidity_pct, cfg=cfg),
    ),
    ("wind", lambda obs, cfg: wind_penalty(obs.wind_speed_kmh, cfg=cfg)),
)


def compute_penalties(obs: ClimateObservation, *, cfg: ScoringSettings | None = None) -> dict[str, float]:
    """Evaluate every penalty independently against the observation."""
    cfg = _cfg(cfg)
    return {name: fn(obs, cfg) for name, fn in PENALTIES}


def combined_penalty(penalties: Mapping[str, float]) -> float:
    return math.prod(penalties.values())
