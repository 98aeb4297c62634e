# src/seasonscore/features/weather.py
"""
Weather quality feature (region-month level).

This module converts one `ClimateObservation` into an explainable 0..100
"weather quality" score:

1. Normalize the seven climate factors to 0..1 (`features.normalizers`).
2. Combine them with fixed weights. Sea temperature is the one factor that is
   inapplicable rather than missing: inland regions drop it and the other
   weights are rescaled. Any other missing factor stays in the mix at the
   neutral 0.5.
3. Multiply by the penalty chain (`features.penalties`).
"""

from __future__ import annotations

import math
from typing import Mapping

from seasonscore.config.settings import ScoringSettings, get_settings
from seasonscore.domain.models import ClimateObservation
from seasonscore.features.normalizers import (
    FACTOR_LABELS,
    FactorKind,
    daytime_temperature,
    normalize_factor,
    perceived_temperature,
)
from seasonscore.features.penalties import combined_penalty, compute_penalties
from seasonscore.scoring.composite import ComponentResult, clamp, clamp01, normalize_weights


def effective_weights(coastal: bool, *, cfg: ScoringSettings | None = None) -> dict[FactorKind, float]:
    """Factor weights for one aggregation; always sums to 1.0.

    The base weights are the inland distribution. Coastal regions scale them by
    (1 - sea weight) and add sea temperature; dropping sea again and dividing by
    (1 - sea weight) gives back the base weights.
    """
    cfg = cfg if cfg is not None else get_settings().scoring
    w_sea = float(cfg.sea_temp_weight)
    base = {FactorKind(k): float(v) for k, v in cfg.factor_weights.items()}
    if not math.isclose(sum(base.values()), 1.0):
        base = normalize_weights(base)
    if coastal:
        return {**{k: v * (1.0 - w_sea) for k, v in base.items()}, FactorKind.SEA_TEMP: w_sea}
    return base


def normalized_factors(obs: ClimateObservation, *, cfg: ScoringSettings | None = None) -> dict[FactorKind, float]:
    """All applicable normalized factors for an observation (sea only when coastal)."""
    cfg = cfg if cfg is not None else get_settings().scoring
    perceived = perceived_temperature(daytime_temperature(obs, cfg=cfg), obs.humidity_pct, cfg=cfg)
    factors = {
        FactorKind.TEMP: normalize_factor(FactorKind.TEMP, perceived, cfg=cfg),
        FactorKind.RAIN: normalize_factor(FactorKind.RAIN, obs.rainfall_mm, cfg=cfg),
        FactorKind.SUN: normalize_factor(FactorKind.SUN, obs.sunshine_hours_day, cfg=cfg),
        FactorKind.CLOUD: normalize_factor(FactorKind.CLOUD, obs.cloud_cover_pct, cfg=cfg),
        FactorKind.HUMIDITY: normalize_factor(FactorKind.HUMIDITY, obs.humidity_pct, cfg=cfg),
        FactorKind.WIND: normalize_factor(FactorKind.WIND, obs.wind_speed_kmh, cfg=cfg),
    }
    if obs.is_coastal:
        factors[FactorKind.SEA_TEMP] = normalize_factor(FactorKind.SEA_TEMP, obs.sea_temp_c, cfg=cfg)
    return factors


def aggregate_quality(factors: Mapping[FactorKind, float], weights: Mapping[FactorKind, float]) -> float:
    """Weighted sum of normalized factors (pre-penalty quality, 0..1)."""
    return clamp01(sum(weights[k] * factors[k] for k in weights))


def score_weather(obs: ClimateObservation, *, cfg: ScoringSettings | None = None) -> ComponentResult:
    """Weather quality (0..100) plus the intermediate values behind it."""
    cfg = cfg if cfg is not None else get_settings().scoring

    factors = normalized_factors(obs, cfg=cfg)
    weights = effective_weights(obs.is_coastal, cfg=cfg)
    quality = aggregate_quality(factors, weights)

    penalties = compute_penalties(obs, cfg=cfg)
    multiplier = combined_penalty(penalties)
    score = clamp(100.0 * quality * multiplier, 0.0, 100.0)

    daytime = daytime_temperature(obs, cfg=cfg)
    perceived = perceived_temperature(daytime, obs.humidity_pct, cfg=cfg)

    reasons: list[str] = []
    if perceived is not None:
        reasons.append(f"Feels like {perceived:.1f}°C")
    else:
        reasons.append("Temperature unavailable")
    missing = [FACTOR_LABELS[k] for k in factors if k is not FactorKind.SEA_TEMP and _raw(obs, k, cfg) is None]
    if missing:
        reasons.append("Neutral score for missing: " + ", ".join(missing))
    if not obs.is_coastal:
        reasons.append("Inland region; sea temperature not weighted")
    for name, value in penalties.items():
        if value < 1.0:
            reasons.append(f"{name.replace('_', ' ').capitalize()} penalty x{value:.2f}")

    details = {
        "daytime_temperature_c": daytime,
        "perceived_temperature_c": perceived,
        "factors": {k.value: v for k, v in factors.items()},
        "weights": {k.value: v for k, v in weights.items()},
        "quality": quality,
        "penalties": penalties,
        "penalty_multiplier": multiplier,
    }
    return ComponentResult(score=score, details=details, reasons=reasons)


def _raw(obs: ClimateObservation, kind: FactorKind, cfg: ScoringSettings) -> float | None:
    if kind is FactorKind.TEMP:
        return daytime_temperature(obs, cfg=cfg)
    return {
        FactorKind.RAIN: obs.rainfall_mm,
        FactorKind.SUN: obs.sunshine_hours_day,
        FactorKind.CLOUD: obs.cloud_cover_pct,
        FactorKind.HUMIDITY: obs.humidity_pct,
        FactorKind.WIND: obs.wind_speed_kmh,
        FactorKind.SEA_TEMP: obs.sea_temp_c,
    }[kind]


def weather_quality_score(obs: ClimateObservation, *, cfg: ScoringSettings | None = None) -> float:
    """Weather quality score in [0, 100]."""
    return score_weather(obs, cfg=cfg).score
