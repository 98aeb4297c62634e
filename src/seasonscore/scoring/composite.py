"""
Composite scoring.

Shared helpers used across the feature scorers:
- `clamp01` / `clamp`: keep values within range for stable UI/output
- `normalize_weights`: convert arbitrary non-negative weights into a 1.0-summing distribution
- `round_score`: half-up rounding to a display integer

and the final composite stage: the advisory-adjusted best-time score blended with
a cost value (optionally ski-lift cost) and a cuisine rating when "food" is
selected, then discounted by the country's safety multiplier.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable

from seasonscore.catalog.reference import get_reference_data
from seasonscore.config.settings import CompositeSettings, Settings, get_settings
from seasonscore.domain.models import (
    CompositeResult,
    CountryProvider,
    FactorScore,
    ScoreBreakdown,
    normalize_activities,
)


def clamp01(x: float) -> float:
    """Clamp a number into the [0.0, 1.0] range."""
    return max(0.0, min(1.0, float(x)))


def clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(x)))


def round_score(x: float) -> int:
    """Round half-up (2.5 -> 3), matching how scores are displayed."""
    return int(math.floor(float(x) + 0.5))


@dataclass(frozen=True)
class ComponentResult:
    """A feature score plus explainability payload."""

    score: float
    details: dict[str, Any]
    reasons: list[str]


def normalize_weights(weights: dict[str, float]) -> dict[str, float]:
    """Normalize a dict of weights so they sum to 1.0 (non-negative)."""
    cleaned = {k: max(0.0, float(v)) for k, v in weights.items()}
    total = sum(cleaned.values())
    if total <= 0:
        return {k: 1.0 / len(weights) for k in weights}
    return {k: v / total for k, v in cleaned.items()}


def cost_value(tier: int, *, cfg: CompositeSettings) -> float:
    """Cheaper is better: tier 1 -> 100 ... tier 5 -> 20."""
    return clamp(cfg.cost_base - int(tier) * cfg.cost_step, 0.0, 100.0)


def lift_price_value(price_usd: float | None, *, cfg: CompositeSettings) -> float:
    """Linear value of a day lift pass: best price -> 100, worst price -> 0."""
    price = cfg.lift_price_assumed_usd if price_usd is None else float(price_usd)
    span = cfg.lift_price_worst_usd - cfg.lift_price_best_usd
    return clamp(100.0 * (cfg.lift_price_worst_usd - price) / span, 0.0, 100.0)


def composite_score(
    best_time: float,
    country_code: str,
    activities: Iterable[str] | None = None,
    *,
    reference: CountryProvider | None = None,
    settings: Settings | None = None,
) -> CompositeResult:
    """Blend best-time, cost and optional cuisine/ski factors, then apply the safety discount."""
    cfg = (settings or get_settings()).scoring.composite
    reference = reference if reference is not None else get_reference_data()
    selected = normalize_activities(activities)
    country = reference.country(country_code)

    cost = cost_value(country.cost_tier, cfg=cfg)
    ski = None
    if "skiing" in selected:
        ski = lift_price_value(country.lift_price_usd, cfg=cfg)
        cost_blend = (1.0 - cfg.ski_cost_blend) * cost + cfg.ski_cost_blend * ski
    else:
        cost_blend = cost

    cuisine = None
    if "food" in selected:
        weights = normalize_weights(dict(cfg.food_weights))
        cuisine = float(country.cuisine_score) if country.cuisine_score is not None else cfg.default_cuisine_score
    else:
        weights = normalize_weights(dict(cfg.default_weights))

    raw = weights.get("best_time", 0.0) * float(best_time) + weights.get("cost", 0.0) * cost_blend
    if cuisine is not None:
        raw += weights.get("cuisine", 0.0) * cuisine

    safety_tier = country.safety_tier
    safety_multiplier = float(cfg.safety_multipliers[safety_tier])
    final = int(clamp(round_score(raw * safety_multiplier), 0, 100))

    factors = [
        FactorScore(
            key="best_time",
            label="Best time to visit",
            score=int(clamp(round_score(best_time), 0, 100)),
            weight=weights.get("best_time", 0.0),
        )
    ]
    if ski is None:
        factors.append(FactorScore(key="cost", label="Cost", score=round_score(cost), weight=weights.get("cost", 0.0)))
    else:
        factors.append(
            FactorScore(
                key="cost",
                label="Cost",
                score=round_score(cost),
                weight=weights.get("cost", 0.0) * (1.0 - cfg.ski_cost_blend),
            )
        )
        factors.append(
            FactorScore(
                key="ski_cost",
                label="Ski lift cost",
                score=round_score(ski),
                weight=weights.get("cost", 0.0) * cfg.ski_cost_blend,
            )
        )
    if cuisine is not None:
        factors.append(
            FactorScore(key="cuisine", label="Cuisine", score=round_score(cuisine), weight=weights.get("cuisine", 0.0))
        )

    breakdown = ScoreBreakdown(
        factors=factors,
        safety_tier=safety_tier,
        safety_multiplier=safety_multiplier,
        final_score=final,
    )
    return CompositeResult(final_score=final, breakdown=breakdown)
