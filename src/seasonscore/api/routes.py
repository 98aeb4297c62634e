"""
API routes.

Endpoints:
- GET  `/api/health`: liveness + reference data size.
- POST `/api/reference/reload`: re-read reference files and swap them in.
- GET  `/api/presets`: list best-time presets and their blend ratios.
- GET  `/api/settings`: public scoring settings for UI defaults.
- POST `/api/score/weather`: weather quality for one observation.
- POST `/api/score/best-time`: best-time score for one observation.
- POST `/api/score/composite`: composite overall score (optionally advisory-adjusted).
- POST `/api/rank`: multi-month region ranking.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from seasonscore.catalog.reference import cost_label, get_reference_data, get_reference_store, safety_label
from seasonscore.config.overrides import apply_settings_overrides
from seasonscore.config.settings import Settings, get_settings
from seasonscore.domain.models import (
    AlgorithmPreset,
    ClimateObservation,
    CompositeResult,
    RankingResult,
    RankRequest,
    Region,
)
from seasonscore.features.advisories import active_advisories, apply_seasonal_advisory
from seasonscore.features.crowd import score_best_time
from seasonscore.features.weather import score_weather
from seasonscore.recommender.recommend import rank_regions
from seasonscore.scoring.composite import composite_score
from seasonscore.scoring.explain import score_color, score_label

logger = logging.getLogger(__name__)

router = APIRouter()

T = TypeVar("T")


class ObservationRequest(BaseModel):
    observation: ClimateObservation
    preset: AlgorithmPreset = AlgorithmPreset.BALANCED
    settings_overrides: dict[str, Any] | None = None


class CompositeRequest(BaseModel):
    best_time: float = Field(..., ge=0)
    country_code: str
    activities: list[str] = Field(default_factory=list)
    region_slug: str | None = None
    months: list[int] = Field(default_factory=list)
    settings_overrides: dict[str, Any] | None = None


class RankPayload(BaseModel):
    request: RankRequest
    regions: list[Region]


def _settings_for(overrides: dict[str, Any] | None) -> Settings:
    return apply_settings_overrides(get_settings(), overrides)


def _run(fn: Callable[[], T]) -> T:
    """Map domain errors to HTTP errors the way every route reports them."""
    try:
        return fn()
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": str(e)},
        ) from e
    except Exception as e:
        logger.exception("Scoring request failed")
        raise HTTPException(
            status_code=500,
            detail={"code": "INTERNAL_ERROR", "message": str(e)},
        ) from e


@router.get("/api/health")
def get_health() -> dict:
    reference = get_reference_data()
    return {
        "status": "ok",
        "countries": len(reference.countries),
        "advisory_regions": len(reference.region_advisories),
    }


@router.post("/api/reference/reload")
def post_reference_reload() -> dict:
    """Re-read the reference files and swap the new snapshot in."""
    snapshot = _run(lambda: get_reference_store().reload())
    return {
        "status": "ok",
        "countries": len(snapshot.countries),
        "advisory_regions": len(snapshot.region_advisories),
    }


@router.get("/api/presets")
def get_presets() -> dict:
    """Return the best-time presets (name + label + weather share)."""
    alphas = get_settings().scoring.preset_alpha
    presets = [
        {"name": p.value, "label": p.label, "alpha": float(alphas[p.value])} for p in AlgorithmPreset
    ]
    return {"presets": presets, "default": AlgorithmPreset.BALANCED.value}


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return scoring knobs for UI defaults (reference file paths removed)."""
    data = get_settings().model_dump(mode="json")
    return {"app": {"name": data["app"]["name"]}, "scoring": data["scoring"]}


@router.post("/api/score/weather")
def post_weather_score(payload: ObservationRequest) -> dict:
    def _score() -> dict:
        settings = _settings_for(payload.settings_overrides)
        result = score_weather(payload.observation, cfg=settings.scoring)
        return {
            "score": result.score,
            "label": score_label(result.score),
            "color": score_color(result.score),
            "details": result.details,
            "reasons": result.reasons,
        }

    return _run(_score)


@router.post("/api/score/best-time")
def post_best_time_score(payload: ObservationRequest) -> dict:
    def _score() -> dict:
        settings = _settings_for(payload.settings_overrides)
        result = score_best_time(payload.observation, payload.preset, cfg=settings.scoring)
        return {
            "score": result.score,
            "label": score_label(result.score),
            "color": score_color(result.score),
            "details": result.details,
            "reasons": result.reasons,
        }

    return _run(_score)


@router.post("/api/score/composite")
def post_composite_score(payload: CompositeRequest) -> dict:
    def _score() -> dict:
        settings = _settings_for(payload.settings_overrides)
        reference = get_reference_data()
        best_time = payload.best_time
        advisories: list[str] = []
        if payload.region_slug and payload.months:
            best_time = apply_seasonal_advisory(
                payload.region_slug, payload.months, payload.activities, best_time, advisories=reference
            )
            advisories = [
                rule.label
                for rule in active_advisories(
                    payload.region_slug, payload.months, payload.activities, advisories=reference
                )
            ]
        result: CompositeResult = composite_score(
            best_time, payload.country_code, payload.activities, reference=reference, settings=settings
        )
        country = reference.country(payload.country_code)
        return {
            **result.model_dump(mode="json"),
            "adjusted_best_time": best_time,
            "advisories": advisories,
            "cost_label": cost_label(country.cost_tier),
            "safety_label": safety_label(country.safety_tier),
            "biodiversity_score": reference.biodiversity_score(payload.country_code),
            "biodiversity_metrics": reference.biodiversity_metrics(payload.country_code),
            "label": score_label(result.final_score),
            "color": score_color(result.final_score),
        }

    return _run(_score)


@router.post("/api/rank", response_model=RankingResult)
def post_rank(payload: RankPayload) -> RankingResult:
    """Score, filter and rank regions over the requested months."""
    return _run(lambda: rank_regions(payload.request, payload.regions, settings=get_settings()))
