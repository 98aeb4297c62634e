from __future__ import annotations

# This module is the "orchestrator" for region ranking.
# It wires together:
# - domain input (RankRequest + regions with monthly climate records)
# - feature scoring (weather quality, best-time blend, seasonal advisories)
# - the composite score and its breakdown (RankingResult)
#
# Each layer stays focused: features do math, this file picks months, filters and sorts.

import logging
import time
from typing import Iterable

from seasonscore.catalog.reference import ReferenceData, cost_label, get_reference_data, safety_label
from seasonscore.config.overrides import apply_settings_overrides
from seasonscore.config.settings import Settings, get_settings
from seasonscore.domain.models import (
    ClimateObservation,
    ClimateProvider,
    RankedRegion,
    RankingResult,
    RankRequest,
    Region,
    RegionFilters,
)
from seasonscore.features.advisories import active_advisories, apply_seasonal_advisory, seasonal_multiplier
from seasonscore.features.crowd import blend_best_time
from seasonscore.features.weather import score_weather
from seasonscore.scoring.composite import clamp, composite_score, round_score

logger = logging.getLogger(__name__)

_AVERAGED_FIELDS = (
    "temp_avg_c",
    "temp_min_c",
    "temp_max_c",
    "rainfall_mm",
    "sunshine_hours_day",
    "cloud_cover_pct",
    "humidity_pct",
    "wind_speed_kmh",
    "sea_temp_c",
)


def _avg(values: Iterable[float | None]) -> float | None:
    valid = [float(v) for v in values if v is not None]
    return sum(valid) / len(valid) if valid else None


def _month_records(
    region: Region, months: Iterable[int], climate: ClimateProvider | None
) -> list[ClimateObservation]:
    records: list[ClimateObservation] = []
    for m in months:
        obs = climate.get_observation(region.id, m) if climate is not None else region.months.get(m)
        if obs is not None:
            records.append(obs)
    return records


def summarize_months(
    region: Region,
    months: Iterable[int],
    *,
    climate: ClimateProvider | None = None,
    settings: Settings | None = None,
) -> ClimateObservation | None:
    """Average the selected months into one observation (None if no month has data).

    Missing values are skipped rather than counted as zero; monsoon is set when
    any selected month has it.
    """
    records = _month_records(region, months, climate)
    if not records:
        return None
    settings = settings or get_settings()
    summary = {f: _avg(getattr(r, f) for r in records) for f in _AVERAGED_FIELDS}
    busyness = _avg(r.busyness for r in records)
    return ClimateObservation(
        **summary,
        has_monsoon=any(r.has_monsoon for r in records),
        busyness=(
            round_score(busyness) if busyness is not None else settings.scoring.crowd.default_busyness
        ),
    )


def _passes_filters(
    region: Region, summary: ClimateObservation, *, filters: RegionFilters, reference: ReferenceData
) -> bool:
    if summary.busyness > filters.busyness_max:
        return False
    temp = summary.temp_avg_c
    if filters.temp_min is not None and temp is not None and temp < filters.temp_min:
        return False
    if filters.temp_max is not None and temp is not None and temp > filters.temp_max:
        return False
    sun = summary.sunshine_hours_day
    if filters.sunshine_min is not None and sun is not None and sun < filters.sunshine_min:
        return False
    rain = summary.rainfall_mm
    if filters.rainfall_max is not None and rain is not None and rain > filters.rainfall_max:
        return False
    if filters.activities and not {a.lower() for a in filters.activities}.intersection(region.activities):
        return False
    if filters.landscapes and not {s.lower() for s in filters.landscapes}.intersection(region.landscape_type):
        return False
    if filters.hide_risky and reference.safety_tier(region.country_code) > 2:
        return False
    if filters.shortlist is not None and region.slug not in filters.shortlist:
        return False
    return True


def score_region(
    region: Region,
    request: RankRequest,
    *,
    reference: ReferenceData,
    settings: Settings,
    climate: ClimateProvider | None = None,
) -> RankedRegion | None:
    """Score one region over the requested months (None when it has no data for them)."""
    summary = summarize_months(region, request.months, climate=climate, settings=settings)
    if summary is None:
        return None

    cfg = settings.scoring
    weather = score_weather(summary, cfg=cfg)
    best_time = blend_best_time(weather.score, summary.busyness, request.preset, cfg=cfg)

    rules = active_advisories(region.slug, request.months, request.activities, advisories=reference)
    multiplier = seasonal_multiplier(region.slug, request.months, request.activities, advisories=reference)
    adjusted = apply_seasonal_advisory(
        region.slug, request.months, request.activities, best_time, advisories=reference
    )

    composite = composite_score(
        adjusted, region.country_code, request.activities, reference=reference, settings=settings
    )
    country = reference.country(region.country_code)
    return RankedRegion(
        region_id=region.id,
        slug=region.slug,
        name=region.name,
        country_code=region.country_code,
        summary=summary,
        weather_score=round_score(weather.score),
        best_time_score=int(clamp(round_score(adjusted), 0, 100)),
        advisory_multiplier=multiplier,
        advisories=[f"{r.emoji} {r.label}" if r.emoji else r.label for r in rules],
        overall_score=composite.final_score,
        breakdown=composite.breakdown,
        cost_label=cost_label(country.cost_tier),
        safety_label=safety_label(country.safety_tier),
        biodiversity_score=reference.biodiversity_score(region.country_code),
        biodiversity_metrics=reference.biodiversity_metrics(region.country_code),
    )


def rank_regions(
    request: RankRequest,
    regions: list[Region],
    *,
    settings: Settings | None = None,
    reference: ReferenceData | None = None,
    climate: ClimateProvider | None = None,
) -> RankingResult:
    t0 = time.monotonic()

    # Use injected settings/reference (tests) or the process defaults; per-request
    # overrides only apply to this run.
    settings = settings or get_settings()
    settings = apply_settings_overrides(settings, request.settings_overrides)
    reference = reference if reference is not None else get_reference_data()

    top_n = int(request.max_results or settings.scoring.top_n_default)

    scored: list[RankedRegion] = []
    skipped_no_data = 0
    filtered_out = 0
    for region in regions:
        item = score_region(region, request, reference=reference, settings=settings, climate=climate)
        if item is None:
            skipped_no_data += 1
            continue
        if not _passes_filters(region, item.summary, filters=request.filters, reference=reference):
            filtered_out += 1
            continue
        scored.append(item)

    scored.sort(key=lambda r: (-r.overall_score, -r.best_time_score, r.slug))
    results = scored[:top_n]

    elapsed_ms = int((time.monotonic() - t0) * 1000)
    logger.info(
        "Ranked %d/%d regions for months=%s preset=%s (%d without data, %d filtered) in %dms",
        len(results),
        len(regions),
        request.months,
        request.preset.value,
        skipped_no_data,
        filtered_out,
        elapsed_ms,
    )
    meta = {
        "regions_total": len(regions),
        "regions_scored": len(scored) + filtered_out,
        "regions_without_data": skipped_no_data,
        "regions_filtered": filtered_out,
        "elapsed_ms": elapsed_ms,
    }
    return RankingResult(query=request, results=results, meta=meta)
