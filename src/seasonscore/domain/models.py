"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- climate input (`ClimateObservation`) produced by an external data layer
- per-country reference values (`CountryContext`) and advisory rules (`SeasonalAdvisory`)
- explainable scoring output (`ScoreBreakdown`, `CompositeResult`, `RankingResult`)

Keeping these models in one place helps:
- validation (reject malformed payloads early),
- typed refactors,
- consistent JSON output across CLI/API.

Scoring inputs are frozen: the pipeline only ever reads them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator


def normalize_activities(activities: Iterable[str] | None) -> frozenset[str]:
    """Collapse an activity selection into a lower-cased set (order and duplicates ignored)."""
    if not activities:
        return frozenset()
    return frozenset(a.strip().lower() for a in activities if a and a.strip())


class AlgorithmPreset(str, Enum):
    """Named best-time blend ratios (how much weather outweighs crowds)."""

    WEATHER_CHASER = "weather-chaser"
    BALANCED = "balanced"
    CROWD_AVOIDER = "crowd-avoider"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()


class ClimateObservation(BaseModel):
    """One calendar month of climate measurements for one region.

    Every numeric field is optional; missing data is handled by the scorers.
    """

    model_config = ConfigDict(frozen=True)

    temp_avg_c: float | None = None
    temp_min_c: float | None = None
    temp_max_c: float | None = None
    rainfall_mm: float | None = None
    sunshine_hours_day: float | None = None
    cloud_cover_pct: float | None = None
    humidity_pct: float | None = None
    wind_speed_kmh: float | None = None
    has_monsoon: bool = False
    sea_temp_c: float | None = None
    busyness: int = Field(3, ge=1, le=5)

    @property
    def is_coastal(self) -> bool:
        return self.sea_temp_c is not None


class BiodiversityData(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: float = Field(..., ge=0, le=100)
    protected: float = Field(..., ge=0, le=100)
    marine: float | None = Field(default=None, ge=0, le=100)


class CountryContext(BaseModel):
    """Static per-country lookup values used by the composite score."""

    model_config = ConfigDict(frozen=True)

    code: str
    cost_tier: int = Field(3, ge=1, le=5)
    safety_tier: int = Field(1, ge=1, le=4)
    lift_price_usd: float | None = Field(default=None, ge=0)
    cuisine_score: float | None = Field(default=None, ge=0, le=100)
    biodiversity: BiodiversityData | None = None

    @field_validator("code")
    @classmethod
    def _upper_code(cls, code: str) -> str:
        return code.strip().upper()


class SeasonalAdvisory(BaseModel):
    """A recurring region/month condition that scales the best-time score."""

    model_config = ConfigDict(frozen=True)

    months: tuple[int, ...]
    multiplier: float = Field(..., gt=0)
    label: str
    emoji: str | None = None
    activities: tuple[str, ...] | None = None

    @field_validator("months")
    @classmethod
    def _validate_months(cls, months: tuple[int, ...]) -> tuple[int, ...]:
        bad = [m for m in months if not 1 <= m <= 12]
        if bad:
            raise ValueError(f"advisory months must be 1..12, got {bad}")
        return months

    @field_validator("activities")
    @classmethod
    def _normalize_activities(cls, activities: tuple[str, ...] | None) -> tuple[str, ...] | None:
        if activities is None:
            return None
        return tuple(sorted(normalize_activities(activities)))

    @property
    def is_boost(self) -> bool:
        return self.multiplier > 1.0


class FactorScore(BaseModel):
    """One displayed contributor to the composite score."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    score: int = Field(..., ge=0, le=100)
    weight: float = Field(..., ge=0, le=1)


class ScoreBreakdown(BaseModel):
    """Explainable composite breakdown for visualization."""

    model_config = ConfigDict(frozen=True)

    factors: list[FactorScore]
    safety_tier: int = Field(..., ge=1, le=4)
    safety_multiplier: float = Field(..., gt=0, le=1)
    final_score: int = Field(..., ge=0, le=100)


class CompositeResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    final_score: int = Field(..., ge=0, le=100)
    breakdown: ScoreBreakdown


class Region(BaseModel):
    """A travel region plus its monthly climate records."""

    id: str
    slug: str
    name: str
    country_code: str
    country_name: str | None = None
    landscape_type: list[str] = Field(default_factory=list)
    activities: list[str] = Field(default_factory=list)
    months: dict[int, ClimateObservation] = Field(default_factory=dict)

    @field_validator("months")
    @classmethod
    def _validate_months(cls, months: dict[int, ClimateObservation]) -> dict[int, ClimateObservation]:
        bad = [m for m in months if not 1 <= m <= 12]
        if bad:
            raise ValueError(f"region months must be 1..12, got {bad}")
        return months

    @field_validator("activities", "landscape_type")
    @classmethod
    def _normalize_tags(cls, tags: list[str]) -> list[str]:
        return sorted(normalize_activities(tags))


class RegionFilters(BaseModel):
    """Optional cut-offs applied after scoring (all None/empty = keep everything)."""

    busyness_max: int = Field(5, ge=1, le=5)
    temp_min: float | None = None
    temp_max: float | None = None
    sunshine_min: float | None = None
    rainfall_max: float | None = None
    activities: list[str] = Field(default_factory=list)
    landscapes: list[str] = Field(default_factory=list)
    hide_risky: bool = False
    shortlist: list[str] | None = None


class RankRequest(BaseModel):
    """Caller payload for a multi-month ranking run."""

    months: list[int] = Field(..., min_length=1)
    preset: AlgorithmPreset = AlgorithmPreset.BALANCED
    activities: list[str] = Field(default_factory=list)
    filters: RegionFilters = Field(default_factory=RegionFilters)
    max_results: int | None = Field(default=None, ge=1, le=500)
    settings_overrides: dict[str, Any] | None = None

    @field_validator("months")
    @classmethod
    def _validate_months(cls, months: list[int]) -> list[int]:
        bad = [m for m in months if not 1 <= m <= 12]
        if bad:
            raise ValueError(f"months must be 1..12, got {bad}")
        return sorted(set(months))


class RankedRegion(BaseModel):
    region_id: str
    slug: str
    name: str
    country_code: str
    summary: ClimateObservation
    weather_score: int = Field(..., ge=0, le=100)
    best_time_score: int = Field(..., ge=0, le=100)
    advisory_multiplier: float
    advisories: list[str] = Field(default_factory=list)
    overall_score: int = Field(..., ge=0, le=100)
    breakdown: ScoreBreakdown
    cost_label: str
    safety_label: str | None = None
    biodiversity_score: float = Field(..., ge=0, le=100)
    biodiversity_metrics: list[str] = Field(default_factory=list)


class RankingResult(BaseModel):
    query: RankRequest
    results: list[RankedRegion]
    meta: dict[str, Any] = Field(default_factory=dict)


class ClimateProvider(Protocol):
    """Read-only climate source keyed by region + month."""

    def get_observation(self, region_id: str, month: int) -> ClimateObservation | None: ...


class CountryProvider(Protocol):
    """Read-only country reference source keyed by ISO code."""

    def country(self, code: str) -> CountryContext: ...


class AdvisoryProvider(Protocol):
    """Read-only seasonal advisory source keyed by region slug."""

    def advisories(self, region_slug: str) -> tuple[SeasonalAdvisory, ...]: ...
