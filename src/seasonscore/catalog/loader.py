"""
Reference data loader.

Reference tables are local JSON files (default: `data/reference/countries.json`
and `data/reference/advisories.json`). We validate them into typed Pydantic
models so the scorers can assume a consistent shape.

`countries.json` is a mapping of table name -> {ISO code: value}:
`cost_tier`, `safety_tier`, `cuisine_score`, `lift_price_usd`, `biodiversity`.
A country only needs to appear in the tables where it has data.

`advisories.json` maps region slug -> list of advisory rules.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from seasonscore.catalog.reference import ReferenceData
from seasonscore.config.settings import CompositeSettings
from seasonscore.core.env import resolve_project_path
from seasonscore.domain.models import BiodiversityData, CountryContext, SeasonalAdvisory

logger = logging.getLogger(__name__)


class CountryTables(BaseModel):
    cost_tier: dict[str, int] = Field(default_factory=dict)
    safety_tier: dict[str, int] = Field(default_factory=dict)
    cuisine_score: dict[str, float] = Field(default_factory=dict)
    lift_price_usd: dict[str, float] = Field(default_factory=dict)
    biodiversity: dict[str, BiodiversityData] = Field(default_factory=dict)

    @field_validator("*")
    @classmethod
    def _upper_codes(cls, table: dict[str, Any]) -> dict[str, Any]:
        return {code.strip().upper(): value for code, value in table.items()}


_ADVISORIES_ADAPTER = TypeAdapter(dict[str, list[SeasonalAdvisory]])


def build_countries(tables: CountryTables, *, defaults: CompositeSettings) -> dict[str, CountryContext]:
    """Merge the per-attribute tables into one `CountryContext` per ISO code."""
    codes = {
        *tables.cost_tier,
        *tables.safety_tier,
        *tables.cuisine_score,
        *tables.lift_price_usd,
        *tables.biodiversity,
    }
    out: dict[str, CountryContext] = {}
    for code in sorted(codes):
        out[code] = CountryContext(
            code=code,
            cost_tier=tables.cost_tier.get(code, defaults.default_cost_tier),
            safety_tier=tables.safety_tier.get(code, defaults.default_safety_tier),
            cuisine_score=tables.cuisine_score.get(code),
            lift_price_usd=tables.lift_price_usd.get(code),
            biodiversity=tables.biodiversity.get(code),
        )
    return out


def load_countries(path: str | Path, *, defaults: CompositeSettings | None = None) -> dict[str, CountryContext]:
    """Load and validate the country tables JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    tables = CountryTables.model_validate(payload)
    return build_countries(tables, defaults=defaults or CompositeSettings())


def load_advisories(path: str | Path) -> dict[str, list[SeasonalAdvisory]]:
    """Load and validate the seasonal advisory JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    return _ADVISORIES_ADAPTER.validate_python(payload)


def load_reference_data(
    *,
    countries_path: str | Path,
    advisories_path: str | Path | None,
    defaults: CompositeSettings | None = None,
) -> ReferenceData:
    """Load both reference files into one immutable snapshot."""
    defaults = defaults or CompositeSettings()
    countries = load_countries(countries_path, defaults=defaults)
    advisories = load_advisories(advisories_path) if advisories_path else {}
    logger.info(
        "Loaded reference data: %d countries from %s, %d advisory regions",
        len(countries),
        countries_path,
        len(advisories),
    )
    return ReferenceData(
        countries=countries,
        region_advisories={slug: tuple(rules) for slug, rules in advisories.items()},
        defaults=defaults,
    )
