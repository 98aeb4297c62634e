"""
Seasonal advisory overlay.

Advisories are region-scoped rules for recurring conditions that the climate
numbers miss (jellyfish season, burning-season smoke, cherry-blossom crowds,
northern lights). A rule applies when any of its months is under consideration
and, if it names activities, at least one of them is selected. All applicable
multipliers are combined by multiplication.

The adjusted best-time score is left unclamped: a boost can push
it past 100, and clamping happens only when the composite is displayed.
"""

from __future__ import annotations

import math
from typing import Iterable

from seasonscore.catalog.reference import ReferenceData, get_reference_data
from seasonscore.domain.models import AdvisoryProvider, SeasonalAdvisory, normalize_activities


def _applies(rule: SeasonalAdvisory, months: frozenset[int], activities: frozenset[str]) -> bool:
    if not months.intersection(rule.months):
        return False
    if rule.activities is not None and not activities.intersection(rule.activities):
        return False
    return True


def active_advisories(
    region_id: str,
    months: Iterable[int],
    activities: Iterable[str] | None = None,
    *,
    advisories: AdvisoryProvider | ReferenceData | None = None,
) -> list[SeasonalAdvisory]:
    provider = advisories if advisories is not None else get_reference_data()
    month_set = frozenset(int(m) for m in months)
    selected = normalize_activities(activities)
    return [rule for rule in provider.advisories(region_id) if _applies(rule, month_set, selected)]


def seasonal_multiplier(
    region_id: str,
    months: Iterable[int],
    activities: Iterable[str] | None = None,
    *,
    advisories: AdvisoryProvider | ReferenceData | None = None,
) -> float:
    """Product of every applicable advisory multiplier (1.0 when none apply)."""
    rules = active_advisories(region_id, months, activities, advisories=advisories)
    return math.prod(rule.multiplier for rule in rules)


def apply_seasonal_advisory(
    region_id: str,
    months: Iterable[int],
    activities: Iterable[str] | None,
    score: float,
    *,
    advisories: AdvisoryProvider | ReferenceData | None = None,
) -> float:
    return float(score) * seasonal_multiplier(region_id, months, activities, advisories=advisories)
