"""
Country and region reference data.

`ReferenceData` is an immutable snapshot of the lookup tables the scorers read:
per-country cost/safety tiers, cuisine ratings, ski-lift prices and biodiversity
metrics, plus seasonal advisory rules keyed by region slug.

Scorers take the snapshot as an explicit argument (tests pass fixture tables).
When no snapshot is passed they read `get_reference_data()`, the current
snapshot of the process-wide `ReferenceStore`. A refresh replaces the whole
snapshot at once, so a scoring call never sees a half-updated table.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from seasonscore.config.settings import CompositeSettings, Settings, get_settings
from seasonscore.domain.models import BiodiversityData, CountryContext, SeasonalAdvisory

logger = logging.getLogger(__name__)


def cost_label(tier: int) -> str:
    """Render a cost tier as dollar signs (1 -> "$", 5 -> "$$$$$")."""
    return "$" * int(tier)


def safety_label(tier: int) -> str | None:
    """Short advisory label for a safety tier (None when there is nothing to flag)."""
    return {2: "Caution", 3: "Risky", 4: "Avoid"}.get(int(tier))


@dataclass(frozen=True)
class ReferenceData:
    countries: Mapping[str, CountryContext] = field(default_factory=dict)
    region_advisories: Mapping[str, tuple[SeasonalAdvisory, ...]] = field(default_factory=dict)
    defaults: CompositeSettings = field(default_factory=CompositeSettings)

    def __post_init__(self) -> None:
        # Read-only views; the snapshot is shared across concurrent scoring calls.
        object.__setattr__(
            self, "countries", MappingProxyType({k.upper(): v for k, v in self.countries.items()})
        )
        object.__setattr__(
            self,
            "region_advisories",
            MappingProxyType({k: tuple(v) for k, v in self.region_advisories.items()}),
        )

    def country(self, code: str) -> CountryContext:
        """Return the country context, or one built from the documented defaults."""
        code = (code or "").strip().upper()
        found = self.countries.get(code)
        if found is not None:
            return found
        return CountryContext(
            code=code or "??",
            cost_tier=self.defaults.default_cost_tier,
            safety_tier=self.defaults.default_safety_tier,
        )

    def safety_tier(self, code: str) -> int:
        return self.country(code).safety_tier

    def biodiversity_score(self, code: str) -> float:
        """Compound 0..100 biodiversity score; rebalances when marine data is absent."""
        bio: BiodiversityData | None = self.country(code).biodiversity
        if bio is None:
            return float(self.defaults.default_biodiversity_score)
        if bio.marine is not None:
            return bio.index * 0.45 + bio.protected * 0.25 + bio.marine * 0.30
        return bio.index * 0.60 + bio.protected * 0.40

    def biodiversity_metrics(self, code: str) -> list[str]:
        bio = self.country(code).biodiversity
        if bio is None:
            return []
        metrics = ["Bio Index", "Protected Areas"]
        if bio.marine is not None:
            metrics.append("Marine")
        return metrics

    def advisories(self, region_slug: str) -> tuple[SeasonalAdvisory, ...]:
        return self.region_advisories.get(region_slug, ())


class ReferenceStore:
    """Holds the current `ReferenceData` snapshot; `swap` replaces it atomically."""

    def __init__(self, snapshot: ReferenceData | None = None) -> None:
        self._snapshot = snapshot
        self._lock = threading.Lock()

    def current(self) -> ReferenceData:
        snapshot = self._snapshot
        if snapshot is None:
            with self._lock:
                if self._snapshot is None:
                    self._snapshot = _load_default_snapshot(get_settings())
                snapshot = self._snapshot
        return snapshot

    def swap(self, snapshot: ReferenceData) -> ReferenceData:
        """Install a new snapshot and return the previous one."""
        with self._lock:
            previous = self._snapshot
            self._snapshot = snapshot
        logger.info(
            "Reference data swapped: %d countries, %d advisory regions",
            len(snapshot.countries),
            len(snapshot.region_advisories),
        )
        return previous if previous is not None else ReferenceData()

    def reload(self, settings: Settings | None = None) -> ReferenceData:
        """Re-read the configured reference files and swap them in."""
        snapshot = _load_default_snapshot(settings or get_settings())
        self.swap(snapshot)
        return snapshot


def _load_default_snapshot(settings: Settings) -> ReferenceData:
    from seasonscore.catalog.loader import load_reference_data

    return load_reference_data(
        countries_path=settings.reference.countries_path,
        advisories_path=settings.reference.advisories_path,
        defaults=settings.scoring.composite,
    )


_STORE = ReferenceStore()


def get_reference_store() -> ReferenceStore:
    return _STORE


def get_reference_data() -> ReferenceData:
    """Current process-wide reference snapshot (loaded lazily from configured files)."""
    return _STORE.current()
