import pytest

from seasonscore.catalog.reference import ReferenceData
from seasonscore.config.settings import CompositeSettings
from seasonscore.domain.models import BiodiversityData, CountryContext, SeasonalAdvisory

_BEACH = ("diving", "beach", "snorkelling")


@pytest.fixture
def reference() -> ReferenceData:
    """Small in-memory reference tables so scoring tests never read the packaged files."""
    countries = {
        "AA": CountryContext(
            code="AA",
            cost_tier=1,
            safety_tier=1,
            cuisine_score=90,
            lift_price_usd=10,
            biodiversity=BiodiversityData(index=80, protected=20, marine=60),
        ),
        "BB": CountryContext(code="BB", cost_tier=5, safety_tier=4),
        "CC": CountryContext(
            code="CC",
            cost_tier=3,
            safety_tier=2,
            lift_price_usd=180,
            biodiversity=BiodiversityData(index=50, protected=10),
        ),
    }
    advisories = {
        "aa-gulf": (
            SeasonalAdvisory(months=(6, 7, 8), multiplier=0.5, label="Jellyfish season", emoji="🪼", activities=_BEACH),
        ),
        "aa-north": (SeasonalAdvisory(months=(12, 1, 2), multiplier=1.2, label="Northern lights season"),),
        "aa-old-town": (
            SeasonalAdvisory(months=(4,), multiplier=0.85, label="Blossom crowds"),
            SeasonalAdvisory(months=(4, 5), multiplier=0.9, label="Festival closures"),
        ),
    }
    return ReferenceData(countries=countries, region_advisories=advisories, defaults=CompositeSettings())
