import math

import pytest

from seasonscore.domain.models import ClimateObservation
from seasonscore.features.normalizers import FactorKind
from seasonscore.features.weather import effective_weights, score_weather, weather_quality_score

_WARM_MONTH = dict(
    temp_max_c=30,
    temp_min_c=24,
    rainfall_mm=10,
    sunshine_hours_day=9,
    cloud_cover_pct=20,
    humidity_pct=50,
    wind_speed_kmh=10,
    busyness=2,
)


@pytest.mark.parametrize("coastal", [True, False])
def test_effective_weights_sum_to_one(coastal):
    weights = effective_weights(coastal)
    assert sum(weights.values()) == pytest.approx(1.0)
    assert (FactorKind.SEA_TEMP in weights) is coastal


def test_inland_weights_are_coastal_weights_without_sea():
    coastal = effective_weights(True)
    inland = effective_weights(False)

    assert coastal[FactorKind.SEA_TEMP] == pytest.approx(0.08)
    for kind, weight in inland.items():
        assert coastal[kind] / (1 - 0.08) == pytest.approx(weight)


def test_warm_month_end_to_end():
    obs = ClimateObservation(**_WARM_MONTH)
    result = score_weather(obs)

    # daytime 28.5C, humidity 50% lifts it to 29.025C perceived.
    perceived = 28.5 + 3.5 * 0.10 * 1.5
    temp = math.exp(-((perceived - 27) ** 2) / (2 * 4**2))
    rain = 1 / (1 + (10 / 60) ** 3)
    quality = 0.30 * temp + 0.25 * rain + 0.15 * 0.9 + 0.05 * 0.8 + 0.15 * 1.0 + 0.10 * 1.0
    heat = 1 - 0.85 * (perceived - 29) / 14
    expected = 100 * quality * heat

    assert result.details["perceived_temperature_c"] == pytest.approx(perceived)
    assert result.details["quality"] == pytest.approx(quality)
    assert result.details["penalties"]["heat"] == pytest.approx(heat)
    assert result.score == pytest.approx(expected)
    assert 90 < result.score < 95
    assert "sea_temp" not in result.details["weights"]
    assert any(r.startswith("Inland region") for r in result.reasons)


def test_all_missing_data_is_neutral():
    result = score_weather(ClimateObservation())

    assert result.score == pytest.approx(50.0)
    assert result.details["penalty_multiplier"] == 1.0
    assert "Temperature unavailable" in result.reasons
    assert any(r.startswith("Neutral score for missing") for r in result.reasons)


def test_monsoon_scales_the_score_by_its_multiplier():
    dry = weather_quality_score(ClimateObservation(**_WARM_MONTH))
    wet = weather_quality_score(ClimateObservation(**_WARM_MONTH, has_monsoon=True))
    assert wet == pytest.approx(dry * 0.30)


def test_coastal_month_weights_sea_temperature():
    ideal_sea = score_weather(ClimateObservation(**_WARM_MONTH, sea_temp_c=26))
    cold_sea = score_weather(ClimateObservation(**_WARM_MONTH, sea_temp_c=12))

    assert ideal_sea.details["weights"]["sea_temp"] == pytest.approx(0.08)
    assert ideal_sea.details["factors"]["sea_temp"] == 1.0
    assert cold_sea.score < ideal_sea.score


def test_extreme_month_stays_in_range():
    obs = ClimateObservation(
        temp_max_c=48,
        temp_min_c=35,
        rainfall_mm=800,
        sunshine_hours_day=0,
        cloud_cover_pct=100,
        humidity_pct=100,
        wind_speed_kmh=90,
        has_monsoon=True,
    )
    score = weather_quality_score(obs)
    assert 0.0 <= score < 1.0


def test_penalty_reasons_are_listed():
    obs = ClimateObservation(**{**_WARM_MONTH, "rainfall_mm": 300})
    result = score_weather(obs)
    assert any(r.startswith("Heavy rain penalty") for r in result.reasons)
