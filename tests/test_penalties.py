import math

import pytest

from seasonscore.domain.models import ClimateObservation
from seasonscore.features.penalties import (
    cold_penalty,
    combined_penalty,
    compute_penalties,
    heat_penalty,
    heavy_rain_penalty,
    humid_heat_penalty,
    monsoon_penalty,
    wind_penalty,
)


def test_monsoon_penalty():
    assert monsoon_penalty(False) == 1.0
    assert monsoon_penalty(True) == pytest.approx(0.30)


def test_heat_penalty_ramp():
    assert heat_penalty(29) == 1.0
    assert heat_penalty(36) == pytest.approx(1 - 0.85 * 0.5)
    assert heat_penalty(43) == pytest.approx(0.15)
    assert heat_penalty(50) == pytest.approx(0.15)


def test_cold_penalty_ramp_runs_downwards():
    assert cold_penalty(5) == 1.0
    assert cold_penalty(20) == 1.0
    assert cold_penalty(-5) == pytest.approx(0.6)
    assert cold_penalty(-20) == pytest.approx(0.2)


def test_heavy_rain_and_wind_ramps():
    assert heavy_rain_penalty(150) == 1.0
    assert heavy_rain_penalty(300) == pytest.approx(0.65)
    assert heavy_rain_penalty(900) == pytest.approx(0.30)
    assert wind_penalty(45) == pytest.approx(0.65)
    assert wind_penalty(60) == pytest.approx(0.30)


def test_humid_heat_needs_both_thresholds():
    assert humid_heat_penalty(30, 90) == 1.0
    assert humid_heat_penalty(35, 70) == 1.0
    assert humid_heat_penalty(35, 87.5) == pytest.approx(0.9)
    assert humid_heat_penalty(40, 100) == pytest.approx(0.6)
    assert humid_heat_penalty(48, 100) == pytest.approx(0.6)


@pytest.mark.parametrize("fn", [heat_penalty, cold_penalty, heavy_rain_penalty, wind_penalty])
def test_missing_inputs_never_penalize(fn):
    assert fn(None) == 1.0


def test_missing_humid_heat_inputs_never_penalize():
    assert humid_heat_penalty(None, 95) == 1.0
    assert humid_heat_penalty(38, None) == 1.0


def test_compute_penalties_evaluates_each_rule_independently():
    obs = ClimateObservation(temp_max_c=40, temp_min_c=30, humidity_pct=90, rainfall_mm=300, has_monsoon=True)
    penalties = compute_penalties(obs)

    assert set(penalties) == {"monsoon", "heat", "cold", "heavy_rain", "humid_heat", "wind"}
    assert penalties["monsoon"] == pytest.approx(0.30)
    assert penalties["heavy_rain"] == pytest.approx(0.65)
    assert penalties["cold"] == 1.0
    assert penalties["wind"] == 1.0
    # No monthly mean here, so sticky heat falls back to the daytime air temperature (37.5).
    assert penalties["humid_heat"] == pytest.approx(1 - 0.4 * 0.75 * 0.6)
    assert combined_penalty(penalties) == pytest.approx(math.prod(penalties.values()))


def test_penalties_all_neutral_for_mild_month():
    obs = ClimateObservation(temp_max_c=26, temp_min_c=18, humidity_pct=50, rainfall_mm=40, wind_speed_kmh=12)
    assert combined_penalty(compute_penalties(obs)) == 1.0


def test_humid_heat_uses_monthly_mean_temperature():
    # Hot afternoons (daytime 32.5) but a mean below the threshold: no sticky-heat penalty.
    obs = ClimateObservation(temp_avg_c=28, temp_max_c=36, temp_min_c=22, humidity_pct=95)
    assert compute_penalties(obs)["humid_heat"] == 1.0

    hot = ClimateObservation(temp_avg_c=35, temp_max_c=38, temp_min_c=30, humidity_pct=87.5)
    assert compute_penalties(hot)["humid_heat"] == pytest.approx(0.9)
