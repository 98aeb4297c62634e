import pytest
from starlette.testclient import TestClient

from seasonscore.api.app import app

_OBS = {
    "temp_max_c": 27,
    "temp_min_c": 20,
    "rainfall_mm": 30,
    "sunshine_hours_day": 9,
    "cloud_cover_pct": 20,
    "humidity_pct": 50,
    "wind_speed_kmh": 10,
    "busyness": 2,
}


def test_api_health_and_presets():
    with TestClient(app) as c:
        health = c.get("/api/health")
        presets = c.get("/api/presets")

    assert health.status_code == 200
    assert health.json()["status"] == "ok"
    assert health.json()["countries"] > 100
    data = presets.json()
    assert data["default"] == "balanced"
    assert [p["name"] for p in data["presets"]] == ["weather-chaser", "balanced", "crowd-avoider"]


def test_api_public_settings_hide_reference_paths():
    with TestClient(app) as c:
        data = c.get("/api/settings").json()
    assert "reference" not in data
    assert data["scoring"]["sea_temp_weight"] == 0.08


def test_api_weather_score_for_missing_data_is_neutral():
    with TestClient(app) as c:
        resp = c.post("/api/score/weather", json={"observation": {}})
    assert resp.status_code == 200
    data = resp.json()
    assert data["score"] == pytest.approx(50.0)
    assert data["label"] == "Fair"


def test_api_best_time_score_uses_preset():
    with TestClient(app) as c:
        chaser = c.post("/api/score/best-time", json={"observation": {**_OBS, "busyness": 5}, "preset": "weather-chaser"})
        avoider = c.post("/api/score/best-time", json={"observation": {**_OBS, "busyness": 5}, "preset": "crowd-avoider"})
    assert chaser.status_code == 200
    assert chaser.json()["score"] > avoider.json()["score"]
    assert chaser.json()["details"]["alpha"] == 0.95


def test_api_rejects_unknown_preset_and_bad_busyness():
    with TestClient(app) as c:
        bad_preset = c.post("/api/score/best-time", json={"observation": _OBS, "preset": "beach-bum"})
        bad_busyness = c.post("/api/score/weather", json={"observation": {**_OBS, "busyness": 9}})
    assert bad_preset.status_code == 422
    assert bad_busyness.status_code == 422


def test_api_composite_applies_seasonal_advisory():
    payload = {"best_time": 80, "country_code": "TH", "activities": ["beach"]}
    with TestClient(app) as c:
        plain = c.post("/api/score/composite", json=payload)
        jelly = c.post("/api/score/composite", json={**payload, "region_slug": "th-gulf-coast", "months": [7]})

    assert plain.status_code == 200
    # TH is cost tier 1 and safety tier 1: 0.75 * 80 + 0.25 * 100.
    assert plain.json()["final_score"] == 85
    assert plain.json()["advisories"] == []
    assert plain.json()["cost_label"] == "$"
    assert plain.json()["safety_label"] is None
    assert plain.json()["biodiversity_metrics"] == ["Bio Index", "Protected Areas", "Marine"]
    assert 0 < plain.json()["biodiversity_score"] <= 100
    assert jelly.json()["adjusted_best_time"] == 40
    assert jelly.json()["advisories"] == ["Jellyfish season"]
    assert jelly.json()["final_score"] == 55


def test_api_settings_overrides_disallowed_key_is_a_validation_error():
    payload = {"observation": _OBS, "settings_overrides": {"reference": {"countries_path": "/etc/passwd"}}}
    with TestClient(app) as c:
        resp = c.post("/api/score/weather", json=payload)
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "VALIDATION_ERROR"


def test_api_rank():
    payload = {
        "request": {"months": [1], "preset": "balanced", "max_results": 5},
        "regions": [
            {"id": "th-1", "slug": "th-gulf-coast", "name": "Gulf Coast", "country_code": "TH", "months": {"1": _OBS}},
            {"id": "zz-1", "slug": "zz-nowhere", "name": "Nowhere", "country_code": "ZZ", "months": {}},
        ],
    }
    with TestClient(app) as c:
        resp = c.post("/api/rank", json=payload)
    assert resp.status_code == 200
    data = resp.json()
    assert [r["slug"] for r in data["results"]] == ["th-gulf-coast"]
    assert data["meta"]["regions_without_data"] == 1
    assert data["results"][0]["breakdown"]["factors"][0]["key"] == "best_time"


def test_api_reference_reload_swaps_snapshot():
    with TestClient(app) as c:
        resp = c.post("/api/reference/reload")
        health = c.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["countries"] == health.json()["countries"]
    assert resp.json()["advisory_regions"] > 0


def test_api_degenerate_penalty_ramp_override_is_a_validation_error():
    payload = {
        "observation": _OBS,
        "settings_overrides": {"scoring": {"penalties": {"heat": {"start": 35, "end": 35, "floor": 0.2}}}},
    }
    with TestClient(app) as c:
        resp = c.post("/api/score/weather", json=payload)
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "VALIDATION_ERROR"
