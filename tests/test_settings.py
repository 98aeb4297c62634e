import pytest
from pydantic import ValidationError

from seasonscore.config.settings import get_logging_config, get_settings


@pytest.fixture
def fresh_settings():
    get_settings.cache_clear()
    yield get_settings
    get_settings.cache_clear()


def test_packaged_defaults():
    settings = get_settings()

    assert settings.app.name == "SeasonScore"
    assert sum(settings.scoring.factor_weights.values()) == pytest.approx(1.0)
    assert settings.scoring.sea_temp_weight == pytest.approx(0.08)
    assert settings.scoring.preset_alpha["balanced"] == pytest.approx(0.75)
    assert settings.scoring.composite.safety_multipliers == {1: 1.0, 2: 0.95, 3: 0.75, 4: 0.35}
    assert settings.reference.countries_path.endswith("countries.json")


def test_settings_are_frozen():
    settings = get_settings()
    with pytest.raises(ValidationError):
        settings.scoring.neutral_score = 0.1


def test_external_config_file_replaces_defaults(monkeypatch, tmp_path, fresh_settings):
    path = tmp_path / "seasonscore.yaml"
    path.write_text("scoring:\n  neutral_score: 0.4\n  crowd:\n    quietness_floor: 0.3\n", encoding="utf-8")
    monkeypatch.setenv("SEASONSCORE_CONFIG_PATH", str(path))

    settings = fresh_settings()

    assert settings.scoring.neutral_score == pytest.approx(0.4)
    assert settings.scoring.crowd.quietness_floor == pytest.approx(0.3)
    # Anything the file leaves out falls back to the model defaults.
    assert settings.scoring.normalizers.rainfall.midpoint_mm == 60


def test_env_overrides_log_level_and_reference_dir(monkeypatch, tmp_path, fresh_settings):
    monkeypatch.setenv("SEASONSCORE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("SEASONSCORE_REFERENCE_DIR", str(tmp_path))

    settings = fresh_settings()

    assert settings.app.log_level == "DEBUG"
    assert settings.reference.countries_path == str(tmp_path / "countries.json")
    assert settings.reference.advisories_path == str(tmp_path / "advisories.json")


def test_invalid_yaml_root_is_rejected(monkeypatch, tmp_path, fresh_settings):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("SEASONSCORE_CONFIG_PATH", str(path))

    with pytest.raises(ValueError, match="expected a mapping"):
        fresh_settings()


def test_logging_config_has_console_handler():
    config = get_logging_config()
    assert config["version"] == 1
    assert "console" in config["handlers"]
