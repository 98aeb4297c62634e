from __future__ import annotations

import pytest

from seasonscore.config.settings import get_settings
from seasonscore.config.overrides import apply_settings_overrides


def test_apply_settings_overrides_returns_same_object_when_none():
    settings = get_settings()

    out = apply_settings_overrides(settings, None)

    # No overrides is a no-op: the cached model comes back untouched.
    assert out is settings


def test_apply_settings_overrides_can_override_allowed_numeric_knobs():
    settings = get_settings()

    overrides = {"scoring": {"normalizers": {"temperature": {"comfort_max_c": 30}}}}

    out = apply_settings_overrides(settings, overrides)

    assert out.scoring.normalizers.temperature.comfort_max_c == 30
    # Sibling values survive the deep merge.
    assert out.scoring.normalizers.temperature.comfort_min_c == 22
    # The shared cached settings are never mutated.
    assert settings.scoring.normalizers.temperature.comfort_max_c == 27


def test_apply_settings_overrides_accepts_json_style_safety_keys():
    settings = get_settings()

    out = apply_settings_overrides(
        settings, {"scoring": {"composite": {"safety_multipliers": {"1": 1.0, "2": 0.9, "3": 0.7, "4": 0.3}}}}
    )

    assert out.scoring.composite.safety_multipliers[4] == pytest.approx(0.3)


def test_apply_settings_overrides_rejects_disallowed_keys_with_clear_path():
    settings = get_settings()

    # File paths are never overridable per request.
    overrides = {"reference": {"countries_path": "/etc/passwd"}}

    with pytest.raises(ValueError, match=r"reference"):
        apply_settings_overrides(settings, overrides)


def test_apply_settings_overrides_rejects_nested_disallowed_keys():
    settings = get_settings()

    overrides = {"scoring": {"composite": {"default_cost_tier": 1}}}

    with pytest.raises(ValueError, match=r"scoring\.composite\.default_cost_tier"):
        apply_settings_overrides(settings, overrides)


def test_apply_settings_overrides_rejects_wrong_value_shapes_for_restricted_subtrees():
    settings = get_settings()

    overrides = {"scoring": 1}

    with pytest.raises(ValueError, match=r"settings_overrides key 'scoring' must be a mapping"):
        apply_settings_overrides(settings, overrides)


def test_apply_settings_overrides_revalidates_values():
    settings = get_settings()

    with pytest.raises(ValueError):
        apply_settings_overrides(settings, {"scoring": {"factor_weights": {"snow": 0.2}}})


def test_apply_settings_overrides_rejects_zero_width_penalty_ramp():
    settings = get_settings()

    overrides = {"scoring": {"penalties": {"wind": {"start": 40, "end": 40}}}}

    with pytest.raises(ValueError, match="must differ"):
        apply_settings_overrides(settings, overrides)
