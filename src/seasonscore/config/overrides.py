"""
Per-request settings overrides (safe subset).

API callers can send `settings_overrides` to tune scoring knobs for a single
request (e.g. try a different blend ratio or comfort band). This module:
- validates the override payload against a whitelist,
- deep-merges the safe subset onto current settings,
- re-validates with Pydantic to ensure types/ranges remain correct.

File paths (`reference.*`) and app-level settings are never overridable.
"""

from __future__ import annotations

from typing import Any, Mapping

from seasonscore.config.settings import Settings

# A value of True means "allow any keys under this subtree".
# A nested dict means "only allow the listed keys, recursively".
ALLOWED_SETTINGS_OVERRIDES_TREE: dict[str, Any] = {
    "scoring": {
        "neutral_score": True,
        "factor_weights": True,
        "sea_temp_weight": True,
        "normalizers": True,
        "perceived": True,
        "penalties": True,
        "crowd": True,
        "preset_alpha": True,
        "composite": {
            "default_weights": True,
            "food_weights": True,
            "cost_base": True,
            "cost_step": True,
            "lift_price_best_usd": True,
            "lift_price_worst_usd": True,
            "lift_price_assumed_usd": True,
            "ski_cost_blend": True,
            "safety_multipliers": True,
        },
    },
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    # New dict so the caller's `base` is never mutated (settings are shared via lru_cache).
    merged: dict[str, Any] = dict(base)
    for key, override_value in override.items():
        if isinstance(override_value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _deep_merge(dict(merged[key]), override_value)
            continue
        merged[key] = override_value
    return merged


def _filter_overrides(
    overrides: Mapping[str, Any],
    *,
    allowed_tree: Mapping[str, Any],
    path: tuple[str, ...] = (),
) -> dict[str, Any]:
    filtered: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in allowed_tree:
            dotted_path = ".".join((*path, key))
            raise ValueError(
                f"settings_overrides contains a disallowed key: '{dotted_path}'"
            )

        allowed = allowed_tree[key]
        if allowed is True:
            filtered[key] = value
            continue

        if not isinstance(value, Mapping):
            dotted_path = ".".join((*path, key))
            raise ValueError(
                f"settings_overrides key '{dotted_path}' must be a mapping"
            )

        filtered[key] = _filter_overrides(
            value, allowed_tree=allowed, path=(*path, key)
        )
    return filtered


def apply_settings_overrides(
    settings: Settings, overrides: Mapping[str, Any] | None
) -> Settings:
    """Return a new validated Settings with the whitelisted overrides applied."""
    if not overrides:
        return settings

    safe_overrides = _filter_overrides(
        overrides, allowed_tree=ALLOWED_SETTINGS_OVERRIDES_TREE
    )
    merged_payload = _deep_merge(settings.model_dump(mode="python"), safe_overrides)
    return Settings.model_validate(merged_payload)
