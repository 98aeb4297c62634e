"""
Crowd quietness and the best-time blend.

Busyness (1 = very quiet .. 5 = peak season) is turned into a quietness value Q
with a floor, so peak season never zeroes a region out. The best-time score is a
weighted geometric mean of weather quality W and Q:

    best_time = 100 * W**alpha * Q**(1 - alpha)

A geometric mean lets a very poor value on either side drag the result down
instead of being averaged away. `alpha` comes from the selected preset.
"""

from __future__ import annotations

from seasonscore.config.settings import ScoringSettings, get_settings
from seasonscore.domain.models import AlgorithmPreset, ClimateObservation
from seasonscore.features.weather import score_weather
from seasonscore.scoring.composite import ComponentResult, clamp, clamp01

BUSYNESS_LABELS: dict[int, str] = {
    1: "Very Quiet",
    2: "Quiet",
    3: "Moderate",
    4: "Busy",
    5: "Peak Season",
}


def busyness_label(busyness: int) -> str:
    return BUSYNESS_LABELS.get(int(busyness), "Unknown")


def quietness(busyness: int, *, cfg: ScoringSettings | None = None) -> float:
    c = (cfg if cfg is not None else get_settings().scoring).crowd
    return max(1.0 - (int(busyness) - 1) * c.quietness_step, c.quietness_floor)


def preset_alpha(preset: AlgorithmPreset | str, *, cfg: ScoringSettings | None = None) -> float:
    cfg = cfg if cfg is not None else get_settings().scoring
    try:
        preset = AlgorithmPreset(preset)
    except ValueError as e:
        raise ValueError(f"Unknown preset '{preset}'.") from e
    return float(cfg.preset_alpha[preset.value])


def blend_best_time(
    weather_score: float,
    busyness: int,
    preset: AlgorithmPreset | str = AlgorithmPreset.BALANCED,
    *,
    cfg: ScoringSettings | None = None,
) -> float:
    cfg = cfg if cfg is not None else get_settings().scoring
    alpha = preset_alpha(preset, cfg=cfg)
    w = clamp01(weather_score / 100.0)
    q = quietness(busyness, cfg=cfg)
    return clamp(100.0 * w**alpha * q ** (1.0 - alpha), 0.0, 100.0)


def score_best_time(
    obs: ClimateObservation,
    preset: AlgorithmPreset | str = AlgorithmPreset.BALANCED,
    *,
    cfg: ScoringSettings | None = None,
) -> ComponentResult:
    cfg = cfg if cfg is not None else get_settings().scoring
    weather = score_weather(obs, cfg=cfg)
    alpha = preset_alpha(preset, cfg=cfg)
    q = quietness(obs.busyness, cfg=cfg)
    score = blend_best_time(weather.score, obs.busyness, preset, cfg=cfg)

    reasons = [f"Weather {weather.score:.0f}/100", f"Crowds: {busyness_label(obs.busyness)}"]
    details = {
        "weather_score": weather.score,
        "weather": weather.details,
        "busyness": obs.busyness,
        "quietness": q,
        "preset": AlgorithmPreset(preset).value,
        "alpha": alpha,
    }
    return ComponentResult(score=score, details=details, reasons=reasons + weather.reasons)


def best_time_score(
    obs: ClimateObservation,
    preset: AlgorithmPreset | str = AlgorithmPreset.BALANCED,
    *,
    cfg: ScoringSettings | None = None,
) -> float:
    """Best-time score in [0, 100] for one observation."""
    return score_best_time(obs, preset, cfg=cfg).score
