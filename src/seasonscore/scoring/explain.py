"""
Small explainability formatting helpers.

Used by the CLI and API to label scores and print compact summaries.
"""

from __future__ import annotations

from seasonscore.domain.models import ScoreBreakdown

# (threshold, label, color) from best to worst; green -> amber -> red.
_BANDS: tuple[tuple[float, str, str], ...] = (
    (80, "Excellent", "#3B7A4A"),
    (60, "Good", "#6BAF78"),
    (40, "Fair", "#F5C842"),
    (20, "Poor", "#D93B2B"),
)


def score_label(score: float) -> str:
    """Human-readable label for a 0..100 score."""
    for threshold, label, _ in _BANDS:
        if score >= threshold:
            return label
    return "Bad"


def score_color(score: float) -> str:
    """Map a 0..100 score to a map/legend color."""
    for threshold, _, color in _BANDS:
        if score >= threshold:
            return color
    return "#8B1A10"


def one_line_summary(breakdown: ScoreBreakdown) -> str:
    """Render a compact single-line summary for a score breakdown."""
    parts = [f"overall={breakdown.final_score}"]
    for factor in breakdown.factors:
        parts.append(f"{factor.key}={factor.score} (w={factor.weight:.2f})")
    if breakdown.safety_tier > 1:
        parts.append(f"safety=x{breakdown.safety_multiplier:.2f} (tier {breakdown.safety_tier})")
    return " | ".join(parts)
