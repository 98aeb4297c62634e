"""
SeasonScore CLI entrypoint.

This CLI is intended for quick local checks of the scoring pipeline without an API
server. It delegates all scoring to `seasonscore.features`, `seasonscore.scoring`
and `seasonscore.recommender.recommend.rank_regions`.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from seasonscore.catalog.reference import get_reference_data
from seasonscore.config.settings import get_settings
from seasonscore.core.logging import configure_logging
from seasonscore.domain.models import AlgorithmPreset, ClimateObservation, RankRequest, Region, RegionFilters
from seasonscore.features.advisories import active_advisories, apply_seasonal_advisory
from seasonscore.features.crowd import blend_best_time
from seasonscore.features.weather import score_weather
from seasonscore.recommender.recommend import rank_regions
from seasonscore.scoring.composite import composite_score
from seasonscore.scoring.explain import one_line_summary, score_label

_REGIONS_ADAPTER = TypeAdapter(list[Region])


def _cmd_score(args: argparse.Namespace) -> int:
    """Handle the `score` subcommand (one observation)."""
    settings = get_settings()
    reference = get_reference_data()
    obs = ClimateObservation.model_validate_json(Path(args.observation).read_text(encoding="utf-8"))

    weather = score_weather(obs, cfg=settings.scoring)
    best_time = blend_best_time(weather.score, obs.busyness, args.preset, cfg=settings.scoring)
    adjusted = best_time
    advisories: list[str] = []
    if args.region_slug and args.month:
        adjusted = apply_seasonal_advisory(
            args.region_slug, args.month, args.activity, best_time, advisories=reference
        )
        advisories = [
            r.label for r in active_advisories(args.region_slug, args.month, args.activity, advisories=reference)
        ]
    composite = composite_score(adjusted, args.country, args.activity, reference=reference, settings=settings)

    if args.json:
        payload = {
            "weather_score": weather.score,
            "weather_details": weather.details,
            "best_time_score": best_time,
            "adjusted_best_time_score": adjusted,
            "advisories": advisories,
            "composite": composite.model_dump(mode="json"),
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    print(f"Weather:   {weather.score:6.2f}  ({score_label(weather.score)})")
    for reason in weather.reasons:
        print(f"    - {reason}")
    print(f"Best time: {best_time:6.2f}  (preset={AlgorithmPreset(args.preset).value})")
    if advisories:
        print(f"Advisories: {', '.join(advisories)} -> {adjusted:.2f}")
    print(f"Overall:   {composite.final_score:>3}     {one_line_summary(composite.breakdown)}")
    return 0


def _cmd_rank(args: argparse.Namespace) -> int:
    """Handle the `rank` subcommand (regions file + months)."""
    settings = get_settings()
    payload = json.loads(Path(args.regions).read_text(encoding="utf-8"))
    regions = _REGIONS_ADAPTER.validate_python(payload)

    request = RankRequest(
        months=args.month,
        preset=args.preset,
        activities=args.activity or [],
        max_results=args.max_results,
        filters=RegionFilters(
            busyness_max=args.busyness_max,
            hide_risky=bool(args.hide_risky),
            activities=args.require_activity or [],
        ),
    )
    result = rank_regions(request, regions, settings=settings)

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(f"Months: {', '.join(str(m) for m in request.months)}  preset={request.preset.value}")
    for i, item in enumerate(result.results, start=1):
        flags = f"  [{'; '.join(item.advisories)}]" if item.advisories else ""
        print(
            f"{i:>2}. {item.name} ({item.country_code})  overall={item.overall_score} "
            f"weather={item.weather_score} best_time={item.best_time_score}{flags}"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the SeasonScore CLI."""
    parser = argparse.ArgumentParser(prog="seasonscore")
    sub = parser.add_subparsers(dest="command", required=True)
    presets = [p.value for p in AlgorithmPreset]

    sc = sub.add_parser("score", help="Score one monthly climate observation (JSON file).")
    sc.add_argument("--observation", required=True, help="Path to a ClimateObservation JSON file")
    sc.add_argument("--country", required=True, help="ISO country code (e.g. TH)")
    sc.add_argument("--preset", choices=presets, default=AlgorithmPreset.BALANCED.value)
    sc.add_argument("--activity", action="append", default=[], help="Repeatable, e.g. --activity food")
    sc.add_argument("--region-slug", default=None, help="Region slug for seasonal advisories")
    sc.add_argument("--month", type=int, action="append", default=[], help="Repeatable month 1..12")
    sc.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    sc.set_defaults(func=_cmd_score)

    rk = sub.add_parser("rank", help="Rank regions (JSON file) for the selected months.")
    rk.add_argument("--regions", required=True, help="Path to a JSON list of regions with monthly data")
    rk.add_argument("--month", type=int, action="append", required=True, help="Repeatable month 1..12")
    rk.add_argument("--preset", choices=presets, default=AlgorithmPreset.BALANCED.value)
    rk.add_argument("--activity", action="append", default=[])
    rk.add_argument("--require-activity", action="append", default=[], help="Only regions offering it")
    rk.add_argument("--busyness-max", type=int, default=5)
    rk.add_argument("--hide-risky", action="store_true", help="Drop safety tier 3-4 countries")
    rk.add_argument("--max-results", type=int, default=None)
    rk.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    rk.set_defaults(func=_cmd_rank)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m seasonscore.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
