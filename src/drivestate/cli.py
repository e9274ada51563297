"""
DriveState CLI entrypoint.

Quick local checks of the engine and the parking heuristic without the API:

    drivestate ahead --lat 39.0 --lng -94.0 --heading 90 --catalog pois.json
    drivestate ahead --lat 39.0 --lng -94.0 --catalog locations.json --locations --at 2026-02-05T19:30
    drivestate parking --stop-id demo-001 --capacity medium --at 2026-02-05T19:30
"""

from __future__ import annotations

import argparse
import json
from datetime import datetime
from typing import Any

from drivestate.catalog.loader import load_locations, load_poi_candidates, locations_to_poi_candidates
from drivestate.config.overrides import resolve_engine_options
from drivestate.config.settings import get_settings
from drivestate.core.logging import configure_logging
from drivestate.core.time import parse_datetime
from drivestate.domain.models import (
    CapacityBucket,
    DrivingPosition,
    EngineOptions,
    Location,
    ParkingLikelihoodResult,
    StopProfile,
    StopType,
)
from drivestate.engine.driving import (
    filter_pois_by_category,
    process_driving_state,
    rank_pois_by_preference,
)
from drivestate.features.parking import get_parking_likelihood
from drivestate.features.stop_profile import estimate_parking_for_stops


def _cmd_ahead(args: argparse.Namespace) -> int:
    """Handle the `ahead` subcommand."""
    settings = get_settings()
    catalog = args.catalog or settings.catalog.path
    locations: list[Location] = []
    if args.locations:
        locations = load_locations(catalog)
        pois = locations_to_poi_candidates(locations)
    else:
        pois = load_poi_candidates(catalog)

    opt_kwargs: dict[str, Any] = {}
    if args.max_distance_miles is not None:
        opt_kwargs["max_distance_miles"] = float(args.max_distance_miles)
    if args.cone is not None:
        opt_kwargs["cone_angle_degrees"] = float(args.cone)
    if args.max_results is not None:
        opt_kwargs["max_results"] = int(args.max_results)
    options = resolve_engine_options(settings, EngineOptions(**opt_kwargs))

    position = DrivingPosition(lat=args.lat, lng=args.lng, heading=args.heading, speed=args.speed)
    output = process_driving_state(position, pois, options)

    results = filter_pois_by_category(output.pois_ahead, args.category or [])
    results = rank_pois_by_preference(results, args.prefer or [])

    parking: dict[str, ParkingLikelihoodResult] = {}
    if locations:
        timezone = args.timezone or settings.app.timezone
        when = parse_datetime(args.at, timezone) if args.at else datetime.now()
        parking = estimate_parking_for_stops((r.id for r in results), locations, when, timezone=timezone)

    if args.json:
        payload = output.model_copy(update={"pois_ahead": results}).model_dump(mode="json", by_alias=True)
        if locations:
            payload["parking"] = {k: v.model_dump(mode="json", by_alias=True) for k, v in parking.items()}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    heading = "heading unknown, range only" if not output.heading_available else f"heading {args.heading:.0f}"
    print(f"{len(results)} of {output.total_pois_in_range} stops in range ({heading})")
    for i, r in enumerate(results, start=1):
        print(f"{i:>2}. {r.name} [{r.category}]  {r.distance_miles:.1f} mi  rel {r.relative_bearing:+.0f}")
        if r.id in parking:
            print(f"    parking: {parking[r.id].status.value}")
    return 0


def _cmd_parking(args: argparse.Namespace) -> int:
    """Handle the `parking` subcommand."""
    settings = get_settings()
    timezone = args.timezone or settings.app.timezone
    when = parse_datetime(args.at, timezone) if args.at else datetime.now()

    profile = StopProfile(
        stop_id=args.stop_id,
        capacity_bucket=CapacityBucket(args.capacity),
        region=args.region,
        type=StopType(args.type),
    )
    result = get_parking_likelihood(profile, when, timezone=timezone)

    if args.json:
        print(json.dumps(result.model_dump(mode="json", by_alias=True), ensure_ascii=False, indent=2))
        return 0

    print(f"{profile.stop_id}: {result.status.value}")
    print(f"  {result.explanation}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the DriveState CLI."""
    parser = argparse.ArgumentParser(prog="drivestate")
    sub = parser.add_subparsers(dest="command", required=True)

    ahead = sub.add_parser("ahead", help="List POIs ahead of a position.")
    ahead.add_argument("--lat", required=True, type=float)
    ahead.add_argument("--lng", required=True, type=float)
    ahead.add_argument("--heading", type=float, default=None, help="Degrees clockwise from north; omit if unknown")
    ahead.add_argument("--speed", type=float, default=None, help="Metres per second")
    ahead.add_argument("--catalog", type=str, default=None, help="JSON file (defaults to catalog.path)")
    ahead.add_argument("--locations", action="store_true", help="Catalog holds Location records, not POIs")
    ahead.add_argument("--max-distance-miles", type=float, default=None)
    ahead.add_argument("--cone", type=float, default=None, help="Full cone width in degrees (360 = all around)")
    ahead.add_argument("--max-results", type=int, default=None)
    ahead.add_argument("--category", action="append", default=[], help="Repeatable category filter")
    ahead.add_argument("--prefer", action="append", default=[], help="Repeatable, in priority order")
    ahead.add_argument("--at", default=None, help="ISO datetime for parking estimates (default: now)")
    ahead.add_argument("--timezone", default=None, help="IANA zone, e.g. America/Chicago")
    ahead.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    ahead.set_defaults(func=_cmd_ahead)

    park = sub.add_parser("parking", help="Estimate parking likelihood for a stop.")
    park.add_argument("--stop-id", required=True)
    park.add_argument("--capacity", required=True, choices=[c.value for c in CapacityBucket])
    park.add_argument("--type", default=StopType.TRUCK_STOP.value, choices=[t.value for t in StopType])
    park.add_argument("--region", default="US")
    park.add_argument("--at", default=None, help="ISO datetime (default: now)")
    park.add_argument("--timezone", default=None, help="IANA zone, e.g. America/Chicago")
    park.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    park.set_defaults(func=_cmd_parking)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m drivestate.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
