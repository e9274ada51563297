"""
Location -> StopProfile mapping for parking predictions.

Only truck stops and rest areas get a parking estimate; every other facility kind
maps to None so the estimator never sees an unsupported stop.
`estimate_parking_for_stops` joins engine results back to their location records
and attaches an estimate to the supported ones.
"""

from __future__ import annotations

from typing import Iterable

from drivestate.core.time import Timestamp
from drivestate.domain.models import CapacityBucket, Location, ParkingLikelihoodResult, StopProfile, StopType
from drivestate.features.parking import get_parking_likelihood

# Phrases in free-text notes that reveal the lot size.
LARGE_LOT_HINTS = ("large lot", "200+ spots")
SMALL_LOT_HINTS = ("small lot", "limited parking")

DEFAULT_REGION = "US"


def map_stop_type(location: Location) -> StopType | None:
    if location.facility_kind == "truck stop":
        return StopType.TRUCK_STOP
    if location.facility_kind == "rest area":
        return StopType.REST_AREA
    return None


def infer_capacity_bucket(location: Location) -> CapacityBucket:
    notes = (location.notes or "").lower()
    if any(hint in notes for hint in LARGE_LOT_HINTS):
        return CapacityBucket.LARGE
    if any(hint in notes for hint in SMALL_LOT_HINTS):
        return CapacityBucket.SMALL

    if location.facility_kind == "truck stop":
        return CapacityBucket.MEDIUM
    # Rest areas and anything else: assume the tighter lot.
    return CapacityBucket.SMALL


def infer_region(location: Location) -> str:
    """Two-letter state from "street, city, ST, zip"-style addresses, else "US"."""
    parts = location.address.split(",")
    if len(parts) >= 2:
        state = parts[-2].strip()
        if len(state) == 2:
            return state.upper()
    return DEFAULT_REGION


def location_to_stop_profile(location: Location) -> StopProfile | None:
    stop_type = map_stop_type(location)
    if stop_type is None:
        return None
    return StopProfile(
        stop_id=location.id,
        capacity_bucket=infer_capacity_bucket(location),
        region=infer_region(location),
        type=stop_type,
    )


def locations_to_stop_profiles(locations: Iterable[Location]) -> list[StopProfile]:
    profiles = (location_to_stop_profile(loc) for loc in locations)
    return [p for p in profiles if p is not None]


def estimate_parking_for_stops(
    stop_ids: Iterable[str],
    locations: Iterable[Location],
    timestamp: Timestamp,
    *,
    timezone: str | None = None,
) -> dict[str, ParkingLikelihoodResult]:
    """Parking estimates keyed by stop id, for the ids that are truck stops or rest areas."""
    by_id = {loc.id: loc for loc in locations}
    estimates: dict[str, ParkingLikelihoodResult] = {}
    for stop_id in stop_ids:
        location = by_id.get(stop_id)
        if location is None:
            continue
        profile = location_to_stop_profile(location)
        if profile is None:
            continue
        estimates[stop_id] = get_parking_likelihood(profile, timestamp, timezone=timezone)
    return estimates
