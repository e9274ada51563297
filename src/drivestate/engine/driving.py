from __future__ import annotations

# The driving-state engine: given where the vehicle is and which way it points,
# decide which POIs are "ahead", how far away they are, and in which direction.
#
# The pipeline is deliberately flat:
# - range filter (cheap haversine first, bearing only for survivors)
# - forward-cone filter (only when a heading is known)
# - distance sort, then truncation with the full in-range count preserved
#
# Category filtering and preference ranking are separate helpers that callers
# (HUD, list screen, chat context) apply on top of the engine output.

import logging
from typing import Iterable, Sequence

from drivestate.core.geo import Coordinate as CoreCoordinate
from drivestate.core.geo import MILES_TO_METERS, bearing_to, haversine_distance, is_within_cone, relative_bearing
from drivestate.domain.models import DrivingEngineOutput, DrivingPosition, EngineOptions, POICandidate, POIResult

logger = logging.getLogger(__name__)

# Rank given to results that match no preferred category.
UNMATCHED_PREFERENCE_RANK = 999


def process_driving_state(
    position: DrivingPosition,
    pois: Iterable[POICandidate],
    options: EngineOptions | None = None,
) -> DrivingEngineOutput:
    """Filter and rank `pois` against the vehicle `position`.

    Without a heading the cone test is skipped and only the range applies; bearing
    and relative bearing are still reported (relative to north).
    """
    opts = options or EngineOptions()

    max_distance_meters = opts.max_distance_miles * MILES_TO_METERS
    heading_available = position.heading is not None
    effective_heading = position.heading if position.heading is not None else 0.0

    origin = CoreCoordinate(lat=position.lat, lng=position.lng)
    results: list[POIResult] = []

    for poi in pois:
        target = CoreCoordinate(lat=poi.lat, lng=poi.lng)
        distance_meters = haversine_distance(origin, target)

        # `not <=` keeps the boundary point and drops NaN distances.
        if not distance_meters <= max_distance_meters:
            continue

        if heading_available and not is_within_cone(
            origin, effective_heading, target, max_distance_meters, opts.cone_angle_degrees
        ):
            continue

        absolute_bearing = bearing_to(origin, target)
        results.append(
            POIResult(
                **poi.model_dump(),
                distance_meters=distance_meters,
                distance_miles=distance_meters / MILES_TO_METERS,
                bearing=absolute_bearing,
                relative_bearing=relative_bearing(effective_heading, absolute_bearing),
            )
        )

    # sorted() is stable, so equal distances keep input order.
    results = sorted(results, key=lambda r: r.distance_meters)
    pois_ahead = results[: max(opts.max_results, 0)]

    logger.debug(
        "Driving state: %d in range, %d returned (heading_available=%s, range=%.1fmi, cone=%.0fdeg)",
        len(results),
        len(pois_ahead),
        heading_available,
        opts.max_distance_miles,
        opts.cone_angle_degrees,
    )

    return DrivingEngineOutput(
        pois_ahead=pois_ahead,
        total_pois_in_range=len(results),
        heading_available=heading_available,
    )


def filter_pois_by_category(pois: list[POIResult], categories: Sequence[str]) -> list[POIResult]:
    """Keep results whose category contains any of `categories` (case-insensitive).

    An empty `categories` list means "no filter" and returns `pois` unchanged.
    """
    if not categories:
        return pois

    wanted = [c.lower() for c in categories]
    return [p for p in pois if any(c in (p.category or "").lower() for c in wanted)]


def _preference_rank(category: str | None, preferences: list[str]) -> int:
    category = (category or "").lower()
    for index, pref in enumerate(preferences):
        if pref in category:
            return index
    return UNMATCHED_PREFERENCE_RANK


def rank_pois_by_preference(pois: list[POIResult], preferred_categories: Sequence[str]) -> list[POIResult]:
    """Reorder results by the first preferred category they match, nearest first within a rank.

    An empty preference list returns `pois` unchanged.
    """
    if not preferred_categories:
        return pois

    preferences = [c.lower() for c in preferred_categories]
    return sorted(pois, key=lambda p: (_preference_rank(p.category, preferences), p.distance_miles))
