"""
POI catalog loader.

Two on-disk shapes are supported:
- a JSON list of POI candidates (`id`, `name`, `lat`, `lng`, `category`, ...)
- a JSON list of app `Location` records (with `facilityKind` and string `pins`)

Locations are converted to candidates here, which is also where non-finite
coordinates are filtered out: the engine itself never rejects them.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Iterable

from pydantic import TypeAdapter

from drivestate.core.env import resolve_data_path
from drivestate.domain.models import Location, POICandidate

logger = logging.getLogger(__name__)

_CANDIDATES_ADAPTER = TypeAdapter(list[POICandidate])
_LOCATIONS_ADAPTER = TypeAdapter(list[Location])


def _read_json(path: str | Path):
    resolved = resolve_data_path(path)
    return json.loads(resolved.read_text(encoding="utf-8"))


def load_poi_candidates(path: str | Path) -> list[POICandidate]:
    """Load and validate a POI candidate JSON file."""
    return _CANDIDATES_ADAPTER.validate_python(_read_json(path))


def load_locations(path: str | Path) -> list[Location]:
    """Load and validate a Location JSON file."""
    return _LOCATIONS_ADAPTER.validate_python(_read_json(path))


def location_to_poi_candidate(location: Location) -> POICandidate | None:
    """Use the location's first pin; None when it has no usable coordinate."""
    if not location.pins:
        return None
    pin = location.pins[0]
    if not (math.isfinite(pin.lat) and math.isfinite(pin.lng)):
        return None
    return POICandidate(
        id=location.id,
        name=location.name,
        lat=pin.lat,
        lng=pin.lng,
        category=location.facility_kind,
        address=location.address or None,
        hours_of_operation=location.hours_of_operation,
        notes=location.notes,
    )


def locations_to_poi_candidates(locations: Iterable[Location]) -> list[POICandidate]:
    out: list[POICandidate] = []
    skipped = 0
    for loc in locations:
        candidate = location_to_poi_candidate(loc)
        if candidate is None:
            skipped += 1
            continue
        out.append(candidate)
    if skipped:
        logger.info("Skipped %d locations without a usable pin.", skipped)
    return out
