"""
Parking likelihood heuristic for truck stops and rest areas.

No live occupancy data exists, so this estimates lot fullness from time patterns:

    base_load = temporal_weight[day_type][hour] * capacity_modifier[capacity_bucket]

The weight curves encode the usual truck-parking rhythm: lots are emptiest in the
small hours, fill through the afternoon and peak around 19:00-20:00 when drivers
shut down for their 10-hour break. Small lots fill faster (modifier > 1), large lots
have more headroom (modifier < 1).

The tables are module constants (immutable); there is no state, no learning and no I/O.
"""

from __future__ import annotations

from datetime import datetime
from types import MappingProxyType
from typing import Mapping

from drivestate.core.time import Timestamp, to_local_datetime
from drivestate.domain.models import (
    CapacityBucket,
    DayType,
    ParkingLikelihoodResult,
    ParkingLikelihoodStatus,
    ParkingPing,
    StopProfile,
)

CAPACITY_MODIFIERS: Mapping[CapacityBucket, float] = MappingProxyType(
    {
        CapacityBucket.SMALL: 1.2,
        CapacityBucket.MEDIUM: 1.0,
        CapacityBucket.LARGE: 0.8,
    }
)

# One weight per hour of day, 0..23.
TEMPORAL_WEIGHTS: Mapping[DayType, tuple[float, ...]] = MappingProxyType(
    {
        DayType.WEEKDAY: (
            0.35, 0.35, 0.32, 0.32, 0.30, 0.32,
            0.40, 0.48, 0.55, 0.62, 0.65, 0.68,
            0.70, 0.68, 0.64, 0.66, 0.70, 0.78,
            0.85, 0.92, 0.96, 0.92, 0.78, 0.55,
        ),
        DayType.WEEKEND: (
            0.30, 0.30, 0.28, 0.28, 0.26, 0.28,
            0.35, 0.40, 0.46, 0.52, 0.55, 0.58,
            0.60, 0.58, 0.55, 0.56, 0.60, 0.68,
            0.74, 0.80, 0.84, 0.80, 0.66, 0.50,
        ),
    }
)

DEFAULT_TEMPORAL_WEIGHT = 0.6

AVAILABLE_BELOW = 0.45
FULL_AT_OR_ABOVE = 0.75

_SIZE_WORDS: Mapping[CapacityBucket, str] = MappingProxyType(
    {
        CapacityBucket.SMALL: "smaller",
        CapacityBucket.MEDIUM: "mid-sized",
        CapacityBucket.LARGE: "larger",
    }
)

# Time bucket label -> phrase that reads naturally mid-sentence.
_TIME_PHRASES: Mapping[str, str] = MappingProxyType(
    {
        "overnight": "overnight",
        "morning": "in the morning",
        "midday": "around midday",
        "afternoon": "in the afternoon",
        "evening": "in the evening",
        "late night": "late at night",
    }
)


def get_day_type(dt: datetime) -> DayType:
    # weekday(): 0=Mon ... 5=Sat 6=Sun
    return DayType.WEEKEND if dt.weekday() >= 5 else DayType.WEEKDAY


def get_time_bucket_label(hour: int) -> str:
    if hour < 5:
        return "overnight"
    if hour < 11:
        return "morning"
    if hour < 15:
        return "midday"
    if hour < 19:
        return "afternoon"
    if hour < 23:
        return "evening"
    return "late night"


def get_temporal_weight(day_type: DayType, hour: int) -> float:
    weights = TEMPORAL_WEIGHTS[day_type]
    if 0 <= hour < len(weights):
        return weights[hour]
    return DEFAULT_TEMPORAL_WEIGHT


def classify_load(base_load: float) -> ParkingLikelihoodStatus:
    """Bucket a load estimate; each threshold belongs to the busier class."""
    if base_load < AVAILABLE_BELOW:
        return ParkingLikelihoodStatus.LIKELY_AVAILABLE
    if base_load < FULL_AT_OR_ABOVE:
        return ParkingLikelihoodStatus.UNCERTAIN
    return ParkingLikelihoodStatus.LIKELY_FULL


def build_explanation(
    status: ParkingLikelihoodStatus,
    day_type: DayType,
    hour: int,
    capacity_bucket: CapacityBucket,
) -> str:
    time_label = get_time_bucket_label(hour)
    when = _TIME_PHRASES[time_label]
    size = _SIZE_WORDS[capacity_bucket]
    days = "weekdays" if day_type is DayType.WEEKDAY else "weekends"

    if status is ParkingLikelihoodStatus.LIKELY_AVAILABLE:
        if time_label in {"morning", "midday"}:
            return f"Daytime parking at this {size} stop is often available on {days}."
        return f"Parking is usually easier {when} at this {size} stop on {days}."

    if status is ParkingLikelihoodStatus.LIKELY_FULL:
        if time_label in {"evening", "late night"}:
            return f"This {size} stop usually fills up {when} on {days}."
        return f"Parking is often tight {when} at this {size} stop on {days}."

    return f"Parking can be unpredictable {when} at this {size} stop on {days}."


def get_parking_likelihood(
    stop_profile: StopProfile,
    timestamp: Timestamp,
    *,
    timezone: str | None = None,
) -> ParkingLikelihoodResult:
    """Estimate how full a stop is likely to be at `timestamp`.

    `timestamp` is a datetime or epoch milliseconds. Hour and weekday are read in
    `timezone` when given. Otherwise naive datetimes count as wall-clock time and
    aware datetimes or epoch values are read on the process's local clock.
    """
    local = to_local_datetime(timestamp, timezone)
    day_type = get_day_type(local)
    hour = local.hour

    temporal_weight = get_temporal_weight(day_type, hour)
    capacity_modifier = CAPACITY_MODIFIERS[stop_profile.capacity_bucket]
    base_load = temporal_weight * capacity_modifier

    status = classify_load(base_load)
    explanation = build_explanation(status, day_type, hour, stop_profile.capacity_bucket)
    return ParkingLikelihoodResult(status=status, explanation=explanation)


def build_parking_ping(stop_id: str, timestamp: Timestamp, *, timezone: str | None = None) -> ParkingPing:
    """Build the anonymous view ping (stop, local hour, day type) for aggregate telemetry."""
    local = to_local_datetime(timestamp, timezone)
    return ParkingPing(stop_id=stop_id, hour=local.hour, day_type=get_day_type(local))
