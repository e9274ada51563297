"""
Domain models (Pydantic).

These types are the contract between the core and its callers:
- engine inputs (`DrivingPosition`, `POICandidate`, `EngineOptions`)
- engine output (`POIResult`, `DrivingEngineOutput`)
- parking inputs/outputs (`StopProfile`, `ParkingLikelihoodResult`)
- the app-side `Location` record the stop-profile mapper and catalog loader read

Field names are snake_case in Python and camelCase on the wire (`hoursOfOperation`,
`poisAhead`, ...); both spellings are accepted on input.

Coordinates are deliberately NOT range-validated: the geo layer accepts any real
value and non-finite values simply never match a range or cone test.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ContractModel(BaseModel):
    """Base for models that cross the API boundary (camelCase aliases)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinate(ContractModel):
    """A geographic point in decimal degrees."""

    lat: float
    lng: float


class DrivingPosition(Coordinate):
    """Instantaneous vehicle state; `heading` is None without a compass lock."""

    heading: float | None = None
    # Metres per second, as reported by the device.
    speed: float | None = None


class POICandidate(ContractModel):
    """A fixed point of interest supplied fresh on each engine call."""

    id: str
    name: str
    lat: float
    lng: float
    category: str
    address: str | None = None
    hours_of_operation: str | None = None
    notes: str | None = None


class POIResult(POICandidate):
    """A candidate that passed range/cone filtering, plus its computed geometry."""

    distance_meters: float
    distance_miles: float
    bearing: float
    relative_bearing: float


class EngineOptions(ContractModel):
    """Per-call engine options; omitted fields fall back to the documented defaults."""

    max_distance_miles: float = 25
    cone_angle_degrees: float = 90
    max_results: int = Field(20, ge=0)


class DrivingEngineOutput(ContractModel):
    pois_ahead: list[POIResult] = Field(default_factory=list)
    total_pois_in_range: int = 0
    heading_available: bool = False


class CapacityBucket(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class StopType(str, Enum):
    TRUCK_STOP = "truck_stop"
    REST_AREA = "rest_area"


class ParkingLikelihoodStatus(str, Enum):
    LIKELY_AVAILABLE = "LIKELY_AVAILABLE"
    UNCERTAIN = "UNCERTAIN"
    LIKELY_FULL = "LIKELY_FULL"


class DayType(str, Enum):
    WEEKDAY = "weekday"
    WEEKEND = "weekend"


class StopProfile(ContractModel):
    """What the parking estimator needs to know about a stop."""

    stop_id: str
    capacity_bucket: CapacityBucket
    region: str
    type: StopType
    # Reserved for blending in observed activity; not used by scoring.
    recent_activity_score: float | None = Field(default=None, ge=0, le=1)


class ParkingLikelihoodResult(ContractModel):
    status: ParkingLikelihoodStatus
    explanation: str


class ParkingPing(ContractModel):
    """Anonymous "someone looked at this stop" telemetry payload (no user id)."""

    stop_id: str
    hour: int = Field(..., ge=0, le=23)
    day_type: DayType


FacilityKind = Literal["warehouse", "truck stop", "rest area", "parking only"]


class Pin(ContractModel):
    # Stored as strings by the location database; Pydantic coerces them.
    lat: float
    lng: float


class Location(ContractModel):
    """A saved location record from the app database (read-only here)."""

    id: str
    name: str
    address: str = ""
    facility_kind: FacilityKind = "warehouse"
    hours_of_operation: str | None = None
    notes: str | None = None
    pins: list[Pin] = Field(default_factory=list)
