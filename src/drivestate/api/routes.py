"""
API routes.

Endpoints:
- GET  `/api/health`: liveness probe.
- GET  `/api/settings`: public settings (engine defaults, context knobs).
- POST `/api/driving/ahead`: run the driving-state engine (+ optional category filter,
  preference ranking, chat-context snapshot and parking estimates for location records).
- POST `/api/parking/likelihood`: parking likelihood for a stop profile at a time.
- POST `/api/parking/pings`: accept an anonymous parking view ping (logged only).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, HTTPException

from drivestate.catalog.loader import locations_to_poi_candidates
from drivestate.config.overrides import apply_settings_overrides, resolve_engine_options
from drivestate.config.settings import get_settings
from drivestate.domain.models import (
    ContractModel,
    DrivingEngineOutput,
    DrivingPosition,
    EngineOptions,
    Location,
    ParkingLikelihoodResult,
    ParkingPing,
    POICandidate,
    StopProfile,
)
from drivestate.engine.driving import (
    filter_pois_by_category,
    process_driving_state,
    rank_pois_by_preference,
)
from drivestate.features.context import AiContext, build_ai_context, speed_mph_from_mps, summarize_pois_ahead
from drivestate.features.parking import build_parking_ping, get_parking_likelihood
from drivestate.features.stop_profile import estimate_parking_for_stops

logger = logging.getLogger(__name__)

router = APIRouter()


class DrivingAheadRequest(ContractModel):
    position: DrivingPosition
    pois: list[POICandidate] = []
    # Location records are converted to candidates; truck stops and rest areas
    # among the results also get a parking estimate at `timestamp`.
    locations: list[Location] = []
    timestamp: datetime | int | None = None
    timezone: str | None = None
    options: EngineOptions | None = None
    categories: list[str] = []
    preferred_categories: list[str] = []
    include_context: bool = False
    settings_overrides: dict[str, Any] | None = None


class DrivingAheadResponse(DrivingEngineOutput):
    context: AiContext | None = None
    parking: dict[str, ParkingLikelihoodResult] = {}


class ParkingLikelihoodRequest(ContractModel):
    stop_profile: StopProfile
    # Epoch milliseconds or ISO-8601; omitted means "now".
    timestamp: datetime | int | None = None
    timezone: str | None = None


class ParkingPingRequest(ContractModel):
    stop_id: str
    timestamp: datetime | int | None = None
    timezone: str | None = None


def _validation_error(e: Exception) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={"code": "VALIDATION_ERROR", "message": str(e)},
    )


@router.get("/api/health")
def get_health() -> dict:
    return {"status": "ok"}


@router.get("/api/settings")
def get_public_settings() -> dict:
    """Return the settings a client needs to mirror engine defaults."""
    settings = get_settings()
    return {
        "app": {"name": settings.app.name, "timezone": settings.app.timezone},
        "engine": settings.engine.model_dump(mode="json"),
        "context": settings.context.model_dump(mode="json"),
    }


@router.post("/api/driving/ahead", response_model=DrivingAheadResponse, response_model_by_alias=True)
def post_driving_ahead(request: DrivingAheadRequest) -> DrivingAheadResponse:
    """Return the POIs ahead of `position`, filtered and ranked as requested."""
    try:
        settings = apply_settings_overrides(get_settings(), request.settings_overrides)
    except ValueError as e:
        raise _validation_error(e) from e

    options = resolve_engine_options(settings, request.options)
    pois = [*request.pois, *locations_to_poi_candidates(request.locations)]
    output = process_driving_state(request.position, pois, options)

    pois = filter_pois_by_category(output.pois_ahead, request.categories)
    pois = rank_pois_by_preference(pois, request.preferred_categories)
    output = output.model_copy(update={"pois_ahead": pois})

    context = None
    if request.include_context:
        position = request.position
        context = build_ai_context(
            speed_mph=speed_mph_from_mps(position.speed),
            position=position,
            upcoming_pois=summarize_pois_ahead(output),
            settings=settings,
        )

    parking: dict[str, ParkingLikelihoodResult] = {}
    if request.locations:
        timezone = request.timezone or settings.app.timezone
        timestamp = request.timestamp if request.timestamp is not None else datetime.now()
        try:
            parking = estimate_parking_for_stops(
                (p.id for p in output.pois_ahead), request.locations, timestamp, timezone=timezone
            )
        except (ValueError, KeyError) as e:
            raise _validation_error(e) from e

    return DrivingAheadResponse(**dict(output), context=context, parking=parking)


@router.post(
    "/api/parking/likelihood",
    response_model=ParkingLikelihoodResult,
    response_model_by_alias=True,
)
def post_parking_likelihood(request: ParkingLikelihoodRequest) -> ParkingLikelihoodResult:
    settings = get_settings()
    timezone = request.timezone or settings.app.timezone
    timestamp = request.timestamp if request.timestamp is not None else datetime.now()
    try:
        return get_parking_likelihood(request.stop_profile, timestamp, timezone=timezone)
    except (ValueError, KeyError) as e:
        # Unknown IANA zone names surface as ZoneInfoNotFoundError (a KeyError).
        raise _validation_error(e) from e


@router.post("/api/parking/pings", status_code=202, response_model=ParkingPing, response_model_by_alias=True)
def post_parking_ping(request: ParkingPingRequest) -> ParkingPing:
    """Accept a view ping; the core only logs it (aggregation happens elsewhere)."""
    settings = get_settings()
    timezone = request.timezone or settings.app.timezone
    timestamp = request.timestamp if request.timestamp is not None else datetime.now()
    try:
        ping = build_parking_ping(request.stop_id, timestamp, timezone=timezone)
    except (ValueError, KeyError) as e:
        raise _validation_error(e) from e
    logger.info("Parking ping stop=%s hour=%d day_type=%s", ping.stop_id, ping.hour, ping.day_type.value)
    return ping
