"""
Chat context ("what's coming up") built from engine output.

The chat assistant receives a compact snapshot of the drive: whether the truck is
moving, the next few stops ahead and a rough ETA to the first one. This module
only shapes data; it does not talk to any language model.
"""

from __future__ import annotations

import math
from typing import Literal

from drivestate.config.settings import Settings
from drivestate.domain.models import ContractModel, Coordinate, DrivingEngineOutput

DrivingState = Literal["driving", "stopped", "unknown"]

# Device positions report speed in metres per second.
MPS_TO_MPH = 2.237


class AiPoiSummary(ContractModel):
    name: str
    distance_miles: float
    facility_kind: str | None = None


class AiContext(ContractModel):
    driving_state: DrivingState
    speed_mph: float | None
    position: Coordinate | None
    upcoming_pois: list[AiPoiSummary]
    next_stop_eta_minutes: int | None


def summarize_pois_ahead(output: DrivingEngineOutput, *, limit: int | None = None) -> list[AiPoiSummary]:
    pois = output.pois_ahead if limit is None else output.pois_ahead[:limit]
    return [
        AiPoiSummary(name=p.name, distance_miles=p.distance_miles, facility_kind=p.category)
        for p in pois
    ]


def speed_mph_from_mps(speed_mps: float | None) -> float | None:
    if speed_mps is None:
        return None
    return speed_mps * MPS_TO_MPH


def get_driving_state(speed_mph: float | None, *, stopped_speed_mph: float) -> DrivingState:
    if speed_mph is None:
        return "unknown"
    if speed_mph <= stopped_speed_mph:
        return "stopped"
    return "driving"


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def build_ai_context(
    *,
    speed_mph: float | None,
    position: Coordinate | None,
    upcoming_pois: list[AiPoiSummary],
    settings: Settings,
) -> AiContext:
    cfg = settings.context
    driving_state = get_driving_state(speed_mph, stopped_speed_mph=cfg.stopped_speed_mph)

    eta: int | None = None
    if upcoming_pois and speed_mph is not None and speed_mph > cfg.stopped_speed_mph:
        raw = upcoming_pois[0].distance_miles / speed_mph * 60
        eta = _round_half_up(min(max(raw, 1.0), float(cfg.max_eta_minutes)))

    return AiContext(
        driving_state=driving_state,
        speed_mph=speed_mph,
        position=position,
        upcoming_pois=upcoming_pois[: cfg.max_upcoming_pois],
        next_stop_eta_minutes=eta,
    )
