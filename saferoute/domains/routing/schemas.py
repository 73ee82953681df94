"""
Safe routing API models
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from saferoute.planning.algorithms.routing.types import (
    Coordinate,
    Incident,
    RankedRoute,
    SafetyScoreDetail,
)


class SafeRouteRequest(BaseModel):
    origin: Coordinate
    destination: Coordinate
    waypoints: List[Coordinate] = Field(default_factory=list)


class RouteSafetyRequest(BaseModel):
    geometry: List[Coordinate]
    distance_m: float = Field(..., ge=0)
    weather_factor: Optional[float] = Field(None, ge=0, le=100)


class RouteAlternativeResponse(BaseModel):
    route_id: int
    geometry: List[Coordinate]
    distance_km: float
    duration_min: float
    safety_score: int
    has_hazards: bool
    nearby_incidents: int
    avoided_incidents: int
    recommendation: Literal["safe", "caution", "avoid"]
    is_detour: bool = False
    source: str

    @classmethod
    def from_ranked(cls, route_id: int, route: RankedRoute) -> "RouteAlternativeResponse":
        return cls(
            route_id=route_id,
            geometry=list(route.path.geometry),
            distance_km=route.path.distance_km,
            duration_min=route.path.duration_min,
            safety_score=route.safety_score,
            has_hazards=route.has_hazards,
            nearby_incidents=len(route.analysis.nearby_incidents),
            avoided_incidents=route.analysis.avoided_count,
            recommendation=route.recommendation,
            is_detour=route.is_detour,
            source=route.path.source,
        )


class SafeRouteResponse(BaseModel):
    origin: Coordinate
    destination: Coordinate
    waypoints: List[Coordinate]
    distance_km: float
    duration_min: float
    safety_score: int
    safety_details: SafetyScoreDetail
    incidents: List[Incident]
    recommendation: Literal["safe", "caution", "avoid"]
    geometry: List[Coordinate]
    has_hazards: bool
    used_fallback: bool = False
    alternatives: List[RouteAlternativeResponse]


def primary_recommendation(route: RankedRoute) -> Literal["safe", "caution", "avoid"]:
    """Hazardous primaries are always 'avoid'; otherwise 80 splits safe/caution."""
    if route.has_hazards:
        return "avoid"
    return "safe" if route.safety_score >= 80 else "caution"
