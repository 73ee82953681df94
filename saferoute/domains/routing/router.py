"""
Safe routing HTTP endpoints

Thin plumbing over ``SafeRoutingService``; incidents come from the
repository snapshot at request time.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from saferoute.core.exceptions import NoRoutesAvailableError
from saferoute.domains.common import ApiResponse
from saferoute.domains.incidents.dependencies import get_incident_repository
from saferoute.domains.incidents.repository import InMemoryIncidentRepository
from saferoute.domains.incidents.schemas import IncidentFilter
from saferoute.planning.algorithms.routing.types import (
    SCORING_STATUSES,
    NoRoutesError,
    SafetyScoreDetail,
)
from .schemas import (
    RouteAlternativeResponse,
    RouteSafetyRequest,
    SafeRouteRequest,
    SafeRouteResponse,
    primary_recommendation,
)
from .service import SafeRoutingService, get_routing_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])

_ACTIVE_FILTER = IncidentFilter(statuses=sorted(SCORING_STATUSES, key=lambda s: s.value))


@router.post("/safe", response_model=ApiResponse[SafeRouteResponse])
async def calculate_safe_route(
    request: SafeRouteRequest,
    service: SafeRoutingService = Depends(get_routing_service),
    repository: InMemoryIncidentRepository = Depends(get_incident_repository),
) -> ApiResponse[SafeRouteResponse]:
    """Primary route, its safety breakdown and all ranked alternatives."""
    incidents = repository.list(_ACTIVE_FILTER)
    logger.info(f"route request: {len(incidents)} active incidents in system")

    try:
        result = await service.plan(
            request.origin, request.destination, incidents, request.waypoints
        )
    except NoRoutesError as e:
        raise NoRoutesAvailableError(str(e)) from e

    best = result.primary
    data = SafeRouteResponse(
        origin=request.origin,
        destination=request.destination,
        waypoints=request.waypoints,
        distance_km=best.path.distance_km,
        duration_min=best.path.duration_min,
        safety_score=best.safety_score,
        safety_details=result.safety_detail,
        incidents=best.analysis.nearby_incidents,
        recommendation=primary_recommendation(best),
        geometry=list(best.path.geometry),
        has_hazards=best.has_hazards,
        used_fallback=result.used_fallback,
        alternatives=[
            RouteAlternativeResponse.from_ranked(idx, route)
            for idx, route in enumerate(result.routes)
        ],
    )
    return ApiResponse[SafeRouteResponse].ok(data)


@router.post("/safety", response_model=ApiResponse[SafetyScoreDetail])
async def calculate_route_safety(
    request: RouteSafetyRequest,
    service: SafeRoutingService = Depends(get_routing_service),
    repository: InMemoryIncidentRepository = Depends(get_incident_repository),
) -> ApiResponse[SafetyScoreDetail]:
    detail = service.calculate_route_safety(
        request.geometry,
        repository.list(),
        request.distance_m,
        request.weather_factor,
    )
    return ApiResponse[SafetyScoreDetail].ok(detail)
