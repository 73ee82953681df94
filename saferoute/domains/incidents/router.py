"""
Incident and user-report endpoints

Prefixes: /incidents, /reports, /stats
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from saferoute.core.exceptions import NotFoundError, ValidationError
from saferoute.domains.common import ApiResponse
from saferoute.planning.algorithms.routing.types import (
    Coordinate,
    Incident,
    IncidentStatus,
    IncidentType,
    SeverityLevel,
)
from .dependencies import get_incident_refresher, get_incident_repository
from .refresher import IncidentRefresher
from .repository import InMemoryIncidentRepository
from .schemas import IncidentFilter, IncidentStatistics, UserReport

logger = logging.getLogger(__name__)

router = APIRouter(tags=["incidents"])


class UserReportCreate(BaseModel):
    type: IncidentType
    location: Coordinate
    description: str = Field(..., min_length=1, max_length=2000)
    user_id: Optional[str] = None
    photos: List[str] = Field(default_factory=list)


class ReportVerifyRequest(BaseModel):
    verified_by: str = Field(..., min_length=1)


class RefreshResult(BaseModel):
    count: int


# ============================================================================
# Incidents
# ============================================================================

@router.get("/incidents", response_model=ApiResponse[List[Incident]])
async def list_incidents(
    types: List[IncidentType] = Query(default=[]),
    severities: List[SeverityLevel] = Query(default=[]),
    statuses: List[IncidentStatus] = Query(default=[]),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    repository: InMemoryIncidentRepository = Depends(get_incident_repository),
) -> ApiResponse[List[Incident]]:
    filters = IncidentFilter(
        types=types,
        severities=severities,
        statuses=statuses,
        start_date=start_date,
        end_date=end_date,
    )
    if filters.start_date and filters.end_date and filters.start_date > filters.end_date:
        raise ValidationError(
            "start_date must not be after end_date",
            details={"start_date": str(start_date), "end_date": str(end_date)},
        )
    return ApiResponse[List[Incident]].ok(repository.list(filters))


@router.get("/incidents/{incident_id}", response_model=ApiResponse[Incident])
async def get_incident(
    incident_id: str,
    repository: InMemoryIncidentRepository = Depends(get_incident_repository),
) -> ApiResponse[Incident]:
    incident = repository.get(incident_id)
    if incident is None:
        raise NotFoundError("Incident", incident_id)
    return ApiResponse[Incident].ok(incident)


@router.post("/incidents/refresh", response_model=ApiResponse[RefreshResult])
async def refresh_incidents(
    refresher: IncidentRefresher = Depends(get_incident_refresher),
) -> ApiResponse[RefreshResult]:
    """Pull the external feed now instead of waiting for the next cycle."""
    count = await refresher.refresh_once()
    logger.info(f"manual incident refresh: {count} incidents")
    return ApiResponse[RefreshResult].ok(RefreshResult(count=count))


@router.get("/stats", response_model=ApiResponse[IncidentStatistics])
async def incident_statistics(
    repository: InMemoryIncidentRepository = Depends(get_incident_repository),
) -> ApiResponse[IncidentStatistics]:
    return ApiResponse[IncidentStatistics].ok(repository.statistics())


# ============================================================================
# User reports
# ============================================================================

@router.post("/reports", response_model=ApiResponse[UserReport], status_code=201)
async def create_report(
    data: UserReportCreate,
    repository: InMemoryIncidentRepository = Depends(get_incident_repository),
) -> ApiResponse[UserReport]:
    report = repository.create_user_report(
        data.type,
        data.location,
        data.description,
        user_id=data.user_id,
        photos=data.photos,
    )
    return ApiResponse[UserReport].ok(report)


@router.get("/reports", response_model=ApiResponse[List[UserReport]])
async def list_reports(
    repository: InMemoryIncidentRepository = Depends(get_incident_repository),
) -> ApiResponse[List[UserReport]]:
    return ApiResponse[List[UserReport]].ok(repository.list_reports())


@router.post("/reports/{report_id}/verify", response_model=ApiResponse[UserReport])
async def verify_report(
    report_id: str,
    data: ReportVerifyRequest,
    repository: InMemoryIncidentRepository = Depends(get_incident_repository),
) -> ApiResponse[UserReport]:
    report = repository.verify_report(report_id, data.verified_by)
    if report is None:
        raise NotFoundError("Report", report_id)
    return ApiResponse[UserReport].ok(report)
