"""
Incident domain models
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from saferoute.planning.algorithms.routing.types import (
    Coordinate,
    Incident,
    IncidentStatus,
    IncidentType,
    SeverityLevel,
)


class IncidentFilter(BaseModel):
    """
    Closed set of incident filters.

    - types: keep incidents whose type is listed
    - severities: keep incidents whose severity is listed
    - statuses: keep incidents whose status is listed
    - start_date / end_date: inclusive bounds on ``reported_at``

    An empty list or None means "no restriction" for that field.
    """
    model_config = ConfigDict(extra="forbid")

    types: List[IncidentType] = Field(default_factory=list)
    severities: List[SeverityLevel] = Field(default_factory=list)
    statuses: List[IncidentStatus] = Field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def _naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        # stored timestamps are naive UTC
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    def matches(self, incident: Incident) -> bool:
        if self.types and incident.type not in self.types:
            return False
        if self.severities and incident.severity not in self.severities:
            return False
        if self.statuses and incident.status not in self.statuses:
            return False
        if self.start_date and incident.reported_at < self.start_date:
            return False
        if self.end_date and incident.reported_at > self.end_date:
            return False
        return True


class UserReport(BaseModel):
    """Road-user hazard report; becomes an unverified incident"""
    id: str
    user_id: Optional[str] = None
    type: IncidentType
    location: Coordinate
    description: str
    photos: List[str] = Field(default_factory=list)
    reported_at: datetime
    verified: bool = False
    verified_by: Optional[str] = None
    verified_at: Optional[datetime] = None


class IncidentStatistics(BaseModel):
    total: int
    by_type: dict[str, int]
    by_severity: dict[int, int]
    by_status: dict[str, int]
    total_user_reports: int
    verified_reports: int
