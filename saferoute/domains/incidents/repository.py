"""
In-memory incident repository

Holds the current incident snapshot and user reports. Route calculations
read a copy via ``list()``; they never see later mutations.
"""
from __future__ import annotations

import logging
import threading
import uuid
from collections import Counter
from datetime import datetime
from typing import Iterable, List, Optional

from saferoute.planning.algorithms.routing.types import (
    Coordinate,
    Incident,
    IncidentStatus,
    IncidentType,
    SeverityLevel,
)
from .schemas import IncidentFilter, IncidentStatistics, UserReport

logger = logging.getLogger(__name__)


class InMemoryIncidentRepository:
    """Thread-safe incident and user-report store"""

    def __init__(self, incidents: Optional[Iterable[Incident]] = None) -> None:
        self._lock = threading.Lock()
        self._incidents: List[Incident] = list(incidents or [])
        self._reports: List[UserReport] = []

    def list(self, filters: Optional[IncidentFilter] = None) -> List[Incident]:
        with self._lock:
            snapshot = list(self._incidents)
        if filters is None:
            return snapshot
        return [i for i in snapshot if filters.matches(i)]

    def get(self, incident_id: str) -> Optional[Incident]:
        with self._lock:
            return next((i for i in self._incidents if i.id == incident_id), None)

    def replace_all(self, incidents: Iterable[Incident]) -> int:
        new = list(incidents)
        with self._lock:
            self._incidents = new
        logger.info(f"incident snapshot replaced: {len(new)} incidents")
        return len(new)

    def upsert_many(self, incidents: Iterable[Incident]) -> None:
        """Replace by id, append unknown ids."""
        with self._lock:
            index = {inc.id: pos for pos, inc in enumerate(self._incidents)}
            for incident in incidents:
                pos = index.get(incident.id)
                if pos is None:
                    index[incident.id] = len(self._incidents)
                    self._incidents.append(incident)
                else:
                    self._incidents[pos] = incident

    def create_user_report(
        self,
        type: IncidentType,
        location: Coordinate,
        description: str,
        user_id: Optional[str] = None,
        photos: Optional[List[str]] = None,
    ) -> UserReport:
        now = datetime.utcnow()
        report = UserReport(
            id=f"user-{int(now.timestamp() * 1000)}-{uuid.uuid4().hex[:9]}",
            user_id=user_id,
            type=type,
            location=location,
            description=description,
            photos=photos or [],
            reported_at=now,
        )
        incident = Incident(
            id=report.id,
            type=type,
            severity=SeverityLevel.MODERATE,
            status=IncidentStatus.UNVERIFIED,
            location=location,
            title=f"User Reported {type.value}",
            description=description,
            reported_at=now,
            updated_at=now,
            source="user",
        )
        with self._lock:
            self._reports.append(report)
        self.upsert_many([incident])
        logger.info(f"user report created: {report.id} ({type.value})")
        return report

    def list_reports(self) -> List[UserReport]:
        with self._lock:
            return list(self._reports)

    def verify_report(self, report_id: str, verified_by: str) -> Optional[UserReport]:
        """Mark the report verified and promote its incident to ACTIVE."""
        now = datetime.utcnow()
        with self._lock:
            pos = next((n for n, r in enumerate(self._reports) if r.id == report_id), None)
            if pos is None:
                return None
            report = self._reports[pos].model_copy(update={
                "verified": True,
                "verified_by": verified_by,
                "verified_at": now,
            })
            self._reports[pos] = report

            for n, incident in enumerate(self._incidents):
                if incident.id == report_id:
                    self._incidents[n] = incident.model_copy(update={
                        "status": IncidentStatus.ACTIVE,
                        "verified_by": verified_by,
                        "updated_at": now,
                    })
                    break
        logger.info(f"user report verified: {report_id} by {verified_by}")
        return report

    def statistics(self) -> IncidentStatistics:
        with self._lock:
            incidents = list(self._incidents)
            reports = list(self._reports)
        return IncidentStatistics(
            total=len(incidents),
            by_type=dict(Counter(i.type.value for i in incidents)),
            by_severity=dict(Counter(int(i.severity) for i in incidents)),
            by_status=dict(Counter(i.status.value for i in incidents)),
            total_user_reports=len(reports),
            verified_reports=sum(1 for r in reports if r.verified),
        )
