"""
Incident domain dependencies

Process-wide repository, feed client and refresher.
"""

from __future__ import annotations

from functools import lru_cache

from saferoute.core.config import get_settings
from saferoute.infra.clients.nt_road_report import NTRoadReportClient
from .refresher import IncidentRefresher
from .repository import InMemoryIncidentRepository


@lru_cache()
def get_incident_repository() -> InMemoryIncidentRepository:
    return InMemoryIncidentRepository()


@lru_cache()
def get_incident_feed() -> NTRoadReportClient:
    settings = get_settings()
    return NTRoadReportClient(
        url=settings.nt_road_report_url,
        timeout=settings.nt_road_report_timeout_s,
    )


@lru_cache()
def get_incident_refresher() -> IncidentRefresher:
    settings = get_settings()
    return IncidentRefresher(
        get_incident_feed(),
        get_incident_repository(),
        interval_s=settings.incident_refresh_interval_s,
    )
