"""Incident store, feed refresh and user reports"""

from .repository import InMemoryIncidentRepository
from .refresher import IncidentRefresher, IncidentFeed
from .schemas import IncidentFilter, IncidentStatistics, UserReport
from .router import router as incidents_router

__all__ = [
    "InMemoryIncidentRepository",
    "IncidentRefresher",
    "IncidentFeed",
    "IncidentFilter",
    "IncidentStatistics",
    "UserReport",
    "incidents_router",
]
