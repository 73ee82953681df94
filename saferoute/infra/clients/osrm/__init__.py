"""
OSRM routing client

Supplies candidate driving routes for route-safety evaluation.
"""
from .route_planning import OSRMClient

__all__ = ["OSRMClient"]
