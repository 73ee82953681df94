"""Safe route planning service module"""

from .service import SafeRoutingService, build_routing_service, get_routing_service
from .schemas import (
    SafeRouteRequest,
    SafeRouteResponse,
    RouteAlternativeResponse,
    RouteSafetyRequest,
)
from .router import router as routing_router

__all__ = [
    "SafeRoutingService",
    "build_routing_service",
    "get_routing_service",
    "SafeRouteRequest",
    "SafeRouteResponse",
    "RouteAlternativeResponse",
    "RouteSafetyRequest",
    "routing_router",
]
