"""
Route safety evaluation

1. Geo math - haversine distance, bearing, forward projection
2. Hazard proximity - critical/warning classification and 0-100 score
3. Safety score - composite density/severity/length/weather score
4. Ranking - hazard-free first, then by score
5. Detour - perpendicular-offset waypoint around the worst incident
"""

from .types import (
    Coordinate,
    Incident,
    IncidentType,
    IncidentStatus,
    SeverityLevel,
    SCORING_STATUSES,
    Path,
    PathSource,
    HazardAnalysis,
    RankedRoute,
    SafetyFactors,
    SafetyScoreDetail,
    SafeRouteResult,
    SafeRoutingError,
    PathSourceError,
    NoRoutesError,
    route_recommendation,
)
from .geo import (
    distance,
    bearing,
    destination_point,
    naive_midpoint,
    straight_line_path,
)
from .hazard_proximity import HazardProximityAnalyzer, CRITICAL_BUFFER_M, WARNING_BUFFER_M
from .safety_score import SafetyScoreComposer, severity_weight
from .route_ranker import RouteAlternativeRanker
from .detour import DetourSynthesizer
from .scoring_config import load_scoring_params

__all__ = [
    # types
    "Coordinate",
    "Incident",
    "IncidentType",
    "IncidentStatus",
    "SeverityLevel",
    "SCORING_STATUSES",
    "Path",
    "PathSource",
    "HazardAnalysis",
    "RankedRoute",
    "SafetyFactors",
    "SafetyScoreDetail",
    "SafeRouteResult",
    "SafeRoutingError",
    "PathSourceError",
    "NoRoutesError",
    "route_recommendation",
    # geo
    "distance",
    "bearing",
    "destination_point",
    "naive_midpoint",
    "straight_line_path",
    # algorithms
    "HazardProximityAnalyzer",
    "CRITICAL_BUFFER_M",
    "WARNING_BUFFER_M",
    "SafetyScoreComposer",
    "severity_weight",
    "RouteAlternativeRanker",
    "DetourSynthesizer",
    "load_scoring_params",
]
