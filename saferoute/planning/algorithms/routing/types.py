"""Route-safety shared types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, List, Literal, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """WGS84 point in decimal degrees."""
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class IncidentType(str, Enum):
    ROAD_CLOSURE = "road_closure"
    FLOOD = "flood"
    ACCIDENT = "accident"
    BUSHFIRE = "bushfire"
    CONSTRUCTION = "construction"
    HAZARD = "hazard"
    WEATHER = "weather"
    TRAFFIC = "traffic"
    OTHER = "other"


class SeverityLevel(IntEnum):
    LOW = 1
    MODERATE = 2
    HIGH = 3
    CRITICAL = 4
    EXTREME = 5


class IncidentStatus(str, Enum):
    ACTIVE = "active"
    MONITORING = "monitoring"
    RESOLVED = "resolved"
    UNVERIFIED = "unverified"


# Only these statuses feed safety penalties; the rest are display-only.
SCORING_STATUSES = frozenset({IncidentStatus.ACTIVE, IncidentStatus.MONITORING})


class Incident(BaseModel):
    id: str
    type: IncidentType = IncidentType.OTHER
    severity: SeverityLevel = SeverityLevel.MODERATE
    status: IncidentStatus = IncidentStatus.ACTIVE
    location: Coordinate
    title: str = ""
    description: str = ""
    reported_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None
    source: Literal["official", "user", "api"] = "api"
    radius_m: Optional[float] = Field(None, ge=0, description="affected area radius, meters")
    verified_by: Optional[str] = None
    estimated_clear_time: Optional[datetime] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def counts_toward_safety(self) -> bool:
        return self.status in SCORING_STATUSES


@dataclass(frozen=True)
class Path:
    """Candidate polyline returned by a path source."""
    geometry: Sequence[Coordinate]
    distance_m: float
    duration_s: float
    source: Literal["osrm", "straight_line"] = "osrm"

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000

    @property
    def duration_min(self) -> float:
        return self.duration_s / 60


@dataclass(frozen=True)
class HazardAnalysis:
    has_hazards: bool
    nearby_incidents: List[Incident]
    avoided_count: int
    safety_score: int
    critical_count: int = 0
    warning_count: int = 0


Recommendation = Literal["safe", "caution", "avoid"]


def route_recommendation(safety_score: float) -> Recommendation:
    """Per-route label used in the alternatives list (80/50 thresholds)."""
    if safety_score >= 80:
        return "safe"
    if safety_score >= 50:
        return "caution"
    return "avoid"


@dataclass(frozen=True)
class RankedRoute:
    path: Path
    analysis: HazardAnalysis
    is_detour: bool = False

    @property
    def has_hazards(self) -> bool:
        return self.analysis.has_hazards

    @property
    def safety_score(self) -> int:
        return self.analysis.safety_score

    @property
    def recommendation(self) -> Recommendation:
        return route_recommendation(self.analysis.safety_score)


class SafetyFactors(BaseModel):
    """All factors share the higher-is-better convention, 0-100."""
    incident_density: int
    severity_weight: int
    route_length: int
    weather_conditions: int


class SafetyScoreDetail(BaseModel):
    overall: int
    factors: SafetyFactors
    recommendation: Recommendation
    nearby_incident_count: int = 0


@dataclass
class SafeRouteResult:
    """Ranked alternatives plus the detailed breakdown of the primary."""
    routes: List[RankedRoute]
    safety_detail: SafetyScoreDetail
    detour_attempted: bool = False
    used_fallback: bool = False
    metadata: dict = field(default_factory=dict)

    @property
    def primary(self) -> RankedRoute:
        return self.routes[0]


class SafeRoutingError(RuntimeError):
    ...


class PathSourceError(SafeRoutingError):
    """Network, timeout or malformed response from the path source."""


class NoRoutesError(SafeRoutingError):
    """No geometry could be produced, not even a straight-line fallback."""


class PathSource(Protocol):
    """Anything that turns origin/waypoints/destination into candidate paths."""

    async def fetch_routes(
        self,
        origin: Coordinate,
        destination: Coordinate,
        waypoints: Sequence[Coordinate] = (),
        alternatives: int = 3,
    ) -> List[Path]:
        """Return 1..N candidates or raise PathSourceError."""
        ...
