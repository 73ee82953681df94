"""
Detailed route safety score

Combines four penalties/factors into a 0-100 composite:

1. incident density: active/monitoring incidents within 5 km of the route,
   normalized per 100 km and scaled x20 (capped at 100)
2. severity weight: sum of per-severity weights x5 (capped at 100)
3. route length: 100 at 0 km falling linearly to 0 at 500 km
4. weather conditions: supplied by the caller (placeholder 85)

overall = 100 - 0.35*density - 0.45*severity
              - 0.10*(100 - length) - 0.10*(100 - weather)

Reported factors are complements of the penalties so every factor reads
"higher is better". The recommendation here uses 70/40 thresholds, which
differ from the 80/50 per-route labels on purpose.
"""
from __future__ import annotations

import math
import logging
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from ..base import AlgorithmBase, AlgorithmResult, AlgorithmStatus, clamp
from .geo import min_vertex_distance
from .types import (
    Coordinate,
    Incident,
    Recommendation,
    SafetyFactors,
    SafetyScoreDetail,
    SeverityLevel,
)

logger = logging.getLogger(__name__)

NEARBY_RADIUS_M = 5000.0
DEFAULT_WEATHER_FACTOR = 85.0

SEVERITY_WEIGHTS: Dict[SeverityLevel, int] = {
    SeverityLevel.LOW: 1,
    SeverityLevel.MODERATE: 2,
    SeverityLevel.HIGH: 4,
    SeverityLevel.CRITICAL: 7,
    SeverityLevel.EXTREME: 10,
}
DEFAULT_SEVERITY_WEIGHT = 2


def severity_weight(incident: Incident) -> int:
    return SEVERITY_WEIGHTS.get(incident.severity, DEFAULT_SEVERITY_WEIGHT)


class SafetyScoreComposer(AlgorithmBase):
    """
    Composite safety scorer for a single route.

    The weather factor is injectable per call; when omitted the
    ``weather_factor`` param is used.
    """

    def get_default_params(self) -> Dict[str, Any]:
        return {
            "nearby_radius_m": NEARBY_RADIUS_M,
            "density_scale": 20,
            "severity_scale": 5,
            "max_preferred_distance_m": 500_000,
            "weather_factor": DEFAULT_WEATHER_FACTOR,
            "weights": {
                "incident_density": 0.35,
                "severity_weight": 0.45,
                "route_length": 0.10,
                "weather_conditions": 0.10,
            },
            "safe_threshold": 70,
            "caution_threshold": 40,
        }

    def validate_input(self, problem: Dict[str, Any]) -> Tuple[bool, str]:
        for key in ("geometry", "incidents", "distance_m"):
            if key not in problem:
                return False, f"missing {key}"
        return True, ""

    def solve(self, problem: Dict[str, Any]) -> AlgorithmResult:
        detail = self.score(
            problem["geometry"],
            problem["incidents"],
            problem["distance_m"],
            weather_factor=problem.get("weather_factor"),
        )
        return AlgorithmResult(
            status=AlgorithmStatus.SUCCESS,
            solution=detail,
            metrics={"overall": detail.overall},
            trace={"recommendation": detail.recommendation},
            time_ms=0,
        )

    def score(
        self,
        geometry: Sequence[Coordinate],
        incidents: Iterable[Incident],
        distance_m: float,
        weather_factor: float | None = None,
    ) -> SafetyScoreDetail:
        """
        Score one route.

        Args:
            geometry: route polyline
            incidents: full incident snapshot; filtering happens here
            distance_m: route length in meters. Negative and non-finite
                values are treated as a zero-length route.
            weather_factor: 0-100, higher is better

        Returns:
            SafetyScoreDetail with overall score, factors and recommendation
        """
        if weather_factor is None:
            weather_factor = self.params["weather_factor"]
        if not math.isfinite(weather_factor):
            raise ValueError(f"weather_factor must be finite, got {weather_factor}")
        weather_factor = clamp(weather_factor)

        if not math.isfinite(distance_m) or distance_m < 0:
            distance_m = 0.0

        nearby = self._incidents_near_route(geometry, incidents)
        active = [i for i in nearby if i.counts_toward_safety]

        density_penalty = self._density_penalty(len(active), distance_m)
        severity_penalty = self._severity_penalty(active)
        length_factor = self._route_length_factor(distance_m)

        weights = self.params["weights"]
        overall = clamp(
            100
            - weights["incident_density"] * density_penalty
            - weights["severity_weight"] * severity_penalty
            - weights["route_length"] * (100 - length_factor)
            - weights["weather_conditions"] * (100 - weather_factor)
        )
        overall_int = int(round(overall))

        detail = SafetyScoreDetail(
            overall=overall_int,
            factors=SafetyFactors(
                incident_density=int(round(100 - density_penalty)),
                severity_weight=int(round(100 - severity_penalty)),
                route_length=int(round(length_factor)),
                weather_conditions=int(round(weather_factor)),
            ),
            recommendation=self.recommendation(overall_int),
            nearby_incident_count=len(nearby),
        )
        self.logger.debug(
            f"safety score: overall={detail.overall}, nearby={len(nearby)}, active={len(active)}"
        )
        return detail

    def recommendation(self, overall: float) -> Recommendation:
        if overall >= self.params["safe_threshold"]:
            return "safe"
        if overall >= self.params["caution_threshold"]:
            return "caution"
        return "avoid"

    def _incidents_near_route(
        self,
        geometry: Sequence[Coordinate],
        incidents: Iterable[Incident],
    ) -> List[Incident]:
        radius = self.params["nearby_radius_m"]
        return [i for i in incidents if min_vertex_distance(i.location, geometry) <= radius]

    def _density_penalty(self, active_count: int, distance_m: float) -> float:
        """Incidents per 100 km, scaled; a zero-length route with any active incident maxes out."""
        if active_count == 0:
            return 0.0
        if distance_m <= 0:
            return 100.0
        per_100km = active_count / distance_m * 100_000
        return min(100.0, per_100km * self.params["density_scale"])

    def _severity_penalty(self, active: Sequence[Incident]) -> float:
        total = sum(severity_weight(i) for i in active)
        return min(100.0, total * self.params["severity_scale"])

    def _route_length_factor(self, distance_m: float) -> float:
        return max(0.0, 100 - distance_m / self.params["max_preferred_distance_m"] * 100)
