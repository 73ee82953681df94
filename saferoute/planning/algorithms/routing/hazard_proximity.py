"""
Hazard proximity analysis

Classifies every incident against a route polyline:

- critical: nearest vertex within ``critical_buffer_m`` (500 m). Any
  critical incident marks the route as hazardous.
- warning: nearest vertex within ``warning_buffer_m`` (2000 m).
- beyond the warning buffer: avoided.

score = clamp(100 - 30 * critical - 10 * warning, 0, 100)

Only active/monitoring incidents take part; resolved and unverified
incidents are skipped entirely.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from ..base import AlgorithmBase, AlgorithmResult, AlgorithmStatus, clamp
from .geo import min_vertex_distance
from .types import Coordinate, HazardAnalysis, Incident

logger = logging.getLogger(__name__)

CRITICAL_BUFFER_M = 500.0
WARNING_BUFFER_M = 2000.0


class HazardProximityAnalyzer(AlgorithmBase):
    """
    Route/incident proximity classifier.

    Example:
    ```python
    analyzer = HazardProximityAnalyzer()
    analysis = analyzer.analyze(path.geometry, incidents)
    if analysis.has_hazards:
        ...
    ```
    """

    def get_default_params(self) -> Dict[str, Any]:
        return {
            "critical_buffer_m": CRITICAL_BUFFER_M,
            "warning_buffer_m": WARNING_BUFFER_M,
            "critical_penalty": 30,
            "warning_penalty": 10,
        }

    def validate_input(self, problem: Dict[str, Any]) -> Tuple[bool, str]:
        if "geometry" not in problem:
            return False, "missing geometry"
        if "incidents" not in problem:
            return False, "missing incidents"
        return True, ""

    def solve(self, problem: Dict[str, Any]) -> AlgorithmResult:
        analysis = self.analyze(problem["geometry"], problem["incidents"])
        return AlgorithmResult(
            status=AlgorithmStatus.SUCCESS,
            solution=analysis,
            metrics={
                "safety_score": analysis.safety_score,
                "critical": analysis.critical_count,
                "warning": analysis.warning_count,
                "avoided": analysis.avoided_count,
            },
            trace={"vertices": len(problem["geometry"])},
            time_ms=0,
        )

    def analyze(
        self,
        geometry: Sequence[Coordinate],
        incidents: Iterable[Incident],
    ) -> HazardAnalysis:
        """
        Classify incidents by their distance to the nearest route vertex.

        Empty geometry means no proximity at all: every scoring incident is
        counted as avoided and the score stays at 100. Input incident order
        is preserved in ``nearby_incidents``.
        """
        critical_buffer = self.params["critical_buffer_m"]
        warning_buffer = self.params["warning_buffer_m"]

        nearby: List[Incident] = []
        critical = 0
        warning = 0
        avoided = 0

        for incident in incidents:
            if not incident.counts_toward_safety:
                continue

            d = min_vertex_distance(incident.location, geometry)
            if d <= critical_buffer:
                critical += 1
                nearby.append(incident)
            elif d <= warning_buffer:
                warning += 1
                nearby.append(incident)
            else:
                avoided += 1

        score = clamp(
            100
            - self.params["critical_penalty"] * critical
            - self.params["warning_penalty"] * warning
        )

        return HazardAnalysis(
            has_hazards=critical > 0,
            nearby_incidents=nearby,
            avoided_count=avoided,
            safety_score=int(score),
            critical_count=critical,
            warning_count=warning,
        )
