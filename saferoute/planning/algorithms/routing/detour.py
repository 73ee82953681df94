"""
Detour synthesis

Single-shot heuristic used when the best ranked route still crosses a
critical hazard:

1. take the naive lat/lng midpoint of origin and destination
2. pick the incident closest to that midpoint
3. project a waypoint ``offset_m`` (2 km) from that incident, perpendicular
   (bearing + 90) to the origin -> destination bearing
4. ask the path source for a route through the existing waypoints plus the
   new one and analyze it

No iteration and no multi-hazard avoidance. The midpoint is invalid across
the antimeridian and near the poles.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence, Tuple

from ..base import AlgorithmBase, AlgorithmResult, AlgorithmStatus
from . import geo
from .hazard_proximity import HazardProximityAnalyzer
from .types import Coordinate, Incident, PathSource, RankedRoute

logger = logging.getLogger(__name__)

DETOUR_OFFSET_M = 2000.0


class DetourSynthesizer(AlgorithmBase):
    """
    Perpendicular-offset detour around the most disruptive incident.

    ``synthesize_waypoint`` is pure; ``try_synthesize_detour`` also calls the
    path source and never raises.
    """

    def __init__(self, params: Dict[str, Any] = None, analyzer: HazardProximityAnalyzer = None):
        super().__init__(params)
        self._analyzer = analyzer or HazardProximityAnalyzer()

    def get_default_params(self) -> Dict[str, Any]:
        return {
            "offset_m": DETOUR_OFFSET_M,
            "perpendicular_offset_deg": 90.0,
        }

    def validate_input(self, problem: Dict[str, Any]) -> Tuple[bool, str]:
        for key in ("origin", "destination", "incidents"):
            if key not in problem:
                return False, f"missing {key}"
        return True, ""

    def solve(self, problem: Dict[str, Any]) -> AlgorithmResult:
        waypoint = self.synthesize_waypoint(
            problem["origin"], problem["destination"], problem["incidents"]
        )
        return AlgorithmResult(
            status=AlgorithmStatus.SUCCESS if waypoint else AlgorithmStatus.INFEASIBLE,
            solution=waypoint,
            metrics={"incidents": len(problem["incidents"])},
            trace={},
            time_ms=0,
        )

    def most_disruptive_incident(
        self,
        origin: Coordinate,
        destination: Coordinate,
        incidents: Sequence[Incident],
    ) -> Optional[Incident]:
        """Incident closest to the origin/destination midpoint; first wins on ties."""
        midpoint = geo.naive_midpoint(origin, destination)
        closest: Optional[Incident] = None
        best = float("inf")
        for incident in incidents:
            d = geo.distance(midpoint, incident.location)
            if d < best:
                best = d
                closest = incident
        return closest

    def synthesize_waypoint(
        self,
        origin: Coordinate,
        destination: Coordinate,
        incidents: Sequence[Incident],
    ) -> Optional[Coordinate]:
        if not incidents:
            return None

        target = self.most_disruptive_incident(origin, destination, incidents)
        if target is None:
            return None

        heading = geo.bearing(origin, destination)
        perpendicular = (heading + self.params["perpendicular_offset_deg"]) % 360
        waypoint = geo.destination_point(target.location, self.params["offset_m"], perpendicular)
        self.logger.info(
            f"detour waypoint {waypoint.latitude:.5f},{waypoint.longitude:.5f} "
            f"around incident {target.id} (bearing {perpendicular:.1f})"
        )
        return waypoint

    async def try_synthesize_detour(
        self,
        path_source: PathSource,
        origin: Coordinate,
        destination: Coordinate,
        incidents_to_avoid: Sequence[Incident],
        existing_waypoints: Sequence[Coordinate] = (),
    ) -> Optional[RankedRoute]:
        """
        Request one candidate through a synthesized detour waypoint.

        Returns the analyzed route (hazardous or not; the caller decides
        whether to surface it) or None when no waypoint could be derived or
        anything failed along the way.
        """
        try:
            waypoint = self.synthesize_waypoint(origin, destination, incidents_to_avoid)
            if waypoint is None:
                return None

            paths = await path_source.fetch_routes(
                origin, destination, [*existing_waypoints, waypoint]
            )
            if not paths:
                return None

            path = paths[0]
            analysis = self._analyzer.analyze(path.geometry, incidents_to_avoid)
            return RankedRoute(path=path, analysis=analysis, is_detour=True)
        except Exception as e:
            self.logger.error(f"detour calculation failed: {e}", exc_info=True)
            return None
