"""
Safe route planning service

Path source + safety scoring with a fallback chain:
1. OSRM alternatives
2. OSRM single basic route
3. straight-line estimate at the fallback speed

Architecture: Router -> Service -> Algorithm / External API
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from saferoute.core.config import Settings, get_settings
from saferoute.infra.clients.osrm import OSRMClient
from saferoute.planning.algorithms.routing import (
    Coordinate,
    DetourSynthesizer,
    HazardProximityAnalyzer,
    Incident,
    Path,
    PathSource,
    RankedRoute,
    RouteAlternativeRanker,
    SafeRouteResult,
    SafetyScoreComposer,
    SafetyScoreDetail,
    load_scoring_params,
    straight_line_path,
)

logger = logging.getLogger(__name__)


class SafeRoutingService:
    """
    Safe route calculation.

    Holds no per-request state: incidents are passed in on every call and
    never mutated, so one instance may serve concurrent requests.
    """

    def __init__(
        self,
        path_source: PathSource,
        max_alternatives: int = 3,
        fallback_speed_kmh: float = 50.0,
        weather_factor: Optional[float] = None,
        scoring_params: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> None:
        scoring_params = scoring_params or {}
        self._path_source = path_source
        self._max_alternatives = max_alternatives
        self._fallback_speed_kmh = fallback_speed_kmh

        analyzer = HazardProximityAnalyzer(scoring_params.get("hazard_proximity"))
        self._ranker = RouteAlternativeRanker(scoring_params.get("route_ranker"), analyzer=analyzer)
        self._detour = DetourSynthesizer(scoring_params.get("detour"), analyzer=analyzer)

        composer_params = dict(scoring_params.get("safety_score") or {})
        if weather_factor is not None:
            composer_params["weather_factor"] = weather_factor
        self._composer = SafetyScoreComposer(composer_params)

    async def calculate_safe_routes(
        self,
        origin: Coordinate,
        destination: Coordinate,
        incidents: Iterable[Incident],
        waypoints: Sequence[Coordinate] = (),
    ) -> List[RankedRoute]:
        """
        Ranked route alternatives, primary first.

        Raises:
            NoRoutesError: not even a straight-line path could be built
        """
        result = await self.plan(origin, destination, incidents, waypoints)
        return result.routes

    async def plan(
        self,
        origin: Coordinate,
        destination: Coordinate,
        incidents: Iterable[Incident],
        waypoints: Sequence[Coordinate] = (),
    ) -> SafeRouteResult:
        """
        Full calculation: ranked alternatives plus the detailed safety
        breakdown of the primary route.
        """
        incidents = list(incidents)
        logger.info(
            f"safe route request: ({origin.latitude},{origin.longitude}) -> "
            f"({destination.latitude},{destination.longitude}), "
            f"waypoints={len(waypoints)}, incidents={len(incidents)}"
        )

        paths, used_fallback = await self._candidate_paths(origin, destination, waypoints)
        ranked = self._ranker.rank(paths, incidents)

        detour_attempted = False
        if ranked[0].has_hazards:
            detour_attempted = True
            logger.warning("best route intersects hazards, attempting detour")
            detour = await self._detour.try_synthesize_detour(
                self._path_source,
                origin,
                destination,
                ranked[0].analysis.nearby_incidents,
                waypoints,
            )
            if detour is not None and not detour.has_hazards:
                logger.info("detour route found without hazards")
                ranked.insert(0, detour)
            elif detour is not None:
                logger.info("detour route still hazardous, discarded")

        primary = ranked[0]
        detail = self.calculate_route_safety(
            primary.path.geometry, incidents, primary.path.distance_m
        )
        logger.info(
            f"returning {len(ranked)} route alternatives; primary "
            f"{primary.path.distance_km:.2f}km, safety {primary.safety_score}/100, "
            f"detail {detail.overall}/100 ({detail.recommendation})"
        )
        return SafeRouteResult(
            routes=ranked,
            safety_detail=detail,
            detour_attempted=detour_attempted,
            used_fallback=used_fallback,
        )

    def calculate_route_safety(
        self,
        geometry: Sequence[Coordinate],
        incidents: Iterable[Incident],
        distance_m: float,
        weather_factor: Optional[float] = None,
    ) -> SafetyScoreDetail:
        return self._composer.score(geometry, list(incidents), distance_m, weather_factor)

    async def _candidate_paths(
        self,
        origin: Coordinate,
        destination: Coordinate,
        waypoints: Sequence[Coordinate],
    ) -> tuple[List[Path], bool]:
        # Step 1: alternatives
        try:
            paths = await self._path_source.fetch_routes(
                origin, destination, waypoints, self._max_alternatives
            )
            if paths:
                return list(paths)[: self._max_alternatives], False
            logger.warning("path source returned no candidates")
        except Exception as e:
            logger.warning(f"path source alternatives failed: {e}")

        # Step 2: single basic route, when the source offers one
        fetch_basic = getattr(self._path_source, "fetch_basic_route", None)
        if fetch_basic is not None:
            try:
                return [await fetch_basic(origin, destination, waypoints)], True
            except Exception as e:
                logger.warning(f"path source basic route failed: {e}")

        # Step 3: straight line
        logger.warning("using straight-line fallback route")
        return [straight_line_path(origin, destination, waypoints, self._fallback_speed_kmh)], True


_routing_service: Optional[SafeRoutingService] = None


def build_routing_service(settings: Settings) -> SafeRoutingService:
    path_source = OSRMClient(
        base_url=settings.osrm_base_url,
        profile=settings.osrm_profile,
        timeout=settings.osrm_timeout_s,
        basic_timeout=settings.osrm_basic_timeout_s,
    )
    return SafeRoutingService(
        path_source,
        max_alternatives=settings.max_alternatives,
        fallback_speed_kmh=settings.fallback_speed_kmh,
        weather_factor=settings.weather_factor,
        scoring_params=load_scoring_params(settings.scoring_config_path),
    )


def get_routing_service() -> SafeRoutingService:
    """Process-wide service instance"""
    global _routing_service
    if _routing_service is None:
        _routing_service = build_routing_service(get_settings())
    return _routing_service
