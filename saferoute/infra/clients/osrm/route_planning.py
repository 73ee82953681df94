"""
OSRM route service client

Driving routes with alternatives, GeoJSON geometry.
API docs: https://project-osrm.org/docs/v5.24.0/api/#route-service
"""
from __future__ import annotations

import logging
import httpx
from typing import Any, Dict, List, Optional, Sequence

from saferoute.planning.algorithms.routing.types import Coordinate, Path, PathSourceError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://router.project-osrm.org"
DEFAULT_TIMEOUT = 15.0
BASIC_ROUTE_TIMEOUT = 10.0
MAX_ALTERNATIVES = 3


def _format_coordinates(points: Sequence[Coordinate]) -> str:
    """OSRM expects ``lng,lat`` pairs joined by ``;``"""
    return ";".join(f"{p.longitude},{p.latitude}" for p in points)


def _parse_route_response(data: Any) -> List[Path]:
    """Convert an OSRM route response into Path objects."""
    if not isinstance(data, dict):
        raise PathSourceError(f"unexpected OSRM response body: {type(data).__name__}")
    code = data.get("code")
    if code != "Ok":
        raise PathSourceError(f"OSRM returned code: {code} ({data.get('message', '')})")

    routes = data.get("routes") or []
    if not routes:
        raise PathSourceError("No route found by OSRM")

    paths: List[Path] = []
    for route in routes:
        try:
            coords = route["geometry"]["coordinates"]
            geometry = tuple(
                Coordinate(latitude=float(lat), longitude=float(lng))
                for lng, lat in coords
            )
            paths.append(Path(
                geometry=geometry,
                distance_m=float(route.get("distance", 0)),
                duration_s=float(route.get("duration", 0)),
                source="osrm",
            ))
        except (KeyError, TypeError, ValueError) as e:
            raise PathSourceError(f"malformed OSRM route: {e}") from e
    return paths


class OSRMClient:
    """
    Async OSRM client implementing the ``PathSource`` protocol.

    ``transport`` is passed straight to ``httpx.AsyncClient`` so tests can
    plug in ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        profile: str = "driving",
        timeout: float = DEFAULT_TIMEOUT,
        basic_timeout: float = BASIC_ROUTE_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._profile = profile
        self._timeout = timeout
        self._basic_timeout = basic_timeout
        self._transport = transport

    def _route_url(self, points: Sequence[Coordinate]) -> str:
        return f"{self._base_url}/route/v1/{self._profile}/{_format_coordinates(points)}"

    async def _get(self, url: str, params: Dict[str, str], timeout: float) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            logger.warning("OSRM request failed", extra={"error": str(e)})
            raise PathSourceError(f"OSRM request failed: {e}") from e
        except ValueError as e:
            raise PathSourceError(f"OSRM returned invalid JSON: {e}") from e

    async def fetch_routes(
        self,
        origin: Coordinate,
        destination: Coordinate,
        waypoints: Sequence[Coordinate] = (),
        alternatives: int = MAX_ALTERNATIVES,
    ) -> List[Path]:
        """
        Up to ``alternatives`` driving routes through the waypoints.

        Raises:
            PathSourceError: HTTP failure, timeout, non-Ok code, no routes
        """
        points = [origin, *waypoints, destination]
        logger.info(
            "requesting OSRM alternatives",
            extra={"points": len(points), "alternatives": alternatives},
        )
        params = {
            "geometries": "geojson",
            "overview": "full",
            "steps": "false",
            "alternatives": "true",
            "number": str(alternatives),
        }
        data = await self._get(self._route_url(points), params, self._timeout)
        paths = _parse_route_response(data)
        logger.info(f"received {len(paths)} route alternatives from OSRM")
        return paths[:alternatives]

    async def fetch_basic_route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        waypoints: Sequence[Coordinate] = (),
    ) -> Path:
        """Single route without alternatives, shorter timeout."""
        points = [origin, *waypoints, destination]
        params = {"geometries": "geojson", "overview": "full"}
        data = await self._get(self._route_url(points), params, self._basic_timeout)
        return _parse_route_response(data)[0]
