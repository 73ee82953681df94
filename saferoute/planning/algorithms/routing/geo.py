"""
Spherical geo math used by the safety and detour algorithms.

All functions take and return plain WGS84 degrees/meters on a sphere of
radius 6,371,000 m. No validation is done: NaN input propagates to NaN
output instead of raising.
"""
from __future__ import annotations

import math
from typing import List, Sequence

from .types import Coordinate, NoRoutesError, Path

EARTH_RADIUS_M = 6_371_000.0
FALLBACK_SPEED_KMH = 50.0


def distance(p1: Coordinate, p2: Coordinate) -> float:
    """Haversine great-circle distance in meters."""
    phi1 = math.radians(p1.latitude)
    phi2 = math.radians(p2.latitude)
    dphi = math.radians(p2.latitude - p1.latitude)
    dlambda = math.radians(p2.longitude - p1.longitude)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def bearing(p1: Coordinate, p2: Coordinate) -> float:
    """Initial compass bearing from p1 to p2, degrees in [0, 360)."""
    phi1 = math.radians(p1.latitude)
    phi2 = math.radians(p2.latitude)
    dlambda = math.radians(p2.longitude - p1.longitude)

    y = math.sin(dlambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlambda)
    theta = math.atan2(y, x)

    return (math.degrees(theta) + 360) % 360


def destination_point(origin: Coordinate, distance_m: float, bearing_deg: float) -> Coordinate:
    """
    Forward projection: the point reached from ``origin`` after travelling
    ``distance_m`` along the great circle with initial ``bearing_deg``.
    """
    phi1 = math.radians(origin.latitude)
    lambda1 = math.radians(origin.longitude)
    theta = math.radians(bearing_deg)
    delta = distance_m / EARTH_RADIUS_M

    phi2 = math.asin(
        math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(delta) * math.cos(theta)
    )
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )

    return Coordinate(latitude=math.degrees(phi2), longitude=math.degrees(lambda2))


def naive_midpoint(p1: Coordinate, p2: Coordinate) -> Coordinate:
    """Arithmetic mean of lat/lng. Not valid across the antimeridian or near the poles."""
    return Coordinate(
        latitude=(p1.latitude + p2.latitude) / 2,
        longitude=(p1.longitude + p2.longitude) / 2,
    )


def min_vertex_distance(point: Coordinate, geometry: Sequence[Coordinate]) -> float:
    """
    Smallest distance from ``point`` to any vertex of ``geometry``.

    Vertex distance, not segment distance: road-following polylines are
    dense enough that the difference is accepted. Empty geometry -> inf.
    """
    best = math.inf
    for vertex in geometry:
        d = distance(vertex, point)
        if d < best:
            best = d
    return best


def polyline_length(points: Sequence[Coordinate]) -> float:
    """Sum of haversine legs in meters."""
    total = 0.0
    for i in range(len(points) - 1):
        total += distance(points[i], points[i + 1])
    return total


def estimate_duration_s(distance_m: float, speed_kmh: float = FALLBACK_SPEED_KMH) -> float:
    """Travel time at a constant average speed."""
    if speed_kmh <= 0:
        raise ValueError("speed_kmh must be positive")
    return (distance_m / 1000) * (3600 / speed_kmh)


def straight_line_path(
    origin: Coordinate,
    destination: Coordinate,
    waypoints: Sequence[Coordinate] = (),
    speed_kmh: float = FALLBACK_SPEED_KMH,
) -> Path:
    """
    Fallback path through origin, waypoints and destination joined by
    straight legs. origin == destination yields a zero-length path.

    Raises:
        NoRoutesError: when the coordinates cannot form a geometry
            (non-finite latitude/longitude)
    """
    points: List[Coordinate] = [origin, *waypoints, destination]
    for p in points:
        if not (math.isfinite(p.latitude) and math.isfinite(p.longitude)):
            raise NoRoutesError(f"cannot build fallback geometry through {p}")

    total = polyline_length(points)
    return Path(
        geometry=tuple(points),
        distance_m=total,
        duration_s=estimate_duration_s(total, speed_kmh),
        source="straight_line",
    )
