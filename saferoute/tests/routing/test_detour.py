"""Unit tests for DetourSynthesizer."""
from __future__ import annotations

import asyncio
from typing import List, Sequence

import pytest

from saferoute.planning.algorithms import AlgorithmStatus
from saferoute.planning.algorithms.routing import (
    Coordinate,
    DetourSynthesizer,
    Incident,
    IncidentStatus,
    Path,
    PathSourceError,
    SeverityLevel,
    bearing,
    destination_point,
    distance,
)

ORIGIN = Coordinate(latitude=-12.46, longitude=130.85)
DESTINATION = Coordinate(latitude=-12.50, longitude=130.90)
CRASH = Incident(
    id="crash",
    location=Coordinate(latitude=-12.48, longitude=130.87),
    severity=SeverityLevel.EXTREME,
    status=IncidentStatus.ACTIVE,
)


class _RecordingSource:
    """Path source stub returning canned paths and recording waypoints."""

    def __init__(self, paths: List[Path] = None, error: Exception = None) -> None:
        self.paths = paths or []
        self.error = error
        self.waypoints: List[List[Coordinate]] = []

    async def fetch_routes(
        self,
        origin: Coordinate,
        destination: Coordinate,
        waypoints: Sequence[Coordinate] = (),
        alternatives: int = 3,
    ) -> List[Path]:
        self.waypoints.append(list(waypoints))
        if self.error:
            raise self.error
        return self.paths


def test_no_incidents_no_waypoint() -> None:
    assert DetourSynthesizer().synthesize_waypoint(ORIGIN, DESTINATION, []) is None


def test_waypoint_is_2km_perpendicular_from_incident() -> None:
    waypoint = DetourSynthesizer().synthesize_waypoint(ORIGIN, DESTINATION, [CRASH])

    assert distance(CRASH.location, waypoint) == pytest.approx(2000, rel=0.01)
    expected = (bearing(ORIGIN, DESTINATION) + 90) % 360
    assert bearing(CRASH.location, waypoint) == pytest.approx(expected, abs=0.01)


def test_picks_incident_closest_to_midpoint() -> None:
    edge = Incident(id="edge", location=ORIGIN)
    middle = Incident(id="middle", location=Coordinate(latitude=-12.481, longitude=130.876))
    chosen = DetourSynthesizer().most_disruptive_incident(ORIGIN, DESTINATION, [edge, middle])
    assert chosen.id == "middle"


def test_ties_keep_first_incident() -> None:
    first = Incident(id="first", location=CRASH.location)
    second = Incident(id="second", location=CRASH.location)
    chosen = DetourSynthesizer().most_disruptive_incident(ORIGIN, DESTINATION, [first, second])
    assert chosen.id == "first"


def test_detour_requested_through_existing_waypoints() -> None:
    via = Coordinate(latitude=-12.47, longitude=130.86)
    far_away = destination_point(CRASH.location, 6000, 0)
    detour_path = Path(geometry=[ORIGIN, far_away, DESTINATION], distance_m=12_000, duration_s=900)
    source = _RecordingSource([detour_path])

    route = asyncio.run(
        DetourSynthesizer().try_synthesize_detour(source, ORIGIN, DESTINATION, [CRASH], [via])
    )

    assert route is not None
    assert route.is_detour is True
    assert route.has_hazards is False
    assert route.path is detour_path
    assert len(source.waypoints[0]) == 2
    assert source.waypoints[0][0] == via


def test_hazardous_detour_is_still_returned() -> None:
    through = Path(geometry=[ORIGIN, CRASH.location, DESTINATION], distance_m=8000, duration_s=600)
    route = asyncio.run(
        DetourSynthesizer().try_synthesize_detour(
            _RecordingSource([through]), ORIGIN, DESTINATION, [CRASH]
        )
    )
    assert route is not None
    assert route.has_hazards is True


def test_path_source_failure_is_swallowed() -> None:
    source = _RecordingSource(error=PathSourceError("timeout"))
    route = asyncio.run(
        DetourSynthesizer().try_synthesize_detour(source, ORIGIN, DESTINATION, [CRASH])
    )
    assert route is None


def test_unexpected_failure_is_swallowed() -> None:
    source = _RecordingSource(error=KeyError("routes"))
    route = asyncio.run(
        DetourSynthesizer().try_synthesize_detour(source, ORIGIN, DESTINATION, [CRASH])
    )
    assert route is None


def test_empty_incidents_skip_path_source() -> None:
    source = _RecordingSource()
    route = asyncio.run(
        DetourSynthesizer().try_synthesize_detour(source, ORIGIN, DESTINATION, [])
    )
    assert route is None
    assert source.waypoints == []


def test_run_wraps_waypoint() -> None:
    synthesizer = DetourSynthesizer()
    result = synthesizer.run({"origin": ORIGIN, "destination": DESTINATION, "incidents": [CRASH]})

    assert result.status == AlgorithmStatus.SUCCESS
    assert result.solution == synthesizer.synthesize_waypoint(ORIGIN, DESTINATION, [CRASH])
    assert result.metrics["incidents"] == 1

    nothing = synthesizer.run({"origin": ORIGIN, "destination": DESTINATION, "incidents": []})
    assert nothing.status == AlgorithmStatus.INFEASIBLE
    assert nothing.solution is None

    missing = synthesizer.run({"origin": ORIGIN, "destination": DESTINATION})
    assert missing.status == AlgorithmStatus.ERROR
