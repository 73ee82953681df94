"""Unit tests for RouteAlternativeRanker."""
from __future__ import annotations

from typing import List

import pytest

from saferoute.planning.algorithms import AlgorithmStatus
from saferoute.planning.algorithms.routing import (
    Coordinate,
    Incident,
    NoRoutesError,
    Path,
    RouteAlternativeRanker,
    destination_point,
    route_recommendation,
)

BASE = Coordinate(latitude=-12.46, longitude=130.85)


def _path(north_km: float, label: float) -> Path:
    """Short east-west path ``north_km`` north of BASE; ``label`` is its duration."""
    start = destination_point(BASE, north_km * 1000, 0)
    geometry = [start, destination_point(start, 3000, 90)]
    return Path(geometry=geometry, distance_m=3000, duration_s=label)


def _incident_on(path: Path, offset_m: float, incident_id: str) -> Incident:
    return Incident(id=incident_id, location=destination_point(path.geometry[0], offset_m, 180))


def _durations(ranked) -> List[float]:
    return [r.path.duration_s for r in ranked]


def test_empty_candidates_raise() -> None:
    with pytest.raises(NoRoutesError):
        RouteAlternativeRanker().rank([], [])


def test_no_incidents_keeps_source_order() -> None:
    paths = [_path(0, 1), _path(20, 2), _path(40, 3)]
    ranked = RouteAlternativeRanker().rank(paths, [])

    assert _durations(ranked) == [1, 2, 3]
    assert all(r.safety_score == 100 and not r.has_hazards for r in ranked)
    assert ranked[0].path is paths[0]


def test_hazard_free_routes_come_first() -> None:
    hazardous = _path(0, 1)
    warned = _path(20, 2)
    clean_a = _path(40, 3)
    clean_b = _path(60, 4)
    incidents = [
        _incident_on(hazardous, 100, "crash"),
        _incident_on(warned, 1500, "roadworks"),
    ]

    ranked = RouteAlternativeRanker().rank([hazardous, warned, clean_a, clean_b], incidents)

    assert _durations(ranked) == [3, 4, 2, 1]
    assert [r.safety_score for r in ranked] == [100, 100, 90, 70]
    seen_hazard = False
    for route in ranked:
        if route.has_hazards:
            seen_hazard = True
        else:
            assert not seen_hazard


def test_hazardous_routes_ordered_by_score() -> None:
    one = _path(0, 1)
    two = _path(20, 2)
    incidents = [
        _incident_on(one, 100, "a"),
        _incident_on(one, 200, "b"),
        _incident_on(two, 100, "c"),
    ]
    ranked = RouteAlternativeRanker().rank([one, two], incidents)

    assert _durations(ranked) == [2, 1]
    assert [r.safety_score for r in ranked] == [70, 40]


def test_per_route_labels_use_80_50() -> None:
    assert route_recommendation(80) == "safe"
    assert route_recommendation(79) == "caution"
    assert route_recommendation(50) == "caution"
    assert route_recommendation(49) == "avoid"

    path = _path(0, 1)
    ranked = RouteAlternativeRanker().rank([path], [_incident_on(path, 100, "a")])
    assert ranked[0].recommendation == "caution"


def test_run_wraps_ranking() -> None:
    one = _path(0, 1)
    two = _path(20, 2)
    result = RouteAlternativeRanker().run({"paths": [one, two], "incidents": [_incident_on(one, 100, "a")]})

    assert result.status == AlgorithmStatus.SUCCESS
    assert _durations(result.solution) == [2, 1]
    assert result.metrics["candidates"] == 2
    assert result.metrics["hazard_free"] == 1
    assert result.metrics["best_score"] == 100

    empty = RouteAlternativeRanker().run({"paths": [], "incidents": []})
    assert empty.status == AlgorithmStatus.ERROR
    assert empty.message == "no candidate paths"
