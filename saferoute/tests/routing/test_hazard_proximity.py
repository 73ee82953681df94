"""Unit tests for HazardProximityAnalyzer.

Incidents are placed at known offsets from route vertices with
``destination_point`` so classification does not depend on hand-tuned
coordinates.
"""
from __future__ import annotations

from typing import List

from saferoute.planning.algorithms import AlgorithmStatus
from saferoute.planning.algorithms.routing import (
    Coordinate,
    HazardProximityAnalyzer,
    Incident,
    IncidentStatus,
    SeverityLevel,
    destination_point,
)

ORIGIN = Coordinate(latitude=-12.46, longitude=130.85)
DESTINATION = Coordinate(latitude=-12.50, longitude=130.90)
NEAR_INCIDENT = Coordinate(latitude=-12.479, longitude=130.871)


def _route() -> List[Coordinate]:
    """Three-vertex route from Darwin CBD towards Palmerston."""
    return [ORIGIN, NEAR_INCIDENT, DESTINATION]


def _incident(
    incident_id: str,
    location: Coordinate,
    severity: SeverityLevel = SeverityLevel.MODERATE,
    status: IncidentStatus = IncidentStatus.ACTIVE,
) -> Incident:
    return Incident(id=incident_id, location=location, severity=severity, status=status)


def _offset(meters: float, vertex: Coordinate = NEAR_INCIDENT) -> Coordinate:
    # southwest of the middle vertex, away from both end vertices
    return destination_point(vertex, meters, 225)


def test_no_incidents_is_perfect_score() -> None:
    analysis = HazardProximityAnalyzer().analyze(_route(), [])

    assert analysis.has_hazards is False
    assert analysis.safety_score == 100
    assert analysis.nearby_incidents == []
    assert analysis.avoided_count == 0


def test_empty_geometry_treats_everything_as_avoided() -> None:
    incidents = [_incident("a", NEAR_INCIDENT), _incident("b", ORIGIN)]
    analysis = HazardProximityAnalyzer().analyze([], incidents)

    assert analysis.has_hazards is False
    assert analysis.safety_score == 100
    assert analysis.avoided_count == 2


def test_inactive_incidents_never_count() -> None:
    incidents = [
        _incident("resolved", _offset(100), status=IncidentStatus.RESOLVED),
        _incident("unverified", _offset(100), status=IncidentStatus.UNVERIFIED),
    ]
    analysis = HazardProximityAnalyzer().analyze(_route(), incidents)

    assert analysis.has_hazards is False
    assert analysis.safety_score == 100
    assert analysis.nearby_incidents == []
    assert analysis.avoided_count == 0


def test_monitoring_incident_counts() -> None:
    incident = _incident("m", _offset(100), status=IncidentStatus.MONITORING)
    analysis = HazardProximityAnalyzer().analyze(_route(), [incident])

    assert analysis.has_hazards is True
    assert analysis.safety_score == 70


def test_warning_only_incidents() -> None:
    """Three warning-buffer incidents at mixed severity: 100 - 3 * 10."""
    incidents = [
        _incident("low", _offset(800), SeverityLevel.LOW),
        _incident("high", _offset(1200), SeverityLevel.HIGH),
        _incident("extreme", _offset(1800), SeverityLevel.EXTREME),
    ]
    analysis = HazardProximityAnalyzer().analyze(_route(), incidents)

    assert analysis.has_hazards is False
    assert analysis.safety_score == 70
    assert analysis.warning_count == 3
    assert analysis.critical_count == 0


def test_critical_incident_near_darwin_route() -> None:
    incident = _incident("crash", Coordinate(latitude=-12.48, longitude=130.87), SeverityLevel.EXTREME)
    analysis = HazardProximityAnalyzer().analyze(_route(), [incident])

    assert analysis.has_hazards is True
    assert analysis.safety_score <= 70
    assert analysis.nearby_incidents == [incident]


def test_classification_and_input_order() -> None:
    far = _incident("far", _offset(5000))
    warning = _incident("warning", _offset(1500))
    critical = _incident("critical", _offset(200))
    analysis = HazardProximityAnalyzer().analyze(_route(), [far, warning, critical])

    assert analysis.critical_count == 1
    assert analysis.warning_count == 1
    assert analysis.avoided_count == 1
    assert [i.id for i in analysis.nearby_incidents] == ["warning", "critical"]
    assert analysis.safety_score == 60


def test_score_is_clamped_at_zero() -> None:
    incidents = [_incident(str(n), _offset(50 + n * 10)) for n in range(5)]
    analysis = HazardProximityAnalyzer().analyze(_route(), incidents)

    assert analysis.critical_count == 5
    assert analysis.safety_score == 0


def test_analyze_is_idempotent() -> None:
    analyzer = HazardProximityAnalyzer()
    incidents = [_incident("a", _offset(300)), _incident("b", _offset(1500))]

    assert analyzer.analyze(_route(), incidents) == analyzer.analyze(_route(), incidents)


def test_custom_buffers() -> None:
    analyzer = HazardProximityAnalyzer({"critical_buffer_m": 100})
    analysis = analyzer.analyze(_route(), [_incident("a", _offset(300))])

    assert analysis.has_hazards is False
    assert analysis.warning_count == 1


def test_run_wraps_result() -> None:
    result = HazardProximityAnalyzer().run({"geometry": _route(), "incidents": []})
    assert result.status == AlgorithmStatus.SUCCESS
    assert result.metrics["safety_score"] == 100

    invalid = HazardProximityAnalyzer().run({"geometry": _route()})
    assert invalid.status == AlgorithmStatus.ERROR
