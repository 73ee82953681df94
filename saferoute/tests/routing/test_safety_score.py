"""Unit tests for SafetyScoreComposer."""
from __future__ import annotations

import pytest

from saferoute.planning.algorithms import AlgorithmStatus
from saferoute.planning.algorithms.routing import (
    Coordinate,
    Incident,
    IncidentStatus,
    SafetyScoreComposer,
    SeverityLevel,
    destination_point,
    severity_weight,
)

START = Coordinate(latitude=-12.46, longitude=130.85)
ROUTE = [START, destination_point(START, 5000, 90), destination_point(START, 10000, 90)]


def _near(meters: float = 1000) -> Coordinate:
    return destination_point(ROUTE[1], meters, 0)


def _incident(
    incident_id: str,
    severity: SeverityLevel = SeverityLevel.MODERATE,
    status: IncidentStatus = IncidentStatus.ACTIVE,
    location: Coordinate = None,
) -> Incident:
    return Incident(
        id=incident_id,
        severity=severity,
        status=status,
        location=location or _near(),
    )


def test_severity_weights() -> None:
    weights = [severity_weight(_incident("x", s)) for s in SeverityLevel]
    assert weights == [1, 2, 4, 7, 10]


def test_clean_route() -> None:
    detail = SafetyScoreComposer().score(ROUTE, [], 10_000)

    # 100 - 0.10 * (100 - 98) - 0.10 * (100 - 85)
    assert detail.overall == 98
    assert detail.factors.incident_density == 100
    assert detail.factors.severity_weight == 100
    assert detail.factors.route_length == 98
    assert detail.factors.weather_conditions == 85
    assert detail.recommendation == "safe"
    assert detail.nearby_incident_count == 0


def test_weather_factor_is_injectable() -> None:
    composer = SafetyScoreComposer()
    detail = composer.score(ROUTE, [], 10_000, weather_factor=0)

    assert detail.factors.weather_conditions == 0
    assert detail.overall == 90

    configured = SafetyScoreComposer({"weather_factor": 100}).score(ROUTE, [], 10_000)
    assert configured.factors.weather_conditions == 100


def test_non_finite_weather_factor_is_rejected() -> None:
    with pytest.raises(ValueError):
        SafetyScoreComposer().score(ROUTE, [], 10_000, weather_factor=float("nan"))


def test_single_extreme_incident() -> None:
    detail = SafetyScoreComposer().score(ROUTE, [_incident("a", SeverityLevel.EXTREME)], 10_000)

    # density capped at 100, severity 10 * 5 = 50
    assert detail.factors.incident_density == 0
    assert detail.factors.severity_weight == 50
    assert detail.overall == 41
    assert detail.recommendation == "caution"


def test_severity_penalty_caps_at_100() -> None:
    incidents = [_incident(str(n), SeverityLevel.EXTREME) for n in range(3)]
    detail = SafetyScoreComposer().score(ROUTE, incidents, 10_000)

    assert detail.factors.severity_weight == 0
    assert detail.overall == 18
    assert detail.recommendation == "avoid"


def test_only_active_incidents_are_penalized() -> None:
    incidents = [
        _incident("resolved", SeverityLevel.EXTREME, IncidentStatus.RESOLVED),
        _incident("pending", SeverityLevel.EXTREME, IncidentStatus.UNVERIFIED),
    ]
    detail = SafetyScoreComposer().score(ROUTE, incidents, 10_000)

    assert detail.overall == 98
    assert detail.nearby_incident_count == 2


def test_incidents_beyond_five_km_are_ignored() -> None:
    far = _incident("far", SeverityLevel.EXTREME, location=_near(8000))
    detail = SafetyScoreComposer().score(ROUTE, [far], 10_000)

    assert detail.nearby_incident_count == 0
    assert detail.overall == 98


def test_density_scales_with_route_length() -> None:
    long_route = [START, destination_point(START, 200_000, 90)]
    incident = _incident("a", SeverityLevel.LOW, location=destination_point(START, 1000, 0))
    detail = SafetyScoreComposer().score(long_route, [incident], 200_000)

    # 1 incident per 200 km -> 0.5 per 100 km -> x20 = 10
    assert detail.factors.incident_density == 90
    assert detail.factors.route_length == 60


def test_long_routes_bottom_out_length_factor() -> None:
    detail = SafetyScoreComposer().score(ROUTE, [], 750_000)
    assert detail.factors.route_length == 0


def test_zero_length_route_does_not_divide_by_zero() -> None:
    composer = SafetyScoreComposer()

    empty = composer.score([START], [], 0)
    assert empty.factors.incident_density == 100

    crowded = composer.score([START], [_incident("a", location=START)], 0)
    assert crowded.factors.incident_density == 0
    assert 0 <= crowded.overall <= 100



def test_negative_distance_is_a_zero_length_route() -> None:
    composer = SafetyScoreComposer()
    negative = composer.score(ROUTE, [_incident("a")], -100_000)

    assert negative == composer.score(ROUTE, [_incident("a")], 0)
    assert negative.factors.route_length == 100

def test_recommendation_thresholds() -> None:
    composer = SafetyScoreComposer()
    assert composer.recommendation(70) == "safe"
    assert composer.recommendation(69) == "caution"
    assert composer.recommendation(40) == "caution"
    assert composer.recommendation(39) == "avoid"


@pytest.mark.parametrize(
    "distance_m", [0, 1, 10_000, 499_999, 2_000_000, -100_000, float("nan"), float("-inf")]
)
def test_all_outputs_stay_in_range(distance_m: float) -> None:
    incidents = [_incident(str(n), s) for n, s in enumerate(SeverityLevel)]
    detail = SafetyScoreComposer().score(ROUTE, incidents, distance_m)

    assert 0 <= detail.overall <= 100
    for value in detail.factors.model_dump().values():
        assert 0 <= value <= 100


def test_run_wraps_score() -> None:
    result = SafetyScoreComposer().run({"geometry": ROUTE, "incidents": [], "distance_m": 10_000})

    assert result.status == AlgorithmStatus.SUCCESS
    assert result.solution.overall == 98
    assert result.metrics["overall"] == 98
    assert result.trace["recommendation"] == "safe"

    missing = SafetyScoreComposer().run({"geometry": ROUTE, "incidents": []})
    assert missing.status == AlgorithmStatus.ERROR
    assert missing.message == "missing distance_m"
