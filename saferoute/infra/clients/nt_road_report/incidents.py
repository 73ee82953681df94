"""
NT Road Report obstruction feed client

Fetches current road obstructions for the Northern Territory and maps
them onto ``Incident``. Feed failures yield an empty list so a refresh
never takes the service down.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

import httpx

from saferoute.planning.algorithms.routing.types import (
    Coordinate,
    Incident,
    IncidentStatus,
    IncidentType,
    SeverityLevel,
)

logger = logging.getLogger(__name__)

NT_ROAD_REPORT_URL = "https://roadreport.nt.gov.au/api/Obstruction/GetAll"
DEFAULT_TIMEOUT = 10.0

# Checked in order; first keyword hit wins.
_TYPE_KEYWORDS: List[tuple[IncidentType, tuple[str, ...]]] = [
    (IncidentType.ROAD_CLOSURE, ("road closed", "closure")),
    (IncidentType.FLOOD, ("flood", "water over")),
    (IncidentType.ACCIDENT, ("accident", "crash", "incident")),
    (IncidentType.BUSHFIRE, ("fire", "bushfire")),
    (IncidentType.CONSTRUCTION, ("construction", "roadworks", "works")),
    (IncidentType.WEATHER, ("weather", "storm", "cyclone")),
    (IncidentType.TRAFFIC, ("traffic", "congestion", "delay")),
    (IncidentType.HAZARD, ("restriction", "permit", "hazard", "danger", "warning")),
]

_SEVERITY_KEYWORDS: List[tuple[SeverityLevel, tuple[str, ...]]] = [
    (SeverityLevel.EXTREME, ("road closed", "closure")),
    (SeverityLevel.CRITICAL, ("flood", "emergency")),
    (SeverityLevel.HIGH, ("permit", "4wd only")),
    (SeverityLevel.MODERATE, ("restriction", "weight")),
    (SeverityLevel.LOW, ("caution", "advisory")),
    (SeverityLevel.EXTREME, ("extreme", "critical")),
    (SeverityLevel.HIGH, ("high", "major")),
    (SeverityLevel.MODERATE, ("moderate", "medium")),
    (SeverityLevel.LOW, ("low", "minor")),
]


def map_incident_type(raw: Optional[str]) -> IncidentType:
    if not raw:
        return IncidentType.OTHER
    text = raw.lower()
    for incident_type, keywords in _TYPE_KEYWORDS:
        if any(k in text for k in keywords):
            return incident_type
    return IncidentType.OTHER


def map_severity(raw: Any) -> SeverityLevel:
    if raw is None or raw == "":
        return SeverityLevel.MODERATE
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return SeverityLevel(min(max(int(raw), 1), 5))
    text = str(raw).lower()
    for level, keywords in _SEVERITY_KEYWORDS:
        if any(k in text for k in keywords):
            return level
    return SeverityLevel.MODERATE


def map_status(raw: Optional[str]) -> IncidentStatus:
    if not raw:
        return IncidentStatus.ACTIVE
    text = raw.lower()
    if text == "current":
        return IncidentStatus.ACTIVE
    if any(k in text for k in ("resolved", "cleared", "completed")):
        return IncidentStatus.RESOLVED
    if any(k in text for k in ("monitor", "watch")):
        return IncidentStatus.MONITORING
    if any(k in text for k in ("unverified", "pending")):
        return IncidentStatus.UNVERIFIED
    return IncidentStatus.ACTIVE


def _extract_location(item: dict) -> Optional[Coordinate]:
    start = item.get("startPoint")
    if isinstance(start, list) and len(start) == 2:
        # startPoint is [lat, lng]
        return Coordinate(latitude=float(start[0]), longitude=float(start[1]))

    geometry = item.get("geometry")
    coords = geometry.get("coordinates") if isinstance(geometry, dict) else None
    if isinstance(coords, list) and len(coords) >= 2:
        # GeoJSON is [lng, lat]
        return Coordinate(latitude=float(coords[1]), longitude=float(coords[0]))

    if item.get("latitude") and item.get("longitude"):
        return Coordinate(latitude=float(item["latitude"]), longitude=float(item["longitude"]))

    loc = item.get("location")
    if isinstance(loc, dict):
        return Coordinate(
            latitude=float(loc.get("lat", loc.get("latitude"))),
            longitude=float(loc.get("lng", loc.get("longitude"))),
        )
    return None


def _parse_time(raw: Any) -> Optional[datetime]:
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return None
    # stored as naive UTC, like datetime.utcnow()
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_incident(item: dict, index: int) -> Optional[Incident]:
    """Map one feed item; None when it carries no usable location."""
    location = _extract_location(item)
    if location is None:
        return None

    obstruction = item.get("obstructionType")
    restriction = item.get("restrictionType")
    road = item.get("roadName")

    title = f"{obstruction or 'Incident'} on {road}" if road else (obstruction or "Road Incident")
    description = " - ".join(
        part for part in (
            item.get("comment"),
            f"Location: {item['locationComment']}" if item.get("locationComment") else None,
        ) if part
    ) or "No details available"

    now = datetime.utcnow()
    reported_at = _parse_time(item.get("dateFrom") or item.get("dateActive")) or now
    updated_at = _parse_time(item.get("dateLastUpdated") or item.get("dateActive")) or now
    incident_id = item.get("obstructionId") or item.get("recordId")

    return Incident(
        id=str(incident_id) if incident_id is not None else f"nt-{index}-{int(now.timestamp() * 1000)}",
        type=map_incident_type(obstruction or restriction),
        severity=map_severity(restriction or obstruction),
        status=map_status(item.get("status")),
        location=location,
        title=title,
        description=description,
        reported_at=reported_at,
        updated_at=updated_at,
        source="api",
        metadata={
            "road_name": road,
            "obstruction_type": obstruction,
            "restriction_type": restriction,
            "obstruction_type_code": item.get("obstructionTypeCode"),
            "restriction_type_code": item.get("restrictionTypeCode"),
            "comment": item.get("comment"),
            "location_comment": item.get("locationComment"),
        },
    )


def parse_feed(data: Any) -> List[Incident]:
    """Accepts ``{response|features|incidents|items: [...]}`` or a bare list."""
    if isinstance(data, dict):
        items = (
            data.get("response") or data.get("features")
            or data.get("incidents") or data.get("items") or []
        )
    else:
        items = data or []

    if not isinstance(items, list):
        logger.warning("NT Road Report data is not in expected format")
        return []

    incidents: List[Incident] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        try:
            incident = parse_incident(item, index)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"skipping unparseable NT incident #{index}: {e}")
            continue
        if incident is not None:
            incidents.append(incident)

    logger.info(f"parsed {len(incidents)} incidents from NT Road Report")
    return incidents


class NTRoadReportClient:
    """Async NT Road Report client"""

    def __init__(
        self,
        url: str = NT_ROAD_REPORT_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def fetch_incidents(self) -> List[Incident]:
        headers = {"Accept": "application/json", "User-Agent": "SafeMap/1.0"}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url, headers=headers)
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"NT Road Report fetch failed: {e}")
            return []
        return parse_feed(data)
