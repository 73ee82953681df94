"""
Route alternative ranking

Order: hazard-free routes first, then by descending safety score. The
sort is stable, so ties keep the path source's order.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from ..base import AlgorithmBase, AlgorithmResult, AlgorithmStatus
from .hazard_proximity import HazardProximityAnalyzer
from .types import Incident, NoRoutesError, Path, RankedRoute

logger = logging.getLogger(__name__)


def ranking_key(route: RankedRoute) -> Tuple[bool, int]:
    return (route.has_hazards, -route.safety_score)


class RouteAlternativeRanker(AlgorithmBase):
    """Analyze every candidate path and order them for presentation."""

    def __init__(self, params: Dict[str, Any] = None, analyzer: HazardProximityAnalyzer = None):
        super().__init__(params)
        self._analyzer = analyzer or HazardProximityAnalyzer()

    @property
    def analyzer(self) -> HazardProximityAnalyzer:
        return self._analyzer

    def get_default_params(self) -> Dict[str, Any]:
        return {}

    def validate_input(self, problem: Dict[str, Any]) -> Tuple[bool, str]:
        if not problem.get("paths"):
            return False, "no candidate paths"
        if "incidents" not in problem:
            return False, "missing incidents"
        return True, ""

    def solve(self, problem: Dict[str, Any]) -> AlgorithmResult:
        ranked = self.rank(problem["paths"], problem["incidents"])
        return AlgorithmResult(
            status=AlgorithmStatus.SUCCESS,
            solution=ranked,
            metrics={
                "candidates": len(ranked),
                "hazard_free": sum(1 for r in ranked if not r.has_hazards),
                "best_score": ranked[0].safety_score,
            },
            trace={},
            time_ms=0,
        )

    def rank(self, paths: Sequence[Path], incidents: Iterable[Incident]) -> List[RankedRoute]:
        """
        Raises:
            NoRoutesError: when ``paths`` is empty
        """
        if not paths:
            raise NoRoutesError("path source yielded no candidate routes")

        incidents = list(incidents)
        ranked: List[RankedRoute] = []
        for idx, path in enumerate(paths, start=1):
            analysis = self._analyzer.analyze(path.geometry, incidents)
            ranked.append(RankedRoute(path=path, analysis=analysis))
            self.logger.info(
                f"route {idx}: {path.distance_km:.2f}km, {path.duration_min:.1f}min, "
                f"safety={analysis.safety_score}/100, "
                f"hazards={'YES' if analysis.has_hazards else 'NO'}, "
                f"nearby={len(analysis.nearby_incidents)}"
            )

        ranked.sort(key=ranking_key)
        return ranked
