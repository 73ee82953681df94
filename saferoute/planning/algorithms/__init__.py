"""
Route-safety algorithm module

Module layout:
- base.py   algorithm base class and result envelope
- routing/  hazard proximity, safety scoring, ranking and detour synthesis
"""

from .base import AlgorithmBase, AlgorithmResult, AlgorithmStatus

from .routing import (
    HazardProximityAnalyzer,
    SafetyScoreComposer,
    RouteAlternativeRanker,
    DetourSynthesizer,
)

__all__ = [
    "AlgorithmBase",
    "AlgorithmResult",
    "AlgorithmStatus",
    "HazardProximityAnalyzer",
    "SafetyScoreComposer",
    "RouteAlternativeRanker",
    "DetourSynthesizer",
]
