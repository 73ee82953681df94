"""
Algorithm base class and shared interfaces.

Scoring and ranking components share one envelope: validated input, a
timed solve, and a result object that never raises out of ``run()``.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Tuple
from dataclasses import dataclass
from enum import Enum
import time
import logging

logger = logging.getLogger(__name__)


class AlgorithmStatus(Enum):
    """Algorithm execution status"""
    SUCCESS = "success"
    PARTIAL = "partial"  # best-effort result, e.g. no detour found
    INFEASIBLE = "infeasible"
    ERROR = "error"


@dataclass
class AlgorithmResult:
    """Algorithm execution result"""
    status: AlgorithmStatus
    solution: Any
    metrics: Dict[str, float]
    trace: Dict[str, Any]
    time_ms: float
    message: str = ""


class AlgorithmBase(ABC):
    """
    Base class for route-safety algorithms.

    Subclasses implement:
    1. solve() - the actual computation
    2. validate_input() - problem dict validation
    3. get_default_params() - tunable constants (buffers, weights, thresholds)

    ``params`` passed to the constructor override the defaults key by key.
    """

    def __init__(self, params: Dict[str, Any] = None):
        self.params = {**self.get_default_params(), **(params or {})}
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def solve(self, problem: Dict[str, Any]) -> AlgorithmResult:
        """
        Solve the problem.

        Args:
            problem: problem definition dict

        Returns:
            AlgorithmResult with solution, metrics and trace
        """
        pass

    @abstractmethod
    def validate_input(self, problem: Dict[str, Any]) -> Tuple[bool, str]:
        """
        Validate the problem dict.

        Returns:
            (is_valid, error_message)
        """
        pass

    @abstractmethod
    def get_default_params(self) -> Dict[str, Any]:
        """Default parameters"""
        pass

    def run(self, problem: Dict[str, Any]) -> AlgorithmResult:
        """
        Run the algorithm with timing and exception handling.
        """
        valid, msg = self.validate_input(problem)
        if not valid:
            return AlgorithmResult(
                status=AlgorithmStatus.ERROR,
                solution=None,
                metrics={},
                trace={"error": msg},
                time_ms=0,
                message=msg
            )

        start_time = time.time()
        try:
            result = self.solve(problem)
            result.time_ms = (time.time() - start_time) * 1000
            return result
        except Exception as e:
            self.logger.exception(f"algorithm failed: {e}")
            return AlgorithmResult(
                status=AlgorithmStatus.ERROR,
                solution=None,
                metrics={},
                trace={"exception": str(e)},
                time_ms=(time.time() - start_time) * 1000,
                message=str(e)
            )


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp value into [low, high]; NaN passes through unchanged."""
    if value != value:
        return value
    return max(low, min(high, value))
