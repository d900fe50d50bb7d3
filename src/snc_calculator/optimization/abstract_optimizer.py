"""
Base class for bound optimizers.

An optimizer minimizes an Optimizable over theta and its Hoelder pairs
(minimize), or computes forward and reverse bounds for an Arrival directly
(bound, reverse_bound).
"""

import math
from abc import ABC, abstractmethod
from typing import Optional

from snc_calculator.core.constants import MAX_ITERATIONS
from snc_calculator.optimization.optimizable import BoundType, Optimizable
from snc_calculator.symbolic_math.arrival import Arrival


class AbstractOptimizer(ABC):
    """
    Shared state and reporting for optimizers.

    Args:
        optimizable: Bound searched by minimize(). bound() and reverse_bound()
            take their Arrival explicitly and do not need it.
        boundtype: Metric the bound describes.
        verbose: Print progress information.
        log_file: Path to log file for progress updates (optional).
        max_iterations: Cap on search iterations per run.
    """

    def __init__(
        self,
        optimizable: Optional[Optimizable] = None,
        boundtype: BoundType = BoundType.BACKLOG,
        verbose: bool = False,
        log_file: Optional[str] = None,
        max_iterations: int = MAX_ITERATIONS,
    ):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        self.optimizable = optimizable
        self.boundtype = boundtype
        self.verbose = verbose
        self.log_file = log_file
        self.max_iterations = max_iterations

        # Set by each run
        self.max_theta = None

    def _log(self, message: str):
        """Write message to log file if configured."""
        if self.log_file:
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(message + '\n')
                f.flush()

    def _report(self, message: str):
        if self.verbose:
            print(message)
        self._log(message)

    @staticmethod
    def _check_granularities(theta_granularity: float, hoelder_granularity: float):
        for name, value in (("theta_granularity", theta_granularity),
                            ("hoelder_granularity", hoelder_granularity)):
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be a positive number, got {value}")

    @staticmethod
    def _check_boundtype(boundtype) -> BoundType:
        if not isinstance(boundtype, BoundType):
            raise ValueError(f"Unknown boundtype: {boundtype!r}")
        return boundtype

    @abstractmethod
    def minimize(self, theta_granularity: float, hoelder_granularity: float) -> float:
        """Smallest value of ``self.optimizable`` found by the search."""

    @abstractmethod
    def bound(
        self,
        arrival: Arrival,
        boundtype: BoundType,
        bound_value: float,
        theta_granularity: float,
        hoelder_granularity: float,
    ) -> float:
        """Violation probability of the given backlog or delay value."""

    @abstractmethod
    def reverse_bound(
        self,
        arrival: Arrival,
        boundtype: BoundType,
        violation_probability: float,
        theta_granularity: float,
        hoelder_granularity: float,
    ) -> float:
        """Backlog or delay value that is violated with at most the given probability."""
