"""
What an optimizer needs from a bound.

Any object with prepare(), hoelder_parameters(), maximum_theta() and
evaluate(theta, parameters=None) can be searched. Arrival implements it for
its violation bound; FunctionBound wraps a single symbolic objective.
"""

import math
from enum import Enum
from typing import Dict, Mapping, Optional, Protocol

from snc_calculator.symbolic_math.exceptions import BadInitializationError, ThetaOutOfBoundError
from snc_calculator.symbolic_math.functions import (
    SymbolicFunction,
    evaluate,
    max_theta,
    required_parameters,
)
from snc_calculator.symbolic_math.hoelder import Hoelder
from snc_calculator.symbolic_math.operators import collect_hoelders


class BoundType(Enum):
    """Performance metric a bound is computed for."""
    BACKLOG = "backlog"
    DELAY = "delay"
    OUTPUT = "output"


class Optimizable(Protocol):
    """Capability of a bound that can be minimized over theta and Hoelder values."""

    def prepare(self) -> None:
        """Reset every reachable Hoelder pair to p = q = 2."""

    def hoelder_parameters(self) -> Dict[int, Hoelder]:
        """Live ``{id: Hoelder}`` map, not a copy."""

    def maximum_theta(self, parameters: Optional[Mapping[int, Hoelder]] = None) -> float:
        ...

    def evaluate(self, theta: float, parameters: Optional[Mapping[int, Hoelder]] = None) -> float:
        """Value of the bound; may raise ServerOverloadError or ThetaOutOfBoundError."""


class FunctionBound:
    """
    Optimizable around one symbolic objective.

    Args:
        objective: Function to minimize.
        hoelders: ``{id: Hoelder}`` for every id the objective requires;
            created at p = q = 2 if omitted.
        max_theta: Optional cap on theta, tightened by the objective's own
            bound.
    """

    def __init__(
        self,
        objective: SymbolicFunction,
        hoelders: Optional[Mapping[int, Hoelder]] = None,
        max_theta: Optional[float] = None,
    ):
        self.objective = objective
        required = required_parameters(objective)
        if hoelders is None:
            self._hoelders = collect_hoelders((objective,))
        elif set(hoelders.keys()) != required:
            raise BadInitializationError(
                f"Hoelder ids {sorted(hoelders)} do not match objective ids {sorted(required)}"
            )
        else:
            self._hoelders = dict(hoelders)
        if max_theta is not None and not max_theta > 0:
            raise BadInitializationError(f"max_theta must be positive, got {max_theta}")
        self._max_theta = math.inf if max_theta is None else float(max_theta)

    def prepare(self) -> None:
        for hoelder in self._hoelders.values():
            hoelder.reset()

    def hoelder_parameters(self) -> Dict[int, Hoelder]:
        return self._hoelders

    def maximum_theta(self, parameters: Optional[Mapping[int, Hoelder]] = None) -> float:
        parameters = self._hoelders if parameters is None else parameters
        return min(self._max_theta, max_theta(self.objective, parameters))

    def evaluate(self, theta: float, parameters: Optional[Mapping[int, Hoelder]] = None) -> float:
        parameters = self._hoelders if parameters is None else parameters
        if theta >= self._max_theta:
            raise ThetaOutOfBoundError(theta, self._max_theta, "FunctionBound")
        return evaluate(self.objective, theta, parameters)

    def __repr__(self) -> str:
        return f"FunctionBound({self.objective}, max_theta={self._max_theta})"
