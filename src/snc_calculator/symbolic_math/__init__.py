"""
Symbolic math for stochastic network calculus.

Bounds are trees of symbolic functions of theta, parameterized by Hoelder
conjugate pairs that are owned by the Arrival holding the trees.
"""

from snc_calculator.symbolic_math.exceptions import (
    SNCError,
    ParameterMismatchError,
    ThetaOutOfBoundError,
    ServerOverloadError,
    BadInitializationError,
)
from snc_calculator.symbolic_math.hoelder import Hoelder, HoelderFactory, conjugate
from snc_calculator.symbolic_math.functions import (
    SymbolicFunction,
    ConstantFunction,
    ScaledFunction,
    AddedFunctions,
    MaximumFunction,
    ExponentialRho,
    PoissonRho,
    evaluate,
    max_theta,
    required_parameters,
)
from snc_calculator.symbolic_math.operators import add, maximum, scale, collect_hoelders
from snc_calculator.symbolic_math.arrival import Arrival, Service

__all__ = [
    # Errors
    "SNCError",
    "ParameterMismatchError",
    "ThetaOutOfBoundError",
    "ServerOverloadError",
    "BadInitializationError",
    # Hoelder pairs
    "Hoelder",
    "HoelderFactory",
    "conjugate",
    # Functions
    "SymbolicFunction",
    "ConstantFunction",
    "ScaledFunction",
    "AddedFunctions",
    "MaximumFunction",
    "ExponentialRho",
    "PoissonRho",
    "evaluate",
    "max_theta",
    "required_parameters",
    # Composition
    "add",
    "maximum",
    "scale",
    "collect_hoelders",
    "Arrival",
    "Service",
]
