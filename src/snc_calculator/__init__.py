"""
SNC Calculator - Stochastic Network Calculus Bound Optimizer

Computes probabilistic backlog and delay bounds from sigma/rho envelopes and
searches theta and the Hoelder parameters for the tightest bound.

Main Interface:
    from snc_calculator import Arrival, Service, SimpleGradient, BoundType
    from snc_calculator import ConstantFunction, ExponentialRho

    arrival = Arrival(ConstantFunction(0.0), ExponentialRho(2.0))
    leftover = Arrival.leftover(arrival, Service.constant_rate(1.0))
    backlog = SimpleGradient().reverse_bound(leftover, BoundType.BACKLOG, 1e-6, 0.01, 0.01)

Components:
- Symbolic functions: ConstantFunction, ScaledFunction, AddedFunctions,
  MaximumFunction and rate envelopes, evaluated with explicit Hoelder pairs
- Arrival / Service: sigma/rho pairs owning their Hoelder pairs
- SimpleGradient: discrete local search over theta and Hoelder values
"""

# Import symbolic math
from snc_calculator.symbolic_math import (
    SNCError,
    ParameterMismatchError,
    ThetaOutOfBoundError,
    ServerOverloadError,
    BadInitializationError,
    Hoelder,
    HoelderFactory,
    ConstantFunction,
    ScaledFunction,
    AddedFunctions,
    MaximumFunction,
    ExponentialRho,
    PoissonRho,
    Arrival,
    Service,
)

# Import optimization (MAIN INTERFACE)
from snc_calculator.optimization import (
    BoundType,
    FunctionBound,
    SimpleGradient,
    OptimizationResult,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "SNCError",
    "ParameterMismatchError",
    "ThetaOutOfBoundError",
    "ServerOverloadError",
    "BadInitializationError",
    # Symbolic math
    "Hoelder",
    "HoelderFactory",
    "ConstantFunction",
    "ScaledFunction",
    "AddedFunctions",
    "MaximumFunction",
    "ExponentialRho",
    "PoissonRho",
    "Arrival",
    "Service",
    # Optimization (MAIN INTERFACE)
    "BoundType",
    "FunctionBound",
    "SimpleGradient",
    "OptimizationResult",
]
