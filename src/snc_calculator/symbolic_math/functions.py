"""
Symbolic functions of theta.

Every bound in the calculator is a tree of these nodes. A node is a frozen
dataclass; the set of variants is closed and the three operations below
dispatch over it exhaustively:

    evaluate(function, theta, parameters)   value at theta
    max_theta(function, parameters)         supremum of admissible theta
    required_parameters(function)           Hoelder ids the tree reads

Nodes only store Hoelder *ids*. The current (p, q) values are passed in as an
explicit ``{id: Hoelder}`` assignment, which must contain exactly the ids the
node requires.

Variants:
- ConstantFunction: theta-independent value
- ScaledFunction: f(theta * p) or f(theta * q) for one Hoelder pair
- AddedFunctions: f_1(theta) + ... + f_n(theta)
- MaximumFunction: max(f_1(theta), ..., f_n(theta))
- ExponentialRho, PoissonRho: rate envelopes of common arrival models
"""

import math
from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional, Tuple, Union

import numpy as np

from snc_calculator.symbolic_math.exceptions import (
    BadInitializationError,
    ParameterMismatchError,
    ThetaOutOfBoundError,
)
from snc_calculator.symbolic_math.hoelder import Hoelder

Parameters = Mapping[int, Hoelder]

_NO_IDS: FrozenSet[int] = frozenset()


class _FunctionMethods:
    """Method-style access to the dispatch functions, shared by all variants."""

    def get_value(self, theta: float, parameters: Optional[Parameters] = None) -> float:
        return evaluate(self, theta, parameters)

    def get_max_theta(self, parameters: Optional[Parameters] = None) -> float:
        return max_theta(self, parameters)

    def get_parameters(self) -> FrozenSet[int]:
        return required_parameters(self)


@dataclass(frozen=True)
class ConstantFunction(_FunctionMethods):
    """Returns ``value`` for every theta."""

    value: float
    _required: FrozenSet[int] = field(default=_NO_IDS, init=False, compare=False, repr=False)

    def __post_init__(self):
        try:
            object.__setattr__(self, "value", float(self.value))
        except (TypeError, ValueError) as e:
            raise BadInitializationError(f"Constant must be numeric, got {self.value!r}") from e

    def __str__(self) -> str:
        return f"{self.value:g}"


@dataclass(frozen=True)
class ScaledFunction(_FunctionMethods):
    """
    Rescales theta before delegating: ``f(theta * p)`` if ``p_scale`` else
    ``f(theta * q)``, with (p, q) taken from Hoelder ``hoelder_id``.
    """

    function: "SymbolicFunction"
    hoelder_id: int
    p_scale: bool = True
    _required: FrozenSet[int] = field(default=_NO_IDS, init=False, compare=False, repr=False)

    def __post_init__(self):
        _check_child(self.function, "ScaledFunction")
        if isinstance(self.hoelder_id, bool) or not isinstance(self.hoelder_id, int):
            raise BadInitializationError(f"Hoelder id must be an int, got {self.hoelder_id!r}")
        object.__setattr__(self, "_required", self.function._required | {self.hoelder_id})

    def __str__(self) -> str:
        if self.p_scale:
            return f"scaled({self.function},{self.hoelder_id})"
        return f"scaled({self.function},{self.hoelder_id},q)"


@dataclass(frozen=True)
class AddedFunctions(_FunctionMethods):
    """Sum of the children evaluated at the same theta."""

    functions: Tuple["SymbolicFunction", ...]
    _required: FrozenSet[int] = field(default=_NO_IDS, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "functions", _check_children(self.functions, "AddedFunctions"))
        object.__setattr__(self, "_required", _union(self.functions))

    def __str__(self) -> str:
        return "(" + "+".join(str(f) for f in self.functions) + ")"


@dataclass(frozen=True)
class MaximumFunction(_FunctionMethods):
    """Pointwise maximum of the children."""

    functions: Tuple["SymbolicFunction", ...]
    _required: FrozenSet[int] = field(default=_NO_IDS, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "functions", _check_children(self.functions, "MaximumFunction"))
        object.__setattr__(self, "_required", _union(self.functions))

    def __str__(self) -> str:
        return "max(" + ",".join(str(f) for f in self.functions) + ")"


@dataclass(frozen=True)
class ExponentialRho(_FunctionMethods):
    """
    Rate envelope of i.i.d. exponentially distributed increments.

    rho(theta) = 1/theta * log(rate / (rate - theta)), defined for theta < rate.
    """

    rate: float
    _required: FrozenSet[int] = field(default=_NO_IDS, init=False, compare=False, repr=False)

    def __post_init__(self):
        _check_positive(self.rate, "ExponentialRho rate")

    def __str__(self) -> str:
        return f"rho_exp({self.rate:g})"


@dataclass(frozen=True)
class PoissonRho(_FunctionMethods):
    """
    Rate envelope of a Poisson process with packets of constant ``size``.

    rho(theta) = rate * (exp(theta * size) - 1) / theta
    """

    rate: float
    size: float = 1.0
    _required: FrozenSet[int] = field(default=_NO_IDS, init=False, compare=False, repr=False)

    def __post_init__(self):
        _check_positive(self.rate, "PoissonRho rate")
        _check_positive(self.size, "PoissonRho size")

    def __str__(self) -> str:
        return f"rho_poisson({self.rate:g},{self.size:g})"


SymbolicFunction = Union[
    ConstantFunction,
    ScaledFunction,
    AddedFunctions,
    MaximumFunction,
    ExponentialRho,
    PoissonRho,
]

_VARIANTS = (
    ConstantFunction,
    ScaledFunction,
    AddedFunctions,
    MaximumFunction,
    ExponentialRho,
    PoissonRho,
)

_ATOMS = (ConstantFunction, ExponentialRho, PoissonRho)


def _check_child(function, owner: str) -> None:
    if not isinstance(function, _VARIANTS):
        raise BadInitializationError(
            f"{owner} expects symbolic functions, got {type(function).__name__}"
        )


def _check_children(functions, owner: str) -> tuple:
    if isinstance(functions, _VARIANTS):
        raise BadInitializationError(f"{owner} expects a sequence of functions")
    functions = tuple(functions)
    if not functions:
        raise BadInitializationError(f"{owner} needs at least one function")
    for function in functions:
        _check_child(function, owner)
    return functions


def _check_positive(value: float, name: str) -> None:
    if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
        raise BadInitializationError(f"{name} must be a positive number, got {value!r}")


def _unknown(function):
    return TypeError(f"Unknown symbolic function variant: {type(function).__name__}")


def _union(functions) -> FrozenSet[int]:
    return frozenset().union(*(f._required for f in functions))


# =============================================================================
# Dispatch
# =============================================================================

def required_parameters(function: SymbolicFunction) -> FrozenSet[int]:
    """Ids of every Hoelder pair read anywhere in the tree."""
    if isinstance(function, _VARIANTS):
        return function._required
    raise _unknown(function)


def _check_assignment(function: SymbolicFunction, parameters: Parameters) -> None:
    required = required_parameters(function)
    given = set(parameters.keys())
    if given != required:
        raise ParameterMismatchError(
            f"Parameters given to {function} do not match its requirements",
            missing=required - given,
            extra=given - required,
        )


def _restrict(parameters: Parameters, function: SymbolicFunction) -> dict:
    return {i: parameters[i] for i in function._required}


def _scale_factor(function: ScaledFunction, parameters: Parameters) -> float:
    hoelder = parameters[function.hoelder_id]
    return hoelder.p_value if function.p_scale else hoelder.q_value


def max_theta(function: SymbolicFunction, parameters: Optional[Parameters] = None) -> float:
    """
    Tightest upper bound on theta implied by the tree at the given parameters.

    For a ScaledFunction this is the child's bound divided by the scaling
    value; composites take the minimum over their children.
    """
    parameters = {} if parameters is None else parameters
    _check_assignment(function, parameters)
    return _max_theta(function, parameters)


def _max_theta(function: SymbolicFunction, parameters: Parameters) -> float:
    if isinstance(function, (ConstantFunction, PoissonRho)):
        return math.inf
    if isinstance(function, ExponentialRho):
        return function.rate
    if isinstance(function, ScaledFunction):
        return _max_theta(function.function, parameters) / _scale_factor(function, parameters)
    if isinstance(function, (AddedFunctions, MaximumFunction)):
        return min(_max_theta(child, parameters) for child in function.functions)
    raise _unknown(function)


def evaluate(
    function: SymbolicFunction,
    theta: float,
    parameters: Optional[Parameters] = None,
) -> float:
    """
    Value of ``function`` at ``theta``.

    Raises:
        ParameterMismatchError: ``parameters`` does not hold exactly the
            required Hoelder ids.
        ThetaOutOfBoundError: theta, at this node or after scaling at any
            descendant, is outside (0, max_theta).
    """
    parameters = {} if parameters is None else parameters
    _check_assignment(function, parameters)
    limit = _max_theta(function, parameters)
    if not 0 < theta < limit:
        raise ThetaOutOfBoundError(theta, limit, str(function))
    return _evaluate(function, theta, parameters)


def _evaluate(function: SymbolicFunction, theta: float, parameters: Parameters) -> float:
    # Scale factors are positive, so the root bound covers every descendant;
    # atoms with a finite domain still check their own.
    if isinstance(function, ConstantFunction):
        return function.value
    if isinstance(function, ExponentialRho):
        if not 0 < theta < function.rate:
            raise ThetaOutOfBoundError(theta, function.rate, str(function))
        return float(np.log(function.rate / (function.rate - theta)) / theta)
    if isinstance(function, PoissonRho):
        if not theta > 0:
            raise ThetaOutOfBoundError(theta, math.inf, str(function))
        with np.errstate(over="ignore"):
            return float(function.rate * np.expm1(theta * function.size) / theta)
    if isinstance(function, ScaledFunction):
        child = function.function
        scaled_theta = theta * _scale_factor(function, parameters)
        return _evaluate(child, scaled_theta, _restrict(parameters, child))
    if isinstance(function, AddedFunctions):
        return sum(
            _evaluate(child, theta, _restrict(parameters, child))
            for child in function.functions
        )
    if isinstance(function, MaximumFunction):
        return max(
            _evaluate(child, theta, _restrict(parameters, child))
            for child in function.functions
        )
    raise _unknown(function)
