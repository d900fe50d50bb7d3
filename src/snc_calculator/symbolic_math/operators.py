"""
Composition of symbolic functions.

Adding two independent envelopes is a plain sum. If the underlying processes
may be dependent the sum is bounded through Hoelder's inequality, which
introduces a fresh (p, q) pair: the first operand is evaluated at p*theta,
the second at q*theta.
"""

from typing import Dict, Iterable, Optional, Tuple

from snc_calculator.symbolic_math.functions import (
    AddedFunctions,
    MaximumFunction,
    ScaledFunction,
    SymbolicFunction,
    required_parameters,
)
from snc_calculator.symbolic_math.hoelder import Hoelder, HoelderFactory


def scale(function: SymbolicFunction, hoelder: Hoelder, p_scale: bool = True) -> ScaledFunction:
    return ScaledFunction(function, hoelder.hoelder_id, p_scale)


def add(
    first: SymbolicFunction,
    second: SymbolicFunction,
    factory: Optional[HoelderFactory] = None,
) -> Tuple[SymbolicFunction, Optional[Hoelder]]:
    """
    Sum of two envelopes.

    Args:
        first, second: Envelopes to add.
        factory: If given, the operands are treated as stochastically
            dependent and a new Hoelder pair is drawn from it.

    Returns:
        (function, hoelder) where hoelder is None for the independent case.
    """
    if factory is None:
        return AddedFunctions((first, second)), None
    hoelder = factory.create()
    combined = AddedFunctions((scale(first, hoelder, True), scale(second, hoelder, False)))
    return combined, hoelder


def maximum(functions: Iterable[SymbolicFunction]) -> MaximumFunction:
    return MaximumFunction(tuple(functions))


def collect_hoelders(
    functions: Iterable[SymbolicFunction],
    known: Optional[Dict[int, Hoelder]] = None,
) -> Dict[int, Hoelder]:
    """
    Build an ``{id: Hoelder}`` map covering every id the functions require.

    Pairs found in ``known`` are reused by reference, missing ones are created
    at the neutral value p = q = 2.
    """
    known = known or {}
    hoelders = {}
    for function in functions:
        for hoelder_id in required_parameters(function):
            if hoelder_id not in hoelders:
                hoelders[hoelder_id] = known.get(hoelder_id) or Hoelder(hoelder_id)
    return hoelders
