"""
SNC Optimization Module.

This module provides the discrete search that finds the tightest bound over
theta and the Hoelder pairs of a bound.
"""

from snc_calculator.optimization.optimizable import (
    BoundType,
    Optimizable,
    FunctionBound,
)
from snc_calculator.optimization.abstract_optimizer import AbstractOptimizer
from snc_calculator.optimization.simple_gradient import (
    SimpleGradient,
    SearchPosition,
    Change,
    OptimizationResult,
)

__all__ = [
    'BoundType',
    'Optimizable',
    'FunctionBound',
    'AbstractOptimizer',
    'SimpleGradient',
    'SearchPosition',
    'Change',
    'OptimizationResult',
]
