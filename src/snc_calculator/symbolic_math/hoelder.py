"""
Hoelder conjugate pairs.

A Hoelder pair (p, q) with 1/p + 1/q = 1 splits the moment generating function
of a sum of dependent processes:

    E[exp(theta(X+Y))] <= E[exp(p theta X)]^(1/p) * E[exp(q theta Y)]^(1/q)

The pair stores p and q independently. Keeping them conjugate is a modeling
convention of the caller (see SimpleGradient's step rule), never done here.
"""

import math
from dataclasses import dataclass

from snc_calculator.core.constants import NEUTRAL_HOELDER
from snc_calculator.symbolic_math.exceptions import BadInitializationError

NEUTRAL_VALUE = NEUTRAL_HOELDER


def conjugate(p: float) -> float:
    """Return q with 1/p + 1/q = 1."""
    if p <= 1:
        raise ValueError(f"p must be > 1, got {p}")
    return p / (p - 1.0)


def _check_value(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value <= 1:
        raise BadInitializationError(f"Hoelder {name} must be a finite number > 1, got {value}")
    return value


@dataclass(eq=False)
class Hoelder:
    """
    A (p, q) pair identified by an integer id.

    Equality and hashing use the id only, so a pair can key maps across a
    whole function tree while its values change during a search.
    """

    hoelder_id: int
    p_value: float = NEUTRAL_VALUE
    q_value: float = NEUTRAL_VALUE

    def __post_init__(self):
        if isinstance(self.hoelder_id, bool) or not isinstance(self.hoelder_id, int):
            raise BadInitializationError(f"Hoelder id must be an int, got {self.hoelder_id!r}")
        if self.hoelder_id < 0:
            raise BadInitializationError(f"Hoelder id must be non-negative, got {self.hoelder_id}")
        self.p_value = _check_value("p", self.p_value)
        self.q_value = _check_value("q", self.q_value)

    def __eq__(self, other):
        if not isinstance(other, Hoelder):
            return NotImplemented
        return self.hoelder_id == other.hoelder_id

    def __hash__(self):
        return hash(("Hoelder", self.hoelder_id))

    def reset(self) -> None:
        """Move back to the neutral pair p = q = 2."""
        self.p_value = NEUTRAL_VALUE
        self.q_value = NEUTRAL_VALUE

    def copy(self) -> "Hoelder":
        return Hoelder(self.hoelder_id, self.p_value, self.q_value)

    def is_conjugate(self, tol: float = 1e-9) -> bool:
        return abs(1.0 / self.p_value + 1.0 / self.q_value - 1.0) <= tol

    def __str__(self) -> str:
        return f"Hoelder({self.hoelder_id}: p={self.p_value:.4f}, q={self.q_value:.4f})"


class HoelderFactory:
    """Hands out Hoelder pairs with consecutive ids, one factory per bound computation."""

    def __init__(self, first_id: int = 1):
        self._next_id = first_id
        self.created = {}

    def create(self) -> Hoelder:
        hoelder = Hoelder(self._next_id)
        self.created[hoelder.hoelder_id] = hoelder
        self._next_id += 1
        return hoelder

    def __len__(self) -> int:
        return len(self.created)
