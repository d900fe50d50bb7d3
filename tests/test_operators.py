"""
Unit tests for composition of symbolic functions.
"""

import pytest

from snc_calculator.symbolic_math.functions import (
    AddedFunctions,
    ConstantFunction,
    ExponentialRho,
    MaximumFunction,
    ScaledFunction,
)
from snc_calculator.symbolic_math.hoelder import Hoelder
from snc_calculator.symbolic_math.operators import add, collect_hoelders, maximum, scale


@pytest.mark.unit
class TestOperators:
    """Test suite for add, maximum and scale."""

    def test_independent_add(self):
        a, b = ConstantFunction(1.0), ExponentialRho(2.0)
        combined, hoelder = add(a, b)
        assert hoelder is None
        assert combined == AddedFunctions((a, b))
        assert combined.get_parameters() == frozenset()

    def test_dependent_add_scales_by_p_and_q(self, hoelder_factory):
        a, b = ExponentialRho(6.0), ExponentialRho(9.0)
        combined, hoelder = add(a, b, hoelder_factory)
        assert hoelder.hoelder_id == 1
        assert combined.get_parameters() == frozenset({1})

        params = {1: Hoelder(1, 1.5, 3.0)}
        expected = a.get_value(0.3) + b.get_value(0.6)
        assert combined.get_value(0.2, params) == pytest.approx(expected)
        assert combined.get_max_theta(params) == pytest.approx(3.0)

    def test_each_dependent_add_gets_new_pair(self, hoelder_factory):
        _, first = add(ConstantFunction(1.0), ConstantFunction(2.0), hoelder_factory)
        _, second = add(ConstantFunction(1.0), ConstantFunction(2.0), hoelder_factory)
        assert first != second

    def test_maximum(self):
        f = maximum(c for c in (ConstantFunction(0.1), ConstantFunction(0.4)))
        assert isinstance(f, MaximumFunction)
        assert f.get_value(1.0) == 0.4

    def test_scale(self):
        f = scale(ConstantFunction(1.0), Hoelder(4), p_scale=False)
        assert f == ScaledFunction(ConstantFunction(1.0), 4, False)


@pytest.mark.unit
class TestCollectHoelders:

    def test_creates_neutral_pairs(self):
        f = AddedFunctions((scale(ConstantFunction(1.0), Hoelder(2)), scale(ConstantFunction(1.0), Hoelder(5))))
        hoelders = collect_hoelders((f,))
        assert sorted(hoelders) == [2, 5]
        assert all(h.p_value == 2.0 and h.q_value == 2.0 for h in hoelders.values())

    def test_reuses_known_pairs(self):
        known = Hoelder(2, 1.5, 3.0)
        f = scale(ConstantFunction(1.0), known)
        hoelders = collect_hoelders((f,), {2: known, 9: Hoelder(9)})
        assert hoelders[2] is known
        assert 9 not in hoelders
