"""
Unit tests for Hoelder pairs.
"""

import math

import pytest

from snc_calculator.symbolic_math.exceptions import BadInitializationError
from snc_calculator.symbolic_math.hoelder import Hoelder, HoelderFactory, conjugate


@pytest.mark.unit
class TestHoelder:
    """Test suite for a single Hoelder pair."""

    def test_defaults_are_neutral(self):
        hoelder = Hoelder(3)
        assert hoelder.p_value == 2.0
        assert hoelder.q_value == 2.0
        assert hoelder.is_conjugate()

    def test_reset(self):
        hoelder = Hoelder(1, 1.5, 3.0)
        hoelder.reset()
        assert (hoelder.p_value, hoelder.q_value) == (2.0, 2.0)

    def test_copy_is_independent(self):
        hoelder = Hoelder(1, 1.5, 3.0)
        clone = hoelder.copy()
        clone.p_value = 4.0
        assert hoelder.p_value == 1.5
        assert clone == hoelder

    def test_equality_by_id(self):
        assert Hoelder(1, 1.5, 3.0) == Hoelder(1)
        assert Hoelder(1) != Hoelder(2)
        assert len({Hoelder(1), Hoelder(1, 3.0, 1.5), Hoelder(2)}) == 2

    def test_non_conjugate_values_allowed(self):
        hoelder = Hoelder(1, 2.0, 1.9)
        assert not hoelder.is_conjugate()

    @pytest.mark.parametrize("p, q", [(1.0, 2.0), (2.0, 0.5), (math.inf, 2.0), (math.nan, 2.0)])
    def test_invalid_values(self, p, q):
        with pytest.raises(BadInitializationError):
            Hoelder(1, p, q)

    @pytest.mark.parametrize("hoelder_id", [-1, 1.5, "1", True])
    def test_invalid_ids(self, hoelder_id):
        with pytest.raises(BadInitializationError):
            Hoelder(hoelder_id)

    def test_str(self):
        assert str(Hoelder(4, 1.5, 3.0)) == "Hoelder(4: p=1.5000, q=3.0000)"


@pytest.mark.unit
class TestConjugate:

    def test_values(self):
        assert conjugate(2.0) == pytest.approx(2.0)
        assert conjugate(1.5) == pytest.approx(3.0)
        assert conjugate(4.0) == pytest.approx(4.0 / 3.0)

    def test_rejects_p_at_most_one(self):
        with pytest.raises(ValueError):
            conjugate(1.0)


@pytest.mark.unit
class TestHoelderFactory:

    def test_consecutive_ids(self, hoelder_factory):
        ids = [hoelder_factory.create().hoelder_id for _ in range(3)]
        assert ids == [1, 2, 3]
        assert len(hoelder_factory) == 3
        assert sorted(hoelder_factory.created) == [1, 2, 3]

    def test_first_id(self):
        factory = HoelderFactory(first_id=10)
        assert factory.create().hoelder_id == 10
