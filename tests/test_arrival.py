"""
Unit tests for Arrival and Service envelopes.
"""

import math

import pytest

from snc_calculator.symbolic_math.arrival import Arrival, Service
from snc_calculator.symbolic_math.exceptions import (
    BadInitializationError,
    ParameterMismatchError,
    ServerOverloadError,
)
from snc_calculator.symbolic_math.functions import (
    AddedFunctions,
    ConstantFunction,
    ExponentialRho,
    ScaledFunction,
)
from snc_calculator.symbolic_math.hoelder import Hoelder


@pytest.mark.unit
class TestService:

    def test_constant_rate(self):
        service = Service.constant_rate(2.0, latency=0.5)
        assert service.sigma.get_value(0.1) == pytest.approx(1.0)
        assert service.rho.get_value(0.1) == pytest.approx(-2.0)

    def test_rejects_non_positive_rate(self):
        with pytest.raises(BadInitializationError):
            Service.constant_rate(0.0)


@pytest.mark.unit
class TestArrival:
    """Test suite for Arrival construction and evaluation."""

    def test_creates_missing_hoelders(self):
        arrival = Arrival(ConstantFunction(0.0), ScaledFunction(ExponentialRho(2.0), 3))
        assert list(arrival.hoelder_parameters()) == [3]

    def test_rejects_mismatched_hoelders(self):
        with pytest.raises(BadInitializationError):
            Arrival(ConstantFunction(0.0), ScaledFunction(ExponentialRho(2.0), 3), {4: Hoelder(4)})

    def test_rejects_wrong_key(self):
        with pytest.raises(BadInitializationError):
            Arrival(ConstantFunction(0.0), ScaledFunction(ExponentialRho(2.0), 3), {3: Hoelder(4)})

    def test_violation_bound(self):
        arrival = Arrival(ConstantFunction(0.5), ConstantFunction(-1.0))
        theta = 0.2
        expected = math.exp(theta * (0.5 - 1.0 * 3 - 2.0)) / (1.0 - math.exp(-theta))
        assert arrival.evaluate(theta, delay=3, backlog=2.0) == pytest.approx(expected)

    def test_overload(self):
        arrival = Arrival(ConstantFunction(0.0), ConstantFunction(0.0))
        with pytest.raises(ServerOverloadError):
            arrival.evaluate(0.1)

    def test_prepare_resets(self):
        arrival = Arrival(ConstantFunction(0.0), ScaledFunction(ExponentialRho(2.0), 1))
        hoelder = arrival.hoelder_parameters()[1]
        hoelder.p_value, hoelder.q_value = 1.5, 3.0
        arrival.prepare()
        assert (hoelder.p_value, hoelder.q_value) == (2.0, 2.0)

    def test_hoelder_parameters_is_live(self):
        arrival = Arrival(ConstantFunction(0.0), ScaledFunction(ExponentialRho(2.0), 1))
        arrival.hoelder_parameters()[1].p_value = 4.0
        assert arrival.maximum_theta() == pytest.approx(0.5)

    def test_extra_parameters_rejected(self):
        arrival = Arrival(ConstantFunction(0.0), ConstantFunction(-1.0))
        with pytest.raises(ParameterMismatchError):
            arrival.rho_value(0.1, {1: Hoelder(1)})


@pytest.mark.unit
class TestLeftover:
    """Test suite for combining arrival and service."""

    def test_independent(self, single_server):
        assert single_server.hoelder_parameters() == {}
        assert single_server.theta_star == 2.0
        theta = 0.5
        assert single_server.rho_value(theta) == pytest.approx(ExponentialRho(2.0).get_value(theta) - 1.0)
        assert single_server.sigma_value(theta) == pytest.approx(0.0)

    def test_dependent_shares_one_pair(self, dependent_server):
        hoelders = dependent_server.hoelder_parameters()
        assert list(hoelders) == [1]
        assert isinstance(dependent_server.rho, AddedFunctions)
        assert dependent_server.theta_star == pytest.approx(1.0)

        hoelders[1].p_value = 1.5
        theta = 0.4
        assert dependent_server.rho_value(theta) == pytest.approx(ExponentialRho(2.0).get_value(0.6) - 1.0)

    def test_keeps_arrival_pairs(self, hoelder_factory):
        inner = Hoelder(7, 1.5, 3.0)
        arrival = Arrival(ConstantFunction(0.0), ScaledFunction(ExponentialRho(4.0), 7), {7: inner})
        combined = Arrival.leftover(arrival, Service.constant_rate(1.0), hoelder_factory)
        assert combined.hoelder_parameters()[7] is inner
        assert sorted(combined.hoelder_parameters()) == [1, 7]

    def test_stable_server(self, single_server):
        value = single_server.evaluate(0.5, 0, 10.0)
        assert 0 < value < 1
