"""
Sigma/rho characterizations of arrivals and services.

An envelope in the MGF sense bounds a flow's increments by

    E[exp(theta * A(s, t))] <= exp(theta * (rho(theta) * (t - s) + sigma(theta)))

Subtracting a service envelope from an arrival envelope yields the pair used
for backlog and delay bounds; there rho is negative whenever the server can
sustain the arrivals.
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Optional

import numpy as np

from snc_calculator.symbolic_math.exceptions import (
    BadInitializationError,
    ParameterMismatchError,
    ServerOverloadError,
)
from snc_calculator.symbolic_math.functions import (
    AddedFunctions,
    ConstantFunction,
    Parameters,
    SymbolicFunction,
    evaluate,
    max_theta,
    required_parameters,
)
from snc_calculator.symbolic_math.hoelder import Hoelder, HoelderFactory
from snc_calculator.symbolic_math.operators import collect_hoelders, scale


@dataclass(frozen=True)
class Service:
    """Service envelope; rho is typically the negated service rate."""

    sigma: SymbolicFunction
    rho: SymbolicFunction

    @classmethod
    def constant_rate(cls, rate: float, latency: float = 0.0) -> "Service":
        """Work-conserving server of constant ``rate``."""
        if rate <= 0:
            raise BadInitializationError(f"Service rate must be positive, got {rate}")
        return cls(ConstantFunction(rate * latency), ConstantFunction(-rate))


class Arrival:
    """
    A (sigma, rho) pair plus the Hoelder pairs both trees read.

    The Arrival owns the ``{id: Hoelder}`` map; the function trees only refer
    to ids. It also satisfies the Optimizable contract, so an optimizer can
    search its violation bound directly.
    """

    def __init__(
        self,
        sigma: SymbolicFunction,
        rho: SymbolicFunction,
        hoelders: Optional[Mapping[int, Hoelder]] = None,
    ):
        self.sigma = sigma
        self.rho = rho
        required = required_parameters(sigma) | required_parameters(rho)

        if hoelders is None:
            self._hoelders = collect_hoelders((sigma, rho))
        else:
            given = set(hoelders.keys())
            if given != required:
                raise BadInitializationError(
                    f"Hoelder ids {sorted(given)} do not match ids {sorted(required)} "
                    f"used by sigma/rho"
                )
            for hoelder_id, hoelder in hoelders.items():
                if not isinstance(hoelder, Hoelder) or hoelder.hoelder_id != hoelder_id:
                    raise BadInitializationError(f"Entry {hoelder_id} is not Hoelder {hoelder_id}")
            self._hoelders = dict(hoelders)

    # =========================================================================
    # Construction helpers
    # =========================================================================

    @classmethod
    def leftover(
        cls,
        arrival: "Arrival",
        service: Service,
        factory: Optional[HoelderFactory] = None,
    ) -> "Arrival":
        """
        Combine an arrival with the service it receives.

        Without a factory arrival and service are independent and the
        envelopes are simply added. With a factory one Hoelder pair is
        created and shared by sigma and rho: the arrival side is scaled by
        p, the service side by q.
        """
        if factory is None:
            sigma = AddedFunctions((arrival.sigma, service.sigma))
            rho = AddedFunctions((arrival.rho, service.rho))
            known = dict(arrival._hoelders)
        else:
            hoelder = factory.create()
            sigma = AddedFunctions((scale(arrival.sigma, hoelder, True), scale(service.sigma, hoelder, False)))
            rho = AddedFunctions((scale(arrival.rho, hoelder, True), scale(service.rho, hoelder, False)))
            known = dict(arrival._hoelders)
            known[hoelder.hoelder_id] = hoelder
        return cls(sigma, rho, collect_hoelders((sigma, rho), known))

    # =========================================================================
    # Evaluation
    # =========================================================================

    def _parameters(self, parameters: Optional[Parameters]) -> Parameters:
        return self._hoelders if parameters is None else parameters

    def _split(self, parameters: Parameters):
        extra = set(parameters.keys()) - set(self._hoelders.keys())
        if extra:
            raise ParameterMismatchError("Parameters given to arrival are not used by sigma/rho", extra=extra)
        sigma_params = {i: parameters[i] for i in required_parameters(self.sigma) if i in parameters}
        rho_params = {i: parameters[i] for i in required_parameters(self.rho) if i in parameters}
        return sigma_params, rho_params

    def sigma_value(self, theta: float, parameters: Optional[Parameters] = None) -> float:
        sigma_params, _ = self._split(self._parameters(parameters))
        return evaluate(self.sigma, theta, sigma_params)

    def rho_value(self, theta: float, parameters: Optional[Parameters] = None) -> float:
        _, rho_params = self._split(self._parameters(parameters))
        return evaluate(self.rho, theta, rho_params)

    @property
    def theta_star(self) -> float:
        return self.maximum_theta()

    def maximum_theta(self, parameters: Optional[Parameters] = None) -> float:
        sigma_params, rho_params = self._split(self._parameters(parameters))
        return min(max_theta(self.sigma, sigma_params), max_theta(self.rho, rho_params))

    def evaluate(
        self,
        theta: float,
        delay: int = 0,
        backlog: float = 0.0,
        parameters: Optional[Parameters] = None,
    ) -> float:
        """
        Violation bound P(q > backlog) or P(d > delay) at theta.

            exp(theta * (sigma + rho * delay - backlog)) / (1 - exp(theta * rho))

        Raises:
            ServerOverloadError: rho >= 0, i.e. the service cannot sustain
                the arrivals at this theta.
        """
        parameters = self._parameters(parameters)
        sigma = self.sigma_value(theta, parameters)
        rho = self.rho_value(theta, parameters)
        if rho >= 0:
            raise ServerOverloadError(f"rho={rho:.6g} >= 0 at theta={theta:.6g}")

        with np.errstate(over="ignore"):
            numerator = np.exp(theta * (sigma + rho * delay - backlog))
        denominator = -np.expm1(theta * rho)
        if denominator <= 0:
            raise ServerOverloadError(f"Degenerate rate term at theta={theta:.6g}")
        return float(numerator / denominator)

    # =========================================================================
    # Optimizable contract
    # =========================================================================

    def prepare(self) -> None:
        for hoelder in self._hoelders.values():
            hoelder.reset()

    def hoelder_parameters(self) -> Dict[int, Hoelder]:
        return self._hoelders

    def __repr__(self) -> str:
        return f"Arrival(sigma={self.sigma}, rho={self.rho}, hoelders={sorted(self._hoelders)})"
