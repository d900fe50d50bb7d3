"""
Simple gradient-style search over theta and Hoelder pairs.

The search starts with every Hoelder pair at p = q = 2 and theta equal to the
theta granularity. It evaluates all neighbors reachable by "one step": theta
moved by the theta granularity, or a single Hoelder pair moved by the Hoelder
granularity. It moves to the best neighbor if that strictly improves the
bound and repeats; otherwise the current bound is the result.

Step rule for a Hoelder pair (p, q):

    P-step:  p < 2 ? p - g : q + g
    Q-step:  p < 2 ? p + g : q - g

Only one of p, q moves per step, so the pair is not kept conjugate. Neighbors
that would leave p, q > 1 are not visited.

Neighbors are immutable snapshots evaluated against copied Hoelder pairs; the
caller's pairs are only touched by prepare() at the start of a run.

Usage:
    python -m snc_calculator.optimization.simple_gradient --arrival-rate 2 --service-rate 1
"""

import argparse
import math
import sys
import time
import warnings
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from scipy.optimize import minimize_scalar

from snc_calculator.core.constants import (
    HOELDER_GRANULARITY,
    MAX_ITERATIONS,
    THETA_GRANULARITY,
    VIOLATION_PROBABILITY,
)
from snc_calculator.optimization.abstract_optimizer import AbstractOptimizer
from snc_calculator.optimization.optimizable import BoundType, Optimizable
from snc_calculator.symbolic_math.arrival import Arrival, Service
from snc_calculator.symbolic_math.exceptions import ServerOverloadError, ThetaOutOfBoundError
from snc_calculator.symbolic_math.functions import ConstantFunction, ExponentialRho
from snc_calculator.symbolic_math.hoelder import Hoelder, HoelderFactory

CostFunction = Callable[[float, Mapping[int, Hoelder]], float]

# Hoelder values compared against this decide the direction of a step
_PIVOT = 2.0


class Change(Enum):
    """Kind of move committed in one iteration."""
    THETA_DEC = "theta-"
    THETA_INC = "theta+"
    HOELDER_P = "p-step"
    HOELDER_Q = "q-step"
    NOTHING = "none"


@dataclass(frozen=True)
class SearchPosition:
    """
    A point of the search space.

    theta is kept as an integer multiple of the theta granularity so that
    moving back and forth returns to exactly the same value.
    """

    theta_index: int
    hoelders: Tuple[Tuple[int, float, float], ...] = ()

    @classmethod
    def start(cls, hoelders: Mapping[int, Hoelder]) -> "SearchPosition":
        return cls(1, tuple(sorted((i, h.p_value, h.q_value) for i, h in hoelders.items())))

    def theta(self, theta_granularity: float) -> float:
        return self.theta_index * theta_granularity

    def assignment(self) -> Dict[int, Hoelder]:
        """Fresh Hoelder pairs holding this position's values."""
        return {i: Hoelder(i, p, q) for i, p, q in self.hoelders}

    def values(self) -> Dict[int, Tuple[float, float]]:
        return {i: (p, q) for i, p, q in self.hoelders}

    def moved_theta(self, steps: int) -> "SearchPosition":
        return SearchPosition(self.theta_index + steps, self.hoelders)

    def moved_hoelder(self, hoelder_id: int, p: float, q: float) -> "SearchPosition":
        hoelders = tuple(
            (i, p, q) if i == hoelder_id else (i, old_p, old_q)
            for i, old_p, old_q in self.hoelders
        )
        return SearchPosition(self.theta_index, hoelders)


@dataclass(frozen=True)
class Move:
    """A neighbor of the current position and the change leading to it."""
    change: Change
    position: SearchPosition
    hoelder_id: Optional[int] = None


@dataclass
class OptimizationResult:
    """Result of one search run."""

    value: float
    theta: float
    hoelders: Dict[int, Tuple[float, float]] = field(default_factory=dict)

    # Search metadata
    iterations: int = 0
    evaluations: int = 0
    converged: bool = False
    polished: bool = False
    history: List[Tuple[Change, Optional[int]]] = field(default_factory=list)
    time_seconds: float = 0.0

    def summary(self) -> str:
        """Generate a summary of the search."""
        lines = [
            "=" * 60,
            "BOUND SEARCH RESULT",
            "=" * 60,
            f"  Bound      = {self.value:.6g}",
            f"  theta      = {self.theta:.6g}",
        ]
        for hoelder_id, (p, q) in sorted(self.hoelders.items()):
            lines.append(f"  Hoelder {hoelder_id:<3d}= (p={p:.4f}, q={q:.4f})")
        lines.extend([
            "",
            f"CONVERGENCE: {'[OK] YES' if self.converged else '[FAIL] NO (iteration cap)'}",
            f"Iterations: {self.iterations}",
            f"Evaluations: {self.evaluations}",
            f"Theta polished: {'yes' if self.polished else 'no'}",
            f"Time: {self.time_seconds:.3f} s",
            "=" * 60,
        ])
        return "\n".join(lines)


class SimpleGradient(AbstractOptimizer):
    """
    Discrete hill-climb over theta and Hoelder pairs.

    The search is local: it stops in the first position none of whose
    neighbors is strictly better, which need not be the global minimum.

    Args:
        optimizable: Bound searched by minimize().
        boundtype: Metric the bound describes.
        verbose: Print progress information.
        log_file: Path to log file for progress updates (optional).
        max_iterations: Cap on search iterations per run.
        polish_theta: After the discrete search, refine theta continuously
            (Hoelder pairs fixed) within one granularity step around the
            result. The refinement is kept only if it strictly improves.
    """

    def __init__(
        self,
        optimizable: Optional[Optimizable] = None,
        boundtype: BoundType = BoundType.BACKLOG,
        verbose: bool = False,
        log_file: Optional[str] = None,
        max_iterations: int = MAX_ITERATIONS,
        polish_theta: bool = False,
    ):
        super().__init__(optimizable, boundtype, verbose, log_file, max_iterations)
        self.polish_theta = polish_theta
        self.last_result: Optional[OptimizationResult] = None

    # =========================================================================
    # Search loop
    # =========================================================================

    @staticmethod
    def neighbors(
        position: SearchPosition,
        max_theta: float,
        theta_granularity: float,
        hoelder_granularity: float,
    ) -> Iterator[Move]:
        """Neighbors of ``position`` in the fixed order the search visits them."""
        if position.theta(theta_granularity) > theta_granularity:
            yield Move(Change.THETA_DEC, position.moved_theta(-1))
        if position.theta(theta_granularity) < max_theta - theta_granularity:
            yield Move(Change.THETA_INC, position.moved_theta(1))

        for hoelder_id, p, q in position.hoelders:
            if p < _PIVOT:
                new_p, new_q = p - hoelder_granularity, q
            else:
                new_p, new_q = p, q + hoelder_granularity
            if new_p > 1 and new_q > 1:
                yield Move(Change.HOELDER_P, position.moved_hoelder(hoelder_id, new_p, new_q), hoelder_id)

        for hoelder_id, p, q in position.hoelders:
            if p < _PIVOT:
                new_p, new_q = p + hoelder_granularity, q
            else:
                new_p, new_q = p, q - hoelder_granularity
            if new_p > 1 and new_q > 1:
                yield Move(Change.HOELDER_Q, position.moved_hoelder(hoelder_id, new_p, new_q), hoelder_id)

    @staticmethod
    def _as_cost(value: float) -> float:
        value = float(value)
        return math.inf if math.isnan(value) else value

    def _evaluate(self, cost: CostFunction, theta: float, position: SearchPosition) -> float:
        try:
            return self._as_cost(cost(theta, position.assignment()))
        except (ServerOverloadError, ThetaOutOfBoundError):
            return math.inf

    def search(
        self,
        cost: CostFunction,
        max_theta: float,
        hoelders: Mapping[int, Hoelder],
        theta_granularity: float,
        hoelder_granularity: float,
    ) -> OptimizationResult:
        """
        Minimize ``cost(theta, parameters)`` starting from the given pairs.

        The initial point is theta = theta_granularity with the current values
        of ``hoelders``; the pairs themselves are never modified.

        Raises:
            ThetaOutOfBoundError: the initial theta is already infeasible.
            ParameterMismatchError: ``cost`` and ``hoelders`` disagree.
        """
        self._check_granularities(theta_granularity, hoelder_granularity)
        start_time = time.time()
        self.max_theta = max_theta

        position = SearchPosition.start(hoelders)
        try:
            value = self._as_cost(cost(position.theta(theta_granularity), position.assignment()))
        except ServerOverloadError:
            value = math.inf
        evaluations = 1
        iterations = 0
        history = []
        converged = False

        self._report(f"Start: theta={theta_granularity:.6g}, max_theta={max_theta:.6g}, bound={value:.6g}")

        while iterations < self.max_iterations:
            iterations += 1
            best_value = value
            best_move = Move(Change.NOTHING, position)
            for move in self.neighbors(position, max_theta, theta_granularity, hoelder_granularity):
                evaluations += 1
                candidate = self._evaluate(cost, move.position.theta(theta_granularity), move.position)
                if candidate < best_value:
                    best_value = candidate
                    best_move = move

            if best_move.change is Change.NOTHING:
                converged = True
                break

            position = best_move.position
            value = best_value
            history.append((best_move.change, best_move.hoelder_id))
            self._report(
                f"  Iter {iterations}: {best_move.change.value:<7s} "
                f"theta={position.theta(theta_granularity):.6g} bound={value:.6g}"
            )

        if not converged:
            warnings.warn(
                f"Bound search stopped after {self.max_iterations} iterations without converging",
                RuntimeWarning,
            )

        theta = position.theta(theta_granularity)
        polished = False
        if self.polish_theta and math.isfinite(value):
            theta, value, extra_evaluations, polished = self._polish(
                cost, position, value, max_theta, theta_granularity
            )
            evaluations += extra_evaluations

        result = OptimizationResult(
            value=value,
            theta=theta,
            hoelders=position.values(),
            iterations=iterations,
            evaluations=evaluations,
            converged=converged,
            polished=polished,
            history=history,
            time_seconds=time.time() - start_time,
        )
        self._report(f"Result: bound={value:.6g} at theta={theta:.6g} "
                     f"after {iterations} iterations, {evaluations} evaluations")
        self.last_result = result
        return result

    def _polish(
        self,
        cost: CostFunction,
        position: SearchPosition,
        value: float,
        max_theta: float,
        theta_granularity: float,
    ) -> Tuple[float, float, int, bool]:
        """Bounded scalar refinement of theta around the discrete optimum."""
        theta = position.theta(theta_granularity)
        lower = theta - theta_granularity if theta > theta_granularity else theta / 2
        upper = theta + theta_granularity
        if upper >= max_theta:
            upper = (theta + max_theta) / 2

        def objective(x):
            candidate = self._evaluate(cost, x, position)
            return candidate if math.isfinite(candidate) else sys.float_info.max

        try:
            res = minimize_scalar(
                objective,
                bounds=(lower, upper),
                method='bounded',
                options={'xatol': theta_granularity * 1e-3},
            )
        except (ValueError, FloatingPointError) as e:
            warnings.warn(f"Theta refinement failed: {e}")
            return theta, value, 0, False

        if res.success and res.fun < value:
            return float(res.x), float(res.fun), int(res.nfev), True
        return theta, value, int(res.nfev), False

    # =========================================================================
    # Entry points
    # =========================================================================

    def minimize(self, theta_granularity: float, hoelder_granularity: float) -> float:
        """Minimize the optimizable given at construction; returns the bound."""
        if self.optimizable is None:
            raise ValueError("No optimizable bound to minimize")
        optimizable = self.optimizable
        optimizable.prepare()

        def cost(theta, parameters):
            return optimizable.evaluate(theta, parameters=parameters)

        result = self.search(
            cost,
            optimizable.maximum_theta(),
            optimizable.hoelder_parameters(),
            theta_granularity,
            hoelder_granularity,
        )
        return result.value

    def bound(
        self,
        arrival: Arrival,
        boundtype: BoundType,
        bound_value: float,
        theta_granularity: float,
        hoelder_granularity: float,
    ) -> float:
        """
        Violation probability P(backlog > bound_value) or P(delay > bound_value).

        A delay is rounded up to whole time slots. OUTPUT has no optimization
        target and returns NaN.
        """
        boundtype = self._check_boundtype(boundtype)
        if boundtype is BoundType.OUTPUT:
            return math.nan
        self._check_granularities(theta_granularity, hoelder_granularity)
        if not bound_value >= 0:
            raise ValueError(f"bound_value must be non-negative, got {bound_value}")
        if boundtype is BoundType.DELAY and not math.isfinite(bound_value):
            raise ValueError(f"delay bound_value must be finite, got {bound_value}")

        arrival.prepare()
        if boundtype is BoundType.BACKLOG:
            def cost(theta, parameters):
                return arrival.evaluate(theta, 0, bound_value, parameters=parameters)
        else:
            delay = int(math.ceil(bound_value))

            def cost(theta, parameters):
                return arrival.evaluate(theta, delay, 0.0, parameters=parameters)

        self._report(f"{boundtype.value} bound for value {bound_value:g}")
        result = self.search(
            cost,
            arrival.maximum_theta(),
            arrival.hoelder_parameters(),
            theta_granularity,
            hoelder_granularity,
        )
        return result.value

    def reverse_bound(
        self,
        arrival: Arrival,
        boundtype: BoundType,
        violation_probability: float,
        theta_granularity: float,
        hoelder_granularity: float,
    ) -> float:
        """
        Smallest backlog or delay exceeded with probability at most
        ``violation_probability``. OUTPUT returns NaN.

        backlog(theta) = log(P(theta)) / theta - log(eps) / theta
        delay(theta)   = -1/rho * (-log(eps) / theta + sigma)
        """
        boundtype = self._check_boundtype(boundtype)
        if boundtype is BoundType.OUTPUT:
            return math.nan
        self._check_granularities(theta_granularity, hoelder_granularity)
        if not 0 < violation_probability < 1:
            raise ValueError(f"violation_probability must be in (0, 1), got {violation_probability}")
        log_epsilon = math.log(violation_probability)

        arrival.prepare()
        if boundtype is BoundType.BACKLOG:
            def cost(theta, parameters):
                probability = arrival.evaluate(theta, 0, 0.0, parameters=parameters)
                if not probability > 0:
                    raise ServerOverloadError(f"Non-positive bound {probability} at theta={theta:.6g}")
                return math.log(probability) / theta - log_epsilon / theta
        else:
            def cost(theta, parameters):
                sigma = arrival.sigma_value(theta, parameters)
                rho = arrival.rho_value(theta, parameters)
                if rho >= 0:
                    raise ServerOverloadError(f"rho={rho:.6g} >= 0 at theta={theta:.6g}")
                return -1.0 / rho * (-log_epsilon / theta + sigma)

        self._report(f"reverse {boundtype.value} bound for violation probability {violation_probability:g}")
        result = self.search(
            cost,
            arrival.maximum_theta(),
            arrival.hoelder_parameters(),
            theta_granularity,
            hoelder_granularity,
        )
        return result.value


# =============================================================================
# Command line
# =============================================================================

def build_single_server(arrival_rate: float, service_rate: float, dependent: bool = False) -> Arrival:
    """
    Exponentially distributed arrivals per slot (mean 1/arrival_rate) at a
    constant-rate server. With ``dependent`` the two are combined through a
    Hoelder pair instead of being treated as independent.
    """
    arrival = Arrival(ConstantFunction(0.0), ExponentialRho(arrival_rate))
    service = Service.constant_rate(service_rate)
    factory = HoelderFactory() if dependent else None
    return Arrival.leftover(arrival, service, factory)


def main(argv=None):
    """Main entry point for the bound calculator CLI."""
    from snc_calculator.reporting.bound_report import format_results

    parser = argparse.ArgumentParser(
        description="SNC Bound Calculator - backlog and delay bounds for a single server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  snc-bound --arrival-rate 2 --service-rate 1                 # reverse backlog bound, eps=1e-6
  snc-bound --mode bound --boundtype delay --value 10         # P(delay > 10)
  snc-bound --dependent --hoelder-granularity 0.05            # arrival and service dependent
  snc-bound --theta-granularity 0.001 --polish                # finer theta, continuous refinement
        """
    )
    parser.add_argument("--mode", choices=["bound", "reverse"], default="reverse",
                        help="'bound' for a violation probability, 'reverse' for a backlog/delay value (default: reverse)")
    parser.add_argument("--boundtype", choices=[b.value for b in BoundType], default="backlog",
                        help="Metric to bound (default: backlog)")
    parser.add_argument("--arrival-rate", type=float, default=2.0, dest="arrival_rate",
                        help="Rate of the exponential increments; mean arrivals per slot are 1/rate (default: 2.0)")
    parser.add_argument("--service-rate", type=float, default=1.0, dest="service_rate",
                        help="Constant service rate per slot (default: 1.0)")
    parser.add_argument("--value", type=float, default=10.0,
                        help="Backlog or delay value for --mode bound (default: 10)")
    parser.add_argument("--violation-probability", type=float, default=VIOLATION_PROBABILITY,
                        dest="violation_probability",
                        help=f"Target violation probability for --mode reverse (default: {VIOLATION_PROBABILITY:g})")
    parser.add_argument("--theta-granularity", type=float, default=THETA_GRANULARITY, dest="theta_granularity",
                        help=f"Theta step (default: {THETA_GRANULARITY:g})")
    parser.add_argument("--hoelder-granularity", type=float, default=HOELDER_GRANULARITY,
                        dest="hoelder_granularity",
                        help=f"Hoelder step (default: {HOELDER_GRANULARITY:g})")
    parser.add_argument("--dependent", action="store_true",
                        help="Treat arrivals and service as dependent (adds a Hoelder pair)")
    parser.add_argument("--polish", action="store_true",
                        help="Refine theta continuously after the discrete search")
    parser.add_argument("--max-iter", type=int, default=MAX_ITERATIONS, dest="max_iter",
                        help=f"Maximum number of search iterations (default: {MAX_ITERATIONS})")
    parser.add_argument("--log-file", type=str, default=None, dest="log_file",
                        help="Append progress to this file")
    parser.add_argument("--verbose", action="store_true", help="Print search progress")

    args = parser.parse_args(argv)
    boundtype = BoundType(args.boundtype)

    arrival = build_single_server(args.arrival_rate, args.service_rate, args.dependent)
    optimizer = SimpleGradient(
        boundtype=boundtype,
        verbose=args.verbose,
        log_file=args.log_file,
        max_iterations=args.max_iter,
        polish_theta=args.polish,
    )

    if args.mode == "bound":
        value = optimizer.bound(arrival, boundtype, args.value,
                                args.theta_granularity, args.hoelder_granularity)
        label = f"P({boundtype.value} > {args.value:g})"
    else:
        value = optimizer.reverse_bound(arrival, boundtype, args.violation_probability,
                                        args.theta_granularity, args.hoelder_granularity)
        label = f"{boundtype.value} at eps={args.violation_probability:g}"

    if boundtype is BoundType.OUTPUT or optimizer.last_result is None:
        print(f"{label}: {value}")
        return 0

    print(format_results([(label, optimizer.last_result)]))
    return 0


if __name__ == "__main__":
    sys.exit(main())
