"""
Pytest configuration for SNC Calculator test suite.
"""

import pytest
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from snc_calculator.symbolic_math.exceptions import ThetaOutOfBoundError  # noqa: E402
from snc_calculator.symbolic_math.hoelder import HoelderFactory  # noqa: E402
from snc_calculator.optimization.simple_gradient import build_single_server  # noqa: E402


def pytest_configure(config):
    """Called after command line options have been parsed."""
    # Add markers for test organization
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


class QuadraticBound:
    """Optimizable without Hoelder pairs: (theta - center)^2 on (0, max_theta)."""

    def __init__(self, center, max_theta=1.0):
        self.center = center
        self.max_theta = max_theta
        self.prepared = 0
        self.evaluations = 0

    def prepare(self):
        self.prepared += 1

    def hoelder_parameters(self):
        return {}

    def maximum_theta(self, parameters=None):
        return self.max_theta

    def evaluate(self, theta, parameters=None):
        if not 0 < theta < self.max_theta:
            raise ThetaOutOfBoundError(theta, self.max_theta, "QuadraticBound")
        self.evaluations += 1
        return (theta - self.center) ** 2


@pytest.fixture
def quadratic_bound():
    """Bound with its minimum at theta = 0.37."""
    return QuadraticBound(0.37)


@pytest.fixture
def hoelder_factory():
    return HoelderFactory()


@pytest.fixture
def single_server():
    """Exponential arrivals (rate 2, mean 0.5 per slot) at a server of rate 1."""
    return build_single_server(2.0, 1.0)


@pytest.fixture
def dependent_server():
    return build_single_server(2.0, 1.0, dependent=True)


@pytest.fixture
def make_quadratic():
    """QuadraticBound constructor, for tests that need another center or cap."""
    return QuadraticBound
