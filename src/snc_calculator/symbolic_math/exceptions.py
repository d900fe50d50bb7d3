"""
Exceptions raised by the symbolic function algebra.

Structural errors (ParameterMismatchError, BadInitializationError) point at a
modeling bug and propagate to the caller. Numeric-domain errors
(ThetaOutOfBoundError, ServerOverloadError) mark a point of the search space
as infeasible; the optimizer turns them into an infinite cost.
"""


class SNCError(Exception):
    """Base class for all calculator errors."""


class ParameterMismatchError(SNCError):
    """The Hoelder assignment does not match the ids a function requires."""

    def __init__(self, message, missing=(), extra=()):
        self.missing = tuple(sorted(missing))
        self.extra = tuple(sorted(extra))
        details = []
        if self.missing:
            details.append(f"missing ids {list(self.missing)}")
        if self.extra:
            details.append(f"unexpected ids {list(self.extra)}")
        if details:
            message = f"{message} ({', '.join(details)})"
        super().__init__(message)


class ThetaOutOfBoundError(SNCError, ValueError):
    """Theta (after any scaling) lies outside (0, max_theta)."""

    def __init__(self, theta: float, max_theta: float, where: str = ""):
        self.theta = theta
        self.max_theta = max_theta
        location = f" in {where}" if where else ""
        super().__init__(
            f"theta={theta!r} outside (0, {max_theta!r}){location}"
        )


class ServerOverloadError(SNCError):
    """The modeled system cannot be stable at the current parameters."""


class BadInitializationError(SNCError, ValueError):
    """A function or Hoelder set was constructed with inconsistent structure."""
