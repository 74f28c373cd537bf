"""
Exception hierarchy for the clothoid kernel.

Three kinds of failure are kept apart:

- PreconditionError: the caller broke a contract (programmer error).
- DegenerateGeometryError: the input geometry has no meaningful answer
  (coincident boundary points, zero-length arcs where a length is needed).
- ConvergenceError: an iterative solver ran out of budget. Recoverable by
  retrying with a looser tolerance or a larger iteration bound.

The first two derive from ValueError, the last from RuntimeError, so a
"no solution found" outcome is never caught by an ``except ValueError``.
"""

from typing import Optional


class ClothoidError(Exception):
    """Base exception for all clothoid kernel errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class PreconditionError(ClothoidError, ValueError):
    """A documented precondition of an operation was violated."""


class DegenerateGeometryError(ClothoidError, ValueError):
    """The geometric configuration is degenerate (zero length, coincident points)."""


class ConvergenceError(ClothoidError, RuntimeError):
    """An iterative solver exhausted its iteration budget.

    Attributes:
        iterations: Number of iterations performed.
        residual: Residual at the last iterate.
    """

    def __init__(self, message: str, iterations: int, residual: float,
                 details: Optional[dict] = None):
        self.iterations = iterations
        self.residual = residual
        details = dict(details or {})
        details.setdefault("iterations", iterations)
        details.setdefault("residual", residual)
        super().__init__(message, details)
