"""
latentcorr.core.errors
======================

Exceptions raised by the estimators.

Every failure is raised to the caller as soon as it is detected; no estimator
returns a sentinel value in place of a correlation.

- `InvalidInputError`: negative, non-finite or empty counts
- `DegenerateTableError`: a whole row or column of the table is zero
- `ConvergenceFailure`: an iterative solver stopped without meeting its tolerance
- `IterationLimitExceeded`: the solver used up its iteration cap
- `OutOfRangeEscape`: a trial correlation left (-1, 1) and the retry failed too

Examples
--------
>>> err = IterationLimitExceeded("kirk", last_value=0.41, iterations=20)
>>> isinstance(err, ConvergenceFailure)
True
>>> err.last_value
0.41
"""

from __future__ import annotations
from typing import Optional


class TetrachoricError(ValueError):
    """Base class for all estimator errors."""


class InvalidInputError(TetrachoricError):
    """Cell counts cannot be used (negative, non-finite or all zero)."""


class DegenerateTableError(InvalidInputError):
    """A row or column total is zero so the marginal deviates are undefined."""


class ConvergenceFailure(TetrachoricError):
    """An iterative solver stopped without meeting its tolerance.

    Attributes:
        method: Name of the solver that failed
        last_value: Last trial correlation, if one was available
        iterations: Number of iterations performed
    """

    def __init__(
        self,
        method: str,
        last_value: Optional[float] = None,
        iterations: int = 0,
        reason: str = "did not converge",
    ) -> None:
        self.method = method
        self.last_value = last_value
        self.iterations = iterations
        self.reason = reason
        super().__init__(
            f"{method}: {reason} after {iterations} iterations "
            f"(last value: {last_value})"
        )


class IterationLimitExceeded(ConvergenceFailure):
    """The solver reached its iteration cap."""

    def __init__(
        self, method: str, last_value: Optional[float] = None, iterations: int = 0
    ) -> None:
        super().__init__(
            method, last_value, iterations, reason="iteration limit exceeded"
        )


class OutOfRangeEscape(ConvergenceFailure):
    """A trial correlation left the open interval (-1, 1) twice."""

    def __init__(
        self, method: str, last_value: Optional[float] = None, iterations: int = 0
    ) -> None:
        super().__init__(
            method, last_value, iterations, reason="trial value left (-1, 1)"
        )
