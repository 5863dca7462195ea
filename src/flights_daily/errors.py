"""Error types raised by the daily flights analysis."""
from __future__ import annotations


class AnalysisError(RuntimeError):
    """Base class for failures that halt the current analysis step."""


class MalformedDateError(AnalysisError, ValueError):
    """Raised when event rows carry missing or unparseable date fields."""

    def __init__(self, message: str, bad_rows: int = 0) -> None:
        super().__init__(message)
        self.bad_rows = bad_rows


class TermOutOfRangeError(AnalysisError, ValueError):
    """Raised when a date falls outside every configured term range."""


class ExtrapolationError(AnalysisError, ValueError):
    """Raised when a model is asked to predict an unseen categorical level."""


class NumericalNonConvergenceError(AnalysisError):
    """Raised when robust IRLS fitting exhausts its iteration budget."""

    def __init__(self, iterations: int, tol: float) -> None:
        super().__init__(
            f"robust fit did not converge after {iterations} iterations (tol={tol:g})"
        )
        self.iterations = iterations
        self.tol = tol


class MissingDatasetError(AnalysisError):
    """Raised when no event file is configured or the configured one is absent."""
