"""Exception hierarchy for the trial evaluation pipeline."""
from __future__ import annotations

from typing import Optional


class TourEvaluationError(Exception):
    """Base class for every error raised by tsp_trials."""


class InvalidTopologyError(TourEvaluationError):
    """Start/end pair cannot be turned into a closed-tour problem."""


class LabelCollisionError(TourEvaluationError):
    """The synthetic label is already used by a city in the matrix."""


class MalformedTourError(TourEvaluationError):
    """A raw tour or reconstructed path violates its invariants."""


class SolverError(TourEvaluationError):
    """A heuristic invocation failed or returned an infeasible tour."""

    def __init__(self, message: str, method: Optional[str] = None, trial: Optional[int] = None):
        self.method = method
        self.trial = trial
        where = []
        if method is not None:
            where.append(f"method={method}")
        if trial is not None:
            where.append(f"trial={trial}")
        if where:
            message = f"[{' '.join(where)}] {message}"
        super().__init__(message)
