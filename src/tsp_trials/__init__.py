"""Repeated-trial evaluation of TSP heuristics with fixed start and end cities."""
from .aggregate import AggregateResult, aggregate
from .benchmark import Evaluation, evaluate
from .errors import (
    InvalidTopologyError,
    LabelCollisionError,
    MalformedTourError,
    SolverError,
    TourEvaluationError,
)
from .matrix import DEFAULT_SYNTHETIC_LABEL, as_matrix, path_length, tour_length, transform
from .runner import Trial, run_trials
from .tour import reconstruct, route_segments, segment_pairs

__all__ = [
    'AggregateResult', 'aggregate', 'Evaluation', 'evaluate',
    'InvalidTopologyError', 'LabelCollisionError', 'MalformedTourError', 'SolverError',
    'TourEvaluationError', 'DEFAULT_SYNTHETIC_LABEL', 'as_matrix', 'path_length', 'tour_length',
    'transform', 'Trial', 'run_trials', 'reconstruct', 'route_segments', 'segment_pairs',
]

__version__ = '0.1.0'
