"""Best, worst and full-distribution views over a finished set of trials.

Every view keeps ties: when several trials share the minimum (or maximum)
length, all of them are reported. Nothing is cached; ``aggregate`` can be
called again on the same trials and gives the same answer.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, List, Sequence, Tuple

import pandas as pd

from .errors import MalformedTourError
from .runner import Trial


def _distinct_paths(trials: Sequence[Trial]) -> List[Tuple[Hashable, ...]]:
    seen = []
    for t in trials:
        if t.path not in seen:
            seen.append(t.path)
    return seen


@dataclass(frozen=True)
class AggregateResult:
    best_by_method: Dict[str, List[Trial]]
    global_best: List[Trial]
    worst: List[Trial]
    distribution: pd.DataFrame

    @property
    def best_length(self) -> float:
        return self.global_best[0].length

    @property
    def worst_length(self) -> float:
        return self.worst[0].length

    @property
    def global_best_paths(self) -> List[Tuple[Hashable, ...]]:
        return _distinct_paths(self.global_best)

    @property
    def worst_paths(self) -> List[Tuple[Hashable, ...]]:
        return _distinct_paths(self.worst)

    def best_performance_table(self) -> pd.DataFrame:
        rows = [
            {'method': t.method, 'trial': t.trial, 'length': t.length}
            for trials in self.best_by_method.values() for t in trials
        ]
        return pd.DataFrame(rows, columns=['method', 'trial', 'length'])

    def best_routes_table(self) -> pd.DataFrame:
        rows = [
            {'method': t.method, 'trial': t.trial, 'position': pos, 'label': label}
            for t in self.global_best for pos, label in enumerate(t.path, start=1)
        ]
        return pd.DataFrame(rows, columns=['method', 'trial', 'position', 'label'])


def aggregate(trials: Sequence[Trial], atol: float = 0.0) -> AggregateResult:
    """Build the aggregate views; trials must carry reconstructed paths.

    ``atol`` widens what counts as a tie with the minimum/maximum.
    """
    trials = list(trials)
    if not trials:
        raise ValueError("No trials to aggregate")
    seen = set()
    for t in trials:
        if t.path is None:
            raise MalformedTourError(f"Trial {t.method}#{t.trial} has no reconstructed path")
        if (t.method, t.trial) in seen:
            raise MalformedTourError(f"Duplicate trial {t.method}#{t.trial}")
        seen.add((t.method, t.trial))

    distribution = pd.DataFrame(
        [{'trial': t.trial, 'method': t.method, 'length': t.length} for t in trials],
        columns=['trial', 'method', 'length'],
    )
    method_min = distribution.groupby('method', sort=False)['length'].min()

    best_by_method: Dict[str, List[Trial]] = {}
    for method, min_length in method_min.items():
        best_by_method[method] = [
            t for t in trials if t.method == method and t.length <= min_length + atol
        ]

    lo = distribution['length'].min()
    hi = distribution['length'].max()
    global_best = [t for t in trials if t.length <= lo + atol]
    worst = [t for t in trials if t.length >= hi - atol]

    return AggregateResult(
        best_by_method=best_by_method,
        global_best=global_best,
        worst=worst,
        distribution=distribution,
    )
