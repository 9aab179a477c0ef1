#!/usr/bin/env python3
"""Evaluate TSP heuristics over repeated trials with fixed start and end cities.

Pipeline: transform the matrix (start/end -> one linking node), run every
method ``runs`` times, cut each tour open again, then aggregate.

Example:
  tsp-trials --matrix cities.csv --start Lisbon --end Vienna --runs 50 \
      --methods nearest_neighbor,repetitive_nn,greedy_descent --summary --plot

Outputs (in results/ by default):
  best_performance.csv   per-method best trials (ties kept)
  best_routes.csv        global best path(s), one row per stop
  distribution.csv       every trial length
  summary.csv            per-method length statistics
  trials_detailed.json   every trial with raw tour and path
  statistics.txt         Kruskal-Wallis / Mann-Whitney comparison
  length_distribution.png, best_route.png (with --plot)
"""
from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass, replace
from typing import Hashable, List, Optional, Sequence

import pandas as pd

from .aggregate import AggregateResult, aggregate
from .analysis import statistical_tests, summarize, write_results
from .errors import TourEvaluationError
from .matrix import DEFAULT_SYNTHETIC_LABEL, transform
from .parsers import read_coordinates, read_matrix
from .runner import SolverSpec, Trial, run_trials
from .solvers import DEFAULT_METHODS, DEFAULT_TIME_LIMIT, make_registry
from .tour import reconstruct


@dataclass
class Evaluation:
    result: AggregateResult
    trials: List[Trial]
    transformed: pd.DataFrame
    synthetic_label: Hashable


def evaluate(matrix: pd.DataFrame, start: Hashable, end: Hashable, methods: Sequence[str],
             nsims: int, solver: SolverSpec, workers: int = 1, verbose: bool = False,
             synthetic_label: Hashable = DEFAULT_SYNTHETIC_LABEL) -> Evaluation:
    """Run the full transform -> trials -> reconstruct -> aggregate pipeline."""
    transformed, dummy = transform(matrix, start, end, synthetic_label)
    raw = run_trials(transformed, methods, nsims, solver, workers=workers, verbose=verbose)
    n = len(matrix)
    trials = [replace(t, path=reconstruct(t.tour, dummy, start, end, n_nodes=n)) for t in raw]
    return Evaluation(result=aggregate(trials), trials=trials, transformed=transformed,
                      synthetic_label=dummy)


def _print_report(result: AggregateResult) -> None:
    print('\nBest length per method:')
    for method, best in result.best_by_method.items():
        ids = ','.join(str(t.trial) for t in best)
        print(f'  {method:22s} length={best[0].length:12.4f} trials=[{ids}]')
    print(f'\nGlobal best length: {result.best_length:.4f}')
    for path in result.global_best_paths:
        print('  ' + ' -> '.join(str(lbl) for lbl in path))
    print(f'Worst length: {result.worst_length:.4f}')


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description='Repeated-trial evaluation of fixed-endpoint TSP heuristics')
    ap.add_argument('--matrix', required=True, help='Distance matrix (.csv, .dat or .atsp)')
    ap.add_argument('--start', required=True, help='Label of the required first city')
    ap.add_argument('--end', required=True, help='Label of the required last city')
    ap.add_argument('--methods', help='Comma list of method names to include (default: all)')
    ap.add_argument('--runs', type=int, default=10, help='Trials per method')
    ap.add_argument('--seed', type=int, default=None, help='Seed for the randomized adapters')
    ap.add_argument('--workers', type=int, default=1, help='Parallel trial threads')
    ap.add_argument('--time-limit', type=int, default=DEFAULT_TIME_LIMIT, help='OR-Tools time limit per trial (s)')
    ap.add_argument('--out-dir', default='results', help='Output directory')
    ap.add_argument('--summary', action='store_true', help='Print per-method statistics')
    ap.add_argument('--plot', action='store_true', help='Write distribution and route plots')
    ap.add_argument('--coords', help='CSV with label,x,y used for the route plot')
    ap.add_argument('--verbose', action='store_true')
    args = ap.parse_args(argv)

    methods = list(DEFAULT_METHODS)
    if args.methods:
        methods = [m.strip() for m in args.methods.split(',') if m.strip()]
        missing = [m for m in methods if m not in DEFAULT_METHODS]
        if missing:
            print(f'[error] unknown method names: {missing}')
            print(f'Known: {list(DEFAULT_METHODS.keys())}')
            return 1

    try:
        matrix = read_matrix(args.matrix)
    except (OSError, ValueError) as e:
        print(f'[error] cannot read {args.matrix}: {e}')
        return 1
    print(f'Matrix {os.path.basename(args.matrix)} (n={len(matrix)}) start={args.start} end={args.end}')
    print(f'Methods: {methods}  runs={args.runs}  workers={args.workers}')

    registry = make_registry(methods, seed=args.seed, time_limit=args.time_limit)
    try:
        ev = evaluate(matrix, args.start, args.end, methods, args.runs, registry,
                      workers=args.workers, verbose=args.verbose)
    except (TourEvaluationError, ValueError) as e:
        print(f'[error] {e}')
        return 1

    _print_report(ev.result)
    written = write_results(ev.result, ev.trials, args.out_dir)
    for name, path in written.items():
        print(f'✓ {name}: {path}')
    if args.summary:
        print(summarize(ev.result.distribution).to_string(index=False))
    for line in statistical_tests(ev.result.distribution, args.out_dir):
        print(line)

    if args.plot:
        from .plots import plot_distribution, plot_route
        dist_png = os.path.join(args.out_dir, 'length_distribution.png')
        plot_distribution(ev.result.distribution, dist_png)
        print(f'✓ Plot saved to {dist_png}')
        if args.coords:
            coords = read_coordinates(args.coords)
            route_png = os.path.join(args.out_dir, 'best_route.png')
            plot_route(ev.result.global_best_paths[0], coords, route_png)
            print(f'✓ Plot saved to {route_png}')
        else:
            print('[info] no --coords given; skipping route plot')
    return 0


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
