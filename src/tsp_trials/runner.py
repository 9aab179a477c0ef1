"""Repeated independent trials of each heuristic against one matrix.

Solvers are black boxes. A solver is either looked up in a registry
(``{method: solve(matrix) -> (length, tour)}``) or given as one callable
``solve(matrix, method) -> (length, tour)``. The runner never seeds them and
never tells them which trial they are in: every call sees the same matrix.
"""
from __future__ import annotations

import math
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Hashable, List, Mapping, Optional, Sequence, Tuple, Union

import pandas as pd

from .errors import SolverError

RegistrySolver = Callable[[pd.DataFrame], Tuple[float, Sequence[Hashable]]]
MethodSolver = Callable[[pd.DataFrame, str], Tuple[float, Sequence[Hashable]]]
SolverSpec = Union[Mapping[str, RegistrySolver], MethodSolver]


@dataclass(frozen=True)
class Trial:
    method: str
    trial: int                          # 1..nsims within the method
    length: float
    tour: Tuple[Hashable, ...]          # raw tour, includes the synthetic label
    runtime: float = 0.0
    path: Optional[Tuple[Hashable, ...]] = None   # set by reconstruction


def _resolve(solver: SolverSpec, methods: Sequence[str]) -> Callable[[pd.DataFrame, str], object]:
    if isinstance(solver, Mapping):
        missing = [m for m in methods if m not in solver]
        if missing:
            raise SolverError(f"Unknown methods {missing}; known: {list(solver.keys())}")
        return lambda matrix, method: solver[method](matrix)
    if not callable(solver):
        raise TypeError("solver must be a registry mapping or a callable")
    return solver


def _check_result(result, labels, method: str, trial: int) -> Tuple[float, Tuple[Hashable, ...]]:
    try:
        length, tour = result
    except (TypeError, ValueError) as exc:
        raise SolverError(f"Expected (length, tour), got {result!r}", method, trial) from exc
    try:
        length = float(length)
    except (TypeError, ValueError) as exc:
        raise SolverError(f"Non-numeric tour length {length!r}", method, trial) from exc
    if not math.isfinite(length) or length < 0:
        raise SolverError(f"Infeasible tour length {length}", method, trial)
    try:
        tour = tuple(tour)
        visited = set(tour)
    except TypeError as exc:
        raise SolverError(f"Tour is not a sequence of labels: {tour!r}", method, trial) from exc
    if len(tour) != len(labels) or visited != labels:
        raise SolverError(f"Tour is not a permutation of the matrix labels: {list(tour)}", method, trial)
    return length, tour


def _run_one(call, matrix: pd.DataFrame, labels, method: str, trial: int) -> Trial:
    start_t = time.perf_counter()
    try:
        result = call(matrix, method)
    except Exception as exc:
        raise SolverError(f"Solver failed: {exc}", method, trial) from exc
    runtime = time.perf_counter() - start_t
    length, tour = _check_result(result, labels, method, trial)
    return Trial(method=method, trial=trial, length=length, tour=tour, runtime=runtime)


def run_trials(matrix: pd.DataFrame, methods: Sequence[str], nsims: int, solver: SolverSpec,
               workers: int = 1, verbose: bool = False) -> List[Trial]:
    """Run every method ``nsims`` times; trials come back method-major.

    The first failing trial aborts the run with ``SolverError``.
    """
    if isinstance(nsims, bool) or not isinstance(nsims, int) or nsims < 1:
        raise ValueError(f"nsims must be a positive integer, got {nsims!r}")
    methods = list(methods)
    call = _resolve(solver, methods)
    labels = set(matrix.index)
    slots = [(m, r) for m in methods for r in range(1, nsims + 1)]

    if workers <= 1:
        trials: List[Trial] = []
        for method in methods:
            if verbose:
                print(f'  Method {method}')
            for r in range(1, nsims + 1):
                t = _run_one(call, matrix, labels, method, r)
                trials.append(t)
                if verbose:
                    print(f'    run {r}/{nsims}: length={t.length:.4f} time={t.runtime:.3f}s')
        return trials

    results: List[Optional[Trial]] = [None] * len(slots)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {pool.submit(_run_one, call, matrix, labels, m, r): i for i, (m, r) in enumerate(slots)}
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        failed = [f for f in done if f.exception() is not None]
        if failed:
            for f in pending:
                f.cancel()
            # earliest failing (method, trial) slot wins
            raise min(failed, key=futures.get).exception()
        for f in done:
            results[futures[f]] = f.result()
    if verbose:
        for t in results:
            print(f'    {t.method} run {t.trial}/{nsims}: length={t.length:.4f} time={t.runtime:.3f}s')
    return results
