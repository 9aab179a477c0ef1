"""Solver registry: thin adapters over third-party TSP heuristics.

Every adapter has the registry contract ``solve(matrix) -> (length, tour)``
where ``matrix`` is a labelled square DataFrame and ``tour`` a list of its
labels. The search itself is done by the library; adapters only translate
labels to node indices and back, and recompute the length on the float
matrix.

Method names (default set):
  nearest_neighbor     -> networkx greedy_tsp, random start       (randomized)
  repetitive_nn        -> networkx greedy_tsp, best of all starts (deterministic)
  simulated_annealing  -> networkx simulated_annealing_tsp        (randomized)
  threshold_accepting  -> networkx threshold_accepting_tsp        (randomized)
  cheapest_insertion   -> OR-Tools LOCAL_CHEAPEST_INSERTION, no local search
  path_cheapest_arc    -> OR-Tools PATH_CHEAPEST_ARC, no local search
  greedy_descent       -> OR-Tools PATH_CHEAPEST_ARC + greedy descent local search

Dependencies:
    - networkx for the approximation heuristics
    - ortools for the routing-based constructions; methods using it raise
      RuntimeError when the package is missing
"""
from __future__ import annotations

import os as _os  # for environment tweaks
import random
from functools import partial
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Tuple

import networkx as nx
import pandas as pd
from networkx.algorithms import approximation as approx

from .matrix import tour_length

try:
    from ortools.constraint_solver import pywrapcp, routing_enums_pb2  # type: ignore
    _HAS_ORTOOLS = True
except ImportError:  # pragma: no cover - import guard
    _HAS_ORTOOLS = False

# OR-Tools arc costs are integers
ORTOOLS_COST_SCALE = 1000
DEFAULT_TIME_LIMIT = 10

DEFAULT_METHODS: Dict[str, Dict[str, str]] = {
    # networkx approximation heuristics
    'nearest_neighbor': {'backend': 'networkx', 'algorithm': 'greedy', 'start': 'random'},
    'repetitive_nn': {'backend': 'networkx', 'algorithm': 'greedy', 'start': 'all'},
    'simulated_annealing': {'backend': 'networkx', 'algorithm': 'simulated_annealing', 'start': 'random'},
    'threshold_accepting': {'backend': 'networkx', 'algorithm': 'threshold_accepting', 'start': 'random'},
    # OR-Tools routing constructions
    'cheapest_insertion': {'backend': 'ortools', 'strategy': 'LOCAL_CHEAPEST_INSERTION', 'ls': 'none'},
    'path_cheapest_arc': {'backend': 'ortools', 'strategy': 'PATH_CHEAPEST_ARC', 'ls': 'none'},
    'greedy_descent': {'backend': 'ortools', 'strategy': 'PATH_CHEAPEST_ARC', 'ls': 'greedy_descent'},
}

Solver = Callable[[pd.DataFrame], Tuple[float, List[Hashable]]]


def to_digraph(matrix: pd.DataFrame) -> nx.DiGraph:
    """Complete directed graph over node positions 0..n-1, no self loops."""
    values = matrix.to_numpy(dtype=float)
    n = values.shape[0]
    G = nx.DiGraph()
    G.add_nodes_from(range(n))
    G.add_weighted_edges_from(
        (i, j, float(values[i, j])) for i in range(n) for j in range(n) if i != j
    )
    return G


def _open_cycle(cycle: List[int]) -> List[int]:
    # networkx returns closed cycles with the source repeated at the end
    if len(cycle) > 1 and cycle[0] == cycle[-1]:
        return cycle[:-1]
    return list(cycle)


def _labelled(matrix: pd.DataFrame, nodes: Iterable[int]) -> Tuple[float, List[Hashable]]:
    labels = list(matrix.index)
    tour = [labels[i] for i in nodes]
    return tour_length(matrix, tour), tour


def solve_networkx(matrix: pd.DataFrame, algorithm: str, start: str, rng: random.Random) -> Tuple[float, List[Hashable]]:
    G = to_digraph(matrix)
    n = G.number_of_nodes()

    if start == 'all':
        best: Optional[Tuple[float, List[Hashable]]] = None
        for source in range(n):
            candidate = _labelled(matrix, _open_cycle(approx.greedy_tsp(G, source=source)))
            if best is None or candidate[0] < best[0]:
                best = candidate
        return best

    source = rng.randrange(n)
    if algorithm == 'greedy' or n < 3:
        # two nodes admit a single tour
        cycle = approx.greedy_tsp(G, source=source)
    elif algorithm == 'simulated_annealing':
        cycle = approx.simulated_annealing_tsp(G, 'greedy', source=source, seed=rng)
    elif algorithm == 'threshold_accepting':
        cycle = approx.threshold_accepting_tsp(G, 'greedy', source=source, seed=rng)
    else:
        raise ValueError(f"Unknown networkx algorithm: {algorithm}")
    return _labelled(matrix, _open_cycle(cycle))


def solve_ortools(matrix: pd.DataFrame, strategy: str, ls: str,
                  time_limit: int = DEFAULT_TIME_LIMIT) -> Tuple[float, List[Hashable]]:
    if not _HAS_ORTOOLS:
        raise RuntimeError("OR-Tools not available for routing solution.")
    # Safety: restrict threads (some environments segfault with high concurrency)
    _os.environ.setdefault('ORTOOLS_NUM_THREADS', '1')
    values = matrix.to_numpy(dtype=float)
    n = values.shape[0]
    manager = pywrapcp.RoutingIndexManager(n, 1, 0)
    routing = pywrapcp.RoutingModel(manager)

    def distance_cb(from_index: int, to_index: int) -> int:
        f = manager.IndexToNode(from_index)
        t = manager.IndexToNode(to_index)
        return int(round(values[f, t] * ORTOOLS_COST_SCALE))

    transit_idx = routing.RegisterTransitCallback(distance_cb)
    routing.SetArcCostEvaluatorOfAllVehicles(transit_idx)

    search_params = pywrapcp.DefaultRoutingSearchParameters()
    search_params.first_solution_strategy = getattr(
        routing_enums_pb2.FirstSolutionStrategy, strategy
    )
    if ls == 'none':
        # Stop at the constructed solution
        search_params.solution_limit = 1
    elif ls == 'greedy_descent':
        search_params.local_search_metaheuristic = routing_enums_pb2.LocalSearchMetaheuristic.GREEDY_DESCENT
    else:
        raise ValueError(f"Unknown local search: {ls}")
    search_params.time_limit.seconds = time_limit
    search_params.log_search = False

    solution = routing.SolveWithParameters(search_params)
    if solution is None:
        raise RuntimeError("Routing solver failed to find a solution within time limit")

    index = routing.Start(0)
    nodes: List[int] = []
    while not routing.IsEnd(index):
        nodes.append(manager.IndexToNode(index))
        index = solution.Value(routing.NextVar(index))
    return _labelled(matrix, nodes)


def make_solver(cfg: Dict[str, str], rng: random.Random, time_limit: int = DEFAULT_TIME_LIMIT) -> Solver:
    backend = cfg['backend']
    if backend == 'networkx':
        return partial(solve_networkx, algorithm=cfg['algorithm'], start=cfg['start'], rng=rng)
    if backend == 'ortools':
        return partial(solve_ortools, strategy=cfg['strategy'], ls=cfg['ls'], time_limit=time_limit)
    raise ValueError(f"Unknown solver backend: {backend}")


def make_registry(methods: Optional[Iterable[str]] = None, seed: Optional[int] = None,
                  time_limit: int = DEFAULT_TIME_LIMIT) -> Dict[str, Solver]:
    """Build ``{method: solve}`` for the requested (default: all) methods.

    ``seed`` seeds one random stream shared by all randomized adapters, so a
    whole batch is reproducible while trials within it still differ.
    """
    requested = list(DEFAULT_METHODS) if methods is None else list(methods)
    missing = [m for m in requested if m not in DEFAULT_METHODS]
    if missing:
        raise ValueError(f"Unknown method names: {missing}. Known: {list(DEFAULT_METHODS.keys())}")
    rng = random.Random(seed)
    return {m: make_solver(DEFAULT_METHODS[m], rng, time_limit) for m in requested}
