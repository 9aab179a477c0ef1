"""Map raw synthetic-matrix tours back to real paths and split them into segments."""
from __future__ import annotations

from typing import Hashable, List, Optional, Sequence, Tuple

import pandas as pd

from .errors import MalformedTourError


def reconstruct(raw_tour: Sequence[Hashable], synthetic_label: Hashable,
                start: Hashable, end: Hashable, n_nodes: Optional[int] = None) -> Tuple[Hashable, ...]:
    """Cut ``raw_tour`` open at the synthetic node and restore the endpoints.

    The tour is read from the node right after the synthetic one, wrapping
    around, so ``[x, dummy, a, b]`` becomes ``(start, a, b, x, end)``.
    """
    tour = list(raw_tour)
    hits = [i for i, lbl in enumerate(tour) if lbl == synthetic_label]
    if not hits:
        raise MalformedTourError(f"Synthetic label {synthetic_label!r} not in tour {tour}")
    if len(hits) > 1:
        raise MalformedTourError(f"Synthetic label {synthetic_label!r} appears {len(hits)} times in tour")
    for endpoint in (start, end):
        if endpoint in tour:
            raise MalformedTourError(f"Endpoint {endpoint!r} already present in raw tour")

    cut = hits[0]
    path = [start] + tour[cut + 1:] + tour[:cut] + [end]

    if len(set(path)) != len(path):
        raise MalformedTourError(f"Repeated labels in reconstructed path {path}")
    if n_nodes is not None and len(path) != n_nodes:
        raise MalformedTourError(f"Reconstructed path has {len(path)} stops, expected {n_nodes}")
    return tuple(path)


def segment_pairs(path: Sequence[Hashable]) -> List[Tuple[Hashable, Hashable]]:
    """Consecutive ``(path[i], path[i+1])`` pairs; no closing segment."""
    return [(path[i], path[i + 1]) for i in range(len(path) - 1)]


def route_segments(path: Sequence[Hashable]) -> pd.DataFrame:
    """Long-form segment table for drawing a route as separate lines.

    Each segment contributes two rows, its two stops, sharing the same
    1-based ``segment`` index.
    """
    rows = []
    for seg, (a, b) in enumerate(segment_pairs(path), start=1):
        rows.append({'segment': seg, 'label': a})
        rows.append({'segment': seg, 'label': b})
    return pd.DataFrame(rows, columns=['segment', 'label'])
