"""Labelled distance matrices and the fixed-endpoint transformation.

A path that must start at one city and end at another is turned into a
closed tour by replacing both endpoints with a single linking node:

  * its row (outgoing distances) is the start city's row
  * its column (incoming distances) is the end city's column
  * its self-distance is 0

Any standard TSP heuristic can then be run on the smaller matrix, and the
tour is cut open again at the linking node (see ``tsp_trials.tour``).
"""
from __future__ import annotations

import math
from typing import Hashable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .errors import InvalidTopologyError, LabelCollisionError

DEFAULT_SYNTHETIC_LABEL = "dummy"


def as_matrix(data, labels: Optional[Sequence[Hashable]] = None) -> pd.DataFrame:
    """Coerce ``data`` into a validated square DataFrame with matching labels.

    ``data`` may be a DataFrame (labels taken from it unless ``labels`` is
    given), a numpy array or a nested list.
    """
    if isinstance(data, pd.DataFrame) and labels is None:
        frame = data.copy()
    else:
        values = data.to_numpy() if isinstance(data, pd.DataFrame) else np.asarray(data)
        if values.ndim != 2:
            raise ValueError(f"Distance matrix must be 2-dimensional, got shape {values.shape}")
        if labels is None:
            labels = list(range(values.shape[0]))
        labels = list(labels)
        if len(labels) != values.shape[0]:
            raise ValueError(f"{len(labels)} labels given for {values.shape[0]} rows")
        frame = pd.DataFrame(values, index=labels, columns=labels)

    if frame.shape[0] != frame.shape[1]:
        raise ValueError(f"Distance matrix not square: {frame.shape}")
    if not frame.index.is_unique:
        raise ValueError("Duplicate city labels in distance matrix")
    if list(frame.index) != list(frame.columns):
        raise ValueError("Row and column labels of the distance matrix differ")

    frame = frame.astype(float)
    values = frame.to_numpy()
    off_diag = values[~np.eye(values.shape[0], dtype=bool)]
    if not np.all(np.isfinite(off_diag)):
        raise ValueError("Distance matrix contains non-finite distances")
    if np.any(off_diag < 0):
        raise ValueError("Distance matrix contains negative distances")
    return frame


def transform(matrix: pd.DataFrame, start: Hashable, end: Hashable,
              synthetic_label: Hashable = DEFAULT_SYNTHETIC_LABEL) -> Tuple[pd.DataFrame, Hashable]:
    """Replace ``start`` and ``end`` by one synthetic linking node.

    Returns a new (n-1 x n-1) matrix with the synthetic node appended last,
    together with its label. ``matrix`` is not modified.
    """
    labels = list(matrix.index)
    if start == end:
        raise InvalidTopologyError(f"Start and end must differ (both are {start!r})")
    missing = [lbl for lbl in (start, end) if lbl not in labels]
    if missing:
        raise InvalidTopologyError(f"Labels not in distance matrix: {missing}")
    if len(labels) < 3:
        raise InvalidTopologyError(f"Need at least 3 cities, got {len(labels)}")
    if synthetic_label in labels:
        raise LabelCollisionError(f"Synthetic label {synthetic_label!r} already names a city")

    keep = [lbl for lbl in labels if lbl != start and lbl != end]
    out_row = matrix.loc[start, keep].to_numpy(dtype=float)
    in_col = matrix.loc[keep, end].to_numpy(dtype=float)

    n = len(keep)
    values = np.zeros((n + 1, n + 1), dtype=float)
    values[:n, :n] = matrix.loc[keep, keep].to_numpy(dtype=float)
    values[n, :n] = out_row
    values[:n, n] = in_col
    values[n, n] = 0.0

    new_labels = keep + [synthetic_label]
    return pd.DataFrame(values, index=new_labels, columns=new_labels), synthetic_label


def _positions(matrix: pd.DataFrame, labels: Sequence[Hashable]) -> np.ndarray:
    pos = matrix.index.get_indexer(list(labels))
    if np.any(pos < 0):
        unknown = [lbl for lbl, p in zip(labels, pos) if p < 0]
        raise KeyError(f"Labels not in distance matrix: {unknown}")
    return pos


def tour_length(matrix: pd.DataFrame, tour: Sequence[Hashable]) -> float:
    """Length of the closed tour, returning to the first label."""
    if len(tour) < 2:
        return 0.0
    pos = _positions(matrix, tour)
    values = matrix.to_numpy()
    # exactly rounded: every rotation of a cycle sums to the same length
    return math.fsum(values[pos, np.roll(pos, -1)])


def path_length(matrix: pd.DataFrame, path: Sequence[Hashable]) -> float:
    """Length of the open path, without the closing edge."""
    if len(path) < 2:
        return 0.0
    pos = _positions(matrix, path)
    values = matrix.to_numpy()
    return math.fsum(values[pos[:-1], pos[1:]])
