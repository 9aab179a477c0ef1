"""Read labelled distance matrices and coordinate tables from disk.

Supported matrix formats:
  .csv   square matrix, header row and first column hold the city labels
  .dat   AMPL data with 'set NODES := ... ;' and 'param dist : ... ;'
  .atsp  TSPLIB with EDGE_WEIGHT_TYPE EXPLICIT and FULL_MATRIX weights
"""
from __future__ import annotations

import os
from typing import List, Optional

import numpy as np
import pandas as pd

from .matrix import as_matrix


def read_matrix(path: str) -> pd.DataFrame:
    ext = os.path.splitext(path)[1].lower()
    if ext == '.csv':
        return read_csv_matrix(path)
    if ext == '.dat':
        return parse_tsp_dat(path)
    if ext == '.atsp':
        return parse_atsp_file(path)
    raise ValueError(f"Unsupported distance matrix format: {path}")


def read_csv_matrix(path: str) -> pd.DataFrame:
    df = pd.read_csv(path, index_col=0)
    df.index = df.index.astype(str)
    df.columns = df.columns.astype(str)
    return as_matrix(df)


def parse_tsp_dat(path: str) -> pd.DataFrame:
    """Parse AMPL .dat with 'set NODES' and 'param dist :' matrix."""
    with open(path, 'r') as f:
        content = f.read().splitlines()
    nodes: Optional[List[str]] = None
    header: Optional[List[str]] = None
    row_labels: List[str] = []
    rows: List[List[float]] = []
    in_matrix = False
    for line in content:
        line = line.strip()
        if not line or line.startswith('#'):  # comments/empty
            continue
        if line.startswith('set NODES'):
            body = line.split(':=', 1)[1] if ':=' in line else ''
            nodes = body.replace(';', ' ').split()
            continue
        if line.startswith('param dist'):
            in_matrix = True
            # header may sit on the same line: 'param dist : 1 2 3 :='
            rest = line.split(':', 1)[1] if ':' in line else ''
            rest = rest.replace(':=', ' ').strip()
            if rest:
                header = rest.split()
            continue
        if in_matrix:
            if line.startswith(';'):
                break
            last_row = line.endswith(';')
            parts = line.replace(':=', ' ').replace(';', ' ').split()
            if header is None:
                header = parts
                continue
            numeric_tokens = []
            for tok in parts[1:]:
                if tok.startswith('#'):
                    break
                numeric_tokens.append(float(tok))
            row_labels.append(parts[0])
            rows.append(numeric_tokens)
            if last_row:
                break
    if header is None or not rows:
        raise ValueError(f"No 'param dist' matrix found in {path}")
    if nodes is not None and nodes != header:
        raise ValueError(f"NODES set does not match matrix header in {path}")
    if row_labels != header:
        raise ValueError(f"Row labels do not match column labels in {path}")
    dist = np.array(rows, dtype=float)
    if dist.ndim != 2 or dist.shape[0] != dist.shape[1]:
        raise ValueError(f"Distance matrix not square in {path}: {dist.shape}")
    return as_matrix(dist, labels=header)


def parse_atsp_file(path: str) -> pd.DataFrame:
    """Parse an explicit FULL_MATRIX TSPLIB file; cities are labelled 1..n."""
    with open(path, 'r') as f:
        lines = f.readlines()

    dimension = None
    edge_weight_type = None
    edge_weight_format = None
    weight_data: List[float] = []
    in_weight_section = False
    for line in lines:
        line = line.strip()
        if line.startswith('DIMENSION'):
            dimension = int(line.split(':')[1].strip())
        elif line.startswith('EDGE_WEIGHT_TYPE'):
            edge_weight_type = line.split(':')[1].strip()
        elif line.startswith('EDGE_WEIGHT_FORMAT'):
            edge_weight_format = line.split(':')[1].strip()
        elif line == 'EDGE_WEIGHT_SECTION':
            in_weight_section = True
        elif line == 'EOF':
            break
        elif in_weight_section and line:
            weight_data.extend(float(tok) for tok in line.split())

    if dimension is None:
        raise ValueError(f"Could not find DIMENSION in {path}")
    if edge_weight_type != 'EXPLICIT':
        raise ValueError(f"Unsupported EDGE_WEIGHT_TYPE for ATSP: {edge_weight_type}")
    if edge_weight_format != 'FULL_MATRIX':
        raise ValueError(f"Unsupported EDGE_WEIGHT_FORMAT: {edge_weight_format}")
    if len(weight_data) != dimension * dimension:
        raise ValueError(f"Expected {dimension * dimension} weights in {path}, found {len(weight_data)}")

    dist = np.array(weight_data, dtype=float).reshape(dimension, dimension)
    return as_matrix(dist, labels=[str(i) for i in range(1, dimension + 1)])


def read_coordinates(path: str) -> pd.DataFrame:
    """Coordinate table indexed by city label with columns ``x`` and ``y``."""
    df = pd.read_csv(path)
    missing = [c for c in ('label', 'x', 'y') if c not in df.columns]
    if missing:
        raise ValueError(f"Coordinate file {path} lacks columns {missing}")
    df['label'] = df['label'].astype(str)
    return df.set_index('label')[['x', 'y']]
