"""Matplotlib views of a run: length distribution and best route."""
from __future__ import annotations

from typing import Hashable, Optional, Sequence

import matplotlib.pyplot as plt
import pandas as pd

from .tour import route_segments


def plot_distribution(distribution: pd.DataFrame, path: Optional[str] = None):
    """Box plot of trial lengths per method; saved to ``path`` if given."""
    methods = list(dict.fromkeys(distribution['method']))
    data = [distribution.loc[distribution['method'] == m, 'length'].to_numpy() for m in methods]

    fig, ax = plt.subplots(figsize=(max(6, 1.2 * len(methods)), 5))
    ax.boxplot(data)
    ax.set_xticks(range(1, len(methods) + 1))
    ax.set_xticklabels(methods, rotation=30, ha='right')
    ax.set_ylabel('Tour length')
    ax.set_title('Distribution of trial lengths by method')
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    if path:
        fig.savefig(path, dpi=300, bbox_inches='tight')
        plt.close(fig)
    return fig


def plot_route(route: Sequence[Hashable], coords: pd.DataFrame, path: Optional[str] = None,
               title: str = 'Best route'):
    """Draw ``route`` as separate segments over ``coords`` (index: label, columns x, y)."""
    missing = [lbl for lbl in route if lbl not in coords.index]
    if missing:
        raise KeyError(f"No coordinates for labels: {missing}")
    segs = route_segments(route).join(coords, on='label')

    fig, ax = plt.subplots(figsize=(7, 7))
    for _, seg in segs.groupby('segment'):
        ax.plot(seg['x'], seg['y'], color='tab:blue', linewidth=1.5)
    stops = coords.loc[list(route)]
    ax.scatter(stops['x'], stops['y'], color='black', zorder=3)
    ax.scatter(stops['x'].iloc[[0]], stops['y'].iloc[[0]], color='green', s=80, zorder=4, label='start')
    ax.scatter(stops['x'].iloc[[-1]], stops['y'].iloc[[-1]], color='red', s=80, zorder=4, label='end')
    for lbl, row in stops.iterrows():
        ax.annotate(str(lbl), (row['x'], row['y']), textcoords='offset points', xytext=(4, 4), fontsize=8)
    ax.set_title(title)
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    if path:
        fig.savefig(path, dpi=300, bbox_inches='tight')
        plt.close(fig)
    return fig
