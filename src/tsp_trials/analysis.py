"""Summary statistics and result files for an aggregated run."""
from __future__ import annotations

import json
import os
from dataclasses import asdict
from typing import Dict, List, Optional

import pandas as pd
from scipy.stats import kruskal, mannwhitneyu

from .aggregate import AggregateResult
from .runner import Trial


def summarize(distribution: pd.DataFrame) -> pd.DataFrame:
    """Per-method length statistics, best method first."""
    grp = distribution.groupby('method', sort=False)
    summary = grp.agg(
        trials=('trial', 'count'),
        length_best=('length', 'min'),
        length_mean=('length', 'mean'),
        length_std=('length', 'std'),
        length_median=('length', 'median'),
        length_max=('length', 'max'),
    ).reset_index()
    # std is undefined for a single trial
    summary['length_std'] = summary['length_std'].fillna(0)
    return summary.sort_values('length_best', kind='stable').reset_index(drop=True)


def statistical_tests(distribution: pd.DataFrame, results_dir: Optional[str] = None) -> List[str]:
    """Kruskal-Wallis across methods plus pairwise Mann-Whitney U.

    Trials are independent draws, so samples are compared unpaired.
    """
    samples: Dict[str, pd.Series] = {
        m: g['length'].reset_index(drop=True)
        for m, g in distribution.groupby('method', sort=False)
    }
    out_lines: List[str] = []
    out_lines.append('Heuristic Trial Statistical Comparison')
    out_lines.append('=' * 60)
    if len(samples) < 2:
        out_lines.append('Need at least 2 methods for a comparison')
    else:
        try:
            stat, p = kruskal(*samples.values())
            out_lines.append(f'Kruskal-Wallis length: stat={stat:.4f} p={p:.3e}')
        except ValueError as e:
            out_lines.append(f'Kruskal-Wallis test failed: {e}')
        cols = list(samples)
        for i, c1 in enumerate(cols):
            for c2 in cols[i + 1:]:
                try:
                    stat, p = mannwhitneyu(samples[c1], samples[c2], alternative='two-sided')
                    out_lines.append(f'Mann-Whitney {c1} vs {c2}: stat={stat} p={p:.3e}')
                except ValueError as e:
                    out_lines.append(f'Mann-Whitney {c1} vs {c2} failed: {e}')
    if results_dir is not None:
        os.makedirs(results_dir, exist_ok=True)
        path = os.path.join(results_dir, 'statistics.txt')
        with open(path, 'w') as f:
            f.write('\n'.join(out_lines) + '\n')
    return out_lines


def _trial_record(t: Trial) -> dict:
    rec = asdict(t)
    rec['tour'] = list(t.tour)
    rec['path'] = list(t.path) if t.path is not None else None
    return rec


def write_results(result: AggregateResult, trials: List[Trial], out_dir: str) -> Dict[str, str]:
    """Write the result tables and detailed trial log; return name -> path."""
    os.makedirs(out_dir, exist_ok=True)
    tables = {
        'best_performance': result.best_performance_table(),
        'best_routes': result.best_routes_table(),
        'distribution': result.distribution,
        'summary': summarize(result.distribution),
    }
    written: Dict[str, str] = {}
    for name, df in tables.items():
        path = os.path.join(out_dir, f'{name}.csv')
        df.to_csv(path, index=False)
        written[name] = path

    json_path = os.path.join(out_dir, 'trials_detailed.json')
    with open(json_path, 'w') as f:
        # labels parsed from numeric input may be numpy scalars
        json.dump([_trial_record(t) for t in trials], f, indent=2, default=str)
    written['trials_detailed'] = json_path
    return written
