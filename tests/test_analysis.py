"""
Tests for summary statistics, statistical comparison and result files.
"""

import json
import os

import pandas as pd
import pytest

from tsp_trials.aggregate import aggregate
from tsp_trials.analysis import statistical_tests, summarize, write_results
from tsp_trials.runner import Trial


def dist_frame(rows):
    return pd.DataFrame(rows, columns=["trial", "method", "length"])


@pytest.fixture
def trials():
    paths = {
        1: ("A", "B", "C", "E"),
        2: ("A", "C", "B", "E"),
    }
    out = []
    for i, length in enumerate([5.0, 4.0, 6.0], start=1):
        out.append(Trial("slow", i, length, ("dummy", "B", "C"), 0.01, paths[1]))
    for i, length in enumerate([3.0, 3.0, 3.5], start=1):
        out.append(Trial("fast", i, length, ("dummy", "C", "B"), 0.02, paths[2]))
    return out


class TestSummarize:
    def test_columns_and_order(self):
        df = dist_frame([[1, "a", 4.0], [2, "a", 6.0], [1, "b", 1.0], [2, "b", 3.0]])
        summary = summarize(df)
        assert list(summary.columns) == [
            "method", "trials", "length_best", "length_mean", "length_std", "length_median", "length_max"
        ]
        assert summary["method"].tolist() == ["b", "a"]
        row = summary.set_index("method").loc["a"]
        assert row["trials"] == 2
        assert row["length_best"] == 4.0
        assert row["length_mean"] == 5.0
        assert row["length_max"] == 6.0

    def test_single_trial_std_is_zero(self):
        summary = summarize(dist_frame([[1, "a", 4.0]]))
        assert summary.loc[0, "length_std"] == 0


class TestStatisticalTests:
    def test_single_method(self):
        lines = statistical_tests(dist_frame([[1, "a", 1.0], [2, "a", 2.0]]))
        assert any("at least 2 methods" in line for line in lines)

    def test_pairwise_lines(self):
        rows = [[i, m, float(v)] for m, vals in {"a": [1, 2, 3, 4], "b": [5, 6, 7, 8], "c": [2, 9, 4, 1]}.items()
                for i, v in enumerate(vals, start=1)]
        lines = statistical_tests(dist_frame(rows))
        assert any(line.startswith("Kruskal-Wallis") for line in lines)
        pair_lines = [line for line in lines if line.startswith("Mann-Whitney")]
        assert len(pair_lines) == 3

    def test_identical_values_do_not_raise(self):
        rows = [[i, m, 7.0] for m in ("a", "b") for i in (1, 2, 3)]
        lines = statistical_tests(dist_frame(rows))
        assert any("Kruskal-Wallis" in line for line in lines)

    def test_writes_report(self, tmp_path):
        rows = [[1, "a", 1.0], [2, "a", 2.0], [1, "b", 3.0], [2, "b", 5.0]]
        lines = statistical_tests(dist_frame(rows), str(tmp_path))
        text = (tmp_path / "statistics.txt").read_text()
        assert text.splitlines() == lines


class TestWriteResults:
    def test_files_written(self, trials, tmp_path):
        result = aggregate(trials)
        written = write_results(result, trials, str(tmp_path / "out"))
        assert set(written) == {"best_performance", "best_routes", "distribution", "summary", "trials_detailed"}
        for path in written.values():
            assert os.path.exists(path)

        dist = pd.read_csv(written["distribution"])
        assert len(dist) == 6

        best = pd.read_csv(written["best_performance"])
        assert best[best["method"] == "fast"]["trial"].tolist() == [1, 2]

        routes = pd.read_csv(written["best_routes"])
        assert routes[routes["trial"] == 1]["label"].tolist() == ["A", "C", "B", "E"]

        with open(written["trials_detailed"]) as f:
            records = json.load(f)
        assert len(records) == 6
        assert records[0]["method"] == "slow"
        assert records[0]["path"] == ["A", "B", "C", "E"]
        assert records[0]["tour"] == ["dummy", "B", "C"]
