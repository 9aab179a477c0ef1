"""
Smoke tests for the matplotlib views (Agg backend, see conftest).
"""

import matplotlib.pyplot as plt
import pandas as pd
import pytest

from tsp_trials.plots import plot_distribution, plot_route


@pytest.fixture
def coords():
    return pd.DataFrame(
        {"x": [0.0, 1.0, 2.0, 3.0], "y": [0.0, 1.0, 0.0, 1.0]},
        index=pd.Index(["A", "B", "C", "D"], name="label"),
    )


class TestPlots:
    def test_distribution_saved(self, tmp_path):
        dist = pd.DataFrame({"trial": [1, 2, 1, 2], "method": ["a", "a", "b", "b"],
                             "length": [3.0, 4.0, 2.0, 2.5]})
        out = tmp_path / "dist.png"
        plot_distribution(dist, str(out))
        assert out.exists() and out.stat().st_size > 0

    def test_route_draws_one_line_per_segment(self, coords):
        fig = plot_route(["A", "C", "B", "D"], coords)
        assert len(fig.axes[0].lines) == 3
        plt.close(fig)

    def test_route_saved(self, coords, tmp_path):
        out = tmp_path / "route.png"
        plot_route(["A", "B", "C", "D"], coords, str(out))
        assert out.exists()

    def test_route_missing_coordinates(self, coords):
        with pytest.raises(KeyError, match="Z"):
            plot_route(["A", "Z"], coords)
