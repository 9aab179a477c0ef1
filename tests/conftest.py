import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from tsp_trials.matrix import as_matrix


@pytest.fixture
def five_cities():
    """Symmetric 5x5 matrix over A..E."""
    values = [
        [0, 2, 9, 10, 7],
        [2, 0, 6, 4, 3],
        [9, 6, 0, 8, 5],
        [10, 4, 8, 0, 6],
        [7, 3, 5, 6, 0],
    ]
    return as_matrix(values, labels=list("ABCDE"))


@pytest.fixture
def asym_cities():
    """Asymmetric 7x7 matrix over P..V."""
    rng = np.random.default_rng(0)
    values = rng.uniform(1, 100, size=(7, 7))
    np.fill_diagonal(values, 0)
    return as_matrix(values, labels=list("PQRSTUV"))


@pytest.fixture
def three_cities():
    return pd.DataFrame(
        [[0, 1, 4], [2, 0, 3], [5, 6, 0]],
        index=["S", "M", "E"], columns=["S", "M", "E"], dtype=float,
    )
