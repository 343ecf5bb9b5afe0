import numpy as np
import pandas as pd
import pytest

from datadays import sample_data


@pytest.fixture
def samples(tmp_path):
    return sample_data.write_samples(tmp_path / "data")


@pytest.fixture
def out_dir(tmp_path):
    return tmp_path / "out"


@pytest.fixture
def spiky_df():
    """31 rows where only the last value of column a is far from the rest."""
    return pd.DataFrame({
        "a": [float(i % 5) for i in range(30)] + [100.0],
        "b": list(range(31)),
        "label": ["x"] * 31,
    })


@pytest.fixture
def gappy_df():
    rng = np.random.RandomState(0)
    x = rng.normal(10, 2, 40)
    df = pd.DataFrame({
        "x": x,
        "y": 3 * x + rng.normal(0, 0.5, 40),
        "z": rng.normal(0, 1, 40),
        "group": rng.choice(["a", "b"], size=40),
    })
    df.loc[[1, 5, 9], "x"] = np.nan
    df.loc[[2, 5, 30], "y"] = np.nan
    df.loc[[3], "z"] = np.nan
    return df
