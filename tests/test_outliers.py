from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from datadays import outliers, sample_data


def test_zscores_match_definition(spiky_df):
    z = outliers.zscores(spiky_df)
    assert list(z.columns) == ["a", "b"]
    b = spiky_df["b"]
    expected = (b - b.mean()) / b.std(ddof=0)
    np.testing.assert_allclose(z["b"], expected)


def test_constant_column_scores_zero():
    df = pd.DataFrame({"c": [4.0, 4.0, np.nan, 4.0]})
    z = outliers.zscores(df)
    assert z["c"].tolist()[:2] == [0.0, 0.0]
    assert np.isnan(z.loc[2, "c"])


def test_flag_outliers(spiky_df):
    flags = outliers.flag_outliers(spiky_df, threshold=3)
    assert flags["a"].sum() == 1
    assert bool(flags.loc[30, "a"])
    assert not flags["b"].any()


def test_missing_values_never_flagged():
    df = pd.DataFrame({"a": [float(i % 5) for i in range(30)] + [100.0, np.nan]})
    flags = outliers.flag_outliers(df)
    assert not flags.loc[31, "a"]
    assert flags.loc[30, "a"]


def test_separate_is_a_partition(spiky_df):
    inliers, outs = outliers.separate_outliers(spiky_df)
    assert len(inliers) == 30
    assert outs.index.tolist() == [30]
    rejoined = pd.concat([inliers, outs]).sort_index()
    pd.testing.assert_frame_equal(rejoined, spiky_df)


def test_drop_outliers(spiky_df):
    dropped = outliers.drop_outliers(spiky_df)
    assert 30 not in dropped.index
    assert len(dropped) == 30


def test_impute_with_mean_of_unflagged_values(spiky_df):
    out = outliers.impute_outliers_with_mean(spiky_df)
    assert out.loc[30, "a"] == pytest.approx(2.0)
    pd.testing.assert_series_equal(out["a"].iloc[:30], spiky_df["a"].iloc[:30])
    pd.testing.assert_series_equal(out["b"], spiky_df["b"])
    # input untouched
    assert spiky_df.loc[30, "a"] == 100.0


def test_column_selection(spiky_df):
    flags = outliers.flag_outliers(spiky_df, columns=["b"])
    assert list(flags.columns) == ["b"]
    with pytest.raises(ValueError):
        outliers.zscores(spiky_df, columns=["label"])
    with pytest.raises(KeyError):
        outliers.zscores(spiky_df, columns=["nope"])


def test_threshold_must_be_positive(spiky_df):
    with pytest.raises(ValueError):
        outliers.flag_outliers(spiky_df, threshold=0)


@pytest.mark.parametrize("strategy, rows", [("drop", 78), ("separate", 78), ("mean", 80)])
def test_run_strategies(tmp_path, strategy, rows):
    path = tmp_path / "delivery.csv"
    sample_data.delivery_times().to_csv(path, index=False)
    result = outliers.run(path, strategy=strategy, column="minutes", output_dir=tmp_path / "out")

    assert result["outlier_counts"] == {"minutes": 2}
    assert len(result["cleaned"]) == rows
    assert result["cleaned"]["minutes"].max() < 100
    if strategy == "separate":
        assert sorted(result["outliers"]["minutes"].tolist()) == [190.0, 240.0]
    assert result["plot_paths"] and all(Path(p).exists() for p in result["plot_paths"])


def test_run_rejects_unknown_strategy(tmp_path):
    with pytest.raises(ValueError):
        outliers.run(tmp_path / "missing.csv", strategy="winsorize")
