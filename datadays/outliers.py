# datadays/outliers.py
# Day 3: scoring numeric values by z-score and dealing with the ones past the threshold.
import logging
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import pandas as pd
from scipy import stats

from . import config
from .plots import save_before_after, save_numeric_plots
from .utils import load_dataset, output_dirs, require_columns

log = logging.getLogger("datadays.outliers")

STRATEGIES = ("drop", "separate", "mean")


def _numeric_columns(df: pd.DataFrame, columns=None) -> list:
    if columns is None:
        return df.select_dtypes(include=[np.number]).columns.tolist()
    columns = require_columns(df, columns)
    non_numeric = [c for c in columns if not pd.api.types.is_numeric_dtype(df[c])]
    if non_numeric:
        raise ValueError(f"z-scores need numeric columns: {non_numeric}")
    return columns


def _threshold(threshold: Optional[float]) -> float:
    threshold = config.ZSCORE_THRESHOLD if threshold is None else float(threshold)
    if threshold <= 0:
        raise ValueError("threshold must be positive")
    return threshold


def zscores(df: pd.DataFrame, columns=None) -> pd.DataFrame:
    """Per-column z-scores; missing values stay NaN and constant columns score 0."""
    columns = _numeric_columns(df, columns)
    scores = {}
    for col in columns:
        values = df[col].astype(float)
        if values.nunique(dropna=True) <= 1:
            scores[col] = values.where(values.isnull(), 0.0)
            continue
        scores[col] = pd.Series(stats.zscore(values.to_numpy(), nan_policy="omit"), index=df.index)
    return pd.DataFrame(scores, index=df.index, columns=columns)


def flag_outliers(df: pd.DataFrame, columns=None, threshold: Optional[float] = None) -> pd.DataFrame:
    threshold = _threshold(threshold)
    z = zscores(df, columns)
    # NaN compares False, so missing values are never outliers
    return z.abs() > threshold


def drop_outliers(df: pd.DataFrame, columns=None, threshold: Optional[float] = None) -> pd.DataFrame:
    inliers, _ = separate_outliers(df, columns=columns, threshold=threshold)
    return inliers


def separate_outliers(df: pd.DataFrame, columns=None,
                      threshold: Optional[float] = None) -> Tuple[pd.DataFrame, pd.DataFrame]:
    flags = flag_outliers(df, columns, threshold)
    is_outlier = flags.any(axis=1)
    log.info("%d of %d rows have a value beyond the threshold", int(is_outlier.sum()), len(df))
    return df[~is_outlier], df[is_outlier]


def impute_outliers_with_mean(df: pd.DataFrame, columns=None, threshold: Optional[float] = None) -> pd.DataFrame:
    """Replace each flagged value with the mean of its column's unflagged values."""
    flags = flag_outliers(df, columns, threshold)
    out = df.copy()
    for col in flags.columns:
        if not flags[col].any():
            continue
        mean = df.loc[~flags[col], col].mean()
        if pd.api.types.is_integer_dtype(out[col]):
            out[col] = out[col].astype(float)
        out.loc[flags[col], col] = mean
        log.debug("replaced %d values in %s with %.4g", int(flags[col].sum()), col, mean)
    return out


def run(path, threshold: Optional[float] = None, strategy: str = "separate", column: Optional[str] = None,
        output_dir: Optional[Path] = None) -> dict:
    if strategy not in STRATEGIES:
        raise ValueError(f"unknown strategy {strategy!r}, expected one of {STRATEGIES}")
    threshold = _threshold(threshold)
    df = load_dataset(path)
    columns = None if column is None else [column]
    z = zscores(df, columns)
    flags = z.abs() > threshold

    result = {"frame": df, "zscores": z, "flags": flags, "threshold": threshold, "strategy": strategy,
              "outlier_counts": flags.sum().astype(int).to_dict()}
    if strategy == "drop":
        cleaned = drop_outliers(df, columns, threshold)
    elif strategy == "separate":
        cleaned, outliers = separate_outliers(df, columns, threshold)
        result["outliers"] = outliers
    else:
        cleaned = impute_outliers_with_mean(df, columns, threshold)
    result["cleaned"] = cleaned

    _, plots = output_dirs(output_dir)
    # boxplots of the raw columns show the flagged points as fliers
    plot_paths = save_numeric_plots(df, list(flags.columns), plots)
    plot_paths += [save_before_after(df[c], cleaned[c], c, plots, label="outliers") for c in flags.columns]
    result["plot_paths"] = [p for p in plot_paths if p]
    return result
