# datadays/missing.py
# Day 2: finding missing values, dropping what can't be saved and imputing the rest.
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import joblib
import numpy as np
import pandas as pd
from sklearn.experimental import enable_iterative_imputer  # noqa: F401
from sklearn.impute import IterativeImputer

from . import config
from .plots import save_before_after, save_missing_bar
from .utils import load_dataset, output_dirs, require_columns

log = logging.getLogger("datadays.missing")


def missing_summary(df: pd.DataFrame) -> pd.DataFrame:
    counts = df.isnull().sum()
    summary = pd.DataFrame({
        "missing": counts,
        "missing_pct": (counts / max(len(df), 1) * 100).round(3),
    })
    return summary.sort_values("missing", ascending=False, kind="stable")


def total_missing_pct(df: pd.DataFrame) -> float:
    if df.size == 0:
        return 0.0
    return float(df.isnull().sum().sum() / df.size * 100)


def drop_sparse_columns(df: pd.DataFrame, columns=None, threshold: Optional[float] = None) -> pd.DataFrame:
    """Drop the named columns, or every column whose missing fraction is above threshold."""
    if columns is None and threshold is None:
        raise ValueError("pass columns to drop or a missing-fraction threshold")
    to_drop = []
    if columns is not None:
        to_drop += require_columns(df, columns)
    if threshold is not None:
        if not 0 <= threshold <= 1:
            raise ValueError("threshold is a fraction between 0 and 1")
        frac = df.isnull().mean()
        to_drop += [c for c in frac[frac > threshold].index if c not in to_drop]
    log.info("dropping %d columns: %s", len(to_drop), to_drop)
    return df.drop(columns=to_drop)


def drop_missing_rows(df: pd.DataFrame, subset=None) -> pd.DataFrame:
    if subset is not None:
        subset = require_columns(df, subset)
    out = df.dropna(subset=subset)
    log.info("dropped %d rows with missing values", len(df) - len(out))
    return out


def simple_impute(df: pd.DataFrame, numeric_strategy="median", categorical_strategy="mode") -> pd.DataFrame:
    df = df.copy()
    for col in df.columns:
        if not df[col].isnull().any():
            continue
        if pd.api.types.is_numeric_dtype(df[col]):
            if numeric_strategy == "median":
                df[col] = df[col].fillna(df[col].median())
            elif numeric_strategy == "mean":
                df[col] = df[col].fillna(df[col].mean())
            else:
                df[col] = df[col].fillna(0)
        else:
            mode = df[col].mode()
            if categorical_strategy == "mode" and not mode.empty:
                df[col] = df[col].fillna(mode.iloc[0])
            else:
                df[col] = df[col].fillna("missing")
    return df


# -------------------------
# Multiple imputation
# -------------------------
@dataclass
class MultipleImputation:
    """The m completed datasets from one chained-equations run, and their pooled average."""
    columns: List[str]
    completed: List[pd.DataFrame]
    pooled: pd.DataFrame
    imputed_mask: pd.DataFrame
    between_variance: pd.Series
    imputers: list = field(default_factory=list)

    @property
    def m(self) -> int:
        return len(self.completed)


def multiple_impute(df: pd.DataFrame, columns=None, m: Optional[int] = None, max_iter: int = 10,
                    random_state: int = 0) -> MultipleImputation:
    """
    Multiple imputation by chained equations over the numeric columns.

    Each of the m runs draws imputations from the posterior of sklearn's
    IterativeImputer with its own seed, so the completed datasets differ
    only where values were missing. Observed cells are copied through
    untouched and non-numeric columns pass through unchanged.
    """
    m = config.IMPUTATIONS if m is None else m
    if m < 1:
        raise ValueError("m must be at least 1")
    if columns is None:
        columns = df.select_dtypes(include=[np.number]).columns.tolist()
    else:
        columns = require_columns(df, columns)
        non_numeric = [c for c in columns if not pd.api.types.is_numeric_dtype(df[c])]
        if non_numeric:
            raise ValueError(f"only numeric columns can be imputed: {non_numeric}")
    empty = [c for c in columns if df[c].isnull().all()]
    if empty:
        log.warning("skipping columns with no observed values: %s", empty)
        columns = [c for c in columns if c not in empty]
    mask = df[columns].isnull()
    if not mask.values.any():
        log.info("no missing numeric values; nothing to impute")
        return MultipleImputation(columns=columns, completed=[df.copy() for _ in range(m)], pooled=df.copy(),
                                  imputed_mask=mask, between_variance=pd.Series(0.0, index=columns, dtype=float))
    if len(columns) == 1:
        # IterativeImputer has no other feature to regress on and keeps its initial (mean) fill
        log.warning("only one numeric column (%s); imputed values fall back to the column mean", columns[0])

    completed, imputers = [], []
    for i in range(m):
        out = df.copy()
        imputer = IterativeImputer(max_iter=max_iter, sample_posterior=True, random_state=random_state + i)
        values = pd.DataFrame(imputer.fit_transform(df[columns]), columns=columns, index=df.index)
        out[columns] = df[columns].where(~mask, values)
        imputers.append(imputer)
        completed.append(out)

    stacked = np.stack([c[columns].to_numpy(dtype=float) for c in completed])
    pooled = df.copy()
    pooled[columns] = df[columns].where(~mask, pd.DataFrame(stacked.mean(axis=0), columns=columns, index=df.index))

    if m > 1:
        cell_var = pd.DataFrame(stacked.var(axis=0, ddof=1), columns=columns, index=df.index)
        between = cell_var.where(mask).mean().fillna(0.0)
    else:
        between = pd.Series(0.0, index=columns)

    log.info("imputed %d cells across %d columns with m=%d", int(mask.values.sum()), len(columns), m)
    return MultipleImputation(columns=columns, completed=completed, pooled=pooled,
                              imputed_mask=mask, between_variance=between, imputers=imputers)


def save_imputer(imputer, path) -> Path:
    path = Path(path)
    joblib.dump(imputer, path)
    return path


def run(path, drop_columns=None, drop_threshold: Optional[float] = None, m: Optional[int] = None,
        output_dir: Optional[Path] = None, random_state: int = 0) -> dict:
    df = load_dataset(path)
    before = missing_summary(df)
    before_pct = total_missing_pct(df)
    base, plots = output_dirs(output_dir)
    plot_paths = [p for p in [save_missing_bar(df, plots)] if p]
    if drop_columns is not None or drop_threshold is not None:
        df = drop_sparse_columns(df, columns=drop_columns, threshold=drop_threshold)
    result = multiple_impute(df, m=m, random_state=random_state)

    for col in result.columns:
        if result.imputed_mask[col].any():
            plot_paths.append(save_before_after(df[col], result.pooled[col], col, plots, label="imputed"))

    imputer_path = None
    if result.imputers:
        imputer_path = save_imputer(result.imputers[0], base / "imputer.pkl")
    return {
        "frame": df,
        "missing_before": before,
        "missing_pct_before": before_pct,
        "imputation": result,
        "cleaned": result.pooled,
        "missing_after": missing_summary(result.pooled),
        "imputer_path": str(imputer_path) if imputer_path else None,
        "plot_paths": [p for p in plot_paths if p],
    }
