# datadays/plots.py
import logging
import re
import uuid
from pathlib import Path
from typing import List, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

log = logging.getLogger("datadays.plots")


def _slug(name) -> str:
    return re.sub(r"[^0-9A-Za-z_.-]+", "_", str(name)).strip("_") or "column"


# -------------------------
# Visualizations
# -------------------------
def save_numeric_plots(df: pd.DataFrame, cols: list, out_dir: Path) -> List[str]:
    saved = []
    for col in cols:
        s = df[col].dropna()
        if s.empty:
            continue
        # histogram + KDE
        plt.figure(figsize=(6, 4))
        sns.histplot(s, kde=len(s) > 1)
        plt.title(f"Histogram: {col}")
        p1 = Path(out_dir) / f"hist_{_slug(col)}_{uuid.uuid4().hex[:6]}.png"
        plt.tight_layout()
        plt.savefig(p1)
        plt.close()

        # boxplot
        plt.figure(figsize=(6, 3))
        sns.boxplot(x=s)
        plt.title(f"Boxplot: {col}")
        p2 = Path(out_dir) / f"box_{_slug(col)}_{uuid.uuid4().hex[:6]}.png"
        plt.tight_layout()
        plt.savefig(p2)
        plt.close()

        saved.extend([str(p1), str(p2)])
    return saved


def save_missing_bar(df: pd.DataFrame, out_dir: Path) -> Optional[str]:
    counts = df.isnull().sum()
    counts = counts[counts > 0].sort_values(ascending=False)
    if counts.empty:
        return None
    plt.figure(figsize=(7, 4))
    sns.barplot(x=counts.index.astype(str), y=counts.values, color="steelblue")
    plt.xticks(rotation=45, ha="right")
    plt.ylabel("missing values")
    plt.title("Missing values per column")
    path = Path(out_dir) / f"missing_values_{uuid.uuid4().hex[:6]}.png"
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    return str(path)


def save_before_after(before: pd.Series, after: pd.Series, name, out_dir: Path,
                      label: str = "cleaning") -> Optional[str]:
    """Side-by-side histograms of a column before and after a cleaning step."""
    b, a = before.dropna(), after.dropna()
    if b.empty and a.empty:
        return None
    fig, axes = plt.subplots(1, 2, figsize=(10, 4), sharex=True)
    sns.histplot(b, ax=axes[0], color="grey")
    axes[0].set_title(f"{name}: before")
    sns.histplot(a, ax=axes[1], color="steelblue")
    axes[1].set_title(f"{name}: after")
    path = Path(out_dir) / f"{label}_{_slug(name)}_{uuid.uuid4().hex[:6]}.png"
    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    log.debug("saved %s", path)
    return str(path)
