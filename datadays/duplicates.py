# datadays/duplicates.py
# Day 4: keeping one row per key pair and writing the result out.
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from .utils import load_dataset, output_dirs, require_columns

log = logging.getLogger("datadays.duplicates")


def find_duplicates(df: pd.DataFrame, keys, keep="first") -> pd.DataFrame:
    """Rows that deduplicate() would drop."""
    keys = require_columns(df, keys)
    return df[df.duplicated(subset=keys, keep=keep)]


def count_duplicates(df: pd.DataFrame, keys) -> int:
    keys = require_columns(df, keys)
    return int(df.duplicated(subset=keys).sum())


def deduplicate(df: pd.DataFrame, keys, keep="first") -> pd.DataFrame:
    keys = require_columns(df, keys)
    out = df.drop_duplicates(subset=keys, keep=keep).reset_index(drop=True)
    log.info("kept %d of %d rows on keys %s", len(out), len(df), keys)
    return out


def run(path, keys, output_path: Optional[Path] = None, output_dir: Optional[Path] = None) -> dict:
    df = load_dataset(path)
    dupes = find_duplicates(df, keys)
    cleaned = deduplicate(df, keys)
    if output_path is None:
        base, _ = output_dirs(output_dir)
        output_path = base / "deduplicated.csv"
    output_path = Path(output_path)
    cleaned.to_csv(output_path, index=False)
    log.info("wrote %s", output_path)
    return {
        "frame": df,
        "keys": list(keys) if not isinstance(keys, str) else [keys],
        "duplicates": dupes,
        "duplicate_count": len(dupes),
        "cleaned": cleaned,
        "output_path": str(output_path),
    }
