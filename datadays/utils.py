import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd

from . import config

log = logging.getLogger("datadays.utils")

ALLOWED_EXTS = {".csv", ".xlsx", ".xls", ".parquet", ".feather", ".json"}


def _source_of(upload_or_path):
    # FastAPI UploadFile exposes the stream as .file; paths and buffers pass through
    return upload_or_path.file if hasattr(upload_or_path, "file") else upload_or_path


def suffix_of(upload_or_path) -> str:
    filename = getattr(upload_or_path, "filename", None)
    if filename is None and isinstance(upload_or_path, (str, os.PathLike)):
        filename = os.fspath(upload_or_path)
    if filename:
        return Path(filename).suffix.lower()
    return ".csv"


def load_dataset(upload_or_path, sheet_name=0, **kwargs) -> pd.DataFrame:
    """Load a dataset from a local path or an uploaded file, choosing the reader by extension."""
    ext = suffix_of(upload_or_path)
    source = _source_of(upload_or_path)
    log.debug("loading %s as %s", getattr(upload_or_path, "filename", upload_or_path), ext)

    if ext == ".csv":
        return pd.read_csv(source, **kwargs)
    elif ext in (".xlsx", ".xls"):
        return pd.read_excel(source, sheet_name=sheet_name, **kwargs)
    elif ext == ".parquet":
        return pd.read_parquet(source, **kwargs)
    elif ext == ".feather":
        return pd.read_feather(source, **kwargs)
    elif ext == ".json":
        return pd.read_json(source, **kwargs)
    else:
        # try csv read as fallback
        try:
            return pd.read_csv(source, **kwargs)
        except Exception as e:
            raise ValueError(f"Unsupported file type {ext} and fallback CSV failed: {e}") from e


def safe_mkdir(path) -> Path:
    os.makedirs(path, exist_ok=True)
    return Path(path)


def output_dirs(output_dir: Optional[Path] = None) -> Tuple[Path, Path]:
    base = safe_mkdir(output_dir or config.OUTPUT_DIR)
    plots = safe_mkdir(base / "plots")
    return base, plots


def require_columns(df: pd.DataFrame, columns) -> list:
    columns = [columns] if isinstance(columns, str) else list(columns)
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"columns not in dataframe: {missing}")
    return columns


# -------------------------
# Structure inspection
# -------------------------
def detect_column_types(df: pd.DataFrame) -> Dict[str, Any]:
    numeric = df.select_dtypes(include=[np.number]).columns.tolist()
    categorical = df.select_dtypes(include=["object", "category", "bool"]).columns.tolist()
    datetime = df.select_dtypes(include=["datetime64"]).columns.tolist()
    others = [c for c in df.columns if c not in numeric + categorical + datetime]
    return {"numeric": numeric, "categorical": categorical, "datetime": datetime, "others": others}


def describe_structure(df: pd.DataFrame, n_rows: int = 5) -> dict:
    return {
        "shape": df.shape,
        "columns": [str(c) for c in df.columns],
        "dtypes": df.dtypes.astype(str).to_dict(),
        "missing_counts": df.isnull().sum().to_dict(),
        "missing_pct": (df.isnull().mean() * 100).round(3).to_dict(),
        "types_detected": detect_column_types(df),
        "head": df.head(n_rows),
    }


def format_structure(info: dict, title: Optional[str] = None) -> str:
    lines = []
    if title:
        lines += [title, "-" * len(title)]
    rows, cols = info["shape"]
    lines.append(f"Shape: {rows} rows x {cols} columns")
    lines.append("Columns:")
    for col in info["columns"]:
        missing = info["missing_counts"].get(col, 0)
        lines.append(f"  {col}: {info['dtypes'].get(col)} (missing: {missing})")
    head = info.get("head")
    if head is not None and not head.empty:
        lines += ["", head.to_string()]
    return "\n".join(lines)


def frame_preview(df: pd.DataFrame, n_rows: int = 5) -> list:
    """JSON-friendly preview of the first rows (NaN becomes None)."""
    head = df.head(n_rows).astype(object)
    return head.where(pd.notnull(head), None).to_dict(orient="records")
