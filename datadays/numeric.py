# datadays/numeric.py
# Day 5: numbers stored as strings ("$50", "1,234 kg", "12%") parsed back into numbers.
import logging
import numbers
import re
from typing import Optional

import numpy as np
import pandas as pd

from .utils import load_dataset, require_columns, suffix_of

log = logging.getLogger("datadays.numeric")


def _number_pattern(grouping_mark: str = ",", decimal_mark: str = ".") -> re.Pattern:
    if grouping_mark == decimal_mark:
        raise ValueError("grouping_mark and decimal_mark must differ")
    g, d = re.escape(grouping_mark), re.escape(decimal_mark)
    # first number in the string: a minus counts as a sign only when no letter or digit precedes it
    sign = r"(?:(?<![0-9A-Za-z])-)?"
    return re.compile(rf"({sign}\d[\d{g}]*(?:{d}\d+)?|{sign}{d}\d+)")


def _is_plain_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _to_float(token: str, grouping_mark: str, decimal_mark: str) -> float:
    if grouping_mark:
        token = token.replace(grouping_mark, "")
    return float(token.replace(decimal_mark, "."))


def parse_number(value, grouping_mark: str = ",", decimal_mark: str = ".") -> Optional[float]:
    """
    Pull the first number out of a messy string.

    Currency symbols, units, percent signs and other text around the number
    are dropped, grouping marks inside it are ignored. Returns None when the
    value holds no number at all.

    >>> parse_number("$50")
    50.0
    >>> parse_number("1,234.5 kg")
    1234.5
    """
    if value is None:
        return None
    if _is_plain_number(value):
        return None if np.isnan(value) else float(value)
    match = _number_pattern(grouping_mark, decimal_mark).search(str(value))
    if match is None:
        return None
    return _to_float(match.group(1), grouping_mark, decimal_mark)


def parse_numeric_column(series: pd.Series, grouping_mark: str = ",", decimal_mark: str = ".") -> pd.Series:
    if pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series):
        return series.astype(float)
    pattern = _number_pattern(grouping_mark, decimal_mark)
    tokens = series.astype(str).str.extract(pattern, expand=False)
    if grouping_mark:
        tokens = tokens.str.replace(grouping_mark, "", regex=False)
    tokens = tokens.str.replace(decimal_mark, ".", regex=False)
    parsed = pd.to_numeric(tokens, errors="coerce").astype(float)

    # numbers already stored as numbers in an object column keep their value
    plain = series.map(_is_plain_number).astype(bool)
    if plain.any():
        parsed[plain] = series[plain].astype(float)
    return parsed.rename(series.name)


def parsing_problems(raw: pd.Series, parsed: pd.Series) -> pd.DataFrame:
    """Non-empty raw values that did not parse to a number."""
    text = raw.astype(str).str.strip()
    failed = (raw.notnull() & (text != "") & parsed.isnull()).to_numpy()
    return pd.DataFrame({"row": raw.index[failed], "raw": raw[failed].to_numpy()})


def clean_numeric_columns(df: pd.DataFrame, columns, grouping_mark: str = ",", decimal_mark: str = ".") -> pd.DataFrame:
    columns = require_columns(df, columns)
    out = df.copy()
    for col in columns:
        out[col] = parse_numeric_column(df[col], grouping_mark, decimal_mark)
    return out


def run(path, columns, grouping_mark: str = ",", decimal_mark: str = ".") -> dict:
    # read everything as text so "007" or "1,000" reach the parser untouched
    df = load_dataset(path, dtype=str) if suffix_of(path) == ".csv" else load_dataset(path)
    columns = require_columns(df, columns)
    cleaned = clean_numeric_columns(df, columns, grouping_mark, decimal_mark)
    problems = {}
    for col in columns:
        p = parsing_problems(df[col], cleaned[col])
        if not p.empty:
            problems[col] = p
            log.warning("%d values in %s could not be parsed", len(p), col)
    return {
        "frame": df,
        "columns": columns,
        "cleaned": cleaned,
        "problems": problems,
        "described": cleaned[columns].describe(),
    }
