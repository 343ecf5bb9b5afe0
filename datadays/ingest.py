# datadays/ingest.py
# Day 1: reading JSON and spreadsheet files into tables and looking at what came back.
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

from .utils import describe_structure, load_dataset

log = logging.getLogger("datadays.ingest")


def read_json_records(path, record_path: Optional[Union[str, List[str]]] = None,
                      meta: Optional[list] = None) -> pd.DataFrame:
    """
    Load a JSON file into a flat table.

    A list of flat objects loads as-is. Nested objects are flattened into
    dotted column names, and `record_path`/`meta` unpack a nested list of
    records (e.g. every ingredient of every recipe) the way
    `pandas.json_normalize` does.
    """
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if isinstance(data, dict) and record_path is None:
        # a single top-level object: either {key: [records]} or one record
        lists = [v for v in data.values() if isinstance(v, list)]
        data = lists[0] if len(lists) == 1 else [data]
    df = pd.json_normalize(data, record_path=record_path, meta=meta)
    log.info("read %d rows x %d columns from %s", df.shape[0], df.shape[1], path)
    return df


def list_sheets(path) -> List[str]:
    with pd.ExcelFile(path) as xls:
        return [str(name) for name in xls.sheet_names]


def read_spreadsheet(path, sheet_name: Union[int, str, None] = 0,
                     skiprows=None) -> Union[pd.DataFrame, Dict[str, pd.DataFrame]]:
    """Read one sheet, or every sheet into a dict when sheet_name is None."""
    result = load_dataset(Path(path), sheet_name=sheet_name, skiprows=skiprows)
    if isinstance(result, dict):
        log.info("read %d sheets from %s", len(result), path)
    else:
        log.info("read %d rows from sheet %r of %s", len(result), sheet_name, path)
    return result


def inspect_nested_columns(df: pd.DataFrame) -> List[str]:
    nested = []
    for col in df.columns:
        if df[col].map(lambda v: isinstance(v, (list, dict))).any():
            nested.append(col)
    return nested


def run(json_path, spreadsheet_path, record_path=None, meta=None, sheet_name=0) -> dict:
    json_df = read_json_records(json_path, record_path=record_path, meta=meta)
    sheets = list_sheets(spreadsheet_path)
    sheet_df = read_spreadsheet(spreadsheet_path, sheet_name=sheet_name)
    if isinstance(sheet_df, dict):
        sheet_structure = {name: describe_structure(frame) for name, frame in sheet_df.items()}
    else:
        sheet_structure = describe_structure(sheet_df)
    return {
        "json": json_df,
        "json_structure": describe_structure(json_df),
        "nested_columns": inspect_nested_columns(json_df),
        "sheets": sheets,
        "spreadsheet": sheet_df,
        "spreadsheet_structure": sheet_structure,
    }
