# datadays/api.py
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from . import __version__, config
from .missing import MultipleImputation
from .pipeline import DAYS, run_day
from .report import summarize_result
from .utils import frame_preview, output_dirs

log = logging.getLogger("datadays.api")


def _split(text: Optional[str]) -> Optional[list]:
    if text is None or not text.strip():
        return None
    return [part.strip() for part in text.split(",") if part.strip()]


def _save_upload(upload: UploadFile, directory: Path) -> Path:
    name = Path(upload.filename or "upload.csv").name
    path = directory / name
    with open(path, "wb") as fh:
        shutil.copyfileobj(upload.file, fh)
    return path


def jsonable(value):
    """Turn a day's result dict into something JSON can carry; frames become row previews."""
    if isinstance(value, pd.DataFrame):
        if not isinstance(value.index, pd.RangeIndex):
            value = value.reset_index()
        return jsonable(frame_preview(value, n_rows=20))
    if isinstance(value, pd.Series):
        return jsonable(value.astype(object).where(value.notnull(), None).to_dict())
    if isinstance(value, MultipleImputation):
        return jsonable({
            "m": value.m,
            "columns": value.columns,
            "imputed_cells": value.imputed_mask.sum().astype(int).to_dict(),
            "between_variance": value.between_variance,
        })
    if isinstance(value, dict):
        return {str(k): jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, np.generic):
        return value.item()
    return value


def day_arguments(day: int, paths: list, keys=None, columns=None, column=None, threshold=None,
                  strategy=None, drop_columns=None, drop_threshold=None, m=None, output_dir=None) -> dict:
    """Map the form fields of one request onto the runner's arguments for that day."""
    if day == 1:
        if len(paths) != 2:
            raise ValueError("day 1 needs a JSON file and a spreadsheet")
        json_path = next((p for p in paths if p.suffix.lower() == ".json"), paths[0])
        sheet_path = next(p for p in paths if p != json_path)
        return {"json_path": json_path, "spreadsheet_path": sheet_path}
    path = paths[0]
    if day == 2:
        return {"path": path, "drop_columns": _split(drop_columns), "drop_threshold": drop_threshold,
                "m": m, "output_dir": output_dir}
    if day == 3:
        return {"path": path, "threshold": threshold, "strategy": strategy or "separate", "column": column,
                "output_dir": output_dir}
    if day == 4:
        if not _split(keys):
            raise ValueError("day 4 needs the key columns, e.g. keys=student_id,course")
        return {"path": path, "keys": _split(keys), "output_dir": output_dir}
    if not _split(columns):
        raise ValueError("day 5 needs the columns to parse, e.g. columns=price,size")
    return {"path": path, "columns": _split(columns)}


def build_api(output_dir: Optional[Path] = None) -> FastAPI:
    api = FastAPI(title="datadays: five-day data cleaning walkthrough", version=__version__)
    api.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @api.get("/health")
    def health():
        return {"status": "ok", "app": "datadays"}

    @api.get("/days")
    def days():
        return [{"day": day, "title": title} for day, (title, _) in sorted(DAYS.items())]

    @api.post("/days/{day}")
    def run(day: int,
            file: UploadFile = File(...),
            spreadsheet: Optional[UploadFile] = File(None),
            keys: Optional[str] = Form(None),
            columns: Optional[str] = Form(None),
            column: Optional[str] = Form(None),
            threshold: Optional[float] = Form(None),
            strategy: Optional[str] = Form(None),
            drop_columns: Optional[str] = Form(None),
            drop_threshold: Optional[float] = Form(None),
            m: Optional[int] = Form(None)):
        if day not in DAYS:
            raise HTTPException(status_code=404, detail=f"no exercise for day {day}")
        base, _ = output_dirs(output_dir or config.OUTPUT_DIR)
        with tempfile.TemporaryDirectory() as tmp:
            uploads = [u for u in (file, spreadsheet) if u is not None]
            paths = [_save_upload(u, Path(tmp)) for u in uploads]
            try:
                kwargs = day_arguments(day, paths, keys=keys, columns=columns, column=column,
                                       threshold=threshold, strategy=strategy, drop_columns=drop_columns,
                                       drop_threshold=drop_threshold, m=m, output_dir=base)
                result = run_day(day, **kwargs)
            except (ValueError, KeyError) as e:
                log.info("day %d rejected request: %s", day, e)
                detail = e.args[0] if isinstance(e, KeyError) and e.args else str(e)
                raise HTTPException(status_code=400, detail=detail) from e
        summary = summarize_result(day, result, DAYS[day][0])
        payload = jsonable({k: v for k, v in result.items() if k not in ("zscores", "flags")})
        return {"day": day, "summary": summary, "result": payload}

    return api
