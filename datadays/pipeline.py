# datadays/pipeline.py
import logging
from pathlib import Path
from typing import Dict, Optional

from . import config, duplicates, ingest, missing, numeric, outliers
from .sample_data import sample_paths, write_samples

log = logging.getLogger("datadays.pipeline")

# day -> (title, runner); every runner loads its own file and shares nothing with the others
DAYS = {
    1: ("Reading JSON and spreadsheet files", ingest.run),
    2: ("Handling missing values", missing.run),
    3: ("Detecting and handling outliers", outliers.run),
    4: ("Removing duplicate records", duplicates.run),
    5: ("Cleaning numeric strings", numeric.run),
}


def day_title(day: int) -> str:
    if day not in DAYS:
        raise KeyError(f"no exercise for day {day}; days are {sorted(DAYS)}")
    return DAYS[day][0]


def run_day(day: int, **kwargs) -> dict:
    title = day_title(day)
    log.info("day %d: %s", day, title)
    return DAYS[day][1](**kwargs)


def sample_arguments(paths: Dict[int, Dict[str, Path]], output_dir: Optional[Path] = None) -> Dict[int, dict]:
    """Arguments that run each day on its sample dataset."""
    return {
        1: {"json_path": paths[1]["json"], "spreadsheet_path": paths[1]["spreadsheet"]},
        2: {"path": paths[2]["csv"], "drop_threshold": 0.5, "output_dir": output_dir},
        3: {"path": paths[3]["csv"], "column": "minutes", "strategy": "separate", "output_dir": output_dir},
        4: {"path": paths[4]["csv"], "keys": ["student_id", "course"], "output_dir": output_dir},
        5: {"path": paths[5]["csv"], "columns": ["price", "size", "discount"]},
    }


def run_all(data_dir=None, output_dir: Optional[Path] = None, days=None) -> Dict[int, dict]:
    data_dir = Path(data_dir or config.DATA_DIR)
    paths = sample_paths(data_dir)
    if not all(p.exists() for files in paths.values() for p in files.values()):
        paths = write_samples(data_dir)
    args = sample_arguments(paths, output_dir)
    return {day: run_day(day, **args[day]) for day in (days or sorted(DAYS))}
