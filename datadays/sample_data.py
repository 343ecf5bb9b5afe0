"""
Sample datasets for the five days.

Each day gets its own small, seeded dataset with the problem that day is
about baked in: nested JSON and a multi-sheet workbook, missing values,
extreme values, repeated keys, and numbers stored as decorated strings.

Usage:
    python -m datadays.sample_data [output_dir]
"""

import json
import logging
import sys
from pathlib import Path
from typing import Dict

import numpy as np
import pandas as pd

from . import config
from .utils import safe_mkdir

log = logging.getLogger("datadays.sample_data")


# ---------------------------------------------------------------------------
# Day 1: nested JSON and a workbook with two sheets
# ---------------------------------------------------------------------------

def recipes() -> list:
    return [
        {"id": 1, "name": "Pancakes", "cuisine": "american",
         "nutrition": {"calories": 520, "protein_g": 14},
         "ingredients": [{"item": "flour", "grams": 200}, {"item": "milk", "grams": 300},
                         {"item": "egg", "grams": 50}]},
        {"id": 2, "name": "Shakshuka", "cuisine": "maghrebi",
         "nutrition": {"calories": 410, "protein_g": 21},
         "ingredients": [{"item": "tomato", "grams": 400}, {"item": "egg", "grams": 150}]},
        {"id": 3, "name": "Dal", "cuisine": "indian",
         "nutrition": {"calories": 380, "protein_g": 18},
         "ingredients": [{"item": "lentils", "grams": 250}, {"item": "onion", "grams": 100},
                         {"item": "ghee", "grams": 20}]},
        {"id": 4, "name": "Gazpacho", "cuisine": "spanish",
         "nutrition": {"calories": 150, "protein_g": 3},
         "ingredients": [{"item": "tomato", "grams": 500}, {"item": "cucumber", "grams": 150}]},
    ]


def station_sheets() -> Dict[str, pd.DataFrame]:
    stations = pd.DataFrame({
        "station_id": ["S01", "S02", "S03", "S04"],
        "city": ["Lisbon", "Porto", "Faro", "Braga"],
        "elevation_m": [77, 93, 4, 190],
    })
    readings = pd.DataFrame({
        "station_id": ["S01", "S01", "S02", "S03", "S04", "S04"],
        "date": pd.to_datetime(["2024-01-01", "2024-01-02", "2024-01-01", "2024-01-01",
                                "2024-01-01", "2024-01-02"]),
        "temp_c": [14.2, 13.8, 11.5, 16.1, 9.7, 10.2],
    })
    return {"stations": stations, "readings": readings}


# ---------------------------------------------------------------------------
# Day 2: missing values
# ---------------------------------------------------------------------------

def permits(n: int = 60, seed: int = 2) -> pd.DataFrame:
    rng = np.random.RandomState(seed)
    units = rng.randint(1, 40, size=n).astype(float)
    floors = np.clip(np.round(units / 6 + rng.normal(0, 1, n)), 1, None)
    cost = np.round(units * 85_000 + floors * 40_000 + rng.normal(0, 50_000, n), -2)
    df = pd.DataFrame({
        "permit_id": [f"P{i:04d}" for i in range(n)],
        "borough": rng.choice(["north", "south", "east", "west"], size=n),
        "units": units,
        "floors": floors,
        "est_cost": cost,
        "fee_paid": np.where(rng.rand(n) < 0.9, np.nan, 250.0),
    })
    df.loc[rng.rand(n) < 0.15, "units"] = np.nan
    df.loc[rng.rand(n) < 0.10, "floors"] = np.nan
    df.loc[rng.rand(n) < 0.20, "est_cost"] = np.nan
    return df


# ---------------------------------------------------------------------------
# Day 3: outliers
# ---------------------------------------------------------------------------

def delivery_times(n: int = 80, seed: int = 3) -> pd.DataFrame:
    rng = np.random.RandomState(seed)
    minutes = np.round(rng.normal(35, 6, n), 1)
    distance = np.round(np.abs(rng.normal(4, 1.2, n)), 2)
    minutes[[7, 42]] = [190.0, 240.0]
    distance[63] = 48.0
    return pd.DataFrame({
        "order_id": np.arange(1000, 1000 + n),
        "minutes": minutes,
        "distance_km": distance,
    })


# ---------------------------------------------------------------------------
# Day 4: repeated (key1, key2) pairs
# ---------------------------------------------------------------------------

def enrollments() -> pd.DataFrame:
    return pd.DataFrame({
        "student_id": [101, 102, 101, 103, 102, 104, 101, 105],
        "course": ["math", "math", "math", "art", "bio", "art", "bio", "math"],
        "term": ["F24", "F24", "S25", "F24", "F24", "F24", "F24", "S25"],
        "grade": ["A", "B", "A-", "B+", "C", "A", "B", "A"],
    })


# ---------------------------------------------------------------------------
# Day 5: numbers as decorated strings
# ---------------------------------------------------------------------------

def listings() -> pd.DataFrame:
    return pd.DataFrame({
        "listing": ["loft", "cottage", "studio", "villa", "flat", "cabin"],
        "price": ["$50", "$1,250.00", "USD 89.99", "€2,400", "n/a", "$75 per night"],
        "size": ["45 m2", "120m2", "30 sq m", "310 m2", "55", "unknown"],
        "discount": ["10%", "-5%", "0%", "12.5 %", "", "15%"],
    })


def sample_paths(directory=None) -> Dict[int, Dict[str, Path]]:
    directory = Path(directory or config.DATA_DIR)
    return {
        1: {"json": directory / "recipes.json", "spreadsheet": directory / "stations.xlsx"},
        2: {"csv": directory / "permits.csv"},
        3: {"csv": directory / "delivery_times.csv"},
        4: {"csv": directory / "enrollments.csv"},
        5: {"csv": directory / "listings.csv"},
    }


def write_samples(directory=None) -> Dict[int, Dict[str, Path]]:
    """Write every day's sample files under directory and return their paths by day."""
    directory = safe_mkdir(directory or config.DATA_DIR)
    paths = sample_paths(directory)
    with open(paths[1]["json"], "w", encoding="utf-8") as fh:
        json.dump(recipes(), fh, indent=2)
    with pd.ExcelWriter(paths[1]["spreadsheet"]) as writer:
        for name, sheet in station_sheets().items():
            sheet.to_excel(writer, sheet_name=name, index=False)
    permits().to_csv(paths[2]["csv"], index=False)
    delivery_times().to_csv(paths[3]["csv"], index=False)
    enrollments().to_csv(paths[4]["csv"], index=False)
    listings().to_csv(paths[5]["csv"], index=False)
    log.info("wrote sample data to %s", directory)
    return paths


if __name__ == "__main__":
    out = write_samples(sys.argv[1] if len(sys.argv) > 1 else None)
    for day, files in out.items():
        print(day, {k: str(v) for k, v in files.items()})
