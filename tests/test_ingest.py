import io
import json

import pandas as pd
import pytest

from datadays import ingest, sample_data
from datadays.utils import describe_structure, format_structure, load_dataset


@pytest.fixture
def recipes_path(tmp_path):
    path = tmp_path / "recipes.json"
    path.write_text(json.dumps(sample_data.recipes()), encoding="utf-8")
    return path


def test_nested_objects_are_flattened(recipes_path):
    df = ingest.read_json_records(recipes_path)
    assert len(df) == 4
    assert "nutrition.calories" in df.columns
    assert ingest.inspect_nested_columns(df) == ["ingredients"]


def test_record_path_unpacks_lists(recipes_path):
    df = ingest.read_json_records(recipes_path, record_path="ingredients", meta=["name"])
    assert len(df) == 10
    assert set(df.columns) == {"item", "grams", "name"}
    assert df.loc[df["name"] == "Dal", "item"].tolist() == ["lentils", "onion", "ghee"]


def test_top_level_object_holding_records(tmp_path):
    path = tmp_path / "wrapped.json"
    path.write_text(json.dumps({"recipes": sample_data.recipes()}), encoding="utf-8")
    assert len(ingest.read_json_records(path)) == 4


def test_spreadsheet_sheets(samples):
    path = samples[1]["spreadsheet"]
    assert ingest.list_sheets(path) == ["stations", "readings"]
    first = ingest.read_spreadsheet(path)
    assert first.columns.tolist() == ["station_id", "city", "elevation_m"]
    every = ingest.read_spreadsheet(path, sheet_name=None)
    assert set(every) == {"stations", "readings"}
    assert len(ingest.read_spreadsheet(path, sheet_name="readings")) == 6


def test_run(samples):
    result = ingest.run(samples[1]["json"], samples[1]["spreadsheet"])
    assert result["sheets"] == ["stations", "readings"]
    assert result["json_structure"]["shape"] == (4, 6)
    assert result["nested_columns"] == ["ingredients"]
    assert result["spreadsheet_structure"]["types_detected"]["numeric"] == ["elevation_m"]


def test_load_dataset_dispatches_on_extension(samples):
    assert len(load_dataset(samples[4]["csv"])) == 8
    assert isinstance(load_dataset(samples[1]["spreadsheet"], sheet_name=None), dict)


def test_load_dataset_upload_like_object():
    class Upload:
        filename = "small.csv"
        file = io.StringIO("a,b\n1,2\n3,4\n")

    df = load_dataset(Upload())
    assert df.to_dict(orient="list") == {"a": [1, 3], "b": [2, 4]}


def test_unknown_extension_falls_back_to_csv(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("a,b\n1,2\n")
    assert load_dataset(path).shape == (1, 2)


def test_unreadable_unknown_extension(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"")
    with pytest.raises(ValueError, match="Unsupported file type"):
        load_dataset(path)


def test_format_structure_mentions_columns():
    df = pd.DataFrame({"a": [1, None], "b": ["x", "y"]})
    text = format_structure(describe_structure(df), "Example")
    assert text.splitlines()[0] == "Example"
    assert "Shape: 2 rows x 2 columns" in text
    assert "a: float64 (missing: 1)" in text


def test_run_reading_every_sheet(samples):
    result = ingest.run(samples[1]["json"], samples[1]["spreadsheet"], sheet_name=None)
    assert set(result["spreadsheet"]) == {"stations", "readings"}
    structures = result["spreadsheet_structure"]
    assert structures["stations"]["shape"] == (4, 3)
    assert structures["readings"]["shape"] == (6, 3)


def test_load_parquet(tmp_path):
    pytest.importorskip("pyarrow")
    path = tmp_path / "table.parquet"
    pd.DataFrame({"id": [1, 2], "name": ["a", "b"]}).to_parquet(path)
    df = load_dataset(path)
    assert df.shape == (2, 2)
    assert df["name"].tolist() == ["a", "b"]
