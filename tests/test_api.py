import pytest
from fastapi.testclient import TestClient

from datadays import sample_data
from datadays.api import build_api


@pytest.fixture
def client(tmp_path):
    return TestClient(build_api(output_dir=tmp_path / "out"))


def _csv(df) -> bytes:
    return df.to_csv(index=False).encode("utf-8")


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "app": "datadays"}


def test_days(client):
    days = client.get("/days").json()
    assert [d["day"] for d in days] == [1, 2, 3, 4, 5]


def test_deduplicate_upload(client, tmp_path):
    resp = client.post(
        "/days/4",
        files={"file": ("enrollments.csv", _csv(sample_data.enrollments()), "text/csv")},
        data={"keys": "student_id, course"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["result"]["duplicate_count"] == 1
    assert body["result"]["keys"] == ["student_id", "course"]
    assert len(body["result"]["cleaned"]) == 7
    assert (tmp_path / "out" / "deduplicated.csv").exists()


def test_numeric_upload(client):
    resp = client.post(
        "/days/5",
        files={"file": ("listings.csv", _csv(sample_data.listings()), "text/csv")},
        data={"columns": "price"},
    )
    assert resp.status_code == 200
    prices = [row["price"] for row in resp.json()["result"]["cleaned"]]
    assert prices[:2] == [50.0, 1250.0]
    assert prices[4] is None


def test_outlier_upload(client):
    resp = client.post(
        "/days/3",
        files={"file": ("d.csv", _csv(sample_data.delivery_times()), "text/csv")},
        data={"column": "minutes", "strategy": "drop", "threshold": "3"},
    )
    assert resp.status_code == 200
    assert resp.json()["result"]["outlier_counts"] == {"minutes": 2}


def test_missing_keys_is_bad_request(client):
    resp = client.post("/days/4", files={"file": ("e.csv", _csv(sample_data.enrollments()), "text/csv")})
    assert resp.status_code == 400


def test_unknown_column_is_bad_request(client):
    resp = client.post(
        "/days/4",
        files={"file": ("e.csv", _csv(sample_data.enrollments()), "text/csv")},
        data={"keys": "semester"},
    )
    assert resp.status_code == 400
    assert "semester" in resp.json()["detail"]


def test_unknown_day(client):
    resp = client.post("/days/9", files={"file": ("e.csv", b"a\n1\n", "text/csv")})
    assert resp.status_code == 404
