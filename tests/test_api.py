from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from dashboard_backend.app import create_app
from dashboard_backend.core.settings import Settings
from dashboard_backend.core.validation import StorageError
from dashboard_backend.infrastructure import InMemoryBlobStore

WORKFLOW_KEY = "workflow-data.json"
TIME_SAVED_KEY = "rbm-time-saved.json"


class _TimeSavedUnavailableStore(InMemoryBlobStore):
    def write_text(self, key: str, body: str, *, content_type: str = "application/json") -> None:
        if key == TIME_SAVED_KEY:
            raise StorageError("time-saved bucket is read-only")
        super().write_text(key, body, content_type=content_type)


@pytest.fixture()
def store():
    return InMemoryBlobStore()


@pytest.fixture()
def app(store):
    return create_app(Settings(storage_backend="memory"), store=store)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def _stored(store: InMemoryBlobStore, key: str):
    return json.loads(store.read_text(key))


def _upload(client: TestClient, filename: str, content: str | bytes, content_type: str = "text/csv"):
    if isinstance(content, str):
        content = content.encode("utf-8")
    return client.post("/api/upload-data", files={"file": (filename, content, content_type)})


def test_post_workflow_data_merges_pipeline_records(client, store):
    payload = [
        {"PB C-ASIN": "B08XYZ1234", "Spec Check": "Comparable", "Price Action": "Price Match"},
        {"PB C-ASIN": "B08XYZ5678", "Spec Check": "Under Spec'd"},
        {"Step": "FLC Check"},
    ]

    response = client.post("/api/workflow-data", json=payload)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Workflow data received and merged",
        "recordCount": 2,
        "totalRecords": 2,
        "newASINs": 2,
        "updatedASINs": 0,
    }
    stored = _stored(store, WORKFLOW_KEY)
    assert [record["PB C-ASIN"] for record in stored] == ["B08XYZ1234", "B08XYZ5678"]
    assert {record["_source"] for record in stored} == {"pipeline"}

    data = client.get("/api/workflow-data").json()["data"]
    assert data == stored


def test_post_workflow_data_unwraps_single_object(client):
    client.post("/api/workflow-data", json=[{"PB C-ASIN": "A1", "x": 1}])

    response = client.post("/api/workflow-data", json={"data": {"PB C-ASIN": "A1", "x": 2}})

    body = response.json()
    assert body["newASINs"] == 0
    assert body["updatedASINs"] == 1
    assert body["totalRecords"] == 1
    assert client.get("/api/workflow-data").json()["data"][0]["x"] == 2


def test_malformed_json_body_is_rejected_without_writing(client, store):
    client.post("/api/workflow-data", json=[{"PB C-ASIN": "A1"}])
    before = store.read_text(WORKFLOW_KEY)

    response = client.post(
        "/api/workflow-data",
        content=b'{"PB C-ASIN": ',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert store.read_text(WORKFLOW_KEY) == before


def test_get_workflow_data_defaults_to_empty(client):
    assert client.get("/api/workflow-data").json() == {"data": []}


def test_delete_clears_collection(client, store):
    client.post("/api/workflow-data", json=[{"PB C-ASIN": "A1"}])

    response = client.delete("/api/workflow-data")

    assert response.json() == {"success": True, "message": "All workflow data cleared"}
    assert _stored(store, WORKFLOW_KEY) == []


def test_csv_upload_scenarios(client, store):
    client.post("/api/workflow-data", json=[{"PB C-ASIN": "A1", "x": 1}])

    new_upload = _upload(client, "batch.csv", "PB C-ASIN,x\r\nA2,2\r\n")
    assert new_upload.status_code == 200
    assert new_upload.json() == {
        "success": True,
        "message": "File uploaded and data merged successfully",
        "recordCount": 1,
        "totalRecords": 2,
        "newASINs": 1,
        "updatedASINs": 0,
    }

    update = _upload(client, "update.CSV", "PB C-ASIN,x\nA1,9\n,7\n")
    assert update.json()["recordCount"] == 1
    assert update.json()["newASINs"] == 0
    assert update.json()["updatedASINs"] == 1

    duplicate = _upload(client, "dup.csv", "PB C-ASIN,x\nA3,1\nA3,2\n")
    assert duplicate.json()["totalRecords"] == 3

    stored = _stored(store, WORKFLOW_KEY)
    assert [record["PB C-ASIN"] for record in stored] == ["A1", "A2", "A3"]
    assert stored[0]["x"] == "9"
    assert stored[0]["_source"] == "manual_upload"
    assert stored[2]["x"] == "2"


def test_json_upload_wraps_single_object(client, store):
    response = _upload(client, "record.json", json.dumps({"PB C-ASIN": "J1", "GL": "Toys"}), "application/json")

    assert response.status_code == 200
    assert response.json()["newASINs"] == 1
    assert _stored(store, WORKFLOW_KEY)[0]["GL"] == "Toys"


def test_csv_upload_with_byte_order_mark(client, store):
    content = "\ufeffPB C-ASIN,x\nA1,1\n".encode("utf-8")

    response = _upload(client, "excel.csv", content)

    assert response.json()["recordCount"] == 1
    assert _stored(store, WORKFLOW_KEY)[0]["PB C-ASIN"] == "A1"


@pytest.mark.parametrize(
    ("filename", "content"),
    [
        ("notes.txt", "PB C-ASIN,x\nA1,1\n"),
        ("header-only.csv", "PB C-ASIN,x\n"),
        ("broken.json", '[{"PB C-ASIN": "A1"'),
    ],
)
def test_invalid_uploads_are_rejected_before_merge(client, store, filename, content):
    response = _upload(client, filename, content)

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"]
    assert WORKFLOW_KEY not in store.keys()


def test_upload_without_file_is_rejected(client):
    response = client.post("/api/upload-data", data={"note": "no file"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "No file provided"}


def test_upload_credits_time_saved_in_background(app, store):
    with TestClient(app) as test_client:
        response = _upload(test_client, "batch.csv", "PB C-ASIN,x\nA1,1\nA2,2\n,3\n")
        assert response.status_code == 200

    state = _stored(store, TIME_SAVED_KEY)
    assert state["totalMinutes"] == 30
    assert state["executionCount"] == 1


def test_upload_succeeds_when_time_saved_update_fails():
    store = _TimeSavedUnavailableStore()
    app = create_app(Settings(storage_backend="memory"), store=store)

    with TestClient(app) as test_client:
        response = _upload(test_client, "batch.csv", "PB C-ASIN,x\nA1,1\n")
        assert response.status_code == 200
        assert response.json()["success"] is True

    assert TIME_SAVED_KEY not in store.keys()
    assert _stored(store, WORKFLOW_KEY)[0]["PB C-ASIN"] == "A1"


def test_corrupt_collection_blocks_writes_but_reads_degrade(store, client):
    store.write_text(WORKFLOW_KEY, "{not json")

    assert client.get("/api/workflow-data").json() == {"data": []}

    response = client.post("/api/workflow-data", json=[{"PB C-ASIN": "A1"}])
    assert response.status_code == 500
    assert response.json()["success"] is False
    assert store.read_text(WORKFLOW_KEY) == "{not json"


def test_time_saved_endpoints(client):
    assert client.get("/api/rbm-time-saved").json() == {
        "totalMinutes": 0,
        "executionCount": 0,
        "lastUpdated": None,
    }

    response = client.post("/api/rbm-time-saved", json={"asinCount": 2})
    assert response.json() == {"success": True, "totalMinutes": 30, "addedMinutes": 30, "executionCount": 1}

    response = client.post("/api/rbm-time-saved", json={"asinCount": 0})
    assert response.json()["executionCount"] == 2
    assert response.json()["totalMinutes"] == 30

    state = client.get("/api/rbm-time-saved").json()
    assert state["executionCount"] == 2
    assert state["lastUpdated"]

    assert client.post("/api/rbm-time-saved", json={"asinCount": -1}).status_code == 422


def test_feedback_is_appended(client, store):
    assert client.get("/api/feedback").json() == []

    first = client.post(
        "/api/feedback",
        json={"asin": "A1", "type": "positive", "text": "Great match", "timestamp": "2025-01-01T00:00:00Z"},
    )
    second = client.post("/api/feedback", json={"asin": "A1", "type": "negative", "text": "Wrong comp"})

    assert first.json()["success"] is True
    assert first.json()["id"] != second.json()["id"]

    entries = client.get("/api/feedback").json()
    assert [entry["type"] for entry in entries] == ["positive", "negative"]
    assert entries[0]["timestamp"] == "2025-01-01T00:00:00Z"
    assert all(entry["submittedAt"] for entry in entries)
    assert _stored(store, "feedback.json") == entries


def test_workflow_stats_with_gl_filter(client):
    client.post(
        "/api/workflow-data",
        json=[
            {"PB C-ASIN": "A1", "GL": "Home", "pricing_recommendation": "Price Match", "positioning": "Comparable"},
            {"PB C-ASIN": "A2", "gl": "Toys", "Price Action": "Revert to Base", "Spec Check": "Under-Spec"},
            {"PB C-ASIN": "A3", "GL": "Home", "Status": "price match", "positioning": "Overspec"},
        ],
    )

    overall = client.get("/api/workflow-data/stats").json()
    assert overall == {
        "totalRecords": 3,
        "priceMatch": 2,
        "revertToBase": 1,
        "comparable": 1,
        "underSpec": 1,
        "overSpec": 1,
        "availableGLs": ["Home", "Toys"],
        "selectedGLs": [],
    }

    home = client.get("/api/workflow-data/stats", params={"gl": "Home"}).json()
    assert home["totalRecords"] == 2
    assert home["priceMatch"] == 2
    assert home["underSpec"] == 0
    assert home["selectedGLs"] == ["Home"]


def test_numeric_gl_stats_match_posted_value(client):
    client.post("/api/workflow-data", json=[{"PB C-ASIN": "A1", "GL": 23}, {"PB C-ASIN": "A2", "gl": "Toys"}])

    assert client.get("/api/workflow-data/stats").json()["availableGLs"] == ["23", "Toys"]
    assert client.get("/api/workflow-data/stats", params={"gl": "23"}).json()["totalRecords"] == 1


def test_export_and_template_downloads(client):
    client.post("/api/workflow-data", json=[{"PB C-ASIN": "A1", "note": "a, b"}])

    export = client.get("/api/workflow-data/export")
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    lines = export.text.splitlines()
    assert lines[0].split(",")[:2] == ["PB C-ASIN", "note"]
    assert lines[1].startswith('A1,"a, b",')

    template = client.get("/api/upload-template")
    assert template.text.splitlines()[0].startswith("PB C-ASIN,1P C-ASIN,GL,")


def test_storage_status_hides_credentials(store):
    settings = Settings(storage_backend="memory", aws_access_key_id="AKIA-secret", aws_secret_access_key="shh")
    app = create_app(settings, store=store)

    with TestClient(app) as test_client:
        status = test_client.get("/api/storage-status").json()

    assert status["backend"] == "memory"
    assert status["hasAccessKey"] is True
    assert "AKIA-secret" not in json.dumps(status)
    assert "shh" not in json.dumps(status)
