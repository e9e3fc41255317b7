"""HTTP API tests using FastAPI's TestClient."""

from fastapi.testclient import TestClient

from docforge.server import create_app

from conftest import FakeProvider


def _client(app_config, services):
    app_config.generation.pacing_seconds = 0
    return TestClient(create_app(app_config, services))


def test_health(app_config, make_services):
    client = _client(app_config, make_services())

    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["ok"] is True


def test_autonomous_process_and_browse(app_config, make_services):
    client = _client(app_config, make_services())
    payload = {
        "jobId": "job-1",
        "fileName": "yoga.pdf",
        "topics": [
            {
                "name": "Yoga Basics",
                "confidence": 90,
                "keywords": ["yoga"],
                "pages": [1],
                "contentType": "gymnastics",
                "sentiment": "positive",
                "language": "en",
            }
        ],
    }

    resp = client.post("/autonomous-process", json=payload)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["processedTopics"] == 1
    assert [r["id"] for r in body["results"]] == ["analysis", "executive-summary"]

    browse = client.get("/jobs/job-1/content")
    assert browse.status_code == 200
    assert sum(r["fileCount"] for r in browse.json()["results"]) == 2


def test_autonomous_process_rejects_bad_payload(app_config, make_services):
    client = _client(app_config, make_services())

    resp = client.post("/autonomous-process", json={"jobId": "job-1", "topics": "nope"})

    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_organize_documents_endpoint(app_config, make_services):
    client = _client(app_config, make_services(provider=FakeProvider(file_payload={"category": "Legal", "tags": ["nda"]})))

    resp = client.post("/organize-documents", json={"files": [{"name": "nda.pdf", "size": 300, "type": "application/pdf"}]})

    assert resp.status_code == 200
    [result] = resp.json()["results"]
    assert result["originalName"] == "nda.pdf"
    assert result["category"] == "Legal"
    assert result["folderPath"].startswith("Legal/")


def test_organize_documents_rejects_malformed_payload(app_config, make_services):
    client = _client(app_config, make_services())

    resp = client.post("/organize-documents", json={"files": [{"size": 1}]})

    assert resp.status_code == 400
    assert resp.json()["success"] is False
