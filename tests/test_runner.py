"""End-to-end tests for the processing pipeline and request handler."""

from docforge.core.types import ProcessRequest
from docforge.runner import process_request, run_pipeline
from docforge.storage.base import StoreUnavailableError

from conftest import FakeProvider, MemoryBlobStorage, MemoryRecordStore


TOPICS = [
    {
        "name": "Yoga Basics",
        "confidence": 92,
        "keywords": ["yoga", "breathing"],
        "pages": [1, 2],
        "contentType": "gymnastics",
        "sentiment": "positive",
        "language": "en",
    },
    {
        "name": "Yoga Poses",
        "confidence": 88,
        "keywords": ["poses", "stretch"],
        "pages": [3],
        "contentType": "gymnastics",
        "sentiment": "positive",
        "language": "en",
    },
    {
        "name": "Quarterly Revenue",
        "confidence": 80,
        "keywords": ["revenue"],
        "pages": [4],
        "contentType": "financial",
        "sentiment": "neutral",
        "language": "en",
    },
]


def _payload(topics=TOPICS):
    return {"jobId": "job-1", "fileName": "yoga.pdf", "topics": topics}


def test_run_pipeline_end_to_end(app_config, make_services, blob_storage, record_store):
    services = make_services()

    response = run_pipeline(ProcessRequest.from_payload(_payload()), app_config, services, sleep=lambda _: None)

    assert response.processed_topics == 2
    assert response.total_files == 4
    assert response.skipped == []
    job = record_store.get("processing_jobs", "job-1")
    assert job["autonomous_mode"] is True
    assert job["status"] == "completed"
    assert job["total_content"] == 4
    assert "job-1/analysis/yoga_basics_analysis.md" in blob_storage.objects


def test_generation_failure_reduces_output(app_config, make_services, record_store):
    services = make_services(provider=FakeProvider(fail_for={"Quarterly Revenue"}))

    response = run_pipeline(ProcessRequest.from_payload(_payload()), app_config, services, sleep=lambda _: None)

    assert response.processed_topics == 1
    assert response.total_files == 2
    assert [s.name for s in response.skipped] == ["Quarterly Revenue"]
    assert record_store.get("processing_jobs", "job-1")["total_content"] == 2


def test_all_groups_failing_still_completes_job(app_config, make_services, record_store):
    services = make_services(provider=FakeProvider(fail_for={"Yoga Basics", "Quarterly Revenue"}))

    status, body = process_request(_payload(), app_config, services, sleep=lambda _: None)

    assert status == 200
    assert body["success"] is True
    assert body["results"] == []
    assert body["processedTopics"] == 0
    job = record_store.get("processing_jobs", "job-1")
    assert job["status"] == "completed"
    assert job["total_content"] == 0


def test_empty_topic_list_completes_with_no_artifacts(app_config, make_services, blob_storage):
    status, body = process_request(_payload(topics=[]), app_config, make_services(), sleep=lambda _: None)

    assert status == 200
    assert body["results"] == []
    assert blob_storage.objects == {}


def test_missing_job_record_does_not_fail_the_run(app_config, make_services):
    services = make_services(store=MemoryRecordStore())

    status, body = process_request(_payload(), app_config, services, sleep=lambda _: None)

    assert status == 200
    assert body["processedTopics"] == 2


def test_process_request_response_shape(app_config, make_services):
    status, body = process_request(_payload(), app_config, make_services(), sleep=lambda _: None)

    assert status == 200
    assert set(body) == {"success", "results", "processedTopics", "jobId", "skipped"}
    assert body["jobId"] == "job-1"
    category = body["results"][0]
    assert set(category) == {"id", "title", "description", "icon", "fileCount", "totalSize", "files"}
    assert set(category["files"][0]) == {"name", "type", "size", "downloadUrl"}


def test_process_request_rejects_malformed_payload(app_config, make_services):
    status, body = process_request({"topics": []}, app_config, make_services())

    assert status == 400
    assert body["success"] is False
    assert "jobId" in body["error"]


def test_process_request_reports_unexpected_failure(app_config, make_services):
    class BrokenStorage(MemoryBlobStorage):
        def upload(self, path, data, content_type, overwrite=True):
            raise RuntimeError("disk on fire")

    services = make_services(storage=BrokenStorage())

    status, body = process_request(_payload(), app_config, services, sleep=lambda _: None)

    assert status == 500
    assert body == {"success": False, "error": "disk on fire"}


class UnreachableAtCompletionStore(MemoryRecordStore):
    def update(self, table, record_id, fields):
        if fields.get("status") == "completed":
            raise StoreUnavailableError("connection refused")
        return super().update(table, record_id, fields)


def test_unreachable_store_at_completion_fails_the_run(app_config, make_services, blob_storage):
    store = UnreachableAtCompletionStore()
    store.insert("processing_jobs", {"id": "job-1", "status": "processing", "autonomous_mode": False})

    status, body = process_request(_payload(), app_config, make_services(store=store), sleep=lambda _: None)

    assert status == 500
    assert body["success"] is False
    job = store.get("processing_jobs", "job-1")
    assert job["status"] == "processing"
    assert job["autonomous_mode"] is True
    assert len(blob_storage.objects) == 4
