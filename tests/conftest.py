"""Shared fakes for pipeline tests."""

from __future__ import annotations

import uuid

import pytest

from docforge.config import AppConfig
from docforge.llm.providers.base import GenerationProvider, ProviderError
from docforge.runner import Services
from docforge.storage.base import BlobStorage, RecordStore, StorageError


class FakeProvider(GenerationProvider):
    """Returns canned analyses and fails for the configured topics."""

    def __init__(self, fail_for=(), content=None, topics_payload=None, file_payload=None):
        self.fail_for = set(fail_for)
        self.content = content
        self.topics_payload = topics_payload
        self.file_payload = file_payload
        self.calls: list[str] = []

    def generate_analysis(self, group, logger=None):
        self.calls.append(group.main_topic)
        if group.main_topic in self.fail_for:
            raise ProviderError("provider_error", f"HTTP 500 for {group.main_topic}")
        if self.content is not None:
            return self.content
        return (
            f"{group.main_topic} is covered in depth.\n\n"
            "Key points:\n"
            "1. First insight\n"
            "2. Second insight\n\n"
            "We recommend practicing daily."
        )

    def detect_topics(self, text, logger=None):
        if self.topics_payload is None:
            raise ProviderError("timeout", "deadline exceeded")
        return self.topics_payload

    def categorize_file(self, file, logger=None):
        self.calls.append(file.name)
        if file.name in self.fail_for or self.file_payload is None:
            raise ProviderError("provider_error", f"HTTP 500 for {file.name}")
        return self.file_payload


class MemoryBlobStorage(BlobStorage):
    def __init__(self, fail_paths=()):
        self.objects: dict[str, bytes] = {}
        self.content_types: dict[str, str] = {}
        self.fail_paths = set(fail_paths)

    def upload(self, path, data, content_type, overwrite=True):
        if path in self.fail_paths:
            raise StorageError(f"bucket rejected {path}")
        if path in self.objects and not overwrite:
            raise StorageError(f"exists: {path}")
        self.objects[path] = data
        self.content_types[path] = content_type

    def public_url(self, path):
        return f"https://files.example.com/{path}"


class MemoryRecordStore(RecordStore):
    def __init__(self, fail_tables=(), fail_file_names=()):
        self.tables: dict[str, list[dict]] = {}
        self.fail_tables = set(fail_tables)
        self.fail_file_names = set(fail_file_names)
        self._clock = 0

    def insert(self, table, record):
        if table in self.fail_tables or record.get("file_name") in self.fail_file_names:
            raise StorageError(f"insert into {table} failed")
        row = dict(record)
        row.setdefault("id", str(uuid.uuid4()))
        self._clock += 1
        row.setdefault("created_at", f"2026-01-01T00:00:{self._clock:02d}")
        self.tables.setdefault(table, []).append(row)
        return row

    def update(self, table, record_id, fields):
        if table in self.fail_tables:
            raise StorageError(f"update of {table} failed")
        for row in self.tables.get(table, []):
            if row["id"] == record_id:
                row.update(fields)
                return dict(row)
        raise StorageError(f"No row {record_id} in {table}")

    def select(self, table, filters=None, order_by=None, descending=False):
        rows = [
            dict(row)
            for row in self.tables.get(table, [])
            if all(row.get(k) == v for k, v in (filters or {}).items())
        ]
        if order_by:
            rows.sort(key=lambda row: str(row.get(order_by) or ""), reverse=descending)
        return rows


@pytest.fixture
def app_config() -> AppConfig:
    cfg = AppConfig()
    cfg.generation.pacing_seconds = 0
    cfg.logging.console = False
    cfg.logging.file = False
    return cfg


@pytest.fixture
def blob_storage() -> MemoryBlobStorage:
    return MemoryBlobStorage()


@pytest.fixture
def record_store() -> MemoryRecordStore:
    store = MemoryRecordStore()
    store.insert(
        "processing_jobs",
        {
            "id": "job-1",
            "file_name": "yoga.pdf",
            "file_size": 1024,
            "status": "processing",
            "total_content": 0,
            "autonomous_mode": False,
        },
    )
    return store


@pytest.fixture
def make_services(blob_storage, record_store):
    def _make(provider=None, storage=None, store=None):
        return Services(
            provider=provider or FakeProvider(),
            storage=storage or blob_storage,
            store=store or record_store,
        )

    return _make
