"""Filesystem-backed blob storage and JSON record store."""

from __future__ import annotations

from datetime import datetime, timezone
import json
from pathlib import Path
import threading
from typing import Any
import uuid

from .base import BlobStorage, RecordStore, StorageError


class LocalBlobStorage(BlobStorage):
    """Store blobs under ``<root>/<bucket>/<path>``."""

    def __init__(self, root: Path, bucket: str, public_base_url: str | None = None) -> None:
        self.root = Path(root) / bucket
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None

    def _resolve(self, path: str) -> Path:
        parts = [p for p in path.split("/") if p]
        if not parts or any(p in (".", "..") for p in parts):
            raise StorageError(f"Invalid storage path: {path!r}")
        return self.root.joinpath(*parts)

    def upload(self, path: str, data: bytes, content_type: str, overwrite: bool = True) -> None:
        target = self._resolve(path)
        if target.exists() and not overwrite:
            raise StorageError(f"Object already exists: {path}")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Upload failed for {path}: {exc}") from exc

    def public_url(self, path: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{self.bucket}/{path}"
        return self._resolve(path).resolve().as_uri()


class LocalRecordStore(RecordStore):
    """Keep all tables in a single JSON document on disk.

    Writes are serialized with a lock so concurrent jobs in one process
    cannot interleave partial updates.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, list[dict[str, Any]]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read record store {self.path}: {exc}") from exc
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, list[dict[str, Any]]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(self.path)
        except OSError as exc:
            raise StorageError(f"Cannot write record store {self.path}: {exc}") from exc

    def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        row = dict(record)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", _now())
        with self._lock:
            data = self._load()
            data.setdefault(table, []).append(row)
            self._save(data)
        return row

    def update(self, table: str, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            data = self._load()
            for row in data.get(table, []):
                if str(row.get("id")) == str(record_id):
                    row.update(fields)
                    self._save(data)
                    return dict(row)
        raise StorageError(f"No row {record_id} in {table}")

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        with self._lock:
            rows = self._load().get(table, [])
        filters = filters or {}
        matched = [
            dict(row)
            for row in rows
            if all(row.get(key) == value for key, value in filters.items())
        ]
        if order_by:
            matched.sort(key=lambda row: str(row.get(order_by) or ""), reverse=descending)
        return matched


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
