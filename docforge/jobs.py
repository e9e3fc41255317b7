"""Job record updates and generated-content browsing."""

from __future__ import annotations

from datetime import datetime, timezone
import logging

from .core.naming import parse_size_label
from .core.types import CategoryResult, GeneratedFile, Job, JobStatus
from .output.materializer import CATEGORIES
from .storage.base import (
    CONTENT_TABLE,
    JOBS_TABLE,
    BlobStorage,
    RecordStore,
    StorageError,
    StoreUnavailableError,
)
from .utils.logging import log_event, log_warning


class JobTracker:
    """Single writer of a job's autonomous flag, status and content count.

    Writes the store rejects (missing row, HTTP error status) are logged and
    reported through the return value. ``complete`` re-raises
    ``StoreUnavailableError``: a store that cannot be reached at completion
    time fails the whole run and the job keeps its last status.
    ``mark_autonomous`` never raises.
    """

    def __init__(self, store: RecordStore, logger: logging.Logger | None = None) -> None:
        self.store = store
        self.logger = logger

    def mark_autonomous(self, job_id: str) -> bool:
        return self._update(
            job_id,
            {"autonomous_mode": True, "updated_at": _now()},
            event="job_autonomous",
        )

    def complete(self, job_id: str, total_files: int) -> bool:
        return self._update(
            job_id,
            {
                "status": JobStatus.COMPLETED.value,
                "total_content": total_files,
                "updated_at": _now(),
            },
            event="job_completed",
            unreachable_is_fatal=True,
        )

    def get(self, job_id: str) -> Job | None:
        row = self.store.get(JOBS_TABLE, job_id)
        return Job.from_row(row) if row else None

    def _update(self, job_id: str, fields: dict, event: str, unreachable_is_fatal: bool = False) -> bool:
        try:
            self.store.update(JOBS_TABLE, job_id, fields)
        except StorageError as exc:
            log_warning(
                self.logger,
                "Job update failed",
                event=f"{event}_failed",
                job_id=job_id,
                error=str(exc),
            )
            if unreachable_is_fatal and isinstance(exc, StoreUnavailableError):
                raise
            return False
        log_event(self.logger, "Job updated", event=event, job_id=job_id, **fields)
        return True


def list_generated_content(
    job_id: str,
    store: RecordStore,
    storage: BlobStorage,
) -> list[CategoryResult]:
    """Rebuild category results for a job from its stored metadata rows.

    Rows are grouped by category in the order categories are first seen
    (newest rows first). Known categories use their display metadata;
    unknown ones fall back to the row's own title and description.
    """
    rows = store.select(CONTENT_TABLE, {"job_id": job_id}, order_by="created_at", descending=True)
    specs = {spec.category.value: spec for spec in CATEGORIES}

    grouped: dict[str, CategoryResult] = {}
    for row in rows:
        category_id = str(row.get("category") or "other")
        category_result = grouped.get(category_id)
        if category_result is None:
            spec = specs.get(category_id)
            category_result = CategoryResult(
                id=category_id,
                title=spec.title if spec else str(row.get("title") or category_id),
                description=spec.description if spec else str(row.get("description") or ""),
                icon=spec.icon if spec else "File",
            )
            grouped[category_id] = category_result

        file_size = str(row.get("file_size") or "0 KB")
        category_result.files.append(
            GeneratedFile(
                name=str(row.get("file_name") or ""),
                type=str(row.get("file_type") or "file"),
                size=file_size,
                download_url=storage.public_url(str(row.get("file_path") or "")),
            )
        )
        category_result.total_size_kb += parse_size_label(file_size)

    return list(grouped.values())


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
