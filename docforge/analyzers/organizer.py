"""File categorization and duplicate detection for incoming uploads."""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Callable

from ..core.types import DuplicateInfo, FileDescriptor, OrganizedFile
from ..llm.providers.base import GenerationProvider, ProviderError
from ..storage.base import DOCUMENTS_TABLE, BlobStorage, RecordStore, StorageError
from ..utils.logging import log_event, log_warning


FALLBACK_CATEGORY = "Documents"
FALLBACK_TAGS = ("unanalyzed",)
MAX_TAGS = 5


class DocumentOrganizer:
    """Suggest a category, tags and folder for each file and flag duplicates.

    A file is a duplicate when a ``documents`` row already carries its
    fingerprint. Categorization falls back to ``Documents`` with the tag
    ``unanalyzed`` when the provider call fails or returns no category.
    A duplicate lookup the store rejects counts as "no duplicate".
    """

    def __init__(
        self,
        provider: GenerationProvider,
        store: RecordStore,
        logger: logging.Logger | None = None,
        llm_logger: logging.Logger | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.provider = provider
        self.store = store
        self.logger = logger
        self.llm_logger = llm_logger
        self.clock = clock

    def organize(self, files: list[FileDescriptor]) -> list[OrganizedFile]:
        """Organize ``files`` in order, one provider call per file."""
        organized = [self.organize_one(file) for file in files]
        log_event(
            self.logger,
            "Files organized",
            event="files_organized",
            count=len(organized),
            duplicates=sum(1 for item in organized if item.is_duplicate),
        )
        return organized

    def organize_one(self, file: FileDescriptor) -> OrganizedFile:
        fingerprint = file.fingerprint
        category, tags = self._categorize(file)
        return OrganizedFile(
            original_name=file.name,
            hash=fingerprint,
            category=category,
            tags=tags,
            folder_path=folder_path(category, self.clock()),
            duplicate=self._find_duplicate(fingerprint),
        )

    def record(
        self,
        organized: OrganizedFile,
        file: FileDescriptor,
        data: bytes,
        storage: BlobStorage,
    ) -> dict[str, Any]:
        """Upload ``data`` under the suggested folder and write its ``documents`` row.

        Raises:
            StorageError: If the upload or the metadata write fails
        """
        stamp = self.clock().strftime("%Y-%m-%dT%H-%M-%S")
        stored_name = f"{stamp}-{file.name}"
        path = f"{organized.folder_path}/{stored_name}"
        storage.upload(path, data, file.type or "application/octet-stream", overwrite=False)
        row = self.store.insert(
            DOCUMENTS_TABLE,
            {
                "file_name": stored_name,
                "original_file_name": file.name,
                "file_path": storage.public_url(path),
                "file_size": file.size,
                "file_type": file.type,
                "file_hash": organized.hash,
                "ai_category": organized.category,
                "ai_tags": list(organized.tags),
                "folder_path": organized.folder_path,
            },
        )
        log_event(self.logger, "Document recorded", event="document_recorded", path=path, file_hash=organized.hash)
        return row

    def _categorize(self, file: FileDescriptor) -> tuple[str, list[str]]:
        try:
            payload = self.provider.categorize_file(file, logger=self.llm_logger)
        except ProviderError as exc:
            log_warning(
                self.logger,
                "File categorization failed, using fallback",
                event="file_categorization_fallback",
                file_name=file.name,
                status=exc.status,
                error=str(exc),
            )
            return FALLBACK_CATEGORY, list(FALLBACK_TAGS)

        category = str(payload.get("category") or "").strip()
        if not category:
            log_warning(
                self.logger,
                "File categorization returned no category, using fallback",
                event="file_categorization_empty",
                file_name=file.name,
            )
            return FALLBACK_CATEGORY, list(FALLBACK_TAGS)
        return category, normalize_tags(payload.get("tags"))

    def _find_duplicate(self, fingerprint: str) -> DuplicateInfo | None:
        try:
            rows = self.store.select(DOCUMENTS_TABLE, {"file_hash": fingerprint})
        except StorageError as exc:
            log_warning(
                self.logger,
                "Duplicate lookup failed",
                event="duplicate_lookup_failed",
                file_hash=fingerprint,
                error=str(exc),
            )
            return None
        if not rows:
            return None
        row = rows[0]
        return DuplicateInfo(
            id=str(row.get("id") or ""),
            name=str(row.get("file_name") or ""),
            path=str(row.get("file_path") or ""),
        )


def normalize_tags(raw: Any) -> list[str]:
    """Keep at most five distinct non-empty tags, in the order given."""
    if not isinstance(raw, list):
        return []
    tags: list[str] = []
    for item in raw:
        tag = str(item).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags[:MAX_TAGS]


def folder_path(category: str, when: datetime) -> str:
    """``<category>/<year>/<month>``, month zero-padded."""
    safe = category.replace("/", "-").strip() or FALLBACK_CATEGORY
    return f"{safe}/{when.year}/{when.month:02d}"
