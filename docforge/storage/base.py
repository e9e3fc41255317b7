"""Storage capabilities used by the pipeline.

Blob storage holds artifact bytes; the record store holds the
``processing_jobs``, ``generated_content`` and ``documents`` rows.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


JOBS_TABLE = "processing_jobs"
CONTENT_TABLE = "generated_content"
DOCUMENTS_TABLE = "documents"


class StorageError(Exception):
    """A blob or record operation that did not succeed."""


class StoreUnavailableError(StorageError):
    """The backend could not be reached at all (connect, DNS or timeout failure)."""


class BlobStorage(ABC):
    @abstractmethod
    def upload(self, path: str, data: bytes, content_type: str, overwrite: bool = True) -> None:
        """Store ``data`` at ``path``.

        Raises:
            StorageError: If the upload fails or ``path`` exists and
                ``overwrite`` is false
        """
        raise NotImplementedError

    @abstractmethod
    def public_url(self, path: str) -> str:
        """Return a durable download URL for ``path``."""
        raise NotImplementedError


class RecordStore(ABC):
    @abstractmethod
    def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it with generated ``id``/``created_at``."""
        raise NotImplementedError

    @abstractmethod
    def update(self, table: str, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Update the row with ``id == record_id`` and return it.

        Raises:
            StorageError: If the row does not exist or the write fails
        """
        raise NotImplementedError

    @abstractmethod
    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """Return rows matching all equality ``filters``."""
        raise NotImplementedError

    def get(self, table: str, record_id: str) -> dict[str, Any] | None:
        rows = self.select(table, {"id": record_id})
        return rows[0] if rows else None
