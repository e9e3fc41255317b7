"""Blob storage and record store backends."""

from .base import CONTENT_TABLE, JOBS_TABLE, BlobStorage, RecordStore, StorageError
from .factory import create_storage
from .local import LocalBlobStorage, LocalRecordStore
from .supabase import SupabaseBlobStorage, SupabaseRecordStore

__all__ = [
    "CONTENT_TABLE",
    "JOBS_TABLE",
    "BlobStorage",
    "RecordStore",
    "StorageError",
    "create_storage",
    "LocalBlobStorage",
    "LocalRecordStore",
    "SupabaseBlobStorage",
    "SupabaseRecordStore",
]
