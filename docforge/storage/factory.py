"""Build storage clients from configuration."""

from __future__ import annotations

from pathlib import Path

import httpx

from ..config import StorageConfig, get_supabase_key, get_supabase_url
from .base import BlobStorage, RecordStore
from .local import LocalBlobStorage, LocalRecordStore
from .supabase import SupabaseBlobStorage, SupabaseRecordStore


def create_storage(cfg: StorageConfig) -> tuple[BlobStorage, RecordStore]:
    """Return the blob storage and record store selected by ``cfg.backend``."""
    backend = cfg.backend.lower().strip()
    if backend == "local":
        root = Path(cfg.local_root)
        return (
            LocalBlobStorage(root, cfg.bucket, cfg.public_base_url),
            LocalRecordStore(root / "records.json"),
        )
    if backend == "supabase":
        url = get_supabase_url(cfg)
        key = get_supabase_key(cfg)
        if not url or not key:
            raise ValueError("Supabase backend requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY")
        client = httpx.Client(timeout=cfg.timeout_seconds)
        return (
            SupabaseBlobStorage(url, key, cfg.bucket, client=client),
            SupabaseRecordStore(url, key, client=client),
        )
    raise ValueError(f"Unsupported storage backend: {cfg.backend}. Supported: local, supabase")
