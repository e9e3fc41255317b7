"""Supabase Storage and PostgREST clients over httpx."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from .base import BlobStorage, RecordStore, StorageError, StoreUnavailableError


def _headers(key: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {key}", "apikey": key}


class SupabaseBlobStorage(BlobStorage):
    """Upload artifacts to a Supabase Storage bucket."""

    def __init__(
        self,
        base_url: str,
        key: str,
        bucket: str,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.key = key
        self.bucket = bucket
        self._client = client or httpx.Client(timeout=timeout)

    def upload(self, path: str, data: bytes, content_type: str, overwrite: bool = True) -> None:
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{quote(path)}"
        headers = _headers(self.key)
        headers["Content-Type"] = content_type
        headers["x-upsert"] = "true" if overwrite else "false"
        try:
            resp = self._client.post(url, headers=headers, content=data)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise StorageError(f"Upload failed for {path}: {exc}") from exc

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{quote(path)}"


class SupabaseRecordStore(RecordStore):
    """Read and write table rows through the PostgREST API."""

    def __init__(
        self,
        base_url: str,
        key: str,
        client: httpx.Client | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.key = key
        self._client = client or httpx.Client(timeout=timeout)

    def _request(self, method: str, table: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}/rest/v1/{table}"
        headers = _headers(self.key)
        headers["Prefer"] = "return=representation"
        try:
            resp = self._client.request(method, url, headers=headers, **kwargs)
            resp.raise_for_status()
            return resp.json() if resp.content else []
        except httpx.TransportError as exc:
            raise StoreUnavailableError(f"{method} {table} could not reach {self.base_url}: {exc}") from exc
        except httpx.HTTPError as exc:
            raise StorageError(f"{method} {table} failed: {exc}") from exc
        except ValueError as exc:
            raise StorageError(f"{method} {table} returned invalid JSON") from exc

    def insert(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        rows = self._request("POST", table, json=record)
        if isinstance(rows, list) and rows:
            return rows[0]
        return dict(record)

    def update(self, table: str, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        rows = self._request("PATCH", table, params={"id": f"eq.{record_id}"}, json=fields)
        if not isinstance(rows, list) or not rows:
            raise StorageError(f"No row {record_id} in {table}")
        return rows[0]

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        params = {"select": "*"}
        for key, value in (filters or {}).items():
            params[key] = f"eq.{value}"
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        rows = self._request("GET", table, params=params)
        return rows if isinstance(rows, list) else []
