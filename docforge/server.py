"""HTTP surface for the autonomous processing pipeline."""

from __future__ import annotations

from typing import Any

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import JSONResponse

from . import __version__
from .config import AppConfig
from .jobs import list_generated_content
from .runner import Services, organize_request, process_request
from .storage.base import StorageError


def create_app(cfg: AppConfig, services: Services) -> FastAPI:
    app = FastAPI(title="docforge", version=__version__)

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {"ok": True, "version": __version__}

    # Sync handler: runs in the threadpool, one run per request.
    @app.post("/autonomous-process")
    def autonomous_process(payload: dict[str, Any] = Body(...)) -> JSONResponse:
        status_code, body = process_request(payload, cfg, services)
        return JSONResponse(status_code=status_code, content=body)

    @app.post("/organize-documents")
    def organize_documents(payload: dict[str, Any] = Body(...)) -> JSONResponse:
        status_code, body = organize_request(payload, services)
        return JSONResponse(status_code=status_code, content=body)

    @app.get("/jobs/{job_id}/content")
    def job_content(job_id: str) -> dict[str, Any]:
        try:
            results = list_generated_content(job_id, services.store, services.storage)
        except StorageError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"jobId": job_id, "results": [r.to_dict() for r in results]}

    return app
