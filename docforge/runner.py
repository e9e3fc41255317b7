"""
Main pipeline orchestration.

This module coordinates one autonomous processing run for a job:
1. Mark the job as running in autonomous mode
2. Consolidate detected topics into groups
3. Generate an analysis per group via the LLM provider
4. Materialize category artifacts into storage
5. Mark the job completed with its artifact count

Stages run strictly in sequence; each stage consumes the complete output
of the previous one. Per-group and per-artifact failures are recorded as
skipped items and never fail the run.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import time
from typing import Any, Callable

from .analyzers.generator import ContentGenerator
from .analyzers.organizer import DocumentOrganizer
from .config import AppConfig
from .core.grouping import consolidate
from .core.types import OrganizeRequest, PayloadError, ProcessRequest, ProcessResponse, SkippedItem
from .jobs import JobTracker
from .llm.providers.base import GenerationProvider
from .llm.providers.factory import create_provider
from .llm.tracing import set_span_output, setup_langfuse, start_span
from .output.materializer import ArtifactMaterializer
from .storage.base import BlobStorage, RecordStore
from .storage.factory import create_storage
from .utils.logging import log_event, setup_llm_logger, setup_logging


@dataclass
class Services:
    """External collaborators shared by pipeline runs."""

    provider: GenerationProvider
    storage: BlobStorage
    store: RecordStore
    logger: logging.Logger | None = None
    llm_logger: logging.Logger | None = None


def build_services(cfg: AppConfig, log_dir: Path | None = None) -> Services:
    """Construct logging, tracing, provider and storage clients from config."""
    logger = setup_logging(cfg.logging, log_dir)
    llm_logger = setup_llm_logger(cfg.logging, log_dir)
    setup_langfuse(cfg.langfuse)
    provider = create_provider(cfg.provider, cfg.generation, cfg.logging, llm_logger)
    storage, store = create_storage(cfg.storage)
    return Services(
        provider=provider,
        storage=storage,
        store=store,
        logger=logger,
        llm_logger=llm_logger,
    )


def run_pipeline(
    request: ProcessRequest,
    cfg: AppConfig,
    services: Services,
    sleep: Callable[[float], None] = time.sleep,
) -> ProcessResponse:
    """Run group -> generate -> materialize -> complete for one job.

    Args:
        request: Topics and identifiers of the job to process
        cfg: Application configuration
        services: Provider and storage clients
        sleep: Pacing function used between provider calls

    Returns:
        The response carrying category results and skipped items
    """
    logger = services.logger
    job_id = request.job_id
    skipped: list[SkippedItem] = []
    tracker = JobTracker(services.store, logger)

    with start_span(
        "docforge.run",
        kind="chain",
        input_value={"job_id": job_id, "file_name": request.file_name, "topics": len(request.topics)},
    ) as run_span:
        log_event(
            logger,
            "Pipeline start",
            event="pipeline_start",
            job_id=job_id,
            file_name=request.file_name,
            topics=len(request.topics),
        )
        tracker.mark_autonomous(job_id)

        groups = consolidate(request.topics, cfg.grouping)
        for group in groups:
            log_event(
                logger,
                "Topic group consolidated",
                event="group_consolidated",
                job_id=job_id,
                main_topic=group.main_topic,
                sub_topics=group.sub_topics,
                total_pages=group.total_pages,
            )

        generator = ContentGenerator(
            cfg,
            services.provider,
            logger=logger,
            llm_logger=services.llm_logger,
            sleep=sleep,
        )
        results = generator.generate(groups, job_id, skipped)

        materializer = ArtifactMaterializer(services.storage, services.store, logger)
        with start_span("docforge.materialize", kind="chain", input_value={"results": len(results)}):
            categories = materializer.materialize(results, job_id, skipped)

        response = ProcessResponse(
            job_id=job_id,
            results=categories,
            processed_topics=len(results),
            skipped=skipped,
        )
        tracker.complete(job_id, response.total_files)

        log_event(
            logger,
            "Pipeline complete",
            event="pipeline_complete",
            job_id=job_id,
            groups=len(groups),
            generated=len(results),
            total_files=response.total_files,
            skipped=len(skipped),
        )
        set_span_output(run_span, {"total_files": response.total_files, "skipped": len(skipped)})

    return response


def process_request(
    payload: Any,
    cfg: AppConfig,
    services: Services,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[int, dict[str, Any]]:
    """Handle an inbound trigger payload.

    Returns:
        ``(status_code, body)``; 200 with the run result, 400 for a
        malformed payload, 500 for any other failure of the run
    """
    try:
        request = ProcessRequest.from_payload(payload)
    except PayloadError as exc:
        if services.logger is not None:
            services.logger.warning("Rejected payload: %s", exc)
        return 400, {"success": False, "error": str(exc)}

    try:
        response = run_pipeline(request, cfg, services, sleep=sleep)
    except Exception as exc:  # noqa: BLE001
        if services.logger is not None:
            services.logger.exception("Autonomous processing failed for job %s", request.job_id)
        return 500, {"success": False, "error": str(exc)}

    return 200, response.to_dict()


def organize_request(payload: Any, services: Services) -> tuple[int, dict[str, Any]]:
    """Handle a file organization payload ``{"files": [{name, size, type}]}``.

    Returns:
        ``(status_code, body)``; 200 with one result per file in request
        order, 400 for a malformed payload, 500 for any other failure
    """
    try:
        request = OrganizeRequest.from_payload(payload)
    except PayloadError as exc:
        if services.logger is not None:
            services.logger.warning("Rejected organize payload: %s", exc)
        return 400, {"success": False, "error": str(exc)}

    organizer = DocumentOrganizer(
        services.provider,
        services.store,
        logger=services.logger,
        llm_logger=services.llm_logger,
    )
    try:
        with start_span("docforge.organize", kind="chain", input_value={"files": len(request.files)}):
            organized = organizer.organize(request.files)
    except Exception as exc:  # noqa: BLE001
        if services.logger is not None:
            services.logger.exception("Document organization failed")
        return 500, {"success": False, "error": str(exc)}

    return 200, {"success": True, "results": [item.to_dict() for item in organized]}
