"""Turn generation results into stored artifacts grouped by output category."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging

from ..core.naming import size_kb, size_label, storage_path, unique_file_name
from ..core.types import (
    ArtifactRecord,
    CategoryResult,
    GeneratedFile,
    GenerationResult,
    OutputCategory,
    SkippedItem,
)
from ..storage.base import CONTENT_TABLE, BlobStorage, RecordStore, StorageError
from ..utils.logging import log_event, log_warning
from .renderer import render_category


MARKDOWN_CONTENT_TYPE = "text/markdown"
MARKDOWN_FILE_TYPE = "md"


@dataclass(frozen=True)
class CategorySpec:
    """Presentation metadata for one output category."""

    category: OutputCategory
    title: str
    description: str
    icon: str
    artifact_description: str


CATEGORIES: tuple[CategorySpec, ...] = (
    CategorySpec(
        category=OutputCategory.ANALYSIS,
        title="Comprehensive Analysis",
        description="In-depth analysis documents for each consolidated topic",
        icon="FileText",
        artifact_description="Comprehensive analysis of {topic}",
    ),
    CategorySpec(
        category=OutputCategory.EXECUTIVE_SUMMARY,
        title="Executive Summaries",
        description="Condensed overviews with key takeaways and recommendations",
        icon="Briefcase",
        artifact_description="Executive summary of {topic}",
    ),
)


class ArtifactMaterializer:
    """Render, upload and record one artifact per (category, result) pair.

    An artifact whose upload or metadata write fails is skipped without
    retry. A blob whose metadata write failed stays in storage. File names
    are unique within a job category, so every counted artifact has its own
    blob.
    """

    def __init__(
        self,
        storage: BlobStorage,
        store: RecordStore,
        logger: logging.Logger | None = None,
        categories: tuple[CategorySpec, ...] = CATEGORIES,
    ) -> None:
        self.storage = storage
        self.store = store
        self.logger = logger
        self.categories = categories

    def materialize(
        self,
        results: list[GenerationResult],
        job_id: str,
        skipped: list[SkippedItem] | None = None,
        generated_at: datetime | None = None,
    ) -> list[CategoryResult]:
        """Store artifacts for every result and aggregate them per category.

        Args:
            results: Output of the Content Generator
            job_id: Job that owns the artifacts
            skipped: Optional list that receives one SkippedItem per dropped artifact
            generated_at: Timestamp embedded in rendered documents, now when omitted

        Returns:
            One CategoryResult per category with at least one stored artifact
        """
        generated_at = generated_at or datetime.now()
        category_results: list[CategoryResult] = []

        for spec in self.categories:
            category_result = CategoryResult(
                id=spec.category.value,
                title=spec.title,
                description=spec.description,
                icon=spec.icon,
            )
            taken: set[str] = set()
            for result in results:
                file_name = unique_file_name(result.topic, spec.category, taken, MARKDOWN_FILE_TYPE)
                stored = self._materialize_one(spec, result, file_name, job_id, generated_at, skipped)
                if stored is None:
                    continue
                generated_file, kb = stored
                category_result.files.append(generated_file)
                category_result.total_size_kb += kb

            if category_result.files:
                category_results.append(category_result)
            log_event(
                self.logger,
                "Category materialized",
                event="category_materialized",
                job_id=job_id,
                category=spec.category.value,
                file_count=category_result.file_count,
                total_size=category_result.total_size,
            )

        return category_results

    def _materialize_one(
        self,
        spec: CategorySpec,
        result: GenerationResult,
        file_name: str,
        job_id: str,
        generated_at: datetime,
        skipped: list[SkippedItem] | None,
    ) -> tuple[GeneratedFile, int] | None:
        body = render_category(spec.category, result, generated_at).encode("utf-8")
        path = storage_path(job_id, spec.category, file_name)

        try:
            self.storage.upload(path, body, MARKDOWN_CONTENT_TYPE, overwrite=True)
        except StorageError as exc:
            self._skip(skipped, spec, result, job_id, path, f"upload_failed: {exc}")
            return None

        kb = size_kb(len(body))
        record = ArtifactRecord(
            job_id=job_id,
            category=spec.category,
            title=result.topic,
            description=spec.artifact_description.format(topic=result.topic),
            file_name=file_name,
            file_path=path,
            file_type=MARKDOWN_FILE_TYPE,
            file_size=size_label(kb),
        )
        try:
            self.store.insert(CONTENT_TABLE, record.to_row())
        except StorageError as exc:
            self._skip(skipped, spec, result, job_id, path, f"metadata_failed: {exc}")
            return None

        generated_file = GeneratedFile(
            name=file_name,
            type=MARKDOWN_FILE_TYPE,
            size=record.file_size,
            download_url=self.storage.public_url(path),
        )
        return generated_file, kb

    def _skip(
        self,
        skipped: list[SkippedItem] | None,
        spec: CategorySpec,
        result: GenerationResult,
        job_id: str,
        path: str,
        reason: str,
    ) -> None:
        log_warning(
            self.logger,
            "Artifact skipped",
            event="artifact_skipped",
            job_id=job_id,
            category=spec.category.value,
            topic=result.topic,
            path=path,
            reason=reason,
        )
        if skipped is not None:
            skipped.append(
                SkippedItem(
                    stage="materialization",
                    name=result.topic,
                    reason=reason,
                    category=spec.category.value,
                )
            )
