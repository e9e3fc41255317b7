"""Content generator issuing one analysis request per topic group."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context
import logging
import time
from typing import Callable

from ..config import AppConfig
from ..core.types import GenerationResult, SkippedItem, TopicGroup
from ..llm.providers.base import GenerationProvider, ProviderError
from ..llm.tracing import start_span
from ..utils.logging import log_event, log_warning


class ContentGenerator:
    """Generate analysis prose for consolidated topic groups.

    Calls are paced by ``generation.pacing_seconds`` after every request,
    successful or not. A failed group is dropped and recorded as a
    SkippedItem; it is never retried and never aborts the run.
    """

    def __init__(
        self,
        cfg: AppConfig,
        provider: GenerationProvider,
        logger: logging.Logger | None = None,
        llm_logger: logging.Logger | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.cfg = cfg
        self.provider = provider
        self.logger = logger
        self.llm_logger = llm_logger
        self._sleep = sleep

    def generate(
        self,
        groups: list[TopicGroup],
        job_id: str,
        skipped: list[SkippedItem] | None = None,
    ) -> list[GenerationResult]:
        """Generate content for every group, keeping input order.

        Args:
            groups: Groups produced by the Similarity Grouper
            job_id: Job the run belongs to, used for logging
            skipped: Optional list that receives one SkippedItem per dropped group

        Returns:
            Results for the groups that generated successfully, in the
            relative order of ``groups``
        """
        concurrency = max(1, int(self.cfg.generation.concurrency))
        with start_span(
            "docforge.generate",
            kind="chain",
            input_value={"job_id": job_id, "groups": len(groups)},
        ):
            if concurrency == 1:
                outcomes = [self._generate_one(group, job_id) for group in groups]
            else:
                log_event(
                    self.logger,
                    "Generation concurrency enabled",
                    event="generation_concurrency_enabled",
                    workers=concurrency,
                )
                with ThreadPoolExecutor(max_workers=concurrency) as executor:
                    futures = [
                        executor.submit(copy_context().run, self._generate_one, group, job_id)
                        for group in groups
                    ]
                    # Futures are read in submission order so results keep group order.
                    outcomes = [future.result() for future in futures]

        results: list[GenerationResult] = []
        for outcome in outcomes:
            if isinstance(outcome, GenerationResult):
                results.append(outcome)
            elif skipped is not None:
                skipped.append(outcome)

        log_event(
            self.logger,
            "Generation complete",
            event="generation_complete",
            job_id=job_id,
            groups=len(groups),
            generated=len(results),
        )
        return results

    def _generate_one(self, group: TopicGroup, job_id: str) -> GenerationResult | SkippedItem:
        try:
            content = self.provider.generate_analysis(group, logger=self.llm_logger)
        except ProviderError as exc:
            log_warning(
                self.logger,
                "Generation failed",
                event="generation_failed",
                job_id=job_id,
                topic=group.main_topic,
                status=exc.status,
                error=str(exc),
            )
            return SkippedItem(stage="generation", name=group.main_topic, reason=str(exc))
        finally:
            self._sleep(self.cfg.generation.pacing_seconds)

        log_event(
            self.logger,
            "Generated content",
            event="generation_ok",
            job_id=job_id,
            topic=group.main_topic,
            chars=len(content),
        )
        return GenerationResult(
            topic=group.main_topic,
            content=content,
            type=group.content_type,
            sub_topics=list(group.sub_topics),
            pages=group.total_pages,
        )
