"""Topic detection for raw document text."""

from __future__ import annotations

import logging
from typing import Any

from ..core.types import ContentType, Sentiment, Topic
from ..llm.providers.base import GenerationProvider, ProviderError
from ..utils.logging import log_event, log_warning


FALLBACK_TOPIC = Topic(
    name="Document Analysis",
    confidence=75,
    keywords=("document", "content", "analysis"),
    pages=(1,),
    content_type=ContentType.OTHER,
    sentiment=Sentiment.NEUTRAL,
    language="en",
)


class TopicDetector:
    """Ask the provider for the topics of a document, with a safe fallback."""

    def __init__(
        self,
        provider: GenerationProvider,
        logger: logging.Logger | None = None,
        llm_logger: logging.Logger | None = None,
    ) -> None:
        self.provider = provider
        self.logger = logger
        self.llm_logger = llm_logger

    def detect(self, text: str) -> list[Topic]:
        try:
            payload = self.provider.detect_topics(text, logger=self.llm_logger)
        except ProviderError as exc:
            log_warning(
                self.logger,
                "Topic detection failed, using fallback",
                event="topic_detection_fallback",
                status=exc.status,
                error=str(exc),
            )
            return [FALLBACK_TOPIC]

        topics = normalize_topics(payload.get("topics"))
        if not topics:
            log_warning(
                self.logger,
                "Topic detection returned no topics, using fallback",
                event="topic_detection_empty",
            )
            return [FALLBACK_TOPIC]

        log_event(self.logger, "Topics detected", event="topics_detected", count=len(topics))
        return topics


def normalize_topics(raw: Any) -> list[Topic]:
    """Coerce loosely typed LLM output into Topic objects.

    Items without a name are dropped. Unknown content types and sentiments
    fall back to ``other`` and ``neutral``.
    """
    if not isinstance(raw, list):
        return []

    topics: list[Topic] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        name = str(item.get("name") or "").strip()
        if not name:
            continue
        keywords = item.get("keywords")
        if not isinstance(keywords, list):
            keywords = []
        pages = item.get("pages")
        if not isinstance(pages, list):
            pages = []
        topics.append(
            Topic(
                name=name,
                confidence=_clamp_confidence(item.get("confidence")),
                keywords=tuple(str(k).strip() for k in keywords if str(k).strip()),
                pages=tuple(p for p in (_as_int(v) for v in pages) if p is not None and p > 0),
                content_type=_enum_or(ContentType, item.get("contentType"), ContentType.OTHER),
                sentiment=_enum_or(Sentiment, item.get("sentiment"), Sentiment.NEUTRAL),
                language=str(item.get("language") or "en"),
            )
        )
    return topics


def _clamp_confidence(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return min(100.0, max(0.0, number))


def _as_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _enum_or(enum_cls, value: Any, default):
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return default
