"""Prompt loading and rendering helpers for LLM providers."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from ..config import GenerationConfig
from ..core.types import FileDescriptor, TopicGroup


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, /, **values: str) -> str:
    template = _load_template(name)
    return template.format(**values)


def build_generation_system_prompt() -> str:
    return _load_template("generation_system")


def build_generation_prompt(group: TopicGroup, cfg: GenerationConfig) -> str:
    return _render_template(
        "generation_user",
        min_words=str(cfg.min_words),
        main_topic=group.main_topic,
        sub_topics=", ".join(group.sub_topics) or "(none)",
        content_type=group.content_type.value,
        keywords=", ".join(group.all_keywords) or "(none)",
        sentiment=group.sentiment.value,
        total_pages=str(group.total_pages),
    )


def build_topic_detection_prompt(text: str, cfg: GenerationConfig) -> str:
    return _render_template("topic_detection", content=text[: cfg.detection_max_chars])


def build_file_organization_prompt(file: FileDescriptor) -> str:
    return _render_template(
        "file_organization",
        name=file.name,
        type=file.type or "unknown",
        size=str(file.size),
    )
