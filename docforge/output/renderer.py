"""Markdown rendering for the two output categories."""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from pathlib import Path
import re
from typing import Callable

from jinja2 import Environment, FileSystemLoader

from ..core.types import GenerationResult, OutputCategory


GENERATION_METHOD = "AI-powered autonomous analysis"

OVERVIEW_BLOCKS = 3
MAX_TAKEAWAYS = 8
MAX_RECOMMENDATIONS = 5

FALLBACK_RECOMMENDATIONS = [
    "Review the full analysis to identify the points most relevant to your goals.",
    "Share the key findings with the stakeholders responsible for this area.",
    "Revisit the source document sections listed in the page coverage for detail.",
]

_BLOCK_SPLIT_RE = re.compile(r"\n\s*\n")
_LIST_MARKER_RE = re.compile(r"^(?:\d+[.)]\s*|[•*\-]\s+)")
_RECOMMEND_RE = re.compile(r"\b(recommend|suggest|should)", re.IGNORECASE)


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def extract_overview(content: str, limit: int = OVERVIEW_BLOCKS) -> list[str]:
    """Return the first paragraph-like blocks of ``content``."""
    blocks = [b.strip() for b in _BLOCK_SPLIT_RE.split(content.strip())]
    return [b for b in blocks if b][:limit]


def extract_takeaways(content: str, limit: int = MAX_TAKEAWAYS) -> list[str]:
    """Return list-item lines (numbered, bullet, dash or asterisk) without markers."""
    items: list[str] = []
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or not (stripped[0].isdigit() or stripped[0] in "•-*"):
            continue
        text = _strip_marker(stripped)
        if not text:
            continue
        items.append(text)
        if len(items) >= limit:
            break
    return items


def extract_recommendations(content: str, limit: int = MAX_RECOMMENDATIONS) -> list[str]:
    """Return lines that recommend or suggest something.

    Falls back to generic recommendations when none are found.
    """
    items: list[str] = []
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if not _RECOMMEND_RE.search(stripped):
            continue
        text = _strip_marker(stripped)
        if not text:
            continue
        items.append(text)
        if len(items) >= limit:
            break
    return items or list(FALLBACK_RECOMMENDATIONS)


def render_analysis(result: GenerationResult, generated_at: datetime | None = None) -> str:
    template = _environment().get_template("analysis.md.j2")
    return template.render(
        result=result,
        content_type=_content_type_label(result),
        generated_on=_date_label(generated_at),
        method=GENERATION_METHOD,
    )


def render_executive_summary(result: GenerationResult, generated_at: datetime | None = None) -> str:
    template = _environment().get_template("executive_summary.md.j2")
    return template.render(
        result=result,
        content_type=_content_type_label(result),
        overview=extract_overview(result.content),
        takeaways=extract_takeaways(result.content),
        recommendations=extract_recommendations(result.content),
        generated_on=_date_label(generated_at),
        method=GENERATION_METHOD,
    )


RENDERERS: dict[OutputCategory, Callable[[GenerationResult, datetime | None], str]] = {
    OutputCategory.ANALYSIS: render_analysis,
    OutputCategory.EXECUTIVE_SUMMARY: render_executive_summary,
}


def render_category(
    category: OutputCategory,
    result: GenerationResult,
    generated_at: datetime | None = None,
) -> str:
    return RENDERERS[category](result, generated_at)


def _strip_marker(line: str) -> str:
    text = _LIST_MARKER_RE.sub("", line, count=1).strip()
    # Horizontal rules such as "---" or "***" carry no text.
    if not text.strip("*-_ "):
        return ""
    return text


def _content_type_label(result: GenerationResult) -> str:
    return result.type.value.capitalize()


def _date_label(generated_at: datetime | None) -> str:
    return (generated_at or datetime.now()).strftime("%Y-%m-%d")
