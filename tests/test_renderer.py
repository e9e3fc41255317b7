from datetime import datetime

from docforge.core.types import ContentType, GenerationResult, OutputCategory
from docforge.output.renderer import (
    FALLBACK_RECOMMENDATIONS,
    extract_overview,
    extract_recommendations,
    extract_takeaways,
    render_analysis,
    render_category,
    render_executive_summary,
)


CONTENT = """## Executive Overview

Yoga builds strength and calm.

## Key Concepts

- Breathing anchors every pose
* Alignment protects the joints
1. Start with sun salutations
2) Hold each pose for five breaths

---

## Practical Applications

You should practice in the morning.
We recommend a quiet room.
"""


def _result(content=CONTENT, sub_topics=("Yoga Poses",)):
    return GenerationResult(
        topic="Yoga Basics",
        content=content,
        type=ContentType.GYMNASTICS,
        sub_topics=list(sub_topics),
        pages=3,
    )


def test_extract_overview_returns_first_three_blocks():
    blocks = extract_overview(CONTENT)

    assert blocks == [
        "## Executive Overview",
        "Yoga builds strength and calm.",
        "## Key Concepts",
    ]


def test_extract_takeaways_strips_list_markers():
    items = extract_takeaways(CONTENT)

    assert items == [
        "Breathing anchors every pose",
        "Alignment protects the joints",
        "Start with sun salutations",
        "Hold each pose for five breaths",
    ]


def test_extract_takeaways_caps_at_eight():
    content = "\n".join(f"- item {i}" for i in range(12))

    assert len(extract_takeaways(content)) == 8


def test_extract_recommendations_matches_advice_lines():
    assert extract_recommendations(CONTENT) == [
        "You should practice in the morning.",
        "We recommend a quiet room.",
    ]


def test_extract_recommendations_falls_back_to_generic_list():
    assert extract_recommendations("Plain prose only.") == FALLBACK_RECOMMENDATIONS


def test_render_analysis_contains_header_content_and_footer():
    text = render_analysis(_result(), datetime(2026, 3, 1, 12, 0))

    assert text.startswith("# Yoga Basics\n")
    assert "**Related Topics:** Yoga Poses" in text
    assert "**Content Type:** Gymnastics" in text
    assert "**Page Coverage:** 3 pages" in text
    assert "Yoga builds strength and calm." in text
    assert "We recommend a quiet room." in text
    assert "*Generated on 2026-03-01 using AI-powered autonomous analysis*" in text


def test_render_analysis_omits_related_topics_when_none():
    text = render_analysis(_result(sub_topics=()), datetime(2026, 3, 1))

    assert "Related Topics" not in text


def test_render_executive_summary_sections():
    text = render_executive_summary(_result(), datetime(2026, 3, 1))

    assert text.startswith("# Executive Summary: Yoga Basics\n")
    assert "## Quick Overview" in text
    assert "- Breathing anchors every pose" in text
    assert "1. You should practice in the morning." in text
    assert "2. We recommend a quiet room." in text


def test_render_executive_summary_without_list_items_uses_placeholder():
    text = render_executive_summary(_result(content="Just one paragraph."), datetime(2026, 3, 1))

    assert "- No list items were identified in the analysis." in text
    assert f"1. {FALLBACK_RECOMMENDATIONS[0]}" in text


def test_rendering_is_deterministic_for_fixed_timestamp():
    when = datetime(2026, 3, 1)
    for category in OutputCategory:
        assert render_category(category, _result(), when) == render_category(category, _result(), when)
