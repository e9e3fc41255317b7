"""Tests for artifact naming and payload parsing."""

import pytest

from docforge.core.naming import (
    artifact_file_name,
    parse_size_label,
    size_kb,
    size_label,
    slugify,
    storage_path,
    unique_file_name,
)
from docforge.core.types import (
    CategoryResult,
    ContentType,
    GeneratedFile,
    OutputCategory,
    PayloadError,
    ProcessRequest,
    Sentiment,
    Topic,
)


def test_slugify_replaces_non_alphanumeric_runs():
    assert slugify("Yoga Basics") == "yoga_basics"
    assert slugify("  Q3: Revenue & Growth!  ") == "q3_revenue_growth"
    assert slugify("???") == "topic"


def test_artifact_file_name_and_storage_path():
    name = artifact_file_name("Yoga Basics", OutputCategory.EXECUTIVE_SUMMARY)
    assert name == "yoga_basics_executive-summary.md"
    assert storage_path("job-1", OutputCategory.EXECUTIVE_SUMMARY, name) == (
        "job-1/executive-summary/yoga_basics_executive-summary.md"
    )


def test_unique_file_name_suffixes_colliding_slugs():
    taken: set[str] = set()

    names = [unique_file_name(t, OutputCategory.ANALYSIS, taken) for t in ("Yoga: Basics", "Yoga Basics", "yoga basics")]

    assert names == ["yoga_basics_analysis.md", "yoga_basics_2_analysis.md", "yoga_basics_3_analysis.md"]
    assert taken == set(names)


def test_size_kb_rounds_and_never_drops_below_one():
    assert size_kb(0) == 1
    assert size_kb(100) == 1
    assert size_kb(2048) == 2
    assert size_kb(2600) == 3
    assert size_label(3) == "3 KB"
    assert parse_size_label("12 KB") == 12
    assert parse_size_label("n/a") == 0


def test_size_kb_rounds_exact_halves_up():
    assert size_kb(1536) == 2
    assert size_kb(2560) == 3
    assert size_kb(3583) == 3


def test_topic_from_dict_reads_camel_case_payload():
    topic = Topic.from_dict(
        {
            "name": "Yoga Basics",
            "confidence": 92,
            "keywords": ["yoga", "breathing"],
            "pages": [1, 2],
            "contentType": "gymnastics",
            "sentiment": "positive",
            "language": "en",
        }
    )

    assert topic.content_type == ContentType.GYMNASTICS
    assert topic.sentiment == Sentiment.POSITIVE
    assert topic.keywords == ("yoga", "breathing")
    assert topic.pages == (1, 2)
    assert topic.to_dict()["contentType"] == "gymnastics"


def test_topic_from_dict_rejects_unknown_content_type():
    with pytest.raises(PayloadError):
        Topic.from_dict({"name": "X", "contentType": "poetry"})


@pytest.mark.parametrize(
    "overrides",
    [
        {"confidence": 101},
        {"confidence": -5},
        {"pages": [0]},
        {"pages": [2, -1]},
    ],
)
def test_topic_from_dict_rejects_out_of_range_values(overrides):
    data = {"name": "Yoga Basics", "confidence": 80, "pages": [1], **overrides}

    with pytest.raises(PayloadError):
        Topic.from_dict(data)


def test_topic_from_dict_accepts_confidence_bounds():
    assert Topic.from_dict({"name": "A", "confidence": 0}).confidence == 0
    assert Topic.from_dict({"name": "B", "confidence": 100}).confidence == 100


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"topics": []},
        {"jobId": "", "topics": []},
        {"jobId": "job-1", "topics": "nope"},
        {"jobId": "job-1", "topics": [{"keywords": ["a"]}]},
    ],
)
def test_process_request_rejects_malformed_payloads(payload):
    with pytest.raises(PayloadError):
        ProcessRequest.from_payload(payload)


def test_category_result_totals():
    result = CategoryResult(id="analysis", title="T", description="D", icon="FileText")
    result.files.append(GeneratedFile(name="a.md", type="md", size="2 KB", download_url="u"))
    result.total_size_kb = 2

    data = result.to_dict()

    assert data["fileCount"] == 1
    assert data["totalSize"] == "2 KB"
    assert data["files"][0]["downloadUrl"] == "u"
