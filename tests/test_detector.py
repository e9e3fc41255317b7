from docforge.analyzers.detector import FALLBACK_TOPIC, TopicDetector, normalize_topics
from docforge.core.types import ContentType, Sentiment

from conftest import FakeProvider


def test_detect_normalizes_provider_output():
    provider = FakeProvider(
        topics_payload={
            "topics": [
                {
                    "name": "Yoga Basics",
                    "confidence": 130,
                    "keywords": ["yoga", " ", "breathing"],
                    "pages": [1, "2", 0, -3, "x"],
                    "contentType": "Gymnastics",
                    "sentiment": "upbeat",
                    "language": "en",
                }
            ]
        }
    )

    topics = TopicDetector(provider).detect("Yoga text")

    assert len(topics) == 1
    topic = topics[0]
    assert topic.confidence == 100.0
    assert topic.keywords == ("yoga", "breathing")
    assert topic.pages == (1, 2)
    assert topic.content_type == ContentType.GYMNASTICS
    assert topic.sentiment == Sentiment.NEUTRAL


def test_detect_falls_back_when_provider_fails():
    assert TopicDetector(FakeProvider()).detect("text") == [FALLBACK_TOPIC]


def test_detect_falls_back_when_no_topics():
    provider = FakeProvider(topics_payload={"topics": [{"confidence": 50}]})

    assert TopicDetector(provider).detect("text") == [FALLBACK_TOPIC]


def test_normalize_topics_ignores_non_list_input():
    assert normalize_topics(None) == []
    assert normalize_topics({"name": "x"}) == []
