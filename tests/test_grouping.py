"""Tests for topic consolidation."""

from docforge.config import GroupingConfig
from docforge.core.grouping import consolidate, keyword_similarity
from docforge.core.types import ContentType, Topic


def _topic(name, keywords, content_type=ContentType.OTHER, pages=(1,)):
    return Topic(name=name, keywords=tuple(keywords), pages=tuple(pages), content_type=content_type)


def test_keyword_similarity_is_case_insensitive_jaccard():
    assert keyword_similarity(["Yoga", "poses"], ["yoga", "POSES"]) == 1.0
    assert keyword_similarity(["a", "b"], ["b", "c"]) == 1 / 3
    assert keyword_similarity(["a"], ["b"]) == 0.0


def test_keyword_similarity_of_empty_lists_is_zero():
    assert keyword_similarity([], []) == 0.0
    assert keyword_similarity(["a"], []) == 0.0


def test_consolidate_merges_same_content_type_even_without_keyword_overlap():
    topics = [
        _topic("Yoga Basics", ["yoga", "breathing"], ContentType.GYMNASTICS, pages=(1, 2)),
        _topic("Yoga Poses", ["poses", "stretch"], ContentType.GYMNASTICS, pages=(3,)),
        _topic("Quarterly Revenue", ["revenue", "growth"], ContentType.FINANCIAL, pages=(4, 5, 6)),
    ]

    groups = consolidate(topics)

    assert [g.main_topic for g in groups] == ["Yoga Basics", "Quarterly Revenue"]
    assert groups[0].sub_topics == ["Yoga Poses"]
    assert groups[0].all_keywords == ["yoga", "breathing", "poses", "stretch"]
    assert groups[0].total_pages == 3
    assert groups[0].content_type == ContentType.GYMNASTICS
    assert groups[1].sub_topics == []
    assert groups[1].total_pages == 3


def test_consolidate_merges_on_keyword_similarity_above_threshold():
    topics = [
        _topic("Budget", ["budget", "cost", "plan"], ContentType.BUSINESS),
        _topic("Budget Plan", ["budget", "cost", "plan", "forecast"], ContentType.FINANCIAL),
    ]

    groups = consolidate(topics)

    assert len(groups) == 1
    assert groups[0].sub_topics == ["Budget Plan"]


def test_identical_keywords_merge_across_content_types():
    topics = [
        _topic("Pitch", ["deck", "investor"], ContentType.BUSINESS),
        _topic("Funding", ["Investor", "DECK"], ContentType.FINANCIAL),
    ]

    groups = consolidate(topics)

    assert len(groups) == 1
    assert groups[0].sub_topics == ["Funding"]


def test_disjoint_keywords_and_content_types_stay_apart():
    topics = [
        _topic("Pitch", ["deck"], ContentType.BUSINESS),
        _topic("Fairy Tale", ["dragon"], ContentType.STORYTELLING),
    ]

    assert [g.main_topic for g in consolidate(topics)] == ["Pitch", "Fairy Tale"]


def test_yoga_topics_merge_on_content_type_below_threshold():
    topics = [
        _topic("Yoga Basics", ["yoga", "stretch"], ContentType.EDUCATIONAL),
        _topic("Yoga Safety", ["yoga", "injury"], ContentType.EDUCATIONAL),
    ]

    assert keyword_similarity(topics[0].keywords, topics[1].keywords) == 1 / 3
    groups = consolidate(topics)

    assert len(groups) == 1
    assert groups[0].main_topic == "Yoga Basics"
    assert groups[0].sub_topics == ["Yoga Safety"]


def test_consolidate_threshold_is_strict():
    # similarity is exactly 0.6: 3 shared of 5 distinct keywords
    topics = [
        _topic("A", ["a", "b", "c", "d"], ContentType.BUSINESS),
        _topic("B", ["a", "b", "c", "e"], ContentType.FINANCIAL),
    ]

    groups = consolidate(topics)

    assert [g.main_topic for g in groups] == ["A", "B"]


def test_consolidate_can_disable_content_type_merge():
    topics = [
        _topic("Story One", ["dragon"], ContentType.STORYTELLING),
        _topic("Story Two", ["castle"], ContentType.STORYTELLING),
    ]

    groups = consolidate(topics, GroupingConfig(merge_on_content_type=False))

    assert [g.main_topic for g in groups] == ["Story One", "Story Two"]


def test_consolidate_keeps_duplicate_keywords():
    topics = [
        _topic("Lesson 1", ["math", "algebra"], ContentType.EDUCATIONAL),
        _topic("Lesson 2", ["math", "algebra"], ContentType.EDUCATIONAL),
    ]

    groups = consolidate(topics)

    assert groups[0].all_keywords == ["math", "algebra", "math", "algebra"]


def test_consolidate_partitions_every_topic_exactly_once():
    topics = [
        _topic("T1", ["x"], ContentType.BUSINESS),
        _topic("T2", ["y"], ContentType.FINANCIAL),
        _topic("T3", ["z"], ContentType.BUSINESS),
        _topic("T4", ["x", "y"], ContentType.OTHER),
        _topic("T5", [], ContentType.FINANCIAL),
        _topic("T6", [], ContentType.GYMNASTICS),
    ]

    groups = consolidate(topics)

    members = []
    for group in groups:
        members.append(group.main_topic)
        members.extend(group.sub_topics)
    assert sorted(members) == sorted(t.name for t in topics)
    assert len(members) == len(topics)
    assert [g.main_topic for g in groups] == ["T1", "T2", "T4", "T6"]


def test_consolidate_empty_input():
    assert consolidate([]) == []


def test_consolidate_is_deterministic():
    topics = [
        _topic("A", ["k1", "k2"], ContentType.BUSINESS),
        _topic("B", ["k2"], ContentType.OTHER),
        _topic("C", ["k1", "k2"], ContentType.OTHER),
    ]

    assert consolidate(topics) == consolidate(topics)
