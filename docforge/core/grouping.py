"""
Topic consolidation using keyword-set similarity.

Topics are merged by a greedy single pass: each unused topic becomes the
representative of a new group and absorbs every later unused topic that is
similar enough. The result is deterministic for a fixed input order.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..config import GroupingConfig
from .types import Topic, TopicGroup


def keyword_similarity(a: Sequence[str], b: Sequence[str]) -> float:
    """Return the Jaccard index of two keyword lists, ignoring case.

    Args:
        a: Keywords of the first topic
        b: Keywords of the second topic

    Returns:
        Size of the intersection divided by size of the union, 0.0 when
        both lists are empty
    """
    set_a = {k.lower() for k in a}
    set_b = {k.lower() for k in b}
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def consolidate(
    topics: Sequence[Topic],
    cfg: GroupingConfig | None = None,
) -> list[TopicGroup]:
    """Merge similar topics into groups.

    A later topic is folded into the current group when its keyword
    similarity with the representative exceeds the threshold, or when it
    shares the representative's content type (unless
    ``merge_on_content_type`` is disabled).

    Args:
        topics: Topics in input order
        cfg: Grouping settings, defaults when omitted

    Returns:
        One TopicGroup per representative; every input topic appears in
        exactly one group
    """
    cfg = cfg or GroupingConfig()
    used: set[int] = set()
    groups: list[TopicGroup] = []

    for i, topic in enumerate(topics):
        if i in used:
            continue
        used.add(i)

        group = TopicGroup(
            main_topic=topic.name,
            content_type=topic.content_type,
            sentiment=topic.sentiment,
            all_keywords=list(topic.keywords),
            total_pages=len(topic.pages),
        )

        for j in range(i + 1, len(topics)):
            if j in used:
                continue
            other = topics[j]
            if not _should_merge(topic, other, cfg):
                continue
            used.add(j)
            group.sub_topics.append(other.name)
            group.all_keywords.extend(other.keywords)
            group.total_pages += len(other.pages)

        groups.append(group)

    return groups


def _should_merge(representative: Topic, candidate: Topic, cfg: GroupingConfig) -> bool:
    similarity = keyword_similarity(representative.keywords, candidate.keywords)
    if similarity > cfg.similarity_threshold:
        return True
    return cfg.merge_on_content_type and candidate.content_type == representative.content_type
