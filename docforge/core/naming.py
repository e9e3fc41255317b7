"""Artifact file naming, storage paths and size labels."""

from __future__ import annotations

import math
import re

from .types import OutputCategory


def slugify(text: str) -> str:
    """Convert a topic name to a lowercase file-name stem.

    Args:
        text: The topic name

    Returns:
        Lowercase alphanumeric runs joined by underscores
    """
    slug = re.sub(r"[^a-z0-9]+", "_", text.lower())
    slug = slug.strip("_")
    # Fallback for names made only of punctuation or non-latin characters
    if not slug:
        slug = "topic"
    return slug


def artifact_file_name(topic: str, category: OutputCategory, extension: str = "md", index: int = 1) -> str:
    stem = slugify(topic) if index == 1 else f"{slugify(topic)}_{index}"
    return f"{stem}_{category.value}.{extension}"


def unique_file_name(topic: str, category: OutputCategory, taken: set[str], extension: str = "md") -> str:
    """Return the first file name for ``topic`` not in ``taken`` and add it there.

    Distinct topics that slug alike ("Yoga: Basics", "Yoga Basics") get
    ``_2``, ``_3``... after the stem.
    """
    index = 1
    name = artifact_file_name(topic, category, extension)
    while name in taken:
        index += 1
        name = artifact_file_name(topic, category, extension, index)
    taken.add(name)
    return name


def storage_path(job_id: str, category: OutputCategory, file_name: str) -> str:
    return f"{job_id}/{category.value}/{file_name}"


def size_kb(num_bytes: int) -> int:
    """Convert a byte count to whole kilobytes, never below 1.

    Halves round up (2560 bytes is 3 KB).
    """
    return max(1, math.floor(num_bytes / 1024 + 0.5))


def size_label(kb: int) -> str:
    return f"{kb} KB"


def parse_size_label(label: str) -> int:
    """Read the kilobyte count back from a ``"N KB"`` label; 0 when unreadable."""
    match = re.match(r"\s*(\d+)", label or "")
    if not match:
        return 0
    return int(match.group(1))
