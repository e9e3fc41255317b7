"""
Core domain models and business logic.

This package contains data types and business logic that is
independent of any external service.
"""

from .types import (
    ArtifactRecord,
    CategoryResult,
    ContentType,
    DuplicateInfo,
    FileDescriptor,
    GeneratedFile,
    GenerationResult,
    Job,
    JobStatus,
    OrganizedFile,
    OrganizeRequest,
    OutputCategory,
    PayloadError,
    ProcessRequest,
    ProcessResponse,
    Sentiment,
    SkippedItem,
    Topic,
    TopicGroup,
)
from .grouping import consolidate, keyword_similarity
from .naming import artifact_file_name, size_kb, size_label, slugify, storage_path, unique_file_name

__all__ = [
    "ArtifactRecord",
    "CategoryResult",
    "ContentType",
    "DuplicateInfo",
    "FileDescriptor",
    "GeneratedFile",
    "GenerationResult",
    "Job",
    "JobStatus",
    "OrganizeRequest",
    "OrganizedFile",
    "OutputCategory",
    "PayloadError",
    "ProcessRequest",
    "ProcessResponse",
    "Sentiment",
    "SkippedItem",
    "Topic",
    "TopicGroup",
    "consolidate",
    "keyword_similarity",
    "artifact_file_name",
    "size_kb",
    "size_label",
    "slugify",
    "storage_path",
    "unique_file_name",
]
