"""
Core data types for the topic consolidation and content generation pipeline.

This module defines the fundamental data structures used throughout the pipeline:
- Topic: A detected subject area received from document analysis
- TopicGroup: Topics merged by the Similarity Grouper
- GenerationResult: Generated prose for one TopicGroup
- ArtifactRecord / GeneratedFile / CategoryResult: Materialized artifacts
- Job: The persistent processing job record
- SkippedItem: A unit of work dropped by a best-effort stage
- ProcessRequest / ProcessResponse: Inbound trigger contract
- FileDescriptor / OrganizedFile / OrganizeRequest: Document organization
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import hashlib
from typing import Any


class PayloadError(ValueError):
    """Raised when an inbound payload cannot be turned into domain objects."""


class ContentType(str, Enum):
    GYMNASTICS = "gymnastics"
    STORYTELLING = "storytelling"
    BUSINESS = "business"
    FINANCIAL = "financial"
    EDUCATIONAL = "educational"
    OTHER = "other"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class JobStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class OutputCategory(str, Enum):
    ANALYSIS = "analysis"
    EXECUTIVE_SUMMARY = "executive-summary"


@dataclass(frozen=True)
class Topic:
    """A subject area detected within an uploaded document.

    Attributes:
        name: Human readable topic name
        confidence: Detection confidence between 0 and 100
        keywords: Keywords describing the topic
        pages: Positive page numbers where the topic appears
        content_type: Broad content classification
        sentiment: Overall sentiment of the topic
        language: Language code of the source text
    """

    name: str
    confidence: float = 0.0
    keywords: tuple[str, ...] = ()
    pages: tuple[int, ...] = ()
    content_type: ContentType = ContentType.OTHER
    sentiment: Sentiment = Sentiment.NEUTRAL
    language: str = "en"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Topic":
        """Build a Topic from the camelCase payload used by the upload UI."""
        if not isinstance(data, dict):
            raise PayloadError("Topic must be an object")
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise PayloadError("Topic name is required")

        keywords = data.get("keywords") or []
        if not isinstance(keywords, list):
            raise PayloadError(f"Topic '{name}' keywords must be a list")
        pages = data.get("pages") or []
        if not isinstance(pages, list):
            raise PayloadError(f"Topic '{name}' pages must be a list")

        try:
            content_type = ContentType(data.get("contentType", ContentType.OTHER.value))
            sentiment = Sentiment(data.get("sentiment", Sentiment.NEUTRAL.value))
            confidence = float(data.get("confidence", 0))
            page_numbers = tuple(int(p) for p in pages)
        except (TypeError, ValueError) as exc:
            raise PayloadError(f"Topic '{name}' is malformed: {exc}") from exc
        if not 0 <= confidence <= 100:
            raise PayloadError(f"Topic '{name}' confidence must be between 0 and 100, got {confidence:g}")
        if any(page <= 0 for page in page_numbers):
            raise PayloadError(f"Topic '{name}' pages must be positive page numbers")

        return cls(
            name=name,
            confidence=confidence,
            keywords=tuple(str(k) for k in keywords),
            pages=page_numbers,
            content_type=content_type,
            sentiment=sentiment,
            language=str(data.get("language") or "en"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "confidence": self.confidence,
            "keywords": list(self.keywords),
            "pages": list(self.pages),
            "contentType": self.content_type.value,
            "sentiment": self.sentiment.value,
            "language": self.language,
        }


@dataclass
class TopicGroup:
    """A representative topic plus the similar topics folded into it.

    ``all_keywords`` keeps duplicates; it is a concatenation of every member's
    keywords, not a set union.
    """

    main_topic: str
    content_type: ContentType
    sentiment: Sentiment
    sub_topics: list[str] = field(default_factory=list)
    all_keywords: list[str] = field(default_factory=list)
    total_pages: int = 0


@dataclass
class GenerationResult:
    """Generated prose for one TopicGroup."""

    topic: str
    content: str
    type: ContentType
    sub_topics: list[str] = field(default_factory=list)
    pages: int = 0


@dataclass
class ArtifactRecord:
    """Metadata row written for every stored artifact."""

    job_id: str
    category: OutputCategory
    title: str
    description: str
    file_name: str
    file_path: str
    file_type: str
    file_size: str

    def to_row(self) -> dict[str, Any]:
        return {
            "job_id": self.job_id,
            "category": self.category.value,
            "title": self.title,
            "description": self.description,
            "file_name": self.file_name,
            "file_path": self.file_path,
            "file_type": self.file_type,
            "file_size": self.file_size,
        }


@dataclass
class GeneratedFile:
    """A downloadable artifact as exposed to the browsing UI."""

    name: str
    type: str
    size: str
    download_url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "size": self.size,
            "downloadUrl": self.download_url,
        }


@dataclass
class CategoryResult:
    """All successfully stored artifacts of one output category."""

    id: str
    title: str
    description: str
    icon: str
    total_size_kb: int = 0
    files: list[GeneratedFile] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def total_size(self) -> str:
        return f"{self.total_size_kb} KB"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "fileCount": self.file_count,
            "totalSize": self.total_size,
            "files": [f.to_dict() for f in self.files],
        }


@dataclass
class Job:
    """Processing job record, created before the pipeline runs."""

    id: str
    file_name: str = ""
    file_size: int = 0
    status: JobStatus = JobStatus.PROCESSING
    total_content: int = 0
    autonomous_mode: bool = False
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Job":
        return cls(
            id=str(row["id"]),
            file_name=row.get("file_name") or "",
            file_size=int(row.get("file_size") or 0),
            status=JobStatus(row.get("status") or JobStatus.PROCESSING.value),
            total_content=int(row.get("total_content") or 0),
            autonomous_mode=bool(row.get("autonomous_mode")),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass
class SkippedItem:
    """A unit of work dropped by a best-effort stage.

    Attributes:
        stage: "generation" or "materialization"
        name: Topic name of the dropped unit
        reason: Short failure description
        category: Output category for dropped artifacts
    """

    stage: str
    name: str
    reason: str
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = {"stage": self.stage, "name": self.name, "reason": self.reason}
        if self.category is not None:
            payload["category"] = self.category
        return payload


@dataclass
class ProcessRequest:
    """Inbound trigger carrying the topics detected for one upload."""

    job_id: str
    file_name: str
    topics: list[Topic] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "ProcessRequest":
        if not isinstance(payload, dict):
            raise PayloadError("Request body must be a JSON object")
        job_id = payload.get("jobId")
        if not isinstance(job_id, str) or not job_id:
            raise PayloadError("jobId is required")
        topics = payload.get("topics")
        if not isinstance(topics, list):
            raise PayloadError("topics must be a list")
        return cls(
            job_id=job_id,
            file_name=str(payload.get("fileName") or ""),
            topics=[Topic.from_dict(item) for item in topics],
        )


@dataclass
class ProcessResponse:
    """Outcome of one pipeline run."""

    job_id: str
    results: list[CategoryResult] = field(default_factory=list)
    processed_topics: int = 0
    skipped: list[SkippedItem] = field(default_factory=list)
    success: bool = True

    @property
    def total_files(self) -> int:
        return sum(r.file_count for r in self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "results": [r.to_dict() for r in self.results],
            "processedTopics": self.processed_topics,
            "jobId": self.job_id,
            "skipped": [s.to_dict() for s in self.skipped],
        }


@dataclass(frozen=True)
class FileDescriptor:
    """Name, byte size and MIME type of a file offered for organization."""

    name: str
    size: int = 0
    type: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "FileDescriptor":
        if not isinstance(data, dict):
            raise PayloadError("File must be an object")
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise PayloadError("File name is required")
        try:
            size = int(data.get("size") or 0)
        except (TypeError, ValueError) as exc:
            raise PayloadError(f"File '{name}' size is malformed: {exc}") from exc
        if size < 0:
            raise PayloadError(f"File '{name}' size must not be negative")
        return cls(name=name, size=size, type=str(data.get("type") or ""))

    @property
    def fingerprint(self) -> str:
        """SHA-256 hex digest of name, size and type; equal descriptors collide."""
        return hashlib.sha256(f"{self.name}{self.size}{self.type}".encode("utf-8")).hexdigest()


@dataclass
class DuplicateInfo:
    """The stored document an organized file duplicates."""

    id: str
    name: str
    path: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "path": self.path}


@dataclass
class OrganizedFile:
    """Suggested category, tags and folder for one file, plus its duplicate status."""

    original_name: str
    hash: str
    category: str
    tags: list[str] = field(default_factory=list)
    folder_path: str = ""
    duplicate: DuplicateInfo | None = None

    @property
    def is_duplicate(self) -> bool:
        return self.duplicate is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "originalName": self.original_name,
            "hash": self.hash,
            "category": self.category,
            "tags": list(self.tags),
            "folderPath": self.folder_path,
            "isDuplicate": self.is_duplicate,
            "duplicateInfo": self.duplicate.to_dict() if self.duplicate else None,
        }


@dataclass
class OrganizeRequest:
    """Inbound request listing the files to organize."""

    files: list[FileDescriptor] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "OrganizeRequest":
        if not isinstance(payload, dict):
            raise PayloadError("Request body must be a JSON object")
        files = payload.get("files")
        if not isinstance(files, list):
            raise PayloadError("files must be a list")
        return cls(files=[FileDescriptor.from_dict(item) for item in files])
