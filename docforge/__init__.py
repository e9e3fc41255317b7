"""Topic consolidation and content generation pipeline for uploaded documents."""

__version__ = "0.1.0"

from .core.grouping import consolidate, keyword_similarity
from .runner import Services, build_services, organize_request, process_request, run_pipeline

__all__ = [
    "__version__",
    "consolidate",
    "keyword_similarity",
    "Services",
    "build_services",
    "organize_request",
    "process_request",
    "run_pipeline",
]
