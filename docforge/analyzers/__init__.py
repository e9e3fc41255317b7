"""Pipeline stages that talk to the text-generation provider."""

from .detector import TopicDetector, normalize_topics
from .generator import ContentGenerator
from .organizer import DocumentOrganizer

__all__ = ["ContentGenerator", "DocumentOrganizer", "TopicDetector", "normalize_topics"]
