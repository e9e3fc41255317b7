"""
Output generation.

Renders generated analyses into category documents and stores them
as artifacts.
"""

from .materializer import CATEGORIES, ArtifactMaterializer, CategorySpec
from .renderer import (
    extract_overview,
    extract_recommendations,
    extract_takeaways,
    render_analysis,
    render_category,
    render_executive_summary,
)

__all__ = [
    "CATEGORIES",
    "ArtifactMaterializer",
    "CategorySpec",
    "extract_overview",
    "extract_recommendations",
    "extract_takeaways",
    "render_analysis",
    "render_category",
    "render_executive_summary",
]
