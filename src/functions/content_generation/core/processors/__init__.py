"""Post-processing of raw model output into page content."""

from .review_builder import build_reviews
from .seo_builder import build_seo_metadata, build_structured_data, canonical_url

__all__ = ["build_reviews", "build_seo_metadata", "build_structured_data", "canonical_url"]
