"""Contracts for generated marketing content and generation options."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, ValidationError, field_validator

from .base import CamelModel
from .product import Locale


class GenerationOptions(CamelModel):
    """Configuration passed to the content generation client."""

    model: str = Field(default="gpt-4o-mini", description="Model for the main content call")
    auxiliary_model: str = Field(default="gpt-4o-mini", description="Model for keywords and reviews")
    temperature: float | None = Field(default=0.7, description="Sampling temperature if supported")
    max_output_tokens: int | None = Field(default=2000, description="Token limit for the main call")
    request_timeout_seconds: int = Field(default=120, ge=10, le=900)
    review_count: int = Field(default=3, ge=0, le=10)

    @field_validator("temperature")
    @classmethod
    def _validate_temperature(cls, value: float | None) -> float | None:
        if value is None:
            return None
        if not (0.0 <= value <= 2.0):
            msg = "temperature must be between 0.0 and 2.0"
            raise ValueError(msg)
        return value

    @field_validator("max_output_tokens")
    @classmethod
    def _validate_max_tokens(cls, value: int | None) -> int | None:
        if value is None:
            return None
        if value <= 0 or value > 8000:
            msg = "max_output_tokens must be between 1 and 8000"
            raise ValueError(msg)
        return value


class ItineraryItem(CamelModel):
    time: str = ""
    title: str
    description: str = ""


class Review(CamelModel):
    """Synthesised customer review shown on product pages."""

    id: str
    author: str
    avatar: str = ""
    rating: float = Field(ge=1, le=5)
    date: str = ""
    title: str = ""
    text: str
    helpful: int = 0
    verified: bool = False
    locale: Locale


class SEOMetadata(CamelModel):
    meta_title: str
    meta_description: str
    keywords: list[str] = Field(default_factory=list)
    canonical_url: str
    og_title: str
    og_description: str
    og_image: str = ""
    twitter_card: str = "summary_large_image"
    structured_data: dict[str, Any] = Field(default_factory=dict)


class GeneratedContent(CamelModel):
    """Localized page content for one product in one locale."""

    product_id: str
    locale: Locale
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    long_description: str = Field(..., min_length=1)
    highlights: list[str] = Field(default_factory=list)
    # tour
    included: Optional[list[str]] = None
    excluded: Optional[list[str]] = None
    itinerary: Optional[list[ItineraryItem]] = None
    # hotel
    amenities: Optional[list[str]] = None
    room_features: Optional[list[str]] = None
    # car-rental
    additional_options: Optional[list[str]] = None
    # rental
    features: Optional[list[str]] = None
    house_rules: Optional[list[str]] = None
    # transfer
    vehicle_features: Optional[list[str]] = None
    reviews: list[Review] = Field(default_factory=list)
    seo: SEOMetadata

    @field_validator("highlights")
    @classmethod
    def _clean_highlights(cls, value: list[str]) -> list[str]:
        return [item.strip() for item in value if item and item.strip()]


def parse_generation_options(raw: dict | GenerationOptions | None) -> GenerationOptions:
    """Build validated generation options from raw input."""

    if raw is None:
        return GenerationOptions()
    if isinstance(raw, GenerationOptions):
        return raw
    try:
        return GenerationOptions(**raw)
    except ValidationError as exc:
        msg = ", ".join(error["msg"] for error in exc.errors())
        raise ValueError(f"Invalid generation options: {msg}") from exc
