"""Catalog product contract and the fixed locale set."""

from __future__ import annotations

from typing import Literal, Optional, get_args

from pydantic import Field, field_validator, model_validator

from .base import CamelModel

ProductCategory = Literal["tour", "hotel", "car-rental", "rental", "transfer", "flight"]
Locale = Literal["tr", "en", "de", "ru", "ar", "fa", "fr", "el"]

PRODUCT_CATEGORIES: tuple[str, ...] = get_args(ProductCategory)
LOCALES: tuple[str, ...] = get_args(Locale)

LANGUAGE_NAMES: dict[str, str] = {
    "tr": "Turkish",
    "en": "English",
    "de": "German",
    "ru": "Russian",
    "ar": "Arabic",
    "fa": "Persian",
    "fr": "French",
    "el": "Greek",
}


class Product(CamelModel):
    """A catalog record as supplied by the driver; never mutated during a run."""

    id: str = Field(..., min_length=1)
    category: ProductCategory
    region: str
    name: str = Field(..., min_length=1)
    description: str = ""
    price: float = Field(default=0.0, ge=0)
    images: list[str] = Field(default_factory=list)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    review_count: Optional[int] = Field(default=None, ge=0)
    slug: Optional[str] = None

    @field_validator("id", "name")
    @classmethod
    def _strip(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            msg = "value must not be blank"
            raise ValueError(msg)
        return cleaned

    @model_validator(mode="after")
    def _default_slug(self) -> "Product":
        if not self.slug:
            self.slug = self.id
        return self


def parse_locales(raw: str | list[str] | None) -> list[str]:
    """Validate a comma separated string or list of locale codes.

    Returns all locales when ``raw`` is empty. Order is preserved and
    duplicates are dropped.
    """

    if not raw:
        return list(LOCALES)
    values = raw.split(",") if isinstance(raw, str) else list(raw)
    locales: list[str] = []
    for value in values:
        code = value.strip().lower()
        if not code:
            continue
        if code not in LOCALES:
            msg = f"Unsupported locale '{code}'. Expected one of: {', '.join(LOCALES)}"
            raise ValueError(msg)
        if code not in locales:
            locales.append(code)
    if not locales:
        msg = "At least one locale is required"
        raise ValueError(msg)
    return locales
