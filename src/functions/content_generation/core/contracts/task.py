"""Task contract: one (product, locale) unit of work."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, get_args

from pydantic import Field

from .base import CamelModel, utc_now
from .product import Locale, Product, ProductCategory

TaskStatus = Literal["pending", "processing", "completed", "failed"]
TaskPriority = Literal["high", "medium", "low"]

TASK_STATUSES: tuple[str, ...] = get_args(TaskStatus)
PRIORITY_RANK: dict[str, int] = {"high": 0, "medium": 1, "low": 2}

HIGH_VALUE_CATEGORIES = frozenset({"tour", "hotel"})
HIGH_RATING = 4.7
MEDIUM_RATING = 4.3

KEY_SEPARATOR = "-"


def task_key(product_id: str, locale: str) -> str:
    """Progress store key for a (product, locale) pair."""
    return f"{product_id}{KEY_SEPARATOR}{locale}"


def assign_priority(product: Product) -> TaskPriority:
    """Static dispatch priority for a product's tasks.

    Only affects the order tasks are handed to workers.
    """
    rating = product.rating
    if (rating is not None and rating >= HIGH_RATING) or product.category in HIGH_VALUE_CATEGORIES:
        return "high"
    if rating is not None and rating >= MEDIUM_RATING:
        return "medium"
    return "low"


class Task(CamelModel):
    """Persisted state of a single generation task."""

    product_id: str
    product_category: ProductCategory
    locale: Locale
    priority: TaskPriority = "medium"
    status: TaskStatus = "pending"
    retries: int = Field(default=0, ge=0)
    error: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def key(self) -> str:
        return task_key(self.product_id, self.locale)

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @classmethod
    def for_product(cls, product: Product, locale: str) -> "Task":
        return cls(
            product_id=product.id,
            product_category=product.category,
            locale=locale,
            priority=assign_priority(product),
        )
