"""Aggregate run statistics."""

from __future__ import annotations

from pydantic import Field, computed_field

from .base import CamelModel


class TaskError(CamelModel):
    item: str
    error: str


class ProductStats(CamelModel):
    """Derived, read-only summary of a products x locales run."""

    total_products: int = 0
    total_pages: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)
    by_language: dict[str, int] = Field(default_factory=dict)
    by_status: dict[str, int] = Field(default_factory=dict)
    duration_seconds: float = 0.0
    errors: list[TaskError] = Field(default_factory=list)

    @computed_field(alias="completedPages")
    @property
    def completed_pages(self) -> int:
        return self.by_status.get("completed", 0)

    @computed_field(alias="failedPages")
    @property
    def failed_pages(self) -> int:
        return self.by_status.get("failed", 0)

    @computed_field(alias="averageSecondsPerPage")
    @property
    def average_seconds_per_page(self) -> float:
        completed = self.completed_pages
        return self.duration_seconds / completed if completed else 0.0

    @property
    def has_failures(self) -> bool:
        return self.failed_pages > 0
