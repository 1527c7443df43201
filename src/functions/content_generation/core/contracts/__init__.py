"""Contracts for the content generation pipeline."""

from .base import CamelModel, utc_now
from .generated_content import (
    GeneratedContent,
    GenerationOptions,
    ItineraryItem,
    Review,
    SEOMetadata,
    parse_generation_options,
)
from .product import LANGUAGE_NAMES, LOCALES, PRODUCT_CATEGORIES, Locale, Product, ProductCategory, parse_locales
from .stats import ProductStats, TaskError
from .task import PRIORITY_RANK, TASK_STATUSES, Task, TaskPriority, TaskStatus, assign_priority, task_key

__all__ = [
    "CamelModel",
    "utc_now",
    "GeneratedContent",
    "GenerationOptions",
    "ItineraryItem",
    "Review",
    "SEOMetadata",
    "parse_generation_options",
    "LANGUAGE_NAMES",
    "LOCALES",
    "PRODUCT_CATEGORIES",
    "Locale",
    "Product",
    "ProductCategory",
    "parse_locales",
    "ProductStats",
    "TaskError",
    "PRIORITY_RANK",
    "TASK_STATUSES",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "assign_priority",
    "task_key",
]
