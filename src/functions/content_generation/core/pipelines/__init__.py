"""Batch scheduling for content generation."""

from .batch_processor import BatchConfig, BatchProcessor, ContentBackend

__all__ = ["BatchConfig", "BatchProcessor", "ContentBackend"]
