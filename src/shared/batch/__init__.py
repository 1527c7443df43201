"""Shared batch processing infrastructure.

Provides generic utilities for batch processing pipelines:
- atomic_write_json / read_json: Checkpoint persistence with atomic writes
- ProgressTracker: Processing progress and metrics
- linear_backoff / exponential_backoff / with_jitter: Retry delay strategies

Usage:
    from src.shared.batch import ProgressTracker, atomic_write_json, read_json
    from src.shared.batch import linear_backoff, as_tenacity_wait
"""

from .checkpoint import atomic_write_json, read_json
from .progress import ProgressTracker
from .retry import (
    BackoffStrategy,
    as_tenacity_wait,
    exponential_backoff,
    linear_backoff,
    with_jitter,
)

__all__ = [
    "atomic_write_json",
    "read_json",
    "ProgressTracker",
    "BackoffStrategy",
    "as_tenacity_wait",
    "exponential_backoff",
    "linear_backoff",
    "with_jitter",
]
