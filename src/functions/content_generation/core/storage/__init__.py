"""Progress and content persistence."""

from .content_store import ContentStore, bucket_for
from .progress_store import PROGRESS_FILENAME, ProgressPersistenceError, ProgressStore

__all__ = [
    "ContentStore",
    "bucket_for",
    "PROGRESS_FILENAME",
    "ProgressPersistenceError",
    "ProgressStore",
]
