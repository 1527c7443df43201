"""File-backed task map used to resume interrupted runs."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from pydantic import ValidationError

from src.shared.batch import atomic_write_json, read_json
from ..contracts import Task, utc_now

logger = logging.getLogger(__name__)

PROGRESS_FILENAME = "progress.json"


class ProgressPersistenceError(RuntimeError):
    """Raised when the output directory or progress file cannot be written."""


class ProgressStore:
    """Lock-guarded ``key -> Task`` map persisted as one JSON document.

    Workers only go through ``get``/``put``/``update``; stored tasks are
    replaced rather than mutated so ``snapshot`` can hand out references
    without copying each task.

    Example:
        store = ProgressStore(Path("./generated-content"))
        store.load()
        store.update("tour-1-en", status="processing")
        store.flush()
    """

    def __init__(self, output_dir: Path | str):
        self.output_dir = Path(output_dir)
        self.filepath = self.output_dir / PROGRESS_FILENAME
        self._tasks: Dict[str, Task] = {}
        self.lock = threading.Lock()
        self._flush_lock = threading.Lock()

    def ensure_output_dir(self) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ProgressPersistenceError(
                f"Cannot create output directory {self.output_dir}: {exc}"
            ) from exc

    def load(self) -> int:
        """Replace the in-memory map with the persisted one.

        A missing, unreadable or malformed file yields an empty map; entries
        that fail validation are dropped individually.

        Returns:
            Number of tasks loaded
        """
        data = read_json(self.filepath)
        tasks: Dict[str, Task] = {}

        if data is None:
            logger.info("No existing progress found at %s. Starting fresh.", self.filepath)
        elif not isinstance(data, dict):
            logger.warning("Ignoring progress file %s: expected a JSON object", self.filepath)
        else:
            for key, raw in data.items():
                try:
                    tasks[key] = Task.model_validate(raw)
                except ValidationError as exc:
                    logger.warning("Dropping invalid progress entry %s: %s", key, exc.errors()[0]["msg"])

        with self.lock:
            self._tasks = tasks

        if tasks:
            completed = sum(1 for task in tasks.values() if task.is_completed)
            logger.info("Loaded progress: %d/%d tasks completed", completed, len(tasks))
        return len(tasks)

    def get(self, key: str) -> Optional[Task]:
        with self.lock:
            return self._tasks.get(key)

    def put(self, task: Task) -> Task:
        with self.lock:
            self._tasks[task.key] = task
        return task

    def update(self, key: str, **changes: Any) -> Task:
        """Apply field changes to a task and bump ``updated_at``.

        Raises:
            KeyError: If no task is stored under ``key``
        """
        with self.lock:
            current = self._tasks[key]
            updated = current.model_copy(update={**changes, "updated_at": utc_now()})
            self._tasks[key] = updated
            return updated

    def increment_retries(self, key: str) -> Task:
        with self.lock:
            current = self._tasks[key]
            updated = current.model_copy(
                update={"retries": current.retries + 1, "updated_at": utc_now()}
            )
            self._tasks[key] = updated
            return updated

    def snapshot(self) -> Dict[str, Task]:
        with self.lock:
            return dict(self._tasks)

    def flush(self) -> None:
        """Atomically write the current map to disk.

        Raises:
            ProgressPersistenceError: If the file cannot be written
        """
        with self._flush_lock:
            payload = {key: task.to_json_dict() for key, task in self.snapshot().items()}
            try:
                atomic_write_json(self.filepath, payload)
            except (OSError, TypeError, ValueError) as exc:
                raise ProgressPersistenceError(
                    f"Failed to write progress file {self.filepath}: {exc}"
                ) from exc
            logger.debug("Progress flushed to %s (%d tasks)", self.filepath, len(payload))

    def __len__(self) -> int:
        with self.lock:
            return len(self._tasks)

    def __contains__(self, key: object) -> bool:
        with self.lock:
            return key in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self.snapshot().values())
