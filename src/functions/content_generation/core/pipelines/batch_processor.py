"""Bounded-concurrency, resumable batch scheduler for content generation.

Expands a products x locales matrix into tasks, skips pairs completed in a
previous run, dispatches the rest by priority through a thread pool with
per-task retry, and checkpoints the task map to ``progress.json``.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Tuple

from pydantic import BaseModel, Field
from tenacity import RetryCallState, Retrying, stop_after_attempt

from src.shared.batch import BackoffStrategy, ProgressTracker, as_tenacity_wait, linear_backoff
from ..contracts import (
    PRIORITY_RANK,
    TASK_STATUSES,
    GeneratedContent,
    Product,
    ProductStats,
    Task,
    TaskError,
    task_key,
)
from ..storage import ContentStore, ProgressPersistenceError, ProgressStore

logger = logging.getLogger(__name__)

WorkItem = Tuple[Task, Product]


class ContentBackend(Protocol):
    """Anything that can produce page content for a product in a locale."""

    def generate(self, product: Product, locale: str) -> GeneratedContent:
        ...


class BatchConfig(BaseModel):
    """Scheduler settings."""

    concurrency: int = Field(default=10, ge=1, description="Worker pool size")
    retry_attempts: int = Field(default=3, ge=0, description="Retries after the first attempt")
    retry_delay: float = Field(default=5.0, ge=0, description="Backoff base unit in seconds")
    output_dir: Path = Field(default=Path("generated-content"))
    flush_interval: int = Field(default=10, ge=1, description="Finished tasks between checkpoints")
    log_interval: int = Field(default=25, ge=1, description="Finished tasks between progress logs")


class BatchProcessor:
    """Turns a products x locales matrix into persisted content.

    Example:
        processor = BatchProcessor(OpenAIContentGenerator(), BatchConfig(concurrency=5))
        stats = processor.process_all_products(products, ["en", "de"])
        print(stats.by_status)
    """

    def __init__(
        self,
        backend: ContentBackend,
        config: Optional[BatchConfig] = None,
        *,
        backoff: BackoffStrategy = linear_backoff,
        sleep: Callable[[float], None] = time.sleep,
        progress_store: Optional[ProgressStore] = None,
        content_store: Optional[ContentStore] = None,
    ) -> None:
        self.config = config or BatchConfig()
        self._backend = backend
        self._backoff = backoff
        self._sleep = sleep
        self.progress_store = progress_store or ProgressStore(self.config.output_dir)
        self.content_store = content_store or ContentStore(self.config.output_dir)

    def initialize(self) -> int:
        """Create the output directory and hydrate the task map from disk.

        Returns:
            Number of tasks loaded from a previous run

        Raises:
            ProgressPersistenceError: If the output directory cannot be created
        """
        self.progress_store.ensure_output_dir()
        return self.progress_store.load()

    def process_all_products(self, products: Iterable[Product], locales: Sequence[str]) -> ProductStats:
        """Generate content for every (product, locale) pair not yet completed.

        Per-task failures end up in the returned stats and the progress file;
        only output-directory and final-flush I/O errors propagate.

        Raises:
            ProgressPersistenceError: If the output directory cannot be
                created or the final progress flush fails
        """
        started = time.monotonic()
        products = list(products)
        locales = list(locales)

        self.initialize()
        worklist = self.build_worklist(products, locales)
        matrix_size = len(products) * len(locales)

        logger.info(
            "Content generation: %d products x %d locales = %d tasks (%d to run, %d already completed)",
            len(products),
            len(locales),
            matrix_size,
            len(worklist),
            matrix_size - len(worklist),
        )
        logger.info("Concurrency: %d | Retries: %d | Output: %s",
                    self.config.concurrency, self.config.retry_attempts, self.config.output_dir)

        if worklist:
            self._run_worklist(worklist)

        self.progress_store.flush()

        stats = self.compute_stats(products, locales, duration_seconds=time.monotonic() - started)
        logger.info(
            "Run finished: %d completed, %d failed, %d pending of %d pages",
            stats.by_status["completed"],
            stats.by_status["failed"],
            stats.by_status["pending"],
            stats.total_pages,
        )
        return stats

    def build_worklist(self, products: Sequence[Product], locales: Sequence[str]) -> List[WorkItem]:
        """Create pending tasks for every pair not completed, ordered by priority.

        New tasks replace any stored non-completed entry for the same key.
        The sort is stable, so equal priorities keep matrix order.
        """
        worklist: List[WorkItem] = []
        seen: set[str] = set()

        for product in products:
            for locale in locales:
                key = task_key(product.id, locale)
                if key in seen:
                    logger.warning("Duplicate task %s in catalog, keeping the first", key)
                    continue
                seen.add(key)

                existing = self.progress_store.get(key)
                if existing is not None and existing.is_completed:
                    continue

                task = self.progress_store.put(Task.for_product(product, locale))
                worklist.append((task, product))

        worklist.sort(key=lambda item: PRIORITY_RANK[item[0].priority])
        return worklist

    def _run_worklist(self, worklist: List[WorkItem]) -> None:
        progress = ProgressTracker(
            total=len(worklist),
            stage="content",
            log_interval=self.config.log_interval,
        )

        executor = ThreadPoolExecutor(
            max_workers=self.config.concurrency,
            thread_name_prefix="content-worker",
        )
        try:
            futures = {
                executor.submit(self.process_task, task, product): task
                for task, product in worklist
            }

            for future in as_completed(futures):
                task = futures[future]
                try:
                    success = future.result()
                except Exception as exc:
                    logger.error("Unexpected error processing %s: %s", task.key, exc, exc_info=True)
                    self.progress_store.update(task.key, status="failed", error=str(exc))
                    success = False

                processed = progress.increment(success=success)

                # Periodic checkpoint flush
                if processed % self.config.flush_interval == 0:
                    self._checkpoint()

                if progress.should_log():
                    progress.log_progress()
        except BaseException as exc:
            # Queued tasks are dropped; in-flight ones finish in the background
            executor.shutdown(wait=False, cancel_futures=True)
            logger.warning(
                "Run interrupted (%s) after %d/%d tasks, saving progress",
                type(exc).__name__,
                progress.processed_count,
                len(worklist),
            )
            self._checkpoint()
            raise

        executor.shutdown(wait=True)
        progress.log_summary()

    def _checkpoint(self) -> None:
        try:
            self.progress_store.flush()
        except ProgressPersistenceError as exc:
            logger.error("Checkpoint flush failed, continuing: %s", exc)

    def process_task(self, task: Task, product: Product) -> bool:
        """Run one task to a terminal state. Never raises.

        Returns:
            True if the task completed
        """
        key = task.key
        self.progress_store.update(key, status="processing")

        try:
            content = self.generate_with_retry(product, task.locale)
            if content.product_id != product.id or content.locale != task.locale:
                raise ValueError(
                    f"Backend returned content for {task_key(content.product_id, content.locale)}, expected {key}"
                )
            self.content_store.save(content)
        except Exception as exc:
            message = str(exc) or type(exc).__name__
            failed = self.progress_store.update(key, status="failed", error=message)
            logger.error("Task %s failed after %d retries: %s", key, failed.retries, message)
            return False

        self.progress_store.update(key, status="completed", error=None)
        logger.debug("Task %s completed", key)
        return True

    def generate_with_retry(self, product: Product, locale: str) -> GeneratedContent:
        """Call the backend up to ``retry_attempts + 1`` times.

        Before each retry the task's ``retries`` counter is incremented in the
        store, then the backoff delay is slept.

        Raises:
            Exception: The last backend error once attempts are exhausted
        """
        key = task_key(product.id, locale)

        def _before_retry(retry_state: RetryCallState) -> None:
            task = self.progress_store.increment_retries(key)
            error = retry_state.outcome.exception() if retry_state.outcome else None
            delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
            logger.warning(
                "Generation failed for %s (retry %d/%d in %.1fs): %s",
                key,
                task.retries,
                self.config.retry_attempts,
                delay,
                error,
            )

        retrying = Retrying(
            stop=stop_after_attempt(self.config.retry_attempts + 1),
            wait=as_tenacity_wait(self._backoff, self.config.retry_delay),
            before_sleep=_before_retry,
            sleep=self._sleep,
            reraise=True,
        )
        return retrying(self._backend.generate, product, locale)

    def compute_stats(
        self,
        products: Sequence[Product],
        locales: Sequence[str],
        *,
        duration_seconds: float = 0.0,
    ) -> ProductStats:
        """Aggregate task statuses over the products x locales matrix.

        Pairs with no stored task count as pending.
        """
        snapshot = self.progress_store.snapshot()
        by_category: Counter[str] = Counter()
        by_language: Counter[str] = Counter()
        by_status = {status: 0 for status in TASK_STATUSES}
        errors: List[TaskError] = []
        seen: set[str] = set()

        for product in products:
            for locale in locales:
                key = task_key(product.id, locale)
                if key in seen:
                    continue
                seen.add(key)

                by_category[product.category] += 1
                by_language[locale] += 1

                task = snapshot.get(key)
                status = task.status if task is not None else "pending"
                by_status[status] += 1
                if task is not None and task.status == "failed":
                    errors.append(TaskError(item=key, error=task.error or "unknown error"))

        return ProductStats(
            total_products=len({product.id for product in products}),
            total_pages=len(seen),
            by_category=dict(by_category),
            by_language=dict(by_language),
            by_status=by_status,
            duration_seconds=duration_seconds,
            errors=errors,
        )
