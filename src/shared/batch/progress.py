"""Progress tracking for batch processing pipelines."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Tracks processing progress and calculates metrics.

    Provides progress logging with rate calculation and ETA estimation.

    Example:
        tracker = ProgressTracker(total=800, stage="content")

        for future in as_completed(futures):
            tracker.increment(success=future.result())
            if tracker.should_log():
                tracker.log_progress()

        tracker.log_summary()
    """

    def __init__(
        self,
        total: int,
        stage: str,
        *,
        log_interval: int = 10,
        log_time_interval: int = 30,
        clock=time.monotonic,
    ):
        """Initialize progress tracker.

        Args:
            total: Total number of tasks to process
            stage: Label included in every log line
            log_interval: Number of tasks between logs
            log_time_interval: Seconds between time-based logs
            clock: Monotonic time source (seconds)
        """
        self.total = total
        self.stage = stage
        self.log_interval = log_interval
        self.log_time_interval = log_time_interval
        self._clock = clock

        self.start_time = clock()
        self.processed_count = 0
        self.success_count = 0
        self.error_count = 0
        self.lock = threading.Lock()
        self.last_log_time = self.start_time
        self.last_log_count = 0

    def increment(self, success: bool = True) -> int:
        """Increment counters.

        Args:
            success: Whether processing succeeded

        Returns:
            Processed count after the increment
        """
        with self.lock:
            self.processed_count += 1
            if success:
                self.success_count += 1
            else:
                self.error_count += 1
            return self.processed_count

    def should_log(self) -> bool:
        """Check if progress should be logged."""
        with self.lock:
            count_trigger = self.processed_count - self.last_log_count >= self.log_interval
            time_trigger = self._clock() - self.last_log_time >= self.log_time_interval
            return count_trigger or time_trigger

    def elapsed_seconds(self) -> float:
        return self._clock() - self.start_time

    def _snapshot(self) -> Dict[str, Any]:
        elapsed = self.elapsed_seconds()
        rate = self.processed_count / (elapsed / 60) if elapsed > 0 else 0.0
        remaining = self.total - self.processed_count
        eta_minutes = remaining / rate if rate > 0 else 0.0
        percent = self.processed_count / self.total * 100 if self.total > 0 else 0.0
        return {
            "processed": self.processed_count,
            "successful": self.success_count,
            "errors": self.error_count,
            "total": self.total,
            "percent": percent,
            "rate_per_minute": rate,
            "elapsed_seconds": elapsed,
            "eta_minutes": eta_minutes,
            "stage": self.stage,
        }

    def log_progress(self, extra_stats: Optional[Dict[str, Any]] = None) -> None:
        """Log current progress with all metrics.

        Args:
            extra_stats: Optional additional stats to include in log
        """
        with self.lock:
            stats = self._snapshot()
            parts = [
                f"Progress: {stats['processed']:,}/{stats['total']:,} ({stats['percent']:.1f}%)",
                f"Rate: {stats['rate_per_minute']:.1f} tasks/min",
            ]

            if extra_stats:
                for key, value in extra_stats.items():
                    if isinstance(value, float):
                        parts.append(f"{key}: {value:.1f}")
                    else:
                        parts.append(f"{key}: {value}")

            parts.extend([
                f"Errors: {stats['errors']}",
                f"ETA: {stats['eta_minutes']:.1f}m",
                f"Stage: {self.stage}",
            ])

            logger.info(" | ".join(parts))

            self.last_log_time = self._clock()
            self.last_log_count = self.processed_count

    def log_summary(self) -> None:
        """Log final summary."""
        stats = self.get_stats()
        minutes, seconds = divmod(int(stats["elapsed_seconds"]), 60)
        summary_parts = [
            f"Total processed: {stats['processed']:,}",
            f"Successful: {stats['successful']:,}",
            f"Errors: {stats['errors']:,}",
            f"Time: {minutes}m {seconds}s",
            f"Avg rate: {stats['rate_per_minute']:.1f} tasks/min",
            f"Stage: {self.stage}",
        ]
        logger.info("Batch Processing Complete:\n  " + "\n  ".join(summary_parts))

    def get_stats(self) -> Dict[str, Any]:
        """Get current progress statistics."""
        with self.lock:
            return self._snapshot()
