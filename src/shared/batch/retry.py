"""Backoff strategies for retrying failed batch tasks.

A strategy maps ``(base_delay, attempt)`` to seconds to wait, where
``attempt`` is 1 for the first retry. ``as_tenacity_wait`` adapts any strategy
to tenacity's ``wait=`` hook.
"""

from __future__ import annotations

import random
from typing import Callable

from tenacity import RetryCallState

BackoffStrategy = Callable[[float, int], float]


def linear_backoff(base_delay: float, attempt: int) -> float:
    """Wait ``base_delay * attempt`` seconds (1x, 2x, 3x, ...)."""
    return base_delay * attempt


def exponential_backoff(base_delay: float, attempt: int, max_delay: float = 300.0) -> float:
    """Wait ``base_delay * 2**(attempt - 1)`` seconds, capped at ``max_delay``."""
    return min(base_delay * (2 ** (attempt - 1)), max_delay)


def with_jitter(strategy: BackoffStrategy, ratio: float = 0.1) -> BackoffStrategy:
    """Spread retries of many workers by adding up to ``ratio`` random extra delay."""

    def _jittered(base_delay: float, attempt: int) -> float:
        delay = strategy(base_delay, attempt)
        return delay + random.uniform(0, delay * ratio)

    return _jittered


def as_tenacity_wait(strategy: BackoffStrategy, base_delay: float) -> Callable[[RetryCallState], float]:
    """Build a tenacity ``wait`` callable from a backoff strategy.

    tenacity calls ``wait`` after a failed attempt; ``attempt_number`` is the
    number of attempts made so far, i.e. the index of the upcoming retry.
    """

    def _wait(retry_state: RetryCallState) -> float:
        return strategy(base_delay, retry_state.attempt_number)

    return _wait
