"""Bounded retry for repository reads."""

from __future__ import annotations

import time
from typing import Callable, TypeVar


T = TypeVar("T")


def with_retry(
    func: Callable[[], T],
    *,
    attempts: int = 3,
    retry_on: tuple[type[Exception], ...] = (OSError,),
    base_delay_seconds: float = 0.1,
    max_delay_seconds: float = 1.0,
    on_retry: Callable[[int, float, Exception], None] | None = None,
) -> T:
    """Call ``func`` up to ``attempts`` times, sleeping with exponential backoff.

    Only exceptions listed in ``retry_on`` are retried; anything else, or the
    last retryable failure, propagates to the caller.
    """
    for attempt in range(1, max(attempts, 1) + 1):
        try:
            return func()
        except retry_on as exc:
            if attempt >= attempts:
                raise
            delay = min(base_delay_seconds * (2 ** (attempt - 1)), max_delay_seconds)
            if on_retry:
                on_retry(attempt, delay, exc)
            if delay > 0:
                time.sleep(delay)
    raise RuntimeError("RETRY_EXHAUSTED")
