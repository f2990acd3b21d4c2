"""Retrying a callable with exponential backoff and jitter."""

from __future__ import annotations

import random
import threading
import time
from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")

_BASE_DELAY = 1.0


class RetryError(Exception):
    """Raised when every attempt failed; ``error`` holds the last failure."""

    def __init__(self, retry_count: int, error: BaseException | None) -> None:
        super().__init__(f"Max count of retries({retry_count}): {error}")
        self.retry_count = retry_count
        self.error = error


def with_retry(
    func: Callable[[], T],
    max_tries: int,
    max_delay: float,
    cancel: threading.Event | None = None,
) -> T:
    """Call ``func`` until it succeeds or ``max_tries`` attempts have failed.

    Between attempts it waits a random time below ``2**attempt`` seconds,
    capped at ``max_delay``. Setting ``cancel`` stops further attempts with
    ``InterruptedError``.
    """
    attempts = 0
    last_error: Exception | None = None
    for retry in range(max_tries):
        if cancel is not None and cancel.is_set():
            raise InterruptedError("operation cancelled")
        attempts += 1
        try:
            return func()
        except Exception as exc:
            last_error = exc
        backoff = _BASE_DELAY * 2**retry
        delay = min(random.uniform(0, backoff), max_delay)
        if cancel is not None:
            cancel.wait(delay)
        else:
            time.sleep(delay)
    raise RetryError(attempts, last_error) from last_error