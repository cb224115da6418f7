"""Retry decorator for backend calls, driven by a backoff policy."""
from __future__ import annotations

import functools
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Tuple, Type

from autoapply.log import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    backoff_factor: float = 2.0
    jitter: bool = True

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number ``attempt`` (1-based)."""
        delay = min(self.base_delay * (self.backoff_factor ** (attempt - 1)), self.max_delay)
        if self.jitter:
            delay *= 0.5 + random.random()
        return delay


def retry(
    policy: RetryPolicy = RetryPolicy(),
    *,
    retryable: Tuple[Type[BaseException], ...] = (Exception,),
    give_up: Callable[[BaseException], bool] | None = None,
    sleep: Callable[[float], None] | None = None,
) -> Callable:
    """Retry the wrapped call on ``retryable`` errors, backing off per ``policy``.

    ``give_up(exc)`` returning True re-raises at once; an auth or validation
    error will not change on the next attempt.
    """

    def decorator(fn: Callable) -> Callable:
        name = getattr(fn, "__qualname__", repr(fn))

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 1
            while True:
                try:
                    return fn(*args, **kwargs)
                except retryable as exc:
                    if give_up is not None and give_up(exc):
                        log.debug("%s: not retrying (%s)", name, exc)
                        raise
                    if attempt >= policy.max_attempts:
                        log.error("%s failed after %d attempts: %s", name, attempt, exc)
                        raise
                    delay = policy.delay_for(attempt)
                    log.warning(
                        "%s attempt %d/%d failed (%s), retrying in %.1fs",
                        name,
                        attempt,
                        policy.max_attempts,
                        exc,
                        delay,
                    )
                    (sleep or time.sleep)(delay)
                    attempt += 1

        return wrapper

    return decorator
