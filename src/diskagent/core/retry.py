"""
Bounded retries for fallible operations.

Meant for read-only queries; destructive partition edits are never retried.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

from diskagent.core.errors import DiskAgentError, RetriesExhausted
from diskagent.core.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


def retryable(
    max_tries: int,
    description: str,
    exceptions: tuple[type[BaseException], ...] = (DiskAgentError,),
    log: structlog.stdlib.BoundLogger | None = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Retry the decorated callable up to ``max_tries`` times.

    Each failure is logged. When every attempt fails, RetriesExhausted is
    raised with ``description`` as its message and the last error as cause.
    """
    if max_tries < 1:
        raise ValueError("Max tries must be > 0")

    retry_logger = log or logger

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            last_error: BaseException | None = None
            for attempt in range(1, max_tries + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_error = e
                    retry_logger.info(
                        f"{description} failed",
                        error=str(e),
                        attempt=attempt,
                        max_tries=max_tries,
                    )
            raise RetriesExhausted(description, cause=last_error) from last_error

        return wrapper

    return decorator
