"""Concurrent, independent fetches.

Views that load several resources at once issue the requests in parallel and
join them all before rendering. A failing fetch is reported on its own and
never prevents the others from completing.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar

from .client import BackendError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class FetchResult(Generic[T]):
    """Outcome of one named fetch."""

    value: Optional[T] = None
    error: Optional[BackendError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def fetch_all(
    tasks: Mapping[str, Callable[[], Any]],
    max_workers: int = 4,
) -> dict[str, FetchResult]:
    """Run every task concurrently and collect a result per name.

    Only BackendError is captured per task; any other exception is a
    programming error and propagates once all tasks have finished.

    Args:
        tasks: Name to zero-argument callable
        max_workers: Thread pool size

    Returns:
        Name to FetchResult, in the order of `tasks`
    """
    if not tasks:
        return {}

    results: dict[str, FetchResult] = {}
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(tasks)))) as pool:
        futures = {name: pool.submit(task) for name, task in tasks.items()}

    unexpected: Optional[BaseException] = None
    for name, future in futures.items():
        exc = future.exception()
        if exc is None:
            results[name] = FetchResult(value=future.result())
        elif isinstance(exc, BackendError):
            logger.warning("Fetch %r failed: %s", name, exc)
            results[name] = FetchResult(error=exc)
        elif unexpected is None:
            unexpected = exc

    if unexpected is not None:
        raise unexpected
    return results
