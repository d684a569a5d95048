"""Background worker for store operations.

Discovery, mutation and backup may block on slow registry reads, so
front-ends submit them here instead of running them on their own
thread. The single worker thread runs jobs one at a time in submission
order.
"""

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from types import TracebackType
from typing import Any, Self, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BackgroundWorker:
    """Serializes store jobs on one background thread.

    Example:
        >>> with BackgroundWorker() as worker:
        ...     future = worker.submit(scanner.discover)
        ...     entries = future.result()
    """

    def __init__(self, name: str = "regctl") -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)

    def submit(self, job: Callable[..., T], *args: Any, **kwargs: Any) -> Future[T]:
        """Queue a job.

        Returns:
            Future resolving to the job's return value or raising its exception.
        """
        logger.debug("Queued %s", getattr(job, "__qualname__", job))
        return self._executor.submit(job, *args, **kwargs)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting jobs; optionally wait for queued ones to finish."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()
