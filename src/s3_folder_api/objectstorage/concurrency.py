"""Bounded fan-out of per-object storage calls.

Folder transforms and bulk uploads issue one storage call (or a short
sequence of calls) per object. ``fan_out`` runs them on a thread pool capped
at ``max_workers`` and stops starting new work as soon as one task fails.
Tasks already running are allowed to finish, so the caller always sees a
settled state: every item is either completed, failed or skipped.
"""

import contextvars
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Generic, Optional, Sequence, TypeVar

from s3_folder_api.core import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class _Skipped(Exception):
    """Marks a task that was dequeued after another task had failed."""


@dataclass
class FanOutResult(Generic[T, R]):
    """Outcome of a ``fan_out`` call.

    Attributes:
        completed: (item, result) pairs for tasks that succeeded
        skipped: Items that were never started because of an earlier failure
        failed_item: Item whose task failed first, if any
        error: The first failure, if any
    """

    completed: list[tuple[T, R]] = field(default_factory=list)
    skipped: list[T] = field(default_factory=list)
    failed_item: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def fan_out(
    items: Sequence[T],
    task: Callable[[T], R],
    max_workers: int,
) -> FanOutResult[T, R]:
    """Run ``task`` for every item with at most ``max_workers`` in flight.

    The first failing task cancels everything that has not started yet.
    Completion order is not preserved; ``completed`` follows ``items`` order.
    """
    result: FanOutResult[T, R] = FanOutResult()
    if not items:
        return result

    abort = threading.Event()
    lock = threading.Lock()

    def run(item: T) -> R:
        if abort.is_set():
            raise _Skipped()
        try:
            return task(item)
        except Exception as e:
            with lock:
                if result.error is None:
                    result.error = e
                    result.failed_item = item
            abort.set()
            raise

    workers = max(1, min(max_workers, len(items)))
    with ThreadPoolExecutor(
        max_workers=workers, thread_name_prefix="s3-folder-api"
    ) as pool:
        futures = [
            (pool.submit(contextvars.copy_context().run, run, item), item)
            for item in items
        ]
        _, pending = wait([f for f, _ in futures], return_when=FIRST_EXCEPTION)
        for future in pending:
            future.cancel()

    for future, item in futures:
        if future.cancelled():
            result.skipped.append(item)
            continue
        error = future.exception()
        if error is None:
            result.completed.append((item, future.result()))
        elif isinstance(error, _Skipped):
            result.skipped.append(item)

    if result.error is not None:
        logger.warning(
            "Fan-out aborted after failure",
            completed=len(result.completed),
            skipped=len(result.skipped),
            error=str(result.error),
        )
    return result
