"""
Task executors and the fork-join combinator.

Population building, fitness evaluation and breeding all split their input in
half above a size threshold, run the halves concurrently and merge the results
left-then-right. ``fork_join`` implements that shape once; callers provide the
per-leaf work and the merge.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Protocol, TypeVar

from .random import RNG, fork

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_DEFAULT_EXECUTOR: ThreadPoolExecutor | None = None
_DEFAULT_EXECUTOR_LOCK = threading.Lock()


class TaskExecutor(Protocol):
    """Anything with the ``concurrent.futures.Executor`` submit/shutdown surface."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future[Any]: ...

    def shutdown(self, wait: bool = True) -> None: ...


class SerialExecutor:
    """Runs every submitted task immediately in the calling thread."""

    def submit(self, fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> Future[T]:
        future: Future[T] = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:
            future.set_exception(exc)
        return future

    def shutdown(self, wait: bool = True) -> None:
        return None


def default_executor() -> ThreadPoolExecutor:
    """Process-wide thread pool shared by every engine that is not given its own executor."""
    global _DEFAULT_EXECUTOR
    with _DEFAULT_EXECUTOR_LOCK:
        if _DEFAULT_EXECUTOR is None:
            _DEFAULT_EXECUTOR = ThreadPoolExecutor(max_workers=os.cpu_count() or 1, thread_name_prefix="genevo")
        return _DEFAULT_EXECUTOR


def resolve_executor(name: str | None, *, max_workers: int | None = None) -> TaskExecutor:
    key = (name or "threads").lower()
    if key == "serial":
        logger.debug("Using serial executor")
        return SerialExecutor()
    if key in {"threads", "thread", "threadpool"}:
        if max_workers is None:
            logger.debug("Using shared thread pool executor")
            return default_executor()
        logger.debug("Using dedicated thread pool executor with %d workers", max_workers)
        return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="genevo")
    raise ValueError(f"Unknown executor '{name}'. Expected 'serial' or 'threads'.")


def fork_join(
    items: Sequence[T],
    leaf: Callable[[Sequence[T], RNG | None], R],
    merge: Callable[[R, R], R],
    *,
    threshold: int,
    executor: TaskExecutor,
    rng: RNG | None = None,
) -> R:
    """
    Recursively split ``items`` at the midpoint until a part is smaller than ``threshold``.

    Each split forks ``rng`` into a left and a right stream, so the value
    produced for every element depends only on the seed and the split
    structure, never on thread scheduling. The right half is submitted to
    ``executor`` while the left half runs in the calling thread; if the right
    task has not started by the time the left half is done, it is cancelled and
    run inline, which keeps nested waits on a bounded pool deadlock free.
    """
    if threshold < 2:
        raise ValueError("fork-join threshold must be at least 2.")
    if len(items) < threshold:
        return leaf(items, rng)

    mid = len(items) // 2
    left_rng, right_rng = fork(rng) if rng is not None else (None, None)
    left_items, right_items = items[:mid], items[mid:]

    def _right() -> R:
        return fork_join(right_items, leaf, merge, threshold=threshold, executor=executor, rng=right_rng)

    right_future = executor.submit(_right)
    try:
        left = fork_join(left_items, leaf, merge, threshold=threshold, executor=executor, rng=left_rng)
    except Exception:
        right_future.cancel()
        raise
    right = _right() if right_future.cancel() else right_future.result()
    return merge(left, right)


def concat(left: list[T], right: list[T]) -> list[T]:
    return left + right


__all__ = [
    "TaskExecutor",
    "SerialExecutor",
    "default_executor",
    "resolve_executor",
    "fork_join",
    "concat",
]
