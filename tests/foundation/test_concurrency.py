"""Fork-join combinator and executor selection."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from genevo.foundation.concurrency import (
    SerialExecutor,
    concat,
    default_executor,
    fork_join,
    resolve_executor,
)
from genevo.foundation.random import from_seed


def _draws(items, rng):
    return [float(rng.random()) for _ in items]


def test_fork_join_preserves_order(serial_executor):
    result = fork_join(list(range(200)), lambda items, _rng: list(items), concat, threshold=7, executor=serial_executor)
    assert result == list(range(200))


def test_fork_join_below_threshold_runs_single_leaf(serial_executor):
    calls = []

    def leaf(items, _rng):
        calls.append(list(items))
        return list(items)

    fork_join([1, 2, 3], leaf, concat, threshold=4, executor=serial_executor)
    assert calls == [[1, 2, 3]]


def test_fork_join_splits_at_threshold(serial_executor):
    sizes = []

    def leaf(items, _rng):
        sizes.append(len(items))
        return list(items)

    fork_join(list(range(10)), leaf, concat, threshold=4, executor=serial_executor)
    assert sum(sizes) == 10
    assert all(size < 4 for size in sizes)


@pytest.mark.parametrize("threshold", [0, 1])
def test_fork_join_rejects_small_threshold(serial_executor, threshold):
    with pytest.raises(ValueError):
        fork_join([1, 2], lambda items, _rng: list(items), concat, threshold=threshold, executor=serial_executor)


def test_fork_join_results_do_not_depend_on_executor(seed):
    items = list(range(300))
    serial = fork_join(items, _draws, concat, threshold=10, executor=SerialExecutor(), rng=from_seed(seed))
    with ThreadPoolExecutor(max_workers=4) as pool:
        threaded = fork_join(items, _draws, concat, threshold=10, executor=pool, rng=from_seed(seed))
    np.testing.assert_array_equal(serial, threaded)


def test_fork_join_leaves_get_distinct_streams(seed, serial_executor):
    values = fork_join(list(range(64)), _draws, concat, threshold=2, executor=serial_executor, rng=from_seed(seed))
    assert len(set(values)) == len(values)


def test_fork_join_propagates_leaf_errors(serial_executor):
    def leaf(items, _rng):
        if 150 in items:
            raise RuntimeError("boom")
        return list(items)

    with pytest.raises(RuntimeError, match="boom"):
        fork_join(list(range(200)), leaf, concat, threshold=16, executor=serial_executor)


def test_fork_join_on_single_worker_pool_does_not_deadlock():
    with ThreadPoolExecutor(max_workers=1) as pool:
        result = fork_join(list(range(1000)), lambda items, _rng: list(items), concat, threshold=2, executor=pool)
    assert result == list(range(1000))


def test_fork_join_uses_executor_threads():
    thread_names = set()
    lock = threading.Lock()

    def leaf(items, _rng):
        with lock:
            thread_names.add(threading.current_thread().name)
        return list(items)

    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="worker") as pool:
        fork_join(list(range(100)), leaf, concat, threshold=10, executor=pool)
    assert threading.current_thread().name in thread_names


def test_serial_executor_captures_exceptions():
    future = SerialExecutor().submit(lambda: 1 / 0)
    assert future.done()
    with pytest.raises(ZeroDivisionError):
        future.result()


def test_resolve_executor():
    assert isinstance(resolve_executor("serial"), SerialExecutor)
    assert resolve_executor("threads") is default_executor()
    assert resolve_executor(None) is default_executor()
    dedicated = resolve_executor("threads", max_workers=2)
    try:
        assert isinstance(dedicated, ThreadPoolExecutor)
        assert dedicated is not default_executor()
    finally:
        dedicated.shutdown()


def test_resolve_executor_rejects_unknown_names():
    with pytest.raises(ValueError, match="Unknown executor"):
        resolve_executor("processes")
