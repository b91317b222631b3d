from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class TimedResult(Generic[T]):
    """Return value of a call together with the seconds it took."""

    result: T
    time: float


def timed(func: Callable[..., T], *args: Any, **kwargs: Any) -> TimedResult[T]:
    start = time.perf_counter()
    result = func(*args, **kwargs)
    return TimedResult(result=result, time=time.perf_counter() - start)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


__all__ = ["TimedResult", "timed", "utc_now"]
