"""Ordered, bounded-concurrency map over a ``ThreadPoolExecutor``.

Used to parse several statement files at once. The call returns only after
every mapper call has finished (or the first failure when failing fast), so
callers never observe a partial result.

- ``concurrency`` caps the number of mapper calls in flight.
- Results keep input order.
- ``stop_on_error=True`` re-raises the first failure and cancels work that
  has not started; ``stop_on_error=False`` waits for everything and raises an
  ``ExceptionGroup`` of all failures.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import ALL_COMPLETED, FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import TypeVar

InT = TypeVar("InT")
OutT = TypeVar("OutT")


def p_map(
    iterable: Iterable[InT],
    mapper: Callable[[InT], OutT],
    *,
    concurrency: int,
    stop_on_error: bool = True,
) -> list[OutT]:
    """Map ``iterable`` through ``mapper`` with at most ``concurrency`` workers."""

    if not isinstance(concurrency, int) or isinstance(concurrency, bool) or concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    items = list(iterable)
    if not items:
        return []

    with ThreadPoolExecutor(
        max_workers=min(concurrency, len(items)), thread_name_prefix="st-parse"
    ) as pool:
        futures: list[Future[OutT]] = [pool.submit(mapper, item) for item in items]
        done, _pending = wait(
            futures, return_when=FIRST_EXCEPTION if stop_on_error else ALL_COMPLETED
        )
        if stop_on_error:
            failed = next((f for f in futures if f in done and f.exception() is not None), None)
            if failed is not None:
                pool.shutdown(wait=False, cancel_futures=True)
                raise failed.exception()  # type: ignore[misc]

    errors = [e for e in (f.exception() for f in futures) if isinstance(e, Exception)]
    if errors:
        raise ExceptionGroup("p_map: one or more mapper calls failed", errors)

    return [f.result() for f in futures]


__all__ = ["p_map"]
