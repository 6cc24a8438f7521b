"""Internal helpers for shaped.

Extract / wrap functions shared by the LazyCoroResult and Writer sugar.
Not part of the public API, but usable for plugging custom monads
into resolve_matchingM / resolve_settledM."""

from __future__ import annotations

import asyncio
import contextlib
import typing
from collections.abc import Callable, Coroutine, Iterable

from kungfu import Result

from .writer import LazyCoroResultWriter, Log, WriterResult


def identity[T](x: T) -> T:
    return x


# Extract functions (Raw -> Result[T, E])
def extract_writer_result[T, E, W](wr: WriterResult[T, E, Log[W]]) -> Result[T, E]:
    """
    Extract Result from WriterResult.

    LazyCoroResult's Raw IS Result[T, E], so there `identity` is enough.
    """
    return wr.result


# Wrap functions (Fn -> M)
def wrap_lazy_coro_result_writer[T, E, W](
    fn: Callable[[], Coroutine[typing.Any, typing.Any, WriterResult[T, E, Log[W]]]]
) -> LazyCoroResultWriter[T, E, W]:
    return LazyCoroResultWriter(fn)


def merge_logs[W](logs: Iterable[Log[W]]) -> Log[W]:
    """
    Fold logs left to right with Log.combine.

    Usage:
        merged = merge_logs(wr.log for wr in raws)
    """
    merged = Log[W]()
    for log in logs:
        merged = merged.combine(log)
    return merged


# Concurrency limit
def concurrency_limiter(
    concurrency: int | None,
) -> contextlib.AbstractAsyncContextManager[typing.Any]:
    """
    Semaphore for bounded runs, no-op context for unbounded ones.

    Must be created inside the running loop (once per run).
    """
    if concurrency is None:
        return contextlib.nullcontext()
    return asyncio.Semaphore(concurrency)


__all__ = (
    "identity",
    "extract_writer_result",
    "wrap_lazy_coro_result_writer",
    "merge_logs",
    "concurrency_limiter",
)
