"""LazyCoroResultWriter Monad

Deferred async computation that settles to a Result and a Log.
Elements of this kind can be resolved with resolve_matching_w(),
and resolve_matching_traced() produces one."""

from __future__ import annotations

import typing
from collections.abc import Callable, Coroutine
from typing import assert_never

from kungfu import Error, LazyCoroResult, Ok, Result

from .log import Log
from .result import WriterResult


class LazyCoroResultWriter[T, E, W]:
    """Lazy Coroutine Result Writer.

    Nothing runs until the writer is called or awaited; every call starts
    a fresh run of the wrapped thunk.
    """

    __slots__ = ("_value",)

    def __init__(
        self,
        value: Callable[[], Coroutine[typing.Any, typing.Any, WriterResult[T, E, Log[W]]]],
        /,
    ) -> None:
        self._value = value

    @staticmethod
    def from_lazy_coro_result[V, Err, LogT](
        lazy: LazyCoroResult[V, Err],
        log_type: type[LogT],
    ) -> LazyCoroResultWriter[V, Err, LogT]:
        """Run a kungfu LazyCoroResult with an empty log."""
        _ = log_type  # Used only for type inference

        async def wrapper() -> WriterResult[V, Err, Log[LogT]]:
            result = await lazy
            return WriterResult(result, Log[LogT]())

        return LazyCoroResultWriter(wrapper)

    def map[U](self, f: Callable[[T], U], /) -> LazyCoroResultWriter[U, E, W]:
        """Apply f to the success value, keep the log."""

        async def wrapper() -> WriterResult[U, E, Log[W]]:
            wr = await self()
            return WriterResult(wr.result.map(f), wr.log)

        return LazyCoroResultWriter(wrapper)

    def with_log(self, *entries: W) -> LazyCoroResultWriter[T, E, W]:
        """Append entries after the computation's own log."""

        async def wrapper() -> WriterResult[T, E, Log[W]]:
            wr = await self()
            return WriterResult(wr.result, wr.log.combine(Log.of(*entries)))

        return LazyCoroResultWriter(wrapper)

    def to_lazy_coro_result(self) -> LazyCoroResult[tuple[T, Log[W]], E]:
        """Drop into kungfu LazyCoroResult, log travels with the success value."""

        async def wrapper() -> Result[tuple[T, Log[W]], E]:
            wr = await self()
            match wr.result:
                case Ok(value):
                    return Ok((value, wr.log))
                case Error(err):
                    return Error(err)
                case _ as unreachable:
                    assert_never(unreachable)

        return LazyCoroResult(wrapper)

    def __call__(self) -> Coroutine[typing.Any, typing.Any, WriterResult[T, E, Log[W]]]:
        return self._value()

    def __await__(self) -> typing.Generator[typing.Any, None, WriterResult[T, E, Log[W]]]:
        return self().__await__()


def writer_ok[T, W](
    value: T,
    *log_entries: W,
) -> LazyCoroResultWriter[T, typing.Never, W]:
    """Writer that settles to Ok(value) with the given entries."""

    async def wrapper() -> WriterResult[T, typing.Never, Log[W]]:
        return WriterResult(Ok(value), Log.of(*log_entries))

    return LazyCoroResultWriter(wrapper)


def writer_error[E, W](
    error: E,
    *log_entries: W,
) -> LazyCoroResultWriter[typing.Never, E, W]:
    """Writer that settles to Error(error) with the given entries."""

    async def wrapper() -> WriterResult[typing.Never, E, Log[W]]:
        return WriterResult(Error(error), Log.of(*log_entries))

    return LazyCoroResultWriter(wrapper)


__all__ = (
    "LazyCoroResultWriter",
    "writer_ok",
    "writer_error",
)
