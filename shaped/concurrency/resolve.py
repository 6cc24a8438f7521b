"""
Resolve combinators
===================

Shape-preserving gather: list -> list, dict -> dict, set -> set.

Классификация один раз на входе, ожидание делегируется asyncio.gather,
ассоциации (index / key / identity) едут рядом с каждым awaitable.
"""

from __future__ import annotations

import asyncio
import typing
from collections.abc import Awaitable, Callable, Coroutine, Sequence
from dataclasses import dataclass

from kungfu import Error, LazyCoroResult, Ok, Result

from .._errors import ShapeError
from .._helpers import (
    concurrency_limiter,
    extract_writer_result,
    identity,
    merge_logs,
    wrap_lazy_coro_result_writer,
)
from .._types import LCR, Container
from ..shape import Element, Shape, classify, elements_of, rebuild, zip_elements
from ..writer import LazyCoroResultWriter, Log, WriterResult


@dataclass(frozen=True, slots=True)
class ResolvePolicy:
    """
    Configuration for resolve_matching*: cancellation and concurrency bound.

    cancel_pending: cancel still-running elements once one has failed
    concurrency: max elements running at once (None = unbounded)
    """

    cancel_pending: bool = True
    concurrency: int | None = None

    def __post_init__(self) -> None:
        if self.concurrency is not None and self.concurrency < 1:
            raise ValueError("ResolvePolicy.concurrency must be >= 1")


class _Rejected(Exception):
    """Raw of the first element that settled with Error, raised to stop gather."""

    def __init__(self, raw: object) -> None:
        self.raw = raw
        super().__init__()


def _cancel(tasks: Sequence[asyncio.Task[typing.Any]]) -> None:
    for t in tasks:
        if not t.done():
            t.cancel()


def _completed[RawIn](tasks: Sequence[asyncio.Task[RawIn]]) -> list[RawIn]:
    """Raws of tasks that settled before the failure, in iteration order."""
    raws: list[RawIn] = []
    for t in tasks:
        if not t.done() or t.cancelled():
            continue
        exc = t.exception()
        if exc is None:
            raws.append(t.result())
        elif isinstance(exc, _Rejected):
            raws.append(typing.cast("RawIn", exc.raw))
    return raws


# ============================================================================
# Generic combinator (extract + wrap pattern)
# ============================================================================


def resolve_matchingM[M, T, E, RawIn, RawOut](
    container: Container[Callable[[], Coroutine[typing.Any, typing.Any, RawIn]]],
    *,
    extract: Callable[[RawIn], Result[T, E]],
    combine_ok: Callable[[typing.Any, list[RawIn]], RawOut],
    combine_err: Callable[[E, list[RawIn]], RawOut],
    on_shape_error: Callable[[ShapeError], RawOut],
    wrap: Callable[[Callable[[], Coroutine[typing.Any, typing.Any, RawOut]]], M],
    policy: ResolvePolicy = ResolvePolicy(),
) -> M:
    """
    Generic shape-preserving resolve. Fail-fast on first error.

    Args:
        container: sequence / mapping / set of computations
        extract: Function to extract Result[T, E] from each RawIn
        combine_ok: Builds RawOut from the rebuilt container and all raws
        combine_err: Builds RawOut from the first error and the raws
                     of elements that completed before it
        on_shape_error: Builds RawOut for an unsupported container
        wrap: Constructor to wrap thunk back into monad M
        policy: cancellation / concurrency settings
    """
    shape = classify(container)
    if shape is Shape.UNSUPPORTED:
        error = ShapeError(type(container))

        async def reject() -> RawOut:
            return on_shape_error(error)

        return wrap(reject)

    return resolve_elementsM(
        container,
        shape,
        elements_of(container, shape),
        extract=extract,
        combine_ok=combine_ok,
        combine_err=combine_err,
        wrap=wrap,
        policy=policy,
    )


def resolve_elementsM[M, T, E, RawIn, RawOut](
    container: object,
    shape: Shape,
    elements: Sequence[Element[Callable[[], Coroutine[typing.Any, typing.Any, RawIn]]]],
    *,
    extract: Callable[[RawIn], Result[T, E]],
    combine_ok: Callable[[typing.Any, list[RawIn]], RawOut],
    combine_err: Callable[[E, list[RawIn]], RawOut],
    wrap: Callable[[Callable[[], Coroutine[typing.Any, typing.Any, RawOut]]], M],
    policy: ResolvePolicy = ResolvePolicy(),
) -> M:
    """
    resolve_matchingM() after classification: `shape` is already known
    (never UNSUPPORTED) and `elements` are already extracted.

    The output is rebuilt after `container`, in the order of `elements`.
    """

    async def run() -> RawOut:
        limiter = concurrency_limiter(policy.concurrency)

        async def settle(thunk: Callable[[], Coroutine[typing.Any, typing.Any, RawIn]]) -> RawIn:
            async with limiter:
                raw = await thunk()
            match extract(raw):
                case Error(_):
                    raise _Rejected(raw)
                case _:
                    return raw

        tasks = [asyncio.create_task(settle(el.awaitable)) for el in elements]
        try:
            raws: list[RawIn] = await asyncio.gather(*tasks)
        except _Rejected as rejected:
            match extract(typing.cast("RawIn", rejected.raw)):
                case Error(e):
                    return combine_err(e, _completed(tasks))
                case _:
                    raise RuntimeError("resolve_elementsM(): internal error (rejected Ok)") from None
        finally:
            if policy.cancel_pending:
                _cancel(tasks)

        values: list[T] = []
        for raw in raws:
            match extract(raw):
                case Ok(v):
                    values.append(v)
                case Error(_):
                    raise RuntimeError("resolve_elementsM(): internal error (Error after gather)")

        output = rebuild(container, shape, zip_elements(elements, values))
        return combine_ok(output, raws)

    return wrap(run)


# ============================================================================
# Sugar for LazyCoroResult
# ============================================================================


@typing.overload
def resolve_matching[T, E](
    container: list[LazyCoroResult[T, E]],
    *,
    policy: ResolvePolicy = ...,
) -> LCR[list[T], E | ShapeError]: ...


@typing.overload
def resolve_matching[T, E](
    container: tuple[LazyCoroResult[T, E], ...],
    *,
    policy: ResolvePolicy = ...,
) -> LCR[tuple[T, ...], E | ShapeError]: ...


@typing.overload
def resolve_matching[K, T, E](
    container: dict[K, LazyCoroResult[T, E]],
    *,
    policy: ResolvePolicy = ...,
) -> LCR[dict[K, T], E | ShapeError]: ...


@typing.overload
def resolve_matching[T, E](
    container: set[LazyCoroResult[T, E]],
    *,
    policy: ResolvePolicy = ...,
) -> LCR[set[T], E | ShapeError]: ...


@typing.overload
def resolve_matching[T, E](
    container: object,
    *,
    policy: ResolvePolicy = ...,
) -> LCR[typing.Any, E | ShapeError]: ...


def resolve_matching[T, E](
    container: object,
    *,
    policy: ResolvePolicy = ResolvePolicy(),
) -> LCR[typing.Any, E | ShapeError]:
    """
    Run all concurrently, rebuild a container of the same shape.

    [Interp[T]] -> Interp[[T]], {k: Interp[T]} -> Interp[{k: T}],
    {Interp[T]} -> Interp[{T}]. Fail-fast: first Error wins, unchanged.
    Unsupported container -> Error(ShapeError), nothing is run.

    NOTE: a set rebuilds by hashing resolved values. Unhashable values
          (list, dict) raise TypeError from the run; that is not an Error.
    """
    def combine_ok(output: typing.Any, raws: list[Result[T, E]]) -> Result[typing.Any, E | ShapeError]:
        _ = raws
        return Ok(output)

    def combine_err(e: E, raws: list[Result[T, E]]) -> Result[typing.Any, E | ShapeError]:
        _ = raws
        return Error(e)

    def on_shape_error(err: ShapeError) -> Result[typing.Any, E | ShapeError]:
        return Error(err)

    return resolve_matchingM(
        typing.cast("Container[LazyCoroResult[T, E]]", container),
        extract=identity,
        combine_ok=combine_ok,
        combine_err=combine_err,
        on_shape_error=on_shape_error,
        wrap=LazyCoroResult,
        policy=policy,
    )


# ============================================================================
# Sugar for LazyCoroResultWriter
# ============================================================================


def writer_combine_ok[T, E, W](
    output: typing.Any,
    raws: list[WriterResult[T, E, Log[W]]],
) -> WriterResult[typing.Any, E | ShapeError, Log[W]]:
    return WriterResult(Ok(output), merge_logs(wr.log for wr in raws))


def writer_combine_err[T, E, W](
    e: E,
    raws: list[WriterResult[T, E, Log[W]]],
) -> WriterResult[typing.Any, E | ShapeError, Log[W]]:
    return WriterResult(Error(e), merge_logs(wr.log for wr in raws))


def resolve_matching_w[T, E, W](
    container: Container[LazyCoroResultWriter[T, E, W]],
    *,
    policy: ResolvePolicy = ResolvePolicy(),
) -> LazyCoroResultWriter[typing.Any, E | ShapeError, W]:
    """
    Run all concurrently, rebuild a container of the same shape, merge logs.

    Logs are merged in iteration order. On failure only logs of elements
    that completed before the failure are kept.
    """
    def on_shape_error(err: ShapeError) -> WriterResult[typing.Any, E | ShapeError, Log[W]]:
        return WriterResult(Error(err), Log[W]())

    return resolve_matchingM(
        container,
        extract=extract_writer_result,
        combine_ok=writer_combine_ok,
        combine_err=writer_combine_err,
        on_shape_error=on_shape_error,
        wrap=wrap_lazy_coro_result_writer,
        policy=policy,
    )


# ============================================================================
# Plain awaitables (exception based)
# ============================================================================


@typing.overload
async def gather_matching[T](container: list[Awaitable[T]]) -> list[T]: ...


@typing.overload
async def gather_matching[T](container: tuple[Awaitable[T], ...]) -> tuple[T, ...]: ...


@typing.overload
async def gather_matching[K, T](container: dict[K, Awaitable[T]]) -> dict[K, T]: ...


@typing.overload
async def gather_matching(container: object) -> typing.Any: ...


async def gather_matching(container: object) -> typing.Any:
    """
    asyncio.gather that keeps the container shape.

    Raises ShapeError for unsupported containers before touching any element.
    The first element exception propagates unchanged.

    Example:
        await gather_matching({"Ryu": fetch(7), "Ken": fetch(3)})
        # {"Ryu": 7, "Ken": 3}
    """
    shape = classify(container)
    if shape is Shape.UNSUPPORTED:
        raise ShapeError(type(container))

    elements = elements_of(typing.cast("Container[Awaitable[typing.Any]]", container), shape)
    values = await asyncio.gather(*(el.awaitable for el in elements))
    return rebuild(container, shape, zip_elements(elements, values))


__all__ = (
    "ResolvePolicy",
    "resolve_matching",
    "resolve_matching_w",
    "resolve_matchingM",
    "resolve_elementsM",
    "gather_matching",
)
