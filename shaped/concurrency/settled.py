"""
Settled combinators
===================

Wait for every element regardless of failures; each association keeps
its element's Result. Only ShapeError fails the whole run.
"""

from __future__ import annotations

import asyncio
import typing
from collections.abc import Callable, Coroutine

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
from ..shape import Shape, classify, elements_of, rebuild, zip_elements
from ..writer import LazyCoroResultWriter, Log, WriterResult
from .resolve import ResolvePolicy


# ============================================================================
# Generic combinator (extract + wrap pattern)
# ============================================================================


def resolve_settledM[M, T, E, RawIn, RawOut](
    container: Container[Callable[[], Coroutine[typing.Any, typing.Any, RawIn]]],
    *,
    extract: Callable[[RawIn], Result[T, E]],
    combine: Callable[[typing.Any, list[RawIn]], RawOut],
    on_shape_error: Callable[[ShapeError], RawOut],
    wrap: Callable[[Callable[[], Coroutine[typing.Any, typing.Any, RawOut]]], M],
    policy: ResolvePolicy = ResolvePolicy(),
) -> M:
    """
    Generic all-settled resolve.

    combine receives the rebuilt container (Result per association)
    and all raws in iteration order. policy.cancel_pending is ignored:
    nothing is left pending.
    """
    shape = classify(container)
    if shape is Shape.UNSUPPORTED:
        error = ShapeError(type(container))

        async def reject() -> RawOut:
            return on_shape_error(error)

        return wrap(reject)

    elements = elements_of(container, shape)

    async def run() -> RawOut:
        limiter = concurrency_limiter(policy.concurrency)

        async def settle(thunk: Callable[[], Coroutine[typing.Any, typing.Any, RawIn]]) -> RawIn:
            async with limiter:
                return await thunk()

        raws: list[RawIn] = await asyncio.gather(*(settle(el.awaitable) for el in elements))
        results = [extract(raw) for raw in raws]
        output = rebuild(container, shape, zip_elements(elements, results))
        return combine(output, raws)

    return wrap(run)


# ============================================================================
# Sugar for LazyCoroResult
# ============================================================================


def resolve_settled[T, E](
    container: Container[LazyCoroResult[T, E]],
    *,
    policy: ResolvePolicy = ResolvePolicy(),
) -> LCR[typing.Any, ShapeError]:
    """
    Run all concurrently, never fail on element errors.

    [Interp[T, E]] -> Interp[[Result[T, E]], ShapeError], same for dict / set.
    """
    def combine(output: typing.Any, raws: list[Result[T, E]]) -> Result[typing.Any, ShapeError]:
        _ = raws
        return Ok(output)

    def on_shape_error(err: ShapeError) -> Result[typing.Any, ShapeError]:
        return Error(err)

    return resolve_settledM(
        container,
        extract=identity,
        combine=combine,
        on_shape_error=on_shape_error,
        wrap=LazyCoroResult,
        policy=policy,
    )


# ============================================================================
# Sugar for LazyCoroResultWriter
# ============================================================================


def resolve_settled_w[T, E, W](
    container: Container[LazyCoroResultWriter[T, E, W]],
    *,
    policy: ResolvePolicy = ResolvePolicy(),
) -> LazyCoroResultWriter[typing.Any, ShapeError, W]:
    """All-settled resolve; logs of every element merged in iteration order."""
    def combine(
        output: typing.Any,
        raws: list[WriterResult[T, E, Log[W]]],
    ) -> WriterResult[typing.Any, ShapeError, Log[W]]:
        return WriterResult(Ok(output), merge_logs(wr.log for wr in raws))

    def on_shape_error(err: ShapeError) -> WriterResult[typing.Any, ShapeError, Log[W]]:
        return WriterResult(Error(err), Log[W]())

    return resolve_settledM(
        container,
        extract=extract_writer_result,
        combine=combine,
        on_shape_error=on_shape_error,
        wrap=wrap_lazy_coro_result_writer,
        policy=policy,
    )


__all__ = ("resolve_settled", "resolve_settled_w", "resolve_settledM")
