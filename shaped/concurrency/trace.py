"""
Traced resolve
==============

resolve_matching() that writes a ResolveEvent per settled element
into the Writer log instead of a global logger.
"""

from __future__ import annotations

import typing
from dataclasses import dataclass
from typing import Literal, assert_never

from kungfu import Error, LazyCoroResult, Ok

from .._errors import ShapeError
from .._helpers import extract_writer_result, wrap_lazy_coro_result_writer
from .._types import Association, Container
from ..shape import Element, Shape, classify, elements_of
from ..writer import LazyCoroResultWriter, Log, WriterResult
from .resolve import ResolvePolicy, resolve_elementsM, writer_combine_err, writer_combine_ok


@dataclass(frozen=True, slots=True)
class ResolveEvent:
    """One element settled: where it sits in the container and how it went."""

    shape: Shape
    association: Association
    outcome: Literal["ok", "error"]


def _traced[T, E](
    shape: Shape,
    association: Association,
    interp: LazyCoroResult[T, E],
) -> LazyCoroResultWriter[T, E, ResolveEvent]:
    async def run() -> WriterResult[T, E, Log[ResolveEvent]]:
        result = await interp
        match result:
            case Ok(_):
                event = ResolveEvent(shape, association, "ok")
            case Error(_):
                event = ResolveEvent(shape, association, "error")
            case _ as unreachable:
                assert_never(unreachable)
        return WriterResult(result, Log.of(event))

    return LazyCoroResultWriter(run)


def resolve_matching_traced[T, E](
    container: Container[LazyCoroResult[T, E]],
    *,
    policy: ResolvePolicy = ResolvePolicy(),
) -> LazyCoroResultWriter[typing.Any, E | ShapeError, ResolveEvent]:
    """
    resolve_matching() with a log of ResolveEvent, in iteration order.

    On failure the log holds events of elements settled before the failure.
    Unsupported container -> Error(ShapeError) with an empty log.
    """
    shape = classify(container)
    if shape is Shape.UNSUPPORTED:
        error = ShapeError(type(container))

        async def reject() -> WriterResult[typing.Any, E | ShapeError, Log[ResolveEvent]]:
            return WriterResult(Error(error), Log[ResolveEvent]())

        return LazyCoroResultWriter(reject)

    elements = [
        Element(el.association, _traced(shape, el.association, el.awaitable))
        for el in elements_of(container, shape)
    ]
    return resolve_elementsM(
        container,
        shape,
        elements,
        extract=extract_writer_result,
        combine_ok=writer_combine_ok,
        combine_err=writer_combine_err,
        wrap=wrap_lazy_coro_result_writer,
        policy=policy,
    )


__all__ = ("ResolveEvent", "resolve_matching_traced")
