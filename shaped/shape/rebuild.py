"""
Element extraction and reconstruction
=====================================

Разбор контейнера на (association, awaitable) и сборка контейнера той же формы.

Associations are threaded alongside every awaitable from extraction on,
so rebuilding never depends on re-deriving keys from the input.
"""

from __future__ import annotations

from collections import OrderedDict, defaultdict, deque
from collections.abc import Iterable, Mapping, MutableSequence, MutableSet, Sequence, Set
from dataclasses import dataclass
from types import MappingProxyType
from typing import assert_never

from .._types import Association, Container
from .classify import Shape


@dataclass(frozen=True)
class Element[A]:
    """One awaitable pulled out of a container, with its association."""

    association: Association
    awaitable: A


def elements_of[A](container: Container[A], shape: Shape) -> list[Element[A]]:
    """
    Walk container in its native iteration order.

    SEQUENCE -> (index, item), MAPPING -> (key, value),
    UNIQUE_SET -> (item, item).
    """
    match shape:
        case Shape.SEQUENCE:
            return [Element(i, item) for i, item in enumerate(container)]
        case Shape.MAPPING:
            return [Element(k, v) for k, v in container.items()]
        case Shape.UNIQUE_SET:
            return [Element(item, item) for item in container]
        case Shape.UNSUPPORTED:
            raise ValueError("elements_of(): UNSUPPORTED container has no elements")
        case _ as unreachable:
            assert_never(unreachable)


def zip_elements[A, V](
    elements: Sequence[Element[A]],
    values: Sequence[V],
) -> list[tuple[Association, V]]:
    """Pair resolved values with associations (positional correspondence)."""
    if len(elements) != len(values):
        raise RuntimeError(
            f"zip_elements(): internal error ({len(values)} values for {len(elements)} elements)"
        )
    return [(el.association, v) for el, v in zip(elements, values)]


def rebuild[V](
    container: object,
    shape: Shape,
    resolved: Sequence[tuple[Association, V]],
) -> object:
    """
    Build a fresh container of the same shape as `container`.

    `resolved` is in original iteration order. The input is never mutated.
    """
    match shape:
        case Shape.SEQUENCE:
            return _build_sequence(container, (v for _, v in resolved))
        case Shape.MAPPING:
            return _build_mapping(container, resolved)
        case Shape.UNIQUE_SET:
            return _build_set(container, (v for _, v in resolved))
        case Shape.UNSUPPORTED:
            raise ValueError("rebuild(): cannot build UNSUPPORTED container")
        case _ as unreachable:
            assert_never(unreachable)


# ============================================================================
# Per-shape builders
# ============================================================================

def _build_sequence[V](container: object, values: Iterable[V]) -> Sequence[V]:
    kind = type(container)
    if issubclass(kind, tuple) and hasattr(kind, "_make"):
        # namedtuple
        return kind._make(values)  # type: ignore[attr-defined]
    if kind is deque:
        return deque(values, maxlen=container.maxlen)  # type: ignore[attr-defined]
    if isinstance(container, MutableSequence):
        return list(values)
    return tuple(values)


def _build_mapping[V](
    container: object,
    pairs: Sequence[tuple[Association, V]],
) -> Mapping[Association, V]:
    kind = type(container)
    if kind is defaultdict:
        out: defaultdict[Association, V] = defaultdict(container.default_factory)  # type: ignore[attr-defined]
        out.update(pairs)
        return out
    if kind is MappingProxyType:
        return MappingProxyType(dict(pairs))
    if kind is OrderedDict:
        return OrderedDict(pairs)
    return dict(pairs)


def _build_set[V](container: object, values: Iterable[V]) -> Set[V]:
    if isinstance(container, MutableSet):
        return set(values)
    return frozenset(values)


__all__ = ("Element", "elements_of", "rebuild", "zip_elements")
