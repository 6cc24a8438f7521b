"""
Shape-preserving concurrent resolution.

Resolve a list / tuple / dict / set of async computations and get back
a container of the same kind: [Interp[T]] -> Interp[[T]],
{k: Interp[T]} -> Interp[{k: T}], {Interp[T]} -> Interp[{T}].

Architecture:
- shape.classify decides the shape once, at entry
- shape.rebuild extracts (association, awaitable) elements and rebuilds
- Generic combinators (*M functions) work with any monad via extract + wrap pattern
- Sugar functions for LazyCoroResult (no suffix)
- Sugar functions for LazyCoroResultWriter (*_w suffix)
- gather_matching for plain awaitables
"""

# Core types
from ._types import LCR, Association, Container
from ._errors import ShapeError

# Internal helpers (for custom monads)
from . import _helpers

# Shape classification / reconstruction
from .shape import Element, Shape, classify, elements_of, rebuild, zip_elements

# Writer monad
from . import writer
from .writer import LazyCoroResultWriter, Log, WriterResult, writer_error, writer_ok

# Concurrency
from .concurrency import (
    ResolveEvent,
    ResolvePolicy,
    # LazyCoroResult
    resolve_matching,
    resolve_matching_traced,
    resolve_settled,
    # LazyCoroResultWriter
    resolve_matching_w,
    resolve_settled_w,
    # Generic
    resolve_elementsM,
    resolve_matchingM,
    resolve_settledM,
    # Plain awaitables
    gather_matching,
)
from .concurrency.fluent import resolve_policy

__all__ = (
    # Types
    "LCR",
    "Association",
    "Container",
    # Errors
    "ShapeError",
    # Helpers
    "_helpers",
    # Shape
    "Shape",
    "classify",
    "Element",
    "elements_of",
    "rebuild",
    "zip_elements",
    # Writer
    "writer",
    "LazyCoroResultWriter",
    "Log",
    "WriterResult",
    "writer_ok",
    "writer_error",
    # Policies
    "ResolvePolicy",
    "resolve_policy",
    "ResolveEvent",
    # LazyCoroResult
    "resolve_matching",
    "resolve_matching_traced",
    "resolve_settled",
    # LazyCoroResultWriter
    "resolve_matching_w",
    "resolve_settled_w",
    # Generic
    "resolve_elementsM",
    "resolve_matchingM",
    "resolve_settledM",
    # Plain awaitables
    "gather_matching",
)
