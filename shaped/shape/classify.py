"""
Shape classifier
================

Decides once, at entry, which reconstruction strategy a container gets.
"""

from __future__ import annotations

import array
from collections import Counter
from collections.abc import Mapping, Sequence, Set
from enum import Enum

# Text and fixed-width binary sequences iterate over characters / ints,
# never over awaitables.
_SCALAR_SEQUENCES: tuple[type, ...] = (str, bytes, bytearray, memoryview, array.array)

# Multi-valued set-like collections (value -> multiplicity).
_MULTISETS: tuple[type, ...] = (Counter,)


class Shape(Enum):
    """Structural kind of a container."""

    SEQUENCE = "sequence"
    MAPPING = "mapping"
    UNIQUE_SET = "unique_set"
    UNSUPPORTED = "unsupported"


def classify(container: object) -> Shape:
    """
    Classify container by capability, first match wins:

    1. Mapping (key lookup, key/value iteration) -> MAPPING
    2. Set (value membership, no duplicates) -> UNIQUE_SET
    3. Sequence (positional iteration, known length) -> SEQUENCE
    4. anything else -> UNSUPPORTED

    Never raises: UNSUPPORTED is an ordinary answer.
    """
    if isinstance(container, Mapping):
        if isinstance(container, _MULTISETS):
            return Shape.UNSUPPORTED
        return Shape.MAPPING
    if isinstance(container, Set):
        return Shape.UNIQUE_SET
    if isinstance(container, Sequence):
        if isinstance(container, _SCALAR_SEQUENCES):
            return Shape.UNSUPPORTED
        return Shape.SEQUENCE
    return Shape.UNSUPPORTED


__all__ = ("Shape", "classify")
