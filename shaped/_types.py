"""
Core type definitions for shaped.

Алиасы, общие для classify / rebuild / resolve.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence, Set

from kungfu import LazyCoroResult

# ============================================================================
# Type aliases
# ============================================================================

# Association = what ties an awaitable to its resolved value:
# index (sequence), key (mapping) or the element itself (unique set)
type Association = int | Hashable

# Container = anything classify() can accept as resolvable
type Container[A] = Sequence[A] | Mapping[Hashable, A] | Set[A]

# ============================================================================
# Concrete type shortcuts
# ============================================================================

# LCR = LazyCoroResult shortcut
type LCR[T, E] = LazyCoroResult[T, E]

__all__ = (
    "Association",
    "Container",
    "LCR",
)
