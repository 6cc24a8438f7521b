"""
Log - monoidal accumulator for Writer
=====================================
"""

from __future__ import annotations


class Log[A](list[A]):
    """
    Append-only log carried next to a Result.

    Log() is the empty element, combine() concatenates; neither mutates self,
    so logs of concurrently resolving elements can be merged in any grouping.
    """

    @staticmethod
    def of[T](*items: T) -> Log[T]:
        """Create log with items."""
        return Log[T](items)

    def combine(self, other: Log[A], /) -> Log[A]:
        """
        Concatenate two logs into a new one.

        Example:
            Log.of("a").combine(Log.of("b"))  # Log(["a", "b"])
        """
        merged: Log[A] = Log(self)
        merged.extend(other)
        return merged

    def tell(self, item: A, /) -> Log[A]:
        """New log with one more entry."""
        merged: Log[A] = Log(self)
        merged.append(item)
        return merged


__all__ = ("Log",)
