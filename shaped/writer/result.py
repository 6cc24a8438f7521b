"""
WriterResult - settled Result plus its log
==========================================
"""

from __future__ import annotations

from kungfu import Result


class WriterResult[T, E, W]:
    """
    What a LazyCoroResultWriter settles to: Result[T, E] and log W.

    This is the Raw type resolve_matching_w() extracts outcomes from.
    """

    __slots__ = ("_result", "_log")
    __match_args__ = ("_result", "_log")

    def __init__(self, result: Result[T, E], log: W) -> None:
        self._result = result
        self._log = log

    @property
    def result(self) -> Result[T, E]:
        return self._result

    @property
    def log(self) -> W:
        return self._log

    def __repr__(self) -> str:
        return f"WriterResult({self._result!r}, log={self._log!r})"


__all__ = ("WriterResult",)
