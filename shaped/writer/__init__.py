"""
Writer Monad
============

LazyCoroResultWriter: Lazy + Coro + Result[T, E] + Writer[Log[W]].

Логи вычислений копятся рядом с результатом, а не пишутся в глобальный логгер.
"""

from .log import Log
from .result import WriterResult
from .monad import LazyCoroResultWriter, writer_ok, writer_error

__all__ = (
    "Log",
    "WriterResult",
    "LazyCoroResultWriter",
    "writer_ok",
    "writer_error",
)
