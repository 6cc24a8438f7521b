"""Shared fixtures: a probe that builds instrumented LazyCoroResults."""

from __future__ import annotations

import asyncio
import typing
from collections.abc import Hashable
from dataclasses import dataclass, field

import pytest
from kungfu import Error, LazyCoroResult, Ok, Result


@dataclass
class Probe:
    """Records which computations started, finished or got cancelled."""

    started: list[Hashable] = field(default_factory=list)
    finished: list[Hashable] = field(default_factory=list)
    cancelled: list[Hashable] = field(default_factory=list)
    running: int = 0
    max_running: int = 0

    def ok[T](self, name: Hashable, value: T, *, delay: float = 0.0) -> LazyCoroResult[T, typing.Any]:
        return self._lazy(name, Ok(value), delay)

    def error[E](self, name: Hashable, error: E, *, delay: float = 0.0) -> LazyCoroResult[typing.Any, E]:
        return self._lazy(name, Error(error), delay)

    def raising(self, name: Hashable, exc: Exception, *, delay: float = 0.0) -> LazyCoroResult[typing.Any, typing.Any]:
        async def run() -> Result[typing.Any, typing.Any]:
            self.started.append(name)
            await asyncio.sleep(delay)
            raise exc

        return LazyCoroResult(run)

    def _lazy[T, E](self, name: Hashable, outcome: Result[T, E], delay: float) -> LazyCoroResult[T, E]:
        async def run() -> Result[T, E]:
            self.started.append(name)
            self.running += 1
            self.max_running = max(self.max_running, self.running)
            try:
                await asyncio.sleep(delay)
            except asyncio.CancelledError:
                self.cancelled.append(name)
                raise
            finally:
                self.running -= 1
            self.finished.append(name)
            return outcome

        return LazyCoroResult(run)


@pytest.fixture
def probe() -> Probe:
    return Probe()
