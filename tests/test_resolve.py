"""Tests for resolve_matching (fail-fast, shape preserving)."""

from __future__ import annotations

import asyncio
import typing
from collections import OrderedDict, namedtuple

import pytest
from kungfu import Error, Ok, Result

from shaped import ResolvePolicy, ShapeError, resolve_matching, resolve_policy

Pair = namedtuple("Pair", ["left", "right"])


def _ok_of(result: Result[typing.Any, typing.Any]) -> typing.Any:
    match result:
        case Ok(value):
            return value
        case other:
            pytest.fail(f"expected Ok, got {other!r}")


def _error_of(result: Result[typing.Any, typing.Any]) -> typing.Any:
    match result:
        case Error(err):
            return err
        case other:
            pytest.fail(f"expected Error, got {other!r}")


class TestShapes:
    @pytest.mark.asyncio
    async def test_sequence(self, probe) -> None:
        out = _ok_of(await resolve_matching([probe.ok(0, 1), probe.ok(1, 2)]))
        assert out == [1, 2]
        assert type(out) is list

    @pytest.mark.asyncio
    async def test_sequence_keeps_positions_not_completion_order(self, probe) -> None:
        container = [probe.ok(i, i * 100, delay=0.03 - i * 0.01) for i in range(3)]
        out = _ok_of(await resolve_matching(container))
        assert out == [0, 100, 200]
        assert probe.finished == [2, 1, 0]

    @pytest.mark.asyncio
    async def test_tuple_and_namedtuple(self, probe) -> None:
        assert _ok_of(await resolve_matching((probe.ok("a", "x"),))) == ("x",)
        out = _ok_of(await resolve_matching(Pair(probe.ok("l", 1), probe.ok("r", 2))))
        assert out == Pair(left=1, right=2)

    @pytest.mark.asyncio
    async def test_mapping_keeps_keys(self, probe) -> None:
        out = _ok_of(await resolve_matching({"Ryu": probe.ok("Ryu", 7), "Ken": probe.ok("Ken", 3, delay=0.01)}))
        assert out == {"Ryu": 7, "Ken": 3}
        assert out != [7, 3]
        assert list(out) == ["Ryu", "Ken"]

    @pytest.mark.asyncio
    async def test_ordered_dict(self, probe) -> None:
        out = _ok_of(await resolve_matching(OrderedDict(b=probe.ok("b", 2), a=probe.ok("a", 1))))
        assert type(out) is OrderedDict
        assert list(out.items()) == [("b", 2), ("a", 1)]

    @pytest.mark.asyncio
    async def test_set(self, probe) -> None:
        out = _ok_of(await resolve_matching({probe.ok("a", 1), probe.ok("b", 2)}))
        assert out == {1, 2}
        assert type(out) is set

    @pytest.mark.asyncio
    async def test_frozenset(self, probe) -> None:
        out = _ok_of(await resolve_matching(frozenset({probe.ok("a", 1)})))
        assert out == frozenset({1})
        assert type(out) is frozenset

    @pytest.mark.asyncio
    async def test_set_with_unhashable_value_raises(self, probe) -> None:
        with pytest.raises(TypeError):
            await resolve_matching({probe.ok("a", [1])})
        assert probe.finished == ["a"]

    @pytest.mark.asyncio
    async def test_empty_containers(self) -> None:
        assert _ok_of(await resolve_matching([])) == []
        assert _ok_of(await resolve_matching({})) == {}
        assert _ok_of(await resolve_matching(set())) == set()


class TestShapeError:
    @pytest.mark.asyncio
    async def test_unsupported_rejects_without_running(self, probe) -> None:
        pending = (probe.ok(i, i) for i in range(2))
        err = _error_of(await resolve_matching(pending))
        assert isinstance(err, ShapeError)
        assert err.container_type.__name__ == "generator"
        assert probe.started == []

    @pytest.mark.asyncio
    async def test_text_is_unsupported(self) -> None:
        assert isinstance(_error_of(await resolve_matching("abc")), ShapeError)


class TestFailFast:
    @pytest.mark.asyncio
    async def test_mapping_rejection_is_forwarded_unchanged(self, probe) -> None:
        container = {"a": probe.ok("a", 1), "b": probe.error("b", "boom")}
        assert _error_of(await resolve_matching(container)) == "boom"

    @pytest.mark.asyncio
    async def test_set_rejection_builds_no_container(self, probe, monkeypatch) -> None:
        built: list[object] = []

        def spy(*args: object) -> object:
            built.append(args)
            raise AssertionError("rebuild() called on failure")

        monkeypatch.setattr("shaped.concurrency.resolve.rebuild", spy)
        container = {probe.ok("a", 1), probe.error("b", "boom")}
        assert _error_of(await resolve_matching(container)) == "boom"
        assert built == []

    @pytest.mark.asyncio
    async def test_first_failure_in_time_wins(self, probe) -> None:
        container = [probe.error("late", "late", delay=0.05), probe.error("early", "early")]
        assert _error_of(await resolve_matching(container)) == "early"

    @pytest.mark.asyncio
    async def test_pending_elements_are_cancelled(self, probe) -> None:
        container = [probe.ok("slow", 1, delay=10), probe.error("fast", "boom")]
        result = await asyncio.wait_for(resolve_matching(container)(), timeout=1)
        assert _error_of(result) == "boom"
        await asyncio.sleep(0.01)
        assert probe.cancelled == ["slow"]

    @pytest.mark.asyncio
    async def test_pending_elements_keep_running_when_asked(self, probe) -> None:
        container = [probe.ok("slow", 1, delay=0.02), probe.error("fast", "boom")]
        result = await resolve_matching(container, policy=ResolvePolicy(cancel_pending=False))
        assert _error_of(result) == "boom"
        await asyncio.sleep(0.05)
        assert probe.cancelled == []
        assert "slow" in probe.finished

    @pytest.mark.asyncio
    async def test_exceptions_propagate(self, probe) -> None:
        container = [probe.ok("a", 1, delay=10), probe.raising("b", ValueError("kaput"))]
        with pytest.raises(ValueError, match="kaput"):
            await resolve_matching(container)


class TestLaziness:
    @pytest.mark.asyncio
    async def test_nothing_runs_until_awaited(self, probe) -> None:
        interp = resolve_matching([probe.ok("a", 1)])
        await asyncio.sleep(0)
        assert probe.started == []
        assert _ok_of(await interp) == [1]

    @pytest.mark.asyncio
    async def test_reinvocation_gives_independent_output(self, probe) -> None:
        first = _ok_of(await resolve_matching({"k": probe.ok("k", [1])}))
        second = _ok_of(await resolve_matching({"k": probe.ok("k", [1])}))
        assert first == second
        assert first is not second

    @pytest.mark.asyncio
    async def test_input_is_left_alone(self, probe) -> None:
        element = probe.ok("a", 1)
        container = {"a": element}
        await resolve_matching(container)
        assert container == {"a": element}


class TestPolicy:
    @pytest.mark.asyncio
    async def test_concurrency_bound(self, probe) -> None:
        container = [probe.ok(i, i, delay=0.01) for i in range(4)]
        out = _ok_of(await resolve_matching(container, policy=resolve_policy(concurrency=1)))
        assert out == [0, 1, 2, 3]
        assert probe.max_running == 1

    @pytest.mark.asyncio
    async def test_unbounded_by_default(self, probe) -> None:
        await resolve_matching([probe.ok(i, i, delay=0.01) for i in range(3)])
        assert probe.max_running == 3

    def test_invalid_concurrency(self) -> None:
        with pytest.raises(ValueError):
            ResolvePolicy(concurrency=0)
        with pytest.raises(ValueError):
            resolve_policy(concurrency=-1)
