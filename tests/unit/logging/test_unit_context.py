# tests/unit/logging/test_unit_context.py — v1
"""Tests for logging/context.py: contextual logging variables."""

from __future__ import annotations

import asyncio

import pytest

from actioncache.logging.context import (
    action_context,
    clear_context,
    get_context,
)


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.action is None
        assert ctx.request_id is None
        assert ctx.cache_key is None

    def test_snapshot_reflects_bound_values(self):
        with action_context("posts.get", "req-1", "posts.get:5"):
            ctx = get_context()
        assert ctx.action == "posts.get"
        assert ctx.request_id == "req-1"
        assert ctx.cache_key == "posts.get:5"

    def test_as_dict_filters_none(self):
        with action_context("posts.get") as ctx:
            assert ctx.as_dict() == {"action": "posts.get"}

    def test_clear(self):
        with action_context("posts.get", "req-1"):
            clear_context()
            assert get_context().as_dict() == {}


class TestActionContextManager:
    def setup_method(self):
        clear_context()

    def test_binds_and_restores(self):
        with action_context("outer", "req-0"):
            with action_context("posts.get", "req-1", "posts.get:5") as ctx:
                assert ctx.action == "posts.get"
                assert get_context().cache_key == "posts.get:5"
            assert get_context().action == "outer"
            assert get_context().cache_key is None
        assert get_context().action is None

    def test_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with action_context("posts.get"):
                raise RuntimeError("boom")
        assert get_context().action is None

    @pytest.mark.asyncio
    async def test_isolated_between_tasks(self):
        async def run(name):
            with action_context(name):
                await asyncio.sleep(0)
                return get_context().action

        assert await asyncio.gather(run("a"), run("b")) == ["a", "b"]
