# tests/conftest.py — v1
"""Shared test fixtures for all unit tests.

Provides an in-memory cacher test double, a minimal broker and sample
invocation data. No external dependencies; all storage is a dict.
"""

from __future__ import annotations

import fnmatch
import logging
from typing import Any

import pytest

from actioncache.cache.base_cacher import Cacher
from actioncache.cache.models import ActionDescriptor, CacherOptions, InvocationContext
from actioncache.logging.context import clear_context


class InMemoryCacher(Cacher):
    """Dict-backed cacher recording every storage call."""

    def __init__(self, options: Any = None) -> None:
        super().__init__(options)
        self.store: dict[str, Any] = {}
        self.ttls: dict[str, float | None] = {}
        self.get_calls: list[str] = []
        self.set_calls: list[tuple[str, Any, float | None]] = []

    async def get(self, key: str) -> Any | None:
        self.get_calls.append(key)
        return self.store.get(self.prefix + key)

    async def set(self, key: str, data: Any, ttl: float | None = None) -> None:
        self.set_calls.append((key, data, ttl))
        self.store[self.prefix + key] = data
        self.ttls[self.prefix + key] = ttl if ttl is not None else self.options.ttl

    async def delete(self, key: str) -> None:
        self.store.pop(self.prefix + key, None)

    async def clean(self, match: str = "**") -> None:
        pattern = self.prefix + match.replace("**", "*")
        for key in [k for k in self.store if fnmatch.fnmatchcase(k, pattern)]:
            del self.store[key]


class FakeBroker:
    """Broker stand-in collecting registered middlewares."""

    def __init__(self, namespace: str | None = None) -> None:
        self.namespace = namespace
        self.middlewares: list[Any] = []
        self.logger_names: list[str] = []

    def get_logger(self, name: str) -> logging.Logger:
        self.logger_names.append(name)
        return logging.getLogger(f"broker.{name}")

    def use(self, middleware: Any) -> None:
        self.middlewares.append(middleware)


# === FIXTURES: Cachers ===


@pytest.fixture
def cacher() -> InMemoryCacher:
    """In-memory cacher with default options."""
    return InMemoryCacher()


@pytest.fixture
def ttl_cacher() -> InMemoryCacher:
    """In-memory cacher with a 60s default TTL."""
    return InMemoryCacher(CacherOptions(ttl=60))


@pytest.fixture
def broker() -> FakeBroker:
    return FakeBroker(namespace="staging")


# === FIXTURES: Sample invocations ===


@pytest.fixture
def cached_action() -> ActionDescriptor:
    """Action caching on the ``id`` param with a 30s TTL."""
    return ActionDescriptor(name="posts.get", cache={"keys": ["id"], "ttl": 30})


@pytest.fixture
def uncached_action() -> ActionDescriptor:
    return ActionDescriptor(name="posts.create")


@pytest.fixture
def sample_ctx() -> InvocationContext:
    return InvocationContext(
        params={"id": 5, "fields": ["title", "body"]},
        meta={"user": {"id": 42, "tenant": "acme"}},
        request_id="req-001",
    )


@pytest.fixture(autouse=True)
def _reset_log_context():
    clear_context()
    yield
    clear_context()
