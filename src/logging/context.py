# src/logging/context.py — v1
"""Contextual logging support: attach action, request_id, cache_key to log records."""

from __future__ import annotations

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per cached invocation.
_action: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "action", default=None
)
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_cache_key: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "cache_key", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    action: str | None = None
    request_id: str | None = None
    cache_key: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        action=_action.get(),
        request_id=_request_id.get(),
        cache_key=_cache_key.get(),
    )


@contextmanager
def action_context(
    action: str, request_id: str | None = None, cache_key: str | None = None
) -> Iterator[LogContext]:
    """Bind invocation context for the duration of a block, then restore it."""
    tokens = (
        _action.set(action),
        _request_id.set(request_id),
        _cache_key.set(cache_key),
    )
    try:
        yield get_context()
    finally:
        _cache_key.reset(tokens[2])
        _request_id.reset(tokens[1])
        _action.reset(tokens[0])


def clear_context() -> None:
    """Reset all context variables."""
    _action.set(None)
    _request_id.set(None)
    _cache_key.set(None)
