# src/cache/base_cacher.py — v1
"""Abstract cacher: options, key prefix, key generation and middleware wiring.

Concrete backends implement the async storage contract (get, set, delete,
clean). Everything else, including the invocation middleware, lives here.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from actioncache.cache.key_generator import default_keygen, resolve_key_generator
from actioncache.cache.middleware import Middleware, create_cache_middleware
from actioncache.cache.models import CacherOptions
from actioncache.logging.logger import get_logger

DEFAULT_PREFIX = "MOL-"


class CacherError(Exception):
    """Base class for cacher errors."""


class CacherNotImplementedError(CacherError, NotImplementedError):
    """A storage operation was reached without a concrete backend."""


class CacheBackendError(CacherError):
    """Raised by concrete backends when the underlying store fails."""


class ServiceBroker(Protocol):
    """What a cacher needs from the hosting broker."""

    namespace: str | None

    def get_logger(self, name: str) -> logging.Logger: ...

    def use(self, middleware: Middleware) -> None: ...


def build_prefix(prefix: str | None, namespace: str | None) -> str:
    """Key prefix isolating one deployment's entries from another's."""
    if prefix:
        return f"{prefix}-"
    if namespace:
        return f"{DEFAULT_PREFIX}{namespace}-"
    return DEFAULT_PREFIX


class Cacher(ABC):
    """Base class for cache backends.

    Args:
        options: CacherOptions, or a mapping of option overrides.
    """

    def __init__(self, options: CacherOptions | Mapping[str, Any] | None = None) -> None:
        if options is None:
            options = CacherOptions()
        elif not isinstance(options, CacherOptions):
            options = CacherOptions(**options)

        self.options = options
        self.broker: ServiceBroker | None = None
        self.logger = get_logger("cacher")
        self.prefix = build_prefix(options.prefix, options.namespace)
        self._keygen = resolve_key_generator(options.keygen, options.max_key_length)
        self._pending_writes: set[asyncio.Task[None]] = set()

    def init(self, broker: ServiceBroker | None) -> None:
        """Attach to a broker: take its logger, derive the prefix, register middleware."""
        self.broker = broker
        if broker is None:
            return

        self.logger = broker.get_logger("cacher")
        namespace = broker.namespace or self.options.namespace
        self.prefix = build_prefix(self.options.prefix, namespace)
        broker.use(self.middleware())
        self.logger.debug("Cacher %s initialised with prefix %r", type(self).__name__, self.prefix)

    async def close(self) -> None:
        """Wait for in-flight background writes to settle."""
        if self._pending_writes:
            await asyncio.gather(*self._pending_writes, return_exceptions=True)

    # --- Storage contract ---

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return cached content for key, or None."""
        raise CacherNotImplementedError(f"{type(self).__name__}.get is not implemented")

    @abstractmethod
    async def set(self, key: str, data: Any, ttl: float | None = None) -> None:
        """Store content under key. ``ttl`` None means the backend default."""
        raise CacherNotImplementedError(f"{type(self).__name__}.set is not implemented")

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry under key."""
        raise CacherNotImplementedError(f"{type(self).__name__}.delete is not implemented")

    @abstractmethod
    async def clean(self, match: str = "**") -> None:
        """Remove every entry whose key matches the glob pattern."""
        raise CacherNotImplementedError(f"{type(self).__name__}.clean is not implemented")

    # --- Keys ---

    def default_keygen(
        self,
        action_name: str,
        params: Any,
        meta: Any,
        keys: Sequence[str] | None,
    ) -> str:
        """Selector-based key, regardless of any custom keygen."""
        return default_keygen(
            action_name, params, meta, keys, max_key_length=self.options.max_key_length
        )

    def get_cache_key(
        self,
        action_name: str,
        params: Any,
        meta: Any,
        keys: Sequence[str] | None = None,
    ) -> str:
        """Cache key for an invocation, as produced by the configured strategy."""
        return self._keygen.generate(action_name, params, meta, keys)

    # --- Middleware ---

    def middleware(self) -> Middleware:
        """Return the handler-wrapping middleware bound to this cacher."""
        return create_cache_middleware(self)

    def schedule_set(self, key: str, data: Any, ttl: float | None = None) -> asyncio.Task[None]:
        """Store in the background. Failures are logged, never raised to the caller."""
        task = asyncio.create_task(self.set(key, data, ttl))
        self._pending_writes.add(task)
        task.add_done_callback(functools.partial(self._on_write_done, key))
        return task

    def _on_write_done(self, key: str, task: asyncio.Task[None]) -> None:
        self._pending_writes.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.logger.warning("Failed to store cache entry %s: %s", key, exc)
