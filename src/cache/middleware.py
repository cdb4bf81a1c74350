# src/cache/middleware.py — v1
"""Cache middleware wrapping action handlers.

For an action with a cache config, each call computes a key and asks the
cacher. A hit returns the stored content and marks ``ctx.cached_result``;
the handler is not called. A miss calls the handler, schedules the store
in the background and returns the handler's result right away.

Concurrent misses on the same key are not coalesced: each calls the
handler and writes the entry.
"""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from typing import TYPE_CHECKING, Any, Callable

from actioncache.cache.models import ActionDescriptor, InvocationContext
from actioncache.logging.context import action_context

if TYPE_CHECKING:
    from actioncache.cache.base_cacher import Cacher

Handler = Callable[[InvocationContext], Awaitable[Any]]
Middleware = Callable[[Handler, Any], Handler]


def create_cache_middleware(cacher: Cacher) -> Middleware:
    """Build the middleware for a cacher.

    Args:
        cacher: Backend used for lookups and stores.

    Returns:
        Callable ``(handler, action) -> handler``. Actions without a cache
        config get their handler back unchanged.
    """

    def wrap_handler(
        handler: Handler, action: ActionDescriptor | Mapping[str, Any]
    ) -> Handler:
        if not isinstance(action, ActionDescriptor):
            action = ActionDescriptor.model_validate(dict(action))

        cache_config = action.cache
        if cache_config is None:
            return handler

        action_name = action.name

        async def cacher_middleware(ctx: InvocationContext) -> Any:
            cache_key = cacher.get_cache_key(
                action_name, ctx.params, ctx.meta, cache_config.keys
            )
            with action_context(action_name, ctx.request_id, cache_key):
                content = await cacher.get(cache_key)
                if content is not None:
                    cacher.logger.debug("Cache hit: %s", cache_key)
                    ctx.cached_result = True
                    return content

                cacher.logger.debug("Cache miss: %s", cache_key)
                result = await handler(ctx)
                cacher.schedule_set(cache_key, result, cache_config.ttl)
                return result

        return cacher_middleware

    return wrap_handler
