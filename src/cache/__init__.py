"""Cacher base class, key generation and handler middleware."""

from actioncache.cache.base_cacher import (
    CacheBackendError,
    Cacher,
    CacherError,
    CacherNotImplementedError,
    ServiceBroker,
)
from actioncache.cache.key_generator import (
    CustomKeyGenerator,
    DefaultKeyGenerator,
    KeyGenerator,
    default_keygen,
)
from actioncache.cache.key_hasher import bounded_hash, stringify
from actioncache.cache.middleware import create_cache_middleware
from actioncache.cache.models import (
    ActionCacheConfig,
    ActionDescriptor,
    CacherOptions,
    InvocationContext,
)

__all__ = [
    "ActionCacheConfig",
    "ActionDescriptor",
    "CacheBackendError",
    "Cacher",
    "CacherError",
    "CacherNotImplementedError",
    "CacherOptions",
    "CustomKeyGenerator",
    "DefaultKeyGenerator",
    "InvocationContext",
    "KeyGenerator",
    "ServiceBroker",
    "bounded_hash",
    "create_cache_middleware",
    "default_keygen",
    "stringify",
]
