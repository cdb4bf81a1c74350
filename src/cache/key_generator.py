# src/cache/key_generator.py — v1
"""Cache key generation strategies.

A cacher holds exactly one KeyGenerator: the DefaultKeyGenerator, which
derives keys from selected params/meta fields, or a CustomKeyGenerator
wrapping a user function whose output is used verbatim.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from pydantic import BaseModel

from actioncache.cache.key_hasher import HASH_LENGTH, bounded_hash, is_structured, stringify

#: User key function: (action_name, params, meta, keys) -> key.
KeygenFn = Callable[..., str]

META_PREFIX = "#"

_PATH_TOKEN = re.compile(r"[^.\[\]]+")


def get_path(source: Any, path: str) -> Any:
    """Read a nested value by dotted path, e.g. ``"user.roles[0]"``.

    A key equal to the whole path wins over nested lookup, so
    ``{"a.b": 1}`` resolves ``"a.b"`` to 1. Missing segments yield None.
    """
    if source is None:
        return None
    if isinstance(source, Mapping) and path in source:
        return source[path]

    tokens = _PATH_TOKEN.findall(path)
    if not tokens:
        return None

    current = source
    for token in tokens:
        current = _step(current, token)
        if current is None:
            return None
    return current


def _step(current: Any, token: str) -> Any:
    if isinstance(current, Mapping):
        if token in current:
            return current[token]
        if token.isdigit():
            return current.get(int(token))
        return None
    if isinstance(current, (list, tuple)):
        if token.isdigit() and int(token) < len(current):
            return current[int(token)]
        return None
    if isinstance(current, BaseModel):
        return getattr(current, token, None)
    return None


def get_param_meta_value(selector: str, params: Any, meta: Any) -> Any:
    """Resolve a field selector against params, or meta when prefixed by ``#``."""
    if selector.startswith(META_PREFIX):
        return get_path(meta, selector[len(META_PREFIX):])
    return get_path(params, selector)


def default_keygen(
    action_name: str,
    params: Any,
    meta: Any,
    keys: Sequence[str] | None,
    *,
    max_key_length: int = HASH_LENGTH,
) -> str:
    """Build the cache key suffix for one invocation.

    Args:
        action_name: Fully-qualified action name, e.g. ``"posts.get"``.
        params: Invocation parameters (mapping or None).
        meta: Invocation metadata (mapping or None).
        keys: Field selectors; None or empty hashes the whole params.
        max_key_length: Bound applied to hashed structured values.

    Returns:
        ``action_name`` alone when there are no inputs, else
        ``"<action_name>:<suffix>"``.
    """
    if params is None and meta is None:
        return action_name

    key_prefix = f"{action_name}:"
    if keys:
        if len(keys) == 1:
            # Fast path for the common ["id"] case
            return key_prefix + _field_text(keys[0], params, meta, max_key_length)
        return key_prefix + "|".join(
            _field_text(selector, params, meta, max_key_length) for selector in keys
        )

    return key_prefix + bounded_hash(params, max_key_length)


def _field_text(selector: str, params: Any, meta: Any, max_key_length: int) -> str:
    value = get_param_meta_value(selector, params, meta)
    if is_structured(value):
        return bounded_hash(value, max_key_length)
    return stringify(value)


class KeyGenerator(ABC):
    """Strategy producing the cache key for an invocation."""

    @abstractmethod
    def generate(
        self,
        action_name: str,
        params: Any,
        meta: Any,
        keys: Sequence[str] | None,
    ) -> str:
        """Return the cache key for the given invocation inputs."""


class DefaultKeyGenerator(KeyGenerator):
    """Selector-based keys with bounded hashing of structured values."""

    def __init__(self, max_key_length: int = HASH_LENGTH) -> None:
        self.max_key_length = max_key_length

    def generate(
        self,
        action_name: str,
        params: Any,
        meta: Any,
        keys: Sequence[str] | None,
    ) -> str:
        return default_keygen(
            action_name, params, meta, keys, max_key_length=self.max_key_length
        )


class CustomKeyGenerator(KeyGenerator):
    """Delegates to a user function. Its result and errors pass through untouched."""

    def __init__(self, fn: KeygenFn) -> None:
        self.fn = fn

    def generate(
        self,
        action_name: str,
        params: Any,
        meta: Any,
        keys: Sequence[str] | None,
    ) -> str:
        return self.fn(action_name, params, meta, keys)


def resolve_key_generator(
    keygen: KeygenFn | None, max_key_length: int = HASH_LENGTH
) -> KeyGenerator:
    """Pick the strategy for a cacher's options."""
    if keygen is not None:
        return CustomKeyGenerator(keygen)
    return DefaultKeyGenerator(max_key_length)
