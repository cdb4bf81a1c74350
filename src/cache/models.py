# src/cache/models.py — v1
"""Cache domain models: CacherOptions, ActionCacheConfig, ActionDescriptor,
InvocationContext.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from actioncache.cache.key_generator import KeygenFn
from actioncache.cache.key_hasher import HASH_LENGTH


class CacherOptions(BaseModel):
    """Cacher-wide options. Unset fields keep their defaults."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ttl: float | None = None
    keygen: KeygenFn | None = None
    max_key_length: int = HASH_LENGTH
    prefix: str | None = None
    namespace: str | None = None

    @field_validator("max_key_length", mode="before")
    @classmethod
    def default_max_key_length(cls, v: Any) -> Any:
        """None or 0 fall back to the digest length."""
        if v is None or v == 0:
            return HASH_LENGTH
        return v


class ActionCacheConfig(BaseModel):
    """Per-action cache settings. Its presence enables caching for the action."""

    model_config = ConfigDict(frozen=True)

    keys: list[str] | None = None
    ttl: float | None = None

    @classmethod
    def from_definition(cls, value: Any) -> ActionCacheConfig | None:
        """Coerce an action's ``cache`` declaration.

        ``True`` enables caching with defaults, ``False``/``None`` disables
        it, and a mapping is validated into a config.
        """
        if value is None or value is False:
            return None
        if value is True:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        raise TypeError(f"Invalid action cache definition: {value!r}")


class ActionDescriptor(BaseModel):
    """The part of an action definition the cache middleware reads."""

    model_config = ConfigDict(frozen=True)

    name: str
    cache: ActionCacheConfig | None = None

    @field_validator("cache", mode="before")
    @classmethod
    def coerce_cache(cls, v: Any) -> ActionCacheConfig | None:
        return ActionCacheConfig.from_definition(v)


@dataclass
class InvocationContext:
    """Per-call inputs handed to an action handler.

    ``cached_result`` is flipped to True by the cache middleware when the
    response was served from the cache.
    """

    params: Any = None
    meta: Any = None
    request_id: str | None = None
    cached_result: bool = False
