# src/cache/cacher_factory.py — v1
"""Factory for cacher instantiation.

Backends register under a short name. A dotted class path such as
``"myapp.cachers.RedisCacher"`` is also accepted and imported on demand.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

from actioncache.cache.base_cacher import Cacher
from actioncache.config.settings import CacherSettings, load_settings

logger = logging.getLogger(__name__)

_CACHERS: dict[str, type[Cacher]] = {}


class UnsupportedCacherError(ValueError):
    """Raised when no cacher is registered under the requested name."""


def register_cacher(name: str, cacher_cls: type[Cacher]) -> None:
    """Register a backend class under a case-insensitive name."""
    if not issubclass(cacher_cls, Cacher):
        raise TypeError(f"{cacher_cls!r} is not a Cacher subclass")
    key = name.lower()
    if key in _CACHERS:
        logger.warning("Overwriting registered cacher: %s", key)
    _CACHERS[key] = cacher_cls


def unregister_cacher(name: str) -> None:
    """Drop a registered backend. Unknown names are ignored."""
    _CACHERS.pop(name.lower(), None)


def registered_cachers() -> list[str]:
    """Return sorted registered backend names."""
    return sorted(_CACHERS)


def resolve_cacher_class(name: str) -> type[Cacher]:
    """Look a backend class up by registered name or dotted class path."""
    cacher_cls = _CACHERS.get(name.lower())
    if cacher_cls is not None:
        return cacher_cls

    if "." in name:
        module_path, _, class_name = name.rpartition(".")
        try:
            module = importlib.import_module(module_path)
            cacher_cls = getattr(module, class_name)
        except (ImportError, AttributeError) as exc:
            raise UnsupportedCacherError(f"Cannot import cacher {name!r}: {exc}") from exc
        if isinstance(cacher_cls, type) and issubclass(cacher_cls, Cacher):
            return cacher_cls
        raise UnsupportedCacherError(f"{name!r} is not a Cacher subclass")

    raise UnsupportedCacherError(f"Unsupported cacher backend: {name!r}")


def create_cacher(settings: CacherSettings | None = None, **option_overrides: Any) -> Cacher:
    """Instantiate the configured cacher backend.

    Args:
        settings: Cacher settings. Loaded from the environment when omitted.
        **option_overrides: CacherOptions fields taking precedence over settings.

    Returns:
        Configured Cacher, not yet attached to a broker.

    Raises:
        UnsupportedCacherError: No backend configured, or the name is unknown.
    """
    if settings is None:
        settings = load_settings()
    if not settings.backend:
        raise UnsupportedCacherError("ACTIONCACHE_BACKEND must be set to create a cacher")

    cacher_cls = resolve_cacher_class(settings.backend)
    options = settings.to_options(**option_overrides)
    logger.debug("Creating %s cacher", cacher_cls.__name__)
    return cacher_cls(options)
