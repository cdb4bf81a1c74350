"""actioncache: result cache middleware for remote-callable action handlers."""

from actioncache.version import __version__

__all__ = ["__version__"]
