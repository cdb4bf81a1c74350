# src/main.py — v1
"""CLI entry point: inspect cache keys without running a broker.

Usage:
    actioncache key <action> [--params JSON] [--meta JSON] [--keys id,#user.id]
    actioncache hash <json> [--max-key-length N]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from actioncache.cache.base_cacher import build_prefix
from actioncache.cache.key_generator import default_keygen
from actioncache.cache.key_hasher import HASH_LENGTH, bounded_hash, stringify
from actioncache.cache.models import CacherOptions
from actioncache.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except json.JSONDecodeError as exc:
        logger.error("Invalid JSON: %s", exc)
        return 2


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="actioncache",
        description=f"actioncache v{__version__} - cache key inspection",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- key ---
    p_key = subparsers.add_parser(
        "key", help="Print the cache key for an invocation",
    )
    p_key.add_argument("action", help="Action name, e.g. posts.get")
    p_key.add_argument("--params", default=None, help="Params as JSON")
    p_key.add_argument("--meta", default=None, help="Meta as JSON")
    p_key.add_argument(
        "--keys", default=None,
        help="Comma-separated field selectors; '#' reads from meta",
    )
    p_key.add_argument(
        "--max-key-length", type=int, default=HASH_LENGTH,
        help=f"Hash bound for structured values (default: {HASH_LENGTH}); 0 means default",
    )
    p_key.add_argument(
        "--prefix", default=None, help="Custom key prefix",
    )
    p_key.add_argument(
        "--namespace", default=None, help="Broker namespace for the default prefix",
    )
    p_key.set_defaults(func=_cmd_key)

    # --- hash ---
    p_hash = subparsers.add_parser(
        "hash", help="Print the serialized and bounded form of a JSON value",
    )
    p_hash.add_argument("value", help="JSON value")
    p_hash.add_argument(
        "--max-key-length", type=int, default=HASH_LENGTH,
        help=f"Length bound (default: {HASH_LENGTH}); 0 means default",
    )
    p_hash.set_defaults(func=_cmd_hash)

    return parser


def _cmd_key(args: argparse.Namespace) -> int:
    """Print the prefixed cache key."""
    params = _load_json(args.params)
    meta = _load_json(args.meta)
    keys = _split_keys(args.keys)

    options = CacherOptions(max_key_length=args.max_key_length)
    suffix = default_keygen(
        args.action, params, meta, keys, max_key_length=options.max_key_length
    )
    logger.debug("Derived key suffix %r for %s", suffix, args.action)
    print(build_prefix(args.prefix, args.namespace) + suffix)
    return 0


def _cmd_hash(args: argparse.Namespace) -> int:
    """Print stringify() and bounded_hash() output for a value."""
    value = json.loads(args.value)
    plain = stringify(value)
    options = CacherOptions(max_key_length=args.max_key_length)
    print(f"serialized: {plain}")
    print(f"bounded:    {bounded_hash(value, options.max_key_length)}")
    return 0


def _load_json(raw: str | None) -> Any:
    if raw is None:
        return None
    return json.loads(raw)


def _split_keys(raw: str | None) -> list[str] | None:
    """Parse comma-separated selectors. An empty string yields []."""
    if raw is None:
        return None
    return [k.strip() for k in raw.split(",") if k.strip()]


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


if __name__ == "__main__":
    sys.exit(main())
