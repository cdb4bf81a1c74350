# src/cache/key_hasher.py — v1
"""Deterministic serialization and length bounding of cache-key values.

Any params/meta value is flattened into a "|"-joined string. Mappings keep
their iteration (insertion) order, so two dicts with the same items in a
different order produce different strings. When the string outgrows the
configured length, the tail is replaced by a base64 SHA-256 digest while a
readable head is kept for debugging.
"""

from __future__ import annotations

import base64
import hashlib
from collections.abc import Mapping
from collections.abc import Set as AbstractSet
from enum import Enum
from typing import Any

from pydantic import BaseModel

#: Length of a base64-encoded SHA-256 digest.
HASH_LENGTH = 44


class ValueKind(str, Enum):
    """Shape of a value as seen by the key serializer."""

    NULL = "null"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def classify(value: Any) -> ValueKind:
    """Decide how a value is serialized.

    Strings and bytes are scalars even though they are sequences. Sets are
    sequences whose items are ordered by their own key string. Pydantic
    models are treated as mappings of their dumped fields.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, (Mapping, BaseModel)):
        return ValueKind.MAPPING
    if isinstance(value, (list, tuple, AbstractSet)):
        return ValueKind.SEQUENCE
    return ValueKind.SCALAR


def is_structured(value: Any) -> bool:
    """True for values that must go through bounded_hash()."""
    return classify(value) in (ValueKind.MAPPING, ValueKind.SEQUENCE)


def stringify(value: Any) -> str:
    """Flatten a value into its deterministic key string.

    Args:
        value: Scalar, sequence, mapping, pydantic model or None.

    Returns:
        "|"-joined representation. None becomes "null", an empty
        mapping or sequence becomes "".
    """
    kind = classify(value)
    if kind is ValueKind.SEQUENCE:
        parts = [stringify(item) for item in value]
        if isinstance(value, AbstractSet):
            parts.sort()
        return "|".join(parts)
    if kind is ValueKind.MAPPING:
        items = value.model_dump() if isinstance(value, BaseModel) else value
        return "|".join(f"{key}|{stringify(items[key])}" for key in items)
    if kind is ValueKind.NULL:
        return "null"
    return _scalar_text(value)


def bounded_hash(value: Any, max_key_length: int = HASH_LENGTH) -> str:
    """Serialize a value and bound the result to ``max_key_length``.

    Limits below HASH_LENGTH disable hashing entirely. Otherwise keys longer
    than the limit keep their first ``max_key_length - 44`` characters
    followed by the base64 SHA-256 digest of the full string.

    Args:
        value: Value to serialize.
        max_key_length: Upper bound on the returned length.

    Returns:
        The plain key when short enough, else a prefix plus digest.
    """
    key = stringify(value)
    if max_key_length < HASH_LENGTH or len(key) <= max_key_length:
        return key

    digest = hashlib.sha256(key.encode("utf-8")).digest()
    base64_hash = base64.b64encode(digest).decode("ascii")

    prefix_length = max_key_length - HASH_LENGTH
    if prefix_length < 1:
        return base64_hash
    return key[:prefix_length] + base64_hash


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
