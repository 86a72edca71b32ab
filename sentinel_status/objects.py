"""Helpers for reading fields from live Kubernetes objects.

Live objects arrive either as plain dicts (dynamic client, camelCase keys)
or as typed ``kubernetes.client`` models whose ``to_dict()`` uses
snake_case keys. Lookups accept camelCase paths and fall back to the
snake_case spelling.
"""

import re
from collections.abc import Mapping
from typing import Any

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def snake_case(name: str) -> str:
    """Convert ``creationTimestamp`` to ``creation_timestamp``."""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def as_dict(obj: Any) -> Mapping[str, Any]:
    """
    Return a mapping view of a live object.

    Args:
        obj: Dict or object exposing ``to_dict()``

    Returns:
        Mapping of the object's fields

    Raises:
        TypeError: If the object cannot be viewed as a mapping
    """
    if isinstance(obj, Mapping):
        return obj
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        data = to_dict()
        if isinstance(data, Mapping):
            return data
    raise TypeError(f"Cannot read fields from object of type {type(obj).__name__}")


def lookup(data: Any, path: str, default: Any = None) -> Any:
    """
    Read a dotted path such as ``metadata.creationTimestamp``.

    Args:
        data: Mapping to read from
        path: Dotted camelCase path
        default: Value returned when any segment is missing or None

    Returns:
        Field value or default
    """
    current = data
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return default
        if part in current:
            current = current[part]
        else:
            current = current.get(snake_case(part))
        if current is None:
            return default
    return current
