"""Dot-path access into nested mappings and objects."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from typing import Any

_MISSING = object()


def data_get(target: Any, path: str, default: Any = None) -> Any:
    """Read ``path`` ("a.b.c") from nested mappings, sequences or attributes.

    Missing segments yield ``default`` instead of raising.
    """
    if not path:
        return target

    current = target
    for segment in path.split("."):
        if current is None:
            return default
        if isinstance(current, Mapping):
            current = current.get(segment, _MISSING)
        elif isinstance(current, (list, tuple)) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else _MISSING
        else:
            current = getattr(current, segment, _MISSING)
        if current is _MISSING:
            return default
    return current


def data_set(target: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Write ``value`` at ``path`` inside nested dicts, creating levels as needed."""
    segments = path.split(".")
    current = target
    for segment in segments[:-1]:
        child = current.get(segment)
        if not isinstance(child, MutableMapping):
            child = {}
            current[segment] = child
        current = child
    current[segments[-1]] = value
