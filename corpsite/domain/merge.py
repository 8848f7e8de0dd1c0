"""
Merge rules for section content.

Section payloads have no global schema: the reader supplies a default shape
and the fetched record is laid over it. All functions here are pure and
return new dictionaries.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def merge_with_defaults(
    defaults: Mapping[str, Any] | None,
    data: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """
    Shallow-merge fetched data over defaults.

    Every key of ``defaults`` is present in the result. Keys present in
    ``data`` win, keys only in ``data`` pass through.
    """
    merged: dict[str, Any] = dict(defaults) if defaults else {}
    if data:
        merged.update(data)
    return merged


def merge_patch(current: Mapping[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    """Apply a partial update to the current section data."""
    updated = dict(current)
    updated.update(patch)
    return updated


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def fill_blank_fields(
    defaults: Mapping[str, Any],
    data: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """
    Merge like ``merge_with_defaults`` but treat blank values as missing.

    A field saved as ``None`` or whitespace keeps its default so a cleared
    input in the admin UI never renders as an empty heading.
    """
    merged = merge_with_defaults(defaults, data)
    for key, default in defaults.items():
        if _is_blank(merged.get(key)):
            merged[key] = default
    return merged
