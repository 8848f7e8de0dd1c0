"""
Local fallback store for section content.

Entries are keyed ``cms_{page}_{section}`` and hold
``{"data": {...}, "updatedAt": "<iso-8601>"}``. The store is a best-effort
read fallback: it is never authoritative and is only refreshed by this
process's own reads and writes.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from corpsite.domain.entities import ContentKey

logger = logging.getLogger(__name__)

KEY_PREFIX = "cms_"


class LocalStore(Protocol):
    def get(self, key: str) -> dict[str, Any] | None:
        ...

    def set(self, key: str, value: dict[str, Any]) -> None:
        ...

    def remove(self, key: str) -> None:
        ...

    def keys(self) -> list[str]:
        ...


class MemoryStore:
    """Process-lifetime store."""

    def __init__(self) -> None:
        self._items: dict[str, dict[str, Any]] = {}

    def get(self, key: str) -> dict[str, Any] | None:
        return self._items.get(key)

    def set(self, key: str, value: dict[str, Any]) -> None:
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class JsonFileStore:
    """
    Store persisted to a single JSON file.

    The whole file is rewritten atomically on every change. An unreadable
    or corrupt file is treated as empty. Writes are serialized by a lock so
    they can run in a worker thread.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._items: dict[str, dict[str, Any]] = self._load()
        self._lock = threading.Lock()

    def _load(self) -> dict[str, dict[str, Any]]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable cache file %s: %s", self._path, e)
            return {}
        if not isinstance(raw, dict):
            return {}
        return {k: v for k, v in raw.items() if isinstance(v, dict)}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._items, f)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> dict[str, Any] | None:
        return self._items.get(key)

    def set(self, key: str, value: dict[str, Any]) -> None:
        with self._lock:
            self._items[key] = value
            self._flush()

    def remove(self, key: str) -> None:
        with self._lock:
            if self._items.pop(key, None) is not None:
                self._flush()

    def keys(self) -> list[str]:
        return list(self._items)


# --- Helpers ---


def read_cached(store: LocalStore, key: ContentKey) -> dict[str, Any] | None:
    """Return the cached entry when it holds non-empty data."""
    entry = store.get(key.storage_key())
    if not entry:
        return None
    data = entry.get("data")
    if not isinstance(data, dict) or not data:
        return None
    return entry


def write_cached(
    store: LocalStore, key: ContentKey, data: dict[str, Any], updated_at: str | None
) -> None:
    store.set(key.storage_key(), {"data": data, "updatedAt": updated_at})


def _parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def is_cache_stale(store: LocalStore, key: ContentKey, api_updated_at: str) -> bool:
    """
    True when the cached entry is missing or older than the API's timestamp.

    Unparseable timestamps count as stale.
    """
    entry = store.get(key.storage_key())
    if not entry or not entry.get("updatedAt"):
        return True
    try:
        return _parse_ts(api_updated_at) > _parse_ts(entry["updatedAt"])
    except (TypeError, ValueError):
        return True


def clear_cache(store: LocalStore, page: str | None = None, section: str | None = None) -> int:
    """
    Remove cached entries for one section, one page, or all content.

    Returns the number of entries removed.
    """
    if page and section:
        key = ContentKey(page, section).storage_key()
        if store.get(key) is None:
            return 0
        store.remove(key)
        return 1

    prefix = f"{KEY_PREFIX}{page}_" if page else KEY_PREFIX
    doomed = [k for k in store.keys() if k.startswith(prefix)]
    for k in doomed:
        store.remove(k)
    return len(doomed)
