"""
Local fallback store tests.
"""

import json

from corpsite.client.storage import (
    JsonFileStore,
    MemoryStore,
    clear_cache,
    is_cache_stale,
    read_cached,
    write_cached,
)
from corpsite.domain.entities import ContentKey

KEY = ContentKey("careers", "application")


def test_storage_key_format():
    assert KEY.storage_key() == "cms_careers_application"


def test_write_then_read():
    store = MemoryStore()
    write_cached(store, KEY, {"title": "Hi"}, "2026-01-01T00:00:00+00:00")
    assert store.get("cms_careers_application") == {
        "data": {"title": "Hi"},
        "updatedAt": "2026-01-01T00:00:00+00:00",
    }
    entry = read_cached(store, KEY)
    assert entry is not None
    assert entry["data"] == {"title": "Hi"}


def test_empty_entry_not_served():
    store = MemoryStore()
    write_cached(store, KEY, {}, None)
    assert read_cached(store, KEY) is None
    assert read_cached(MemoryStore(), KEY) is None


class TestIsCacheStale:
    def test_missing_entry_is_stale(self):
        assert is_cache_stale(MemoryStore(), KEY, "2026-01-01T00:00:00Z") is True

    def test_older_cache_is_stale(self):
        store = MemoryStore()
        write_cached(store, KEY, {"a": 1}, "2026-01-01T00:00:00+00:00")
        assert is_cache_stale(store, KEY, "2026-01-02T00:00:00Z") is True

    def test_same_or_newer_cache_is_fresh(self):
        store = MemoryStore()
        write_cached(store, KEY, {"a": 1}, "2026-01-02T00:00:00+00:00")
        assert is_cache_stale(store, KEY, "2026-01-02T00:00:00Z") is False
        assert is_cache_stale(store, KEY, "2026-01-01T00:00:00Z") is False

    def test_garbage_timestamp_is_stale(self):
        store = MemoryStore()
        write_cached(store, KEY, {"a": 1}, "not a date")
        assert is_cache_stale(store, KEY, "2026-01-01T00:00:00Z") is True


class TestClearCache:
    def _populated(self) -> MemoryStore:
        store = MemoryStore()
        for page, section in [("about", "hero"), ("about", "vision"), ("careers", "hero")]:
            write_cached(store, ContentKey(page, section), {"x": 1}, None)
        store.set("unrelated", {"keep": True})
        return store

    def test_clear_one_section(self):
        store = self._populated()
        assert clear_cache(store, "about", "hero") == 1
        assert store.get("cms_about_hero") is None
        assert store.get("cms_about_vision") is not None

    def test_clear_missing_section(self):
        assert clear_cache(self._populated(), "about", "nope") == 0

    def test_clear_page(self):
        store = self._populated()
        assert clear_cache(store, "about") == 2
        assert sorted(store.keys()) == ["cms_careers_hero", "unrelated"]

    def test_clear_all_keeps_foreign_keys(self):
        store = self._populated()
        assert clear_cache(store) == 3
        assert store.keys() == ["unrelated"]


class TestJsonFileStore:
    def test_persists_across_instances(self, tmp_path):
        path = tmp_path / "cache" / "cms.json"
        first = JsonFileStore(path)
        write_cached(first, KEY, {"title": "Saved"}, "2026-01-01T00:00:00+00:00")

        second = JsonFileStore(path)
        entry = read_cached(second, KEY)
        assert entry is not None
        assert entry["data"] == {"title": "Saved"}

    def test_remove_rewrites_file(self, tmp_path):
        path = tmp_path / "cms.json"
        store = JsonFileStore(path)
        write_cached(store, KEY, {"a": 1}, None)
        store.remove(KEY.storage_key())
        assert json.loads(path.read_text()) == {}

    def test_corrupt_file_treated_as_empty(self, tmp_path):
        path = tmp_path / "cms.json"
        path.write_text("{not json")
        store = JsonFileStore(path)
        assert store.keys() == []
