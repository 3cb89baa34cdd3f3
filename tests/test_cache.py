from __future__ import annotations

from i18n_http.cache import LRUCache, MemorySharedCache
from i18n_http.models import CacheEntry


def _entry(value: str, etag: str | None = None) -> CacheEntry:
    return CacheEntry(translations={"hello": value}, etag=etag)


def test_put_evicts_least_recently_used() -> None:
    cache = LRUCache(2)

    cache.put("a", _entry("a"))
    cache.put("b", _entry("b"))
    cache.put("c", _entry("c"))

    assert cache.keys() == ["b", "c"]
    assert cache.get("a") is None


def test_get_marks_entry_most_recently_used() -> None:
    cache = LRUCache(2)
    cache.put("a", _entry("a"))
    cache.put("b", _entry("b"))

    assert cache.get("a") is not None
    cache.put("c", _entry("c"))

    assert set(cache.keys()) == {"a", "c"}


def test_keys_and_peek_do_not_change_recency() -> None:
    cache = LRUCache(2)
    cache.put("a", _entry("a"))
    cache.put("b", _entry("b"))

    cache.keys()
    assert cache.peek("a") is not None
    cache.put("c", _entry("c"))

    assert cache.keys() == ["b", "c"]


def test_replacing_entry_does_not_grow_cache() -> None:
    cache = LRUCache(2)
    cache.put("a", _entry("a", "v1"))
    cache.put("a", _entry("a2", "v2"))

    assert len(cache) == 1
    entry = cache.get("a")
    assert entry is not None
    assert entry.etag == "v2"


def test_non_positive_capacity_never_stores() -> None:
    for capacity in (0, -1):
        cache = LRUCache(capacity)
        cache.put("a", _entry("a"))

        assert cache.get("a") is None
        assert cache.keys() == []
        assert "a" not in cache


def test_shared_cache_unless_exist_is_create_if_absent() -> None:
    cache = MemorySharedCache()

    assert cache.write("k-lock", True, expires_in=60, unless_exist=True) is True
    assert cache.write("k-lock", True, expires_in=60, unless_exist=True) is False
    assert cache.read("k-lock") is True


def test_shared_cache_expired_key_can_be_recreated() -> None:
    now = [100.0]
    cache = MemorySharedCache(clock=lambda: now[0])

    cache.write("k-lock", True, expires_in=10, unless_exist=True)
    now[0] = 111.0

    assert cache.read("k-lock") is None
    assert cache.write("k-lock", True, expires_in=10, unless_exist=True) is True


def test_shared_cache_without_ttl_persists() -> None:
    now = [0.0]
    cache = MemorySharedCache(clock=lambda: now[0])
    cache.write("data", {"a": 1})
    now[0] = 1e9

    assert cache.read("data") == {"a": 1}


def test_shared_cache_evicts_when_full() -> None:
    cache = MemorySharedCache(max_entries=2)
    cache.write("a", 1, expires_in=5)
    cache.write("b", 2, expires_in=50)
    cache.write("c", 3)

    assert cache.read("a") is None
    assert cache.read("b") == 2
    assert cache.read("c") == 3


def test_shared_cache_evicts_first_written_when_nothing_expires() -> None:
    cache = MemorySharedCache(max_entries=2)
    cache.write("a", 1)
    cache.write("b", 2)
    cache.write("a", 10)
    cache.write("c", 3)

    assert cache.read("a") is None
    assert cache.read("b") == 2
    assert cache.read("c") == 3
