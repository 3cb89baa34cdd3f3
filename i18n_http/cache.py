from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable

from i18n_http.models import CacheEntry


class LRUCache:
    """Bounded in-process store of per-locale translations.

    Every operation takes the same lock; the poller thread and lookup callers
    mutate it concurrently.
    """

    def __init__(self, capacity: int = 10) -> None:
        self._capacity = capacity
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = RLock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, locale: str) -> CacheEntry | None:
        with self._lock:
            entry = self._store.get(locale)
            if entry is None:
                return None
            self._store.move_to_end(locale)
            return entry

    def peek(self, locale: str) -> CacheEntry | None:
        with self._lock:
            return self._store.get(locale)

    def put(self, locale: str, entry: CacheEntry) -> None:
        if self._capacity <= 0:
            return
        with self._lock:
            self._store[locale] = entry
            self._store.move_to_end(locale)
            if len(self._store) > self._capacity:
                self._store.popitem(last=False)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._store)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, locale: object) -> bool:
        with self._lock:
            return locale in self._store


@dataclass
class _Slot:
    value: Any
    expires_at: float | None


class MemorySharedCache:
    """Shared-cache implementation for a single process.

    Useful when several backends live in one interpreter and in tests. A real
    fleet plugs in a networked store exposing the same ``read``/``write``.
    """

    def __init__(self, max_entries: int = 4000, clock: Callable[[], float] = time.monotonic) -> None:
        self._max_entries = max_entries
        self._clock = clock
        self._store: dict[str, _Slot] = {}
        self._lock = RLock()

    def read(self, key: str) -> Any | None:
        with self._lock:
            slot = self._live_slot(key)
            return slot.value if slot else None

    def write(
        self,
        key: str,
        value: Any,
        *,
        expires_in: float | None = None,
        unless_exist: bool = False,
    ) -> bool:
        with self._lock:
            if unless_exist and self._live_slot(key) is not None:
                return False
            if key not in self._store and len(self._store) >= self._max_entries:
                self._evict_one()
            expires_at = None if expires_in is None else self._clock() + expires_in
            self._store[key] = _Slot(value=value, expires_at=expires_at)
            return True

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def _live_slot(self, key: str) -> _Slot | None:
        slot = self._store.get(key)
        if not slot:
            return None
        if slot.expires_at is None or slot.expires_at > self._clock():
            return slot
        self._store.pop(key, None)
        return None

    def _evict_one(self) -> None:
        # soonest-expiring slot first; without any TTL, the first one written
        expiring = [(slot.expires_at, key) for key, slot in self._store.items() if slot.expires_at is not None]
        if expiring:
            victim: str | None = min(expiring)[1]
        else:
            victim = next(iter(self._store), None)
        if victim is not None:
            del self._store[victim]
