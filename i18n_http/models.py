from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Mapping, Protocol, Sequence

TranslationSet = Mapping[str, Any]


@dataclass(frozen=True)
class CacheEntry:
    translations: TranslationSet
    etag: str | None = None
    # memoized failed first load; resolves nothing until a refresh replaces it
    failed: bool = False

    @classmethod
    def failed_load(cls) -> CacheEntry:
        return cls(translations=MappingProxyType({}), etag=None, failed=True)


@dataclass(frozen=True)
class SharedEntry:
    translations: TranslationSet
    etag: str | None
    expires_at: float

    def to_entry(self) -> CacheEntry:
        return CacheEntry(translations=self.translations, etag=self.etag)


@dataclass(frozen=True)
class RefreshFailed:
    """A refresh attempt that produced nothing usable.

    Kept distinct from an empty translation set, which is a legitimate payload.
    """

    error: BaseException | None = None


class NotModified:
    _instance: NotModified | None = None

    def __new__(cls) -> NotModified:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_MODIFIED"


NOT_MODIFIED = NotModified()


@dataclass(frozen=True)
class FetchResult:
    body: bytes | NotModified
    etag: str | None

    @property
    def not_modified(self) -> bool:
        return self.body is NOT_MODIFIED


class StatEvent(StrEnum):
    download_fail = "download_fail"
    open_retry = "open_retry"
    read_retry = "read_retry"


class SharedCache(Protocol):
    """Key-value store shared by the fleet.

    ``write`` with ``unless_exist=True`` must be an atomic create-if-absent and
    return whether the value was stored.
    """

    def read(self, key: str) -> Any | None: ...

    def write(
        self,
        key: str,
        value: Any,
        *,
        expires_in: float | None = None,
        unless_exist: bool = False,
    ) -> bool: ...


class MetricsSink(Protocol):
    def increment(self, name: str, tags: Sequence[str] | None = None) -> None: ...


class TranslationSource(Protocol):
    def resolve_path(self, locale: str) -> str: ...

    def parse_body(self, body: bytes) -> TranslationSet: ...
