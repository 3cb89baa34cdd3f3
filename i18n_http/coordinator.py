from __future__ import annotations

import logging
import sys
import time
from typing import Callable

from i18n_http.config import Settings
from i18n_http.http import EtagHttpClient
from i18n_http.metrics import StatsRecorder
from i18n_http.models import (
    CacheEntry,
    RefreshFailed,
    SharedCache,
    SharedEntry,
    StatEvent,
    TranslationSet,
    TranslationSource,
)
from i18n_http.utils import shared_cache_key

logger = logging.getLogger("i18n_http")

ExceptionHandler = Callable[[BaseException], None]


def write_to_stderr(exc: BaseException) -> None:
    sys.stderr.write(f"{exc}\n")


class UpdateCoordinator:
    """Decides per locale whether to reuse shared state or hit the origin.

    With a shared cache configured, fresh shared entries are reused as-is and
    only the holder of the updater lock downloads an expired one. The lock is
    advisory: losing it just means reusing what is already shared. If lock
    ownership cycles unluckily across a synchronized fleet, data can be up to
    roughly twice the polling interval old.
    """

    def __init__(
        self,
        settings: Settings,
        source: TranslationSource,
        http_client: EtagHttpClient,
        *,
        shared_cache: SharedCache | None = None,
        stats: StatsRecorder | None = None,
        exception_handler: ExceptionHandler | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings
        self.source = source
        self.http_client = http_client
        self.shared_cache = shared_cache
        self.stats = stats or StatsRecorder(None, settings.stats_namespace)
        self.exception_handler = exception_handler or write_to_stderr
        self._clock = clock

    def cache_key(self, locale: str) -> str:
        return shared_cache_key(
            self.settings.cache_namespace,
            locale,
            self.settings.cache_schema_version,
        )

    def path_for(self, locale: str) -> str | None:
        """Request path used to tag failure reports; ``None`` if it cannot be resolved."""
        try:
            return self.source.resolve_path(locale)
        except Exception:
            return None

    def refresh(
        self,
        locale: str,
        old_etag: str | None = None,
        *,
        force_check: bool,
        previous: TranslationSet | None = None,
    ) -> CacheEntry | RefreshFailed:
        if self.shared_cache is None:
            return self.download(locale, etag=old_etag, previous=previous)

        key = self.cache_key(locale)
        interval = self.settings.polling_interval_seconds
        # captured before any slow work so the schedule does not drift
        now = self._clock()
        shared = self._read_shared(key)

        if shared is not None and (
            not force_check
            or shared.expires_at > now
            or not self.acquire_updater_lock(key, interval)
        ):
            logger.debug("Reusing shared translations for %s (etag=%s)", locale, shared.etag)
            return shared.to_entry()

        if shared is not None:
            etag, base = shared.etag, shared.translations
        else:
            etag, base = old_etag, previous

        result = self.download(locale, etag=etag, previous=base)
        if isinstance(result, RefreshFailed):
            return result

        self.shared_cache.write(
            key,
            SharedEntry(translations=result.translations, etag=result.etag, expires_at=now + interval),
        )
        return result

    def acquire_updater_lock(self, key: str, interval: float) -> bool:
        if self.shared_cache is None:
            return True
        acquired = bool(
            self.shared_cache.write(f"{key}-lock", True, expires_in=interval, unless_exist=True)
        )
        logger.debug("Updater lock %s %s", key, "acquired" if acquired else "held elsewhere")
        return acquired

    def download(
        self,
        locale: str,
        *,
        etag: str | None,
        previous: TranslationSet | None = None,
    ) -> CacheEntry | RefreshFailed:
        path: str | None = None
        try:
            path = self.source.resolve_path(locale)
            fetched = self.http_client.fetch_with_retry(path, etag)
            if fetched.not_modified:
                if previous is None:
                    raise LookupError(f"Origin reported {path} unchanged but no prior translations are held.")
                return CacheEntry(translations=previous, etag=fetched.etag)
            translations = self.source.parse_body(fetched.body)  # type: ignore[arg-type]
            return CacheEntry(translations=translations, etag=fetched.etag)
        except Exception as exc:
            self.report_failure(exc, path)
            return RefreshFailed(error=exc)

    def report_failure(self, exc: BaseException, path: str | None) -> None:
        logger.warning("Translation download failed for %s: %s - %s", path, type(exc).__name__, exc)
        self.stats.record(
            StatEvent.download_fail,
            tags=[f"exception:{type(exc).__name__}", f"path:{path}"],
        )
        self.exception_handler(exc)

    def _read_shared(self, key: str) -> SharedEntry | None:
        raw = self.shared_cache.read(key) if self.shared_cache is not None else None
        if raw is None:
            return None
        if isinstance(raw, SharedEntry):
            return raw
        # tolerate stores that round-trip entries as plain sequences
        translations, etag, expires_at = raw
        return SharedEntry(translations=translations, etag=etag, expires_at=float(expires_at))
