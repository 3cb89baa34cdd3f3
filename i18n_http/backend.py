from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterable, Mapping

import httpx

from i18n_http.cache import LRUCache
from i18n_http.config import Settings, get_settings
from i18n_http.coordinator import ExceptionHandler, UpdateCoordinator
from i18n_http.http import EtagHttpClient
from i18n_http.metrics import StatsRecorder
from i18n_http.models import (
    CacheEntry,
    MetricsSink,
    RefreshFailed,
    SharedCache,
    TranslationSet,
    TranslationSource,
)
from i18n_http.poller import Poller
from i18n_http.utils import normalize_keys

logger = logging.getLogger("i18n_http")

# bookkeeping pseudo-locale some host frameworks store alongside real ones
RESERVED_LOCALE = "i18n"


class HttpBackend:
    """Translation backend that reads through to an HTTP origin.

    ``source`` supplies the locale path and the body parser. Subclasses may
    override :meth:`lookup_key` to resolve flat keys differently.
    """

    def __init__(
        self,
        source: TranslationSource,
        settings: Settings | None = None,
        *,
        shared_cache: SharedCache | None = None,
        exception_handler: ExceptionHandler | None = None,
        metrics_sink: MetricsSink | None = None,
        http_client: httpx.Client | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings or get_settings()
        self.source = source

        stats = StatsRecorder(metrics_sink, self.settings.stats_namespace)
        self.http_client = EtagHttpClient(self.settings, stats=stats, http_client=http_client)
        self.coordinator = UpdateCoordinator(
            self.settings,
            source,
            self.http_client,
            shared_cache=shared_cache,
            stats=stats,
            exception_handler=exception_handler,
            clock=clock,
        )
        self._translations = LRUCache(self.settings.memory_cache_size)
        self.poller = Poller(
            self._translations,
            self.coordinator,
            self.settings.polling_interval_seconds,
        )
        if self.settings.poll_enabled:
            self.poller.start()

    def lookup(
        self,
        locale: str,
        key: Any,
        scope: Iterable[Any] | str | None = (),
        options: Mapping[str, Any] | None = None,
    ) -> Any | None:
        separator = (options or {}).get("separator")
        flat_key = ".".join(normalize_keys(locale, key, scope, separator)[1:])
        translations = self.translations(locale)
        if translations is None:
            return None
        return self.lookup_key(translations, flat_key)

    def lookup_key(self, translations: TranslationSet, key: str) -> Any | None:
        return translations.get(key)

    def translations(self, locale: str) -> TranslationSet | None:
        entry = self._translations.get(locale)
        if entry is not None:
            return None if entry.failed else entry.translations

        try:
            result = self.coordinator.refresh(locale, None, force_check=False)
        except Exception as exc:
            self.coordinator.report_failure(exc, self.coordinator.path_for(locale))
            result = RefreshFailed(error=exc)

        if isinstance(result, RefreshFailed):
            # remembered so lookups stop hitting the origin; the poller retries it
            self._translations.put(locale, CacheEntry.failed_load())
            return None
        logger.debug("Loaded translations for %s (etag=%s)", locale, result.etag)
        self._translations.put(locale, result)
        return result.translations

    def available_locales(self) -> set[str]:
        return {locale for locale in self._translations.keys() if locale != RESERVED_LOCALE}

    def stop_polling(self) -> None:
        self.poller.stop()

    def close(self) -> None:
        self.stop_polling()
        self.http_client.close()

    def __enter__(self) -> HttpBackend:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
