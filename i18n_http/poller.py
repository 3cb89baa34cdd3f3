from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from i18n_http.cache import LRUCache
from i18n_http.coordinator import UpdateCoordinator
from i18n_http.models import RefreshFailed

logger = logging.getLogger("i18n_http")


class Poller:
    """Background refresh loop for every locale resident in memory.

    The stop flag is only looked at after each sleep; neither the sleep nor an
    in-flight download is interrupted.
    """

    def __init__(
        self,
        translations: LRUCache,
        coordinator: UpdateCoordinator,
        interval: float,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.translations = translations
        self.coordinator = coordinator
        self.interval = interval
        self._sleep = sleep
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def start(self) -> None:
        if self.is_running:
            return
        self._thread = threading.Thread(target=self.run, name="i18n-http-poller", daemon=True)
        self._thread.start()
        logger.info("Translation poller started (interval=%ss)", self.interval)

    def stop(self) -> None:
        self._stop.set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def run(self) -> None:
        while True:
            self._sleep(self.interval)
            if self._stop.is_set():
                break
            self.refresh_all()
        logger.info("Translation poller stopped")

    def refresh_all(self) -> None:
        # on failure the last good translations stay in place
        for locale in self.translations.keys():
            current = self.translations.peek(locale)
            old_etag = current.etag if current else None
            previous = current.translations if current and not current.failed else None
            try:
                result = self.coordinator.refresh(
                    locale,
                    old_etag,
                    force_check=True,
                    previous=previous,
                )
            except Exception as exc:
                self.coordinator.report_failure(exc, self.coordinator.path_for(locale))
                continue
            if not isinstance(result, RefreshFailed):
                self.translations.put(locale, result)
