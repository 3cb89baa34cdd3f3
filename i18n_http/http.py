from __future__ import annotations

import logging
from typing import Callable, TypeVar

import httpx

from i18n_http.config import Settings
from i18n_http.metrics import StatsRecorder
from i18n_http.models import NOT_MODIFIED, FetchResult, StatEvent

logger = logging.getLogger("i18n_http")

T = TypeVar("T")


class FetchError(RuntimeError):
    def __init__(self, status_code: int, path: str) -> None:
        super().__init__(f"Translation download {path} failed with {status_code}.")
        self.status_code = status_code
        self.path = path


class EtagHttpClient:
    def __init__(
        self,
        settings: Settings,
        stats: StatsRecorder | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings
        self.stats = stats or StatsRecorder(None, settings.stats_namespace)
        self._http = http_client or httpx.Client(
            base_url=settings.base_url,
            timeout=httpx.Timeout(
                settings.read_timeout_seconds,
                connect=settings.open_timeout_seconds,
                read=settings.read_timeout_seconds,
            ),
            headers={"User-Agent": settings.user_agent},
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> EtagHttpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def fetch(self, path: str, etag: str | None = None) -> FetchResult:
        headers: dict[str, str] = {}
        if etag:
            headers["If-None-Match"] = etag

        response = self._http.get(path, headers=headers)
        status = response.status_code

        if status == 304:
            return FetchResult(body=NOT_MODIFIED, etag=etag)
        if status == 200:
            return FetchResult(body=response.content, etag=response.headers.get("etag"))
        raise FetchError(status, path)

    def fetch_with_retry(self, path: str, etag: str | None = None) -> FetchResult:
        return self.with_retry(lambda: self.fetch(path, etag))

    def with_retry(self, operation: Callable[[], T]) -> T:
        """Run ``operation``, retrying connect and read timeouts separately.

        Each timeout class has its own budget. Anything other than those two
        timeouts propagates on the first occurrence.
        """
        open_tries = 0
        read_tries = 0
        while True:
            try:
                return operation()
            except httpx.ConnectTimeout:
                open_tries += 1
                if open_tries > self.settings.open_retries:
                    raise
                logger.warning("Open timeout, retrying (%d/%d)", open_tries, self.settings.open_retries)
                self.stats.record(StatEvent.open_retry)
            except httpx.ReadTimeout:
                read_tries += 1
                if read_tries > self.settings.read_retries:
                    raise
                logger.warning("Read timeout, retrying (%d/%d)", read_tries, self.settings.read_retries)
                self.stats.record(StatEvent.read_retry)
