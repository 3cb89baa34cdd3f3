from __future__ import annotations

from typing import Sequence

from i18n_http.models import MetricsSink, StatEvent

ALLOWED_STATS = frozenset(StatEvent)


class StatsRecorder:
    def __init__(self, sink: MetricsSink | None, namespace: str = "i18n-backend-http") -> None:
        self.sink = sink
        self.namespace = namespace

    def record(self, event: str, tags: Sequence[str] | None = None) -> None:
        if self.sink is None:
            return
        if event not in ALLOWED_STATS:
            raise ValueError(f"Unknown stats event type to record: {event!r}")
        self.sink.increment(f"{self.namespace}.{event}", tags=list(tags) if tags else None)
