from __future__ import annotations

import json
from typing import Any

from i18n_http.models import TranslationSet
from i18n_http.utils import flatten_translations


class JsonTranslationSource:
    """Serves ``<locale>`` from a JSON document at ``path_template``.

    Nested objects are flattened into dotted keys so ``{"a": {"b": 1}}`` is
    looked up as ``a.b``.
    """

    def __init__(self, path_template: str = "/translations/{locale}.json", *, root_key: str | None = None) -> None:
        self.path_template = path_template
        self.root_key = root_key

    def resolve_path(self, locale: str) -> str:
        return self.path_template.format(locale=locale)

    def parse_body(self, body: bytes) -> TranslationSet:
        payload: Any = json.loads(body)
        if self.root_key is not None:
            payload = payload[self.root_key]
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object of translations, got {type(payload).__name__}.")
        return flatten_translations(payload)
