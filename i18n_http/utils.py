from __future__ import annotations

from typing import Any, Iterable, Mapping

DEFAULT_SEPARATOR = "."


def _split_key(key: Any, separator: str) -> list[str]:
    if key is None:
        return []
    if isinstance(key, (list, tuple)):
        parts: list[str] = []
        for item in key:
            parts.extend(_split_key(item, separator))
        return parts
    return [part for part in str(key).split(separator) if part]


def normalize_keys(
    locale: str,
    key: Any,
    scope: Iterable[Any] | str | None = None,
    separator: str | None = None,
) -> list[str]:
    """Flatten ``locale``, ``scope`` and ``key`` into a single list of key parts.

    Strings are split on ``separator`` and empty segments are dropped, so
    ``("en", "b.c", ["a"])`` becomes ``["en", "a", "b", "c"]``.
    """
    sep = separator or DEFAULT_SEPARATOR
    if isinstance(scope, str) or scope is None:
        scope_parts = _split_key(scope, sep)
    else:
        scope_parts = _split_key(list(scope), sep)
    return [str(locale)] + scope_parts + _split_key(key, sep)


def flatten_translations(data: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten_translations(value, full_key))
        else:
            flat[full_key] = value
    return flat


def shared_cache_key(namespace: str, locale: str, schema_version: str) -> str:
    return f"{namespace}/translations/{locale}/{schema_version}"
