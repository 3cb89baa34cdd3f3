from __future__ import annotations

from i18n_http.utils import flatten_translations, normalize_keys, shared_cache_key


def test_normalize_keys_flattens_scope_and_key() -> None:
    assert normalize_keys("en", "b.c", ["a"]) == ["en", "a", "b", "c"]


def test_normalize_keys_accepts_string_scope_and_drops_empty_parts() -> None:
    assert normalize_keys("en", "..title.", "app..header") == ["en", "app", "header", "title"]


def test_normalize_keys_custom_separator() -> None:
    assert normalize_keys("en", "b|c", ["a.x"], "|") == ["en", "a.x", "b", "c"]


def test_normalize_keys_without_scope() -> None:
    assert normalize_keys("de", "hello", None) == ["de", "hello"]


def test_flatten_translations_nested() -> None:
    nested = {"app": {"title": "Hi", "menu": {"open": "Open"}}, "bye": "Bye"}

    assert flatten_translations(nested) == {
        "app.title": "Hi",
        "app.menu.open": "Open",
        "bye": "Bye",
    }


def test_shared_cache_key_layout() -> None:
    assert shared_cache_key("i18n/backend/http", "en", "v2") == "i18n/backend/http/translations/en/v2"
