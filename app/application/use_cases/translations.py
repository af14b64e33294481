from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable

from app.application.exceptions import StoreFetchError
from app.application.ports.data_store import DataStorePort, StoreChange
from app.application.ports.settings_store import SettingsStorePort
from app.domain.entities.translation import ENGLISH, SPANISH, SUPPORTED_LANGUAGES, Translation

TRANSLATIONS_TABLE = "translations"
LANGUAGE_SETTING_KEY = "studio-language"

LanguageListener = Callable[[str], None]


class TranslationResolver:
    """
    Resolves display strings for the current language.

    Owns the translation cache (key -> Translation), the current language and
    the list of language-change listeners. The cache is only ever replaced as
    a whole by refresh(); readers take one reference per call so they see
    either the old or the new snapshot, never a partial one.
    """

    def __init__(self, store: DataStorePort, settings_store: SettingsStorePort) -> None:
        self._store = store
        self._settings_store = settings_store
        self._cache: dict[str, Translation] = {}
        self._language = self._load_language()
        self._listeners: list[LanguageListener] = []
        self._listeners_lock = threading.Lock()
        self._unsubscribe_store: Callable[[], None] | None = None
        self._logger = logging.getLogger(__name__)

    @property
    def language(self) -> str:
        return self._language

    @property
    def is_watching(self) -> bool:
        return self._unsubscribe_store is not None

    def snapshot(self) -> dict[str, Translation]:
        return dict(self._cache)

    def refresh(self) -> list[Translation]:
        try:
            rows = self._store.select(
                TRANSLATIONS_TABLE,
                filters={"is_active": True},
                order=[("category", True), ("key", True)],
            )
        except StoreFetchError as e:
            self._logger.error("Error fetching translations", extra={"error": str(e)})
            return []

        translations = [Translation.from_row(row) for row in rows]
        cache: dict[str, Translation] = {}
        for translation in translations:
            cache[translation.key] = translation
        self._cache = cache

        self._logger.info("Translations refreshed", extra={"count": len(cache)})
        return translations

    def resolve_by_key(self, key: str, fallback: str | None = None) -> str:
        translation = self._cache.get(key)
        language = self._language

        if translation is None:
            self._logger.warning("Translation missing for key", extra={"key": key})
            return fallback or key

        if language == SPANISH and translation.spanish_text:
            return translation.spanish_text

        return translation.english_text or fallback or key

    def resolve_by_text(self, source_text: str | None) -> str:
        if not source_text:
            return ""

        if self._language == ENGLISH:
            return source_text

        needle = source_text.strip().lower()
        for translation in self._cache.values():
            if (translation.english_text or "").strip().lower() == needle:
                if translation.spanish_text:
                    return translation.spanish_text
                break

        return source_text

    def set_language(self, language: str) -> None:
        if language not in SUPPORTED_LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")

        self._language = language
        self._settings_store.set(LANGUAGE_SETTING_KEY, language)
        self._logger.info("Language changed", extra={"language": language})

        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(language)

    def subscribe(self, listener: LanguageListener) -> Callable[[], None]:
        with self._listeners_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def watch_store(self) -> None:
        """Refresh the cache whenever the translations table changes."""
        if self._unsubscribe_store is not None:
            return
        self._unsubscribe_store = self._store.subscribe(TRANSLATIONS_TABLE, self._on_store_change)

    def dispose(self) -> None:
        if self._unsubscribe_store is not None:
            self._unsubscribe_store()
            self._unsubscribe_store = None
        with self._listeners_lock:
            self._listeners.clear()

    def _on_store_change(self, change: StoreChange) -> None:
        self._logger.info("Translations changed", extra={"table": change.table, "event": change.event})
        self.refresh()

    def _load_language(self) -> str:
        saved = self._settings_store.get(LANGUAGE_SETTING_KEY)
        if saved in SUPPORTED_LANGUAGES:
            return saved
        return ENGLISH


class TranslationAdmin:
    """Admin CRUD over the translations table. Every mutation rebuilds the resolver cache."""

    def __init__(self, store: DataStorePort, resolver: TranslationResolver) -> None:
        self._store = store
        self._resolver = resolver
        self._logger = logging.getLogger(__name__)

    def list_all(self) -> list[Translation]:
        rows = self._store.select(TRANSLATIONS_TABLE, order=[("category", True), ("key", True)])
        return [Translation.from_row(row) for row in rows]

    def list_by_category(self, category: str) -> list[Translation]:
        rows = self._store.select(
            TRANSLATIONS_TABLE,
            filters={"category": category, "is_active": True},
            order=[("key", True)],
        )
        return [Translation.from_row(row) for row in rows]

    def create(self, fields: dict[str, Any]) -> Translation:
        row = self._store.insert(TRANSLATIONS_TABLE, dict(fields))
        self._logger.info("Translation created", extra={"key": row.get("key")})
        self._rebuild_cache()
        return Translation.from_row(row)

    def update(self, translation_id: str, fields: dict[str, Any]) -> Translation | None:
        values = dict(fields)
        values["updated_at"] = datetime.now(timezone.utc).isoformat()
        rows = self._store.update(TRANSLATIONS_TABLE, values, "id", translation_id)
        self._rebuild_cache()
        if not rows:
            return None
        self._logger.info("Translation updated", extra={"key": rows[0].get("key")})
        return Translation.from_row(rows[0])

    def delete(self, translation_id: str) -> None:
        self._store.delete(TRANSLATIONS_TABLE, "id", translation_id)
        self._logger.info("Translation deleted", extra={"translation_id": translation_id})
        self._rebuild_cache()

    def _rebuild_cache(self) -> None:
        # a watching resolver already refreshed from the store's change callback
        if not self._resolver.is_watching:
            self._resolver.refresh()
