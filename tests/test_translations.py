"""
Tests for the translation resolver and translation admin.
"""

from __future__ import annotations

from typing import Any

import pytest

from app.application.exceptions import StoreFetchError
from app.application.use_cases.translations import (
    LANGUAGE_SETTING_KEY,
    TRANSLATIONS_TABLE,
    TranslationAdmin,
    TranslationResolver,
)
from app.infrastructure.store.memory_data_store import MemoryDataStore
from app.infrastructure.store.memory_settings_store import MemorySettingsStore


def _rows() -> list[dict[str, Any]]:
    return [
        {"id": "1", "key": "nav.home", "category": "nav", "english_text": "Home", "spanish_text": "Inicio", "is_active": True},
        {"id": "2", "key": "nav.book", "category": "nav", "english_text": "Book Now", "spanish_text": "", "is_active": True},
        {"id": "3", "key": "hero.title", "category": "hero", "english_text": "Nail Art", "spanish_text": "Arte de Unas", "is_active": True},
        {"id": "4", "key": "old.banner", "category": "hero", "english_text": "Sale", "spanish_text": "Oferta", "is_active": False},
    ]


def _resolver(language: str | None = None) -> tuple[TranslationResolver, MemoryDataStore, MemorySettingsStore]:
    store = MemoryDataStore(tables={TRANSLATIONS_TABLE: _rows()})
    settings_store = MemorySettingsStore({LANGUAGE_SETTING_KEY: language} if language else None)
    resolver = TranslationResolver(store=store, settings_store=settings_store)
    resolver.refresh()
    return resolver, store, settings_store


class FlakyStore(MemoryDataStore):
    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.fail = False

    def select(self, table, columns="*", filters=None, order=(), limit=None):
        if self.fail:
            raise StoreFetchError("network down")
        return super().select(table, columns=columns, filters=filters, order=order, limit=limit)


def test_refresh_loads_only_active_rows():
    resolver, _, _ = _resolver()
    assert set(resolver.snapshot()) == {"nav.home", "nav.book", "hero.title"}


def test_refresh_is_idempotent():
    """Refreshing twice without store changes yields the same cache."""
    resolver, _, _ = _resolver()
    first = resolver.snapshot()
    resolver.refresh()
    assert resolver.snapshot() == first


def test_missing_key_falls_back():
    """Missing keys return the fallback, else the key itself."""
    resolver, _, _ = _resolver()
    assert resolver.resolve_by_key("missing.key", "Fallback") == "Fallback"
    assert resolver.resolve_by_key("missing.key") == "missing.key"


def test_key_resolution_follows_language():
    resolver, _, _ = _resolver()
    assert resolver.resolve_by_key("nav.home") == "Home"

    resolver.set_language("es")
    assert resolver.resolve_by_key("nav.home") == "Inicio"
    # no Spanish text yet
    assert resolver.resolve_by_key("nav.book", "Reserve") == "Book Now"

    resolver.set_language("en")
    assert resolver.resolve_by_key("nav.home") == "Home"


def test_text_resolution_is_case_insensitive_and_trimmed():
    resolver, _, _ = _resolver(language="es")
    assert resolver.resolve_by_text("  home ") == "Inicio"
    assert resolver.resolve_by_text("NAIL ART") == "Arte de Unas"
    assert resolver.resolve_by_text("Book now") == "Book now"
    assert resolver.resolve_by_text("Unknown phrase") == "Unknown phrase"
    assert resolver.resolve_by_text("") == ""


def test_text_resolution_in_english_is_identity():
    resolver, _, _ = _resolver()
    assert resolver.resolve_by_text("home") == "home"


def test_language_is_loaded_from_settings_store():
    resolver, _, _ = _resolver(language="es")
    assert resolver.language == "es"


def test_unknown_saved_language_defaults_to_english():
    resolver, _, _ = _resolver(language="fr")
    assert resolver.language == "en"


def test_set_language_persists_and_notifies():
    resolver, _, settings_store = _resolver()
    seen: list[str] = []
    unsubscribe = resolver.subscribe(seen.append)

    resolver.set_language("es")
    assert settings_store.get(LANGUAGE_SETTING_KEY) == "es"
    assert seen == ["es"]

    unsubscribe()
    resolver.set_language("en")
    assert seen == ["es"]


def test_set_language_rejects_unsupported():
    resolver, _, settings_store = _resolver()
    with pytest.raises(ValueError):
        resolver.set_language("fr")
    assert resolver.language == "en"
    assert settings_store.get(LANGUAGE_SETTING_KEY) is None


def test_failed_refresh_keeps_previous_cache():
    store = FlakyStore(tables={TRANSLATIONS_TABLE: _rows()})
    resolver = TranslationResolver(store=store, settings_store=MemorySettingsStore())
    resolver.refresh()
    before = resolver.snapshot()

    store.fail = True
    assert resolver.refresh() == []
    assert resolver.snapshot() == before


def test_watch_store_refreshes_on_change():
    """Writes to the translations table rebuild the cache."""
    resolver, store, _ = _resolver()
    resolver.watch_store()

    store.insert(TRANSLATIONS_TABLE, {"key": "nav.contact", "category": "nav", "english_text": "Contact", "is_active": True})
    assert resolver.resolve_by_key("nav.contact") == "Contact"

    resolver.dispose()
    store.insert(TRANSLATIONS_TABLE, {"key": "nav.gallery", "category": "nav", "english_text": "Gallery", "is_active": True})
    assert resolver.resolve_by_key("nav.gallery") == "nav.gallery"


def test_admin_mutations_rebuild_cache():
    resolver, store, _ = _resolver(language="es")
    admin = TranslationAdmin(store=store, resolver=resolver)

    created = admin.create({"key": "cta.call", "category": "cta", "english_text": "Call Us", "spanish_text": "Llamanos", "is_active": True})
    assert created.id
    assert resolver.resolve_by_key("cta.call") == "Llamanos"

    updated = admin.update("2", {"spanish_text": "Reservar"})
    assert updated is not None
    assert updated.spanish_text == "Reservar"
    assert resolver.resolve_by_key("nav.book") == "Reservar"
    assert store.select(TRANSLATIONS_TABLE, filters={"id": "2"})[0]["updated_at"]

    admin.delete("1")
    assert resolver.resolve_by_key("nav.home") == "nav.home"


def test_admin_update_unknown_id_returns_none():
    resolver, store, _ = _resolver()
    assert TranslationAdmin(store=store, resolver=resolver).update("nope", {"english_text": "x"}) is None


def test_admin_listing():
    resolver, store, _ = _resolver()
    admin = TranslationAdmin(store=store, resolver=resolver)

    assert [t.key for t in admin.list_all()] == ["hero.title", "old.banner", "nav.book", "nav.home"]
    assert [t.key for t in admin.list_by_category("hero")] == ["hero.title"]


class CountingStore(MemoryDataStore):
    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.translation_selects = 0

    def select(self, table, columns="*", filters=None, order=(), limit=None):
        if table == TRANSLATIONS_TABLE:
            self.translation_selects += 1
        return super().select(table, columns=columns, filters=filters, order=order, limit=limit)


def test_admin_mutation_refreshes_once_when_watching():
    """A watching resolver is refreshed by the change callback only, not again by the admin."""
    store = CountingStore(tables={TRANSLATIONS_TABLE: _rows()})
    resolver = TranslationResolver(store=store, settings_store=MemorySettingsStore())
    resolver.refresh()
    resolver.watch_store()
    admin = TranslationAdmin(store=store, resolver=resolver)

    store.translation_selects = 0
    admin.create({"key": "cta.call", "category": "cta", "english_text": "Call Us", "is_active": True})
    assert store.translation_selects == 1
    assert resolver.resolve_by_key("cta.call") == "Call Us"

    store.translation_selects = 0
    admin.delete("1")
    assert store.translation_selects == 1
    assert resolver.resolve_by_key("nav.home") == "nav.home"


def test_admin_mutation_refreshes_when_not_watching():
    store = CountingStore(tables={TRANSLATIONS_TABLE: _rows()})
    resolver = TranslationResolver(store=store, settings_store=MemorySettingsStore())
    admin = TranslationAdmin(store=store, resolver=resolver)

    admin.update("2", {"spanish_text": "Reservar"})

    assert store.translation_selects == 1
    assert not resolver.is_watching
