"""Built-in catalogs for the supported languages."""

from __future__ import annotations

from typing import Dict

from prefsync.config import settings
from . import TranslationEngine

ES: Dict[str, str] = {
    "theme.mode.dark": "Modo oscuro",
    "theme.mode.light": "Modo claro",
    "theme.reset": "Restablecer tema",
    "language.label": "Idioma",
    "language.es": "Español",
    "language.en": "Inglés",
    "session.logout": "Cerrar sesión",
    "session.welcome": "Hola {name}",
    "preferences.loading": "Cargando preferencias...",
    "preferences.error": "Error al cargar preferencias",
    "items.count.one": "{n} elemento",
    "items.count.other": "{n} elementos",
}

EN: Dict[str, str] = {
    "theme.mode.dark": "Dark mode",
    "theme.mode.light": "Light mode",
    "theme.reset": "Reset theme",
    "language.label": "Language",
    "language.es": "Spanish",
    "language.en": "English",
    "session.logout": "Log out",
    "session.welcome": "Hello {name}",
    "preferences.loading": "Loading preferences...",
    "preferences.error": "Failed to load preferences",
    "items.count.one": "{n} item",
    "items.count.other": "{n} items",
}

BUILTIN_CATALOGS: Dict[str, Dict[str, str]] = {"es": ES, "en": EN}


def create_engine_with_catalogs(locale: str = settings.DEFAULT_LANGUAGE) -> TranslationEngine:
    engine = TranslationEngine(locale)
    for code, catalog in BUILTIN_CATALOGS.items():
        engine.register_catalog(code, catalog)
    return engine
