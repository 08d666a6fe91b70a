"""Translation engine and locale policy.

Pieces:
 - `TranslationEngine`: catalog registry, active locale with fallback to the
   default language, ``str.format`` interpolation and a small plural helper.
 - `normalize_language` / `language_from_culture`: clamp arbitrary codes to the
   supported set.
 - `resolve_locale`: the precedence rule (user override > backend culture >
   leave the bootstrap-detected locale alone).
 - `extract_translation_keys`: scan sources for ``t("...")`` usages (audits).

Design decisions / assumptions:
 - The engine is an instance, not module state; each engine owns one.
 - Missing key after fallback returns the key itself (easy to spot) rather than raising.
 - Plural helper expects two keys: singular_key, plural_key.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Sequence, Set

from prefsync.config import settings

_logger = logging.getLogger(__name__)

__all__ = [
    "TranslationEngine",
    "normalize_language",
    "language_from_culture",
    "resolve_locale",
    "extract_translation_keys",
]


def normalize_language(
    code: Optional[str],
    supported: Sequence[str] = settings.SUPPORTED_LANGUAGES,
    default: str = settings.DEFAULT_LANGUAGE,
) -> str:
    """Return ``code`` lower-cased if supported, else ``default``."""
    if code:
        candidate = code.strip().lower()
        if candidate in supported:
            return candidate
    return default


def language_from_culture(
    culture: str,
    supported: Sequence[str] = settings.SUPPORTED_LANGUAGES,
    default: str = settings.DEFAULT_LANGUAGE,
) -> str:
    """Leading subtag of a culture (``"en-US"`` -> ``"en"``), clamped to ``supported``.

    An unrecognized subtag falls back to ``default`` and is logged as a warning.
    """
    subtag = re.split(r"[-_]", culture.strip(), maxsplit=1)[0].lower() if culture else ""
    if subtag in supported:
        return subtag
    _logger.warning(
        "backend culture %r has no supported language, falling back to %r", culture, default
    )
    return default


def resolve_locale(
    current: str,
    *,
    user_language: Optional[str] = None,
    backend_culture: Optional[str] = None,
    supported: Sequence[str] = settings.SUPPORTED_LANGUAGES,
    default: str = settings.DEFAULT_LANGUAGE,
) -> str:
    """Compute the locale that should be active.

    1. A user language override wins (clamped to ``supported``); backend
       culture is ignored while it exists.
    2. Else loaded backend preferences decide via their culture's leading subtag.
    3. Else ``current`` (the bootstrap-detected locale) is kept as is.
    """
    if user_language:
        return normalize_language(user_language, supported, default)
    if backend_culture:
        return language_from_culture(backend_culture, supported, default)
    return current


class TranslationEngine:
    def __init__(
        self,
        locale: str = settings.DEFAULT_LANGUAGE,
        *,
        fallback: str = settings.DEFAULT_LANGUAGE,
    ) -> None:
        self._catalogs: Dict[str, Dict[str, str]] = {}
        self._fallback = fallback
        self._locale = locale

    # Catalogs ----------------------------------------------------------
    def register_catalog(self, locale: str, catalog: Dict[str, str]) -> None:
        """Register or extend a catalog (last registration wins per key)."""
        self._catalogs.setdefault(locale, {}).update(catalog)

    def catalogs(self) -> Dict[str, Dict[str, str]]:
        return {loc: dict(cat) for loc, cat in self._catalogs.items()}

    # Locale ------------------------------------------------------------
    @property
    def locale(self) -> str:
        return self._locale

    def set_locale(self, locale: str) -> None:
        self._locale = locale

    # Translation -------------------------------------------------------
    def translate(self, key: str, **variables: Any) -> str:
        """Translate ``key`` in the active locale, falling back to the default language.

        Missing interpolation variables raise ``KeyError`` to surface programmer error.
        """
        text = self._catalogs.get(self._locale, {}).get(key)
        if text is None and self._locale != self._fallback:
            text = self._catalogs.get(self._fallback, {}).get(key)
        if text is None:
            return key
        if "{" not in text:
            return text
        try:
            return text.format(**variables)
        except KeyError as e:
            raise KeyError(f"Missing interpolation variable {e.args[0]!r} for key '{key}'") from e

    t = translate

    def translate_plural(self, singular_key: str, plural_key: str, n: int, **variables: Any) -> str:
        variables.setdefault("n", n)
        return self.translate(singular_key if n == 1 else plural_key, **variables)

    tp = translate_plural


_RE_T_CALL = re.compile(r"\b(?:t|translate)\(\s*['\"]([^'\"]+)['\"]")
_RE_TP_CALL = re.compile(
    r"\b(?:tp|translate_plural)\(\s*['\"]([^'\"]+)['\"]\s*,\s*['\"]([^'\"]+)['\"]"
)


def extract_translation_keys(paths: Iterable[str | Path]) -> Set[str]:
    """Collect keys used via t()/translate() and tp()/translate_plural() under ``paths``."""
    collected: Set[str] = set()
    for p in paths:
        path = Path(p)
        files = path.rglob("*.py") if path.is_dir() else [path] if path.suffix == ".py" else []
        for file in files:
            try:
                text = file.read_text(encoding="utf-8")
            except OSError as exc:
                _logger.warning("skipping unreadable source %s: %s", file, exc)
                continue
            collected.update(m.group(1) for m in _RE_T_CALL.finditer(text))
            for m in _RE_TP_CALL.finditer(text):
                collected.update((m.group(1), m.group(2)))
    return collected
