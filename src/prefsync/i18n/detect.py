"""Bootstrap-time language detection.

Order: stored user language > system locale environment > default. The result
is only the starting locale; `SynchronizationCoordinator` may replace it once
the user override or backend culture is known.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from prefsync.app.storage import PreferenceStorage
from prefsync.config import settings

_logger = logging.getLogger(__name__)

__all__ = ["detect_language"]

_ENV_ORDER = ("LC_ALL", "LC_MESSAGES", "LANG", "LANGUAGE")


def _system_language(environ: Mapping[str, str]) -> Optional[str]:
    for var in _ENV_ORDER:
        value = environ.get(var, "")
        # "en_US.UTF-8", "es-AR", "en:de" -> leading language subtag
        head = value.split(":", 1)[0].split(".", 1)[0].replace("-", "_").split("_", 1)[0]
        head = head.strip().lower()
        if head and head not in ("c", "posix"):
            return head
    return None


def detect_language(
    storage: PreferenceStorage,
    environ: Mapping[str, str] | None = None,
) -> str:
    stored = storage.get(settings.USER_LANGUAGE_KEY)
    if stored and stored.strip().lower() in settings.SUPPORTED_LANGUAGES:
        return stored.strip().lower()
    if stored:
        _logger.debug("stored language %r not supported, trying system locale", stored)
    system = _system_language(os.environ if environ is None else environ)
    if system in settings.SUPPORTED_LANGUAGES:
        return system
    return settings.DEFAULT_LANGUAGE
