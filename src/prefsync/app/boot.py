"""Boot-time mode resolution.

`resolve_boot` is the only code path that reads the persisted global mode flag
before the theme store exists. It runs synchronously, touches no network, and
its result is what the store applies before the first paint.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from prefsync.config import settings
from .color_scheme import detect_os_dark_mode
from .storage import PreferenceStorage

__all__ = ["BootState", "resolve_boot", "parse_mode", "encode_mode"]

_logger = logging.getLogger(__name__)

ModeSource = Literal["stored", "os"]


@dataclass(frozen=True)
class BootState:
    is_dark_mode: bool
    source: ModeSource


def parse_mode(raw: Optional[str]) -> Optional[bool]:
    """Decode a persisted ``'dark' | 'light'`` flag; anything else is None."""
    if raw == "dark":
        return True
    if raw == "light":
        return False
    return None


def encode_mode(is_dark: bool) -> str:
    return "dark" if is_dark else "light"


def resolve_boot(
    storage: PreferenceStorage,
    os_prefers_dark: Callable[[], bool] = detect_os_dark_mode,
) -> BootState:
    raw = storage.get(settings.THEME_MODE_KEY)
    stored = parse_mode(raw)
    if stored is not None:
        _logger.debug("boot mode from storage: %s", raw)
        return BootState(is_dark_mode=stored, source="stored")
    if raw is not None:
        _logger.warning("ignoring invalid persisted mode flag %r", raw)
    return BootState(is_dark_mode=os_prefers_dark(), source="os")
