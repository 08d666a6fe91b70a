"""OS-level color scheme detection.

Resolution order:
 1. ``PREFSYNC_COLOR_SCHEME`` environment variable (``dark`` / ``light``)
 2. Qt style hints of the running ``QGuiApplication`` (Qt >= 6.5)
 3. Light

Qt is imported lazily so headless callers never pay for (or require) a GUI.
"""

from __future__ import annotations

import logging
import os

__all__ = ["detect_os_dark_mode"]

_logger = logging.getLogger(__name__)

_ENV_VAR = "PREFSYNC_COLOR_SCHEME"


def _qt_prefers_dark() -> bool | None:
    try:
        from PyQt6.QtCore import Qt  # type: ignore
        from PyQt6.QtGui import QGuiApplication  # type: ignore
    except ImportError:
        return None
    app = QGuiApplication.instance()
    if app is None:
        return None
    hints = QGuiApplication.styleHints()
    if not hasattr(hints, "colorScheme"):
        return None
    scheme = hints.colorScheme()
    if scheme == Qt.ColorScheme.Dark:
        return True
    if scheme == Qt.ColorScheme.Light:
        return False
    return None


def detect_os_dark_mode() -> bool:
    """Return True when the operating system prefers a dark color scheme."""
    env = os.environ.get(_ENV_VAR, "").strip().lower()
    if env in ("dark", "light"):
        return env == "dark"
    if env:
        _logger.warning("ignoring unrecognized %s=%r", _ENV_VAR, env)
    qt = _qt_prefers_dark()
    if qt is not None:
        return qt
    return False
