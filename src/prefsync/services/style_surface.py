"""Rendering surfaces for resolved theme variables.

A surface is the document-level style target: a flat set of CSS-style custom
properties (``--color-primary`` etc). Only `SynchronizationCoordinator` writes
to it, in one `apply()` batch per theme change.

 - `MemoryStyleSurface`: headless, records every batch (tests, CLI).
 - `QtStyleSurface`: sets the variables as dynamic properties on the running
   ``QApplication`` and regenerates the application style sheet from them.
   PyQt6 is imported lazily so headless use never requires a GUI.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Protocol

from prefsync.config import settings
from prefsync.design import ROLE_BG_SLOTS, color_to_alpha

_logger = logging.getLogger(__name__)

__all__ = [
    "StyleSurface",
    "MemoryStyleSurface",
    "QtStyleSurface",
    "css_variable_name",
    "theme_to_variables",
]

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def css_variable_name(slot: str) -> str:
    """``roleAdminBg`` -> ``--color-role-admin-bg``."""
    return "--color-" + _CAMEL_BOUNDARY.sub("-", slot).lower()


def theme_to_variables(
    theme: Mapping[str, str], *, role_bg_alpha: float = settings.ROLE_BG_ALPHA
) -> Dict[str, str]:
    """Map a resolved theme to surface variables, tinting bare-hex role backgrounds."""
    out: Dict[str, str] = {}
    for slot, value in theme.items():
        if slot in ROLE_BG_SLOTS:
            value = color_to_alpha(value, role_bg_alpha)
        out[css_variable_name(slot)] = value
    return out


class StyleSurface(Protocol):
    def apply(self, variables: Mapping[str, str]) -> None: ...  # pragma: no cover

    def snapshot(self) -> Mapping[str, str]: ...  # pragma: no cover


class MemoryStyleSurface:
    def __init__(self) -> None:
        self._values: Dict[str, str] = {}
        self.batches: List[Dict[str, str]] = []

    def apply(self, variables: Mapping[str, str]) -> None:
        batch = dict(variables)
        self._values.update(batch)
        self.batches.append(batch)

    def snapshot(self) -> Mapping[str, str]:
        return dict(self._values)

    @property
    def write_count(self) -> int:
        return sum(len(b) for b in self.batches)


class QtStyleSurface:
    """Surface backed by a ``QApplication`` (dynamic properties + style sheet)."""

    def __init__(self, app: Any | None = None) -> None:
        if app is None:
            from PyQt6.QtWidgets import QApplication  # type: ignore

            app = QApplication.instance()
            if app is None:
                raise RuntimeError("QtStyleSurface requires a running QApplication")
        self._app = app
        self._values: Dict[str, str] = {}

    def apply(self, variables: Mapping[str, str]) -> None:
        if not variables:
            return
        for name, value in variables.items():
            self._app.setProperty(name, value)
        self._values.update(variables)
        self._app.setStyleSheet(self.generate_qss())
        _logger.debug("qt surface: %d variables applied", len(variables))

    def snapshot(self) -> Mapping[str, str]:
        return dict(self._values)

    def generate_qss(self) -> str:
        """Small application style sheet derived from the current variables."""
        v = self._values
        bg = v.get("--color-background", "#0f172a")
        surf = v.get("--color-surface", bg)
        txt = v.get("--color-text", "#f1f5f9")
        muted = v.get("--color-text-muted", txt)
        border = v.get("--color-border", "#334155")
        primary = v.get("--color-primary", "#2563eb")
        primary_dark = v.get("--color-primary-dark", primary)
        error = v.get("--color-error", "#ef4444")
        return f"""
QMainWindow, QDialog {{ background: {bg}; color: {txt}; }}
QWidget {{ color: {txt}; }}
QLabel[muted='true'] {{ color: {muted}; }}
QFrame#card, QTableView, QListView, QTreeView {{ background: {surf}; border: 1px solid {border}; }}
QLineEdit, QPlainTextEdit, QComboBox {{ background: {surf}; color: {txt}; border: 1px solid {border}; }}
QPushButton {{ background: {primary}; color: #ffffff; border: 1px solid {primary}; padding: 4px 10px; }}
QPushButton:hover {{ background: {primary_dark}; }}
QLabel#errorLabel {{ color: {error}; }}
QLabel[role='admin'] {{ background: {v.get('--color-role-admin-bg', surf)}; color: {v.get('--color-role-admin-text', txt)}; }}
QLabel[role='operador'] {{ background: {v.get('--color-role-operador-bg', surf)}; color: {v.get('--color-role-operador-text', txt)}; }}
QLabel[role='analista'] {{ background: {v.get('--color-role-analista-bg', surf)}; color: {v.get('--color-role-analista-text', txt)}; }}
QLabel[role='default'] {{ background: {v.get('--color-role-default-bg', surf)}; color: {v.get('--color-role-default-text', txt)}; }}
""".strip()
