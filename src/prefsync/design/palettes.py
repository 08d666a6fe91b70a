"""Base light/dark palettes and the closed color slot contract.

Every resolved theme carries all of `COLOR_SLOTS`. Tenant branding is layered
on top of one of these palettes (see `theme_merge.merge_theme`); the palettes
themselves are never mutated.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping

__all__ = [
    "COLOR_SLOTS",
    "ROLE_BG_SLOTS",
    "LIGHT_THEME",
    "DARK_THEME",
    "base_palette",
]

COLOR_SLOTS: tuple[str, ...] = (
    "primary",
    "primaryDark",
    "secondary",
    "background",
    "surface",
    "text",
    "textMuted",
    "border",
    "success",
    "warning",
    "error",
    "roleAdmin",
    "roleAdminBg",
    "roleAdminText",
    "roleOperador",
    "roleOperadorBg",
    "roleOperadorText",
    "roleAnalista",
    "roleAnalistaBg",
    "roleAnalistaText",
    "roleDefault",
    "roleDefaultBg",
    "roleDefaultText",
)

# Slots that may be stored as bare hex and get their opacity at render time
ROLE_BG_SLOTS: frozenset[str] = frozenset(s for s in COLOR_SLOTS if s.endswith("Bg"))

LIGHT_THEME: Mapping[str, str] = MappingProxyType(
    {
        "primary": "#2563eb",
        "primaryDark": "#1d4ed8",
        "secondary": "#0ea5e9",
        "background": "#ffffff",
        "surface": "#f8fafc",
        "text": "#0f172a",
        "textMuted": "#64748b",
        "border": "#e2e8f0",
        "success": "#22c55e",
        "warning": "#f59e0b",
        "error": "#ef4444",
        "roleAdmin": "#9333ea",
        "roleAdminBg": "rgba(147, 51, 234, 0.1)",
        "roleAdminText": "#7c3aed",
        "roleOperador": "#2563eb",
        "roleOperadorBg": "rgba(37, 99, 235, 0.1)",
        "roleOperadorText": "#1d4ed8",
        "roleAnalista": "#16a34a",
        "roleAnalistaBg": "rgba(22, 163, 74, 0.1)",
        "roleAnalistaText": "#15803d",
        "roleDefault": "#64748b",
        "roleDefaultBg": "rgba(100, 116, 139, 0.1)",
        "roleDefaultText": "#475569",
    }
)

DARK_THEME: Mapping[str, str] = MappingProxyType(
    {
        "primary": "#2563eb",
        "primaryDark": "#1d4ed8",
        "secondary": "#0ea5e9",
        "background": "#0f172a",
        "surface": "#1e293b",
        "text": "#f1f5f9",
        "textMuted": "#94a3b8",
        "border": "#334155",
        "success": "#22c55e",
        "warning": "#f59e0b",
        "error": "#ef4444",
        "roleAdmin": "#a855f7",
        "roleAdminBg": "rgba(168, 85, 247, 0.1)",
        "roleAdminText": "#c4b5fd",
        "roleOperador": "#3b82f6",
        "roleOperadorBg": "rgba(59, 130, 246, 0.1)",
        "roleOperadorText": "#93c5fd",
        "roleAnalista": "#22c55e",
        "roleAnalistaBg": "rgba(34, 197, 94, 0.1)",
        "roleAnalistaText": "#86efac",
        "roleDefault": "#94a3b8",
        "roleDefaultBg": "rgba(148, 163, 184, 0.1)",
        "roleDefaultText": "#cbd5e1",
    }
)


def base_palette(is_dark: bool) -> Dict[str, str]:
    """Return a fresh copy of the dark or light base palette."""
    return dict(DARK_THEME if is_dark else LIGHT_THEME)
