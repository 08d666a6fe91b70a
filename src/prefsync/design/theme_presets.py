"""Tenant branding presets.

Each preset is a partial slot map meant to be used as a tenant override on top
of the light or dark base palette. Presets never introduce new slots; role
background slots are bare hex and receive their opacity at render time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping


@dataclass(frozen=True)
class BrandingPreset:
    id: str
    name: str
    description: str
    colors: Mapping[str, str]


_PRESETS: dict[str, BrandingPreset] = {
    "clasico-corporativo": BrandingPreset(
        id="clasico-corporativo",
        name="Azul Corporativo",
        description="Branding sobrio y profesional.",
        colors={
            "primary": "#1D4ED8",
            "secondary": "#0EA5E9",
            "roleAdminBg": "#1D4ED8",
            "roleAdminText": "#93C5FD",
            "roleOperadorBg": "#0EA5E9",
            "roleOperadorText": "#7DD3FC",
            "roleAnalistaBg": "#22C55E",
            "roleAnalistaText": "#86EFAC",
        },
    ),
    "dark-pro": BrandingPreset(
        id="dark-pro",
        name="Verde Tech",
        description="Acentos verdes con contraste limpio.",
        colors={
            "primary": "#16A34A",
            "secondary": "#22C55E",
            "roleAdminBg": "#16A34A",
            "roleAdminText": "#86EFAC",
            "roleOperadorBg": "#22C55E",
            "roleOperadorText": "#86EFAC",
            "roleAnalistaBg": "#0EA5E9",
            "roleAnalistaText": "#7DD3FC",
        },
    ),
    "minimal-light": BrandingPreset(
        id="minimal-light",
        name="Violeta Moderno",
        description="Moderno y distintivo, sin perder legibilidad.",
        colors={
            "primary": "#7C3AED",
            "secondary": "#3B82F6",
            "roleAdminBg": "#7C3AED",
            "roleAdminText": "#C4B5FD",
            "roleOperadorBg": "#3B82F6",
            "roleOperadorText": "#93C5FD",
            "roleAnalistaBg": "#22C55E",
            "roleAnalistaText": "#86EFAC",
        },
    ),
}


def get_preset(preset_id: str) -> BrandingPreset | None:
    return _PRESETS.get(preset_id)


def preset_override(preset_id: str) -> Dict[str, str] | None:
    preset = _PRESETS.get(preset_id)
    return dict(preset.colors) if preset else None


def available_presets() -> list[str]:
    return list(_PRESETS.keys())


__all__ = ["BrandingPreset", "get_preset", "preset_override", "available_presets"]
