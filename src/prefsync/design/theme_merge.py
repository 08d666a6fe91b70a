"""Theme merging and diffing.

A resolved theme is always ``merge_theme(base, override)``: the override wins
per slot, absent slots fall through to the base, and neither input is
mutated. The result is recomputed from scratch on every change rather than
patched incrementally, so a stale override key can never survive a reset.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from .palettes import COLOR_SLOTS

__all__ = [
    "ThemeDiff",
    "ThemeValidationError",
    "clean_override",
    "merge_theme",
    "diff_themes",
    "validate_theme_keys",
]

_SLOT_SET = frozenset(COLOR_SLOTS)


class ThemeValidationError(RuntimeError):
    """Raised when a theme is missing required slots."""


@dataclass
class ThemeDiff:
    """Changes between two theme states.

    Attributes
    ----------
    changed : dict[str, tuple[str|None, str|None]]
        Mapping of slot -> (old_value, new_value)
    """

    changed: Dict[str, tuple[Optional[str], Optional[str]]]

    @property
    def no_changes(self) -> bool:  # noqa: D401 - trivial
        return not self.changed


def clean_override(override: Mapping[str, object] | None) -> Dict[str, str]:
    """Keep only known slots with non-empty string values."""
    if not override:
        return {}
    return {
        k: v.strip()
        for k, v in override.items()
        if k in _SLOT_SET and isinstance(v, str) and v.strip()
    }


def merge_theme(
    base: Mapping[str, str], override: Mapping[str, object] | None = None
) -> Dict[str, str]:
    merged = dict(base)
    merged.update(clean_override(override))
    return merged


def diff_themes(old: Mapping[str, str], new: Mapping[str, str]) -> ThemeDiff:
    changed: Dict[str, tuple[Optional[str], Optional[str]]] = {}
    for k in set(old.keys()) | set(new.keys()):
        ov = old.get(k)
        nv = new.get(k)
        if ov != nv:
            changed[k] = (ov, nv)
    return ThemeDiff(changed)


def validate_theme_keys(
    mapping: Mapping[str, str], required: Iterable[str] = COLOR_SLOTS
) -> List[str]:
    """Return the list of required slots that are absent or empty in mapping."""
    return [k for k in required if k not in mapping or not mapping[k]]
