"""Theme preference store.

Owns ``{resolved_theme, is_dark_mode}`` and the override currently layered on
top of the base palette. Provides:

 - Light/Dark mode switching (`set_dark_mode`)
 - Tenant override application without touching the mode (`apply_theme`)
 - Reset to the unbranded palette for the OS scheme (`reset_to_default`)
 - The explicit user mode choice, the only path that persists the flag
   (`choose_mode`)

Every mutation recomputes ``merge_theme(base, override)`` from scratch and
publishes `PrefEvent.THEME_CHANGED` with a diff summary when the resolved map
actually changed, and `PrefEvent.MODE_CHANGED` when the flag flipped. The store
never writes to a rendering surface itself; `SynchronizationCoordinator` does.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Mapping, Optional

from prefsync.app.boot import BootState, encode_mode, parse_mode
from prefsync.app.color_scheme import detect_os_dark_mode
from prefsync.app.storage import PreferenceStorage, StorageError
from prefsync.config import settings
from prefsync.design import (
    ThemeDiff,
    ThemeValidationError,
    base_palette,
    clean_override,
    diff_themes,
    merge_theme,
    validate_theme_keys,
)
from .event_bus import EventBus, PrefEvent

_logger = logging.getLogger(__name__)

__all__ = ["ThemePreferenceStore", "read_identity_mode"]


class ThemePreferenceStore:
    def __init__(
        self,
        bus: EventBus,
        storage: PreferenceStorage,
        boot: BootState,
        *,
        os_prefers_dark: Callable[[], bool] = detect_os_dark_mode,
    ) -> None:
        self._bus = bus
        self._storage = storage
        self._os_prefers_dark = os_prefers_dark
        self._is_dark_mode = boot.is_dark_mode
        self._override: Dict[str, str] = {}
        # Boot invariant: pure base palette, synchronously, no network involved
        self._resolved: Dict[str, str] = base_palette(boot.is_dark_mode)
        missing = validate_theme_keys(self._resolved)
        if missing:  # pragma: no cover - palettes are static
            raise ThemeValidationError(f"Base palette missing slots: {', '.join(missing)}")

    # Accessors ---------------------------------------------------------
    @property
    def resolved_theme(self) -> Mapping[str, str]:
        return dict(self._resolved)

    @property
    def is_dark_mode(self) -> bool:
        return self._is_dark_mode

    @property
    def override(self) -> Mapping[str, str]:
        return dict(self._override)

    # Mutations ---------------------------------------------------------
    def set_dark_mode(self, is_dark: bool, override: Mapping[str, object] | None = None) -> ThemeDiff:
        return self._resolve(base_palette(is_dark), override, is_dark=is_dark)

    def apply_theme(
        self, base: Mapping[str, str], override: Mapping[str, object] | None = None
    ) -> ThemeDiff:
        """Merge ``override`` onto ``base`` keeping the current mode flag."""
        return self._resolve(base, override, is_dark=self._is_dark_mode)

    def reset_to_default(self) -> ThemeDiff:
        """Drop any override and apply the base palette for the current OS scheme.

        The OS preference is re-sampled on every reset; nothing is persisted.
        """
        is_dark = self._os_prefers_dark()
        return self._resolve(base_palette(is_dark), None, is_dark=is_dark)

    def choose_mode(
        self, is_dark: bool, *, user_id: str | None = None, tenant_id: str | None = None
    ) -> ThemeDiff:
        """Explicit user mode choice: persist the flag, keep the active override."""
        encoded = encode_mode(is_dark)
        try:
            self._storage.set(settings.THEME_MODE_KEY, encoded)
            if user_id and tenant_id:
                self._storage.set(settings.identity_mode_key(user_id, tenant_id), encoded)
        except StorageError as exc:
            _logger.warning("could not persist mode choice: %s", exc)
        return self.set_dark_mode(is_dark, self._override)

    # Snapshot ----------------------------------------------------------
    def snapshot(self) -> dict[str, object]:
        """Deterministic description of the active theme (sorted slots)."""
        colors = self._resolved
        return {
            "mode": encode_mode(self._is_dark_mode),
            "override_keys": sorted(self._override),
            "colors": [{"key": k, "value": colors[k]} for k in sorted(colors)],
            "missing_required": validate_theme_keys(colors),
            "metadata": {"exported_at": time.time()},
        }

    # Internal ----------------------------------------------------------
    def _resolve(
        self, base: Mapping[str, str], override: Mapping[str, object] | None, *, is_dark: bool
    ) -> ThemeDiff:
        cleaned = clean_override(override)
        resolved = merge_theme(base, cleaned)
        missing = validate_theme_keys(resolved)
        if missing:
            raise ThemeValidationError(f"Missing required theme slots: {', '.join(missing)}")
        old = self._resolved
        mode_changed = is_dark != self._is_dark_mode
        diff = diff_themes(old, resolved)
        self._resolved = resolved
        self._override = cleaned
        self._is_dark_mode = is_dark
        if not diff.no_changes:
            changed = list(diff.changed.keys())
            _logger.debug("theme resolved: %d slots changed", len(changed))
            self._bus.publish(
                PrefEvent.THEME_CHANGED,
                {"changed": changed[:15], "count": len(changed), "is_dark_mode": is_dark},
            )
        if mode_changed:
            _logger.info("mode switched to %s", encode_mode(is_dark))
            self._bus.publish(PrefEvent.MODE_CHANGED, {"is_dark_mode": is_dark})
        return diff


def read_identity_mode(
    storage: PreferenceStorage, user_id: str, tenant_id: str
) -> Optional[bool]:
    """Return the persisted per-(user, tenant) mode, or None when absent."""
    return parse_mode(storage.get(settings.identity_mode_key(user_id, tenant_id)))
