"""Synchronization coordinator.

The single writer of the shared rendering resources: the style surface and the
translation engine's active locale. It listens on the engine's `EventBus` and
serializes the theme and localization stores' effects through itself.

Theme reapplication
    Triggered by a change in ``(tenant identity, mode)``. The last applied pair
    is kept in a plain attribute, outside any store, and recorded *before*
    acting: re-entrant notifications produced by our own `apply_theme` /
    `reset_to_default` calls then see an unchanged pair and fall through as
    no-ops, which breaks the apply -> notify -> apply cycle.

    - tenant active and (tenant or mode changed) -> recompute and apply
      (a mode requested with the tenant is applied in the same recompute)
    - tenant became absent after having one       -> `reset_to_default()`
    - otherwise                                   -> nothing

Style writes
    On `THEME_CHANGED` only the variables whose value differs from what the
    surface last received are written, as one batch.

Locale
    Re-evaluated on `LOCALIZATION_CHANGED` with `resolve_locale`; the engine is
    only touched when the computed locale differs from the active one.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from prefsync.design import base_palette
from prefsync.i18n import TranslationEngine, resolve_locale
from .event_bus import Event, EventBus, PrefEvent, Subscription
from .localization_service import LocalizationStore
from .style_surface import StyleSurface, theme_to_variables
from .tenant_context import TenantContext, TenantIdentity
from .theme_service import ThemePreferenceStore

_logger = logging.getLogger(__name__)

__all__ = ["SynchronizationCoordinator"]


class SynchronizationCoordinator:
    def __init__(
        self,
        bus: EventBus,
        theme: ThemePreferenceStore,
        localization: LocalizationStore,
        tenant: TenantContext,
        surface: StyleSurface,
        translator: TranslationEngine,
    ) -> None:
        self._bus = bus
        self._theme = theme
        self._localization = localization
        self._tenant = tenant
        self._surface = surface
        self._translator = translator
        self._last_applied: Tuple[TenantIdentity, bool] = (
            (None, tenant.generation),
            theme.is_dark_mode,
        )
        self._written: Dict[str, str] = {}
        self._subs: List[Subscription] = []

    # Lifecycle --------------------------------------------------------
    def start(self) -> None:
        """Subscribe and push the current state (the boot palette) synchronously."""
        if self._subs:
            return
        self._subs = [
            self._bus.subscribe(PrefEvent.THEME_CHANGED, self._on_theme_changed),
            self._bus.subscribe(PrefEvent.MODE_CHANGED, self._on_trigger),
            self._bus.subscribe(PrefEvent.TENANT_CHANGED, self._on_trigger),
            self._bus.subscribe(PrefEvent.LOCALIZATION_CHANGED, self._on_localization_changed),
        ]
        self.reconcile_theme()
        self.flush_theme()
        self.sync_locale()

    def stop(self) -> None:
        for sub in self._subs:
            self._bus.unsubscribe(sub)
        self._subs = []

    @property
    def last_applied(self) -> Tuple[TenantIdentity, bool]:
        return self._last_applied

    # Theme -------------------------------------------------------------
    def reconcile_theme(self) -> None:
        tenant = self._tenant.current
        identity = self._tenant.identity()
        requested = self._tenant.take_requested_mode()
        mode = self._theme.is_dark_mode if requested is None else requested
        last_identity, last_mode = self._last_applied
        self._last_applied = (identity, mode)
        if tenant is not None:
            if identity != last_identity or mode != last_mode:
                _logger.debug("applying tenant %s theme (dark=%s)", tenant.id, mode)
                if mode != self._theme.is_dark_mode:
                    # one recompute for branding and mode together
                    self._theme.set_dark_mode(mode, tenant.theme_override)
                else:
                    self._theme.apply_theme(base_palette(mode), tenant.theme_override)
            return
        if last_identity[0] is not None:
            _logger.info("tenant %s gone, resetting theme", last_identity[0])
            self._theme.reset_to_default()
            # reset may re-sample the OS scheme and flip the mode
            self._last_applied = (self._tenant.identity(), self._theme.is_dark_mode)

    def flush_theme(self) -> int:
        """Write changed variables to the surface; returns how many were written."""
        variables = theme_to_variables(self._theme.resolved_theme)
        changed = {k: v for k, v in variables.items() if self._written.get(k) != v}
        if not changed:
            return 0
        self._surface.apply(changed)
        self._written.update(changed)
        return len(changed)

    # Locale ------------------------------------------------------------
    def sync_locale(self) -> Optional[str]:
        """Apply the locale precedence; returns the new locale when it changed."""
        prefs = self._localization.backend_preferences
        target = resolve_locale(
            self._translator.locale,
            user_language=self._localization.user_language,
            backend_culture=prefs.culture if prefs else None,
        )
        if target == self._translator.locale:
            return None
        previous = self._translator.locale
        self._translator.set_locale(target)
        _logger.info("locale changed %s -> %s", previous, target)
        self._bus.publish(PrefEvent.LOCALE_CHANGED, {"locale": target, "previous": previous})
        return target

    # Handlers ----------------------------------------------------------
    def _on_trigger(self, _evt: Event) -> None:
        self.reconcile_theme()

    def _on_theme_changed(self, _evt: Event) -> None:
        self.flush_theme()

    def _on_localization_changed(self, _evt: Event) -> None:
        self.sync_locale()
