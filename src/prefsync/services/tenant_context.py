"""Tenant context: the active tenant identity and its branding delta.

The tenant override lives here and nowhere else. It exists only while a tenant
is active and is dropped atomically by `clear()`; it is deliberately never
persisted, so a refresh can not resurrect branding for the wrong tenant.

`generation` increments on every change. Async work that must not outlive a
tenant transition captures `identity()` before suspending and compares it
afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from prefsync.design import clean_override
from .event_bus import EventBus, PrefEvent

_logger = logging.getLogger(__name__)

__all__ = ["Tenant", "TenantContext", "TenantIdentity"]

TenantIdentity = Tuple[Optional[str], int]


@dataclass(frozen=True)
class Tenant:
    id: str
    name: str = ""
    logo: str = ""
    theme_override: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, tenant_id: str, data: Mapping[str, Any] | None) -> "Tenant":
        """Build from a tenant theme payload (partial slot map + name + logoUrl).

        Accepts either a flat payload or one nesting the colors under ``theme``.
        """
        data = data or {}
        theme = data.get("theme")
        colors: Mapping[str, Any] = theme if isinstance(theme, Mapping) else data
        logo = data.get("logoUrl") or (theme.get("logoUrl") if isinstance(theme, Mapping) else None)
        return cls(
            id=str(tenant_id),
            name=str(data.get("name") or data.get("nombre") or ""),
            logo=str(logo or ""),
            theme_override=clean_override(colors),
        )


class TenantContext:
    def __init__(self, bus: EventBus) -> None:
        self._bus = bus
        self._current: Optional[Tenant] = None
        self._generation = 0
        self._requested_mode: Optional[bool] = None

    @property
    def current(self) -> Optional[Tenant]:
        return self._current

    @property
    def tenant_id(self) -> Optional[str]:
        return self._current.id if self._current else None

    @property
    def generation(self) -> int:
        return self._generation

    def identity(self) -> TenantIdentity:
        return self.tenant_id, self._generation

    def take_requested_mode(self) -> Optional[bool]:
        """Return and forget the mode requested by the last `set_tenant`."""
        mode, self._requested_mode = self._requested_mode, None
        return mode

    def has_override(self) -> bool:
        return bool(self._current and self._current.theme_override)

    def set_tenant(self, tenant: Tenant, *, dark_mode: Optional[bool] = None) -> None:
        """Activate ``tenant``; ``dark_mode`` asks the next apply to switch mode as well."""
        if tenant == self._current and dark_mode is None:
            return
        self._current = tenant
        self._requested_mode = dark_mode
        self._generation += 1
        _logger.info("tenant active: %s (%d override slots)", tenant.id, len(tenant.theme_override))
        self._publish()

    def update_override(self, tenant_id: str, override: Mapping[str, object]) -> bool:
        """Replace the branding of the active tenant; ignored for any other id."""
        if self._current is None or self._current.id != tenant_id:
            return False
        self.set_tenant(
            Tenant(
                id=self._current.id,
                name=self._current.name,
                logo=self._current.logo,
                theme_override=clean_override(override),
            )
        )
        return True

    def clear(self) -> None:
        if self._current is None:
            return
        _logger.info("tenant cleared: %s", self._current.id)
        self._current = None
        self._requested_mode = None
        self._generation += 1
        self._publish()

    def _publish(self) -> None:
        payload: Dict[str, object] = {"tenant_id": self.tenant_id, "generation": self._generation}
        self._bus.publish(PrefEvent.TENANT_CHANGED, payload)
