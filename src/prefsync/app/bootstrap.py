"""Engine bootstrap.

`create_engine()` builds one fully wired preference engine and returns a
`PreferenceContext` with references to every part. Nothing is cached at module
level: each call gets its own storage, bus, stores and coordinator, which is what
tests rely on.

Build order matters:
 1. Storage and boot resolution, synchronously, before any store exists
 2. Theme store (applies the pure base palette immediately)
 3. Translation engine seeded from the detected language
 4. Localization store, tenant context, auth state
 5. Coordinator (pushes the boot palette to the surface on `start()`)
 6. Auth lifecycle

Qt is never imported here unless ``qt=True`` asks for a `QtStyleSurface`.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from prefsync.app.boot import BootState, resolve_boot
from prefsync.app.color_scheme import detect_os_dark_mode
from prefsync.app.storage import PreferenceStorage
from prefsync.i18n import TranslationEngine
from prefsync.i18n.catalogs import create_engine_with_catalogs
from prefsync.i18n.detect import detect_language
from prefsync.services.auth_lifecycle import AuthLifecycle, AuthState
from prefsync.services.backend_client import BackendClient
from prefsync.services.event_bus import EventBus
from prefsync.services.localization_service import LocalizationStore
from prefsync.services.logging_service import LoggingService
from prefsync.services.style_surface import MemoryStyleSurface, QtStyleSurface, StyleSurface
from prefsync.services.sync_coordinator import SynchronizationCoordinator
from prefsync.services.tenant_context import TenantContext
from prefsync.services.theme_service import ThemePreferenceStore

_logger = logging.getLogger(__name__)

__all__ = ["PreferenceContext", "create_engine"]


@dataclass
class PreferenceContext:
    """Container with references created during bootstrap.

    Attributes
    ----------
    boot: Mode decision taken before any store was built
    client: Backend client (real `BackendClient` or an injected fake)
    started_at / duration_s: Monotonic bootstrap timing
    metadata: Free-form dict (data dir, surface kind)
    """

    boot: BootState
    storage: PreferenceStorage
    bus: EventBus
    theme: ThemePreferenceStore
    translator: TranslationEngine
    localization: LocalizationStore
    tenant: TenantContext
    auth: AuthState
    lifecycle: AuthLifecycle
    coordinator: SynchronizationCoordinator
    surface: StyleSurface
    client: Any
    logging: Optional[LoggingService]
    started_at: float
    duration_s: float
    metadata: dict[str, Any] = field(default_factory=dict)

    async def aclose(self) -> None:
        self.coordinator.stop()
        if self.logging is not None:
            self.logging.detach()
        closer = getattr(self.client, "aclose", None)
        if closer is not None:
            await closer()


def create_engine(
    *,
    data_dir: str | Path | None = None,
    client: Any | None = None,
    surface: StyleSurface | None = None,
    os_prefers_dark: Callable[[], bool] = detect_os_dark_mode,
    qt: bool = False,
    capture_logs: bool = False,
) -> PreferenceContext:
    """Create and start a preference engine.

    Parameters
    ----------
    client: Anything with the `BackendClient` coroutine methods; defaults to a real one.
    surface: Style target; defaults to `QtStyleSurface` when ``qt`` else `MemoryStyleSurface`.
    capture_logs: Attach a `LoggingService` ring buffer to the ``prefsync`` logger.
    """
    started = time.perf_counter()
    storage = PreferenceStorage(data_dir)
    boot = resolve_boot(storage, os_prefers_dark)

    bus = EventBus()
    log_service: Optional[LoggingService] = None
    if capture_logs:
        log_service = LoggingService(bus)
        log_service.attach()

    theme = ThemePreferenceStore(bus, storage, boot, os_prefers_dark=os_prefers_dark)
    translator = create_engine_with_catalogs(detect_language(storage))
    if client is None:
        client = BackendClient()
    localization = LocalizationStore(bus, storage, client.fetch_preferences)
    tenant = TenantContext(bus)
    auth = AuthState()
    if surface is None:
        surface = QtStyleSurface() if qt else MemoryStyleSurface()

    coordinator = SynchronizationCoordinator(bus, theme, localization, tenant, surface, translator)
    coordinator.start()
    lifecycle = AuthLifecycle(bus, auth, tenant, theme, localization, storage, client)

    duration = time.perf_counter() - started
    _logger.info(
        "engine ready in %.1f ms (mode=%s from %s, locale=%s)",
        duration * 1000,
        "dark" if boot.is_dark_mode else "light",
        boot.source,
        translator.locale,
    )
    return PreferenceContext(
        boot=boot,
        storage=storage,
        bus=bus,
        theme=theme,
        translator=translator,
        localization=localization,
        tenant=tenant,
        auth=auth,
        lifecycle=lifecycle,
        coordinator=coordinator,
        surface=surface,
        client=client,
        logging=log_service,
        started_at=started,
        duration_s=duration,
        metadata={"data_dir": str(storage.path.parent), "surface": type(surface).__name__},
    )
