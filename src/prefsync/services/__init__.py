"""Service layer exports.

Responsibilities:
 - Per-engine EventBus core
 - Theme / localization stores, tenant context and auth lifecycle
 - The synchronization coordinator (sole writer of rendering resources)
"""

from .event_bus import EventBus, PrefEvent  # noqa: F401
from .theme_service import ThemePreferenceStore  # noqa: F401
from .localization_service import LocalizationStore, LocalizationPreferences  # noqa: F401
from .tenant_context import Tenant, TenantContext  # noqa: F401
from .auth_lifecycle import AuthLifecycle, AuthState, LoginPayload  # noqa: F401
from .sync_coordinator import SynchronizationCoordinator  # noqa: F401

__all__ = [
    "EventBus",
    "PrefEvent",
    "ThemePreferenceStore",
    "LocalizationStore",
    "LocalizationPreferences",
    "Tenant",
    "TenantContext",
    "AuthLifecycle",
    "AuthState",
    "LoginPayload",
    "SynchronizationCoordinator",
]
