"""Session lifecycle glue.

`AuthLifecycle` ties login/logout to the tenant, theme and localization stores.

Login
    Records the session, then (when the login response carries no branding)
    performs exactly one tenant theme lookup before returning. The lookup
    captures ``(tenant id, session epoch)`` first; if a logout or another login
    happened meanwhile the result is dropped. Lookup failures are logged and
    the session proceeds unbranded.

Logout
    Local cleanup first (auth, tenant, theme reset, localization preferences),
    then the server-side revoke, best effort.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple

from prefsync.app.storage import PreferenceStorage
from prefsync.design import clean_override
from .event_bus import EventBus, PrefEvent
from .localization_service import LocalizationStore
from .tenant_context import Tenant, TenantContext
from .theme_service import ThemePreferenceStore, read_identity_mode

_logger = logging.getLogger(__name__)

__all__ = ["AuthState", "LoginPayload", "AuthLifecycle", "SessionBackend"]


class SessionBackend(Protocol):
    def set_token(self, token: Optional[str]) -> None: ...  # pragma: no cover

    async def fetch_tenant_theme(self, tenant_id: str) -> Dict[str, Any]: ...  # pragma: no cover

    async def revoke_session(self, token: Optional[str] = None) -> None: ...  # pragma: no cover


@dataclass(frozen=True)
class LoginPayload:
    user_id: str
    token: str
    tenant_id: str
    user_name: str = ""
    tenant_name: str = ""
    tenant_logo: str = ""
    theme_override: Optional[Mapping[str, Any]] = None

    @classmethod
    def from_response(cls, data: Mapping[str, Any]) -> "LoginPayload":
        """Build from a login response ``{user, token, tenant, theme?}``."""
        user = data.get("user") or {}
        tenant = data.get("tenant") or {}
        try:
            user_id = str(user["id"])
            tenant_id = str(tenant["id"])
            token = str(data["token"])
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Malformed login response: missing {exc}") from exc
        theme = data.get("theme")
        return cls(
            user_id=user_id,
            token=token,
            tenant_id=tenant_id,
            user_name=str(user.get("name") or ""),
            tenant_name=str(tenant.get("name") or tenant.get("nombre") or ""),
            tenant_logo=str(tenant.get("logoUrl") or ""),
            theme_override=theme if isinstance(theme, Mapping) and theme else None,
        )


@dataclass
class AuthState:
    user_id: Optional[str] = None
    user_name: str = ""
    token: Optional[str] = None
    tenant_id: Optional[str] = None
    epoch: int = field(default=0)

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def login(self, payload: LoginPayload) -> None:
        self.user_id = payload.user_id
        self.user_name = payload.user_name
        self.token = payload.token
        self.tenant_id = payload.tenant_id
        self.epoch += 1

    def clear(self) -> None:
        self.user_id = None
        self.user_name = ""
        self.token = None
        self.tenant_id = None
        self.epoch += 1

    def identity(self) -> Tuple[Optional[str], int]:
        return self.tenant_id, self.epoch


class AuthLifecycle:
    def __init__(
        self,
        bus: EventBus,
        auth: AuthState,
        tenant: TenantContext,
        theme: ThemePreferenceStore,
        localization: LocalizationStore,
        storage: PreferenceStorage,
        client: SessionBackend,
    ) -> None:
        self._bus = bus
        self._auth = auth
        self._tenant = tenant
        self._theme = theme
        self._localization = localization
        self._storage = storage
        self._client = client

    @property
    def auth(self) -> AuthState:
        return self._auth

    async def login(self, payload: LoginPayload) -> Optional[Tenant]:
        """Start a session; returns the active tenant, or None if superseded."""
        self._auth.login(payload)
        self._client.set_token(payload.token)
        _logger.info("login user=%s tenant=%s", payload.user_id, payload.tenant_id)
        started = self._auth.identity()

        override: Mapping[str, Any] = payload.theme_override or {}
        name, logo = payload.tenant_name, payload.tenant_logo
        if payload.theme_override is None:
            fetched = await self._lookup_branding(payload.tenant_id)
            if self._auth.identity() != started:
                _logger.info("discarding tenant lookup for %s: session changed", payload.tenant_id)
                return None
            if fetched is not None:
                override = fetched.theme_override
                name = name or fetched.name
                logo = logo or fetched.logo

        tenant = Tenant(
            id=payload.tenant_id, name=name, logo=logo, theme_override=clean_override(override)
        )
        # Branding and the stored mode land in one apply
        stored_mode = read_identity_mode(self._storage, payload.user_id, payload.tenant_id)
        self._tenant.set_tenant(tenant, dark_mode=stored_mode)
        self._bus.publish(
            PrefEvent.SESSION_STARTED,
            {"user_id": payload.user_id, "tenant_id": payload.tenant_id},
        )
        return tenant

    async def logout(self) -> None:
        token = self._auth.token
        user_id = self._auth.user_id
        self._auth.clear()
        self._client.set_token(None)
        if self._tenant.current is not None:
            # the coordinator resets the theme when the tenant goes away
            self._tenant.clear()
        else:
            self._theme.reset_to_default()
        self._localization.clear()
        _logger.info("logout user=%s", user_id)
        self._bus.publish(PrefEvent.SESSION_ENDED, {"user_id": user_id})
        if token is None:
            return
        try:
            await self._client.revoke_session(token)
        except Exception as exc:  # noqa: BLE001 - revoke is best effort
            _logger.warning("session revoke failed: %s", exc)

    async def refresh_tenant_branding(self) -> bool:
        """Re-fetch the active tenant's branding; True when it was applied."""
        tenant_id = self._tenant.tenant_id
        if tenant_id is None:
            return False
        started = self._auth.identity()
        generation = self._tenant.generation
        fetched = await self._lookup_branding(tenant_id)
        if fetched is None:
            return False
        if self._auth.identity() != started or self._tenant.generation != generation:
            _logger.info("discarding branding refresh for %s: tenant changed", tenant_id)
            return False
        return self._tenant.update_override(tenant_id, fetched.theme_override)

    async def _lookup_branding(self, tenant_id: str) -> Optional[Tenant]:
        try:
            data = await self._client.fetch_tenant_theme(tenant_id)
        except Exception as exc:  # noqa: BLE001 - branding is optional
            _logger.warning("tenant theme lookup failed for %s: %s", tenant_id, exc)
            return None
        return Tenant.from_payload(tenant_id, data)
