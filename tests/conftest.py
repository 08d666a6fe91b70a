# Shared fixtures: an isolated engine per test (tmp_path storage, fake backend,
# in-memory style surface) and a headless Qt platform for the Qt surface tests.

import asyncio
import os
from typing import Any, Dict, List, Optional

import pytest

from prefsync.app.bootstrap import create_engine
from prefsync.services.backend_client import BackendError
from prefsync.services.localization_service import LocalizationPreferences, MeasurementSystem

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class FakeBackend:
    """In-process stand-in for `BackendClient`.

    ``gate_*`` events, when set by a test, hold the matching call until released.
    """

    def __init__(self) -> None:
        self.token: Optional[str] = None
        self.preferences = LocalizationPreferences(
            time_zone_id="America/Argentina/Buenos_Aires",
            culture="en-US",
            measurement_system=MeasurementSystem.METRIC,
            country=54,
        )
        self.tenant_themes: Dict[str, Dict[str, Any]] = {}
        self.preferences_error: Optional[Exception] = None
        self.tenant_error: Optional[Exception] = None
        self.revoke_error: Optional[Exception] = None
        self.gate_preferences: Optional[asyncio.Event] = None
        self.gate_tenant: Optional[asyncio.Event] = None
        self.preference_calls = 0
        self.tenant_calls: List[str] = []
        self.revoked: List[Optional[str]] = []

    def set_token(self, token: Optional[str]) -> None:
        self.token = token

    async def fetch_preferences(self) -> LocalizationPreferences:
        self.preference_calls += 1
        if self.gate_preferences is not None:
            await self.gate_preferences.wait()
        if self.preferences_error is not None:
            raise self.preferences_error
        return self.preferences

    async def fetch_tenant_theme(self, tenant_id: str) -> Dict[str, Any]:
        self.tenant_calls.append(tenant_id)
        if self.gate_tenant is not None:
            await self.gate_tenant.wait()
        if self.tenant_error is not None:
            raise self.tenant_error
        if tenant_id not in self.tenant_themes:
            raise BackendError(f"GET organizations/{tenant_id} failed with status 404")
        return self.tenant_themes[tenant_id]

    async def revoke_session(self, token: Optional[str] = None) -> None:
        self.revoked.append(token)
        if self.revoke_error is not None:
            raise self.revoke_error

    async def aclose(self) -> None:
        return None


@pytest.fixture(autouse=True)
def _neutral_locale_env(monkeypatch):
    # Language detection and OS scheme detection read the environment
    for var in ("LC_ALL", "LC_MESSAGES", "LANG", "LANGUAGE", "PREFSYNC_COLOR_SCHEME"):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def os_dark():
    """Mutable OS scheme: tests flip ``os_dark["value"]`` to simulate a change."""
    return {"value": False}


@pytest.fixture()
def make_engine(tmp_path, backend, os_dark):
    def _make(**kwargs):
        kwargs.setdefault("data_dir", tmp_path)
        kwargs.setdefault("client", backend)
        kwargs.setdefault("os_prefers_dark", lambda: os_dark["value"])
        return create_engine(**kwargs)

    return _make


@pytest.fixture()
def engine(make_engine):
    return make_engine()
