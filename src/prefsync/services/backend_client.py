"""Async HTTP client for the preference backend.

Wraps ``httpx.AsyncClient`` for the three calls the engine makes:

 - ``GET organizations/current/preferences``  -> `LocalizationPreferences`
 - ``GET organizations/{id}``                  -> tenant theme payload
 - ``POST auth/logout``                        -> best-effort session revoke

Transport and HTTP failures surface as `BackendError`; callers decide whether
they are fatal (none of them are, in the engine).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from prefsync.config import settings
from .localization_service import LocalizationPreferences

_logger = logging.getLogger(__name__)

__all__ = ["BackendClient", "BackendError"]

PREFERENCES_PATH = "organizations/current/preferences"
TENANT_PATH = "organizations/{tenant_id}"
LOGOUT_PATH = "auth/logout"


class BackendError(RuntimeError):
    pass


class BackendClient:
    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        retries: int | None = None,
        backoff: float = 0.5,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.build_api_url(""),
            timeout=timeout if timeout is not None else settings.HTTP_TIMEOUT,
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            transport=transport,
        )
        self._token: Optional[str] = None
        self._retries = retries if retries is not None else settings.HTTP_RETRIES
        self._backoff = backoff

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    async def aclose(self) -> None:
        await self._client.aclose()

    # Endpoints -----------------------------------------------------------
    async def fetch_preferences(self) -> LocalizationPreferences:
        data = await self._request("GET", PREFERENCES_PATH)
        try:
            return LocalizationPreferences.from_payload(data)
        except ValueError as exc:
            raise BackendError(str(exc)) from exc

    async def fetch_tenant_theme(self, tenant_id: str) -> Dict[str, Any]:
        return await self._request("GET", TENANT_PATH.format(tenant_id=tenant_id))

    async def revoke_session(self, token: Optional[str] = None) -> None:
        await self._request("POST", LOGOUT_PATH, token=token)

    # Internal ----------------------------------------------------------
    async def _request(self, method: str, path: str, *, token: Optional[str] = None) -> Dict[str, Any]:
        bearer = token or self._token
        headers = {"Authorization": f"Bearer {bearer}"} if bearer else None
        # Only idempotent reads are retried, and only on transport failures
        retries = self._retries if method == "GET" else 0
        attempt = 0
        while True:
            attempt += 1
            try:
                response = await self._client.request(method, path, headers=headers)
                response.raise_for_status()
                break
            except httpx.HTTPStatusError as exc:
                raise BackendError(
                    f"{method} {path} failed with status {exc.response.status_code}"
                ) from exc
            except httpx.TransportError as exc:
                if attempt > retries:
                    raise BackendError(f"{method} {path} failed: {exc}") from exc
                _logger.debug("%s %s attempt %d failed: %s", method, path, attempt, exc)
                await asyncio.sleep(self._backoff * (2 ** (attempt - 1)))
            except httpx.HTTPError as exc:
                raise BackendError(f"{method} {path} failed: {exc}") from exc
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as exc:
            raise BackendError(f"{method} {path} returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise BackendError(f"{method} {path} returned {type(data).__name__}, expected object")
        _logger.debug("%s %s -> %d", method, path, response.status_code)
        return data
