import json

import httpx
import pytest

from prefsync.services.backend_client import BackendClient, BackendError
from prefsync.services.localization_service import MeasurementSystem


def _client(handler, retries=0):
    return BackendClient(
        base_url="http://api.test/api/v1/",
        transport=httpx.MockTransport(handler),
        retries=retries,
        backoff=0,
    )


@pytest.mark.asyncio
async def test_fetch_preferences_parses_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(
            200,
            json={"timeZoneId": "UTC", "culture": "en-US", "measurementSystem": 1, "country": 1},
        )

    client = _client(handler)
    client.set_token("abc")
    prefs = await client.fetch_preferences()
    await client.aclose()
    assert seen["url"] == "http://api.test/api/v1/organizations/current/preferences"
    assert seen["auth"] == "Bearer abc"
    assert prefs.culture == "en-US"
    assert prefs.measurement_system is MeasurementSystem.IMPERIAL


@pytest.mark.asyncio
async def test_fetch_tenant_theme():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/organizations/42"
        return httpx.Response(200, json={"name": "Acme", "primary": "#FF0000"})

    client = _client(handler)
    data = await client.fetch_tenant_theme("42")
    await client.aclose()
    assert data == {"name": "Acme", "primary": "#FF0000"}


@pytest.mark.asyncio
async def test_revoke_uses_explicit_token_and_accepts_empty_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(204)

    client = _client(handler)
    await client.revoke_session("old-token")
    await client.aclose()
    assert seen == {"method": "POST", "path": "/api/v1/auth/logout", "auth": "Bearer old-token"}


@pytest.mark.asyncio
async def test_no_token_no_authorization_header():
    def handler(request: httpx.Request) -> httpx.Response:
        assert "Authorization" not in request.headers
        return httpx.Response(200, json={})

    client = _client(handler)
    assert await client.fetch_tenant_theme("1") == {}
    await client.aclose()


@pytest.mark.asyncio
async def test_http_error_status_raises_backend_error():
    client = _client(lambda request: httpx.Response(500, json={"error": "x"}))
    with pytest.raises(BackendError, match="500"):
        await client.fetch_preferences()
    await client.aclose()


@pytest.mark.asyncio
async def test_transport_error_raises_backend_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = _client(handler)
    with pytest.raises(BackendError, match="refused"):
        await client.fetch_tenant_theme("1")
    await client.aclose()


@pytest.mark.asyncio
async def test_invalid_json_raises_backend_error():
    client = _client(lambda request: httpx.Response(200, content=b"<html>"))
    with pytest.raises(BackendError, match="invalid JSON"):
        await client.fetch_tenant_theme("1")
    await client.aclose()


@pytest.mark.asyncio
async def test_non_object_body_raises_backend_error():
    client = _client(lambda request: httpx.Response(200, content=json.dumps([1, 2]).encode()))
    with pytest.raises(BackendError, match="expected object"):
        await client.fetch_tenant_theme("1")
    await client.aclose()


@pytest.mark.asyncio
async def test_malformed_preferences_raise_backend_error():
    client = _client(lambda request: httpx.Response(200, json={"culture": "es"}))
    with pytest.raises(BackendError, match="Malformed"):
        await client.fetch_preferences()
    await client.aclose()


@pytest.mark.asyncio
async def test_get_retried_on_transport_error():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.method)
        if len(attempts) < 3:
            raise httpx.ConnectTimeout("slow", request=request)
        return httpx.Response(200, json={"primary": "#FF0000"})

    client = _client(handler, retries=2)
    assert await client.fetch_tenant_theme("1") == {"primary": "#FF0000"}
    await client.aclose()
    assert attempts == ["GET", "GET", "GET"]


@pytest.mark.asyncio
async def test_logout_not_retried():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request.method)
        raise httpx.ConnectError("refused", request=request)

    client = _client(handler, retries=3)
    with pytest.raises(BackendError):
        await client.revoke_session("t")
    await client.aclose()
    assert attempts == ["POST"]


@pytest.mark.asyncio
async def test_status_errors_not_retried():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(1)
        return httpx.Response(503)

    client = _client(handler, retries=3)
    with pytest.raises(BackendError, match="503"):
        await client.fetch_preferences()
    await client.aclose()
    assert attempts == [1]
