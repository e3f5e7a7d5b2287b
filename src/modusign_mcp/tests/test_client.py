"""Tests for the request executor: auth, encoding, throttle retry and decoding."""

from __future__ import annotations

import base64

import httpx
import pytest
from conftest import BASE_URL, ScriptedTransport, SleepRecorder, json_response, make_client, request_json

from modusign_mcp.client import ModusignClient, MultipartForm, ThrottlePolicy
from modusign_mcp.foundation.config import ModusignSettings
from modusign_mcp.foundation.errors import ConfigurationError, ModusignApiError

EXPECTED_AUTH = "Basic " + base64.b64encode(b"me@example.com:secret-key").decode()


# ─────────────────────────────────────────────────────────────────────────────
# Request building
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_auth_header_and_url() -> None:
    transport = ScriptedTransport(json_response(200, {"ok": True}))
    async with make_client(transport) as client:
        assert await client.get("/documents/abc") == {"ok": True}

    request = transport.last
    assert request.method == "GET"
    assert str(request.url) == f"{BASE_URL}/documents/abc"
    assert request.headers["authorization"] == EXPECTED_AUTH


@pytest.mark.asyncio
async def test_caller_headers_cannot_replace_auth() -> None:
    transport = ScriptedTransport(json_response(200, {}))
    async with make_client(transport) as client:
        await client.request("GET", "/user", headers={"authorization": "Bearer nope", "X-Trace": "1"})

    assert transport.last.headers["authorization"] == EXPECTED_AUTH
    assert transport.last.headers["x-trace"] == "1"


@pytest.mark.asyncio
async def test_query_params_skip_absent_values() -> None:
    transport = ScriptedTransport(json_response(200, {"documents": []}))
    async with make_client(transport) as client:
        await client.get("/documents", {"offset": 0, "limit": 10, "filter": None})

    assert transport.last.url.params.multi_items() == [("offset", "0"), ("limit", "10")]


@pytest.mark.asyncio
async def test_json_body_sets_content_type() -> None:
    transport = ScriptedTransport(json_response(200, {"id": "l1"}))
    async with make_client(transport) as client:
        await client.post("/labels", {"name": "계약", "color": "#FF6B6B"})

    request = transport.last
    assert request.headers["content-type"] == "application/json"
    assert request_json(request) == {"name": "계약", "color": "#FF6B6B"}


@pytest.mark.asyncio
async def test_post_without_body_sends_nothing() -> None:
    transport = ScriptedTransport(json_response(200, {}))
    async with make_client(transport) as client:
        await client.post("/documents/abc/remind-signing")

    assert transport.last.content == b""
    assert "content-type" not in transport.last.headers


@pytest.mark.asyncio
async def test_multipart_body_lets_transport_set_boundary() -> None:
    transport = ScriptedTransport(json_response(200, {"fileId": "f1", "token": "t1"}))
    async with make_client(transport) as client:
        await client.post_form("/files", MultipartForm(files={"file": ("a.pdf", b"%PDF-1.4")}, data={"type": "document"}))

    request = transport.last
    assert request.headers["content-type"].startswith("multipart/form-data; boundary=")
    assert b'filename="a.pdf"' in request.content
    assert b"%PDF-1.4" in request.content


@pytest.mark.asyncio
async def test_json_and_form_are_exclusive() -> None:
    transport = ScriptedTransport()
    async with make_client(transport) as client:
        with pytest.raises(ValueError, match="mutually exclusive"):
            await client.request("POST", "/files", json={}, form=MultipartForm(files={}))
    assert transport.requests == []


# ─────────────────────────────────────────────────────────────────────────────
# Success decoding
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_204_decodes_to_empty_object() -> None:
    transport = ScriptedTransport(httpx.Response(204, headers={"content-type": "application/json"}))
    async with make_client(transport) as client:
        assert await client.delete("/labels/l1") == {}


@pytest.mark.asyncio
async def test_non_json_content_type_decodes_to_empty_object() -> None:
    transport = ScriptedTransport(httpx.Response(200, text="OK", headers={"content-type": "text/plain"}))
    async with make_client(transport) as client:
        assert await client.post("/documents/abc/cancel", {}) == {}


# ─────────────────────────────────────────────────────────────────────────────
# Failures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_error_payload_decoded_as_json() -> None:
    transport = ScriptedTransport(json_response(404, {"message": "document not found"}))
    async with make_client(transport) as client:
        with pytest.raises(ModusignApiError) as exc_info:
            await client.get("/documents/missing")

    err = exc_info.value
    assert err.status_code == 404
    assert err.error_body == {"message": "document not found"}
    assert err.message == "Not Found - Resource does not exist: document not found"


@pytest.mark.asyncio
async def test_error_payload_falls_back_to_text() -> None:
    transport = ScriptedTransport(httpx.Response(502, text="Bad gateway"))
    async with make_client(transport) as client:
        with pytest.raises(ModusignApiError) as exc_info:
            await client.get("/user")

    assert exc_info.value.error_body == "Bad gateway"
    assert exc_info.value.message == 'HTTP 502: "Bad gateway"'


@pytest.mark.asyncio
async def test_transport_errors_propagate_unwrapped(sleep: SleepRecorder) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    transport = ScriptedTransport(handler=refuse)
    async with make_client(transport, sleep) as client:
        with pytest.raises(httpx.ConnectError):
            await client.get("/user")

    assert len(transport.requests) == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_server_errors_are_not_retried(sleep: SleepRecorder) -> None:
    transport = ScriptedTransport(json_response(503, {"message": "maintenance"}))
    async with make_client(transport, sleep) as client:
        with pytest.raises(ModusignApiError):
            await client.get("/user")

    assert len(transport.requests) == 1
    assert sleep.delays == []


# ─────────────────────────────────────────────────────────────────────────────
# Throttle retry
# ─────────────────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_throttle_waits_for_x_retry_after(sleep: SleepRecorder) -> None:
    transport = ScriptedTransport(
        json_response(429, {"message": "slow down"}, {"X-Retry-After": "2"}),
        json_response(200, {"id": "l1"}),
    )
    async with make_client(transport, sleep) as client:
        assert await client.post("/labels", {"name": "a"}) == {"id": "l1"}

    assert sleep.delays == [2.0]
    first, second = transport.requests
    assert (first.method, first.url, first.content) == (second.method, second.url, second.content)
    assert second.headers["authorization"] == EXPECTED_AUTH


@pytest.mark.asyncio
async def test_throttle_header_precedence_and_default(sleep: SleepRecorder) -> None:
    transport = ScriptedTransport(
        json_response(429, {}, {"Retry-After": "5", "X-Retry-After": "3"}),
        json_response(429, {}, {"Retry-After": "4"}),
        json_response(429, {}),
        json_response(200, {}),
    )
    async with make_client(transport, sleep) as client:
        await client.get("/documents")

    assert sleep.delays == [3.0, 4.0, 1.0]


@pytest.mark.asyncio
async def test_throttle_exhaustion_surfaces_429(sleep: SleepRecorder) -> None:
    transport = ScriptedTransport(*(json_response(429, {"message": "limit"}) for _ in range(4)))
    async with make_client(transport, sleep) as client:
        with pytest.raises(ModusignApiError) as exc_info:
            await client.get("/documents")

    assert exc_info.value.status_code == 429
    assert exc_info.value.message == "Rate Limit Exceeded: limit"
    assert len(transport.requests) == 4
    assert sleep.delays == [1.0, 1.0, 1.0]


@pytest.mark.asyncio
async def test_throttle_retry_reuploads_multipart(sleep: SleepRecorder) -> None:
    transport = ScriptedTransport(json_response(429, {}), json_response(200, {"fileId": "f1", "token": "t1"}))
    async with make_client(transport, sleep) as client:
        await client.post_form("/files", MultipartForm(files={"file": ("a.pdf", b"bytes")}, data={"type": "document"}))

    assert all(b"bytes" in r.content for r in transport.requests)


@pytest.mark.parametrize(
    ("headers", "expected"),
    [
        ({"X-Retry-After": "2"}, 2.0),
        ({"Retry-After": "7"}, 7.0),
        ({"X-Retry-After": "2.9"}, 2.0),
        ({"X-Retry-After": "soon"}, 1.0),
        ({"X-Retry-After": "-3"}, 0.0),
        ({"X-Retry-After": "", "Retry-After": "6"}, 6.0),
        ({}, 1.0),
    ],
)
def test_delay_for(headers: dict[str, str], expected: float) -> None:
    assert ThrottlePolicy().delay_for(httpx.Headers(headers)) == expected


@pytest.mark.asyncio
async def test_disabled_throttle_fails_immediately(sleep: SleepRecorder) -> None:
    transport = ScriptedTransport(json_response(429, {}))
    async with make_client(transport, sleep, throttle=ThrottlePolicy(max_retries=0)) as client:
        with pytest.raises(ModusignApiError):
            await client.get("/documents")
    assert sleep.delays == []


# ─────────────────────────────────────────────────────────────────────────────
# Construction
# ─────────────────────────────────────────────────────────────────────────────


def test_from_settings_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MODUSIGN_API_KEY", raising=False)
    with pytest.raises(ConfigurationError, match="MODUSIGN_API_KEY"):
        ModusignClient.from_settings(ModusignSettings(email="me@example.com", _env_file=None))


@pytest.mark.asyncio
async def test_from_settings_uses_configured_values() -> None:
    settings = ModusignSettings(
        email="me@example.com",
        api_key="secret-key",
        base_url="https://sandbox.example/",
        retry={"max_retries": 1, "default_delay": 0.5},
        _env_file=None,
    )
    client = ModusignClient.from_settings(settings)
    try:
        assert client.base_url == "https://sandbox.example"
        assert client.throttle.max_retries == 1
        assert client.throttle.default_delay == 0.5
    finally:
        await client.aclose()


@pytest.mark.asyncio
async def test_aclose_leaves_external_client_open() -> None:
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: json_response(200, {})))
    client = ModusignClient("me@example.com", "k", http_client=http)
    await client.aclose()
    assert not http.is_closed
    await http.aclose()
