"""Tests for the JSON-RPC backend client, against a mocked transport."""

import json

import httpx
import pytest

from boxoffice.domain.exceptions import BackendError
from boxoffice.domain.repository.event_backend import TICKET_MODEL
from boxoffice.infrastructure.rpc.jsonrpc_event_backend import JsonRpcEventBackend

pytestmark = pytest.mark.anyio

DOMAIN = [("event_id", "in", [1])]
FIELDS = ["id", "seats_available"]


def _backend(handler, **kwargs) -> JsonRpcEventBackend:
    return JsonRpcEventBackend(
        "http://backend.test", transport=httpx.MockTransport(handler), **kwargs
    )


async def test_search_read_posts_call_kw():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": [{"id": 10, "seats_available": 4}]})

    backend = _backend(handler, session_id="abc123")
    records = await backend.search_read(TICKET_MODEL, DOMAIN, FIELDS)
    await backend.aclose()

    assert records == [{"id": 10, "seats_available": 4}]
    request = seen[0]
    assert request.url.path == "/web/dataset/call_kw/event.event.ticket/search_read"
    assert "session_id=abc123" in request.headers["cookie"]
    body = json.loads(request.content)
    assert body["params"]["model"] == TICKET_MODEL
    assert body["params"]["method"] == "search_read"
    assert body["params"]["args"] == [[["event_id", "in", [1]]], FIELDS]


async def test_empty_result():
    backend = _backend(lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": None}))

    assert await backend.search_read(TICKET_MODEL, DOMAIN, FIELDS, silent=True) == []


async def test_rpc_error_payload():
    error = {"code": 200, "message": "Odoo Server Error", "data": {"message": "Access Denied"}}
    backend = _backend(lambda request: httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": error}))

    with pytest.raises(BackendError, match="Access Denied"):
        await backend.search_read(TICKET_MODEL, DOMAIN, FIELDS)


async def test_http_error_status():
    backend = _backend(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(BackendError, match="Request to event.event.ticket failed"):
        await backend.search_read(TICKET_MODEL, DOMAIN, FIELDS)


async def test_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendError, match="connection refused"):
        await _backend(handler).search_read(TICKET_MODEL, DOMAIN, FIELDS)


async def test_invalid_json():
    backend = _backend(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(BackendError, match="Invalid response"):
        await backend.search_read(TICKET_MODEL, DOMAIN, FIELDS)
