"""JSON-RPC implementation of EventBackend over httpx.

Each query is a ``search_read`` call posted to the backend's
``/web/dataset/call_kw/<model>/search_read`` endpoint. Transport errors,
HTTP error statuses and JSON-RPC error payloads all surface as
BackendError.
"""

from __future__ import annotations

import itertools
from typing import Any

import httpx
from loguru import logger

from boxoffice.domain.exceptions import BackendError
from boxoffice.domain.repository.event_backend import Domain, EventBackend


class JsonRpcEventBackend(EventBackend):

    def __init__(
        self,
        base_url: str,
        *,
        session_id: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            cookies={"session_id": session_id} if session_id else None,
            transport=transport,
        )
        self._request_ids = itertools.count(1)

    async def search_read(
        self,
        model: str,
        domain: Domain,
        fields: list[str],
        *,
        silent: bool = False,
    ) -> list[dict[str, Any]]:
        payload = {
            "jsonrpc": "2.0",
            "method": "call",
            "id": next(self._request_ids),
            "params": {
                "model": model,
                "method": "search_read",
                "args": [domain, fields],
                "kwargs": {},
            },
        }
        log = logger.debug if silent else logger.info
        log("search_read {} {}", model, domain)

        try:
            resp = await self._client.post(
                f"/web/dataset/call_kw/{model}/search_read", json=payload
            )
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPError as exc:
            raise BackendError(f"Request to {model} failed: {exc}") from exc
        except ValueError as exc:
            raise BackendError(f"Invalid response from {model}: {exc}") from exc

        error = body.get("error")
        if error:
            message = (error.get("data") or {}).get("message") or error.get("message")
            raise BackendError(f"{model}: {message}")
        return body.get("result") or []

    async def aclose(self) -> None:
        await self._client.aclose()
