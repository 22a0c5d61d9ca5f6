"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from boxoffice.application.load_catalog import CatalogOptions, LoadCatalogHandler
from boxoffice.application.session import PosSession
from boxoffice.domain.repository.event_backend import EventBackend
from boxoffice.infrastructure.config import Settings
from boxoffice.infrastructure.persistence.json_order_repository import (
    JsonDraftOrderRepository,
)
from boxoffice.infrastructure.persistence.memory_product_repository import (
    InMemoryProductRepository,
)
from boxoffice.infrastructure.rpc.jsonrpc_event_backend import JsonRpcEventBackend


def settings() -> Settings:
    return Settings()


def order_repository(config: Settings) -> JsonDraftOrderRepository:
    return JsonDraftOrderRepository(config.data_dir / "orders.json")


def event_backend(config: Settings) -> EventBackend:
    return JsonRpcEventBackend(
        config.backend_url,
        session_id=config.session_id.get_secret_value() if config.session_id else None,
        timeout=config.rpc_timeout,
    )


def catalog_options(config: Settings) -> CatalogOptions:
    return CatalogOptions(
        event_sale_enabled=config.event_sale_enabled,
        company_id=config.company_id,
        event_type_ids=list(config.event_type_ids),
        load_past_events=config.load_past_events,
    )


@asynccontextmanager
async def open_session(config: Settings) -> AsyncIterator[PosSession]:
    """Start a session with a freshly loaded catalog; close the backend after."""
    backend = event_backend(config)
    try:
        session = PosSession(
            backend=backend,
            orders=order_repository(config),
            products=InMemoryProductRepository(),
            currency_decimals=config.currency_decimals,
            reconciliation_timeout=config.reconciliation_timeout,
        )
        session.catalog = await LoadCatalogHandler(session, catalog_options(config)).handle()
        yield session
    finally:
        await backend.aclose()
