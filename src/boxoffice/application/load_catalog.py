"""Application service: Load Catalog use case.

Fills a fresh session with what can be sold: confirmed events of the
company, then their tickets, then the products those tickets are sold as.
Tickets are only requested for events already loaded.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from loguru import logger

from boxoffice.application.dto import CatalogSummary
from boxoffice.application.session import PosSession
from boxoffice.domain.model.product import Product
from boxoffice.domain.repository.event_backend import (
    EVENT_MODEL,
    PRODUCT_MODEL,
    TICKET_MODEL,
    Domain,
)

EVENT_FIELDS = [
    "name",
    "display_name",
    "event_type_id",
    "country_id",
    "date_begin",
    "date_end",
    "seats_availability",
    "seats_max",
    "seats_available",
]
TICKET_FIELDS = [
    "name",
    "event_id",
    "product_id",
    "price",
    "seats_availability",
    "seats_max",
    "seats_available",
]
PRODUCT_FIELDS = ["display_name", "lst_price", "tracking"]

BACKEND_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True)
class CatalogOptions:
    """Which events the terminal sells."""

    event_sale_enabled: bool = True
    company_id: int | None = None
    event_type_ids: list[int] = field(default_factory=list)
    load_past_events: bool = False


class LoadCatalogHandler:

    def __init__(
        self,
        session: PosSession,
        options: CatalogOptions,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._session = session
        self._options = options
        self._clock = clock

    async def handle(self) -> CatalogSummary:
        if not self._options.event_sale_enabled:
            logger.info("Event sale is disabled; no catalog loaded")
            return CatalogSummary(events=0, tickets=0, products=0)

        backend = self._session.backend
        cache = self._session.cache

        events = cache.upsert_events(
            await backend.search_read(EVENT_MODEL, self._event_domain(), EVENT_FIELDS)
        )
        if not events:
            logger.info("No events to sell")
            return CatalogSummary(events=0, tickets=0, products=0)

        tickets = cache.upsert_tickets(
            await backend.search_read(
                TICKET_MODEL, self._ticket_domain([e.id for e in events]), TICKET_FIELDS
            )
        )

        product_ids = sorted({t.product_id for t in tickets if t.product_id is not None})
        products: list[Product] = []
        if product_ids:
            records = await backend.search_read(
                PRODUCT_MODEL, [("id", "in", product_ids)], PRODUCT_FIELDS
            )
            products = [Product.from_record(r) for r in records]
            for product in products:
                self._session.products.save(product)

        logger.info(
            "Loaded {} event(s), {} ticket(s), {} product(s)",
            len(events), len(tickets), len(products),
        )
        return CatalogSummary(events=len(events), tickets=len(tickets), products=len(products))

    # --- Domains --------------------------------------------------------------

    def _event_domain(self) -> Domain:
        options = self._options
        domain: Domain = [("state", "=", "confirm")]
        if options.company_id is not None:
            domain += ["|", ("company_id", "=", options.company_id), ("company_id", "=", False)]
        if options.event_type_ids:
            domain.append(("event_type_id", "in", list(options.event_type_ids)))
        if not options.load_past_events:
            now = self._clock().astimezone(timezone.utc)
            domain.append(("date_end", ">=", now.strftime(BACKEND_DATETIME_FORMAT)))
        return domain

    @staticmethod
    def _ticket_domain(event_ids: list[int]) -> Domain:
        return [
            ("product_id.active", "=", True),
            ("product_id.available_in_pos", "=", True),
            ("event_id", "in", event_ids),
        ]
