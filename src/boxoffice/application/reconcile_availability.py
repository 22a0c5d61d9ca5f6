"""Application service: Reconcile Availability.

Refreshes the cached seat counts of a set of events, and of all their
tickets, from the backend of record.

The two queries run concurrently and each one merges into the cache as
soon as it returns. The refresh succeeds only if both succeed, and it
returns only once neither query is running any more: when one fails or
the timeout expires, the other is cancelled. A failed refresh keeps
whatever was already merged: merging a partial record only touches the
fields it carries, so the cache can only get fresher.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from loguru import logger

from boxoffice.domain.exceptions import BackendError, ReconciliationError
from boxoffice.domain.model.inventory import InventoryCache
from boxoffice.domain.repository.event_backend import (
    EVENT_MODEL,
    TICKET_MODEL,
    EventBackend,
)

AVAILABILITY_FIELDS = ["id", "seats_availability", "seats_available"]


class ReconciliationService:

    def __init__(
        self,
        cache: InventoryCache,
        backend: EventBackend,
        default_timeout: float | None = None,
    ) -> None:
        self._cache = cache
        self._backend = backend
        self._default_timeout = default_timeout

    async def refresh(
        self,
        event_ids: Iterable[int],
        *,
        timeout: float | None = None,
        silent: bool = False,
    ) -> None:
        """Refresh availability of *event_ids* and their tickets.

        ``timeout`` (seconds) bounds the whole operation; past it the
        pending queries are cancelled. Raises ReconciliationError on
        timeout or backend failure.
        """
        ids = sorted(set(event_ids))
        if not ids:
            return
        if timeout is None:
            timeout = self._default_timeout

        logger.info("Reconciling availability of {} event(s)", len(ids))
        queries = [
            asyncio.ensure_future(self._refresh_events(ids, silent)),
            asyncio.ensure_future(self._refresh_tickets(ids, silent)),
        ]
        try:
            await asyncio.wait_for(asyncio.gather(*queries), timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("Availability reconciliation timed out after {}s", timeout)
            raise ReconciliationError(
                f"Availability check timed out after {timeout}s", cause=exc
            ) from exc
        except BackendError as exc:
            logger.warning("Availability reconciliation failed: {}", exc)
            raise ReconciliationError(
                f"Unable to check event availability: {exc}", cause=exc
            ) from exc
        finally:
            await _stop(queries)

    # --- Queries --------------------------------------------------------------

    async def _refresh_events(self, event_ids: list[int], silent: bool) -> None:
        records = await self._backend.search_read(
            EVENT_MODEL,
            [("id", "in", event_ids)],
            AVAILABILITY_FIELDS,
            silent=silent,
        )
        self._cache.upsert_events(records)

    async def _refresh_tickets(self, event_ids: list[int], silent: bool) -> None:
        records = await self._backend.search_read(
            TICKET_MODEL,
            [("event_id", "in", event_ids)],
            AVAILABILITY_FIELDS,
            silent=silent,
        )
        self._cache.upsert_tickets(records)


async def _stop(queries: list[asyncio.Future]) -> None:
    """Cancel the queries still in flight and wait until all have finished."""
    for query in queries:
        if not query.done():
            query.cancel()
    await asyncio.gather(*queries, return_exceptions=True)
