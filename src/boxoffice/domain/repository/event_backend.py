"""Abstract gateway to the backend of record.

The backend answers read queries over its models. A query is a model
name, a search domain in prefix notation (leaves are
``(field, operator, value)`` tuples, ``"|"`` joins the next two terms with
OR) and the list of fields to return.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

EVENT_MODEL = "event.event"
TICKET_MODEL = "event.event.ticket"
PRODUCT_MODEL = "product.product"

Domain = list[Any]


class EventBackend(ABC):

    @abstractmethod
    async def search_read(
        self,
        model: str,
        domain: Domain,
        fields: list[str],
        *,
        silent: bool = False,
    ) -> list[dict[str, Any]]:
        """Return the records of *model* matching *domain*.

        ``silent`` asks the transport not to surface the call to the user
        (no loading indicator); it has no effect on the result.
        Raises BackendError when the query cannot be answered.
        """

    async def aclose(self) -> None:
        """Release transport resources."""
