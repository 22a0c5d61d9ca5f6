"""Why a checkout was refused."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from boxoffice.domain.model.ticket import Ticket


class RejectionKind(Enum):
    UNAVAILABLE_SEATS = "unavailable_seats"
    RECONCILIATION_FAILED = "reconciliation_failed"


@dataclass(frozen=True)
class CheckoutRejection:
    """Why the checkout gate refused an order.

    ``ticket`` is set for UNAVAILABLE_SEATS (the first offending ticket in
    line order); ``cause`` is set for RECONCILIATION_FAILED.
    """

    kind: RejectionKind
    message: str
    ticket: Ticket | None = None
    cause: BaseException | None = None
