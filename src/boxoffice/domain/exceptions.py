"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

The inventory cache itself never raises: unknown ids and unresolved
references degrade to ``None`` / empty results instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from boxoffice.domain.model.checkout import CheckoutRejection


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class BackendError(DomainException):
    """The backend of record could not answer a query (transport or RPC error)."""


class ReconciliationError(DomainException):
    """Refreshing availability from the backend failed.

    Says nothing about actual seat availability; the caller should retry
    once connectivity is restored.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class CheckoutRejectedError(DomainException):
    """The checkout gate refused to finalize an order."""

    def __init__(self, rejection: CheckoutRejection) -> None:
        super().__init__(rejection.message)
        self.rejection = rejection
