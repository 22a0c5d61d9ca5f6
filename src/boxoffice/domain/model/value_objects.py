"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from boxoffice.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def discounted(self, percent: Decimal) -> Money:
        """Return this amount reduced by *percent* (0-100)."""
        return Money(self.amount * (Decimal("100") - percent) / Decimal("100"), self.currency)

    def is_close(self, other: Money, decimals: int) -> bool:
        """True if both amounts round to the same value at *decimals* places."""
        self._assert_same_currency(other)
        step = Decimal(1).scaleb(-decimals)
        return (self.amount - other.amount).quantize(step, rounding=ROUND_HALF_UP) == 0

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "USD") -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __add__(self, other: Quantity) -> Quantity:
        return Quantity(self.value + other.value)

    def __str__(self) -> str:
        return str(self.value)


# ---------------------------------------------------------------------------
# Seat capacity
# ---------------------------------------------------------------------------

UNLIMITED = "unlimited"
LIMITED = "limited"


@dataclass(frozen=True)
class Unbounded:
    """No seat limit at all."""

    def __str__(self) -> str:
        return UNLIMITED


UNBOUNDED = Unbounded()


@dataclass(frozen=True)
class Bounded:
    """A seat limit.

    ``available`` is the server's count of free seats; it may run negative
    locally after an overcommit until the next reconciliation.
    ``max_seats`` is ``None`` while the backend has not reported it.
    """

    max_seats: int | None
    available: int

    def __post_init__(self) -> None:
        if self.max_seats is not None and self.max_seats < 0:
            raise ValidationError(
                f"Maximum seats cannot be negative, got {self.max_seats}"
            )

    def __str__(self) -> str:
        if self.max_seats is None:
            return f"{self.available} available"
        return f"{self.available}/{self.max_seats} available"


Capacity = Unbounded | Bounded

# Remaining seats: a plain count, or UNBOUNDED.
Remaining = int | Unbounded

CAPACITY_FIELDS = frozenset({"seats_availability", "seats_max", "seats_available"})


def merge_capacity(previous: Capacity, record: Mapping[str, Any]) -> Capacity:
    """Fold the seat fields of a (possibly partial) backend record into *previous*.

    The ``"unlimited"`` marker always wins and never leaves a numeric
    sentinel behind. Fields the record does not carry keep their previous
    value.
    """
    mode = record.get("seats_availability")
    if mode == UNLIMITED:
        return UNBOUNDED
    if mode is None and isinstance(previous, Unbounded):
        return previous

    max_seats = previous.max_seats if isinstance(previous, Bounded) else None
    available = previous.available if isinstance(previous, Bounded) else 0
    if "seats_max" in record:
        max_seats = _as_count(record["seats_max"])
    if "seats_available" in record:
        available = _as_count(record["seats_available"]) or 0
    return Bounded(max_seats=max_seats, available=available)


def remaining_seats(capacity: Capacity, reserved: int) -> Remaining:
    """Seats left in *capacity* once *reserved* seats are taken locally."""
    if isinstance(capacity, Unbounded):
        return UNBOUNDED
    return capacity.available - reserved


def tightest(*values: Remaining) -> Remaining:
    """The binding (smallest) remaining count; UNBOUNDED only if all are."""
    bounded = [v for v in values if not isinstance(v, Unbounded)]
    if not bounded:
        return UNBOUNDED
    return min(bounded)


def _as_count(value: Any) -> int | None:
    # The backend sends False for empty numeric fields.
    if value is None or value is False:
        return None
    return int(value)
