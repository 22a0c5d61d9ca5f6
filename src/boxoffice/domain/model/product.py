"""Product aggregate.

Only the products event tickets are sold as are loaded. A product decides
two things about an order line: whether its unit can be grouped into a
single line, and whether it is tracked by lot or serial number.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from boxoffice.domain.model.value_objects import Money

TRACKED_MODES = frozenset({"lot", "serial"})


@dataclass
class Product:
    """A catalog product backing one or more event tickets."""

    id: int
    name: str
    price: Money
    groupable: bool = True
    tracking: str = "none"

    @property
    def is_tracked(self) -> bool:
        return self.tracking in TRACKED_MODES

    @staticmethod
    def from_record(record: Mapping[str, Any]) -> Product:
        return Product(
            id=record["id"],
            name=record.get("display_name") or record.get("name") or "",
            price=Money.of(record.get("lst_price") or 0),
            tracking=record.get("tracking") or "none",
        )
