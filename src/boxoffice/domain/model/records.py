"""Helpers for reading backend records.

The backend returns many-to-one references as ``[id, display_name]``,
a bare id, or ``False`` when empty, and datetimes as naive UTC strings.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from typing import Any


def many2one_id(value: Any) -> int | None:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    if value is None or value is False:
        return None
    return int(value)


def many2one_name(value: Any) -> str | None:
    if isinstance(value, (list, tuple)) and len(value) > 1:
        return value[1]
    return None


def parse_datetime(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def as_records(
    records: Mapping[str, Any] | Iterable[Mapping[str, Any]],
) -> list[Mapping[str, Any]]:
    """Accept either a single record or an iterable of records."""
    if isinstance(records, Mapping):
        return [records]
    return list(records)
