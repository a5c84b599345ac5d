"""Base repository over one collection list of the loaded document."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from tradedesk.ids import allocate_timestamp_id, find_by_field, find_by_id, wall_clock_ms


class CollectionRepository:
    """Common lookups for a list of records keyed by a numeric ``id``.

    Records handed out are the live dicts of the document, so callers mutate
    them in place and then save the document.
    """

    def __init__(self, rows: list[dict[str, Any]], *, clock: Callable[[], int] = wall_clock_ms) -> None:
        self._rows = rows
        self._clock = clock

    def next_id(self) -> int:
        return allocate_timestamp_id(self._rows, self._clock)

    def get(self, record_id: int) -> dict[str, Any] | None:
        return find_by_id(self._rows, record_id)

    def find(self, key: str, value: Any) -> dict[str, Any] | None:
        return find_by_field(self._rows, key, value)

    def list(self) -> list[dict[str, Any]]:
        return list(self._rows)

    def list_newest_first(self) -> list[dict[str, Any]]:
        return sorted(self._rows, key=lambda row: row.get("id") or 0, reverse=True)

    def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        self._rows.append(record)
        return record

    def delete(self, record_id: int) -> bool:
        for index, row in enumerate(self._rows):
            if row.get("id") == record_id:
                del self._rows[index]
                return True
        return False
