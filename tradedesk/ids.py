from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from tradedesk.document import USER_COUNTER

Clock = Callable[[], int]


def wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


def allocate_user_id(document: dict[str, Any]) -> int:
    user_id = int(document[USER_COUNTER])
    document[USER_COUNTER] = user_id + 1
    return user_id


def allocate_timestamp_id(collection: list[dict[str, Any]], clock: Clock = wall_clock_ms) -> int:
    """Millisecond timestamp id, bumped past the largest id already in the collection.

    Two allocations in the same millisecond, or after the clock stepped back,
    still yield strictly increasing ids.
    """
    candidate = int(clock())
    existing = [row["id"] for row in collection if isinstance(row.get("id"), int)]
    if existing:
        candidate = max(candidate, max(existing) + 1)
    return candidate


def find_by_id(collection: list[dict[str, Any]], record_id: int) -> dict[str, Any] | None:
    for row in collection:
        if row.get("id") == record_id:
            return row
    return None


def find_by_field(collection: list[dict[str, Any]], key: str, value: Any) -> dict[str, Any] | None:
    for row in collection:
        if row.get(key) == value:
            return row
    return None
