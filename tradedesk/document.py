from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

COLLECTIONS: tuple[str, ...] = ("users", "accounts", "bots", "adminBots", "careers")
USER_COUNTER = "nextUserId"


def default_document() -> dict[str, Any]:
    document: dict[str, Any] = {name: [] for name in COLLECTIONS}
    document[USER_COUNTER] = 1
    return document


def _repaired_counter(users: list[Any]) -> int:
    ids = [row["id"] for row in users if isinstance(row, dict) and isinstance(row.get("id"), int)]
    return max(ids) + 1 if ids else 1


def backfill_document(payload: dict[str, Any]) -> dict[str, Any]:
    """Fill in missing top-level collections and the user counter in place.

    Valid data is never dropped; a collection that is present but not a list is
    replaced, because nothing downstream can operate on it.
    """
    backfilled: list[str] = []
    for name in COLLECTIONS:
        if not isinstance(payload.get(name), list):
            payload[name] = []
            backfilled.append(name)
    counter = payload.get(USER_COUNTER)
    if counter is None:
        payload[USER_COUNTER] = 1
        backfilled.append(USER_COUNTER)
    elif isinstance(counter, bool) or not isinstance(counter, int):
        payload[USER_COUNTER] = _repaired_counter(payload["users"])
        backfilled.append(USER_COUNTER)
    if backfilled:
        logger.warning("document_backfilled fields=%s", ",".join(backfilled))
    return payload
