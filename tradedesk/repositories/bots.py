from __future__ import annotations

from typing import Any

from tradedesk.repositories.base import CollectionRepository


class BotAssignmentsRepository(CollectionRepository):
    def list_for_owner(self, uid: str) -> list[dict[str, Any]]:
        return [row for row in self._rows if row.get("uid") == uid]
