from __future__ import annotations

from typing import Any

from tradedesk.repositories.base import CollectionRepository


class AccountsRepository(CollectionRepository):
    def get_for_owner(self, *, uid: str, account_id: int) -> dict[str, Any] | None:
        for row in self._rows:
            if row.get("id") == account_id and row.get("uid") == uid:
                return row
        return None

    def list_for_owner(self, uid: str) -> list[dict[str, Any]]:
        return [row for row in self._rows if row.get("uid") == uid]

    def delete_for_owner(self, *, uid: str, account_id: int) -> bool:
        # An id alone is not enough; another user's account must stay untouched.
        for index, row in enumerate(self._rows):
            if row.get("id") == account_id and row.get("uid") == uid:
                del self._rows[index]
                return True
        return False
