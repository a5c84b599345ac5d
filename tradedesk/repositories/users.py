from __future__ import annotations

from typing import Any

from tradedesk.ids import allocate_user_id
from tradedesk.repositories.base import CollectionRepository


class UsersRepository(CollectionRepository):
    def __init__(self, document: dict[str, Any]) -> None:
        super().__init__(document["users"])
        self._document = document

    def next_id(self) -> int:
        return allocate_user_id(self._document)

    def get_by_uid(self, uid: str) -> dict[str, Any] | None:
        return self.find("uid", uid)

    def with_kyc(self) -> list[dict[str, Any]]:
        return [row for row in self._rows if row.get("kyc")]
