from __future__ import annotations

from tradedesk.repositories.base import CollectionRepository


class CareersRepository(CollectionRepository):
    """Job applications, newest first for the admin list."""
