from __future__ import annotations

from tradedesk.repositories.base import CollectionRepository


class AdminBotsRepository(CollectionRepository):
    """Admin-curated bot catalog entries (``adminBots``)."""
