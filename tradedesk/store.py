from __future__ import annotations

import copy
import threading
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from tradedesk.ids import wall_clock_ms
from tradedesk.repositories import (
    AccountsRepository,
    AdminBotsRepository,
    BotAssignmentsRepository,
    CareersRepository,
    UsersRepository,
)
from tradedesk.runtime_profile import strict_approvals_required
from tradedesk.store_backends import DocumentStore, create_document_store_from_env
from tradedesk.store_careers import StoreCareersMixin
from tradedesk.store_trading import StoreTradingMixin
from tradedesk.store_users import StoreUsersMixin
from tradedesk.workflow import ApprovalWorkflow


@dataclass
class DocumentSession:
    document: dict[str, Any]
    users: UsersRepository
    accounts: AccountsRepository
    bots: BotAssignmentsRepository
    admin_bots: AdminBotsRepository
    careers: CareersRepository
    unchanged: bool = False


class TradeDeskStore(StoreUsersMixin, StoreTradingMixin, StoreCareersMixin):
    """Operations over the persisted document.

    Nothing is cached between calls: each operation loads the document, works
    on it through the repositories and, if it mutated anything, saves it back
    before returning. The lock spans the whole cycle, so concurrent callers in
    this process are serialized.
    """

    def __init__(
        self,
        backend: DocumentStore,
        *,
        workflow: ApprovalWorkflow | None = None,
        clock: Callable[[], int] = wall_clock_ms,
    ) -> None:
        self.backend = backend
        self.workflow = workflow or ApprovalWorkflow()
        self._clock = clock
        self._lock = threading.RLock()

    def _bind(self, document: dict[str, Any]) -> DocumentSession:
        return DocumentSession(
            document=document,
            users=UsersRepository(document),
            accounts=AccountsRepository(document["accounts"], clock=self._clock),
            bots=BotAssignmentsRepository(document["bots"], clock=self._clock),
            admin_bots=AdminBotsRepository(document["adminBots"], clock=self._clock),
            careers=CareersRepository(document["careers"], clock=self._clock),
        )

    @contextmanager
    def _read(self) -> Iterator[DocumentSession]:
        with self._lock:
            yield self._bind(self.backend.load())

    @contextmanager
    def _mutate(self) -> Iterator[DocumentSession]:
        with self._lock:
            session = self._bind(self.backend.load())
            yield session
            if not session.unchanged:
                self.backend.save(session.document)

    @staticmethod
    def _utcnow_iso() -> str:
        return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return isinstance(value, str) and not value.strip()

    def snapshot(self) -> dict[str, Any]:
        with self._read() as session:
            return copy.deepcopy(session.document)


def create_store_from_env(environ: Mapping[str, str] | None = None) -> TradeDeskStore:
    return TradeDeskStore(
        create_document_store_from_env(environ),
        workflow=ApprovalWorkflow(strict=strict_approvals_required(environ)),
    )
