from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from tradedesk.errors import NotFoundError, ValidationError
from tradedesk.repositories import UsersRepository
from tradedesk.workflow import APPROVED, PENDING, REJECTED

logger = logging.getLogger(__name__)

BOT_PRICE_CATALOG: tuple[dict[str, Any], ...] = (
    {"id": "bot1", "name": "Scalper Pro", "price": 49.99},
    {"id": "bot2", "name": "Trend Rider", "price": 59.99},
    {"id": "bot3", "name": "Grid Master", "price": 39.99},
)

ADMIN_BOT_FIELDS = ("name", "price", "cost", "subscriptionFee")


def _bot_request_view(bot: dict[str, Any], users: UsersRepository) -> dict[str, Any]:
    user = users.get_by_uid(bot.get("uid"))
    return {
        "id": bot.get("id"),
        "uid": bot.get("uid"),
        "userName": user.get("name") if user else "Unknown",
        "userEmail": user.get("email") if user else "",
        "broker": bot.get("broker"),
        "accountNumber": bot.get("accountNumber"),
        "botName": bot.get("botName"),
        "price": bot.get("price"),
        "signedAgreementUrl": bot.get("signedAgreementUrl"),
        "status": bot.get("status") or PENDING,
        "createdAt": bot.get("createdAt"),
    }


class StoreTradingMixin:
    # ------------------------------------------------------------------
    # Broker accounts
    # ------------------------------------------------------------------

    def create_account(
        self,
        *,
        uid: str,
        broker: str | None,
        account_type: str | None,
        account_number: str | None,
    ) -> dict[str, Any]:
        if self._is_blank(broker) or self._is_blank(account_type) or self._is_blank(account_number):
            raise ValidationError("broker, accountType and accountNumber are required")
        with self._mutate() as session:
            if session.users.get_by_uid(uid) is None:
                raise NotFoundError(code="USER_NOT_FOUND", message="User not found")
            account = {
                "id": session.accounts.next_id(),
                "uid": uid,
                "broker": broker,
                "accountType": account_type,
                "accountNumber": account_number,
            }
            return session.accounts.insert(account)

    def list_accounts(self, *, uid: str) -> list[dict[str, Any]]:
        with self._read() as session:
            return session.accounts.list_for_owner(uid)

    def delete_account(self, *, uid: str, account_id: int) -> None:
        with self._mutate() as session:
            if not session.accounts.delete_for_owner(uid=uid, account_id=account_id):
                raise NotFoundError(code="ACCOUNT_NOT_FOUND", message="Account not found")

    # ------------------------------------------------------------------
    # Bot assignments
    # ------------------------------------------------------------------

    @staticmethod
    def bot_price_catalog() -> list[dict[str, Any]]:
        return copy.deepcopy(list(BOT_PRICE_CATALOG))

    def create_bot_assignment(
        self,
        *,
        uid: str,
        broker_account_id: int | None,
        bot_id: int | None,
        signed_agreement_url: str | None,
    ) -> dict[str, Any]:
        if not broker_account_id or not bot_id or not signed_agreement_url:
            raise ValidationError("brokerAccountId, botId and signedAgreementUrl are required")
        with self._mutate() as session:
            if session.users.get_by_uid(uid) is None:
                raise NotFoundError(code="USER_NOT_FOUND", message="User not found")
            account = session.accounts.get_for_owner(uid=uid, account_id=broker_account_id)
            if account is None:
                raise NotFoundError(code="ACCOUNT_NOT_FOUND", message="Broker account not found")
            admin_bot = session.admin_bots.get(bot_id)
            if admin_bot is None:
                raise NotFoundError(code="BOT_NOT_FOUND", message="Bot not found")
            assignment = {
                "id": session.bots.next_id(),
                "uid": uid,
                "brokerAccountId": broker_account_id,
                "botId": bot_id,
                "signedAgreementUrl": signed_agreement_url,
                "botName": admin_bot.get("name"),
                "price": admin_bot.get("price"),
                "broker": account.get("broker"),
                "accountNumber": account.get("accountNumber"),
                "status": PENDING,
                "createdAt": self._utcnow_iso(),
            }
            return session.bots.insert(assignment)

    def list_user_bots(self, *, uid: str) -> list[dict[str, Any]]:
        with self._read() as session:
            return session.bots.list_for_owner(uid)

    # ------------------------------------------------------------------
    # Admin bot catalog
    # ------------------------------------------------------------------

    def list_admin_bots(self) -> list[dict[str, Any]]:
        with self._read() as session:
            return session.admin_bots.list_newest_first()

    def create_admin_bot(
        self,
        *,
        name: str | None,
        price: float | None,
        cost: float | None,
        subscription_fee: float | None,
    ) -> dict[str, Any]:
        # Only None is missing; zero is a valid amount.
        if self._is_blank(name) or price is None or cost is None or subscription_fee is None:
            raise ValidationError("name, price, cost, subscriptionFee are required")
        with self._mutate() as session:
            admin_bot = {
                "id": session.admin_bots.next_id(),
                "name": name,
                "price": price,
                "cost": cost,
                "subscriptionFee": subscription_fee,
                "createdAt": self._utcnow_iso(),
            }
            return session.admin_bots.insert(admin_bot)

    def update_admin_bot(self, *, bot_id: int, changes: Mapping[str, Any]) -> dict[str, Any]:
        with self._mutate() as session:
            admin_bot = session.admin_bots.get(bot_id)
            if admin_bot is None:
                raise NotFoundError(code="BOT_NOT_FOUND", message="Bot not found")
            for field in ADMIN_BOT_FIELDS:
                if changes.get(field) is not None:
                    admin_bot[field] = changes[field]
            return admin_bot

    def delete_admin_bot(self, *, bot_id: int) -> None:
        with self._mutate() as session:
            if not session.admin_bots.delete(bot_id):
                raise NotFoundError(code="BOT_NOT_FOUND", message="Bot not found")
            logger.info("admin_bot_deleted id=%s", bot_id)

    # ------------------------------------------------------------------
    # Bot requests (admin review of assignments)
    # ------------------------------------------------------------------

    def list_bot_requests(self) -> list[dict[str, Any]]:
        with self._read() as session:
            return [_bot_request_view(bot, session.users) for bot in session.bots.list_newest_first()]

    def get_bot_request(self, *, request_id: int) -> dict[str, Any]:
        with self._read() as session:
            bot = session.bots.get(request_id)
            if bot is None:
                raise NotFoundError(code="BOT_REQUEST_NOT_FOUND", message="Bot request not found")
            return _bot_request_view(bot, session.users)

    def approve_bot_request(self, *, request_id: int) -> dict[str, Any]:
        return self._transition_bot_request(request_id=request_id, new_status=APPROVED)

    def reject_bot_request(self, *, request_id: int) -> dict[str, Any]:
        return self._transition_bot_request(request_id=request_id, new_status=REJECTED)

    def _transition_bot_request(self, *, request_id: int, new_status: str) -> dict[str, Any]:
        with self._mutate() as session:
            bot = session.bots.get(request_id)
            if bot is None:
                raise NotFoundError(code="BOT_REQUEST_NOT_FOUND", message="Bot request not found")
            return self.workflow.transition(bot, field="status", new_status=new_status)
