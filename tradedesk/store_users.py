from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from tradedesk.errors import NotFoundError, ValidationError
from tradedesk.workflow import APPROVED, PENDING, REJECTED

logger = logging.getLogger(__name__)

KYC_FIELDS = ("fullName", "address", "city", "country", "idNumber")


def _user_not_found() -> NotFoundError:
    return NotFoundError(code="USER_NOT_FOUND", message="User not found")


def _kyc_not_found() -> NotFoundError:
    return NotFoundError(code="KYC_NOT_FOUND", message="KYC not found")


class StoreUsersMixin:
    def register_user(self, *, uid: str, email: str, name: str | None = None) -> tuple[dict[str, Any], bool]:
        """Create the user for ``uid`` or return the one already registered.

        The boolean is True only when a new record was written; an existing uid
        leaves the id counter and the document untouched.
        """
        if self._is_blank(uid) or self._is_blank(email):
            raise ValidationError("uid and email are required")
        with self._mutate() as session:
            existing = session.users.get_by_uid(uid)
            if existing is not None:
                session.unchanged = True
                return existing, False
            user = {
                "id": session.users.next_id(),
                "uid": uid,
                "email": email,
                "name": name or "",
                "status": PENDING,
                "kycCompleted": False,
                "kycStatus": PENDING,
                "kyc": None,
            }
            session.users.insert(user)
            return user, True

    def get_user(self, *, uid: str) -> dict[str, Any]:
        with self._read() as session:
            user = session.users.get_by_uid(uid)
        if user is None:
            raise _user_not_found()
        return user

    def get_user_profile(self, *, uid: str) -> dict[str, Any]:
        user = self.get_user(uid=uid)
        return {
            "uid": user["uid"],
            "email": user.get("email"),
            "name": user.get("name"),
            "status": user.get("status"),
            "kycCompleted": user.get("kycCompleted"),
            "kycStatus": user.get("kycStatus") or PENDING,
            "kyc": user.get("kyc"),
        }

    def submit_kyc(self, *, uid: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        with self._mutate() as session:
            user = session.users.get_by_uid(uid)
            if user is None:
                raise _user_not_found()
            kyc: dict[str, Any] = {field: payload.get(field) for field in KYC_FIELDS}
            kyc["nicFront"] = payload.get("nicFront") or None
            kyc["nicBack"] = payload.get("nicBack") or None
            # A resubmission goes back to review regardless of the previous decision.
            user["kycCompleted"] = True
            user["kycStatus"] = PENDING
            user["kyc"] = kyc
            return user

    def list_users(self) -> list[dict[str, Any]]:
        with self._read() as session:
            return session.users.list()

    def approve_user(self, *, user_id: int) -> dict[str, Any]:
        with self._mutate() as session:
            user = session.users.get(user_id)
            if user is None:
                raise _user_not_found()
            return self.workflow.transition(user, field="status", new_status=APPROVED)

    def delete_user(self, *, user_id: int) -> None:
        with self._mutate() as session:
            user = session.users.get(user_id)
            if user is None:
                raise _user_not_found()
            session.users.delete(user_id)
            uid = user.get("uid")
            logger.info(
                "user_deleted id=%s orphaned_accounts=%d orphaned_bots=%d",
                user_id,
                len(session.accounts.list_for_owner(uid)),
                len(session.bots.list_for_owner(uid)),
            )

    def list_kyc_requests(self) -> list[dict[str, Any]]:
        with self._read() as session:
            users = session.users.with_kyc()
        return [
            {
                "id": user.get("id"),
                "uid": user.get("uid"),
                "name": user.get("name"),
                "email": user.get("email"),
                "kycStatus": user.get("kycStatus") or PENDING,
            }
            for user in users
        ]

    def get_kyc_request(self, *, user_id: int) -> dict[str, Any]:
        with self._read() as session:
            user = session.users.get(user_id)
        if user is None or not user.get("kyc"):
            raise _kyc_not_found()
        return {
            "id": user["id"],
            "uid": user.get("uid"),
            "name": user.get("name"),
            "email": user.get("email"),
            "kycStatus": user.get("kycStatus"),
            "kyc": user["kyc"],
        }

    def approve_kyc(self, *, user_id: int) -> dict[str, Any]:
        return self._transition_kyc(user_id=user_id, new_status=APPROVED)

    def reject_kyc(self, *, user_id: int) -> dict[str, Any]:
        return self._transition_kyc(user_id=user_id, new_status=REJECTED)

    def _transition_kyc(self, *, user_id: int, new_status: str) -> dict[str, Any]:
        with self._mutate() as session:
            user = session.users.get(user_id)
            if user is None or not user.get("kyc"):
                raise _kyc_not_found()
            return self.workflow.transition(user, field="kycStatus", new_status=new_status)
