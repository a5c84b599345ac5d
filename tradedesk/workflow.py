from __future__ import annotations

import logging
from typing import Any

from tradedesk.errors import ApiError, ValidationError

logger = logging.getLogger(__name__)

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
APPROVAL_STATES = frozenset({PENDING, APPROVED, REJECTED})


class ApprovalWorkflow:
    """pending -> approved | rejected, shared by user status, KYC and bot requests.

    The permissive table lets an admin overturn an earlier decision; strict mode
    makes approved and rejected terminal.
    """

    PERMISSIVE_TRANSITIONS: dict[str, set[str]] = {
        PENDING: {APPROVED, REJECTED},
        APPROVED: {REJECTED},
        REJECTED: {APPROVED},
    }
    STRICT_TRANSITIONS: dict[str, set[str]] = {
        PENDING: {APPROVED, REJECTED},
        APPROVED: set(),
        REJECTED: set(),
    }

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict
        self.allowed_transitions = self.STRICT_TRANSITIONS if strict else self.PERMISSIVE_TRANSITIONS

    def can_transition(self, current_status: str, new_status: str) -> bool:
        if new_status == current_status:
            return True
        return new_status in self.allowed_transitions.get(current_status, set())

    def transition(self, record: dict[str, Any], *, field: str, new_status: str) -> dict[str, Any]:
        if new_status not in APPROVAL_STATES:
            raise ValidationError(f"unknown approval state: {new_status}")
        # Records written before the field existed count as pending.
        current_status = record.get(field) or PENDING
        if not self.can_transition(current_status, new_status):
            raise ApiError(
                code="WF_STATE_TRANSITION_INVALID",
                message=f"invalid transition: {current_status} -> {new_status}",
                error_class="business_rule",
                retryable=False,
                http_status=409,
            )
        record[field] = new_status
        logger.info(
            "approval_transition id=%s field=%s from=%s to=%s",
            record.get("id"),
            field,
            current_status,
            new_status,
        )
        return record
