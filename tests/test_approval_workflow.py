from __future__ import annotations

import pytest

from tradedesk.errors import ApiError, ValidationError
from tradedesk.workflow import ApprovalWorkflow


def test_pending_moves_to_approved_or_rejected():
    workflow = ApprovalWorkflow()
    assert workflow.transition({"status": "pending"}, field="status", new_status="approved")["status"] == "approved"
    assert workflow.transition({"status": "pending"}, field="status", new_status="rejected")["status"] == "rejected"


def test_permissive_mode_allows_admin_to_overturn_a_decision():
    workflow = ApprovalWorkflow()
    record = {"id": 1, "status": "approved"}
    workflow.transition(record, field="status", new_status="rejected")
    workflow.transition(record, field="status", new_status="approved")
    assert record["status"] == "approved"


def test_strict_mode_makes_decisions_terminal():
    workflow = ApprovalWorkflow(strict=True)
    record = {"id": 1, "kycStatus": "approved"}

    with pytest.raises(ApiError) as exc:
        workflow.transition(record, field="kycStatus", new_status="rejected")

    assert exc.value.code == "WF_STATE_TRANSITION_INVALID"
    assert exc.value.http_status == 409
    assert record["kycStatus"] == "approved"


def test_reapplying_current_state_is_a_noop_in_both_modes():
    for strict in (False, True):
        record = {"status": "rejected"}
        ApprovalWorkflow(strict=strict).transition(record, field="status", new_status="rejected")
        assert record["status"] == "rejected"


def test_missing_field_counts_as_pending():
    record = {"id": 9}
    ApprovalWorkflow(strict=True).transition(record, field="status", new_status="approved")
    assert record["status"] == "approved"


def test_unknown_target_state_is_a_validation_error():
    with pytest.raises(ValidationError):
        ApprovalWorkflow().transition({"status": "pending"}, field="status", new_status="archived")
