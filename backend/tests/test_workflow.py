"""
Tests for document status transitions
"""
from types import SimpleNamespace

import pytest

from app.core.config import settings
from app.core.exceptions import ConflictError, ValidationError
from app.services import workflow
from app.services.workflow import can_transition, ensure_editable, transition


def doc(status, id=1):
    return SimpleNamespace(id=id, status=status)


class TestStrictTransitions:
    @pytest.mark.parametrize("current,requested", [
        ("SENT", "PAID"),
        ("SENT", "OVERDUE"),
        ("SENT", "CANCELLED"),
        ("OVERDUE", "PAID"),
        ("OVERDUE", "CANCELLED"),
    ])
    def test_invoice_allowed(self, current, requested):
        assert can_transition(workflow.INVOICE, current, requested, strict=True)

    @pytest.mark.parametrize("current,requested", [
        ("PAID", "SENT"),
        ("PAID", "CANCELLED"),
        ("CANCELLED", "PAID"),
        ("OVERDUE", "SENT"),
    ])
    def test_invoice_rejected(self, current, requested):
        assert not can_transition(workflow.INVOICE, current, requested, strict=True)

    def test_purchase_order_must_be_confirmed_before_received(self):
        assert not can_transition(workflow.PURCHASE_ORDER, "SENT", "RECEIVED", strict=True)
        assert can_transition(workflow.PURCHASE_ORDER, "SENT", "CONFIRMED", strict=True)
        assert can_transition(workflow.PURCHASE_ORDER, "CONFIRMED", "RECEIVED", strict=True)

    def test_payroll_paths(self):
        assert can_transition(workflow.PAYROLL, "PENDING", "PROCESSED", strict=True)
        assert can_transition(workflow.PAYROLL, "PROCESSED", "PAID", strict=True)
        assert not can_transition(workflow.PAYROLL, "PENDING", "PAID", strict=True)
        assert not can_transition(workflow.PAYROLL, "PAID", "CANCELLED", strict=True)

    def test_transaction_approval_is_final(self):
        assert can_transition(workflow.TRANSACTION, "PENDING", "APPROVED", strict=True)
        assert not can_transition(workflow.TRANSACTION, "APPROVED", "PENDING", strict=True)

    def test_repeat_is_allowed_even_from_terminal_state(self):
        assert can_transition(workflow.INVOICE, "PAID", "PAID", strict=True)

    def test_unknown_status_is_never_allowed(self):
        assert not can_transition(workflow.INVOICE, "SENT", "DRAFT", strict=False)


class TestLegacyTransitions:
    def test_any_known_status_is_accepted(self):
        assert can_transition(workflow.INVOICE, "PAID", "SENT", strict=False)
        assert can_transition(workflow.PURCHASE_ORDER, "SENT", "RECEIVED", strict=False)

    def test_setting_is_read_at_call_time(self, monkeypatch):
        monkeypatch.setattr(settings, "STRICT_TRANSITIONS", False)
        assert can_transition(workflow.PAYROLL, "PAID", "PENDING")
        monkeypatch.setattr(settings, "STRICT_TRANSITIONS", True)
        assert not can_transition(workflow.PAYROLL, "PAID", "PENDING")


class TestTransition:
    def test_changes_status(self):
        invoice = doc("SENT")
        assert transition(invoice, workflow.INVOICE, "PAID", strict=True) is True
        assert invoice.status == "PAID"

    def test_repeat_is_a_no_op(self):
        invoice = doc("PAID")
        assert transition(invoice, workflow.INVOICE, "PAID", strict=True) is False
        assert invoice.status == "PAID"

    def test_rejected_move_raises_conflict(self):
        order = doc("SENT", id=7)
        with pytest.raises(ConflictError) as exc:
            transition(order, workflow.PURCHASE_ORDER, "RECEIVED", strict=True)
        assert exc.value.status_code == 409
        assert exc.value.message == "Cannot move purchase order 7 from SENT to RECEIVED"
        assert order.status == "SENT"

    def test_unknown_status_raises_validation_error(self):
        with pytest.raises(ValidationError):
            transition(doc("SENT"), workflow.INVOICE, "ARCHIVED")


class TestEnsureEditable:
    @pytest.mark.parametrize("doc_type,status", [
        (workflow.PAYROLL, "PAID"),
        (workflow.PAYROLL, "CANCELLED"),
        (workflow.TRANSACTION, "APPROVED"),
    ])
    def test_terminal_documents_are_frozen(self, doc_type, status):
        with pytest.raises(ConflictError):
            ensure_editable(doc(status), doc_type, strict=True)

    @pytest.mark.parametrize("doc_type,status", [
        (workflow.PAYROLL, "PENDING"),
        (workflow.PAYROLL, "PROCESSED"),
        (workflow.TRANSACTION, "PENDING"),
    ])
    def test_open_documents_are_editable(self, doc_type, status):
        ensure_editable(doc(status), doc_type, strict=True)

    def test_legacy_mode_never_freezes(self):
        ensure_editable(doc("PAID"), workflow.PAYROLL, strict=False)
