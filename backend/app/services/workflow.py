"""
Document Workflow - allowed status transitions per document type
"""
import logging
from typing import Dict, FrozenSet, Optional

from app.core.config import settings
from app.core.exceptions import ConflictError, ValidationError

logger = logging.getLogger(__name__)


INVOICE = "invoice"
PURCHASE_ORDER = "purchase order"
PAYROLL = "payroll"
TRANSACTION = "transaction"


# Terminal states map to an empty set
ALLOWED_TRANSITIONS: Dict[str, Dict[str, FrozenSet[str]]] = {
    INVOICE: {
        "SENT": frozenset({"PAID", "OVERDUE", "CANCELLED"}),
        "OVERDUE": frozenset({"PAID", "CANCELLED"}),
        "PAID": frozenset(),
        "CANCELLED": frozenset(),
    },
    PURCHASE_ORDER: {
        "SENT": frozenset({"CONFIRMED"}),
        "CONFIRMED": frozenset({"RECEIVED"}),
        "RECEIVED": frozenset(),
    },
    PAYROLL: {
        "PENDING": frozenset({"PROCESSED", "CANCELLED"}),
        "PROCESSED": frozenset({"PAID", "CANCELLED"}),
        "PAID": frozenset(),
        "CANCELLED": frozenset(),
    },
    TRANSACTION: {
        "PENDING": frozenset({"APPROVED"}),
        "APPROVED": frozenset(),
    },
}


def can_transition(doc_type: str, current: str, requested: str, strict: Optional[bool] = None) -> bool:
    """
    Return True if a document of ``doc_type`` may move from ``current`` to ``requested``.

    Repeating the current status is always allowed. With ``strict`` off any
    status known to the document type is accepted, which reproduces the old
    unconditional overwrite. ``strict`` defaults to ``settings.STRICT_TRANSITIONS``.
    """
    table = ALLOWED_TRANSITIONS[doc_type]
    if requested not in table:
        return False
    if requested == current:
        return True
    if strict is None:
        strict = settings.STRICT_TRANSITIONS
    if not strict:
        return True
    return requested in table.get(current, frozenset())


def transition(doc, doc_type: str, requested: str, strict: Optional[bool] = None) -> bool:
    """
    Move ``doc`` to ``requested`` or raise ``ConflictError``.

    Returns True when the status actually changed, False for a repeat.
    """
    if requested not in ALLOWED_TRANSITIONS[doc_type]:
        raise ValidationError(f"Unknown {doc_type} status '{requested}'", field="status")

    current = doc.status
    if not can_transition(doc_type, current, requested, strict):
        logger.warning(f"Rejected {doc_type} {doc.id} transition {current} -> {requested}")
        raise ConflictError(f"Cannot move {doc_type} {doc.id} from {current} to {requested}")

    if current == requested:
        return False

    doc.status = requested
    logger.info(f"{doc_type.capitalize()} {doc.id} moved {current} -> {requested}")
    return True


def ensure_editable(doc, doc_type: str, strict: Optional[bool] = None):
    """
    Raise ``ConflictError`` if ``doc`` sits in a terminal status.

    Terminal documents are frozen only under strict transitions; legacy mode
    keeps them editable.
    """
    if strict is None:
        strict = settings.STRICT_TRANSITIONS
    if not strict:
        return
    if ALLOWED_TRANSITIONS[doc_type].get(doc.status) == frozenset():
        raise ConflictError(f"Cannot edit {doc_type} {doc.id} in status {doc.status}")
