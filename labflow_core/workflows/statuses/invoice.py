# labflow_core/workflows/statuses/invoice.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List

from ..machine import EntityType, StatusDefinition, StatusMachine


class InvoiceStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"
    SENT = "SENT"
    VIEWED = "VIEWED"
    PAID = "PAID"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class InvoiceStatusDefinition(StatusDefinition):
    allows_editing: bool = False
    allows_payment: bool = False

    def as_dict(self) -> Dict[str, object]:
        data = super().as_dict()
        data["allows_editing"] = self.allows_editing
        data["allows_payment"] = self.allows_payment
        return data


INVOICE_STATUS_INFO: Dict[InvoiceStatus, InvoiceStatusDefinition] = {
    InvoiceStatus.DRAFT: InvoiceStatusDefinition(
        value=InvoiceStatus.DRAFT,
        label="Draft",
        description="Invoice is being prepared and has not been finalized",
        color="#6B7280",
        allows_editing=True,
    ),
    InvoiceStatus.PENDING_APPROVAL: InvoiceStatusDefinition(
        value=InvoiceStatus.PENDING_APPROVAL,
        label="Pending Approval",
        description="Invoice is awaiting internal approval before being sent",
        color="#F59E0B",
    ),
    InvoiceStatus.APPROVED: InvoiceStatusDefinition(
        value=InvoiceStatus.APPROVED,
        label="Approved",
        description="Invoice has been approved and is ready to be sent",
        color="#10B981",
    ),
    InvoiceStatus.SENT: InvoiceStatusDefinition(
        value=InvoiceStatus.SENT,
        label="Sent",
        description="Invoice has been sent to the client",
        color="#3B82F6",
        allows_payment=True,
    ),
    InvoiceStatus.VIEWED: InvoiceStatusDefinition(
        value=InvoiceStatus.VIEWED,
        label="Viewed",
        description="Client has viewed the invoice",
        color="#8B5CF6",
        allows_payment=True,
    ),
    InvoiceStatus.PAID: InvoiceStatusDefinition(
        value=InvoiceStatus.PAID,
        label="Paid",
        description="Invoice has been fully paid",
        color="#059669",
        is_final=True,
    ),
}

INVOICE_STATUS_TRANSITIONS: Dict[InvoiceStatus, List[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: [InvoiceStatus.PENDING_APPROVAL],
    InvoiceStatus.PENDING_APPROVAL: [InvoiceStatus.APPROVED],
    InvoiceStatus.APPROVED: [InvoiceStatus.SENT],
    InvoiceStatus.SENT: [InvoiceStatus.VIEWED],
    InvoiceStatus.VIEWED: [InvoiceStatus.PAID],
    InvoiceStatus.PAID: [],
}

INVOICE_MACHINE = StatusMachine(
    entity_type=EntityType.INVOICE,
    status_enum=InvoiceStatus,
    definitions=INVOICE_STATUS_INFO,
    transitions=INVOICE_STATUS_TRANSITIONS,
)


def payable_statuses() -> FrozenSet[InvoiceStatus]:
    return frozenset(s for s, info in INVOICE_STATUS_INFO.items() if info.allows_payment)


def editable_statuses() -> FrozenSet[InvoiceStatus]:
    return frozenset(s for s, info in INVOICE_STATUS_INFO.items() if info.allows_editing)
