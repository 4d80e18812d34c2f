# labflow_core/workflows/statuses/order.py
from __future__ import annotations

from enum import Enum
from typing import Dict, List

from ..machine import EntityType, StatusDefinition, StatusMachine


class OrderStatus(str, Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    RECEIVED = "RECEIVED"
    IN_PROGRESS = "IN_PROGRESS"
    TESTING_COMPLETE = "TESTING_COMPLETE"
    IN_REVIEW = "IN_REVIEW"
    APPROVED = "APPROVED"
    REPORTED = "REPORTED"
    COMPLETED = "COMPLETED"

    def __str__(self) -> str:
        return self.value


ORDER_STATUS_INFO: Dict[OrderStatus, StatusDefinition] = {
    OrderStatus.DRAFT: StatusDefinition(
        value=OrderStatus.DRAFT,
        label="Draft",
        description="Order has been created but not yet submitted",
        color="#6B7280",
    ),
    OrderStatus.SUBMITTED: StatusDefinition(
        value=OrderStatus.SUBMITTED,
        label="Submitted",
        description="Order has been submitted for processing",
        color="#3B82F6",
    ),
    OrderStatus.RECEIVED: StatusDefinition(
        value=OrderStatus.RECEIVED,
        label="Received",
        description="Samples for this order have been received",
        color="#8B5CF6",
    ),
    OrderStatus.IN_PROGRESS: StatusDefinition(
        value=OrderStatus.IN_PROGRESS,
        label="In Progress",
        description="Testing is actively being performed",
        color="#F59E0B",
    ),
    OrderStatus.TESTING_COMPLETE: StatusDefinition(
        value=OrderStatus.TESTING_COMPLETE,
        label="Testing Complete",
        description="All tests have been completed",
        color="#10B981",
    ),
    OrderStatus.IN_REVIEW: StatusDefinition(
        value=OrderStatus.IN_REVIEW,
        label="In Review",
        description="Results are being reviewed",
        color="#8B5CF6",
    ),
    OrderStatus.APPROVED: StatusDefinition(
        value=OrderStatus.APPROVED,
        label="Approved",
        description="All results have been approved",
        color="#059669",
    ),
    OrderStatus.REPORTED: StatusDefinition(
        value=OrderStatus.REPORTED,
        label="Reported",
        description="Results have been reported to the client",
        color="#047857",
    ),
    OrderStatus.COMPLETED: StatusDefinition(
        value=OrderStatus.COMPLETED,
        label="Completed",
        description="Order is fully completed",
        color="#065F46",
        is_final=True,
    ),
}

ORDER_STATUS_TRANSITIONS: Dict[OrderStatus, List[OrderStatus]] = {
    OrderStatus.DRAFT: [OrderStatus.SUBMITTED],
    OrderStatus.SUBMITTED: [OrderStatus.RECEIVED],
    OrderStatus.RECEIVED: [OrderStatus.IN_PROGRESS],
    OrderStatus.IN_PROGRESS: [OrderStatus.TESTING_COMPLETE],
    OrderStatus.TESTING_COMPLETE: [OrderStatus.IN_REVIEW],
    OrderStatus.IN_REVIEW: [OrderStatus.APPROVED],
    OrderStatus.APPROVED: [OrderStatus.REPORTED],
    OrderStatus.REPORTED: [OrderStatus.COMPLETED],
    OrderStatus.COMPLETED: [],
}

ORDER_MACHINE = StatusMachine(
    entity_type=EntityType.ORDER,
    status_enum=OrderStatus,
    definitions=ORDER_STATUS_INFO,
    transitions=ORDER_STATUS_TRANSITIONS,
)
