# labflow_core/workflows/statuses/sample.py
from __future__ import annotations

from enum import Enum
from typing import Dict, List

from ..machine import EntityType, StatusDefinition, StatusMachine


class SampleStatus(str, Enum):
    REGISTERED = "REGISTERED"
    RECEIVED = "RECEIVED"
    IN_STORAGE = "IN_STORAGE"
    IN_PROGRESS = "IN_PROGRESS"
    TESTING_COMPLETE = "TESTING_COMPLETE"
    APPROVED = "APPROVED"
    REPORTED = "REPORTED"
    DISPOSED = "DISPOSED"

    def __str__(self) -> str:
        return self.value


SAMPLE_STATUS_INFO: Dict[SampleStatus, StatusDefinition] = {
    SampleStatus.REGISTERED: StatusDefinition(
        value=SampleStatus.REGISTERED,
        label="Registered",
        description="Sample has been logged into the system but not yet physically received",
        color="#6B7280",
    ),
    SampleStatus.RECEIVED: StatusDefinition(
        value=SampleStatus.RECEIVED,
        label="Received",
        description="Sample has been physically received and inspected",
        color="#3B82F6",
    ),
    SampleStatus.IN_STORAGE: StatusDefinition(
        value=SampleStatus.IN_STORAGE,
        label="In Storage",
        description="Sample has been placed in a designated storage location",
        color="#8B5CF6",
    ),
    SampleStatus.IN_PROGRESS: StatusDefinition(
        value=SampleStatus.IN_PROGRESS,
        label="In Progress",
        description="Testing is actively being performed on the sample",
        color="#F59E0B",
    ),
    SampleStatus.TESTING_COMPLETE: StatusDefinition(
        value=SampleStatus.TESTING_COMPLETE,
        label="Testing Complete",
        description="All assigned tests have been completed",
        color="#10B981",
    ),
    SampleStatus.APPROVED: StatusDefinition(
        value=SampleStatus.APPROVED,
        label="Approved",
        description="All results have been reviewed and approved",
        color="#059669",
    ),
    SampleStatus.REPORTED: StatusDefinition(
        value=SampleStatus.REPORTED,
        label="Reported",
        description="Results have been reported to the client",
        color="#047857",
    ),
    SampleStatus.DISPOSED: StatusDefinition(
        value=SampleStatus.DISPOSED,
        label="Disposed",
        description="Sample has been disposed of according to protocol",
        color="#9CA3AF",
        is_final=True,
    ),
}

SAMPLE_STATUS_TRANSITIONS: Dict[SampleStatus, List[SampleStatus]] = {
    SampleStatus.REGISTERED: [SampleStatus.RECEIVED],
    SampleStatus.RECEIVED: [SampleStatus.IN_STORAGE],
    SampleStatus.IN_STORAGE: [SampleStatus.IN_PROGRESS],
    SampleStatus.IN_PROGRESS: [SampleStatus.TESTING_COMPLETE],
    SampleStatus.TESTING_COMPLETE: [SampleStatus.APPROVED],
    SampleStatus.APPROVED: [SampleStatus.REPORTED],
    SampleStatus.REPORTED: [SampleStatus.DISPOSED],
    SampleStatus.DISPOSED: [],
}

SAMPLE_MACHINE = StatusMachine(
    entity_type=EntityType.SAMPLE,
    status_enum=SampleStatus,
    definitions=SAMPLE_STATUS_INFO,
    transitions=SAMPLE_STATUS_TRANSITIONS,
)
