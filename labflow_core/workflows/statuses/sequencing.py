# labflow_core/workflows/statuses/sequencing.py
from __future__ import annotations

"""
Sequencing run and PCR plate lifecycles.

Both are strictly linear: no skipped stages, no way back.
Note the PCR plate values carry a PLATE_ prefix where a bare name
would collide with run statuses in shared UI code.
"""

from enum import Enum
from typing import Dict, List

from ..machine import EntityType, StatusDefinition, StatusMachine


# ===============================================================
# SEQUENCING RUN
# ===============================================================

class SequencingRunStatus(str, Enum):
    SETUP = "SETUP"
    DNA_EXTRACTED = "DNA_EXTRACTED"
    PCR_IN_PROGRESS = "PCR_IN_PROGRESS"
    POOLED = "POOLED"
    SUBMITTED = "SUBMITTED"
    SEQUENCED = "SEQUENCED"

    def __str__(self) -> str:
        return self.value


SEQUENCING_RUN_STATUS_INFO: Dict[SequencingRunStatus, StatusDefinition] = {
    SequencingRunStatus.SETUP: StatusDefinition(
        value=SequencingRunStatus.SETUP,
        label="Setup",
        description="Run is being configured; plates and samples are being defined",
        color="#6B7280",
    ),
    SequencingRunStatus.DNA_EXTRACTED: StatusDefinition(
        value=SequencingRunStatus.DNA_EXTRACTED,
        label="DNA Extracted",
        description="DNA extraction is complete for all plates in this run",
        color="#3B82F6",
    ),
    SequencingRunStatus.PCR_IN_PROGRESS: StatusDefinition(
        value=SequencingRunStatus.PCR_IN_PROGRESS,
        label="PCR In Progress",
        description="PCR amplification and gel checking are underway",
        color="#F59E0B",
    ),
    SequencingRunStatus.POOLED: StatusDefinition(
        value=SequencingRunStatus.POOLED,
        label="Pooled",
        description="PCR products have been pooled for sequencing",
        color="#8B5CF6",
    ),
    SequencingRunStatus.SUBMITTED: StatusDefinition(
        value=SequencingRunStatus.SUBMITTED,
        label="Submitted",
        description="Pool has been submitted for sequencing",
        color="#10B981",
    ),
    SequencingRunStatus.SEQUENCED: StatusDefinition(
        value=SequencingRunStatus.SEQUENCED,
        label="Sequenced",
        description="Sequencing is complete and data has been received",
        color="#059669",
        is_final=True,
    ),
}

SEQUENCING_RUN_TRANSITIONS: Dict[SequencingRunStatus, List[SequencingRunStatus]] = {
    SequencingRunStatus.SETUP: [SequencingRunStatus.DNA_EXTRACTED],
    SequencingRunStatus.DNA_EXTRACTED: [SequencingRunStatus.PCR_IN_PROGRESS],
    SequencingRunStatus.PCR_IN_PROGRESS: [SequencingRunStatus.POOLED],
    SequencingRunStatus.POOLED: [SequencingRunStatus.SUBMITTED],
    SequencingRunStatus.SUBMITTED: [SequencingRunStatus.SEQUENCED],
    SequencingRunStatus.SEQUENCED: [],
}

SEQUENCING_RUN_MACHINE = StatusMachine(
    entity_type=EntityType.SEQUENCING_RUN,
    status_enum=SequencingRunStatus,
    definitions=SEQUENCING_RUN_STATUS_INFO,
    transitions=SEQUENCING_RUN_TRANSITIONS,
)


# ===============================================================
# PCR PLATE
# ===============================================================

class PcrPlateStatus(str, Enum):
    PLATE_SETUP = "PLATE_SETUP"
    PCR_COMPLETE = "PCR_COMPLETE"
    GEL_CHECKED = "GEL_CHECKED"
    POOLING_ASSIGNED = "POOLING_ASSIGNED"
    PLATE_DONE = "PLATE_DONE"

    def __str__(self) -> str:
        return self.value


PCR_PLATE_STATUS_INFO: Dict[PcrPlateStatus, StatusDefinition] = {
    PcrPlateStatus.PLATE_SETUP: StatusDefinition(
        value=PcrPlateStatus.PLATE_SETUP,
        label="Setup",
        description="PCR plate is being prepared; wells are being populated",
        color="#6B7280",
    ),
    PcrPlateStatus.PCR_COMPLETE: StatusDefinition(
        value=PcrPlateStatus.PCR_COMPLETE,
        label="PCR Complete",
        description="PCR amplification has been performed",
        color="#3B82F6",
    ),
    PcrPlateStatus.GEL_CHECKED: StatusDefinition(
        value=PcrPlateStatus.GEL_CHECKED,
        label="Gel Checked",
        description="Gel electrophoresis results have been assessed",
        color="#F59E0B",
    ),
    PcrPlateStatus.POOLING_ASSIGNED: StatusDefinition(
        value=PcrPlateStatus.POOLING_ASSIGNED,
        label="Pooling Assigned",
        description="Pooling actions have been assigned to all wells",
        color="#8B5CF6",
    ),
    PcrPlateStatus.PLATE_DONE: StatusDefinition(
        value=PcrPlateStatus.PLATE_DONE,
        label="Done",
        description="Plate has been fully processed and pooled",
        color="#059669",
        is_final=True,
    ),
}

PCR_PLATE_TRANSITIONS: Dict[PcrPlateStatus, List[PcrPlateStatus]] = {
    PcrPlateStatus.PLATE_SETUP: [PcrPlateStatus.PCR_COMPLETE],
    PcrPlateStatus.PCR_COMPLETE: [PcrPlateStatus.GEL_CHECKED],
    PcrPlateStatus.GEL_CHECKED: [PcrPlateStatus.POOLING_ASSIGNED],
    PcrPlateStatus.POOLING_ASSIGNED: [PcrPlateStatus.PLATE_DONE],
    PcrPlateStatus.PLATE_DONE: [],
}

PCR_PLATE_MACHINE = StatusMachine(
    entity_type=EntityType.PCR_PLATE,
    status_enum=PcrPlateStatus,
    definitions=PCR_PLATE_STATUS_INFO,
    transitions=PCR_PLATE_TRANSITIONS,
)
