# labflow_core/workflows/statuses/__init__.py
from __future__ import annotations

from typing import Dict, Union

from ..exceptions import UnknownEntityType
from ..machine import EntityType, StatusMachine
from .invoice import INVOICE_MACHINE, InvoiceStatus
from .lab_test import TEST_MACHINE, TestStatus
from .order import ORDER_MACHINE, OrderStatus
from .sample import SAMPLE_MACHINE, SampleStatus
from .sequencing import (
    PCR_PLATE_MACHINE,
    SEQUENCING_RUN_MACHINE,
    PcrPlateStatus,
    SequencingRunStatus,
)


# ===============================================================
# Machine registry
# ===============================================================

MACHINES: Dict[EntityType, StatusMachine] = {
    EntityType.SAMPLE: SAMPLE_MACHINE,
    EntityType.TEST: TEST_MACHINE,
    EntityType.ORDER: ORDER_MACHINE,
    EntityType.INVOICE: INVOICE_MACHINE,
    EntityType.SEQUENCING_RUN: SEQUENCING_RUN_MACHINE,
    EntityType.PCR_PLATE: PCR_PLATE_MACHINE,
}

KIND_ALIASES: Dict[str, EntityType] = {
    "RUN": EntityType.SEQUENCING_RUN,
    "SEQUENCINGRUN": EntityType.SEQUENCING_RUN,
    "PLATE": EntityType.PCR_PLATE,
    "PCRPLATE": EntityType.PCR_PLATE,
}


def normalize_kind(kind: Union[EntityType, str, None]) -> EntityType:
    """
    Resolve "sample", "SequencingRun", "sequencing-run", "plate", ...
    to an EntityType. Raises UnknownEntityType otherwise.
    """
    if isinstance(kind, EntityType):
        return kind

    raw = str(kind or "").strip().upper().replace("-", "_").replace(" ", "_")
    if raw in EntityType.__members__:
        return EntityType(raw)

    compact = raw.replace("_", "")
    if compact in KIND_ALIASES:
        return KIND_ALIASES[compact]

    raise UnknownEntityType(kind)


def get_machine(kind: Union[EntityType, str, None]) -> StatusMachine:
    return MACHINES[normalize_kind(kind)]


__all__ = [
    "MACHINES",
    "normalize_kind",
    "get_machine",
    "SampleStatus",
    "TestStatus",
    "OrderStatus",
    "InvoiceStatus",
    "SequencingRunStatus",
    "PcrPlateStatus",
    "SAMPLE_MACHINE",
    "TEST_MACHINE",
    "ORDER_MACHINE",
    "INVOICE_MACHINE",
    "SEQUENCING_RUN_MACHINE",
    "PCR_PLATE_MACHINE",
]
