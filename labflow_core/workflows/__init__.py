# labflow_core/workflows/__init__.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from .due_dates import (
    DEFAULT_TURNAROUND_DAYS,
    Priority,
    add_business_days,
    business_days_between,
    calculate_order_due_date,
    days_past_due,
    days_remaining,
    urgency_level,
)
from .exceptions import (
    AlreadyInStatus,
    InvalidTransition,
    RegistryInvariantError,
    TransitionError,
    TransitionNotPermitted,
    UnknownEntityType,
    UnknownStatus,
    WorkflowError,
)
from .machine import EntityType, StatusDefinition, StatusMachine
from .statuses import (
    MACHINES,
    InvoiceStatus,
    OrderStatus,
    PcrPlateStatus,
    SampleStatus,
    SequencingRunStatus,
    TestStatus,
    get_machine,
    normalize_kind,
)
from .transitions import (
    StatusChangeRequest,
    TransitionDecision,
    allowed_next_states,
    available_transitions,
    check_transition_request,
    is_valid_transition,
    required_role,
    validate_transition,
)


# ===============================================================
# Registry queries
# ===============================================================

def info_for(kind, status) -> StatusDefinition:
    return get_machine(kind).info_for(status)


def is_final(kind, status) -> bool:
    return get_machine(kind).is_final(status)


def active_statuses(kind) -> List[str]:
    machine = get_machine(kind)
    return [s.value for s in machine.statuses if s in machine.active_statuses()]


def final_statuses(kind) -> List[str]:
    machine = get_machine(kind)
    return [s.value for s in machine.statuses if s in machine.final_statuses()]


def check_registry() -> Dict[str, List[str]]:
    """
    Invariant problems per machine; machines without problems are omitted.
    """
    report: Dict[str, List[str]] = {}
    for entity_type, machine in MACHINES.items():
        problems = machine.check_invariants()
        if problems:
            report[entity_type.value] = problems
    return report


def workflow_definition(kind: Optional[Union[EntityType, str]] = None) -> Dict[str, Any]:
    """
    Stable JSON-serializable definition for UI.

    With no kind, returns every machine keyed by lower-case entity type.
    """
    def _one(entity_type: EntityType) -> Dict[str, Any]:
        machine = MACHINES[entity_type]
        return {
            "kind": entity_type.value.lower(),
            "statuses": [d.as_dict() for d in machine.definitions()],
            "transitions": machine.transition_map(),
            "initial_status": machine.initial_status.value,
            "final_status": machine.final_status.value,
        }

    if kind is None:
        return {entity_type.value.lower(): _one(entity_type) for entity_type in MACHINES}
    return _one(normalize_kind(kind))


__all__ = [
    "EntityType",
    "StatusDefinition",
    "StatusMachine",
    "MACHINES",
    "SampleStatus",
    "TestStatus",
    "OrderStatus",
    "InvoiceStatus",
    "SequencingRunStatus",
    "PcrPlateStatus",
    "WorkflowError",
    "UnknownEntityType",
    "UnknownStatus",
    "RegistryInvariantError",
    "TransitionError",
    "AlreadyInStatus",
    "InvalidTransition",
    "TransitionNotPermitted",
    "get_machine",
    "normalize_kind",
    "info_for",
    "is_final",
    "active_statuses",
    "final_statuses",
    "check_registry",
    "workflow_definition",
    "allowed_next_states",
    "available_transitions",
    "is_valid_transition",
    "required_role",
    "validate_transition",
    "StatusChangeRequest",
    "TransitionDecision",
    "check_transition_request",
    "Priority",
    "DEFAULT_TURNAROUND_DAYS",
    "calculate_order_due_date",
    "add_business_days",
    "business_days_between",
    "days_remaining",
    "days_past_due",
    "urgency_level",
]
