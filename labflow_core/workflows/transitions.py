# labflow_core/workflows/transitions.py
"""
Transition validation for every lab workflow.

Two layers:
- structural: is `target` a permitted next status of `current`?
- role gate: does the actor meet the transition's minimum role?

The boolean and list helpers never raise for unknown statuses or
roles; they answer False / []. validate_transition() is the raising
variant for callers that need a reason.

The boolean and list helpers treat a missing role (None) as a
structural-only query. validate_transition() and status-change
requests always apply the role gate; a missing role never passes it.

A self-transition (current == target) is never valid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from ..roles import Role, has_minimum_role, normalize_role
from .exceptions import (
    AlreadyInStatus,
    InvalidTransition,
    TransitionNotPermitted,
    UnknownStatus,
)
from .machine import EntityType, StatusLike
from .statuses import (
    InvoiceStatus,
    OrderStatus,
    SampleStatus,
    TestStatus,
    get_machine,
    normalize_kind,
)

logger = logging.getLogger(__name__)

KindLike = Union[EntityType, str]
RoleLike = Union[Role, str, None]


# ===============================================================
# Minimum role per target status
# ===============================================================
# Keyed by the status being entered. Transitions without an entry
# are open to any actor. Sequencing runs and PCR plates are ungated.

MINIMUM_ROLES: Dict[EntityType, Dict[str, Role]] = {
    EntityType.SAMPLE: {
        SampleStatus.APPROVED: Role.SENIOR_ANALYST,
    },
    EntityType.TEST: {
        TestStatus.ASSIGNED: Role.LAB_MANAGER,
        TestStatus.IN_PROGRESS: Role.ANALYST,
        TestStatus.COMPLETED: Role.ANALYST,
        TestStatus.IN_REVIEW: Role.ANALYST,
        TestStatus.APPROVED: Role.SENIOR_ANALYST,
    },
    EntityType.ORDER: {
        OrderStatus.APPROVED: Role.LAB_MANAGER,
    },
    EntityType.INVOICE: {
        InvoiceStatus.APPROVED: Role.BILLING_ADMIN,
    },
}


# ===============================================================
# Structural checks
# ===============================================================

def allowed_next_states(kind: KindLike, current: StatusLike) -> List[str]:
    """
    Canonical next statuses, independent of role.
    Empty for the final status and for unknown statuses.
    """
    return [target.value for target in get_machine(kind).transitions_from(current)]


def _is_structurally_valid(kind: KindLike, current: StatusLike, target: StatusLike) -> bool:
    machine = get_machine(kind)
    cur = machine.coerce(current)
    tgt = machine.coerce(target)
    if cur is None or tgt is None:
        return False
    return tgt in machine.transitions_from(cur)


# ===============================================================
# Role gate
# ===============================================================

def required_role(kind: KindLike, current: StatusLike, target: StatusLike) -> Optional[Role]:
    """
    Minimum role configured for current -> target, or None when the
    transition is ungated (or does not exist).
    """
    entity_type = normalize_kind(kind)
    machine = get_machine(entity_type)
    cur = machine.coerce(current)
    tgt = machine.coerce(target)
    if cur is None or tgt is None:
        return None
    if tgt not in machine.transitions_from(cur):
        return None
    return MINIMUM_ROLES.get(entity_type, {}).get(tgt)


def _role_allows(kind: KindLike, current: StatusLike, target: StatusLike, role: RoleLike) -> bool:
    minimum = required_role(kind, current, target)
    if minimum is None:
        return True
    return has_minimum_role(role, minimum)


# ===============================================================
# Public API
# ===============================================================

def is_valid_transition(
    kind: KindLike,
    current: StatusLike,
    target: StatusLike,
    role: RoleLike = None,
) -> bool:
    """
    True iff `target` is a permitted next status of `current`.

    With `role`, additionally requires the transition's minimum role.
    Without it only the graph is checked. Fails closed: unknown
    statuses and unranked roles yield False.
    """
    if not _is_structurally_valid(kind, current, target):
        return False
    if role is None:
        return True
    return _role_allows(kind, current, target, role)


def available_transitions(
    kind: KindLike,
    current: StatusLike,
    role: RoleLike = None,
) -> List[str]:
    """
    Next statuses reachable from `current`, in graph order.

    With `role`, targets the role may not enter are filtered out.
    """
    nxt = allowed_next_states(kind, current)
    if role is None:
        return nxt
    return [tgt for tgt in nxt if _role_allows(kind, current, tgt, role)]


def validate_transition(
    kind: KindLike,
    current: StatusLike,
    target: StatusLike,
    role: RoleLike = None,
) -> None:
    """
    Raise a TransitionError subclass (or UnknownStatus) if the
    transition cannot be applied. Returns None when it can.

    The role gate always applies: a missing or unranked role is denied
    any gated transition with TransitionNotPermitted.
    """
    entity_type = normalize_kind(kind)
    machine = get_machine(entity_type)

    cur = machine.coerce(current)
    if cur is None:
        raise UnknownStatus(entity_type=entity_type.value, status=current)

    tgt = machine.coerce(target)
    if tgt is None:
        raise UnknownStatus(entity_type=entity_type.value, status=target)

    allowed = allowed_next_states(entity_type, cur)

    if cur == tgt:
        raise AlreadyInStatus(
            entity_type=entity_type.value,
            status=cur.value,
            allowed_targets=allowed,
        )

    if tgt.value not in allowed:
        logger.debug(
            "Rejected %s transition %s -> %s (allowed: %s)",
            entity_type.value, cur.value, tgt.value, allowed,
        )
        raise InvalidTransition(
            entity_type=entity_type.value,
            current_status=cur.value,
            target_status=tgt.value,
            allowed_targets=allowed,
        )

    if not _role_allows(entity_type, cur, tgt, role):
        minimum = required_role(entity_type, cur, tgt)
        resolved = normalize_role(role)
        logger.debug(
            "Role %s lacks %s for %s transition %s -> %s",
            resolved or role, minimum, entity_type.value, cur.value, tgt.value,
        )
        raise TransitionNotPermitted(
            entity_type=entity_type.value,
            current_status=cur.value,
            target_status=tgt.value,
            role=resolved.value if resolved else role,
            required_role=minimum.value if minimum else None,
            allowed_targets=[t for t in allowed if _role_allows(entity_type, cur, t, role)],
        )


# ===============================================================
# Status-change requests
# ===============================================================

@dataclass(frozen=True)
class StatusChangeRequest:
    entity_type: KindLike
    current_status: str
    requested_status: str
    actor_role: Optional[str] = None

    @classmethod
    def from_mapping(cls, data) -> "StatusChangeRequest":
        def pick(*keys):
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return None

        return cls(
            entity_type=pick("entity_type", "entityType"),
            current_status=pick("current_status", "currentStatus"),
            requested_status=pick("requested_status", "requestedStatus"),
            actor_role=pick("actor_role", "actorRole"),
        )


@dataclass(frozen=True)
class TransitionDecision:
    allowed: bool
    reason: str
    allowed_targets: Tuple[str, ...] = field(default_factory=tuple)
    required_role: Optional[str] = None


def check_transition_request(request: StatusChangeRequest) -> TransitionDecision:
    """
    Evaluate a status-change request without raising for bad statuses
    or roles. Unknown entity types still raise UnknownEntityType.
    """
    kind = normalize_kind(request.entity_type)
    role = request.actor_role
    targets = tuple(available_transitions(kind, request.current_status))
    minimum = required_role(kind, request.current_status, request.requested_status)

    try:
        validate_transition(kind, request.current_status, request.requested_status, role)
    except UnknownStatus as exc:
        return TransitionDecision(allowed=False, reason=str(exc), allowed_targets=targets)
    except AlreadyInStatus as exc:
        return TransitionDecision(allowed=False, reason=str(exc), allowed_targets=targets)
    except TransitionNotPermitted as exc:
        return TransitionDecision(
            allowed=False,
            reason=str(exc),
            allowed_targets=tuple(exc.allowed_targets),
            required_role=exc.required_role,
        )
    except InvalidTransition as exc:
        return TransitionDecision(allowed=False, reason=str(exc), allowed_targets=targets)

    return TransitionDecision(
        allowed=True,
        reason="ok",
        allowed_targets=targets,
        required_role=minimum.value if minimum else None,
    )


__all__ = [
    "MINIMUM_ROLES",
    "allowed_next_states",
    "required_role",
    "is_valid_transition",
    "available_transitions",
    "validate_transition",
    "StatusChangeRequest",
    "TransitionDecision",
    "check_transition_request",
]
