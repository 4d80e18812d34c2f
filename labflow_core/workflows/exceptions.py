# labflow_core/workflows/exceptions.py

"""
Workflow engine exceptions.

The boolean and list APIs never raise for unknown statuses or roles.
These are raised by the explicit "validate" entry points and by
registry construction checks.
"""

from typing import List, Optional


class WorkflowError(ValueError):
    """
    Base class for every workflow engine error.
    """


class UnknownEntityType(WorkflowError):
    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"Unknown workflow kind: {kind}")


class UnknownStatus(WorkflowError):
    def __init__(self, *, entity_type: str, status):
        self.entity_type = entity_type
        self.status = status
        super().__init__(f"Unknown {entity_type.lower()} status: {status}")


class RegistryInvariantError(WorkflowError):
    """
    Raised when a status machine definition is internally inconsistent.
    """

    def __init__(self, *, entity_type: str, problems: List[str]):
        self.entity_type = entity_type
        self.problems = list(problems)
        super().__init__(
            f"{entity_type} workflow definition is invalid: " + "; ".join(self.problems)
        )


class TransitionError(WorkflowError):
    """
    Raised when a requested status change cannot be applied.
    """

    def __init__(
        self,
        message: str,
        *,
        entity_type: str,
        current_status: str,
        target_status: str,
        allowed_targets: Optional[List[str]] = None,
    ):
        self.entity_type = entity_type
        self.current_status = current_status
        self.target_status = target_status
        self.allowed_targets = list(allowed_targets or [])
        super().__init__(message)


class AlreadyInStatus(TransitionError):
    def __init__(self, *, entity_type: str, status: str, allowed_targets=None):
        super().__init__(
            f"{entity_type} is already in status '{status}'",
            entity_type=entity_type,
            current_status=status,
            target_status=status,
            allowed_targets=allowed_targets,
        )


class InvalidTransition(TransitionError):
    def __init__(self, *, entity_type: str, current_status: str, target_status: str, allowed_targets=None):
        super().__init__(
            f"Cannot transition {entity_type} from '{current_status}' to '{target_status}'",
            entity_type=entity_type,
            current_status=current_status,
            target_status=target_status,
            allowed_targets=allowed_targets,
        )


class TransitionNotPermitted(TransitionError):
    def __init__(
        self,
        *,
        entity_type: str,
        current_status: str,
        target_status: str,
        role,
        required_role,
        allowed_targets=None,
    ):
        self.role = role
        self.required_role = required_role
        super().__init__(
            f"Role {role or 'UNKNOWN'} cannot perform {entity_type.lower()} transition: "
            f"{current_status} -> {target_status} (requires {required_role})",
            entity_type=entity_type,
            current_status=current_status,
            target_status=target_status,
            allowed_targets=allowed_targets,
        )
