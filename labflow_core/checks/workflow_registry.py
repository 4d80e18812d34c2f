# labflow_core/checks/workflow_registry.py

from django.core.checks import Error, register

from labflow_core.roles import ROLE_HIERARCHY, is_ranked
from labflow_core.workflows import MACHINES
from labflow_core.workflows.transitions import MINIMUM_ROLES


@register()
def check_workflow_registry(app_configs, **kwargs):
    """
    Django system check for status machine and role table consistency.
    """
    errors = []

    # 1. Status machines: total mappings, single final, linear chain
    for entity_type, machine in MACHINES.items():
        for problem in machine.check_invariants():
            errors.append(
                Error(
                    f"{entity_type.value} workflow definition is invalid",
                    hint=problem,
                    id="labflow_core.E001",
                )
            )

    # 2. Role hierarchy: no duplicates
    if len(set(ROLE_HIERARCHY)) != len(ROLE_HIERARCHY):
        errors.append(
            Error(
                "Role hierarchy contains duplicate roles",
                id="labflow_core.E002",
            )
        )

    # 3. Minimum-role table only names statuses of its own machine
    #    and roles of the hierarchy
    for entity_type, targets in MINIMUM_ROLES.items():
        machine = MACHINES[entity_type]
        for status, role in targets.items():
            if status not in machine:
                errors.append(
                    Error(
                        f"Minimum role configured for unknown {entity_type.value} status",
                        hint=str(status),
                        id="labflow_core.E003",
                    )
                )
            if not is_ranked(role):
                errors.append(
                    Error(
                        f"Minimum role for {entity_type.value} {status} is not in the role hierarchy",
                        hint=str(role),
                        id="labflow_core.E004",
                    )
                )

    return errors
