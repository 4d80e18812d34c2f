# labflow_core/workflows/machine.py
from __future__ import annotations

"""
Status machine building blocks.

A StatusMachine bundles, for one entity type:
- the closed set of statuses (a str Enum)
- one StatusDefinition per status (label, description, color, final flag)
- the transition graph (status -> permitted next statuses)

Every lab workflow is a strict linear chain: each non-final status has
exactly one successor, the single final status has none, and the chain
follows the enum's declaration order. check_invariants() verifies this.

This module is PURE LOGIC + DATA. No Django imports.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple, Type, Union

from .exceptions import RegistryInvariantError, UnknownStatus


class EntityType(str, Enum):
    SAMPLE = "SAMPLE"
    TEST = "TEST"
    ORDER = "ORDER"
    INVOICE = "INVOICE"
    SEQUENCING_RUN = "SEQUENCING_RUN"
    PCR_PLATE = "PCR_PLATE"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class StatusDefinition:
    value: str
    label: str
    description: str
    color: str
    is_final: bool = False

    def as_dict(self) -> Dict[str, object]:
        return {
            "value": str(self.value),
            "label": self.label,
            "description": self.description,
            "color": self.color,
            "is_final": self.is_final,
        }


StatusLike = Union[Enum, str, None]


class StatusMachine:
    """
    Read-only status registry and transition graph for one entity type.
    """

    def __init__(
        self,
        *,
        entity_type: EntityType,
        status_enum: Type[Enum],
        definitions: Mapping[Enum, StatusDefinition],
        transitions: Mapping[Enum, Sequence[Enum]],
    ):
        self.entity_type = entity_type
        self.status_enum = status_enum
        self.statuses: Tuple[Enum, ...] = tuple(status_enum)
        self._definitions: Mapping[Enum, StatusDefinition] = MappingProxyType(dict(definitions))
        self._transitions: Mapping[Enum, Tuple[Enum, ...]] = MappingProxyType(
            {status: tuple(targets) for status, targets in transitions.items()}
        )

    def __repr__(self) -> str:
        return f"<StatusMachine {self.entity_type.value} ({len(self.statuses)} statuses)>"

    # -----------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------

    def coerce(self, status: StatusLike) -> Optional[Enum]:
        """
        Resolve `status` to a member of this machine, or None.
        Accepts enum members and case-insensitive strings.
        """
        if isinstance(status, self.status_enum):
            return status

        raw = str(status.value if isinstance(status, Enum) else (status or "")).strip().upper()
        if not raw:
            return None
        try:
            return self.status_enum(raw)
        except ValueError:
            return None

    def __contains__(self, status: StatusLike) -> bool:
        return self.coerce(status) is not None

    def info_for(self, status: StatusLike) -> StatusDefinition:
        resolved = self.coerce(status)
        if resolved is None or resolved not in self._definitions:
            raise UnknownStatus(entity_type=self.entity_type.value, status=status)
        return self._definitions[resolved]

    def is_final(self, status: StatusLike) -> bool:
        return self.info_for(status).is_final

    def active_statuses(self) -> FrozenSet[Enum]:
        return frozenset(s for s in self.statuses if not self._definitions[s].is_final)

    def final_statuses(self) -> FrozenSet[Enum]:
        return frozenset(s for s in self.statuses if self._definitions[s].is_final)

    @property
    def final_status(self) -> Enum:
        finals = [s for s in self.statuses if self._definitions[s].is_final]
        return finals[0]

    @property
    def initial_status(self) -> Enum:
        return self.statuses[0]

    def transitions_from(self, status: StatusLike) -> List[Enum]:
        """
        Permitted next statuses, in graph order.
        Unknown statuses have no transitions.
        """
        resolved = self.coerce(status)
        if resolved is None:
            return []
        return list(self._transitions.get(resolved, ()))

    def transition_map(self) -> Dict[str, List[str]]:
        return {
            status.value: [target.value for target in self._transitions.get(status, ())]
            for status in self.statuses
        }

    def definitions(self) -> List[StatusDefinition]:
        return [self._definitions[s] for s in self.statuses]

    # -----------------------------------------------------------
    # Construction-time invariants
    # -----------------------------------------------------------

    def check_invariants(self) -> List[str]:
        """
        Return every inconsistency in this machine. Empty means healthy.
        """
        problems: List[str] = []
        universe = set(self.statuses)

        # Definitions: total, no extras, value matches key
        for status in self.statuses:
            definition = self._definitions.get(status)
            if definition is None:
                problems.append(f"{status.value}: missing status definition")
            elif str(getattr(definition.value, "value", definition.value)) != status.value:
                problems.append(
                    f"{status.value}: definition value is {definition.value!r}"
                )
        for key in self._definitions:
            if key not in universe:
                problems.append(f"{key}: definition for a status outside the machine")

        # Graph: total, no extras, targets inside the machine
        for status in self.statuses:
            if status not in self._transitions:
                problems.append(f"{status.value}: missing transition entry")
        for key, targets in self._transitions.items():
            if key not in universe:
                problems.append(f"{key}: transition entry for a status outside the machine")
            for target in targets:
                if target not in universe:
                    problems.append(f"{getattr(key, 'value', key)} -> {target}: unknown target")

        if problems:
            return problems

        finals = [s for s in self.statuses if self._definitions[s].is_final]
        if len(finals) != 1:
            problems.append(
                f"expected exactly one final status, found {[s.value for s in finals]}"
            )

        for status in self.statuses:
            targets = self._transitions[status]
            if self._definitions[status].is_final:
                if targets:
                    problems.append(f"{status.value}: final status has outgoing transitions")
            elif len(targets) != 1:
                problems.append(
                    f"{status.value}: expected exactly one next status, found {len(targets)}"
                )

        if problems:
            return problems

        # Linear chain in declaration order: no skips, cycles or back edges
        for index, status in enumerate(self.statuses[:-1]):
            expected = self.statuses[index + 1]
            actual = self._transitions[status][0]
            if actual != expected:
                problems.append(
                    f"{status.value} -> {actual.value}: expected next stage {expected.value}"
                )

        if self.statuses[-1] != finals[0]:
            problems.append(f"{finals[0].value}: final status is not the last stage")

        return problems

    def assert_valid(self) -> None:
        problems = self.check_invariants()
        if problems:
            raise RegistryInvariantError(entity_type=self.entity_type.value, problems=problems)
