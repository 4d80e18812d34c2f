# labflow_core/tests/test_status_registry.py
from __future__ import annotations

import pytest

from labflow_core.workflows import (
    EntityType,
    InvoiceStatus,
    RegistryInvariantError,
    StatusDefinition,
    StatusMachine,
    TestStatus,
    UnknownEntityType,
    UnknownStatus,
    active_statuses,
    check_registry,
    final_statuses,
    get_machine,
    info_for,
    is_final,
    normalize_kind,
    workflow_definition,
)
from labflow_core.workflows.statuses.invoice import editable_statuses, payable_statuses
from labflow_core.workflows.statuses.lab_test import requires_review


# ===============================================================
# Properties that hold for every machine
# ===============================================================

def test_info_value_matches_key(machine):
    for status in machine.statuses:
        assert machine.info_for(status).value == status
        assert machine.info_for(status.value).value == status.value


def test_every_definition_is_renderable(machine):
    for definition in machine.definitions():
        assert definition.label
        assert definition.description
        assert definition.color.startswith("#") and len(definition.color) == 7


def test_exactly_one_final_without_transitions(machine):
    finals = [s for s in machine.statuses if machine.is_final(s)]
    assert len(finals) == 1
    assert machine.transitions_from(finals[0]) == []
    assert machine.final_status == finals[0]


def test_active_and_final_partition_the_statuses(machine):
    active = machine.active_statuses()
    final = machine.final_statuses()
    assert active.isdisjoint(final)
    assert active | final == set(machine.statuses)


def test_graph_is_total(machine):
    mapping = machine.transition_map()
    assert set(mapping) == {s.value for s in machine.statuses}


def test_graph_is_a_linear_chain(machine):
    chain = [machine.initial_status]
    while machine.transitions_from(chain[-1]):
        (nxt,) = machine.transitions_from(chain[-1])
        assert nxt not in chain
        chain.append(nxt)
    assert chain == list(machine.statuses)


def test_invariants_hold(machine):
    assert machine.check_invariants() == []
    machine.assert_valid()


def test_check_registry_is_clean():
    assert check_registry() == {}


# ===============================================================
# Lookups
# ===============================================================

def test_info_for_unknown_status_raises():
    with pytest.raises(UnknownStatus) as exc:
        info_for("sequencing_run", "NOT_A_STATUS")
    assert exc.value.status == "NOT_A_STATUS"
    assert exc.value.entity_type == "SEQUENCING_RUN"


def test_status_lookup_is_case_insensitive():
    assert info_for("order", "in_review").label == "In Review"
    assert is_final("pcr_plate", " plate_done ") is True
    assert is_final("pcr_plate", "GEL_CHECKED") is False


def test_is_final_unknown_status_raises():
    with pytest.raises(UnknownStatus):
        is_final("sample", "ON_HOLD")


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("sample", EntityType.SAMPLE),
        ("Test", EntityType.TEST),
        ("sequencing-run", EntityType.SEQUENCING_RUN),
        ("SequencingRun", EntityType.SEQUENCING_RUN),
        ("run", EntityType.SEQUENCING_RUN),
        ("pcr plate", EntityType.PCR_PLATE),
        ("plate", EntityType.PCR_PLATE),
        (EntityType.INVOICE, EntityType.INVOICE),
    ],
)
def test_normalize_kind(raw, expected):
    assert normalize_kind(raw) is expected


def test_unknown_kind_raises():
    with pytest.raises(UnknownEntityType):
        get_machine("experiment")


def test_active_and_final_lists_keep_chain_order():
    assert active_statuses("sequencing_run") == [
        "SETUP",
        "DNA_EXTRACTED",
        "PCR_IN_PROGRESS",
        "POOLED",
        "SUBMITTED",
    ]
    assert final_statuses("sequencing_run") == ["SEQUENCED"]
    assert final_statuses("order") == ["COMPLETED"]


# ===============================================================
# Per-machine extras
# ===============================================================

def test_requires_review_only_for_completed_tests():
    assert requires_review(TestStatus.COMPLETED) is True
    assert requires_review("completed") is True
    assert requires_review("IN_REVIEW") is False
    assert requires_review("NOPE") is False


def test_invoice_billing_flags():
    assert payable_statuses() == {InvoiceStatus.SENT, InvoiceStatus.VIEWED}
    assert editable_statuses() == {InvoiceStatus.DRAFT}
    data = info_for("invoice", "SENT").as_dict()
    assert data["allows_payment"] is True
    assert data["allows_editing"] is False


# ===============================================================
# Invariant checker catches broken definitions
# ===============================================================

def _machine(transitions, finals=("C",)):
    from enum import Enum

    class Toy(str, Enum):
        A = "A"
        B = "B"
        C = "C"

    definitions = {
        s: StatusDefinition(value=s, label=s.value, description=s.value, color="#000000", is_final=s.value in finals)
        for s in Toy
    }
    resolved = {Toy(k): [Toy(t) for t in v] for k, v in transitions.items()}
    return StatusMachine(
        entity_type=EntityType.SAMPLE,
        status_enum=Toy,
        definitions=definitions,
        transitions=resolved,
    )


def test_checker_accepts_linear_chain():
    assert _machine({"A": ["B"], "B": ["C"], "C": []}).check_invariants() == []


def test_checker_flags_missing_graph_entry():
    problems = _machine({"A": ["B"], "B": ["C"]}).check_invariants()
    assert any("C: missing transition entry" in p for p in problems)


def test_checker_flags_skip_edge():
    problems = _machine({"A": ["C"], "B": ["C"], "C": []}).check_invariants()
    assert any("expected next stage B" in p for p in problems)


def test_checker_flags_branching_and_final_edges():
    problems = _machine({"A": ["B", "C"], "B": ["C"], "C": ["A"]}).check_invariants()
    assert any("final status has outgoing transitions" in p for p in problems)
    assert any("expected exactly one next status" in p for p in problems)


def test_checker_flags_multiple_finals():
    problems = _machine({"A": ["B"], "B": [], "C": []}, finals=("B", "C")).check_invariants()
    assert any("exactly one final status" in p for p in problems)


def test_assert_valid_raises_with_problems():
    broken = _machine({"A": ["C"], "B": ["C"], "C": []})
    with pytest.raises(RegistryInvariantError) as exc:
        broken.assert_valid()
    assert exc.value.problems


# ===============================================================
# UI definition
# ===============================================================

def test_workflow_definition_single_kind():
    definition = workflow_definition("pcr_plate")
    assert definition["kind"] == "pcr_plate"
    assert [s["value"] for s in definition["statuses"]] == [
        "PLATE_SETUP",
        "PCR_COMPLETE",
        "GEL_CHECKED",
        "POOLING_ASSIGNED",
        "PLATE_DONE",
    ]
    assert definition["transitions"]["GEL_CHECKED"] == ["POOLING_ASSIGNED"]
    assert definition["transitions"]["PLATE_DONE"] == []
    assert definition["initial_status"] == "PLATE_SETUP"
    assert definition["final_status"] == "PLATE_DONE"


def test_workflow_definition_all_kinds():
    definition = workflow_definition()
    assert set(definition) == {
        "sample",
        "test",
        "order",
        "invoice",
        "sequencing_run",
        "pcr_plate",
    }
