# labflow_core/tests/test_sla_compute.py
from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone as dt_timezone
from types import SimpleNamespace

import pytest

from labflow_core.workflows.sla import (
    SLALevel,
    SLAOrder,
    calculate_sla_status,
    coerce_datetime,
    level_for_percent,
    round2,
    sla_label,
    thresholds_crossed,
)


def _window_order(now, *, elapsed_seconds, window_seconds, status="IN_PROGRESS"):
    received = now - timedelta(seconds=elapsed_seconds)
    return SLAOrder(
        id="ord-window",
        status=status,
        received_date=received,
        due_date=received + timedelta(seconds=window_seconds),
    )


HUNDRED_HOURS = 100 * 3600


# ===============================================================
# Core computation
# ===============================================================

def test_eighty_percent_elapsed_is_at_risk(make_order, now):
    # received 8 days ago, due in 2 days: 192h of a 240h window
    order = make_order(received=-192, due=48)
    sla = calculate_sla_status(order, now=now)

    assert sla.level is SLALevel.AT_RISK
    assert sla.percent_elapsed == 80.0
    assert sla.hours_remaining == 48.0
    assert sla.is_completed is False
    assert sla.order_id == order.id
    assert sla.order_number == order.order_number


def test_missing_due_date_defaults_to_on_track(make_order, now):
    sla = calculate_sla_status(make_order(due=None), now=now)

    assert sla.level is SLALevel.ON_TRACK
    assert sla.percent_elapsed == 0
    assert sla.hours_remaining == math.inf
    assert sla.due_date is None


@pytest.mark.parametrize(
    "elapsed_seconds,expected_percent,expected_level",
    [
        (269964, 74.99, SLALevel.ON_TRACK),
        (75 * 3600, 75.0, SLALevel.AT_RISK),
        (359964, 99.99, SLALevel.AT_RISK),
        (100 * 3600, 100.0, SLALevel.BREACHED),
    ],
)
def test_level_boundaries(now, elapsed_seconds, expected_percent, expected_level):
    order = _window_order(now, elapsed_seconds=elapsed_seconds, window_seconds=HUNDRED_HOURS)
    sla = calculate_sla_status(order, now=now)

    assert sla.percent_elapsed == expected_percent
    assert sla.level is expected_level


def test_breached_order_has_negative_hours_remaining(make_order, now):
    sla = calculate_sla_status(make_order(received=-300, due=-60), now=now)

    assert sla.level is SLALevel.BREACHED
    assert sla.percent_elapsed == 125.0
    assert sla.hours_remaining == -60.0


def test_level_is_monotonic_in_elapsed_time(make_order, now):
    order = make_order(received=0, due=100)
    rank = {SLALevel.ON_TRACK: 0, SLALevel.AT_RISK: 1, SLALevel.BREACHED: 2}

    previous_percent = -1.0
    previous_rank = -1
    for hours in range(0, 160, 5):
        sla = calculate_sla_status(order, now=now + timedelta(hours=hours))
        assert sla.percent_elapsed >= previous_percent
        assert rank[sla.level] >= previous_rank
        previous_percent = sla.percent_elapsed
        previous_rank = rank[sla.level]


def test_missing_received_date_starts_window_now(make_order, now):
    sla = calculate_sla_status(make_order(received=None, due=48), now=now)

    assert sla.percent_elapsed == 0
    assert sla.hours_remaining == 48.0
    assert sla.level is SLALevel.ON_TRACK


def test_non_positive_window_reports_zero_percent(make_order, now):
    sla = calculate_sla_status(make_order(received=0, due=-10), now=now)

    assert sla.percent_elapsed == 0
    assert sla.level is SLALevel.ON_TRACK
    assert sla.hours_remaining == -10.0


def test_default_now_is_current_time():
    received = datetime.now(dt_timezone.utc) - timedelta(hours=1)
    order = SLAOrder(
        id=1,
        status="IN_PROGRESS",
        received_date=received,
        due_date=received + timedelta(days=365),
    )
    sla = calculate_sla_status(order)

    assert sla.level is SLALevel.ON_TRACK
    assert 0 < sla.percent_elapsed < 1


# ===============================================================
# Completed orders
# ===============================================================

@pytest.mark.parametrize("status", ["REPORTED", "COMPLETED", "completed"])
def test_completed_order_is_frozen_at_completion(make_order, now, status):
    order = make_order(status=status, received=-100, due=0, completed=-50)

    sla = calculate_sla_status(order, now=now)
    later = calculate_sla_status(order, now=now + timedelta(days=30))

    assert sla.is_completed is True
    assert sla.percent_elapsed == 50.0
    assert sla.hours_remaining == 50.0
    assert later == sla


def test_completed_without_completed_date_uses_now(make_order, now):
    sla = calculate_sla_status(make_order(status="REPORTED", received=-100, due=0), now=now)

    assert sla.is_completed is True
    assert sla.percent_elapsed == 100.0
    assert sla.level is SLALevel.BREACHED


def test_completed_date_is_ignored_for_active_orders(make_order, now):
    sla = calculate_sla_status(
        make_order(status="IN_REVIEW", received=-80, due=20, completed=-70),
        now=now,
    )

    assert sla.is_completed is False
    assert sla.percent_elapsed == 80.0


def test_approved_is_not_sla_complete(make_order, now):
    # Final for the order machine is COMPLETED; APPROVED is still measured live
    sla = calculate_sla_status(make_order(status="APPROVED"), now=now)
    assert sla.is_completed is False


# ===============================================================
# Input shapes
# ===============================================================

def test_mapping_with_camel_case_keys_and_iso_strings(now):
    sla = calculate_sla_status(
        {
            "id": 7,
            "orderNumber": "LF-00007",
            "status": "in_progress",
            "receivedDate": "2025-03-02T12:00:00Z",
            "dueDate": "2025-03-12T12:00:00+00:00",
            "turnaroundDays": "10",
        },
        now=now,
    )

    assert sla.order_id == 7
    assert sla.order_number == "LF-00007"
    assert sla.percent_elapsed == 80.0
    assert sla.turnaround_days == 10


def test_snake_case_mapping_and_date_only_strings(now):
    sla = calculate_sla_status(
        {
            "order_id": "abc",
            "status": "RECEIVED",
            "received_date": "2025-03-08",
            "due_date": "2025-03-12",
        },
        now=now,
    )

    # 60h of a 96h window
    assert sla.order_id == "abc"
    assert sla.percent_elapsed == 62.5
    assert sla.hours_remaining == 36.0


def test_naive_datetimes_are_treated_as_utc(now):
    order = SLAOrder(
        id=1,
        status="IN_PROGRESS",
        received_date=datetime(2025, 3, 2, 12, 0),
        due_date=datetime(2025, 3, 12, 12, 0),
    )
    sla = calculate_sla_status(order, now=now)

    assert sla.percent_elapsed == 80.0
    assert sla.received_date.tzinfo is not None


def test_attribute_objects_are_accepted(now):
    order = SimpleNamespace(
        id=3,
        order_number="LF-3",
        status="IN_PROGRESS",
        received_date=now - timedelta(hours=192),
        due_date=now + timedelta(hours=48),
        turnaround_days=10,
        completed_date=None,
    )
    sla = calculate_sla_status(order, now=now)

    assert sla.level is SLALevel.AT_RISK
    assert sla.order_number == "LF-3"


def test_unparseable_due_date_degrades_to_unmeasured(now):
    sla = calculate_sla_status(
        {"id": 1, "status": "IN_PROGRESS", "receivedDate": "2025-03-01", "dueDate": "next week"},
        now=now,
    )

    assert sla.level is SLALevel.ON_TRACK
    assert sla.hours_remaining == math.inf


def test_coerce_datetime():
    assert coerce_datetime(None) is None
    assert coerce_datetime("") is None
    assert coerce_datetime("garbage") is None
    assert coerce_datetime(42) is None
    assert coerce_datetime(date(2025, 1, 2)) == datetime(2025, 1, 2, tzinfo=dt_timezone.utc)
    assert coerce_datetime("2025-01-02T03:04:05Z") == datetime(2025, 1, 2, 3, 4, 5, tzinfo=dt_timezone.utc)


# ===============================================================
# Rounding and labels
# ===============================================================

def test_round2_rounds_half_up():
    assert round2(0.125) == 0.13
    assert round2(83.333333) == 83.33
    assert round2(66.666666) == 66.67
    assert round2(-0.125) == -0.12
    assert round2(math.inf) == math.inf


@pytest.mark.parametrize(
    "percent,expected",
    [
        (0, SLALevel.ON_TRACK),
        (74.99, SLALevel.ON_TRACK),
        (75, SLALevel.AT_RISK),
        (99.99, SLALevel.AT_RISK),
        (100, SLALevel.BREACHED),
        (250, SLALevel.BREACHED),
    ],
)
def test_level_for_percent(percent, expected):
    assert level_for_percent(percent) is expected


def test_thresholds_crossed():
    assert thresholds_crossed(0) == []
    assert thresholds_crossed(49.99) == []
    assert thresholds_crossed(80) == [50, 75]
    assert thresholds_crossed(90) == [50, 75, 90]
    assert thresholds_crossed(130) == [50, 75, 90, 100]


@pytest.mark.parametrize(
    "percent,label",
    [
        (10, "ON_TRACK"),
        (50, "WARNING"),
        (75, "AT_RISK"),
        (89.99, "AT_RISK"),
        (90, "CRITICAL"),
        (100, "BREACHED"),
    ],
)
def test_sla_label(percent, label):
    assert sla_label(percent) == label


def test_sla_level_renders_as_value():
    assert str(SLALevel.AT_RISK) == "AT_RISK"
    assert SLALevel.BREACHED == "BREACHED"
