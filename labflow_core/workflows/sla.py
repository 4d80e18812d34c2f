# labflow_core/workflows/sla.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone as dt_timezone
from enum import Enum
from typing import Any, FrozenSet, List, Mapping, Optional, Tuple, Union

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

"""
Turnaround-time (SLA) health for a single order.

The SLA window runs from received_date to due_date. Health is the
percent of that window used:
- ON_TRACK : below 75%
- AT_RISK  : 75% up to (not including) 100%
- BREACHED : 100% or more

An order without a due date cannot be measured and defaults to
ON_TRACK with infinite hours remaining.
"""

logger = logging.getLogger(__name__)


# ===============================================================
# Contract constants
# ===============================================================

SLA_AT_RISK_THRESHOLD = 75
SLA_BREACHED_THRESHOLD = 100

# "Done" for SLA purposes only; narrower than the order machine's final flag.
SLA_COMPLETED_STATUSES: FrozenSet[str] = frozenset({"REPORTED", "COMPLETED"})

# Alerting thresholds (percent elapsed) used by SLA monitors.
SLA_NOTIFICATION_THRESHOLDS: Tuple[int, ...] = (50, 75, 90, 100)

HOUR_SECONDS = 60 * 60


class SLALevel(str, Enum):
    ON_TRACK = "ON_TRACK"
    AT_RISK = "AT_RISK"
    BREACHED = "BREACHED"

    def __str__(self) -> str:
        return self.value


# ===============================================================
# Helpers
# ===============================================================

def round2(value: float) -> float:
    """
    Round half-up to two decimals (as JavaScript's Math.round does),
    not Python's banker's rounding.
    """
    if math.isinf(value) or math.isnan(value):
        return value
    return math.floor(value * 100 + 0.5) / 100


def coerce_datetime(value: Any) -> Optional[datetime]:
    """
    Best-effort conversion to an aware datetime.

    Accepts datetimes, dates (midnight UTC) and ISO-8601 strings.
    Naive values are taken as UTC. Anything unparseable becomes None.
    """
    if value is None or value == "":
        return None

    if isinstance(value, str):
        raw = value.strip()
        parsed = parse_datetime(raw)
        if parsed is None:
            parsed_date = parse_date(raw)
            if parsed_date is None:
                logger.debug("Ignoring unparseable timestamp %r", value)
                return None
            value = parsed_date
        else:
            value = parsed

    if isinstance(value, datetime):
        if timezone.is_naive(value):
            return timezone.make_aware(value, dt_timezone.utc)
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=dt_timezone.utc)

    logger.debug("Ignoring non-temporal timestamp %r", value)
    return None


def _hours(delta) -> float:
    return delta.total_seconds() / HOUR_SECONDS


def level_for_percent(percent_elapsed: float) -> SLALevel:
    if percent_elapsed >= SLA_BREACHED_THRESHOLD:
        return SLALevel.BREACHED
    if percent_elapsed >= SLA_AT_RISK_THRESHOLD:
        return SLALevel.AT_RISK
    return SLALevel.ON_TRACK


def _status_text(status: Any) -> str:
    return str(getattr(status, "value", status) or "").strip().upper()


def is_sla_completed(status: Any) -> bool:
    return _status_text(status) in SLA_COMPLETED_STATUSES


# ===============================================================
# Records
# ===============================================================

@dataclass(frozen=True)
class SLAOrder:
    """
    The order fields SLA needs. Built by the persistence layer.
    """

    id: Any
    status: str
    order_number: Optional[str] = None
    received_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    turnaround_days: Optional[int] = None
    completed_date: Optional[datetime] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SLAOrder":
        """
        Build from a dict with snake_case or camelCase keys.
        Timestamps may be datetimes or ISO-8601 strings.
        """
        def pick(*keys):
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return None

        turnaround = pick("turnaround_days", "turnaroundDays")
        try:
            turnaround = int(turnaround) if turnaround is not None else None
        except (TypeError, ValueError):
            turnaround = None

        return cls(
            id=pick("id", "order_id", "orderId"),
            order_number=pick("order_number", "orderNumber"),
            status=_status_text(pick("status")),
            received_date=coerce_datetime(pick("received_date", "receivedDate")),
            due_date=coerce_datetime(pick("due_date", "dueDate")),
            turnaround_days=turnaround,
            completed_date=coerce_datetime(pick("completed_date", "completedDate")),
        )


OrderLike = Union[SLAOrder, Mapping[str, Any]]


def as_sla_order(order: OrderLike) -> SLAOrder:
    """
    Normalize any order shape to an SLAOrder with aware timestamps.
    """
    if isinstance(order, SLAOrder):
        return replace(
            order,
            received_date=coerce_datetime(order.received_date),
            due_date=coerce_datetime(order.due_date),
            completed_date=coerce_datetime(order.completed_date),
        )
    if isinstance(order, Mapping):
        return SLAOrder.from_mapping(order)
    # Attribute-style objects (model instances, namedtuples)
    return SLAOrder(
        id=getattr(order, "id", None),
        order_number=getattr(order, "order_number", None),
        status=_status_text(getattr(order, "status", None)),
        received_date=coerce_datetime(getattr(order, "received_date", None)),
        due_date=coerce_datetime(getattr(order, "due_date", None)),
        turnaround_days=getattr(order, "turnaround_days", None),
        completed_date=coerce_datetime(getattr(order, "completed_date", None)),
    )


@dataclass(frozen=True)
class SLAStatus:
    order_id: Any
    level: SLALevel
    percent_elapsed: float
    hours_remaining: float
    is_completed: bool
    order_number: Optional[str] = None
    received_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    turnaround_days: Optional[int] = None


# ===============================================================
# PUBLIC API
# ===============================================================

def calculate_sla_status(order: OrderLike, now: Optional[datetime] = None) -> SLAStatus:
    """
    Compute SLA health for one order at `now` (default: current time).

    Completed orders (REPORTED / COMPLETED) are measured at their
    completed_date, or at `now` when that is missing. Never raises for
    missing timestamps.
    """
    order = as_sla_order(order)
    now = coerce_datetime(now) or timezone.now()

    is_completed = is_sla_completed(order.status)
    received = order.received_date
    due = order.due_date
    completed = order.completed_date

    if due is None:
        return SLAStatus(
            order_id=order.id,
            order_number=order.order_number,
            level=SLALevel.ON_TRACK,
            percent_elapsed=0,
            hours_remaining=math.inf,
            is_completed=is_completed,
            received_date=received,
            due_date=None,
            turnaround_days=order.turnaround_days,
        )

    start = received or now
    total_window_hours = _hours(due - start)

    reference = (completed or now) if is_completed else now
    elapsed_hours = _hours(reference - start)

    if total_window_hours > 0:
        percent_elapsed = round2(elapsed_hours / total_window_hours * 100)
    else:
        percent_elapsed = 0

    hours_remaining = round2(_hours(due - reference))

    return SLAStatus(
        order_id=order.id,
        order_number=order.order_number,
        level=level_for_percent(percent_elapsed),
        percent_elapsed=percent_elapsed,
        hours_remaining=hours_remaining,
        is_completed=is_completed,
        received_date=received,
        due_date=due,
        turnaround_days=order.turnaround_days,
    )


def thresholds_crossed(percent_elapsed: float) -> List[int]:
    """
    Notification thresholds at or below `percent_elapsed`, ascending.
    """
    return [t for t in SLA_NOTIFICATION_THRESHOLDS if percent_elapsed >= t]


def sla_label(percent_elapsed: float) -> str:
    """
    Finer-grained label used in SLA alert messages.
    """
    if percent_elapsed >= 100:
        return "BREACHED"
    if percent_elapsed >= 90:
        return "CRITICAL"
    if percent_elapsed >= 75:
        return "AT_RISK"
    if percent_elapsed >= 50:
        return "WARNING"
    return "ON_TRACK"


__all__ = [
    "SLA_AT_RISK_THRESHOLD",
    "SLA_BREACHED_THRESHOLD",
    "SLA_COMPLETED_STATUSES",
    "SLA_NOTIFICATION_THRESHOLDS",
    "SLALevel",
    "SLAOrder",
    "SLAStatus",
    "round2",
    "coerce_datetime",
    "as_sla_order",
    "level_for_percent",
    "is_sla_completed",
    "calculate_sla_status",
    "thresholds_crossed",
    "sla_label",
]
