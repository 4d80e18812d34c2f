# labflow_core/workflows/due_dates.py
"""
Due-date and urgency helpers for orders.

Business-day arithmetic skips Saturdays and Sundays only; holidays
are not modelled. Day-level comparisons work on calendar dates in
the active Django time zone.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, Optional, Union

from django.utils import timezone

from labflow_core.conf import workflow_setting


class Priority(str, Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    RUSH = "RUSH"
    EMERGENCY = "EMERGENCY"

    def __str__(self) -> str:
        return self.value


DEFAULT_TURNAROUND_DAYS: Dict[Priority, int] = {
    Priority.LOW: 10,
    Priority.NORMAL: 5,
    Priority.HIGH: 3,
    Priority.RUSH: 1,
    Priority.EMERGENCY: 0,
}

SATURDAY = 5
SUNDAY = 6

DateLike = Union[date, datetime]


def _is_weekend(value: DateLike) -> bool:
    return value.weekday() in (SATURDAY, SUNDAY)


def _local_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    return value


def add_business_days(start: DateLike, business_days: int) -> DateLike:
    """
    Move forward `business_days` weekdays from `start`.
    Zero returns `start` unchanged, even on a weekend. Aware datetimes
    are stepped in the active time zone.
    """
    if business_days <= 0:
        return start

    result = start
    if isinstance(result, datetime) and timezone.is_aware(result):
        result = timezone.localtime(result)
    added = 0
    while added < business_days:
        result = result + timedelta(days=1)
        if not _is_weekend(result):
            added += 1
    return result


def add_calendar_days(start: DateLike, days: int) -> DateLike:
    return start + timedelta(days=days)


def calculate_order_due_date(
    received: DateLike,
    priority: Union[Priority, str],
    turnaround_days: Optional[int] = None,
    use_business_days: Optional[bool] = None,
) -> DateLike:
    """
    Due date from the received date and priority.

    `turnaround_days` overrides the priority default. Business days are
    used unless `use_business_days` (or the USE_BUSINESS_DAYS setting)
    says otherwise.
    """
    days = turnaround_days
    if days is None:
        days = DEFAULT_TURNAROUND_DAYS[Priority(str(priority).strip().upper())]

    if use_business_days is None:
        use_business_days = bool(workflow_setting("USE_BUSINESS_DAYS"))

    if use_business_days:
        return add_business_days(received, days)
    return add_calendar_days(received, days)


def business_days_between(start: DateLike, end: DateLike) -> int:
    """
    Weekdays in (start, end], counted on calendar dates. Zero when end <= start.
    """
    current = _local_date(start)
    last = _local_date(end)
    if last <= current:
        return 0

    count = 0
    while current < last:
        current += timedelta(days=1)
        if not _is_weekend(current):
            count += 1
    return count


def days_remaining(due: DateLike, today: Optional[DateLike] = None) -> int:
    """
    Whole calendar days until `due`; negative once overdue.
    """
    today = _local_date(today if today is not None else timezone.now())
    return (_local_date(due) - today).days


def days_past_due(due: DateLike, today: Optional[DateLike] = None) -> int:
    return max(0, -days_remaining(due, today))


def urgency_level(due: DateLike, today: Optional[DateLike] = None) -> str:
    """
    overdue (past due), critical (due today), warning (within 2 days)
    or normal.
    """
    remaining = days_remaining(due, today)
    if remaining < 0:
        return "overdue"
    if remaining == 0:
        return "critical"
    if remaining <= 2:
        return "warning"
    return "normal"


URGENCY_COLORS: Dict[str, str] = {
    "overdue": "#DC2626",
    "critical": "#EF4444",
    "warning": "#F59E0B",
    "normal": "#10B981",
}


__all__ = [
    "Priority",
    "DEFAULT_TURNAROUND_DAYS",
    "URGENCY_COLORS",
    "add_business_days",
    "add_calendar_days",
    "calculate_order_due_date",
    "business_days_between",
    "days_remaining",
    "days_past_due",
    "urgency_level",
]
