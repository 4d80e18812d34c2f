# labflow_core/workflows/sla_metrics.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional

from django.utils import timezone

from labflow_core.conf import workflow_setting
from labflow_core.workflows.sla import (
    SLA_BREACHED_THRESHOLD,
    OrderLike,
    SLALevel,
    SLAStatus,
    as_sla_order,
    calculate_sla_status,
    coerce_datetime,
    round2,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive reporting window on an order's received_date.
    """

    start: datetime
    end: datetime

    def __post_init__(self):
        object.__setattr__(self, "start", coerce_datetime(self.start))
        object.__setattr__(self, "end", coerce_datetime(self.end))
        if self.start is None or self.end is None:
            raise ValueError("DateRange requires both start and end")
        if self.start > self.end:
            raise ValueError(f"DateRange start {self.start} is after end {self.end}")

    def contains(self, value: Optional[datetime]) -> bool:
        value = coerce_datetime(value)
        if value is None:
            return False
        return self.start <= value <= self.end


@dataclass(frozen=True)
class SLAMetrics:
    total_orders: int
    completed_orders: int
    on_track_orders: int
    at_risk_orders: int
    breached_orders: int
    on_time_completion_rate: float
    average_completion_hours: float
    date_range: Optional[DateRange] = None


def calculate_sla_metrics(
    orders: Iterable[OrderLike],
    date_range: Optional[DateRange] = None,
    now: Optional[datetime] = None,
) -> SLAMetrics:
    """
    Portfolio SLA performance for a batch of orders.

    With `date_range`, orders whose received_date is missing or falls
    outside it are left out. Every remaining order is counted, even
    when its timestamps are incomplete.
    """
    now = coerce_datetime(now) or timezone.now()

    total_orders = 0
    completed_orders = 0
    on_track_orders = 0
    at_risk_orders = 0
    breached_orders = 0
    on_time_completions = 0
    total_completion_hours = 0.0

    for raw in orders:
        order = as_sla_order(raw)
        if date_range is not None and not date_range.contains(order.received_date):
            continue

        total_orders += 1
        sla = calculate_sla_status(order, now=now)

        if sla.level is SLALevel.ON_TRACK:
            on_track_orders += 1
        elif sla.level is SLALevel.AT_RISK:
            at_risk_orders += 1
        else:
            breached_orders += 1

        if not sla.is_completed:
            continue

        completed_orders += 1

        if order.received_date and order.completed_date:
            delta = order.completed_date - order.received_date
            total_completion_hours += delta.total_seconds() / 3600

        # On time means completed without breaching
        if sla.percent_elapsed < SLA_BREACHED_THRESHOLD:
            on_time_completions += 1

    if completed_orders > 0:
        on_time_completion_rate = round2(on_time_completions / completed_orders * 100)
        average_completion_hours = round2(total_completion_hours / completed_orders)
    else:
        on_time_completion_rate = 0
        average_completion_hours = 0

    logger.info(
        "SLA metrics: %s orders (%s completed, %s on track, %s at risk, %s breached)",
        total_orders, completed_orders, on_track_orders, at_risk_orders, breached_orders,
    )

    return SLAMetrics(
        total_orders=total_orders,
        completed_orders=completed_orders,
        on_track_orders=on_track_orders,
        at_risk_orders=at_risk_orders,
        breached_orders=breached_orders,
        on_time_completion_rate=on_time_completion_rate,
        average_completion_hours=average_completion_hours,
        date_range=date_range,
    )


def check_all_slas(
    orders: Iterable[OrderLike],
    now: Optional[datetime] = None,
    statuses: Optional[Iterable[str]] = None,
) -> List[SLAStatus]:
    """
    SLA status for every order still under monitoring, soonest due first.

    `statuses` defaults to LABFLOW_WORKFLOWS["SLA_MONITORED_STATUSES"].
    Orders without a due date sort last.
    """
    now = coerce_datetime(now) or timezone.now()
    monitored = {
        str(s).strip().upper()
        for s in (statuses if statuses is not None else workflow_setting("SLA_MONITORED_STATUSES"))
    }

    active = [
        order
        for order in (as_sla_order(o) for o in orders)
        if order.status.strip().upper() in monitored
    ]
    active.sort(key=lambda o: (o.due_date is None, o.due_date or now))

    results = [calculate_sla_status(order, now=now) for order in active]

    breached = sum(1 for r in results if r.level is SLALevel.BREACHED)
    if breached:
        logger.info("SLA scan: %s of %s active orders breached", breached, len(results))

    return results


__all__ = [
    "DateRange",
    "SLAMetrics",
    "calculate_sla_metrics",
    "check_all_slas",
]
