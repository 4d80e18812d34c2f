# labflow_core/tests/conftest.py

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Any, Callable, Dict, Optional

import pytest

from labflow_core.workflows import MACHINES
from labflow_core.workflows.sla import SLAOrder


_ids = itertools.count(1)


@pytest.fixture
def now() -> datetime:
    """
    Fixed evaluation instant so SLA arithmetic is reproducible.
    """
    return datetime(2025, 3, 10, 12, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def make_order(now) -> Callable[..., SLAOrder]:
    """
    Build an SLAOrder relative to `now`.

    received/due/completed are offsets in hours from `now`
    (negative = in the past); pass None to leave a timestamp unset.
    """

    def _make(
        *,
        status: str = "IN_PROGRESS",
        received: Optional[float] = -24,
        due: Optional[float] = 96,
        completed: Optional[float] = None,
        **extra: Any,
    ) -> SLAOrder:
        n = next(_ids)

        def at(offset):
            return None if offset is None else now + timedelta(hours=offset)

        fields: Dict[str, Any] = {
            "id": f"ord-{n}",
            "order_number": f"LF-{n:05d}",
            "status": status,
            "received_date": at(received),
            "due_date": at(due),
            "completed_date": at(completed),
        }
        fields.update(extra)
        return SLAOrder(**fields)

    return _make


@pytest.fixture(params=sorted(MACHINES, key=lambda e: e.value), ids=lambda e: e.value.lower())
def machine(request):
    return MACHINES[request.param]
