# labflow_core/conf.py
from __future__ import annotations

from typing import Any, Dict

from django.conf import settings


DEFAULTS: Dict[str, Any] = {
    "SLA_MONITORED_STATUSES": [
        "SUBMITTED",
        "RECEIVED",
        "IN_PROGRESS",
        "TESTING_COMPLETE",
        "IN_REVIEW",
        "APPROVED",
        "ON_HOLD",
    ],
    "USE_BUSINESS_DAYS": True,
}


def workflow_setting(name: str) -> Any:
    """
    Resolve a LABFLOW_WORKFLOWS setting, falling back to DEFAULTS.

    Unknown names raise KeyError so typos surface immediately.
    """
    if name not in DEFAULTS:
        raise KeyError(f"Unknown workflow setting: {name}")

    overrides = getattr(settings, "LABFLOW_WORKFLOWS", None) or {}
    return overrides.get(name, DEFAULTS[name])
