import pytest


@pytest.fixture(autouse=True)
def _isolate_workflow_settings(settings):
    # Environment overrides (.env, LABFLOW_* variables) must not leak into tests
    settings.LABFLOW_WORKFLOWS = {
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

    # Day-level helpers depend on the active time zone
    settings.TIME_ZONE = "UTC"
