# labflow_core/apps.py

from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class LabflowCoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "labflow_core"
    verbose_name = "LabFlow workflow engine"

    def ready(self):
        # Register Django system checks only
        from .checks import workflow_registry  # noqa

        logger.debug("Workflow registry checks registered")
