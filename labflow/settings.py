"""
Django settings for the labflow project.
Hosts the workflow status engine and SLA calculator (labflow_core).
There is no HTTP surface; the project exists for configuration,
system checks and management commands.
"""

from pathlib import Path
from decouple import config, Csv
import os


# ===============================================================
# Base paths
# ===============================================================
BASE_DIR = Path(__file__).resolve().parent.parent


# ===============================================================
# Security
# ===============================================================
SECRET_KEY = config("SECRET_KEY", default="insecure-key-change-me")
DEBUG = config("DEBUG", default=False, cast=bool)
ALLOWED_HOSTS = config("ALLOWED_HOSTS", default="localhost,127.0.0.1", cast=Csv())


# ===============================================================
# Installed apps
# ===============================================================
INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "rest_framework",
    "labflow_core.apps.LabflowCoreConfig",
]


# ===============================================================
# Database
# ===============================================================
# The engine never touches the database. A local sqlite file keeps
# Django's management machinery happy.
DJANGO_ENV = os.environ.get("DJANGO_ENV", "").lower()

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:" if DJANGO_ENV in {"ci", "test"} else BASE_DIR / "db.sqlite3",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


# ===============================================================
# Internationalization
# ===============================================================
LANGUAGE_CODE = "en-us"
TIME_ZONE = config("TIME_ZONE", default="UTC")
USE_I18N = True
USE_TZ = True


# ===============================================================
# Django REST Framework
# ===============================================================
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": (
        "rest_framework.renderers.JSONRenderer",
    ),
    "UNAUTHENTICATED_USER": None,
}


# ===============================================================
# Logging
# ===============================================================
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "labflow_core": {
            "handlers": ["console"],
            "level": config("LABFLOW_LOG_LEVEL", default="INFO"),
            "propagate": True,
        },
    },
}


# ===============================================================
# Workflow engine
# ===============================================================
# Only operational knobs live here. SLA thresholds, the SLA
# "completed" status set and the transition graphs are fixed.
LABFLOW_WORKFLOWS = {
    "SLA_MONITORED_STATUSES": config(
        "LABFLOW_SLA_MONITORED_STATUSES",
        default="SUBMITTED,RECEIVED,IN_PROGRESS,TESTING_COMPLETE,IN_REVIEW,APPROVED,ON_HOLD",
        cast=Csv(),
    ),
    "USE_BUSINESS_DAYS": config("LABFLOW_USE_BUSINESS_DAYS", default=True, cast=bool),
}
