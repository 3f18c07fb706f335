from .settings_template import *  # NOQA ignore=F405
from .settings_template import LOGGING

LOGGING["handlers"]["stream"]["level"] = "DEBUG"
LOGGING["loggers"] = {
    "django": {"handlers": ["stream"], "level": "DEBUG"},
    "celery": {"handlers": ["stream"], "level": "DEBUG"},
    "catalog": {"handlers": ["stream"], "level": "DEBUG"},
    "importer": {"handlers": ["stream"], "level": "DEBUG"},
    "django.utils.autoreload": {"level": "INFO"},
    "django.template": {"level": "INFO"},
    "structlog": {
        "handlers": ["structlog_console"],
        "level": "DEBUG",
        "propagate": False,
    },
    "django_structlog": {
        "handlers": ["structlog_console"],
        "level": "INFO",
        "propagate": False,
    },
}

DEBUG = True

ALLOWED_HOSTS = ["127.0.0.1", "0.0.0.0", "*"]  # nosec
