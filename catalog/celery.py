import importlib
import os
import pkgutil

import sentry_sdk
from celery import Celery
from sentry_sdk.integrations.celery import CeleryIntegration

from catalog.version import get_version

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "catalog.settings_dev")

SENTRY_BACKEND_DSN = os.environ.get("SENTRY_BACKEND_DSN", None)

if SENTRY_BACKEND_DSN:
    sentry_sdk.init(
        SENTRY_BACKEND_DSN,
        environment=os.environ.get("CATALOG_ENVIRONMENT", None),
        release=get_version(),
        integrations=[CeleryIntegration()],
    )

app = Celery("catalog")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
# - namespace='CELERY' means all celery-related configuration keys
#   should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django app configs.
app.autodiscover_tasks()


def import_all_submodules(package_name: str):
    """
    Import a package and recursively import all of its submodules.
    """
    pkg = importlib.import_module(package_name)
    if not hasattr(pkg, "__path__"):
        return
    for mod in pkgutil.walk_packages(pkg.__path__, pkg.__name__ + "."):
        importlib.import_module(mod.name)


# Celery autodiscovery only finds tasks.py or tasks/__init__.py, so the
# task modules inside importer.tasks are loaded once Django is ready.
@app.on_after_finalize.connect
def _load_all_task_modules(sender, **kwargs):
    import_all_submodules("importer.tasks")
