from catalog.celery import app as celery_app
from catalog.version import VERSION, get_version

__all__ = ["celery_app", "VERSION", "get_version"]
