from .settings_template import *  # NOQA ignore=F405
from .settings_template import LOGGING

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

ALLOWED_HOSTS = ["127.0.0.1", "0.0.0.0", "testserver"]  # nosec

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"
CELERY_TASK_ALWAYS_EAGER = False

BGG_API = {
    "BASE_URL": "https://bgg.example.com/xmlapi2/",
    "TIMEOUT": 10,
    "OPEN_TIMEOUT": 5,
    "TOKEN": "",
}

for logger_config in LOGGING["loggers"].values():
    logger_config["handlers"] = ["null"]
