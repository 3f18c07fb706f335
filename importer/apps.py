from django.apps.config import AppConfig


class ImporterAppConfig(AppConfig):
    name = "importer"
    verbose_name = "BGG importer"
