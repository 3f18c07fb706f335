from django.apps.config import AppConfig


class CatalogAppConfig(AppConfig):
    name = "catalog"
    verbose_name = "Board game catalog"
